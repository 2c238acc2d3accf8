import json
import sqlite3
import threading
from pathlib import Path
from typing import Any, Mapping

import services.util as u
import services.logger as log
from services.config_schema import DriverDescriptor
from drivers.registry import to_descriptor

l = log.get_logger()

_COLUMNS = ("name", "category", "title", "class", "description", "version", "extension_name", "config", "status")


class SqliteDriverRegistry:
    """Driver registry persisted in a sqlite database (one row per driver)."""

    def __init__(self, db_path: str | Path | None = None):
        self._local = threading.local()
        self._db_path = Path(db_path) if db_path else Path(u.get_data_path()) / "drivers.db"
        self._init_db()

    def _get_conn(self):
        if not hasattr(self._local, "conn"):
            self._local.conn = sqlite3.connect(self._db_path)
            self._local.conn.row_factory = sqlite3.Row
        return self._local.conn

    def _init_db(self):
        """Create the drivers table."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = self._get_conn()
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS drivers (
                name TEXT PRIMARY KEY,
                category TEXT,
                title TEXT,
                class TEXT,
                description TEXT,
                version TEXT,
                extension_name TEXT,
                config TEXT NOT NULL DEFAULT '{}',
                status INTEGER NOT NULL DEFAULT 1
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_category ON drivers (category)")
        conn.commit()

    def close(self):
        if hasattr(self._local, "conn"):
            self._local.conn.close()
            del self._local.conn

    @staticmethod
    def _row_to_descriptor(row: sqlite3.Row) -> DriverDescriptor:
        data = dict(row)
        data["config"] = json.loads(data["config"] or "{}")
        return DriverDescriptor.model_validate(data)

    def _execute(self, sql: str, params: tuple, action: str) -> bool:
        """Run a write statement; True if it touched at least one row."""
        conn = self._get_conn()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            return cursor.rowcount > 0
        except sqlite3.Error as e:
            conn.rollback()
            l.error(f"Failed to {action}: {e}")
            return False

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_driver(self, name: str) -> DriverDescriptor | None:
        row = self._get_conn().execute("SELECT * FROM drivers WHERE name = ?", (name,)).fetchone()
        return self._row_to_descriptor(row) if row else None

    def has_driver(self, name: str) -> bool:
        row = self._get_conn().execute("SELECT 1 FROM drivers WHERE name = ?", (name,)).fetchone()
        return row is not None

    def get_driver_config(self, name: str) -> dict[str, Any]:
        row = self._get_conn().execute("SELECT config FROM drivers WHERE name = ?", (name,)).fetchone()
        return json.loads(row["config"] or "{}") if row else {}

    def get_drivers_list(self, category: str | None = None, status: int | None = None) -> list[DriverDescriptor]:
        sql = "SELECT * FROM drivers"
        where, params = [], []
        if category is not None:
            where.append("category = ?")
            params.append(category)
        if status is not None:
            where.append("status = ?")
            params.append(status)
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY name"
        rows = self._get_conn().execute(sql, params).fetchall()
        return [self._row_to_descriptor(row) for row in rows]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def add_driver(self, name: str, descriptor) -> bool:
        """Insert *descriptor*, or update every field but ``status`` if *name* exists."""
        record = to_descriptor(name, descriptor)
        values = record.model_dump(by_alias=True)
        values["config"] = json.dumps(values["config"], ensure_ascii=False)
        return self._execute(f"""
            INSERT INTO drivers ({", ".join(_COLUMNS)})
            VALUES ({", ".join("?" for _ in _COLUMNS)})
            ON CONFLICT(name) DO UPDATE SET
                category = excluded.category,
                title = excluded.title,
                class = excluded.class,
                description = excluded.description,
                version = excluded.version,
                extension_name = excluded.extension_name,
                config = excluded.config
        """, tuple(values[c] for c in _COLUMNS), f"add driver '{name}'")

    def remove_driver(self, name: str) -> bool:
        return self._execute("DELETE FROM drivers WHERE name = ?", (name,), f"remove driver '{name}'")

    def save_config(self, name: str, config: Mapping[str, Any]) -> bool:
        return self._execute(
            "UPDATE drivers SET config = ? WHERE name = ?",
            (json.dumps(dict(config), ensure_ascii=False), name),
            f"save config of '{name}'",
        )

    def set_driver_status(self, name: str, status: int) -> bool:
        return self._execute(
            "UPDATE drivers SET status = ? WHERE name = ?",
            (1 if status else 0, name),
            f"set status of '{name}'",
        )
