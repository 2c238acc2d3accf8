"""In-process cache driver with per-entry expiry."""

import time
from collections import OrderedDict
from typing import Any

from drivers import Driver


class MemoryCache:
    """Bounded TTL cache.  The oldest entry is evicted once ``max_items`` is reached."""

    def __init__(self, config: dict, clock=time.monotonic):
        self._clock = clock
        self.ttl = int(config.get("ttl", 300))
        # At least one slot, otherwise set() has nothing to evict
        self.max_items = max(1, int(config.get("max_items", 1024)))
        self._entries: OrderedDict[str, tuple[float | None, Any]] = OrderedDict()

    def _expires_at(self, ttl: int | None) -> float | None:
        ttl = self.ttl if ttl is None else ttl
        return self._clock() + ttl if ttl > 0 else None  # 0 = never expires

    def get(self, key: str, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        expires_at, value = entry
        if expires_at is not None and expires_at <= self._clock():
            del self._entries[key]
            return default
        return value

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_items:
            self._entries.popitem(last=False)
        self._entries[key] = (self._expires_at(ttl), value)

    def has(self, key: str) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


class MemoryCacheDriver(Driver):
    driver_name = "memory"
    driver_category = "cache"
    driver_title = "Memory cache"
    driver_description = "Process-local cache, lost on restart"
    driver_class = "drivers.memory_cache:MemoryCache"

    def create_driver_config(self, properties):
        properties.property("ttl", default=300, type="int", title="Default TTL (seconds, 0 = no expiry)")
        properties.property("max_items", default=1024, type="int", title="Maximum entries")
