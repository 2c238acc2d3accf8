"""
Typed config container handed to drivers.

A :class:`Properties` is an ordered set of named :class:`Property` entries.
Drivers declare the keys they understand (with defaults and types) from
their ``create_driver_config`` hook; the manager fills a container from a
plain stored mapping with :meth:`Properties.from_dict`.  Both directions
collapse to the same plain ``{name: value}`` snapshot, which is the only
form ever persisted.
"""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from pydantic import BaseModel, TypeAdapter, ValidationError

from services.config_schema import CoercedBool
from services.error import ConfigValueError, raise_and_log

# Declared type name → validator.  "any" accepts values untouched.
_TYPES: dict[str, TypeAdapter | None] = {
    "any":   None,
    "str":   TypeAdapter(str),
    "int":   TypeAdapter(int),
    "float": TypeAdapter(float),
    "bool":  TypeAdapter(CoercedBool),
    "list":  TypeAdapter(list),
    "dict":  TypeAdapter(dict),
}

# Property names treated as credentials even when not declared secret.
# Matched as substrings against lower-cased names.
_SENSITIVE_KEY_PATTERNS = ("token", "secret", "password", "api_key")


class Property(BaseModel):
    name:        str
    value:       Any        = None
    default:     Any        = None
    type:        str        = "any"
    title:       str | None = None
    description: str | None = None
    required:    bool       = False
    secret:      bool       = False

    def current(self) -> Any:
        return self.default if self.value is None else self.value

    def is_sensitive(self) -> bool:
        return self.secret or any(p in self.name.lower() for p in _SENSITIVE_KEY_PATTERNS)


def _coerce(prop_name: str, type_name: str, value: Any) -> Any:
    if value is None:
        return None
    adapter = _TYPES[type_name]
    if adapter is None:
        return value
    try:
        return adapter.validate_python(value)
    except ValidationError as e:
        raise_and_log(
            f"Invalid value for '{prop_name}' (expected {type_name}): {e.errors()[0]['msg']}",
            ConfigValueError,
        )


class Properties:
    """Ordered, typed key → value container."""

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._items: dict[str, Property] = {}
        for name, value in (values or {}).items():
            self._items[name] = Property(name=name, value=value)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any] | None) -> Properties:
        return cls(values)

    # ------------------------------------------------------------------
    # Declaration
    # ------------------------------------------------------------------

    def property(
        self,
        name: str,
        default: Any = None,
        type: str = "any",
        title: str | None = None,
        description: str | None = None,
        required: bool = False,
        secret: bool = False,
    ) -> Property:
        """Declare *name*.  An already held value is kept and re-coerced."""
        if type not in _TYPES:
            raise_and_log(f"Unknown property type '{type}' for '{name}'", ConfigValueError)

        existing = self._items.get(name)
        prop = Property(
            name=name,
            default=_coerce(name, type, default),
            type=type,
            title=title,
            description=description,
            required=required,
            secret=secret,
        )
        if existing is not None:
            prop.value = _coerce(name, type, existing.value)
        self._items[name] = prop
        return prop

    # ------------------------------------------------------------------
    # Values
    # ------------------------------------------------------------------

    def get(self, name: str, default: Any = None) -> Any:
        prop = self._items.get(name)
        if prop is None:
            return default
        value = prop.current()
        return default if value is None else value

    def set(self, name: str, value: Any) -> None:
        prop = self._items.get(name)
        if prop is None:
            self._items[name] = Property(name=name, value=value)
            return
        prop.value = _coerce(name, prop.type, value)

    def get_values(self) -> dict[str, Any]:
        return {name: prop.current() for name, prop in self._items.items()}

    def to_dict(self) -> dict[str, Any]:
        """Plain snapshot used for persistence."""
        return self.get_values()

    def definitions(self) -> dict[str, dict[str, Any]]:
        return {name: prop.model_dump() for name, prop in self._items.items()}

    def missing_required(self) -> list[str]:
        return [
            name for name, prop in self._items.items()
            if prop.required and prop.current() in (None, "")
        ]

    def secrets(self) -> set[str]:
        found: set[str] = set()
        for prop in self._items.values():
            value = prop.current()
            if isinstance(value, str) and value and prop.is_sensitive():
                found.add(value)
        return found

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Properties({self.get_values()!r})"
