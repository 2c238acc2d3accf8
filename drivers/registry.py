"""
Driver registry.

The manager never persists anything itself; it talks to a store that
satisfies :class:`DriverRegistry`.  Two stores ship with the project: the
in-process :class:`MemoryDriverRegistry` below and the sqlite-backed
``services.db.SqliteDriverRegistry``.  Any object with the same methods
works, nothing needs to subclass the protocol.
"""

from __future__ import annotations

import copy
from typing import Any, Mapping, Protocol

from services.config_schema import DriverDescriptor


class DriverRegistry(Protocol):
    def get_driver(self, name: str) -> DriverDescriptor | None: ...
    def add_driver(self, name: str, descriptor: DriverDescriptor | Mapping[str, Any]) -> bool: ...  # upsert
    def remove_driver(self, name: str) -> bool: ...
    def has_driver(self, name: str) -> bool: ...
    def get_driver_config(self, name: str) -> dict[str, Any]: ...
    def save_config(self, name: str, config: Mapping[str, Any]) -> bool: ...
    def get_drivers_list(self, category: str | None = None, status: int | None = None) -> list[DriverDescriptor]: ...
    def set_driver_status(self, name: str, status: int) -> bool: ...


def to_descriptor(name: str, descriptor: DriverDescriptor | Mapping[str, Any]) -> DriverDescriptor:
    """Normalize *descriptor* to a model stored under *name*."""
    if isinstance(descriptor, DriverDescriptor):
        data = descriptor.model_dump(by_alias=True)
    else:
        data = copy.deepcopy(dict(descriptor))
    data["name"] = name
    return DriverDescriptor.model_validate(data)


class MemoryDriverRegistry:
    """Keeps descriptors in a dict; state lives as long as the object."""

    def __init__(self):
        self._drivers: dict[str, DriverDescriptor] = {}

    def get_driver(self, name: str) -> DriverDescriptor | None:
        descriptor = self._drivers.get(name)
        return descriptor.model_copy(deep=True) if descriptor else None

    def add_driver(self, name: str, descriptor) -> bool:
        record = to_descriptor(name, descriptor)
        existing = self._drivers.get(name)
        if existing is not None:
            record.status = existing.status
        self._drivers[name] = record
        return True

    def remove_driver(self, name: str) -> bool:
        return self._drivers.pop(name, None) is not None

    def has_driver(self, name: str) -> bool:
        return name in self._drivers

    def get_driver_config(self, name: str) -> dict[str, Any]:
        descriptor = self._drivers.get(name)
        return copy.deepcopy(descriptor.config) if descriptor else {}

    def save_config(self, name: str, config: Mapping[str, Any]) -> bool:
        descriptor = self._drivers.get(name)
        if descriptor is None:
            return False
        descriptor.config = copy.deepcopy(dict(config))
        return True

    def get_drivers_list(self, category: str | None = None, status: int | None = None) -> list[DriverDescriptor]:
        return [
            d.model_copy(deep=True)
            for _, d in sorted(self._drivers.items())
            if (category is None or d.category == category)
            and (status is None or d.status == status)
        ]

    def set_driver_status(self, name: str, status: int) -> bool:
        descriptor = self._drivers.get(name)
        if descriptor is None:
            return False
        descriptor.status = 1 if status else 0
        return True
