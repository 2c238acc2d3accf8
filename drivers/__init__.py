from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from typing import Any

import services.factory as factory
from services.config_schema import DEFAULT_VERSION
from services.properties import Properties


class DriverInterface(ABC):
    """Capability set a driver exposes to get full lifecycle support.

    The manager only injects options and config into objects of this type;
    anything else it creates is handed back untouched.
    """

    # --- identity ---------------------------------------------------------

    @abstractmethod
    def get_driver_name(self) -> str | None: ...

    @abstractmethod
    def get_driver_title(self) -> str | None: ...

    @abstractmethod
    def get_driver_category(self) -> str | None: ...

    @abstractmethod
    def get_driver_description(self) -> str | None: ...

    @abstractmethod
    def get_driver_version(self) -> str: ...

    @abstractmethod
    def get_driver_class(self) -> str: ...

    @abstractmethod
    def get_driver_extension_name(self) -> str | None: ...

    @abstractmethod
    def set_driver_params(
        self,
        name: str,
        category: str | None = None,
        title: str | None = None,
        description: str | None = None,
        version: str | None = None,
        extension: str | None = None,
        class_name: str | None = None,
    ) -> None: ...

    # --- lifecycle --------------------------------------------------------

    @abstractmethod
    def create_driver_config(self, properties: Properties) -> None:
        """Declare the config keys (and their defaults) this driver understands."""

    @abstractmethod
    def init_driver(self, properties: Properties) -> None:
        """Build the wrapped implementation once config is resolved."""

    @abstractmethod
    def get_instance(self) -> Any: ...

    # --- options & config -------------------------------------------------

    @abstractmethod
    def get_driver_option(self, name: str, default: Any = None) -> Any: ...

    @abstractmethod
    def set_driver_option(self, name: str, value: Any) -> None: ...

    @abstractmethod
    def get_driver_options(self) -> dict[str, Any]: ...

    @abstractmethod
    def set_driver_options(self, options: dict[str, Any]) -> None: ...

    @abstractmethod
    def get_driver_config(self) -> dict[str, Any]: ...

    @abstractmethod
    def set_driver_config(self, config: dict[str, Any]) -> None: ...


class Driver(DriverInterface):
    """Default driver implementation.

    Subclasses describe themselves with class attributes and declare their
    config keys in :meth:`create_driver_config`::

        class RedisCacheDriver(Driver):
            driver_name = "redis"
            driver_category = "cache"
            driver_class = "myapp.cache:RedisCache"

            def create_driver_config(self, properties):
                properties.property("host", default="127.0.0.1", type="str")
                properties.property("port", default=6379, type="int")

    :meth:`init_driver` then builds ``driver_class`` with the resolved config
    dict as its only argument, and :meth:`get_instance` returns it.
    """

    driver_name:        str | None = None
    driver_category:    str | None = None
    driver_title:       str | None = None
    driver_description: str | None = None
    driver_version:     str        = DEFAULT_VERSION
    driver_class:       str | None = None
    driver_extension:   str | None = None

    def __init__(self):
        self._driver_options: dict[str, Any] = {}
        self._driver_config: dict[str, Any] | None = None
        self.instance: Any = None
        self._initialized = False

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    def get_driver_name(self) -> str | None:
        return self.driver_name

    def get_driver_title(self) -> str | None:
        return self.driver_title or self.get_driver_name()

    def get_driver_category(self) -> str | None:
        return self.driver_category

    def get_driver_description(self) -> str | None:
        return self.driver_description

    def get_driver_version(self) -> str:
        return self.driver_version or DEFAULT_VERSION

    def get_driver_class(self) -> str:
        """Implementation class identifier; the driver's own type if none declared."""
        return self.driver_class or factory.class_path(self)

    def set_driver_class(self, class_name: str | None) -> None:
        self.driver_class = class_name

    def get_driver_extension_name(self) -> str | None:
        return self.driver_extension

    def set_driver_params(
        self,
        name: str,
        category: str | None = None,
        title: str | None = None,
        description: str | None = None,
        version: str | None = None,
        extension: str | None = None,
        class_name: str | None = None,
    ) -> None:
        self.driver_name = name
        self.driver_category = category
        self.driver_title = title
        self.driver_description = description
        self.driver_version = version or DEFAULT_VERSION
        self.driver_extension = extension
        self.driver_class = class_name

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_driver_config(self, properties: Properties) -> None:
        pass

    def init_driver(self, properties: Properties) -> None:
        # Without a declared implementation there is nothing to wrap;
        # get_instance() keeps returning the driver itself.
        if self.driver_class:
            self.instance = factory.create_instance(self.driver_class, properties.get_values())
        self._initialized = True

    def get_instance(self) -> Any:
        return self.instance if self.instance is not None else self

    def is_initialized(self) -> bool:
        return self._initialized

    # ------------------------------------------------------------------
    # Options (per-call runtime parameters)
    # ------------------------------------------------------------------

    def get_driver_option(self, name: str, default: Any = None) -> Any:
        return self._driver_options.get(name, default)

    def set_driver_option(self, name: str, value: Any) -> None:
        self._driver_options[name] = value

    def get_driver_options(self) -> dict[str, Any]:
        return self._driver_options

    def set_driver_options(self, options: dict[str, Any]) -> None:
        self._driver_options = dict(options)

    # ------------------------------------------------------------------
    # Config (declared, persisted settings)
    # ------------------------------------------------------------------

    def get_driver_config(self) -> dict[str, Any]:
        return self._driver_config if isinstance(self._driver_config, dict) else {}

    def set_driver_config(self, config: dict[str, Any]) -> None:
        self._driver_config = copy.deepcopy(dict(config))
