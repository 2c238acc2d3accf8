"""
Driver manager.

Resolves drivers by name through a registry store and turns descriptors
into live objects:

    registry lookup → effective config → Properties → factory → inject → init

The manager holds nothing but its registry; every :meth:`DriverManager.create`
call returns a fresh object owned by the caller.
"""

from __future__ import annotations

from typing import Any, Mapping

import services.factory as factory
import services.logger as log
from services.config_schema import DEFAULT_VERSION, STATUS_DISABLED, STATUS_ENABLED, DriverDescriptor
from services.error import InvalidDriverError, catch_and_log, raise_and_log
from services.properties import Properties
from drivers import DriverInterface
from drivers.registry import DriverRegistry

l = log.get_logger()


class DriverManager:

    def __init__(self, registry: DriverRegistry):
        self.registry = registry

    # ------------------------------------------------------------------
    # Instantiation
    # ------------------------------------------------------------------

    def create(
        self,
        name: str,
        options: Mapping[str, Any] | None = None,
        config: Mapping[str, Any] | None = None,
    ) -> Any:
        """Build the driver registered as *name*.

        *config* replaces the stored default config entirely when given.
        Returns ``None`` if no driver is registered under *name*; errors
        from the factory or the driver's constructor propagate.
        """
        descriptor = self.registry.get_driver(name)
        if descriptor is None:
            l.warning(f"Driver not found: {name}")
            return None

        effective = dict(config) if config is not None else dict(descriptor.config)
        properties = Properties.from_dict(effective)

        driver = factory.create_instance(descriptor.class_name)

        if isinstance(driver, DriverInterface):
            driver.set_driver_options(dict(options or {}))
            driver.set_driver_config(properties.get_values())
            log.register_sensitive(properties.secrets())
            with catch_and_log(f"init driver '{name}'"):
                driver.init_driver(properties)
            l.debug(f"Created driver '{name}' ({descriptor.class_name})")
        else:
            l.debug(f"Created '{name}' as plain object ({descriptor.class_name}), no config injected")

        return driver

    # ------------------------------------------------------------------
    # Install / uninstall
    # ------------------------------------------------------------------

    def describe(self, driver: Any) -> DriverDescriptor | None:
        """Derive a descriptor from a driver object, class, or class path.

        Returns ``None`` when *driver* is not (and does not name) a
        :class:`DriverInterface`.  Constructing a named class may raise.
        """
        if isinstance(driver, str):
            if not factory.class_exists(driver):
                return None
            driver = factory.create_instance(driver)
        elif isinstance(driver, type):
            driver = factory.create_instance(driver)

        if not isinstance(driver, DriverInterface):
            return None
        if not driver.get_driver_name():
            raise_and_log(f"Driver {factory.class_path(driver)} declares no name", InvalidDriverError)

        properties = Properties()
        driver.create_driver_config(properties)

        return DriverDescriptor(
            name=driver.get_driver_name(),
            category=driver.get_driver_category(),
            title=driver.get_driver_title(),
            class_name=factory.class_path(driver),
            description=driver.get_driver_description(),
            version=driver.get_driver_version(),
            extension_name=driver.get_driver_extension_name(),
            config=properties.to_dict(),
        )

    def install(
        self,
        name: Any,
        class_name: str | None = None,
        category: str | None = None,
        title: str | None = None,
        description: str | None = None,
        version: str | None = None,
        config: Mapping[str, Any] | None = None,
        extension: str | None = None,
    ) -> bool:
        """Register a driver, or update it if the name is already taken.

        *name* may be a driver object, a driver class, or the import path of
        one; its own description then wins over the explicit arguments.
        Otherwise *name* is the driver name and the arguments describe it.
        """
        descriptor = self.describe(name)

        if descriptor is None:
            if not isinstance(name, str):
                raise_and_log(
                    f"Cannot install {name!r}: not a driver and no name given",
                    InvalidDriverError,
                )
            descriptor = DriverDescriptor(
                name=name,
                category=category,
                title=title,
                class_name=class_name,
                description=description,
                version=version or DEFAULT_VERSION,
                extension_name=extension,
                config=dict(config or {}),
            )

        ok = self.registry.add_driver(descriptor.name, descriptor)
        if ok:
            l.info(f"Installed driver: {descriptor.name} ({descriptor.class_name})")
        else:
            l.error(f"Failed to install driver: {descriptor.name}")
        return ok

    def uninstall(self, name: str) -> bool:
        ok = self.registry.remove_driver(name)
        if ok:
            l.info(f"Uninstalled driver: {name}")
        return ok

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has(self, name: str) -> bool:
        return self.registry.has_driver(name)

    def get_driver(self, name: str) -> DriverDescriptor | None:
        return self.registry.get_driver(name)

    def get_list(self, category: str | None = None, status: int | None = None) -> list[DriverDescriptor]:
        return self.registry.get_drivers_list(category, status)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def enable(self, name: str) -> bool:
        ok = self.registry.set_driver_status(name, STATUS_ENABLED)
        if ok:
            l.info(f"Enabled driver: {name}")
        return ok

    def disable(self, name: str) -> bool:
        ok = self.registry.set_driver_status(name, STATUS_DISABLED)
        if ok:
            l.info(f"Disabled driver: {name}")
        return ok

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------

    def save_config(self, name: str, config: Mapping[str, Any] | Properties) -> bool:
        values = config.to_dict() if isinstance(config, Properties) else dict(config)
        ok = self.registry.save_config(name, values)
        if ok:
            l.info(f"Saved config of driver: {name}")
        else:
            l.warning(f"Config of driver '{name}' was not saved")
        return ok

    def get_config(self, name: str) -> Properties:
        return Properties.from_dict(self.registry.get_driver_config(name))
