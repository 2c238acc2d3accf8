"""
Object factory.

Turns a class identifier into a live object.  Identifiers are import paths,
either ``"package.module:QualName"`` (what :func:`class_path` produces) or
the dotted ``"package.module.QualName"`` form.  Class objects are accepted
wherever an identifier is, so callers holding a reference need not
stringify it first.
"""

from __future__ import annotations

import importlib
from typing import Any

import services.logger as log
from services.error import DriverClassError, raise_and_log

l = log.get_logger()


def _split(identifier: str) -> tuple[str, str]:
    if ":" in identifier:
        module_name, _, qualname = identifier.partition(":")
    else:
        module_name, _, qualname = identifier.rpartition(".")
    if not module_name or not qualname:
        raise ValueError(f"not a class path: {identifier!r}")
    return module_name, qualname


def _lookup(identifier: str) -> Any:
    module_name, qualname = _split(identifier)
    target: Any = importlib.import_module(module_name)
    for part in qualname.split("."):
        target = getattr(target, part)
    return target


def resolve_class(identifier: str | type) -> type:
    """Import and return the class named by *identifier*.

    Raises :class:`DriverClassError` when the module cannot be imported, the
    attribute is missing, or the target is not a class.
    """
    if isinstance(identifier, type):
        return identifier
    if not isinstance(identifier, str) or not identifier:
        raise_and_log(f"Invalid class identifier: {identifier!r}", DriverClassError)

    try:
        target = _lookup(identifier)
    except (ImportError, AttributeError, ValueError) as e:
        raise_and_log(f"Cannot resolve class '{identifier}': {e}", DriverClassError)

    if not isinstance(target, type):
        raise_and_log(f"'{identifier}' does not name a class", DriverClassError)
    return target


def class_exists(identifier) -> bool:
    """Return True if *identifier* resolves to an importable class."""
    if isinstance(identifier, type):
        return True
    if not isinstance(identifier, str):
        return False
    try:
        return isinstance(_lookup(identifier), type)
    except (ImportError, AttributeError, ValueError):
        return False


def create_instance(identifier: str | type, *args, **kwargs) -> Any:
    """Construct an instance of the class named by *identifier*.

    Exceptions raised by the constructor itself are not caught.
    """
    cls = resolve_class(identifier)
    l.debug(f"Creating instance of {class_path(cls)}")
    return cls(*args, **kwargs)


def class_path(obj) -> str:
    """Return the ``"module:QualName"`` identifier of a class or of an object's type."""
    cls = obj if isinstance(obj, type) else type(obj)
    return f"{cls.__module__}:{cls.__qualname__}"
