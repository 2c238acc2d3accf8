from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator


# ---------------------------------------------------------------------------
# Reusable bool coercion: "true" / "1" / "yes" → True
# ---------------------------------------------------------------------------

def _coerce_bool(v: object) -> object:
    if isinstance(v, str):
        return v.lower() in ("true", "1", "yes")
    return v


CoercedBool = Annotated[bool, BeforeValidator(_coerce_bool)]

DEFAULT_VERSION = "1.0.0"

STATUS_DISABLED = 0
STATUS_ENABLED = 1


# ---------------------------------------------------------------------------
# Registry record
# ---------------------------------------------------------------------------

class DriverDescriptor(BaseModel):
    """One registered driver, keyed by ``name``.

    ``class_name`` is serialized as ``"class"`` so records exported with
    ``model_dump(by_alias=True)`` read naturally in config files.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name:           str
    category:       str | None      = None
    title:          str | None      = None
    class_name:     str | None      = Field(default=None, alias="class")
    description:    str | None      = None
    version:        str | None      = DEFAULT_VERSION
    extension_name: str | None      = None
    config:         dict[str, Any]  = Field(default_factory=dict)
    status:         Literal[0, 1]   = STATUS_ENABLED

    @model_validator(mode="after")
    def _fill_defaults(self) -> DriverDescriptor:
        if not self.title:
            self.title = self.name
        if not self.version:
            self.version = DEFAULT_VERSION
        return self

    @property
    def enabled(self) -> bool:
        return self.status == STATUS_ENABLED


# ---------------------------------------------------------------------------
# Application settings (config.json / .yaml / .toml in the data path)
# ---------------------------------------------------------------------------

class RegistrySettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    backend: Literal["memory", "sqlite"] = "sqlite"
    path:    str                         = ""


class AppSettings(BaseModel):
    model_config = ConfigDict(extra="ignore")

    registry:  RegistrySettings                                        = Field(default_factory=RegistrySettings)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    verbose:   CoercedBool                                             = False
