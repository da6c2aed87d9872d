"""
Configuration Schemas.

Pydantic models defining the expected structure of each YAML config file.
Used by AppConfig to validate configuration at load time. If a YAML file
has missing keys, wrong types, or unknown fields, a clear ValidationError
is raised at startup instead of a cryptic KeyError deep in application code.

Each top-level class corresponds to one file in config/settings/:
    ApplicationSchema  → application.yaml
    StorageSchema      → storage.yaml
    GeometrySchema     → geometry.yaml
    PlacementSchema    → placement.yaml
    LoggingSchema      → logging.yaml
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, model_validator


class _StrictBase(BaseModel):
    """Base with extra='forbid' so unknown YAML keys are caught immediately."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# application.yaml
# =============================================================================


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool


# =============================================================================
# storage.yaml
# =============================================================================


class AutosaveSchema(_StrictBase):
    quiet_period_ms: int

    @property
    def quiet_period_seconds(self) -> float:
        return self.quiet_period_ms / 1000


class StorageSchema(_StrictBase):
    data_dir: str
    file_name: str
    backup_dir: str
    autosave: AutosaveSchema


# =============================================================================
# geometry.yaml
# =============================================================================


ResizeHandleName = Literal[
    "top_left",
    "top",
    "top_right",
    "right",
    "bottom_right",
    "bottom",
    "bottom_left",
    "left",
]


class SizeSchema(_StrictBase):
    width: int
    height: int


class GeometrySchema(_StrictBase):
    default_size: SizeSchema
    min_size: SizeSchema
    max_size: SizeSchema
    resize_handle_size: int
    title_bar_height: int
    resize_handles: list[ResizeHandleName]

    @model_validator(mode="after")
    def _check_size_range(self) -> "GeometrySchema":
        if (
            self.min_size.width >= self.max_size.width
            or self.min_size.height >= self.max_size.height
        ):
            raise ValueError("min_size must be smaller than max_size in both dimensions")
        return self


# =============================================================================
# placement.yaml
# =============================================================================


class PointSchema(_StrictBase):
    x: int
    y: int


class PlacementSchema(_StrictBase):
    base: PointSchema
    step: int
    proximity: int
    max_attempts: int
    boundary: SizeSchema
    rule: Literal["cascade", "symmetric"]


# =============================================================================
# logging.yaml
# =============================================================================


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int
    backup_count: int


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: str
    format: str
    handlers: HandlersSchema
