"""
Configuration Management.

Two layers:
    config/settings/*.yaml   - engine constants, validated by config_schema
    STICKYNOTES_* env vars   - per-machine overrides (also read from config/.env)

Files:
    application.yaml - name, version, environment
    storage.yaml     - data directory, file name, backups, autosave quiet period
    geometry.yaml    - size constraints, resize handles, title bar
    placement.yaml   - spawn position heuristic
    logging.yaml     - levels, handlers

Overrides:
    STICKYNOTES_DATA_DIR   - replaces storage.data_dir
    STICKYNOTES_LOG_LEVEL  - replaces logging.level

Paths in the YAML are relative to the project root, the nearest directory
at or above the working directory holding a .project_root marker.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from stickynotes.core.config_schema import (
    ApplicationSchema,
    GeometrySchema,
    LoggingSchema,
    PlacementSchema,
    StorageSchema,
)

PROJECT_MARKER = ".project_root"
SETTINGS_DIR = Path("config") / "settings"
ENV_FILE = Path("config") / ".env"

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def find_project_root(start: Path | None = None) -> Path:
    """
    Walk up from start (default: the working directory) to the marker.

    Raises:
        RuntimeError: If no ancestor holds a .project_root file
    """
    current = (start or Path.cwd()).resolve()
    for candidate in (current, *current.parents):
        if (candidate / PROJECT_MARKER).exists():
            return candidate
    raise RuntimeError(f"Project root not found. Ensure {PROJECT_MARKER} file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """
    Read one file from config/settings/ as a mapping.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    config_path = find_project_root() / SETTINGS_DIR / filename
    if not config_path.is_file():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    return yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}


class Settings(BaseSettings):
    """Environment overrides. None means "use the YAML value"."""

    data_dir: str | None = None
    log_level: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="STICKYNOTES_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type[SchemaT], filename: str) -> SchemaT:
    try:
        return schema_cls(**load_yaml_config(filename))
    except ValidationError as e:
        raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e


class AppConfig:
    """
    All YAML settings, validated when constructed.

    A missing key, wrong type or unknown key in any file fails here with the
    file name in the message rather than later at the point of use.
    """

    def __init__(self) -> None:
        self.application = _load_validated(ApplicationSchema, "application.yaml")
        self.storage = _load_validated(StorageSchema, "storage.yaml")
        self.geometry = _load_validated(GeometrySchema, "geometry.yaml")
        self.placement = _load_validated(PlacementSchema, "placement.yaml")
        self.logging = _load_validated(LoggingSchema, "logging.yaml")

    def sections(self) -> dict[str, BaseModel]:
        """Sections by file stem, in display order."""
        return {
            "application": self.application,
            "storage": self.storage,
            "geometry": self.geometry,
            "placement": self.placement,
            "logging": self.logging,
        }


@lru_cache
def get_settings() -> Settings:
    """Environment overrides, including config/.env when present."""
    return Settings(_env_file=str(find_project_root() / ENV_FILE))


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def _resolve_from_root(configured: str) -> Path:
    path = Path(configured).expanduser()
    return path if path.is_absolute() else find_project_root() / path


def get_data_dir() -> Path:
    """
    Directory holding the notes file.

    STICKYNOTES_DATA_DIR wins over storage.yaml. The directory is not
    created here; NoteStore does that.
    """
    return _resolve_from_root(get_settings().data_dir or get_app_config().storage.data_dir)


def get_backup_dir() -> Path:
    """Default directory for timestamped backups."""
    return _resolve_from_root(get_app_config().storage.backup_dir)
