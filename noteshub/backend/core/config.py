"""
NotesHub configuration.

Two sources, both under the directory holding the ``.project_root`` marker:

- ``config/.env`` holds secrets: ``DB_PASSWORD`` and an optional
  ``DATABASE_URL`` (e.g. ``sqlite+aiosqlite:///./data/noteshub.db``) that
  replaces the URL built from database.yaml.
- ``config/settings/*.yaml`` holds everything else, one file per section
  of ``AppConfig`` (see ``SECTIONS``).
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from noteshub.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    FeaturesSchema,
    LoggingSchema,
    ObservabilitySchema,
)

# AppConfig attribute -> (YAML file, schema)
SECTIONS: dict[str, tuple[str, type[BaseModel]]] = {
    "application": ("application.yaml", ApplicationSchema),
    "database": ("database.yaml", DatabaseSchema),
    "logging": ("logging.yaml", LoggingSchema),
    "features": ("features.yaml", FeaturesSchema),
    "observability": ("observability.yaml", ObservabilitySchema),
}


def find_project_root() -> Path:
    """Walk up from the working directory to the ``.project_root`` marker."""
    for directory in (Path.cwd(), *Path.cwd().parents):
        if (directory / ".project_root").exists():
            return directory
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Read one file from config/settings/; an empty file reads as {}."""
    config_path = find_project_root() / "config" / "settings" / filename
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Secrets from config/.env."""

    db_password: str = ""
    database_url: str | None = None

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


class AppConfig:
    """
    All YAML settings, validated on construction.

    Each ``SECTIONS`` entry becomes an attribute holding its schema
    instance, e.g. ``config.application.pagination.max_limit``.

    Raises:
        ValueError: naming the file whose contents fail validation
    """

    application: ApplicationSchema
    database: DatabaseSchema
    logging: LoggingSchema
    features: FeaturesSchema
    observability: ObservabilitySchema

    def __init__(self) -> None:
        for section, (filename, schema) in SECTIONS.items():
            try:
                value = schema(**load_yaml_config(filename))
            except ValidationError as e:
                raise ValueError(f"Invalid configuration in {filename}:\n{e}") from e
            setattr(self, section, value)


@lru_cache
def get_settings() -> Settings:
    return Settings(_env_file=str(find_project_root() / "config" / ".env"))


@lru_cache
def get_app_config() -> AppConfig:
    return AppConfig()


def get_database_url() -> str:
    """
    URL of the catalog database.

    ``DATABASE_URL`` wins when set; otherwise the URL is assembled from
    database.yaml and ``DB_PASSWORD``.
    """
    settings = get_settings()
    if settings.database_url:
        return settings.database_url

    db = get_app_config().database
    return f"{db.driver}://{db.user}:{settings.db_password}@{db.host}:{db.port}/{db.name}"


def get_server_base_url() -> str:
    """Where run.py's server listens, e.g. ``http://127.0.0.1:8080``."""
    server = get_app_config().application.server
    return f"http://{server.host}:{server.port}"
