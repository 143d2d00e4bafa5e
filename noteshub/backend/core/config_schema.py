"""
Schemas for config/settings/*.yaml.

One model per file. Unknown keys are rejected so a typo in a YAML file
fails at startup rather than being silently ignored.
"""

from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _StrictBase(BaseModel):
    model_config = ConfigDict(extra="forbid")


# application.yaml


class ServerSchema(_StrictBase):
    host: str
    port: int = Field(ge=1, le=65535)


class CorsSchema(_StrictBase):
    origins: list[str]


class PaginationSchema(_StrictBase):
    """Page size for GET /api/notes; larger ``limit`` values are clamped to max_limit."""

    default_limit: int = Field(ge=1)
    max_limit: int = Field(ge=1)

    @model_validator(mode="after")
    def _default_within_max(self) -> Self:
        if self.default_limit > self.max_limit:
            raise ValueError("default_limit must not exceed max_limit")
        return self


class FrontendSchema(_StrictBase):
    """Whether / and /static serve the bundled browser client."""

    enabled: bool


class ApplicationSchema(_StrictBase):
    name: str
    version: str
    description: str
    environment: str
    debug: bool
    api_prefix: str = Field(pattern=r"^/[\w\-/]*\w$")
    docs_enabled: bool
    server: ServerSchema
    cors: CorsSchema
    pagination: PaginationSchema
    frontend: FrontendSchema


# database.yaml, used only when DATABASE_URL is unset


class DatabaseSchema(_StrictBase):
    driver: str
    host: str
    port: int
    name: str
    user: str
    pool_size: int = Field(ge=1)
    max_overflow: int = Field(ge=0)
    pool_timeout: int
    pool_recycle: int
    echo: bool


# logging.yaml


class ConsoleHandlerSchema(_StrictBase):
    enabled: bool


class FileHandlerSchema(_StrictBase):
    enabled: bool
    path: str
    max_bytes: int = Field(gt=0)
    backup_count: int = Field(ge=0)


class HandlersSchema(_StrictBase):
    console: ConsoleHandlerSchema
    file: FileHandlerSchema


class LoggingSchema(_StrictBase):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    format: Literal["json", "console"]
    handlers: HandlersSchema


# features.yaml


class FeaturesSchema(_StrictBase):
    api_detailed_errors: bool
    api_request_logging: bool


# observability.yaml


class HealthChecksSchema(_StrictBase):
    ready_timeout_seconds: int = Field(ge=0)


class ObservabilitySchema(_StrictBase):
    health_checks: HealthChecksSchema
