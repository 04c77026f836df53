"""Application configuration using Pydantic Settings with YAML support.

Configuration is layered:
- YAML files organized by domain under config/base/
- Environment-specific overrides under config/environments/{APP_ENV}/
- Environment variables and .env for connection strings and secrets

Connection strings for the document database and the session store are read
from the ``MONGO_URI``, ``MONGO_DATABASE`` and ``REDIS_URI`` variables. They
are only required when the matching backend is selected.
"""

from __future__ import annotations

from enum import StrEnum
from functools import lru_cache
from typing import TYPE_CHECKING, Annotated, Self

from pydantic import BaseModel, BeforeValidator, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .yaml_source import MultiYamlConfigSettingsSource


if TYPE_CHECKING:
    from pydantic_settings import PydanticBaseSettingsSource


class StoreBackend(StrEnum):
    """Where recipe and user records are kept.

    - MONGO: MongoDB collections (persistent)
    - MEMORY: process-local dictionaries, optionally seeded from JSON
    """

    MONGO = "mongo"
    MEMORY = "memory"


class SessionBackend(StrEnum):
    """Where session tokens are kept."""

    REDIS = "redis"
    MEMORY = "memory"


def parse_list(v: str | list[str]) -> list[str]:
    """Parse comma-separated string or list into list of strings."""
    if isinstance(v, str):
        return [x.strip() for x in v.split(",") if x.strip()]
    return v


# =============================================================================
# Nested Configuration Models (from YAML)
# =============================================================================


class AppSettings(BaseModel):
    """Application identity settings."""

    name: str = "Recipes API"
    version: str = "0.1.0"
    debug: bool = False


class ServerSettings(BaseModel):
    """Server configuration settings."""

    host: str = "127.0.0.1"
    port: int = 8080


class ApiSettings(BaseModel):
    """API configuration settings."""

    prefix: str = ""
    cors_origins: Annotated[list[str], BeforeValidator(parse_list)] = []


class DatabaseSettings(BaseModel):
    """Recipe and user store settings."""

    backend: StoreBackend = StoreBackend.MONGO
    recipes_collection: str = "recipes"
    users_collection: str = "users"
    server_selection_timeout_ms: int = 5000
    seed_file: str | None = None  # JSON recipes loaded into the memory backend
    users_seed_file: str | None = None


class SessionSettings(BaseModel):
    """Session store and cookie settings."""

    backend: SessionBackend = SessionBackend.REDIS
    cookie_name: str = "recipes_api"
    cookie_secure: bool = False
    ttl_seconds: int = 3600
    key_prefix: str = "session"


class AuthSettings(BaseModel):
    """Authentication settings."""

    enabled: bool = True
    password_rounds: int = Field(default=12, ge=4, le=31)  # bcrypt work factor


class CacheSettings(BaseModel):
    """Recipe listing cache settings."""

    enabled: bool = True
    ttl: int = 300
    key_prefix: str = "recipes"


class FeaturesSettings(BaseModel):
    """Optional endpoints mounted by the router."""

    delete_enabled: bool = True
    search_enabled: bool = True


class RateLimitingSettings(BaseModel):
    """Rate limiting configuration."""

    enabled: bool = True
    default: str = "100/minute"
    auth: str = "5/minute"


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: str = "INFO"
    format: str = "json"
    file: str | None = None


class TracingSettings(BaseModel):
    """Tracing configuration settings."""

    enabled: bool = False
    otlp_endpoint: str | None = None


class MetricsSettings(BaseModel):
    """Metrics configuration settings."""

    enabled: bool = True


class ObservabilitySettings(BaseModel):
    """Observability configuration settings."""

    tracing: TracingSettings = TracingSettings()
    metrics: MetricsSettings = MetricsSettings()


# =============================================================================
# Main Settings Class
# =============================================================================


class Settings(BaseSettings):
    """Application settings with YAML + environment variable support.

    Priority (highest to lowest):
    1. Values passed to ``Settings()``
    2. Environment variables
    3. .env file
    4. Environment-specific YAML files (config/environments/{APP_ENV}/)
    5. Base YAML files (config/base/)
    6. Default values in code

    Nested values use the ``__`` delimiter, e.g. ``DATABASE__BACKEND=memory``.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
        case_sensitive=False,
        env_nested_delimiter="__",
    )

    APP_ENV: str = "development"

    app: AppSettings = AppSettings()
    server: ServerSettings = ServerSettings()
    api: ApiSettings = ApiSettings()
    database: DatabaseSettings = DatabaseSettings()
    sessions: SessionSettings = SessionSettings()
    auth: AuthSettings = AuthSettings()
    cache: CacheSettings = CacheSettings()
    features: FeaturesSettings = FeaturesSettings()
    rate_limiting: RateLimitingSettings = RateLimitingSettings()
    logging: LoggingSettings = LoggingSettings()
    observability: ObservabilitySettings = ObservabilitySettings()

    # =========================================================================
    # Connection strings (environment only - never in YAML)
    # =========================================================================
    MONGO_URI: str | None = None
    MONGO_DATABASE: str | None = None
    REDIS_URI: str | None = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Place the YAML source between .env and file secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            MultiYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def _check_connection_settings(self) -> Self:
        """Fail fast when a selected backend has no connection string."""
        missing: list[str] = []
        if self.database.backend == StoreBackend.MONGO:
            if not self.MONGO_URI:
                missing.append("MONGO_URI")
            if not self.MONGO_DATABASE:
                missing.append("MONGO_DATABASE")
        if (
            self.auth.enabled
            and self.sessions.backend == SessionBackend.REDIS
            and not self.REDIS_URI
        ):
            missing.append("REDIS_URI")
        if missing:
            msg = f"Missing required configuration: {', '.join(missing)}"
            raise ValueError(msg)
        return self

    # =========================================================================
    # Computed Fields
    # =========================================================================

    @property
    def uses_mongo(self) -> bool:
        """Whether recipes and users live in MongoDB."""
        return self.database.backend == StoreBackend.MONGO

    @property
    def uses_redis(self) -> bool:
        """Whether a Redis client should be opened at startup.

        Redis backs sessions when selected, and the listing cache whenever a
        URI is configured.
        """
        return bool(self.REDIS_URI)

    @property
    def rate_limit_storage_uri(self) -> str:
        """Storage backend for SlowAPI counters."""
        return self.REDIS_URI or "memory://"

    # =========================================================================
    # Environment Helpers
    # =========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.APP_ENV == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.APP_ENV == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in test environment."""
        return self.APP_ENV == "test"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
