"""Centralized configuration management for the figure tracker backend."""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, PrivateAttr
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables defined in a local .env file before instantiating the
# settings singleton so every importer observes the same configuration.
load_dotenv()

# -- Application-wide constants -------------------------------------------------

DEFAULT_SQLITE_DATABASE_URL = "sqlite+aiosqlite:///./data/figure_tracker.db"
POSTGRES_ASYNC_PREFIX = "postgresql+psycopg://"
POSTGRES_SYNC_PREFIXES = ("postgres://", "postgresql://")
DEFAULT_REDIS_URL = "redis://localhost:6379/0"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_PUBLIC_SITE_URL = "http://localhost:5173"


def _normalize_origin(origin: str) -> str:
    """Return the origin stripped of whitespace and trailing slashes."""

    return origin.strip().rstrip("/")


class AppSettings(BaseSettings):
    """Typed configuration surface built on top of ``pydantic-settings``.

    Besides the infrastructure knobs (database, Redis, logging) the class
    carries the tuning values used by the sharing and recommendation services
    so that tests can construct an isolated instance instead of patching
    environment variables.
    """

    _explicit_redis_url: bool = PrivateAttr(default=False)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    def __init__(self, **values: object) -> None:
        """Capture explicit overrides prior to delegating to ``BaseSettings``."""

        normalized_keys = {str(key).lower() for key in values}
        super().__init__(**values)
        self._explicit_redis_url = "redis_url" in normalized_keys
        redis_env = os.getenv("REDIS_URL")
        if redis_env is not None and redis_env.strip():
            self._explicit_redis_url = True

    database_url: str | None = Field(
        default=None,
        alias="DATABASE_URL",
        description=(
            "Full SQLAlchemy-compatible database URL. Postgres URLs supplied in"
            " sync format (postgres:// or postgresql://) are coerced into the"
            " async psycopg driver string at runtime."
        ),
    )
    use_sqlite: bool = Field(
        default=False,
        alias="USE_SQLITE",
        description="Force SQLite usage regardless of DATABASE_URL.",
    )
    redis_url: str = Field(
        default=DEFAULT_REDIS_URL,
        alias="REDIS_URL",
        description="Redis connection string consumed by the catalog cache.",
    )
    log_level: str = Field(
        default=DEFAULT_LOG_LEVEL,
        alias="LOG_LEVEL",
        description="Root logging level (e.g. INFO, DEBUG, WARNING).",
    )
    cors_allow_origins_raw: str | None = Field(
        default=None,
        alias="CORS_ALLOW_ORIGINS",
        description="Comma-separated list of additional CORS origins.",
    )
    public_site_url: str = Field(
        default=DEFAULT_PUBLIC_SITE_URL,
        alias="PUBLIC_SITE_URL",
        description="Frontend origin used to build shareable links.",
    )
    share_token_bytes: int = Field(
        default=24,
        ge=16,
        le=64,
        alias="SHARE_TOKEN_BYTES",
        description=(
            "Entropy, in bytes, of generated share tokens. Tokens double as"
            " bearer credentials for the public read path."
        ),
    )
    recommendation_oversample_factor: int = Field(
        default=3,
        ge=1,
        le=20,
        alias="RECOMMENDATION_OVERSAMPLE_FACTOR",
        description="Multiplier applied to ``limit`` when sizing the candidate window.",
    )
    recommendation_window_cap: int = Field(
        default=500,
        ge=1,
        alias="RECOMMENDATION_WINDOW_CAP",
        description="Upper bound on candidate rows fetched per recommendation call.",
    )
    catalog_cache_ttl_seconds: int = Field(
        default=600,
        ge=0,
        alias="CATALOG_CACHE_TTL_SECONDS",
        description="Lifetime of cached catalog listings and search results.",
    )
    slow_query_threshold_seconds: float = Field(
        default=0.1,
        ge=0,
        alias="SLOW_QUERY_THRESHOLD_SECONDS",
        description="Statements slower than this are logged as warnings; 0 disables logging.",
    )
    redis_retry_backoff_seconds: float = Field(
        default=30.0,
        ge=0,
        alias="REDIS_RETRY_BACKOFF_SECONDS",
        description="Cool-down before reconnecting to Redis after a failed connection.",
    )

    @property
    def resolved_database_url(self) -> str:
        """Return the async-compatible database URL after applying fallbacks."""

        if self.use_sqlite or not self.database_url:
            return DEFAULT_SQLITE_DATABASE_URL

        url = self.database_url.strip()

        for prefix in POSTGRES_SYNC_PREFIXES:
            if url.startswith(prefix):
                return url.replace(prefix, POSTGRES_ASYNC_PREFIX, 1)

        if url.startswith(POSTGRES_ASYNC_PREFIX) or url.startswith("sqlite+aiosqlite://"):
            return url

        raise RuntimeError(
            f"Expected a PostgreSQL connection string or SQLite fallback, received: {url}"
        )

    @property
    def database_type(self) -> str:
        """Return ``sqlite`` when using SQLite otherwise ``postgresql``."""

        if self.resolved_database_url.startswith("sqlite"):
            return "sqlite"
        return "postgresql"

    @property
    def cors_allow_origins(self) -> list[str]:
        """Return normalised CORS origins supplied via environment variables."""

        if not self.cors_allow_origins_raw:
            return []

        origins = [
            _normalize_origin(origin)
            for origin in self.cors_allow_origins_raw.split(",")
            if origin.strip()
        ]
        return [origin for origin in origins if origin]

    @property
    def log_level_numeric(self) -> int:
        """Translate ``log_level`` into the numeric constant expected by logging."""

        candidate = logging.getLevelName(self.log_level.upper())
        if isinstance(candidate, int):
            return candidate
        return logging.INFO

    def optional_config_warnings(self) -> list[str]:
        """Return human-readable warnings for unset optional configuration."""

        warnings: list[str] = []

        if not self._explicit_redis_url and self.redis_url == DEFAULT_REDIS_URL:
            warnings.append(
                "REDIS_URL is not set - catalog caching will use the in-process "
                "fallback only"
            )

        if self.public_site_url == DEFAULT_PUBLIC_SITE_URL:
            warnings.append(
                "PUBLIC_SITE_URL is not set - share links will point at localhost"
            )

        return warnings


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return a cached instance of :class:`AppSettings`."""

    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_LOG_LEVEL",
    "DEFAULT_PUBLIC_SITE_URL",
    "DEFAULT_REDIS_URL",
    "DEFAULT_SQLITE_DATABASE_URL",
    "POSTGRES_ASYNC_PREFIX",
    "POSTGRES_SYNC_PREFIXES",
    "get_settings",
]
