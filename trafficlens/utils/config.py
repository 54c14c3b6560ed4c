# ==============================================================================
# Application Configuration
# ==============================================================================
"""
Configuration management using pydantic-settings.

All configuration is loaded from environment variables, with support for
.env files via python-dotenv.
"""

from functools import lru_cache
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env file before any settings are instantiated
load_dotenv()


class AnalyticsSettings(BaseSettings):
    """Aggregation engine settings."""

    model_config = SettingsConfigDict(env_prefix="ANALYTICS_")

    session_timeout_minutes: int = Field(
        default=30,
        description="Session inactivity timeout in minutes",
    )
    cache_ttl_seconds: int = Field(
        default=30,
        description="TTL for cached aggregate results in seconds",
    )
    default_range: str = Field(
        default="30d",
        description="Default query window (24h, 7d, 30d, 90d)",
    )
    cache_backend: Literal["memory", "valkey"] = Field(
        default="memory",
        description="Result cache backend (memory or valkey)",
    )


class ClassifierSettings(BaseSettings):
    """Website classifier and remote recommendation service settings."""

    model_config = SettingsConfigDict(env_prefix="CLASSIFIER_")

    remote_enabled: bool = Field(
        default=False, description="Call the remote recommendation service before local fallback"
    )
    base_url: str = Field(
        default="http://localhost:3001", description="Recommendation service base URL"
    )
    timeout_seconds: float = Field(
        default=12.0, description="Client-side timeout for the remote call in seconds"
    )
    cache_ttl_seconds: int = Field(
        default=1800, description="TTL for cached website intelligence in seconds"
    )
    max_page_views: int = Field(
        default=300, description="Maximum page views sent to the remote service"
    )


class PostgresSettings(BaseSettings):
    """PostgreSQL connection settings for the page view store."""

    model_config = SettingsConfigDict(env_prefix="PG_")

    host: str = Field(default="localhost", description="PostgreSQL host")
    port: int = Field(default=5432, description="PostgreSQL port")
    user: str = Field(default="postgres", description="PostgreSQL username")
    password: str = Field(default="", description="PostgreSQL password")
    database: str = Field(default="analytics", description="Database name")
    schema_name: str = Field(default="public", description="Schema name")
    sslmode: str = Field(default="prefer", description="SSL mode")
    events_table: str = Field(default="page_views", description="Page view table name")

    @property
    def connection_string(self) -> str:
        """Build PostgreSQL connection string."""
        return (
            f"postgresql://{self.user}:{self.password}@"
            f"{self.host}:{self.port}/{self.database}?sslmode={self.sslmode}"
        )


class ValkeySettings(BaseSettings):
    """Valkey (Redis-compatible) connection settings for the shared result cache."""

    model_config = SettingsConfigDict(env_prefix="VALKEY_")

    host: str = Field(default="localhost", description="Valkey host")
    port: int = Field(default=6379, description="Valkey port")
    password: Optional[str] = Field(default=None, description="Valkey password")
    db: int = Field(default=0, description="Valkey database number")
    ssl: bool = Field(default=False, description="Use SSL/TLS connection")
    key_prefix: str = Field(default="trafficlens:", description="Prefix for all cache keys")

    @property
    def url(self) -> str:
        """Build Valkey connection URL."""
        scheme = "rediss" if self.ssl else "redis"
        if self.password:
            return f"{scheme}://:{self.password}@{self.host}:{self.port}/{self.db}"
        return f"{scheme}://{self.host}:{self.port}/{self.db}"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        extra="ignore",
    )

    # Nested settings
    analytics: AnalyticsSettings = Field(default_factory=AnalyticsSettings)
    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    postgres: PostgresSettings = Field(default_factory=PostgresSettings)
    valkey: ValkeySettings = Field(default_factory=ValkeySettings)

    # General settings
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded once and cached for subsequent calls.
    """
    return Settings()
