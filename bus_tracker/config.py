"""Centralized configuration using Pydantic Settings.

This module provides a single source of truth for all configuration:
database location, discovery and transit endpoints, credentials and
logging.

Configuration can be overridden via environment variables or a ``.env``
file in the working directory:
- BT_GEO_DATABASE_PATH=/path/to/GeoLite2-City.mmdb
- BT_GEO_LOCALE=fr
- BT_TRANSIT_API_KEY=...
- BT_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.errors import ConfigurationError

ENV_FILE = ".env"


class GeoDatabaseConfig(BaseSettings):
    """Offline geo database configuration.

    Environment variables prefixed with BT_GEO_.
    """

    model_config = SettingsConfigDict(
        env_prefix="BT_GEO_", env_file=ENV_FILE, extra="ignore"
    )

    database_path: Path = Path("data") / "GeoLite2-City.mmdb"
    locale: str = "en"


class AddressDiscoveryConfig(BaseSettings):
    """Public address discovery configuration.

    Environment variables prefixed with BT_IP_.
    """

    model_config = SettingsConfigDict(
        env_prefix="BT_IP_", env_file=ENV_FILE, extra="ignore"
    )

    service_url: str = "https://api64.ipify.org"
    timeout_seconds: float = 10.0


class TransitConfig(BaseSettings):
    """Transit stop-lookup API configuration.

    Environment variables prefixed with BT_TRANSIT_.
    """

    model_config = SettingsConfigDict(
        env_prefix="BT_TRANSIT_", env_file=ENV_FILE, extra="ignore"
    )

    api_key: Optional[SecretStr] = None
    stops_url: str = "https://developer.cumtd.com/api/v2.2/json/getstopsbylatlon"
    max_results: int = Field(default=5, ge=1)
    timeout_seconds: float = 10.0


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with BT_LOG_.
    """

    model_config = SettingsConfigDict(
        env_prefix="BT_LOG_", env_file=ENV_FILE, extra="ignore"
    )

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

    Sub-configurations can be accessed via attributes:

        config = get_config()
        print(config.geo.database_path)
        print(config.transit.max_results)

    Environment variables prefixed with BT_.
    """

    model_config = SettingsConfigDict(
        env_prefix="BT_", env_file=ENV_FILE, extra="ignore"
    )

    geo: GeoDatabaseConfig = Field(default_factory=GeoDatabaseConfig)
    discovery: AddressDiscoveryConfig = Field(default_factory=AddressDiscoveryConfig)
    transit: TransitConfig = Field(default_factory=TransitConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    find_stops_on_start: bool = True


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.

    Returns:
        The application configuration instance.

    Raises:
        ConfigurationError: If a setting from the environment or ``.env``
            fails validation.
    """
    try:
        return AppConfig()
    except ValidationError as e:
        errors = e.errors()
        setting = ".".join(str(part) for part in errors[0]["loc"]) if errors else ""
        raise ConfigurationError(
            message=f"Invalid configuration for {e.title}",
            setting_name=setting,
            cause=e,
        ) from e


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
