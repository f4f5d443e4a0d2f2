"""Logging setup driven by ObservabilityConfig."""

from __future__ import annotations

import logging
from typing import Optional

from .config import ObservabilityConfig, get_config
from .domain.errors import ConfigurationError


def configure_logging(config: Optional[ObservabilityConfig] = None) -> None:
    """Configure root logging from configuration.

    Args:
        config: Logging configuration. Defaults to the application config.
    """
    config = config or get_config().observability
    level = logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        raise ConfigurationError(
            f"Unknown log level: {config.level!r}", setting_name="BT_LOG_LEVEL"
        )

    logging.basicConfig(level=level, format=config.format, force=True)
    # urllib3 logs every connection at DEBUG, including query strings
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
