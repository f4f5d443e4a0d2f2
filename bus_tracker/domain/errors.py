"""Typed domain errors for the bus tracker.

Only initialization problems and rejected state events are raised.
Degraded pipeline results (fallback address, geo miss, failed stop
lookup) are returned as default values and reported through logging
and ``ResolutionService.diagnostics`` instead.

All errors inherit from BusTrackerError and can optionally wrap a root
cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class BusTrackerError(Exception):
    """Base error for the bus tracker domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)


@dataclass
class GeoDatabaseError(BusTrackerError):
    """The offline geo database could not be opened.

    Attributes:
        database_path: Path of the database file
    """

    database_path: str = ""


@dataclass
class GeoDatabaseNotFoundError(GeoDatabaseError):
    """The offline geo database file does not exist."""


@dataclass
class GeoDatabaseCorruptError(GeoDatabaseError):
    """The offline geo database file exists but cannot be read."""


@dataclass
class ConfigurationError(BusTrackerError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
    """

    setting_name: str = ""


@dataclass
class InvalidEventError(BusTrackerError):
    """A state event carried a payload that failed validation.

    Attributes:
        event_type: Name of the rejected event
    """

    event_type: str = ""
