"""Domain layer - Core models, state events and errors.

This module contains immutable domain models, the state reducer and
typed errors used throughout the application. No external dependencies.
"""

from .errors import (
    BusTrackerError,
    ConfigurationError,
    GeoDatabaseCorruptError,
    GeoDatabaseError,
    GeoDatabaseNotFoundError,
    InvalidEventError,
)
from .events import (
    AddressChanged,
    DestinationChanged,
    PlaceChanged,
    PositionChanged,
    StateEvent,
    StopsChanged,
    apply_event,
)
from .models import (
    FALLBACK_ADDRESS,
    LABEL_SEPARATOR,
    Address,
    Degradation,
    GeoRecord,
    PlaceLabels,
    Position,
    ResolutionState,
    Stop,
    StopLookup,
)
from .places import derive_labels, derive_position, render_labels

__all__ = [
    # Models
    "Address",
    "FALLBACK_ADDRESS",
    "LABEL_SEPARATOR",
    "Degradation",
    "GeoRecord",
    "PlaceLabels",
    "Position",
    "ResolutionState",
    "Stop",
    "StopLookup",
    # Derivations
    "derive_labels",
    "derive_position",
    "render_labels",
    # Events
    "AddressChanged",
    "DestinationChanged",
    "PlaceChanged",
    "PositionChanged",
    "StateEvent",
    "StopsChanged",
    "apply_event",
    # Errors
    "BusTrackerError",
    "ConfigurationError",
    "GeoDatabaseError",
    "GeoDatabaseNotFoundError",
    "GeoDatabaseCorruptError",
    "InvalidEventError",
]
