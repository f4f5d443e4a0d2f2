"""Immutable domain models for the bus tracker.

All models are frozen dataclasses with slots. They have no external
dependencies and represent the values that flow through the resolution
pipeline: address -> geo record -> position/labels -> stops.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from ipaddress import IPv4Address, IPv6Address, ip_address
from typing import ClassVar, Mapping, Optional, Union

Address = Union[IPv4Address, IPv6Address]

# Substituted when public address discovery fails. Never geolocatable.
FALLBACK_ADDRESS: Address = ip_address("::1")

LABEL_SEPARATOR = ", "


class Degradation(Enum):
    """Non-fatal diagnostics raised by a pipeline run.

    A degraded run still produces a complete state; these flags let a
    caller tell sparse results apart from genuinely empty ones.
    """

    ADDRESS_FALLBACK = auto()
    GEO_NOT_FOUND = auto()
    POSITION_UNKNOWN = auto()
    STOPS_UNAVAILABLE = auto()


@dataclass(frozen=True, slots=True)
class Position:
    """GPS coordinates. ``Position.UNKNOWN`` (0, 0) means "not resolved"."""

    UNKNOWN: ClassVar[Position]

    latitude: float = 0.0
    longitude: float = 0.0

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )

    @property
    def is_known(self) -> bool:
        """False for the (0, 0) sentinel."""
        return (self.latitude, self.longitude) != (0.0, 0.0)


Position.UNKNOWN = Position(0.0, 0.0)


@dataclass(frozen=True, slots=True)
class GeoRecord:
    """Result of looking up an address in the offline geo database.

    Name sets map a locale key (e.g. ``"en"``) to a display string.

    Attributes:
        city_names: Localized city names, empty if the record has no city
        subdivisions: Localized subdivision names, coarse to fine
        postal_code: Postal code, if known
        location: Coordinates, if the record carries both of them
    """

    city_names: Mapping[str, str] = field(default_factory=dict)
    subdivisions: tuple[Mapping[str, str], ...] = field(default_factory=tuple)
    postal_code: Optional[str] = None
    location: Optional[Position] = None


@dataclass(frozen=True, slots=True)
class PlaceLabels:
    """Ordered display strings: city, subdivisions, postal code."""

    labels: tuple[str, ...] = field(default_factory=tuple)

    def render(self, separator: str = LABEL_SEPARATOR) -> str:
        """Join the labels into one display string."""
        return separator.join(self.labels)

    def __iter__(self):
        return iter(self.labels)

    def __len__(self) -> int:
        return len(self.labels)


@dataclass(frozen=True, slots=True)
class Stop:
    """A transit stop as ranked by the remote API.

    Attributes:
        name: Display name of the stop
        code: Short stop code
        distance: Distance from the queried position, as reported
    """

    name: str
    code: str
    distance: float

    def __str__(self) -> str:
        return f"Name: {self.name}, Code: {self.code}, Distance: {self.distance}"


@dataclass(frozen=True, slots=True)
class StopLookup:
    """Outcome of a stop query.

    ``stops`` is always a tuple. ``error`` is set when the lookup failed
    and the empty tuple is a substitute rather than a real answer.
    """

    stops: tuple[Stop, ...] = field(default_factory=tuple)
    error: Optional[str] = None

    @property
    def degraded(self) -> bool:
        """Check if the lookup failed."""
        return self.error is not None


@dataclass(frozen=True, slots=True)
class ResolutionState:
    """Everything the presentation layer renders.

    Attributes:
        address: Current public address (or the fallback sentinel)
        place: Rendered place labels
        position: Current position (or ``Position.UNKNOWN``)
        destination: Free-form destination typed by the user
        stops: Nearby stops in server order
    """

    address: Address = FALLBACK_ADDRESS
    place: str = ""
    position: Position = Position.UNKNOWN
    destination: str = ""
    stops: tuple[Stop, ...] = field(default_factory=tuple)
