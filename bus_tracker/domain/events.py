"""State events and the reducer that applies them.

Each event replaces exactly one field of ResolutionState. Payloads are
validated when the event is built, so an event that exists is always
safe to apply; an invalid payload raises InvalidEventError and never
reaches the state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from ipaddress import ip_address
from typing import Any, Iterable, Union

from .errors import InvalidEventError
from .models import Address, Position, ResolutionState, Stop

MAX_DESTINATION_LENGTH = 256


@dataclass(frozen=True, slots=True)
class AddressChanged:
    """The public address changed."""

    address: Address

    def __post_init__(self) -> None:
        try:
            parsed = ip_address(self.address)
        except ValueError as e:
            raise InvalidEventError(
                f"Not an IP address: {self.address!r}",
                event_type=type(self).__name__,
                cause=e,
            )
        object.__setattr__(self, "address", parsed)


@dataclass(frozen=True, slots=True)
class PlaceChanged:
    """The rendered place description changed."""

    place: str

    def __post_init__(self) -> None:
        _require_str(self, self.place)


@dataclass(frozen=True, slots=True)
class PositionChanged:
    """The resolved position changed."""

    position: Position

    def __post_init__(self) -> None:
        if not isinstance(self.position, Position):
            raise InvalidEventError(
                f"Expected a Position, got {type(self.position).__name__}",
                event_type=type(self).__name__,
            )


@dataclass(frozen=True, slots=True)
class DestinationChanged:
    """The user typed a new destination."""

    destination: str

    def __post_init__(self) -> None:
        _require_str(self, self.destination)
        cleaned = self.destination.strip()
        if len(cleaned) > MAX_DESTINATION_LENGTH:
            raise InvalidEventError(
                f"Destination longer than {MAX_DESTINATION_LENGTH} characters",
                event_type=type(self).__name__,
            )
        object.__setattr__(self, "destination", cleaned)


@dataclass(frozen=True, slots=True)
class StopsChanged:
    """A new list of nearby stops arrived."""

    stops: tuple[Stop, ...]

    def __post_init__(self) -> None:
        if isinstance(self.stops, (str, bytes)) or not isinstance(
            self.stops, Iterable
        ):
            raise InvalidEventError(
                "Stops must be a sequence of Stop",
                event_type=type(self).__name__,
            )
        stops = tuple(self.stops)
        for stop in stops:
            if not isinstance(stop, Stop):
                raise InvalidEventError(
                    f"Expected a Stop, got {type(stop).__name__}",
                    event_type=type(self).__name__,
                )
        object.__setattr__(self, "stops", stops)


StateEvent = Union[
    AddressChanged, PlaceChanged, PositionChanged, DestinationChanged, StopsChanged
]


def _require_str(event: Any, value: Any) -> None:
    if not isinstance(value, str):
        raise InvalidEventError(
            f"Expected a string, got {type(value).__name__}",
            event_type=type(event).__name__,
        )


def apply_event(state: ResolutionState, event: StateEvent) -> ResolutionState:
    """Return a copy of ``state`` with the field named by ``event`` replaced.

    Raises:
        InvalidEventError: If ``event`` is not a known state event.
    """
    if isinstance(event, AddressChanged):
        return replace(state, address=event.address)
    if isinstance(event, PlaceChanged):
        return replace(state, place=event.place)
    if isinstance(event, PositionChanged):
        return replace(state, position=event.position)
    if isinstance(event, DestinationChanged):
        return replace(state, destination=event.destination)
    if isinstance(event, StopsChanged):
        return replace(state, stops=event.stops)
    raise InvalidEventError(
        f"Unknown event: {event!r}",
        event_type=type(event).__name__,
    )
