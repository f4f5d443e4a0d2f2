"""Transit port - Abstraction for nearby stop lookup."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import Position, Stop, StopLookup


class StopFinderPort(Protocol):
    """Port for finding transit stops near a position.

    Implementation: adapters/transit/cumtd_adapter.py

    Stop lookup degrades silently: every failure yields an empty result,
    never an exception.
    """

    def lookup(self, position: Position, max_results: int) -> StopLookup:
        """Query stops near ``position``.

        Args:
            position: Where to search.
            max_results: Maximum number of stops to request.

        Returns:
            StopLookup with stops in server order and the failure reason,
            if any.
        """
        ...

    def find_nearby(self, position: Position, max_results: int) -> tuple[Stop, ...]:
        """Same as ``lookup`` but returns only the stops."""
        ...
