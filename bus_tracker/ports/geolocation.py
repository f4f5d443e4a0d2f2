"""Geolocation port - Abstraction for offline address-to-place lookup.

This protocol defines the contract for the offline geo database,
allowing the MaxMind reader to be replaced by a fake in tests.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import Address, GeoRecord, PlaceLabels, Position


class GeoLocatorPort(Protocol):
    """Port for offline geolocation.

    Implementation: adapters/geolocation/maxmind_adapter.py

    The database is opened once at startup; failing to open it is fatal
    and happens before this port is ever used.
    """

    def lookup(self, address: Address) -> Optional[GeoRecord]:
        """Look up an address.

        Args:
            address: The address to locate.

        Returns:
            GeoRecord, or None if the address is unknown or undecodable.
        """
        ...

    def derive_position(self, record: Optional[GeoRecord]) -> Position:
        """Return the record's coordinates or ``Position.UNKNOWN``."""
        ...

    def derive_labels(self, record: Optional[GeoRecord]) -> PlaceLabels:
        """Return ordered place labels for the record."""
        ...

    def close(self) -> None:
        """Release the database handle."""
        ...
