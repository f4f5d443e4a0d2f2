"""MaxMind offline geolocation adapter.

Wraps a ``geoip2`` database reader with:
- Fatal, explicit errors when the database cannot be opened
- Lookup misses and decode errors folded into ``None``
- Conversion of City responses into domain GeoRecords
- Deterministic, locale-keyed label selection
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import geoip2.database
from geoip2.errors import AddressNotFoundError, GeoIP2Error
from maxminddb import InvalidDatabaseError

from ...domain.errors import GeoDatabaseCorruptError, GeoDatabaseNotFoundError
from ...domain.models import Address, GeoRecord, PlaceLabels, Position
from ...domain.places import DEFAULT_LOCALE, derive_labels, derive_position


@dataclass
class MaxMindGeoLocator:
    """Geo locator backed by a MaxMind City database.

    Build it with ``MaxMindGeoLocator.open(path)``. The reader is
    read-only and may be shared by every lookup for the life of the
    process.

    Attributes:
        reader: Open geoip2 database reader
        locale: Locale key used to pick display names
        database_path: Where the database was loaded from
    """

    reader: geoip2.database.Reader
    locale: str = DEFAULT_LOCALE
    database_path: str = ""

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    @classmethod
    def open(
        cls, path: Union[str, Path], locale: str = DEFAULT_LOCALE
    ) -> MaxMindGeoLocator:
        """Open the database at ``path``.

        Args:
            path: Path to a ``.mmdb`` City database.
            locale: Locale key used to pick display names.

        Returns:
            A ready MaxMindGeoLocator.

        Raises:
            GeoDatabaseNotFoundError: If the file does not exist.
            GeoDatabaseCorruptError: If the file is not a readable City database.
        """
        db_path = Path(path)
        if not db_path.is_file():
            raise GeoDatabaseNotFoundError(
                f"Geo database not found at {db_path}",
                database_path=str(db_path),
            )

        try:
            reader = geoip2.database.Reader(str(db_path), locales=[locale])
        except (InvalidDatabaseError, OSError, ValueError) as e:
            raise GeoDatabaseCorruptError(
                f"Geo database at {db_path} is corrupt or unreadable",
                database_path=str(db_path),
                cause=e,
            )

        database_type = reader.metadata().database_type
        if "City" not in database_type:
            reader.close()
            raise GeoDatabaseCorruptError(
                f"Geo database at {db_path} is a {database_type} database, "
                "expected a City database",
                database_path=str(db_path),
            )

        logging.getLogger(__name__).info(
            "Geo database opened",
            extra={"path": str(db_path), "database_type": database_type},
        )
        return cls(reader=reader, locale=locale, database_path=str(db_path))

    def lookup(self, address: Address) -> Optional[GeoRecord]:
        """Look up an address.

        Args:
            address: The address to locate.

        Returns:
            GeoRecord, or None when the address is not in the database or
            the entry cannot be decoded.
        """
        try:
            response = self.reader.city(str(address))
        except AddressNotFoundError:
            self._logger.info(
                "Address not found in geo database",
                extra={"address": str(address)},
            )
            return None
        except (GeoIP2Error, InvalidDatabaseError, ValueError) as e:
            self._logger.warning(
                "Geo lookup failed",
                extra={"address": str(address), "error": str(e)},
            )
            return None

        return self._to_record(response)

    def _to_record(self, response: Any) -> GeoRecord:
        """Convert a geoip2 City response into a GeoRecord."""
        location: Optional[Position] = None
        latitude = response.location.latitude
        longitude = response.location.longitude
        if latitude is not None and longitude is not None:
            try:
                location = Position(float(latitude), float(longitude))
            except ValueError as e:
                self._logger.warning(
                    "Geo record has invalid coordinates",
                    extra={"error": str(e)},
                )

        return GeoRecord(
            city_names=dict(response.city.names or {}),
            subdivisions=tuple(
                dict(subdivision.names or {}) for subdivision in response.subdivisions
            ),
            postal_code=response.postal.code or None,
            location=location,
        )

    def derive_position(self, record: Optional[GeoRecord]) -> Position:
        return derive_position(record)

    def derive_labels(self, record: Optional[GeoRecord]) -> PlaceLabels:
        return derive_labels(record, self.locale)

    def close(self) -> None:
        """Close the underlying database reader."""
        self.reader.close()

    def __enter__(self) -> MaxMindGeoLocator:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
