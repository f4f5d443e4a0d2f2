"""Pure derivations from a geo record.

These functions turn a GeoRecord into the values the orchestrator keeps:
a Position and an ordered list of place labels. They never raise on
missing data; absent fields simply contribute nothing.
"""

from __future__ import annotations

from typing import List, Mapping, Optional

from .models import LABEL_SEPARATOR, GeoRecord, PlaceLabels, Position

DEFAULT_LOCALE = "en"


def derive_position(record: Optional[GeoRecord]) -> Position:
    """Return the record's coordinates, or ``Position.UNKNOWN``."""
    if record is None or record.location is None:
        return Position.UNKNOWN
    return record.location


def pick_name(names: Mapping[str, str], locale: str = DEFAULT_LOCALE) -> Optional[str]:
    """Pick the display name for ``locale``.

    A name set without that locale yields None rather than whichever
    entry happens to iterate first.
    """
    name = names.get(locale)
    if not name:
        return None
    return name


def derive_labels(
    record: Optional[GeoRecord], locale: str = DEFAULT_LOCALE
) -> PlaceLabels:
    """Build place labels: city, then subdivisions coarse to fine, then postal code.

    Args:
        record: Geo record to describe, or None for a lookup miss.
        locale: Locale key used to pick one name per name set.

    Returns:
        PlaceLabels, empty when nothing is known.
    """
    if record is None:
        return PlaceLabels()

    labels: List[str] = []

    city = pick_name(record.city_names, locale)
    if city:
        labels.append(city)

    for names in record.subdivisions:
        subdivision = pick_name(names, locale)
        if subdivision:
            labels.append(subdivision)

    if record.postal_code:
        labels.append(record.postal_code)

    return PlaceLabels(tuple(labels))


def render_labels(labels: PlaceLabels, separator: str = LABEL_SEPARATOR) -> str:
    """Render labels as one display string."""
    return labels.render(separator)
