"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the resolution service and the
external systems it drives: the public address discovery service, the
offline geo database and the transit stop API.
"""

from .address import AddressResolverPort
from .geolocation import GeoLocatorPort
from .transit import StopFinderPort

__all__ = [
    "AddressResolverPort",
    "GeoLocatorPort",
    "StopFinderPort",
]
