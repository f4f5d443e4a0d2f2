"""Geolocation adapters - Implementations of GeoLocatorPort.

Available implementations:
- MaxMindGeoLocator: Offline MaxMind GeoLite2/GeoIP2 City database
"""

from .maxmind_adapter import MaxMindGeoLocator

__all__ = ["MaxMindGeoLocator"]
