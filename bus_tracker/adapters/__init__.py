"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the application to external systems:
- Public address discovery (ipify over HTTP)
- Offline geo database (MaxMind GeoLite2/GeoIP2 City)
- Transit stop lookup (CUMTD developer API)
"""
