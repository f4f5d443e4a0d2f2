"""Top-level package for the Bus Tracker project.

Resolves the device's public IP address to an approximate location with
an offline geo database, describes that location in words and asks a
transit API for nearby stops. The presentation layer drives everything
through ``services.ResolutionService``.
"""
