"""Dependency injection container.

This module provides a simple DI container without external frameworks.
It allows registering and resolving dependencies for the application.

Design principles:
1. No magic - explicit registration and resolution
2. Testable - easy to swap implementations
3. Lazy loading - adapters instantiated on first use
4. Thread-safe - the resolution service uses a worker thread
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

import requests

from .config import AppConfig, get_config


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        service = container.resolve(ResolutionService)

        # Testing
        container = Container()
        container.register(StopFinderPort, lambda: FakeStopFinder())
        finder = container.resolve(StopFinderPort)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            if singleton:
                self._singleton_types.add(port_type)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def close(self) -> None:
        """Close the service, the geo database and the shared HTTP session.

        Only what was actually created is closed. The service closes the
        geo database it was given.
        """
        from .ports.geolocation import GeoLocatorPort
        from .services import ResolutionService

        with self._lock:
            service = self._singletons.pop(ResolutionService, None)
            locator = self._singletons.pop(GeoLocatorPort, None)
            session = self._singletons.pop(requests.Session, None)
        if service is not None:
            service.close()
        elif locator is not None:
            locator.close()
        if session is not None:
            session.close()

    @classmethod
    def create_default(cls, config: Optional[AppConfig] = None) -> Container:
        """Create a container with default production bindings.

        Nothing is opened until first resolution. Resolving
        ``GeoLocatorPort`` (or ``ResolutionService``) opens the geo
        database and raises GeoDatabaseError if that fails.

        Args:
            config: Optional configuration override.

        Returns:
            A configured Container instance.
        """
        from .adapters.address import PublicIpResolver
        from .adapters.geolocation import MaxMindGeoLocator
        from .adapters.transit import CumtdStopFinder
        from .ports.address import AddressResolverPort
        from .ports.geolocation import GeoLocatorPort
        from .ports.transit import StopFinderPort
        from .services import ResolutionService

        config = config or get_config()
        container = cls(config=config)

        # One HTTP session shared by every network adapter
        container.register(requests.Session, requests.Session)

        container.register(
            AddressResolverPort,
            lambda: PublicIpResolver(
                config.discovery, container.resolve(requests.Session)
            ),
        )
        container.register(
            GeoLocatorPort,
            lambda: MaxMindGeoLocator.open(
                config.geo.database_path, locale=config.geo.locale
            ),
        )
        container.register(
            StopFinderPort,
            lambda: CumtdStopFinder(
                config.transit, container.resolve(requests.Session)
            ),
        )

        def create_resolution_service() -> ResolutionService:
            # Geo database first: it is the only fatal dependency
            return ResolutionService(
                geo_locator=container.resolve(GeoLocatorPort),
                address_resolver=container.resolve(AddressResolverPort),
                stop_finder=container.resolve(StopFinderPort),
                max_results=config.transit.max_results,
                find_stops_on_start=config.find_stops_on_start,
            )

        container.register(ResolutionService, create_resolution_service)

        return container
