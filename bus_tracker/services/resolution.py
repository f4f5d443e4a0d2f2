"""Resolution service - Main orchestrator.

Owns the ResolutionState and runs the pipeline

    address -> geo record -> position/labels -> nearby stops

on behalf of the presentation layer. Every change to the state goes
through a validated StateEvent and the single ``apply_event`` reducer.
Pipeline runs and stop lookups are serialized on one long-lived worker
thread; a refresh requested while another is in flight joins the running
one instead of starting a second.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, List, Optional

from ..domain.events import (
    AddressChanged,
    DestinationChanged,
    PlaceChanged,
    PositionChanged,
    StateEvent,
    StopsChanged,
    apply_event,
)
from ..domain.models import (
    FALLBACK_ADDRESS,
    Degradation,
    ResolutionState,
    Stop,
)
from ..ports.address import AddressResolverPort
from ..ports.geolocation import GeoLocatorPort
from ..ports.transit import StopFinderPort

StateListener = Callable[[StateEvent, ResolutionState], None]


@dataclass
class ResolutionService:
    """Orchestrates address discovery, geolocation and stop lookup.

    Attributes:
        address_resolver: Discovers the public address
        geo_locator: Offline geo database, already opened
        stop_finder: Remote stop lookup
        max_results: Number of stops requested per lookup
        find_stops_on_start: Whether ``initialize`` also looks up stops
    """

    address_resolver: AddressResolverPort
    geo_locator: GeoLocatorPort
    stop_finder: StopFinderPort
    max_results: int = 5
    find_stops_on_start: bool = True

    _state: ResolutionState = field(default_factory=ResolutionState, repr=False)
    _diagnostics: FrozenSet[Degradation] = field(default=frozenset(), repr=False)
    _listeners: List[StateListener] = field(default_factory=list, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _executor: ThreadPoolExecutor = field(init=False, repr=False)
    _pending_refresh: Optional[Future[ResolutionState]] = field(
        default=None, repr=False
    )
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="bus-tracker"
        )

    @property
    def state(self) -> ResolutionState:
        """Current state snapshot."""
        with self._lock:
            return self._state

    @property
    def diagnostics(self) -> FrozenSet[Degradation]:
        """Degradations observed by the last pipeline run."""
        with self._lock:
            return self._diagnostics

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener`` to be called after every applied event.

        Listeners run on the thread that applied the events, after the
        state lock is released. A pipeline run commits all of its events
        before the first listener is called, so ``state`` already holds
        the complete result; each listener call still receives the
        snapshot as it was right after its own event.

        Returns:
            A callable that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: StateEvent) -> ResolutionState:
        """Apply one event and notify listeners.

        Raises:
            InvalidEventError: If ``event`` is not a state event.
        """
        return self._commit([event])

    def initialize(self) -> ResolutionState:
        """Run the full pipeline once and populate the state.

        Stop lookup is skipped when ``find_stops_on_start`` is False.
        """
        self._logger.info("Initializing resolution state")
        return self._executor.submit(
            self._run_pipeline, self.find_stops_on_start
        ).result()

    def refresh(self) -> ResolutionState:
        """Re-run the full pipeline, blocking until it finishes."""
        return self.submit_refresh().result()

    def submit_refresh(self) -> Future[ResolutionState]:
        """Schedule a full pipeline run on the service worker.

        While a refresh is in flight the same future is returned, so
        repeated requests never overlap.
        """
        with self._lock:
            pending = self._pending_refresh
            if pending is not None and not pending.done():
                self._logger.debug("Refresh already in flight, joining it")
                return pending

            future = self._executor.submit(self._run_pipeline, True)
            self._pending_refresh = future
            return future

    def find_stops(self, max_results: Optional[int] = None) -> tuple[Stop, ...]:
        """Look up stops near the current position and store them.

        Runs on the service worker, so it never overlaps a refresh and
        always queries the position that refresh left behind. Must not
        be called from a state listener.
        """
        count = self.max_results if max_results is None else max_results
        return self._executor.submit(self._lookup_stops, count).result()

    def set_destination(self, destination: str) -> ResolutionState:
        """Store the user's destination text.

        Raises:
            InvalidEventError: If the text is not a string or is too long.
        """
        return self.dispatch(DestinationChanged(destination))

    def _commit(
        self,
        events: List[StateEvent],
        diagnostics: Optional[FrozenSet[Degradation]] = None,
    ) -> ResolutionState:
        # All or nothing: a rejected event leaves the state untouched
        with self._lock:
            state = self._state
            applied = []
            for event in events:
                state = apply_event(state, event)
                applied.append((event, state))
            self._state = state
            if diagnostics is not None:
                self._diagnostics = diagnostics
            listeners = list(self._listeners)

        for event, snapshot in applied:
            for listener in listeners:
                try:
                    listener(event, snapshot)
                except Exception:
                    self._logger.exception(
                        "State listener failed",
                        extra={"event": type(event).__name__},
                    )
        return state

    def _lookup_stops(self, count: int) -> tuple[Stop, ...]:
        lookup = self.stop_finder.lookup(self.state.position, count)
        # Only the worker writes diagnostics
        diagnostics = set(self.diagnostics)
        diagnostics.discard(Degradation.STOPS_UNAVAILABLE)
        if lookup.degraded:
            diagnostics.add(Degradation.STOPS_UNAVAILABLE)
        self._commit([StopsChanged(lookup.stops)], frozenset(diagnostics))
        return lookup.stops

    def _run_pipeline(self, with_stops: bool) -> ResolutionState:
        degradations: set[Degradation] = set()

        address = self.address_resolver.resolve()
        if address == FALLBACK_ADDRESS:
            degradations.add(Degradation.ADDRESS_FALLBACK)

        record = self.geo_locator.lookup(address)
        if record is None:
            degradations.add(Degradation.GEO_NOT_FOUND)

        position = self.geo_locator.derive_position(record)
        if not position.is_known:
            degradations.add(Degradation.POSITION_UNKNOWN)
        place = self.geo_locator.derive_labels(record).render()

        stops: tuple[Stop, ...] = ()
        if with_stops:
            lookup = self.stop_finder.lookup(position, self.max_results)
            stops = lookup.stops
            if lookup.degraded:
                degradations.add(Degradation.STOPS_UNAVAILABLE)

        events: List[StateEvent] = [
            AddressChanged(address),
            PlaceChanged(place),
            PositionChanged(position),
        ]
        if with_stops:
            events.append(StopsChanged(stops))
        state = self._commit(events, frozenset(degradations))

        if degradations:
            self._logger.warning(
                "Resolution degraded",
                extra={"degradations": sorted(d.name for d in degradations)},
            )
        self._logger.info(
            "Resolution complete",
            extra={
                "address": str(address),
                "place": place,
                "stops": len(state.stops),
            },
        )
        return state

    def close(self) -> None:
        """Stop the worker and release the geo database."""
        self._executor.shutdown(wait=True)
        self.geo_locator.close()

    def __enter__(self) -> ResolutionService:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
