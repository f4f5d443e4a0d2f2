"""CUMTD stop finder adapter.

Queries the CUMTD ``getstopsbylatlon`` endpoint for stops near a
position. Every failure, from a missing credential to a body that does
not match the expected shape, produces an empty StopLookup carrying the
reason. Nothing is raised to the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

import requests
from pydantic import BaseModel, ValidationError

from ...config import TransitConfig, get_config
from ...domain.models import Position, Stop, StopLookup


class StopPayload(BaseModel):
    """One entry of the ``stops`` array. Extra fields are ignored."""

    stop_name: str
    code: str
    distance: float


class StopsResponse(BaseModel):
    """Body of a ``getstopsbylatlon`` response."""

    stops: List[StopPayload]


@dataclass
class CumtdStopFinder:
    """Stop finder backed by the CUMTD developer API.

    Attributes:
        config: Endpoint, credential and timeout
        session: HTTP session, shared with the other network adapters
    """

    config: TransitConfig = field(default_factory=lambda: get_config().transit)
    session: requests.Session = field(default_factory=requests.Session)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def find_nearby(self, position: Position, max_results: int) -> tuple[Stop, ...]:
        """Return stops near ``position``, or an empty tuple on any failure."""
        return self.lookup(position, max_results).stops

    def lookup(self, position: Position, max_results: int) -> StopLookup:
        """Query stops near ``position``.

        Args:
            position: Where to search. ``Position.UNKNOWN`` is not queried.
            max_results: Maximum number of stops to request.

        Returns:
            StopLookup with stops in server order, or an empty one with
            ``error`` set.
        """
        if self.config.api_key is None or not self.config.api_key.get_secret_value():
            return self._degraded("Transit API key is not configured")

        if not position.is_known:
            return self._degraded("Position is unknown")

        if max_results < 1:
            return self._degraded(f"Invalid max_results: {max_results}")

        params = {
            "key": self.config.api_key.get_secret_value(),
            "lat": str(position.latitude),
            "lon": str(position.longitude),
            "count": str(max_results),
        }

        try:
            response = self.session.get(
                self.config.stops_url,
                params=params,
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            # Exception text may contain the URL, which carries the key
            return self._degraded(f"Stop request failed: {type(e).__name__}")

        try:
            body = response.json()
        except ValueError:
            return self._degraded("Stop response is not JSON")

        try:
            payload = StopsResponse.model_validate(body)
        except ValidationError as e:
            return self._degraded(
                f"Stop response has unexpected shape ({e.error_count()} errors)"
            )

        stops = tuple(
            Stop(name=item.stop_name, code=item.code, distance=item.distance)
            for item in payload.stops
        )
        self._logger.info(
            "Stops found",
            extra={
                "lat": position.latitude,
                "lon": position.longitude,
                "count": len(stops),
            },
        )
        return StopLookup(stops=stops)

    def _degraded(self, reason: str) -> StopLookup:
        self._logger.warning("Stop lookup degraded", extra={"reason": reason})
        return StopLookup(error=reason)
