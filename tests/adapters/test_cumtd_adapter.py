"""Tests for the CUMTD stop finder adapter."""

import os
import sys
from unittest.mock import MagicMock

import pytest
import requests

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from bus_tracker.adapters.transit import CumtdStopFinder
from bus_tracker.config import TransitConfig
from bus_tracker.domain.models import Position, Stop

URBANA = Position(40.11, -88.20)


def _response(body=None, status_error=None, json_error=None):
    response = MagicMock()
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = body
    return response


class TestCumtdStopFinder:
    """Test suite for CumtdStopFinder."""

    @pytest.fixture
    def session(self):
        return MagicMock(spec=requests.Session)

    @pytest.fixture
    def config(self):
        return TransitConfig(
            api_key="secret-key",
            stops_url="https://transit.example.test/getstopsbylatlon",
            timeout_seconds=3.0,
        )

    @pytest.fixture
    def finder(self, config, session):
        return CumtdStopFinder(config=config, session=session)

    def test_single_stop(self, finder, session):
        session.get.return_value = _response(
            {"stops": [{"stop_name": "Illinois Terminal", "code": "IT", "distance": 0.3}]}
        )

        stops = finder.find_nearby(URBANA, 5)

        assert stops == (Stop(name="Illinois Terminal", code="IT", distance=0.3),)

    def test_request_parameters(self, finder, session):
        session.get.return_value = _response({"stops": []})

        finder.find_nearby(URBANA, 7)

        session.get.assert_called_once_with(
            "https://transit.example.test/getstopsbylatlon",
            params={"key": "secret-key", "lat": "40.11", "lon": "-88.2", "count": "7"},
            timeout=3.0,
        )

    def test_keeps_server_order(self, finder, session):
        session.get.return_value = _response(
            {
                "stops": [
                    {"stop_name": "B", "code": "B", "distance": 0.9},
                    {"stop_name": "A", "code": "A", "distance": 0.1},
                    {"stop_name": "B", "code": "B", "distance": 0.9},
                ]
            }
        )

        codes = [stop.code for stop in finder.find_nearby(URBANA, 5)]

        assert codes == ["B", "A", "B"]

    def test_extra_fields_are_ignored(self, finder, session):
        session.get.return_value = _response(
            {
                "status": {"code": 200},
                "stops": [
                    {"stop_id": "IT", "stop_name": "Illinois Terminal", "code": "IT", "distance": 12}
                ],
            }
        )
        assert finder.find_nearby(URBANA, 5)[0].distance == 12.0

    def test_empty_result_is_not_degraded(self, finder, session):
        session.get.return_value = _response({"stops": []})

        lookup = finder.lookup(URBANA, 5)

        assert lookup.stops == ()
        assert not lookup.degraded

    def test_http_500_returns_empty(self, finder, session):
        session.get.return_value = _response(
            status_error=requests.HTTPError("500 Server Error")
        )

        lookup = finder.lookup(URBANA, 5)

        assert lookup.stops == ()
        assert lookup.degraded

    def test_unparsable_body_returns_empty(self, finder, session):
        session.get.return_value = _response(json_error=ValueError("Expecting value"))
        assert finder.find_nearby(URBANA, 5) == ()

    def test_wrong_shape_returns_empty(self, finder, session):
        session.get.return_value = _response({"stops": [{"stop_name": "IT"}]})
        assert finder.find_nearby(URBANA, 5) == ()

    def test_missing_stops_key_returns_empty(self, finder, session):
        session.get.return_value = _response({"error": "bad key"})
        assert finder.find_nearby(URBANA, 5) == ()

    def test_non_object_body_returns_empty(self, finder, session):
        session.get.return_value = _response(["not", "an", "object"])
        assert finder.find_nearby(URBANA, 5) == ()

    def test_network_error_returns_empty(self, finder, session):
        session.get.side_effect = requests.ConnectionError("unreachable")
        assert finder.find_nearby(URBANA, 5) == ()

    def test_missing_key_returns_empty_without_request(self, session):
        finder = CumtdStopFinder(config=TransitConfig(api_key=None), session=session)

        lookup = finder.lookup(URBANA, 5)

        assert lookup.stops == ()
        assert lookup.degraded
        session.get.assert_not_called()

    def test_unknown_position_is_not_queried(self, finder, session):
        lookup = finder.lookup(Position.UNKNOWN, 5)

        assert lookup.stops == ()
        assert lookup.degraded
        session.get.assert_not_called()

    def test_invalid_max_results(self, finder, session):
        assert finder.find_nearby(URBANA, 0) == ()
        session.get.assert_not_called()

    def test_error_reason_does_not_leak_key(self, finder, session):
        session.get.side_effect = requests.HTTPError(
            "401 for url https://transit.example.test/?key=secret-key"
        )

        lookup = finder.lookup(URBANA, 5)

        assert "secret-key" not in lookup.error
