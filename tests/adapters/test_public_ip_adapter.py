"""Tests for the public IP resolver adapter."""

import os
import sys
from ipaddress import ip_address
from unittest.mock import MagicMock

import pytest
import requests

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "../..")))

from bus_tracker.adapters.address import PublicIpResolver
from bus_tracker.config import AddressDiscoveryConfig
from bus_tracker.domain.models import FALLBACK_ADDRESS


def _response(text="", status_error=None):
    response = MagicMock()
    response.text = text
    if status_error is not None:
        response.raise_for_status.side_effect = status_error
    return response


class TestPublicIpResolver:
    """Test suite for PublicIpResolver."""

    @pytest.fixture
    def session(self):
        return MagicMock(spec=requests.Session)

    @pytest.fixture
    def resolver(self, session):
        config = AddressDiscoveryConfig(
            service_url="https://ip.example.test", timeout_seconds=2.5
        )
        return PublicIpResolver(config=config, session=session)

    def test_resolves_ipv4(self, resolver, session):
        session.get.return_value = _response("203.0.113.7\n")

        assert resolver.resolve() == ip_address("203.0.113.7")
        session.get.assert_called_once_with("https://ip.example.test", timeout=2.5)

    def test_resolves_ipv6(self, resolver, session):
        session.get.return_value = _response("2001:db8::42")
        assert resolver.resolve() == ip_address("2001:db8::42")

    def test_timeout_returns_fallback(self, resolver, session):
        session.get.side_effect = requests.Timeout("timed out")
        assert resolver.resolve() == FALLBACK_ADDRESS

    def test_connection_error_returns_fallback(self, resolver, session):
        session.get.side_effect = requests.ConnectionError("no route")
        assert resolver.resolve() == FALLBACK_ADDRESS

    def test_http_error_returns_fallback(self, resolver, session):
        session.get.return_value = _response(
            "oops", status_error=requests.HTTPError("503")
        )
        assert resolver.resolve() == FALLBACK_ADDRESS

    def test_malformed_body_returns_fallback(self, resolver, session):
        session.get.return_value = _response("<html>hello</html>")
        assert resolver.resolve() == FALLBACK_ADDRESS

    def test_empty_body_returns_fallback(self, resolver, session):
        session.get.return_value = _response("")
        assert resolver.resolve() == FALLBACK_ADDRESS

    def test_no_retry(self, resolver, session):
        session.get.side_effect = requests.Timeout("timed out")
        resolver.resolve()
        assert session.get.call_count == 1

    def test_fallback_is_loopback(self):
        assert FALLBACK_ADDRESS.is_loopback
