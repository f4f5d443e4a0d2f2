"""Public IP resolver adapter.

Asks a plain-text "what is my IP" service for the caller's public
address. Discovery is not allowed to stop the pipeline: any failure
returns FALLBACK_ADDRESS and logs a warning. No retry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from ipaddress import ip_address

import requests

from ...config import AddressDiscoveryConfig, get_config
from ...domain.models import FALLBACK_ADDRESS, Address


@dataclass
class PublicIpResolver:
    """Address resolver backed by an HTTP discovery service.

    Attributes:
        config: Discovery endpoint and timeout
        session: HTTP session, shared with the other network adapters
    """

    config: AddressDiscoveryConfig = field(
        default_factory=lambda: get_config().discovery
    )
    session: requests.Session = field(default_factory=requests.Session)

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def resolve(self) -> Address:
        """Return the public address, or FALLBACK_ADDRESS on failure."""
        try:
            response = self.session.get(
                self.config.service_url,
                timeout=self.config.timeout_seconds,
            )
            response.raise_for_status()
            address = ip_address(response.text.strip())
        except requests.RequestException as e:
            self._logger.warning(
                "Address discovery request failed, using fallback",
                extra={"url": self.config.service_url, "error": str(e)},
            )
            return FALLBACK_ADDRESS
        except ValueError as e:
            self._logger.warning(
                "Address discovery returned an invalid address, using fallback",
                extra={"url": self.config.service_url, "error": str(e)},
            )
            return FALLBACK_ADDRESS

        self._logger.debug("Public address resolved", extra={"address": str(address)})
        return address
