"""Address port - Abstraction for public address discovery."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import Address


class AddressResolverPort(Protocol):
    """Port for discovering the caller's public network address.

    Implementation: adapters/address/public_ip_adapter.py
    """

    def resolve(self) -> Address:
        """Return the current public address.

        Never raises. On any failure the fallback sentinel address
        (``FALLBACK_ADDRESS``) is returned.
        """
        ...
