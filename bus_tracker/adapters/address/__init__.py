"""Address adapters - Implementations of AddressResolverPort.

Available implementations:
- PublicIpResolver: Plain-text "what is my IP" HTTP service
"""

from .public_ip_adapter import PublicIpResolver

__all__ = ["PublicIpResolver"]
