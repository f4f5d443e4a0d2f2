"""Transit adapters - Implementations of StopFinderPort.

Available implementations:
- CumtdStopFinder: CUMTD developer API (getstopsbylatlon)
"""

from .cumtd_adapter import CumtdStopFinder

__all__ = ["CumtdStopFinder"]
