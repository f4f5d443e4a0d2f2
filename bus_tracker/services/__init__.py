"""Services layer - Application orchestration.

Available services:
- ResolutionService: Owns the resolution state and runs the
  address -> geo -> stops pipeline
"""

from .resolution import ResolutionService

__all__ = ["ResolutionService"]
