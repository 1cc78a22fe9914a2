"""
Meter Errors - Domain-specific error types.

Error hierarchy:
    MeterError (base)
    ├── LayoutError
    └── TessellationError
"""

from __future__ import annotations

from typing import Any


class MeterError(Exception):
    """Base error for all meter-related errors."""
    
    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class LayoutError(MeterError, ValueError):
    """
    Raised when a layout cannot be built.
    
    Examples:
    - Zero channels
    - Azimuth and elevation sequences of different lengths
    """


class TessellationError(MeterError):
    """
    Raised when the spherical Voronoi solver rejects a set of sites.
    
    This is recoverable: the meter keeps the geometry it published
    before the failed call.
    
    Typical causes:
    - All sites on one great circle (rank-deficient input)
    - Two sites closer than the solver threshold
    """
    
    def __init__(
        self,
        message: str,
        site_count: int = 0,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.site_count = site_count
