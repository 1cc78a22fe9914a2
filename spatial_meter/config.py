"""
Meter configuration.

Defines the tunables shared by the energy tracker and the geometry builders.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass


@dataclass
class MeterConfig:
    """Configuration for a spatial meter.
    
    Args:
        vector_size: Number of process calls between hard peak resets.
        floor_db: Energy reported for a channel whose peak is zero.
        overload_threshold: Peak level above which the overload led latches.
        pole_epsilon: Elevation offset of the virtual site closing the top cap.
        pole_clearance: Chord distance under which a channel is considered
            to sit on the pole already.
        site_clearance: Chord distance under which two channels share one
            Voronoi site.
        voronoi_threshold: Duplicate-site threshold handed to the solver.
        normalize_tolerance: Crossing points shorter than this are discarded.
    
    Example:
        config = MeterConfig(vector_size=64)
        meter = Meter2D(8, config=config)
    """
    
    vector_size: int = 0
    """Initial window length for the peak reset cadence."""
    
    floor_db: float = -90.0
    """Sentinel returned instead of log10(0)."""
    
    overload_threshold: float = 1.0
    """Unity gain; peaks above it light the overload led."""
    
    pole_epsilon: float = 1e-6
    """The virtual site sits at elevation pi/2 - pole_epsilon."""
    
    pole_clearance: float = 1e-3
    """Skip the virtual site when a channel is this close to the pole."""
    
    site_clearance: float = 1e-3
    """Coincident channels: the lowest index keeps the cell, the others draw nothing."""
    
    voronoi_threshold: float = 1e-6
    """Passed to scipy's SphericalVoronoi as its duplicate threshold."""
    
    normalize_tolerance: float = 1e-12
    """Minimum norm for an interpolated point before renormalization."""
    
    def __post_init__(self) -> None:
        """Validate configuration."""
        if self.vector_size < 0:
            raise ValueError("vector_size must be >= 0")
        if self.floor_db >= 0:
            raise ValueError("floor_db must be negative")
        if self.overload_threshold <= 0:
            raise ValueError("overload_threshold must be > 0")
        if not 0 < self.pole_epsilon < math.pi / 4:
            raise ValueError("pole_epsilon must be in (0, pi/4)")
        if self.pole_clearance <= 0:
            raise ValueError("pole_clearance must be > 0")
        if self.site_clearance <= 0:
            raise ValueError("site_clearance must be > 0")
        if self.voronoi_threshold <= 0:
            raise ValueError("voronoi_threshold must be > 0")
        if self.normalize_tolerance <= 0:
            raise ValueError("normalize_tolerance must be > 0")
    
    @classmethod
    def from_env(cls, prefix: str = "SPATIAL_METER_") -> "MeterConfig":
        """Build a config from environment variables.
        
        Every field can be overridden by ``<prefix><FIELD_NAME>``, e.g.
        ``SPATIAL_METER_VECTOR_SIZE=64``. Unset variables keep their default.
        """
        overrides: dict[str, int | float] = {}
        
        value = os.environ.get(f"{prefix}VECTOR_SIZE")
        if value is not None:
            overrides["vector_size"] = int(value)
        
        for name in (
            "floor_db",
            "overload_threshold",
            "pole_epsilon",
            "pole_clearance",
            "site_clearance",
            "voronoi_threshold",
            "normalize_tolerance",
        ):
            value = os.environ.get(f"{prefix}{name.upper()}")
            if value is not None:
                overrides[name] = float(value)
        
        return cls(**overrides)
