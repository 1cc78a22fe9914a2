"""
Spatial Meter - Peak metering and display geometry for loudspeaker layouts.

For a layout of channels on a circle or a sphere, a meter keeps:
    - a real-time peak measurement per channel, with an overload led
      that stays lit for a caller-chosen number of ticks
    - a static partition of the circle or sphere giving every channel
      its own region to draw, however irregular the layout

Public API:
    Meter2D        - Channels on a circle: one angular sector each
    Meter3D        - Channels on a sphere: top and bottom clipped cells
    create_meter   - Pick Meter2D or Meter3D from a layout
    LayoutModel    - Channel directions plus a rotation offset
    MeterConfig    - Tunables (window, dB floor, pole site, tolerances)

Building blocks:
    spatial_meter.energy     - EnergyTracker
    spatial_meter.partition  - SectorPartitioner, HemisphereCellBuilder, filter_path
    spatial_meter.layout     - LayoutModel, coordinate conversions
    spatial_meter.monitoring - Structured logging

Example:
    import numpy as np
    from spatial_meter import Meter2D

    meter = Meter2D(8)
    meter.set_vector_size(32)
    meter.compute_rendering()

    meter.process(np.random.uniform(-1, 1, 8))
    meter.tick(15)

    meter.get_planewave_energy(0)          # dB
    meter.get_planewave_width(0)           # radians
"""

from spatial_meter.config import MeterConfig
from spatial_meter.errors import MeterError, LayoutError, TessellationError
from spatial_meter.layout import LayoutModel, Channel, Dimension
from spatial_meter.energy import EnergyTracker
from spatial_meter.partition import (
    SectorPartitioner,
    Sector,
    HemisphereCellBuilder,
    SphericalCell,
    filter_path,
)
from spatial_meter.meter import Meter, Meter2D, Meter3D, create_meter

__version__ = "0.1.0"

__all__ = [
    # Meters
    "Meter",
    "Meter2D",
    "Meter3D",
    "create_meter",
    # Layout
    "LayoutModel",
    "Channel",
    "Dimension",
    # Building blocks
    "EnergyTracker",
    "SectorPartitioner",
    "Sector",
    "HemisphereCellBuilder",
    "SphericalCell",
    "filter_path",
    # Config & errors
    "MeterConfig",
    "MeterError",
    "LayoutError",
    "TessellationError",
]
