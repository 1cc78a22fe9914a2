"""
Spatial Meter - Energy Module

Real-time peak metering.

Components:
    EnergyTracker  - Per-channel peaks and overload hold counters
    RampPhase      - Accumulation window state

Usage:
    from spatial_meter.energy import EnergyTracker

    tracker = EnergyTracker(channels=4, window=8)
    tracker.process(np.array([0.1, 0.5, 1.2, 0.0]))
    tracker.tick(10)
"""

from spatial_meter.energy.tracker import (
    EnergyTracker,
    RampPhase,
    FLOOR_DB,
)

__all__ = [
    "EnergyTracker",
    "RampPhase",
    "FLOOR_DB",
]
