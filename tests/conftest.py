"""
Shared fixtures for the spatial meter tests.
"""

from __future__ import annotations

import io

import numpy as np
import pytest

from spatial_meter import LayoutModel, TessellationError
from spatial_meter.monitoring import LogLevel, StructuredLogger
from spatial_meter.partition import SphericalVoronoiSolver


class RecordingSolver:
    """Spherical solver that records every tessellation it is asked for."""
    
    def __init__(self):
        self._inner = SphericalVoronoiSolver()
        self.calls: list[np.ndarray] = []
        self.fail = False
        self._sites: list[tuple[float, float, float]] = []
    
    def add(self, x: float, y: float, z: float) -> None:
        self._sites.append((x, y, z))
        self._inner.add(x, y, z)
    
    def clear(self) -> None:
        self._sites.clear()
        self._inner.clear()
    
    def compute(self) -> list[np.ndarray]:
        self.calls.append(np.array(self._sites))
        if self.fail:
            raise TessellationError("forced failure", site_count=len(self._sites))
        return self._inner.compute()


@pytest.fixture
def recording_solver():
    return RecordingSolver()


@pytest.fixture
def octahedron():
    """Six channels on the axes: four around the equator, one per pole."""
    return LayoutModel.from_degrees(
        [0, 90, 180, 270, 0, 0],
        [0, 0, 0, 0, 90, -90],
    )


@pytest.fixture
def log_stream():
    return io.StringIO()


@pytest.fixture
def debug_logger(log_stream):
    return StructuredLogger("test", level=LogLevel.DEBUG, output=log_stream)
