"""
Meter - Per-channel metering plus the geometry to draw it.

A meter composes an EnergyTracker (audio rate) with the geometry of its
layout: sectors for a 2D layout, clipped Voronoi cells for a 3D one.
The two never share mutable state.

Threading:
    process() and tick() run on the audio thread and never allocate.
    compute_rendering() allocates and must only run after a layout or
    rotation change. It builds the new geometry aside and publishes it
    with a single reference swap, so on failure the previous geometry
    stays in place.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, Sequence

import numpy as np

from spatial_meter.config import MeterConfig
from spatial_meter.energy.tracker import EnergyTracker
from spatial_meter.errors import LayoutError, TessellationError
from spatial_meter.layout.model import Dimension, LayoutModel
from spatial_meter.monitoring.logging import StructuredLogger, get_logger
from spatial_meter.partition.cells import HemisphereCellBuilder, SphericalCell
from spatial_meter.partition.sectors import Sector, SectorPartitioner
from spatial_meter.partition.voronoi import SphericalVoronoiSolver, VoronoiSolver


class Meter(ABC):
    """Common surface of the 2D and 3D meters."""
    
    dimension: Dimension
    
    def __init__(
        self,
        number_of_planewaves: int = 0,
        config: MeterConfig | None = None,
        layout: LayoutModel | None = None,
        logger: StructuredLogger | None = None,
    ):
        self._config = config or MeterConfig()
        self._logger = logger or get_logger()
        
        if layout is None:
            layout = self._default_layout(number_of_planewaves)
        self._check_dimension(layout)
        
        self._layout = layout.copy()
        self._energy = self._make_tracker(len(layout))
        self._geometry: Sequence[Any] = self._empty_geometry()
        self._needs_rendering = True
    
    @classmethod
    def from_layout(
        cls,
        layout: LayoutModel,
        config: MeterConfig | None = None,
        **kwargs: Any,
    ) -> "Meter":
        """Create a meter for an explicit layout."""
        return cls(config=config, layout=layout, **kwargs)
    
    @abstractmethod
    def _default_layout(self, count: int) -> LayoutModel:
        """Layout used when only a channel count is given."""
    
    @abstractmethod
    def _empty_geometry(self) -> Sequence[Any]:
        """Geometry published before the first rendering."""
    
    @abstractmethod
    def _build_geometry(self) -> Sequence[Any]:
        """Compute the geometry of the current layout."""
    
    def _make_tracker(self, channels: int) -> EnergyTracker:
        return EnergyTracker(
            channels,
            window=self._config.vector_size,
            floor_db=self._config.floor_db,
            overload_threshold=self._config.overload_threshold,
        )
    
    def _check_dimension(self, layout: LayoutModel) -> None:
        if layout.dimension is not self.dimension:
            raise LayoutError(
                f"{type(self).__name__} needs a {self.dimension.value} layout, "
                f"got {layout.dimension.value}",
            )
    
    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self._layout):
            raise IndexError(f"Planewave index {index} out of range [0, {len(self._layout)})")
        return index
    
    # Layout
    
    @property
    def layout(self) -> LayoutModel:
        """Copy of the layout; the meter keeps its own."""
        return self._layout.copy()
    
    @property
    def number_of_planewaves(self) -> int:
        return len(self._layout)
    
    @property
    def needs_rendering(self) -> bool:
        """True when the layout changed since the last compute_rendering()."""
        return self._needs_rendering
    
    @property
    def rotation(self) -> float:
        return self._layout.rotation
    
    def set_planewaves_rotation(self, rotation: float) -> None:
        """Rotate every channel. Call compute_rendering() afterwards."""
        self._layout.set_rotation(rotation)
        self._needs_rendering = True
        self._logger.layout_changed(
            len(self._layout), self.dimension.value, rotation=self._layout.rotation,
        )
    
    def set_layout(self, layout: LayoutModel) -> None:
        """Replace the layout. Call compute_rendering() afterwards.
        
        The layout is copied, so later changes to `layout` do not reach
        the meter. The published geometry is cleared. Energy state is kept
        when the channel count does not change, and rebuilt otherwise.
        """
        self._check_dimension(layout)
        if len(layout) != len(self._layout):
            self._energy = self._make_tracker(len(layout))
        self._layout = layout.copy()
        self._geometry = self._empty_geometry()
        self._needs_rendering = True
        self._logger.layout_changed(len(layout), self.dimension.value, rotation=layout.rotation)
    
    def get_planewave_azimuth(self, index: int) -> float:
        """Azimuth of a channel, rotation applied."""
        return self._layout.azimuth(self._check_index(index))
    
    def get_planewave_elevation(self, index: int) -> float:
        return self._layout.elevation(self._check_index(index))
    
    def get_planewave_abscissa(self, index: int) -> float:
        return self._layout.abscissa(self._check_index(index))
    
    def get_planewave_ordinate(self, index: int) -> float:
        return self._layout.ordinate(self._check_index(index))
    
    def get_planewave_height(self, index: int) -> float:
        return self._layout.height(self._check_index(index))
    
    # Energy
    
    @property
    def energy(self) -> EnergyTracker:
        return self._energy
    
    @property
    def vector_size(self) -> int:
        return self._energy.window
    
    def set_vector_size(self, vector_size: int) -> None:
        self._energy.set_window(vector_size)
    
    def process(self, samples: np.ndarray) -> None:
        """Feed one value per channel. Audio thread."""
        self._energy.process(samples)
    
    def tick(self, hold_time: int) -> None:
        """Advance the overload leds. `hold_time` is the hold length in ticks."""
        self._energy.tick(hold_time)
    
    def get_planewave_energy(self, index: int) -> float:
        """Peak of a channel in dB."""
        return self._energy.energy_db(self._check_index(index))
    
    def get_planewave_over_led(self, index: int) -> bool:
        return self._energy.overloaded(self._check_index(index))
    
    # Geometry
    
    def compute_rendering(self) -> None:
        """Recompute the geometry of the current layout.
        
        Raises:
            TessellationError: The geometry could not be built. The
                previously published geometry is left untouched.
        """
        start = time.perf_counter()
        try:
            geometry = self._build_geometry()
        except TessellationError as e:
            self._logger.rendering_failed(e, channels=len(self._layout))
            raise
        
        self._geometry = geometry
        self._needs_rendering = False
        self._logger.rendering_complete(
            (time.perf_counter() - start) * 1000,
            len(self._layout),
            self.dimension.value,
        )
    
    def snapshot(self) -> dict[str, Any]:
        """Current energy and geometry as plain Python values."""
        channels = []
        for i in range(len(self._layout)):
            channel = {
                "index": i,
                "azimuth": self._layout.azimuth(i),
                "elevation": self._layout.elevation(i),
                "energy_db": self._energy.energy_db(i),
                "overloaded": self._energy.overloaded(i),
            }
            channel.update(self._geometry[i].to_dict())
            channels.append(channel)
        
        return {
            "dimension": self.dimension.value,
            "rotation": self._layout.rotation,
            "vector_size": self._energy.window,
            "needs_rendering": self._needs_rendering,
            "channels": channels,
        }
    
    def __repr__(self) -> str:
        return f"{type(self).__name__}(planewaves={len(self._layout)})"


class Meter2D(Meter):
    """Meter for channels on a circle.
    
    Example:
        meter = Meter2D(8)
        meter.set_vector_size(64)
        meter.compute_rendering()
        
        # Audio thread
        meter.process(block_peaks)
        
        # Display
        meter.tick(20)
        for i in range(meter.number_of_planewaves):
            draw_sector(
                meter.get_planewave_azimuth_mapped(i),
                meter.get_planewave_width(i),
                meter.get_planewave_energy(i),
                meter.get_planewave_over_led(i),
            )
    """
    
    dimension = Dimension.PLANE
    
    def __init__(
        self,
        number_of_planewaves: int = 0,
        config: MeterConfig | None = None,
        layout: LayoutModel | None = None,
        logger: StructuredLogger | None = None,
    ):
        self._partitioner = SectorPartitioner()
        super().__init__(number_of_planewaves, config, layout, logger)
    
    def _default_layout(self, count: int) -> LayoutModel:
        return LayoutModel.regular(count)
    
    def _empty_geometry(self) -> tuple[Sector, ...]:
        return tuple(
            Sector(i, self._layout.azimuth(i), 0.0, 0.0)
            for i in range(len(self._layout))
        )
    
    def _build_geometry(self) -> tuple[Sector, ...]:
        return self._partitioner.compute(self._layout)
    
    def get_sector(self, index: int) -> Sector:
        return self._geometry[self._check_index(index)]
    
    def get_planewave_azimuth_mapped(self, index: int) -> float:
        """Centre of the channel's sector."""
        return self._geometry[self._check_index(index)].center
    
    def get_planewave_width(self, index: int) -> float:
        """Angular width of the channel's sector."""
        return self._geometry[self._check_index(index)].width


class Meter3D(Meter):
    """Meter for channels on a sphere.
    
    Example:
        meter = Meter3D(12)
        meter.compute_rendering()
        
        top_view = [meter.get_planewave_path(i, top=True) for i in range(12)]
    """
    
    dimension = Dimension.SPHERE
    
    def __init__(
        self,
        number_of_planewaves: int = 0,
        config: MeterConfig | None = None,
        layout: LayoutModel | None = None,
        logger: StructuredLogger | None = None,
        solver: VoronoiSolver | None = None,
    ):
        config = config or MeterConfig()
        self._builder = HemisphereCellBuilder(
            solver=solver if solver is not None else SphericalVoronoiSolver(threshold=config.voronoi_threshold),
            pole_epsilon=config.pole_epsilon,
            pole_clearance=config.pole_clearance,
            site_clearance=config.site_clearance,
            rank_tolerance=config.voronoi_threshold,
            tolerance=config.normalize_tolerance,
        )
        super().__init__(number_of_planewaves, config, layout, logger)
    
    def _default_layout(self, count: int) -> LayoutModel:
        return LayoutModel.spherical(count)
    
    def _empty_geometry(self) -> tuple[SphericalCell, ...]:
        return tuple(SphericalCell(i) for i in range(len(self._layout)))
    
    def _build_geometry(self) -> tuple[SphericalCell, ...]:
        return self._builder.compute(self._layout)
    
    def get_cell(self, index: int) -> SphericalCell:
        return self._geometry[self._check_index(index)]
    
    def get_planewave_path(self, index: int, top: bool = True) -> np.ndarray:
        """Boundary of the channel's cell seen from the top or bottom pole.
        
        Returns:
            Read-only array of shape (k, 3); empty when the channel owns
            nothing in that hemisphere.
        """
        return self._geometry[self._check_index(index)].path(top)


def create_meter(
    layout: LayoutModel,
    config: MeterConfig | None = None,
    **kwargs: Any,
) -> Meter:
    """Create the meter matching a layout's dimension."""
    if layout.dimension is Dimension.SPHERE:
        return Meter3D.from_layout(layout, config, **kwargs)
    return Meter2D.from_layout(layout, config, **kwargs)
