"""
Spherical Voronoi adapter.

Wraps scipy.spatial.SphericalVoronoi behind the small incremental
interface the cell builder needs: add sites, compute, read one closed
boundary polygon per site, clear, start again.
"""

from __future__ import annotations

import logging
from typing import Protocol

import numpy as np
from scipy.spatial import QhullError, SphericalVoronoi

from spatial_meter.errors import TessellationError

logger = logging.getLogger(__name__)

MIN_SITES = 4


class VoronoiSolver(Protocol):
    """Protocol for spherical tessellation backends."""
    
    def add(self, x: float, y: float, z: float) -> None:
        """Add a site on the unit sphere."""
        ...
    
    def clear(self) -> None:
        """Remove every site and every computed region."""
        ...
    
    def compute(self) -> list[np.ndarray]:
        """Tessellate the current sites.
        
        Returns:
            One array of shape (k, 3) per site, in insertion order, holding
            the cell boundary as consecutive unit vectors.
        
        Raises:
            TessellationError: The sites cannot be tessellated.
        """
        ...


class SphericalVoronoiSolver:
    """VoronoiSolver backed by scipy.
    
    qhull needs at least four sites spanning 3D space. Fewer sites are
    reported as a TessellationError like any other rejected input.
    
    Args:
        threshold: Duplicate-site threshold forwarded to scipy.
    
    Example:
        solver = SphericalVoronoiSolver()
        for x, y, z in directions:
            solver.add(x, y, z)
        regions = solver.compute()
    """
    
    def __init__(self, threshold: float = 1e-6):
        self._threshold = threshold
        self._sites: list[np.ndarray] = []
        self._regions: list[np.ndarray] = []
    
    def __len__(self) -> int:
        return len(self._sites)
    
    @property
    def regions(self) -> list[np.ndarray]:
        """Regions from the last successful compute()."""
        return self._regions
    
    def add(self, x: float, y: float, z: float) -> None:
        site = np.array([x, y, z], dtype=np.float64)
        length = np.linalg.norm(site)
        if length == 0.0:
            raise TessellationError("A site cannot sit at the origin", site_count=len(self._sites))
        self._sites.append(site / length)
    
    def clear(self) -> None:
        self._sites.clear()
        self._regions = []
    
    def compute(self) -> list[np.ndarray]:
        count = len(self._sites)
        if count < MIN_SITES:
            raise TessellationError(
                f"Spherical tessellation needs at least {MIN_SITES} sites, got {count}",
                site_count=count,
            )
        
        points = np.vstack(self._sites)
        try:
            voronoi = SphericalVoronoi(
                points,
                radius=1.0,
                center=np.zeros(3),
                threshold=self._threshold,
            )
        except (ValueError, QhullError) as e:
            raise TessellationError(
                f"Spherical tessellation failed: {e}",
                site_count=count,
                details={"error_type": type(e).__name__},
            ) from e
        
        voronoi.sort_vertices_of_regions()
        self._regions = [
            np.array(voronoi.vertices[region], dtype=np.float64)
            for region in voronoi.regions
        ]
        logger.debug(f"Tessellated {count} sites into {len(self._regions)} regions")
        return self._regions
