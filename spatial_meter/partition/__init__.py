"""
Spatial Meter - Partition Module

Static geometry telling a renderer which channel owns which direction.

Components:
    SectorPartitioner      - 2D: one angular sector per channel
    Sector                 - Width and centre of a 2D sector
    HemisphereCellBuilder  - 3D: top and bottom clipped Voronoi cells
    SphericalCell          - Top and bottom paths of a channel
    filter_path            - Clip a spherical polygon to one hemisphere
    SphericalVoronoiSolver - scipy-backed spherical tessellation

Usage:
    from spatial_meter.layout import LayoutModel
    from spatial_meter.partition import SectorPartitioner

    sectors = SectorPartitioner().compute(LayoutModel.regular(5))
"""

from spatial_meter.partition.sectors import (
    SectorPartitioner,
    Sector,
)

from spatial_meter.partition.cells import (
    HemisphereCellBuilder,
    SphericalCell,
    filter_path,
)

from spatial_meter.partition.voronoi import (
    VoronoiSolver,
    SphericalVoronoiSolver,
    MIN_SITES,
)

__all__ = [
    # Sectors
    "SectorPartitioner",
    "Sector",
    # Cells
    "HemisphereCellBuilder",
    "SphericalCell",
    "filter_path",
    # Voronoi
    "VoronoiSolver",
    "SphericalVoronoiSolver",
    "MIN_SITES",
]
