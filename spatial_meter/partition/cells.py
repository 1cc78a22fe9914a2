"""
Hemisphere Cell Builder - Top and bottom views of spherical Voronoi cells.

Every channel owns the Voronoi cell of its direction on the unit sphere.
A renderer looking down from the top pole (or up from the bottom pole)
only sees the part of that cell lying in its hemisphere, so each cell is
clipped against the z = 0 plane twice.

The top pass adds one virtual site next to the top pole. It caps the
tessellation there so that the clipped top polygons close around the
pole instead of reaching through it. The bottom pass does the same at
the bottom pole, but only for layouts it could not tessellate otherwise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from spatial_meter.layout.coordinates import HALF_PI, to_cartesian
from spatial_meter.layout.model import LayoutModel
from spatial_meter.partition.voronoi import MIN_SITES, SphericalVoronoiSolver, VoronoiSolver

logger = logging.getLogger(__name__)


def _empty_path() -> np.ndarray:
    return np.zeros((0, 3), dtype=np.float64)


@dataclass(frozen=True, eq=False)
class SphericalCell:
    """Clipped cell of one channel.
    
    Attributes:
        index: Channel index.
        top: Boundary visible from the top pole, shape (k, 3). Empty when
            the channel owns nothing above the equator.
        bottom: Boundary visible from the bottom pole, shape (k, 3).
    """
    
    index: int
    top: np.ndarray = field(default_factory=_empty_path)
    bottom: np.ndarray = field(default_factory=_empty_path)
    
    def __post_init__(self) -> None:
        self.top.setflags(write=False)
        self.bottom.setflags(write=False)
    
    def path(self, top: bool = True) -> np.ndarray:
        return self.top if top else self.bottom
    
    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "top": self.top.tolist(),
            "bottom": self.bottom.tolist(),
        }


def _equator_crossing(
    a: np.ndarray,
    b: np.ndarray,
    tolerance: float,
) -> np.ndarray | None:
    """Point where the edge a-b crosses z = 0, pushed back on the sphere.
    
    Returns None when the projected point is too short to normalize.
    """
    ratio = a[2] / (a[2] - b[2])
    point = (b - a) * ratio + a
    point[2] = 0.0
    length = np.linalg.norm(point)
    if length < tolerance:
        return None
    return point / length


def filter_path(
    path: np.ndarray,
    top: bool = True,
    tolerance: float = 1e-12,
) -> np.ndarray:
    """Clip a closed spherical polygon to one hemisphere.
    
    Vertices strictly on the wrong side next to a vertex on the right side
    get the equator crossing of that edge inserted beside them (or are
    replaced by two crossings when both neighbours are on the right side).
    Runs of wrong-side vertices enclosed by crossings are then pruned.
    
    Args:
        path: Polygon vertices, shape (k, 3), consecutive and closed.
        top: Keep the z > 0 hemisphere if True, z < 0 otherwise.
        tolerance: Crossing points shorter than this before
            renormalization are dropped.
    
    Returns:
        Clipped polygon, shape (m, 3). Empty if the polygon has fewer
        than 3 vertices or none strictly inside the hemisphere.
    """
    points = [np.asarray(p, dtype=np.float64) for p in path]
    
    # Heights are flipped for the bottom hemisphere
    sign = 1.0 if top else -1.0
    
    if len(points) < 3 or not any(sign * p[2] > 0.0 for p in points):
        return _empty_path()
    
    size = len(points)
    inserted: list[np.ndarray] = []
    for i, vertex in enumerate(points):
        if sign * vertex[2] >= 0.0:
            inserted.append(vertex)
            continue
        
        previous = points[i - 1]
        following = points[(i + 1) % size]
        enters = sign * previous[2] >= 0.0
        leaves = sign * following[2] >= 0.0
        
        if enters:
            crossing = _equator_crossing(previous, vertex, tolerance)
            if crossing is not None:
                inserted.append(crossing)
        if not (enters and leaves):
            inserted.append(vertex)
        if leaves:
            crossing = _equator_crossing(following, vertex, tolerance)
            if crossing is not None:
                inserted.append(crossing)
    
    # Pruning treats the equator itself as the wrong side
    i = 0
    while i < len(inserted):
        size = len(inserted)
        if (
            sign * inserted[i][2] <= 0.0
            and sign * inserted[i - 1][2] <= 0.0
            and sign * inserted[(i + 1) % size][2] <= 0.0
        ):
            del inserted[i]
        else:
            i += 1
    
    if not inserted:
        return _empty_path()
    return np.vstack(inserted)

class HemisphereCellBuilder:
    """Build the top and bottom cell of every channel of a 3D layout.
    
    The bottom pass tessellates the channel directions alone. The top pass
    adds a virtual site next to the top pole. When the channel directions
    alone cannot be tessellated (fewer than four of them, or all on one
    plane, as for a horizontal ring) the bottom pass adds the mirrored
    virtual site next to the bottom pole instead of failing.
    
    Channels closer than `site_clearance` to a lower-indexed channel share
    its site; they get empty paths and the lower index keeps the cell.
    
    Args:
        solver: Spherical Voronoi backend; scipy is used when omitted.
        pole_epsilon: The virtual sites sit at elevation +/-(pi/2 - pole_epsilon).
        pole_clearance: A virtual site is left out when a channel lies
            closer than this (chord distance) to it.
        site_clearance: Chord distance under which two channels are
            considered coincident.
        rank_tolerance: Singular values below this make a set of sites
            planar, hence impossible to tessellate.
        tolerance: Forwarded to filter_path().
    
    Example:
        builder = HemisphereCellBuilder()
        cells = builder.compute(LayoutModel.spherical(12))
        cells[0].top  # (k, 3) array
    """
    
    def __init__(
        self,
        solver: VoronoiSolver | None = None,
        pole_epsilon: float = 1e-6,
        pole_clearance: float = 1e-3,
        site_clearance: float = 1e-3,
        rank_tolerance: float = 1e-6,
        tolerance: float = 1e-12,
    ):
        self._solver = solver if solver is not None else SphericalVoronoiSolver()
        self._pole_site = to_cartesian(0.0, HALF_PI - pole_epsilon)
        self._bottom_site = to_cartesian(0.0, pole_epsilon - HALF_PI)
        self._pole_clearance = pole_clearance
        self._site_clearance = site_clearance
        self._rank_tolerance = rank_tolerance
        self._tolerance = tolerance
    
    @property
    def pole_site(self) -> np.ndarray:
        return self._pole_site.copy()
    
    @property
    def bottom_site(self) -> np.ndarray:
        return self._bottom_site.copy()
    
    def pole_occupied(self, directions: np.ndarray, top: bool = True) -> bool:
        """Whether a channel already sits on the top (or bottom) virtual site."""
        site = self._pole_site if top else self._bottom_site
        distances = np.linalg.norm(directions - site, axis=1)
        return bool(np.any(distances < self._pole_clearance))
    
    def distinct_sites(self, directions: np.ndarray) -> list[int]:
        """Indices of the channels owning a site, coincident ones dropped."""
        owners: list[int] = []
        for i, direction in enumerate(directions):
            if all(
                np.linalg.norm(direction - directions[j]) >= self._site_clearance
                for j in owners
            ):
                owners.append(i)
        return owners
    
    def spans_space(self, sites: np.ndarray) -> bool:
        """Whether the solver can tessellate `sites` (not all on one plane)."""
        if len(sites) < MIN_SITES:
            return False
        rank = np.linalg.matrix_rank(sites[1:] - sites[0], tol=self._rank_tolerance)
        return bool(rank == 3)
    
    def compute(self, layout: LayoutModel) -> tuple[SphericalCell, ...]:
        """Compute the clipped cells of every channel, in channel order.
        
        Degenerate inputs give empty paths rather than errors.
        
        Raises:
            TessellationError: The solver rejected sites that passed the
                checks above.
        """
        directions = layout.directions()
        count = len(directions)
        
        if count < 3:
            return tuple(SphericalCell(i) for i in range(count))
        
        owners = self.distinct_sites(directions)
        sites = directions[owners]
        
        bottom = self._tessellate(sites, top=False)
        top = self._tessellate(sites, top=True)
        
        tops = [_empty_path() for _ in range(count)]
        bottoms = [_empty_path() for _ in range(count)]
        for position, index in enumerate(owners):
            tops[index] = filter_path(top[position], True, self._tolerance)
            bottoms[index] = filter_path(bottom[position], False, self._tolerance)
        
        return tuple(
            SphericalCell(index=i, top=tops[i], bottom=bottoms[i])
            for i in range(count)
        )
    
    def _tessellate(self, sites: np.ndarray, top: bool) -> list[np.ndarray]:
        """Raw cells of `sites` for one pass, virtual site excluded.
        
        The top pass always adds its virtual site, the bottom pass only
        when the channels alone do not span space. Sites that still do not
        span space yield empty cells, which filter_path turns into empty
        paths.
        """
        count = len(sites)
        virtual = self._pole_site if top else self._bottom_site
        
        if not self.pole_occupied(sites, top) and (top or not self.spans_space(sites)):
            sites = np.vstack([sites, virtual])
        
        if not self.spans_space(sites):
            side = "top" if top else "bottom"
            logger.debug(f"{len(sites)} sites lie on one plane, {side} cells left empty")
            return [_empty_path() for _ in range(count)]
        
        self._solver.clear()
        for x, y, z in sites:
            self._solver.add(x, y, z)
        regions = self._solver.compute()
        return list(regions[:count])
