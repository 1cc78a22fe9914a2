"""
Sector Partitioner - Circular tiling of a 2D layout.

Each channel owns the arc between the midpoints to its angular
neighbours, so the sectors tile the whole circle without overlap
however irregular the spacing is.
"""

from __future__ import annotations

from dataclasses import dataclass

from spatial_meter.layout.coordinates import TWO_PI, wrap_twopi
from spatial_meter.layout.model import LayoutModel


@dataclass(frozen=True)
class Sector:
    """Angular region owned by one channel.
    
    Attributes:
        index: Channel index.
        azimuth: Channel azimuth with the layout rotation, in [0, 2pi).
        width: Angular width of the sector in radians.
        center: Bisector of the sector, in [0, 2pi).
    """
    
    index: int
    azimuth: float
    width: float
    center: float
    
    @property
    def start(self) -> float:
        """Clockwise edge of the sector, in [0, 2pi)."""
        return wrap_twopi(self.center - self.width * 0.5)
    
    @property
    def end(self) -> float:
        """Counter-clockwise edge of the sector, in [0, 2pi)."""
        return wrap_twopi(self.center + self.width * 0.5)
    
    def to_dict(self) -> dict:
        return {
            "index": self.index,
            "azimuth": self.azimuth,
            "width": self.width,
            "center": self.center,
        }


class SectorPartitioner:
    """Derive one sector per channel from a 2D layout.
    
    Example:
        sectors = SectorPartitioner().compute(LayoutModel.from_degrees([0, 90, 180]))
        sectors[0].width  # 3pi/4: half of 180 degrees back plus half of 90 ahead
    """
    
    def compute(self, layout: LayoutModel) -> tuple[Sector, ...]:
        """Compute the sectors of every channel, in channel index order."""
        azimuths = layout.azimuths()
        count = len(azimuths)
        
        if count == 1:
            return (Sector(0, azimuths[0], TWO_PI, 0.0),)
        
        # Stable sort keeps index order between equal azimuths
        order = sorted(range(count), key=lambda i: azimuths[i])
        sectors: list[Sector | None] = [None] * count
        
        for position, index in enumerate(order):
            current = azimuths[index]
            previous = azimuths[order[position - 1]]
            following = azimuths[order[(position + 1) % count]]
            
            if position == 0:
                previous -= TWO_PI
            if position == count - 1:
                following += TWO_PI
            
            gap_previous = current - previous
            gap_next = following - current
            width = (gap_previous + gap_next) * 0.5
            center = wrap_twopi(current - gap_previous * 0.5 + width * 0.5)
            sectors[index] = Sector(index, current, width, center)
        
        return tuple(sectors)
