"""
Layout Model - Channel directions on a circle or a sphere.

Features:
    - Stable 0-based channel indices
    - Global rotation offset applied to every azimuth
    - Default evenly spread layouts for 2D and 3D
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Sequence

import numpy as np

from spatial_meter.errors import LayoutError
from spatial_meter.layout.coordinates import (
    HALF_PI,
    TWO_PI,
    abscissa,
    height,
    ordinate,
    to_cartesian,
    wrap_twopi,
)


class Dimension(Enum):
    """Whether channels live on a circle or on a sphere."""
    
    PLANE = "2d"
    """Channels on the horizontal circle; elevation is always 0."""
    
    SPHERE = "3d"
    """Channels anywhere on the unit sphere."""


@dataclass(frozen=True)
class Channel:
    """
    One loudspeaker or visualization direction.
    
    Azimuth is stored as given and wrapped into [0, 2pi) on read,
    elevation is clipped to [-pi/2, pi/2] by the layout.
    """
    
    index: int
    azimuth: float = 0.0
    elevation: float = 0.0
    
    @property
    def wrapped_azimuth(self) -> float:
        """Azimuth wrapped into [0, 2pi)."""
        return wrap_twopi(self.azimuth)


class LayoutModel:
    """
    Ordered set of channels plus a rotation offset.
    
    The channel list is fixed at construction. Only the rotation can
    change afterwards, and changing it does not recompute any geometry:
    callers must run the meter's rendering again.
    
    Example:
        # Quadraphonic ring, rotated by 45 degrees
        layout = LayoutModel.from_degrees([0, 90, 180, 270], rotation=45)
        
        # 3D layout
        layout = LayoutModel.from_angles(
            azimuths=[0.0, 2.0, 4.0, 0.0],
            elevations=[0.0, 0.0, 0.0, 1.2],
        )
    """
    
    def __init__(
        self,
        channels: Sequence[Channel],
        dimension: Dimension = Dimension.PLANE,
        rotation: float = 0.0,
    ):
        if len(channels) == 0:
            raise LayoutError("A layout needs at least one channel")
        for position, channel in enumerate(channels):
            if channel.index != position:
                raise LayoutError(
                    f"Channel indices must be contiguous from 0, got {channel.index} at {position}",
                    details={"position": position, "index": channel.index},
                )
        
        if dimension is Dimension.PLANE:
            channels = [Channel(c.index, c.azimuth, 0.0) for c in channels]
        else:
            channels = [
                Channel(c.index, c.azimuth, max(-HALF_PI, min(c.elevation, HALF_PI)))
                for c in channels
            ]
        
        self._channels: tuple[Channel, ...] = tuple(channels)
        self._dimension = dimension
        self._rotation = float(rotation)
    
    # Factories
    
    @classmethod
    def regular(cls, count: int, rotation: float = 0.0) -> "LayoutModel":
        """Create a 2D layout of evenly spaced channels, channel 0 in front."""
        if count < 1:
            raise LayoutError("A layout needs at least one channel", details={"count": count})
        return cls(
            [Channel(i, TWO_PI * i / count) for i in range(count)],
            Dimension.PLANE,
            rotation,
        )
    
    @classmethod
    def spherical(cls, count: int, rotation: float = 0.0) -> "LayoutModel":
        """Create a 3D layout of quasi-uniform channels on a Fibonacci spiral."""
        if count < 1:
            raise LayoutError("A layout needs at least one channel", details={"count": count})
        golden_angle = math.pi * (3.0 - math.sqrt(5.0))
        channels = []
        for i in range(count):
            z = 1.0 - 2.0 * (i + 0.5) / count
            channels.append(Channel(i, wrap_twopi(golden_angle * i), math.asin(z)))
        return cls(channels, Dimension.SPHERE, rotation)
    
    @classmethod
    def from_angles(
        cls,
        azimuths: Sequence[float],
        elevations: Sequence[float] | None = None,
        rotation: float = 0.0,
    ) -> "LayoutModel":
        """
        Create a layout from angles in radians.
        
        Args:
            azimuths: One azimuth per channel
            elevations: One elevation per channel, or None for a 2D layout
            rotation: Rotation offset in radians
        """
        if elevations is None:
            return cls(
                [Channel(i, float(a)) for i, a in enumerate(azimuths)],
                Dimension.PLANE,
                rotation,
            )
        if len(elevations) != len(azimuths):
            raise LayoutError(
                "azimuths and elevations must have the same length",
                details={"azimuths": len(azimuths), "elevations": len(elevations)},
            )
        return cls(
            [Channel(i, float(a), float(e)) for i, (a, e) in enumerate(zip(azimuths, elevations))],
            Dimension.SPHERE,
            rotation,
        )
    
    @classmethod
    def from_degrees(
        cls,
        azimuths: Sequence[float],
        elevations: Sequence[float] | None = None,
        rotation: float = 0.0,
    ) -> "LayoutModel":
        """Same as from_angles, with every angle in degrees."""
        return cls.from_angles(
            [math.radians(a) for a in azimuths],
            None if elevations is None else [math.radians(e) for e in elevations],
            math.radians(rotation),
        )
    
    # Accessors
    
    @property
    def dimension(self) -> Dimension:
        return self._dimension
    
    @property
    def channels(self) -> tuple[Channel, ...]:
        return self._channels
    
    @property
    def rotation(self) -> float:
        """Rotation offset in radians, added to every azimuth."""
        return self._rotation
    
    def set_rotation(self, rotation: float) -> None:
        """Change the rotation offset. Geometry is not recomputed."""
        self._rotation = float(rotation)
    
    def copy(self) -> "LayoutModel":
        """Independent layout with the same channels and rotation."""
        return LayoutModel(self._channels, self._dimension, self._rotation)
    
    def __len__(self) -> int:
        return len(self._channels)
    
    def __iter__(self) -> Iterator[Channel]:
        return iter(self._channels)
    
    def __getitem__(self, index: int) -> Channel:
        return self._channels[self._check_index(index)]
    
    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self._channels):
            raise IndexError(f"Channel index {index} out of range [0, {len(self._channels)})")
        return index
    
    def azimuth(self, index: int) -> float:
        """Azimuth of a channel with the rotation applied, in [0, 2pi)."""
        return wrap_twopi(self[index].azimuth + self._rotation)
    
    def elevation(self, index: int) -> float:
        return self[index].elevation
    
    def abscissa(self, index: int) -> float:
        return abscissa(1.0, self.azimuth(index), self.elevation(index))
    
    def ordinate(self, index: int) -> float:
        return ordinate(1.0, self.azimuth(index), self.elevation(index))
    
    def height(self, index: int) -> float:
        return height(1.0, self.azimuth(index), self.elevation(index))
    
    def azimuths(self) -> list[float]:
        """Rotated azimuths of every channel, in index order."""
        return [self.azimuth(i) for i in range(len(self._channels))]
    
    def directions(self) -> np.ndarray:
        """Rotated unit directions as an array of shape (channels, 3)."""
        return np.array([
            to_cartesian(self.azimuth(i), self.elevation(i))
            for i in range(len(self._channels))
        ])
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "dimension": self._dimension.value,
            "rotation": self._rotation,
            "channels": [
                {"index": c.index, "azimuth": c.azimuth, "elevation": c.elevation}
                for c in self._channels
            ],
        }
    
    def __repr__(self) -> str:
        return (
            f"LayoutModel(channels={len(self._channels)}, "
            f"dimension={self._dimension.value}, rotation={self._rotation:.4f})"
        )
