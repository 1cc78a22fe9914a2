"""
Coordinates - Angle wrapping and spherical/Cartesian conversion.

Conventions:
    - Azimuth 0 is the front of the listener, not the mathematical 0 angle.
      The Cartesian conversion therefore carries a pi/2 offset:
        x = r * cos(azimuth + pi/2) * cos(elevation)
        y = r * sin(azimuth + pi/2) * cos(elevation)
        z = r * sin(elevation)
    - Azimuth grows counter-clockwise seen from above, so front is +y
      and left is -x.
    - Elevation is 0 at ear level, +pi/2 at the top pole.
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np

TWO_PI = 2.0 * math.pi
HALF_PI = 0.5 * math.pi


def clip(value: float, lower: float, upper: float) -> float:
    """Clip a value between boundaries."""
    return max(lower, min(value, upper))


def wrap_twopi(value: float) -> float:
    """Wrap an angle into [0, 2pi)."""
    wrapped = value % TWO_PI
    # -1e-20 % 2pi rounds to exactly 2pi
    if wrapped >= TWO_PI:
        return 0.0
    return wrapped


def wrap_pi(value: float) -> float:
    """Wrap an angle into [-pi, pi)."""
    return wrap_twopi(value + math.pi) - math.pi


def abscissa(radius: float, azimuth: float, elevation: float = 0.0) -> float:
    """Get the abscissa (x) of a point from its polar coordinates."""
    return radius * math.cos(azimuth + HALF_PI) * math.cos(elevation)


def ordinate(radius: float, azimuth: float, elevation: float = 0.0) -> float:
    """Get the ordinate (y) of a point from its polar coordinates."""
    return radius * math.sin(azimuth + HALF_PI) * math.cos(elevation)


def height(radius: float, azimuth: float, elevation: float = 0.0) -> float:
    """Get the height (z) of a point from its polar coordinates."""
    return radius * math.sin(elevation)


def radius(x: float, y: float, z: float = 0.0) -> float:
    """Get the distance of a point to the origin."""
    return math.sqrt(x * x + y * y + z * z)


def azimuth(x: float, y: float, z: float = 0.0) -> float:
    """
    Get the azimuth of a point, wrapped into [0, 2pi).
    
    A point on the vertical axis has no azimuth; 0 is returned.
    """
    if x == 0 and y == 0:
        return 0.0
    return wrap_twopi(math.atan2(y, x) - HALF_PI)


def elevation(x: float, y: float, z: float = 0.0) -> float:
    """Get the elevation of a point. The origin has elevation 0."""
    if z == 0:
        return 0.0
    return math.asin(clip(z / radius(x, y, z), -1.0, 1.0))


def to_cartesian(
    azimuth: float,
    elevation: float = 0.0,
    radius: float = 1.0,
) -> np.ndarray:
    """
    Convert polar coordinates to a Cartesian point.
    
    Args:
        azimuth: Horizontal angle in radians (0 = front)
        elevation: Vertical angle in radians (0 = ear level)
        radius: Distance to the origin
        
    Returns:
        Array of shape (3,) holding x, y, z
    """
    return np.array([
        abscissa(radius, azimuth, elevation),
        ordinate(radius, azimuth, elevation),
        height(radius, azimuth, elevation),
    ])


def to_spherical(x: float, y: float, z: float = 0.0) -> Tuple[float, float, float]:
    """
    Convert a Cartesian point to polar coordinates.
    
    Returns:
        Tuple of (azimuth, elevation, radius)
    """
    return azimuth(x, y, z), elevation(x, y, z), radius(x, y, z)
