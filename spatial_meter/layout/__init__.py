"""
Spatial Meter - Layout Module

Channel directions on a circle or a sphere.

Components:
    LayoutModel  - Ordered channels plus a rotation offset
    Channel      - One loudspeaker direction
    Dimension    - Circle (2D) or sphere (3D)
    coordinates  - Angle wrapping and polar/Cartesian conversion

Usage:
    from spatial_meter.layout import LayoutModel

    layout = LayoutModel.from_degrees([30, 330, 110, 250])
    layout.set_rotation(0.1)
"""

from spatial_meter.layout.coordinates import (
    TWO_PI,
    HALF_PI,
    clip,
    wrap_twopi,
    wrap_pi,
    abscissa,
    ordinate,
    height,
    radius,
    azimuth,
    elevation,
    to_cartesian,
    to_spherical,
)

from spatial_meter.layout.model import (
    LayoutModel,
    Channel,
    Dimension,
)

__all__ = [
    # Model
    "LayoutModel",
    "Channel",
    "Dimension",
    # Coordinates
    "TWO_PI",
    "HALF_PI",
    "clip",
    "wrap_twopi",
    "wrap_pi",
    "abscissa",
    "ordinate",
    "height",
    "radius",
    "azimuth",
    "elevation",
    "to_cartesian",
    "to_spherical",
]
