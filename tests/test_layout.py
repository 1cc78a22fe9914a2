"""
Tests for the layout model.
"""

import dataclasses
import math

import numpy as np
import pytest

from spatial_meter import LayoutError, MeterError
from spatial_meter.layout import Channel, Dimension, LayoutModel, HALF_PI, TWO_PI


class TestLayoutConstruction:
    """Tests for building layouts."""
    
    def test_regular_layout(self):
        layout = LayoutModel.regular(4)
        assert len(layout) == 4
        assert layout.dimension is Dimension.PLANE
        np.testing.assert_allclose(
            layout.azimuths(),
            [0.0, math.pi / 2, math.pi, 3 * math.pi / 2],
        )
    
    def test_zero_channels_rejected(self):
        with pytest.raises(LayoutError):
            LayoutModel.regular(0)
        with pytest.raises(LayoutError):
            LayoutModel.spherical(0)
        with pytest.raises(LayoutError):
            LayoutModel([])
    
    def test_layout_error_is_value_error(self):
        with pytest.raises(ValueError):
            LayoutModel.from_angles([])
        assert issubclass(LayoutError, MeterError)
    
    def test_indices_must_be_contiguous(self):
        with pytest.raises(LayoutError) as info:
            LayoutModel([Channel(1, 0.0)])
        assert info.value.details["index"] == 1
    
    def test_mismatched_angles(self):
        with pytest.raises(LayoutError):
            LayoutModel.from_angles([0.0, 1.0], [0.0])
    
    def test_from_degrees(self):
        layout = LayoutModel.from_degrees([0, 90], rotation=90)
        assert layout.azimuth(0) == pytest.approx(math.pi / 2)
        assert layout.azimuth(1) == pytest.approx(math.pi)
    
    def test_elevations_make_a_sphere_layout(self):
        layout = LayoutModel.from_degrees([0, 90], [10, -10])
        assert layout.dimension is Dimension.SPHERE
        assert layout.elevation(0) == pytest.approx(math.radians(10))
    
    def test_elevation_clipped(self):
        layout = LayoutModel.from_angles([0.0], [2.0])
        assert layout.elevation(0) == HALF_PI
    
    def test_plane_layout_drops_elevation(self):
        layout = LayoutModel([Channel(0, 0.0, 0.7)])
        assert layout.elevation(0) == 0.0
    
    def test_spherical_layout_is_unit(self):
        layout = LayoutModel.spherical(10)
        assert layout.dimension is Dimension.SPHERE
        directions = layout.directions()
        assert directions.shape == (10, 3)
        np.testing.assert_allclose(np.linalg.norm(directions, axis=1), 1.0)
        # Spread from near the top to near the bottom
        assert directions[0, 2] > 0.8
        assert directions[-1, 2] < -0.8


class TestLayoutAccess:
    """Tests for reading a layout."""
    
    def test_rotation_applied_and_wrapped(self):
        layout = LayoutModel.from_angles([TWO_PI - 0.1])
        layout.set_rotation(0.3)
        assert layout.rotation == 0.3
        assert layout.azimuth(0) == pytest.approx(0.2)
        # Stored channel is untouched
        assert layout[0].azimuth == pytest.approx(TWO_PI - 0.1)
    
    def test_planar_directions(self):
        layout = LayoutModel.regular(3)
        directions = layout.directions()
        np.testing.assert_allclose(directions[:, 2], 0.0)
        np.testing.assert_allclose(directions[0], [0.0, 1.0, 0.0], atol=1e-12)
    
    def test_cartesian_accessors_follow_rotation(self):
        layout = LayoutModel.regular(1, rotation=math.pi / 2)
        assert layout.abscissa(0) == pytest.approx(-1.0)
        assert layout.ordinate(0) == pytest.approx(0.0, abs=1e-12)
        assert layout.height(0) == 0.0
    
    def test_index_out_of_range(self):
        layout = LayoutModel.regular(2)
        with pytest.raises(IndexError):
            layout.azimuth(2)
        with pytest.raises(IndexError):
            layout[-1]
    
    def test_channel_is_frozen(self):
        channel = Channel(0, 1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            channel.azimuth = 2.0
    
    def test_channel_wrapped_azimuth(self):
        assert Channel(0, -math.pi / 2).wrapped_azimuth == pytest.approx(1.5 * math.pi)
    
    def test_iteration_order(self):
        layout = LayoutModel.from_degrees([30, 10, 20])
        assert [c.index for c in layout] == [0, 1, 2]
    
    def test_to_dict(self):
        layout = LayoutModel.from_degrees([0, 180], [45, -45])
        data = layout.to_dict()
        assert data["dimension"] == "3d"
        assert len(data["channels"]) == 2
        assert data["channels"][1]["elevation"] == pytest.approx(-math.pi / 4)
