"""Unit tests for the pinhole camera module.

Tests cover:
- Image plane axes for the default camera
- Tent filter range and shape
- Primary ray generation for the image center and corners
"""

import math

import numpy as np
import pytest
import taichi as ti


class TestCameraBasis:
    """Tests for image plane axis computation."""

    def test_direction_is_normalized(self):
        """Test that the viewing direction is normalized on construction."""
        from smallpt.camera.pinhole import PinholeCamera

        camera = PinholeCamera((0.0, 0.0, 0.0), (0.0, 0.0, -5.0))
        assert np.allclose(camera.direction, (0.0, 0.0, -1.0))

    def test_default_camera_axes(self):
        """Test cx, cy for the default camera at 1024x768."""
        from smallpt.camera.pinhole import DEFAULT_CAMERA, DEFAULT_SCALE

        position, direction, cx, cy = DEFAULT_CAMERA.basis(1024, 768)

        assert np.allclose(position, (50.0, 52.0, 295.6))
        assert np.linalg.norm(direction) == pytest.approx(1.0)
        assert np.allclose(cx, (1024 * DEFAULT_SCALE / 768, 0.0, 0.0))

        # cy points up, is orthogonal to cx and the view, and has length scale
        assert cy[1] > 0.0
        assert np.linalg.norm(cy) == pytest.approx(DEFAULT_SCALE)
        assert abs(np.dot(cy, cx)) < 1e-12
        assert abs(np.dot(cy, direction)) < 1e-12

    def test_aspect_ratio_scales_cx(self):
        """Test that only cx depends on the aspect ratio."""
        from smallpt.camera.pinhole import DEFAULT_CAMERA

        _, _, cx_wide, cy_wide = DEFAULT_CAMERA.basis(200, 100)
        _, _, cx_square, cy_square = DEFAULT_CAMERA.basis(100, 100)

        assert cx_wide[0] == pytest.approx(2.0 * cx_square[0])
        assert np.allclose(cy_wide, cy_square)

    @pytest.mark.parametrize("width, height", [(0, 10), (10, 0), (-1, 5)])
    def test_invalid_size(self, width, height):
        """Test that non-positive image sizes are rejected."""
        from smallpt.camera.pinhole import DEFAULT_CAMERA

        with pytest.raises(ValueError):
            DEFAULT_CAMERA.basis(width, height)


class TestTentFilter:
    """Tests for the tent-shaped jitter."""

    def test_range_and_monotonic(self):
        """Test that offsets cover [-1, 1) in increasing order."""
        from smallpt.camera.pinhole import tent_filter

        n = 200
        offsets = ti.field(dtype=ti.f64, shape=n)

        @ti.kernel
        def test_kernel():
            for i in range(n):
                offsets[i] = tent_filter(2.0 * i / n)

        test_kernel()
        values = offsets.to_numpy()

        assert values[0] == pytest.approx(-1.0)
        assert values[n // 2] == pytest.approx(0.0)
        assert np.all(values >= -1.0) and np.all(values < 1.0)
        assert np.all(np.diff(values) > 0.0)


class TestPrimaryRays:
    """Tests for camera ray generation."""

    def _rays(self, camera, width, height, points):
        from smallpt.camera.pinhole import primary_ray
        from smallpt.core.vec import vec3

        position, direction, cx, cy = camera.basis(width, height)
        w, h, near = float(width), float(height), float(camera.near)
        n = len(points)
        origins = ti.Vector.field(3, dtype=ti.f64, shape=n)
        directions = ti.Vector.field(3, dtype=ti.f64, shape=n)
        coords = ti.Vector.field(2, dtype=ti.f64, shape=n)
        coords.from_numpy(np.asarray(points, dtype=np.float64))

        @ti.kernel
        def test_kernel(pos: vec3, view: vec3, cx: vec3, cy: vec3):
            for i in range(n):
                ray = primary_ray(pos, view, cx, cy, near, coords[i][0], coords[i][1], w, h)
                origins[i] = ray.origin
                directions[i] = ray.direction

        test_kernel(vec3(*position), vec3(*direction), vec3(*cx), vec3(*cy))
        return origins.to_numpy(), directions.to_numpy()

    def test_center_ray_follows_view_direction(self):
        """Test that the image center looks straight along the view."""
        from smallpt.camera.pinhole import DEFAULT_CAMERA

        origins, directions = self._rays(DEFAULT_CAMERA, 64, 48, [(32.0, 24.0)])

        assert np.allclose(directions[0], DEFAULT_CAMERA.direction)
        expected = DEFAULT_CAMERA.position + DEFAULT_CAMERA.direction * DEFAULT_CAMERA.near
        assert np.allclose(origins[0], expected)

    def test_corner_rays(self):
        """Test that row 0 is the bottom and column 0 the left of the image."""
        from smallpt.camera.pinhole import DEFAULT_CAMERA

        _, directions = self._rays(DEFAULT_CAMERA, 64, 48, [(0.0, 0.0), (64.0, 48.0)])
        bottom_left, top_right = directions

        assert bottom_left[0] < 0.0 and top_right[0] > 0.0
        assert bottom_left[1] < DEFAULT_CAMERA.direction[1] < top_right[1]
        assert np.linalg.norm(bottom_left) == pytest.approx(1.0)

    def test_field_of_view(self):
        """Test the vertical opening angle set by the scale."""
        from smallpt.camera.pinhole import PinholeCamera

        camera = PinholeCamera((0.0, 0.0, 0.0), (0.0, 0.0, -1.0), scale=1.0, near=0.0)
        origins, directions = self._rays(camera, 10, 10, [(5.0, 10.0)])

        assert np.allclose(origins[0], 0.0)
        angle = math.degrees(math.acos(-directions[0][2]))
        assert angle == pytest.approx(math.degrees(math.atan(0.5)))
