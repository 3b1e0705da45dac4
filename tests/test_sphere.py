"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere
- Sphere behind the ray origin
- Normal and UV mapping
- Host-side validation
"""

import numpy as np
import pytest
import taichi as ti


def _hit(origin, direction, center, radius) -> float:
    from smallpt.geometry.sphere import hit_sphere, vec3

    t_val = ti.field(dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, c: vec3, r: ti.f64):
        t_val[None] = hit_sphere(o, d, c, r)

    test_kernel(vec3(*origin), vec3(*direction), vec3(*center), radius)
    return float(t_val[None])


class TestSphereBasics:
    """Tests for the Sphere dataclass."""

    def test_sphere_fields(self, gray_texture):
        """Test that position is converted to a float vector."""
        from smallpt.geometry.kinds import SurfaceKind
        from smallpt.geometry.sphere import Sphere

        sphere = Sphere(2, (1, 2, 3), gray_texture)
        assert sphere.radius == 2.0
        assert sphere.position.dtype == np.float64
        assert sphere.kind == SurfaceKind.SPHERE

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius_rejected(self, gray_texture, radius):
        """Test that a non-positive radius is a scene error."""
        from smallpt.errors import SceneError
        from smallpt.geometry.sphere import Sphere

        with pytest.raises(SceneError):
            Sphere(radius, (0, 0, 0), gray_texture)


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_through_center(self):
        """Test that a ray through the center hits at distance - radius."""
        origin = (0.0, 0.0, 10.0)
        t = _hit(origin, (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 2.5)
        assert t == pytest.approx(10.0 - 2.5, abs=1e-4)

    def test_hit_offset_center(self):
        """Test hit distance for a sphere away from the origin."""
        t = _hit((1.0, 2.0, 3.0), (1.0, 0.0, 0.0), (11.0, 2.0, 3.0), 4.0)
        assert t == pytest.approx(6.0, abs=1e-4)

    def test_miss(self):
        """Test that a ray passing beside the sphere misses."""
        assert _hit((0.0, 5.0, 10.0), (0.0, 0.0, -1.0), (0.0, 0.0, 0.0), 1.0) == 0.0

    def test_inside_returns_far_root(self):
        """Test that a ray starting inside hits the far side."""
        t = _hit((0.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 0.0), 3.0)
        assert t == pytest.approx(3.0, abs=1e-4)

    def test_sphere_behind_origin_misses(self):
        """Test that spheres behind the ray are not hit."""
        assert _hit((0.0, 0.0, 10.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0) == 0.0

    def test_origin_on_surface_skips_self_hit(self):
        """Test that a ray leaving the surface outward does not re-hit it."""
        assert _hit((0.0, 0.0, 1.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0), 1.0) == 0.0

    def test_huge_wall_sphere(self):
        """Test hitting a 1e5 radius wall sphere from inside the box."""
        t = _hit((50.0, 40.0, 80.0), (-1.0, 0.0, 0.0), (1e5 + 1.0, 40.8, 81.6), 1e5)
        assert t == pytest.approx(49.0, abs=1e-2)


class TestSphereShading:
    """Tests for sphere normal and UV mapping."""

    def test_normal_and_uv(self):
        """Test the outward normal and UV at the sphere's poles and equator."""
        from smallpt.geometry.sphere import sphere_normal, sphere_uv, vec3

        normal = ti.Vector.field(3, dtype=ti.f64, shape=())
        uv = ti.Vector.field(2, dtype=ti.f64, shape=3)

        @ti.kernel
        def test_kernel():
            c = vec3(1.0, 1.0, 1.0)
            normal[None] = sphere_normal(vec3(1.0, 3.0, 1.0), c)
            uv[0] = sphere_uv(vec3(1.0, 3.0, 1.0), c, 2.0)
            uv[1] = sphere_uv(vec3(1.0, -1.0, 1.0), c, 2.0)
            uv[2] = sphere_uv(vec3(3.0, 1.0, 1.0), c, 2.0)

        test_kernel()
        assert np.allclose(normal.to_numpy(), [0.0, 1.0, 0.0])
        out = uv.to_numpy()
        assert out[0][1] == pytest.approx(1.0)
        assert out[1][1] == pytest.approx(0.0)
        # +x on the equator: phi = 0 -> u = 0.5, v = 0.5
        assert np.allclose(out[2], [0.5, 0.5])
        assert np.all((out >= 0.0) & (out <= 1.0))
