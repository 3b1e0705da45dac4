"""Unit tests for triangles and triangle meshes.

Tests cover:
- One-sided triangle intersection
- Barycentric bounds
- Derived edges and face normal
- Mesh fitting into the bounding sphere
- Quad splitting and degenerate triangle removal
- The built-in cube mesh
"""

import numpy as np
import pytest
import taichi as ti


def _hit_triangle(origin, direction, p1, p2, p3) -> float:
    from smallpt.geometry.polygon import Polygon, hit_triangle, vec3

    poly = Polygon(p1, p2, p3, None)
    t_val = ti.field(dtype=ti.f64, shape=())

    @ti.kernel
    def test_kernel(o: vec3, d: vec3, a: vec3, e1: vec3, e2: vec3):
        t_val[None] = hit_triangle(o, d, a, e1, e2)

    test_kernel(
        vec3(*origin), vec3(*direction), vec3(*poly.p2), vec3(*poly.e1), vec3(*poly.e2)
    )
    return float(t_val[None])


# Triangle in the z = 0 plane whose normal (e1 x e2) points toward +z
FRONT = ((1.0, 0.0, 0.0), (0.0, 0.0, 0.0), (0.0, 1.0, 0.0))


class TestPolygon:
    """Tests for the Polygon dataclass and triangle intersection."""

    def test_derived_edges_and_normal(self):
        """Test that edges are anchored at p2 and the normal is unit length."""
        from smallpt.geometry.polygon import Polygon

        poly = Polygon((2, 0, 0), (0, 0, 0), (0, 3, 0), None)
        assert np.allclose(poly.e1, [2, 0, 0])
        assert np.allclose(poly.e2, [0, 3, 0])
        assert np.allclose(poly.normal, [0, 0, 1])
        assert np.allclose(poly.position, [0, 0, 0])
        assert not poly.is_degenerate

    def test_degenerate_detection(self):
        """Test that coincident vertices mark a triangle degenerate."""
        from smallpt.geometry.polygon import Polygon

        assert Polygon((1, 1, 1), (1, 1, 1), (0, 3, 0), None).is_degenerate
        assert Polygon((1, 1, 1), (0, 0, 0), (1, 1, 1), None).is_degenerate

    def test_front_hit(self):
        """Test a ray hitting the front face."""
        t = _hit_triangle((0.2, 0.2, 3.0), (0.0, 0.0, -1.0), *FRONT)
        assert t == pytest.approx(3.0)

    def test_back_face_misses(self):
        """Test that triangles are one-sided."""
        assert _hit_triangle((0.2, 0.2, -3.0), (0.0, 0.0, 1.0), *FRONT) == 0.0

    @pytest.mark.parametrize("xy", [(0.6, 0.6), (-0.1, 0.5), (0.5, -0.1), (1.2, 0.0)])
    def test_outside_triangle_misses(self, xy):
        """Test that hits outside the barycentric bounds are rejected."""
        assert _hit_triangle((xy[0], xy[1], 3.0), (0.0, 0.0, -1.0), *FRONT) == 0.0

    def test_behind_origin_misses(self):
        """Test that a triangle behind the ray is not hit."""
        assert _hit_triangle((0.2, 0.2, -3.0), (0.0, 0.0, -1.0), *FRONT) == 0.0


class TestPolygonSurface:
    """Tests for mesh construction."""

    def test_fit_vertices(self):
        """Test that vertices are recentered and scaled to the target radius."""
        from smallpt.geometry.mesh import fit_vertices

        vertices = np.array([(0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (0.0, 4.0, 0.0)])
        fitted = fit_vertices(vertices, 10.0, np.array([5.0, 5.0, 5.0]))
        distances = np.linalg.norm(fitted - (5.0, 5.0, 5.0), axis=1)
        assert distances.max() == pytest.approx(10.0)
        # bounding box center (1, 2, 0) lands on the position
        lo, hi = fitted.min(axis=0), fitted.max(axis=0)
        assert np.allclose((lo + hi) / 2.0, (5.0, 5.0, 5.0))

    def test_cube_mesh(self, gray_texture):
        """Test the cube yields 12 triangles inside the bounding sphere."""
        from smallpt.geometry.mesh import PolygonSurface, cube_mesh

        vertices, faces = cube_mesh()
        mesh = PolygonSurface(25, (27, 52, 70), vertices, faces, gray_texture)
        assert len(mesh.triangles) == 12
        assert mesh.bound.radius == 25.0
        assert np.allclose(mesh.bound.position, (27, 52, 70))
        distances = np.linalg.norm(mesh.vertices - (27, 52, 70), axis=1)
        assert np.allclose(distances, 25.0)
        assert all(t.texture is gray_texture for t in mesh.triangles)

    def test_cube_normals_point_outward(self, gray_texture):
        """Test every cube face is wound so its normal points away from the center."""
        from smallpt.geometry.mesh import PolygonSurface, cube_mesh

        vertices, faces = cube_mesh()
        mesh = PolygonSurface(1, (0, 0, 0), vertices, faces, gray_texture)
        for tri in mesh.triangles:
            centroid = (tri.p1 + tri.p2 + tri.p3) / 3.0
            assert np.dot(tri.normal, centroid) > 0.0

    def test_degenerate_triangles_dropped(self, gray_texture):
        """Test that a collapsed quad corner drops one triangle."""
        from smallpt.geometry.mesh import PolygonSurface

        vertices = np.array([(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0)], dtype=float)
        # (a, b, c, d) with d == a: the second triangle (c, a, a) collapses
        faces = np.array([(0, 1, 2, 0, 0)])
        mesh = PolygonSurface(1, (0, 0, 0), vertices, faces, gray_texture)
        assert len(mesh.triangles) == 1

    def test_flat_vertex_list_accepted(self, gray_texture):
        """Test that a flat x, y, z vertex list is reshaped."""
        from smallpt.geometry.mesh import PolygonSurface

        flat = [0, 0, 0, 1, 0, 0, 1, 1, 0, 0, 1, 0]
        mesh = PolygonSurface(1, (0, 0, 0), flat, [(0, 1, 2, 3)], gray_texture)
        assert mesh.vertices.shape == (4, 3)
        assert len(mesh.triangles) == 2

    @pytest.mark.parametrize(
        "vertices, faces",
        [
            ([], [(0, 1, 2, 3)]),
            ([(0, 0, 0), (1, 0, 0), (0, 1, 0)], [(0, 1, 2)]),
            ([(0, 0, 0), (1, 0, 0), (0, 1, 0)], [(0, 1, 2, 7)]),
        ],
    )
    def test_malformed_mesh_rejected(self, gray_texture, vertices, faces):
        """Test that bad arrays are scene errors."""
        from smallpt.errors import SceneError
        from smallpt.geometry.mesh import PolygonSurface

        with pytest.raises(SceneError):
            PolygonSurface(1, (0, 0, 0), vertices, faces, gray_texture)
