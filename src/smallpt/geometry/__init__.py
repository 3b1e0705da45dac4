"""Geometry module for surface primitives and their intersection routines.

Components:
    sphere: Sphere primitive with ray-sphere intersection and spherical UV
    plane: Bounded rectangle in a z = const plane
    polygon: One-sided triangle with a determinant intersection test
    mesh: Quad mesh fitted into a bounding sphere (PolygonSurface)

Host-side classes are frozen dataclasses describing the scene. The
intersection routines are Taichi functions returning a hit distance, with
0 meaning "no hit":

    t = hit_shape(ray_origin, ray_direction, shape_data...)
"""

from .kinds import SurfaceKind
from .mesh import PolygonSurface, cube_mesh, fit_vertices
from .plane import Plane, hit_plane, plane_normal, plane_uv
from .polygon import Polygon, det3, hit_triangle
from .sphere import Sphere, hit_sphere, sphere_normal, sphere_uv

Surface = Sphere | Plane | Polygon | PolygonSurface

__all__ = [
    "SurfaceKind",
    "Surface",
    "Sphere",
    "hit_sphere",
    "sphere_normal",
    "sphere_uv",
    "Plane",
    "hit_plane",
    "plane_normal",
    "plane_uv",
    "Polygon",
    "det3",
    "hit_triangle",
    "PolygonSurface",
    "cube_mesh",
    "fit_vertices",
]
