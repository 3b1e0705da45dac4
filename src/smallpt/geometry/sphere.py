"""Sphere primitive with ray-sphere intersection and spherical UV mapping.

The intersection solves

    t^2 + 2bt + (|op|^2 - r^2) = 0,   op = center - origin,  b = op . d

in the half-b discriminant form used by smallpt. The nearer root is taken if
it lies beyond EPS, otherwise the farther one, otherwise the ray misses.
Distances are returned directly; 0 means "no hit".

Example:
    >>> from smallpt.geometry.sphere import Sphere
    >>> from smallpt.materials.textures import SolidTexture
    >>> ball = Sphere(16.5, (27, 16.5, 47), SolidTexture((0, 0, 0), (0.999, 0.999, 0.999), 1))
"""

from dataclasses import dataclass
from typing import ClassVar

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

from smallpt.core.vec import EPS, as_vec, dot, normalize, vec2, vec3
from smallpt.errors import SceneError
from smallpt.geometry.kinds import SurfaceKind


@dataclass(frozen=True, eq=False)
class Sphere:
    """A textured sphere.

    Attributes:
        radius: Sphere radius (positive).
        position: Center of the sphere.
        texture: Texture resolved at hit points.
    """

    radius: float
    position: npt.NDArray[np.float64]
    texture: object

    kind: ClassVar[SurfaceKind] = SurfaceKind.SPHERE

    def __post_init__(self) -> None:
        if not self.radius > 0.0:
            raise SceneError(f"Sphere radius must be positive, got {self.radius}")
        object.__setattr__(self, "radius", float(self.radius))
        object.__setattr__(self, "position", as_vec(self.position))


@ti.func
def hit_sphere(origin: vec3, direction: vec3, center: vec3, radius: ti.f64) -> ti.f64:
    """Distance along the ray to the sphere, or 0 on a miss.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        center: Sphere center.
        radius: Sphere radius.

    Returns:
        The smallest root greater than EPS, or 0.0 if there is none.
    """
    op = center - origin
    b = dot(op, direction)
    det = b * b - dot(op, op) + radius * radius
    t = 0.0
    if det >= 0.0:
        det = ti.sqrt(det)
        if b - det > EPS:
            t = b - det
        elif b + det > EPS:
            t = b + det
    return t


@ti.func
def sphere_normal(point: vec3, center: vec3) -> vec3:
    """Outward unit normal at a point on the sphere."""
    return normalize(point - center)


@ti.func
def sphere_uv(point: vec3, center: vec3, radius: ti.f64) -> vec2:
    """Spherical (longitude, latitude) coordinates of a point on the sphere.

    Longitude is mirrored so that equirectangular images wrap the right way
    round when seen from outside.
    """
    p = (point - center) / radius
    phi = ti.atan2(p.z, p.x)
    theta = ti.asin(tm.clamp(p.y, -1.0, 1.0))
    return vec2(1.0 - (phi + tm.pi) / (2.0 * tm.pi), (theta + tm.pi / 2.0) / tm.pi)
