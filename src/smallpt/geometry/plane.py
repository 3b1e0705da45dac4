"""Bounded axis-aligned rectangle primitive.

A Plane is the rectangle [x, x + width] x [y, y + height] lying in the plane
z = position.z. Rays nearly parallel to that plane never hit it. The texture
cutout test is applied on top of the bounds check by the scene, because it
needs the texture tables.

Unlike the sphere, a plane has no inside: its normal simply faces whichever
side the ray comes from.
"""

from dataclasses import dataclass
from typing import ClassVar

import numpy as np
import numpy.typing as npt
import taichi as ti

from smallpt.core.vec import EPS, as_vec, vec2, vec3
from smallpt.errors import SceneError
from smallpt.geometry.kinds import SurfaceKind


@dataclass(frozen=True, eq=False)
class Plane:
    """A textured rectangle in a z = const plane.

    Attributes:
        width: Extent along x (positive).
        height: Extent along y (positive).
        position: Lower-left corner; its z fixes the plane.
        texture: Texture resolved at hit points; its cutout test applies.
    """

    width: float
    height: float
    position: npt.NDArray[np.float64]
    texture: object

    kind: ClassVar[SurfaceKind] = SurfaceKind.PLANE

    def __post_init__(self) -> None:
        if not (self.width > 0.0 and self.height > 0.0):
            raise SceneError(
                f"Plane size must be positive, got {self.width} x {self.height}"
            )
        object.__setattr__(self, "width", float(self.width))
        object.__setattr__(self, "height", float(self.height))
        object.__setattr__(self, "position", as_vec(self.position))


@ti.func
def hit_plane(
    origin: vec3, direction: vec3, corner: vec3, width: ti.f64, height: ti.f64
) -> ti.f64:
    """Distance along the ray to the rectangle, or 0 on a miss.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        corner: Lower-left corner of the rectangle.
        width: Extent along x.
        height: Extent along y.

    Returns:
        The hit distance (> EPS) or 0.0 when the ray is parallel to the
        plane, points away from it, or lands outside the rectangle.
    """
    t = 0.0
    if ti.abs(direction.z) >= EPS:
        d = (corner.z - origin.z) / direction.z
        if d > EPS:
            p = origin + direction * d - corner
            if p.x >= 0.0 and p.x <= width and p.y >= 0.0 and p.y <= height:
                t = d
    return t


@ti.func
def plane_normal(direction: vec3) -> vec3:
    """Normal facing back toward the incoming ray."""
    n = vec3(0.0, 0.0, 1.0)
    if direction.z > 0.0:
        n = vec3(0.0, 0.0, -1.0)
    return n


@ti.func
def plane_uv(point: vec3, corner: vec3, width: ti.f64, height: ti.f64) -> vec2:
    """Position within the rectangle scaled to [0, 1] x [0, 1]."""
    return vec2((point.x - corner.x) / width, (point.y - corner.y) / height)
