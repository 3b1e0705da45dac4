"""Triangle primitive with a one-sided determinant intersection test.

A Polygon with vertices (p1, p2, p3) is anchored at p2 with edges
e1 = p1 - p2 and e2 = p3 - p2. Solving

    origin + t * d = p2 + u * e1 + v * e2

by Cramer's rule gives u, v and t as ratios of 3x3 determinants. Triangles
are one-sided: rays arriving from behind the face normal (e1 x e2) miss.

Triangles are flat shaded and carry no surface parameterization, so their
UV coordinate is always the origin.
"""

from dataclasses import dataclass, field
from typing import ClassVar

import numpy as np
import numpy.typing as npt
import taichi as ti

from smallpt.core.vec import EPS, as_vec, dot, mod, normalize_array, vec3
from smallpt.geometry.kinds import SurfaceKind


@dataclass(frozen=True, eq=False)
class Polygon:
    """A textured, one-sided triangle.

    Attributes:
        p1: First vertex.
        p2: Second vertex; the reference position of the triangle.
        p3: Third vertex.
        texture: Texture resolved at hit points.
        e1: Edge p1 - p2 (derived).
        e2: Edge p3 - p2 (derived).
        normal: Unit face normal normalize(e1 x e2) (derived).
    """

    p1: npt.NDArray[np.float64]
    p2: npt.NDArray[np.float64]
    p3: npt.NDArray[np.float64]
    texture: object
    e1: npt.NDArray[np.float64] = field(init=False)
    e2: npt.NDArray[np.float64] = field(init=False)
    normal: npt.NDArray[np.float64] = field(init=False)

    kind: ClassVar[SurfaceKind] = SurfaceKind.POLYGON

    def __post_init__(self) -> None:
        for name in ("p1", "p2", "p3"):
            object.__setattr__(self, name, as_vec(getattr(self, name)))
        e1 = self.p1 - self.p2
        e2 = self.p3 - self.p2
        object.__setattr__(self, "e1", e1)
        object.__setattr__(self, "e2", e2)
        object.__setattr__(self, "normal", normalize_array(np.cross(e1, e2)))

    @property
    def position(self) -> npt.NDArray[np.float64]:
        return self.p2

    @property
    def is_degenerate(self) -> bool:
        """True when two of the vertices coincide."""
        return (
            np.array_equal(self.p1, self.p2)
            or np.array_equal(self.p2, self.p3)
            or np.array_equal(self.p3, self.p1)
        )


@ti.func
def det3(v1: vec3, v2: vec3, v3: vec3) -> ti.f64:
    """Determinant of the 3x3 matrix with columns v1, v2, v3."""
    return dot(v1, mod(v2, v3))


@ti.func
def hit_triangle(origin: vec3, direction: vec3, anchor: vec3, e1: vec3, e2: vec3) -> ti.f64:
    """Distance along the ray to the triangle, or 0 on a miss.

    Args:
        origin: Ray origin.
        direction: Unit ray direction.
        anchor: The reference vertex p2.
        e1: Edge p1 - p2.
        e2: Edge p3 - p2.

    Returns:
        The hit distance (> EPS), or 0.0 for back-facing rays, hits outside
        the triangle, and hits behind the origin.
    """
    ray = -direction
    t = 0.0
    deno = det3(e1, e2, ray)
    if deno > 0.0:
        d = origin - anchor
        u = det3(d, e2, ray) / deno
        if u >= 0.0 and u <= 1.0:
            v = det3(e1, d, ray) / deno
            if v >= 0.0 and u + v <= 1.0:
                dist = det3(e1, e2, d) / deno
                if dist > EPS:
                    t = dist
    return t
