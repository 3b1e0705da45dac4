"""Triangle meshes fitted into a bounding sphere.

A PolygonSurface is built from raw vertex and quad-face arrays:

1. vertices are read as an (N, 3) array,
2. their axis-aligned bounds give a center,
3. the largest vertex distance from that center gives the natural radius,
4. every vertex is rescaled and recentered so the mesh fits the requested
   radius around the placement position,
5. each quad (a, b, c, d) becomes triangles (a, b, c) and (c, d, a), and
   triangles with coincident vertices are dropped,
6. a bounding sphere with the requested radius is kept for early rejection.

The mesh is never shaded itself. Intersections report the triangle that was
hit, and triangles are shaded with their own flat normal.

Example:
    >>> from smallpt.geometry.mesh import PolygonSurface, cube_mesh
    >>> from smallpt.materials.textures import SolidTexture
    >>> vertices, faces = cube_mesh()
    >>> box = PolygonSurface(25, (27, 52, 70), vertices, faces,
    ...                      SolidTexture((0, 0, 0), (0.25, 0.5, 0.75)))
    >>> len(box.triangles)
    12
"""

import logging
from dataclasses import dataclass, field
from typing import ClassVar

import numpy as np
import numpy.typing as npt

from smallpt.core.vec import as_vec
from smallpt.errors import SceneError
from smallpt.geometry.kinds import SurfaceKind
from smallpt.geometry.polygon import Polygon
from smallpt.geometry.sphere import Sphere

logger = logging.getLogger(__name__)


def fit_vertices(
    vertices: npt.NDArray[np.float64], radius: float, position: npt.NDArray[np.float64]
) -> npt.NDArray[np.float64]:
    """Rescale and recenter vertices to fit a sphere of the given radius.

    Args:
        vertices: Array of shape (N, 3).
        radius: Target bounding radius.
        position: Target center.

    Returns:
        A new (N, 3) array. A mesh whose vertices all coincide is moved to
        the position without scaling.
    """
    lo = vertices.min(axis=0)
    hi = vertices.max(axis=0)
    center = (lo + hi) / 2.0
    natural = float(np.linalg.norm(vertices - center, axis=1).max())
    scale = radius / natural if natural > 0.0 else 1.0
    return (vertices - center) * scale + position


@dataclass(frozen=True, eq=False)
class PolygonSurface:
    """A quad mesh scaled into a bounding sphere.

    Attributes:
        radius: Radius of the bounding sphere the mesh is fitted into.
        position: Center of the bounding sphere.
        vertices: Raw vertex positions, shape (N, 3).
        faces: Quad faces, shape (M, 4) or wider; columns beyond the fourth
            are ignored.
        texture: Texture shared by every triangle.
        triangles: The derived, non-degenerate triangles.
        bound: The bounding sphere used for early rejection.
    """

    radius: float
    position: npt.NDArray[np.float64]
    vertices: npt.NDArray[np.float64]
    faces: npt.NDArray[np.int64]
    texture: object
    triangles: tuple[Polygon, ...] = field(init=False)
    bound: Sphere = field(init=False)

    kind: ClassVar[SurfaceKind] = SurfaceKind.POLYGON_SURFACE

    def __post_init__(self) -> None:
        position = as_vec(self.position)
        vertices = np.asarray(self.vertices, dtype=np.float64)
        if vertices.size % 3 != 0 or vertices.size == 0:
            raise SceneError(f"Mesh vertices must be a non-empty (N, 3) array, got {vertices.shape}")
        vertices = vertices.reshape(-1, 3)

        faces = np.asarray(self.faces, dtype=np.int64)
        if faces.ndim != 2 or faces.shape[1] < 4:
            raise SceneError(f"Mesh faces must have shape (M, 4), got {faces.shape}")
        faces = faces[:, :4]
        if faces.size and (faces.min() < 0 or faces.max() >= len(vertices)):
            raise SceneError("Mesh face index out of range")

        bound = Sphere(self.radius, position, self.texture)
        fitted = fit_vertices(vertices, bound.radius, position)

        triangles = []
        for a, b, c, d in faces:
            for i, j, k in ((a, b, c), (c, d, a)):
                polygon = Polygon(fitted[i], fitted[j], fitted[k], self.texture)
                if not polygon.is_degenerate:
                    triangles.append(polygon)

        object.__setattr__(self, "radius", bound.radius)
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "vertices", fitted)
        object.__setattr__(self, "faces", faces)
        object.__setattr__(self, "triangles", tuple(triangles))
        object.__setattr__(self, "bound", bound)

        logger.debug(
            "Mesh with %d vertices, %d faces -> %d triangles",
            len(fitted),
            len(faces),
            len(triangles),
        )


def cube_mesh() -> tuple[npt.NDArray[np.float64], npt.NDArray[np.int64]]:
    """Vertices and outward-wound quad faces of the cube [-1, 1]^3."""
    vertices = np.array(
        [
            (-1.0, -1.0, -1.0),
            (1.0, -1.0, -1.0),
            (1.0, 1.0, -1.0),
            (-1.0, 1.0, -1.0),
            (-1.0, -1.0, 1.0),
            (1.0, -1.0, 1.0),
            (1.0, 1.0, 1.0),
            (-1.0, 1.0, 1.0),
        ]
    )
    faces = np.array(
        [
            (0, 1, 2, 3),
            (1, 5, 6, 2),
            (0, 3, 7, 4),
            (2, 6, 7, 3),
            (0, 4, 5, 1),
            (7, 6, 5, 4),
        ],
        dtype=np.int64,
    )
    return vertices, faces
