"""The reference smallpt scene.

The scene is a box built from six huge spheres whose visible caps act as
walls, with:
- Left wall: red diffuse
- Right wall: blue diffuse
- Back, floor, ceiling: white diffuse
- Front wall: black (behind the camera)
- A mirror sphere and a glass sphere on the floor
- A large sphere poking through the ceiling as the light
- A blue diffuse cube mesh floating above the mirror sphere

Two optional extras use bitmap assets: a picture plane standing on the floor
with an emissive cut-out of the same picture behind it, and a textured globe.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from smallpt.scene.default_scene import SceneParams, create_default_scene
    >>> scene = create_default_scene()
    >>> scene = create_default_scene(SceneParams(picture="duke600px.png"))
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from smallpt.geometry.mesh import PolygonSurface, cube_mesh
from smallpt.geometry.plane import Plane
from smallpt.geometry.sphere import Sphere
from smallpt.materials.raster import load_raster
from smallpt.materials.reflection import ReflectionKind
from smallpt.materials.textures import BitmapTexture, EmissionTexture, SolidTexture
from smallpt.scene.scene import Scene

logger = logging.getLogger(__name__)

# Radius of the spheres used as walls
WALL_RADIUS = 1e5

# Reflectance of the mirror and glass spheres
NEAR_WHITE = (0.999, 0.999, 0.999)

_BLACK = (0.0, 0.0, 0.0)


@dataclass
class SceneParams:
    """Optional parts of the reference scene.

    Attributes:
        picture: Image used for the picture plane and its emissive cut-out.
            Both planes are left out when None.
        globe: Equirectangular image mapped onto a sphere. Left out when None.
        mesh: Whether to include the cube mesh.
    """

    picture: str | Path | None = None
    globe: str | Path | None = None
    mesh: bool = True


def _diffuse(color, emission=_BLACK) -> SolidTexture:
    return SolidTexture(emission, color, ReflectionKind.DIFFUSE)


def create_surfaces(params: SceneParams | None = None) -> list:
    """Build the surface list of the reference scene.

    Args:
        params: Optional parts to include; defaults to SceneParams().

    Returns:
        The surfaces in scene order.

    Raises:
        AssetLoadError: If a picture or globe image cannot be loaded.
    """
    if params is None:
        params = SceneParams()

    r = WALL_RADIUS
    surfaces = [
        Sphere(r, (r + 1, 40.8, 81.6), _diffuse((0.75, 0.25, 0.25))),  # Left
        Sphere(r, (-r + 99, 40.8, 81.6), _diffuse((0.25, 0.25, 0.75))),  # Right
        Sphere(r, (50, 40.8, r), _diffuse((0.75, 0.75, 0.75))),  # Back
        Sphere(r, (50, 40.8, -r + 170), _diffuse(_BLACK)),  # Front
        Sphere(r, (50, r, 81.6), _diffuse((0.75, 0.75, 0.75))),  # Bottom
        Sphere(r, (50, -r + 81.6, 81.6), _diffuse((0.75, 0.75, 0.75))),  # Top
        Sphere(13, (27, 13, 47), SolidTexture(_BLACK, NEAR_WHITE, ReflectionKind.SPECULAR)),
        Sphere(10, (73, 10, 78), SolidTexture(_BLACK, NEAR_WHITE, ReflectionKind.DIELECTRIC)),
        Sphere(600, (50, 681.6 - 0.27, 81.6), _diffuse(_BLACK, emission=(6, 6, 6))),  # Light
    ]

    if params.picture is not None:
        raster = load_raster(params.picture)
        surfaces.append(Plane(40, 30, (30, 0, 60), BitmapTexture(raster)))
        surfaces.append(Plane(32, 24, (45, 0, 100), EmissionTexture(raster)))
    if params.globe is not None:
        surfaces.append(Sphere(10, (80, 40, 85), BitmapTexture.load(params.globe, 0.65, 1.5)))
    if params.mesh:
        vertices, faces = cube_mesh()
        surfaces.append(
            PolygonSurface(25, (27, 52, 70), vertices, faces, _diffuse((0.25, 0.5, 0.75)))
        )

    logger.debug("Reference scene with %d surfaces", len(surfaces))
    return surfaces


def create_default_scene(params: SceneParams | None = None) -> Scene:
    """Build and pack the reference scene (see create_surfaces)."""
    return Scene(create_surfaces(params))
