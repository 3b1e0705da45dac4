"""Scene container with nearest-hit intersection and material lookup.

A Scene is an ordered, immutable list of surfaces. On construction it packs
the surfaces, the triangles of any meshes, the textures and their rasters
into Taichi fields (Structure of Arrays layout), after which it is only read.
The packed tables are:

    surfaces   kind, texture, position, radius, plane size, triangle range
    triangles  anchor vertex, two edges, flat normal
    textures   kind, two material samples, checker frequency, raster view
    texels     every raster's RGBA pixels, concatenated row by row

Kernel code calls Scene.intersect() to find the nearest hit and
Scene.position() to resolve the normal and material sample there. The hit
always names a leaf primitive: for a mesh it carries the index of the
triangle that was hit.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from smallpt.scene.scene import Scene
    >>> from smallpt.geometry.sphere import Sphere
    >>> from smallpt.materials.textures import SolidTexture
    >>> scene = Scene([Sphere(1.0, (0, 0, 0), SolidTexture((0, 0, 0), (0.5, 0.5, 0.5)))])
    >>> scene.probe((0, 0, 5), (0, 0, -1)).t
    4.0
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import taichi as ti

from smallpt.core.vec import INF, vec2, vec3
from smallpt.errors import SceneError
from smallpt.geometry.kinds import SurfaceKind
from smallpt.geometry.mesh import PolygonSurface
from smallpt.geometry.plane import Plane, hit_plane, plane_normal, plane_uv
from smallpt.geometry.polygon import Polygon, hit_triangle
from smallpt.geometry.sphere import Sphere, hit_sphere, sphere_normal, sphere_uv
from smallpt.materials.reflection import Col, ReflectionKind
from smallpt.materials.textures import (
    BitmapTexture,
    CheckerTexture,
    EmissionTexture,
    SolidTexture,
    TextureKind,
    checker_first,
    decode_channel,
    raster_coords,
)

logger = logging.getLogger(__name__)

_SPHERE = int(SurfaceKind.SPHERE)
_PLANE = int(SurfaceKind.PLANE)
_POLYGON_SURFACE = int(SurfaceKind.POLYGON_SURFACE)

_CHECKER = int(TextureKind.CHECKER)
_BITMAP = int(TextureKind.BITMAP)
_EMISSION = int(TextureKind.EMISSION)

_DIFFUSE = int(ReflectionKind.DIFFUSE)


@ti.dataclass
class SceneHit:
    """Result of a nearest-hit query.

    Attributes:
        hit: 1 if anything was hit, 0 otherwise.
        t: Distance to the hit along the ray. Only valid if hit == 1.
        surface: Index of the top-level surface that was hit.
        face: Index of the triangle that was hit, or -1 when the hit
            primitive is a sphere or a plane.
    """

    hit: ti.i32
    t: ti.f64
    surface: ti.i32
    face: ti.i32


@dataclass
class Probe:
    """Host-side copy of a hit and the material sample resolved there."""

    hit: bool
    t: float
    surface: int
    face: int
    normal: tuple[float, float, float]
    emission: tuple[float, float, float]
    color: tuple[float, float, float]
    reflection: int


def _vec_field(n: int):
    return ti.Vector.field(3, dtype=ti.f64, shape=max(n, 1))


def _scalar_field(dtype, n: int):
    return ti.field(dtype=dtype, shape=max(n, 1))


def _padded(values, n: int, width: int | None = None, dtype=np.float64) -> np.ndarray:
    """Stack values into an array with at least one row."""
    shape = (max(n, 1),) if width is None else (max(n, 1), width)
    out = np.zeros(shape, dtype=dtype)
    if n:
        out[:n] = np.asarray(values, dtype=dtype)
    return out


@ti.data_oriented
class Scene:
    """An immutable, ordered collection of surfaces packed for kernels.

    Args:
        surfaces: Sphere, Plane, Polygon and PolygonSurface instances, in
            scene order. The order only matters for exact distance ties,
            where the earlier surface wins.

    Raises:
        SceneError: If an entry is not a known surface type or carries an
            unknown texture.
    """

    def __init__(self, surfaces: Sequence = ()) -> None:
        self.surfaces = tuple(surfaces)
        self._textures: list = []
        self._texture_index: dict[int, int] = {}
        self._rasters: list = []
        self._raster_base: dict[int, int] = {}

        rows = []
        triangles: list[Polygon] = []
        for surface in self.surfaces:
            position = radius = None
            size = (0.0, 0.0)
            first, count = len(triangles), 0
            if isinstance(surface, Sphere):
                position, radius = surface.position, surface.radius
            elif isinstance(surface, Plane):
                position, radius = surface.position, 0.0
                size = (surface.width, surface.height)
            elif isinstance(surface, Polygon):
                position, radius = surface.position, 0.0
                triangles.append(surface)
                count = 1
            elif isinstance(surface, PolygonSurface):
                position, radius = surface.position, surface.radius
                triangles.extend(surface.triangles)
                count = len(surface.triangles)
            else:
                raise SceneError(f"Unsupported surface type: {type(surface).__name__}")
            tex = self._register_texture(surface.texture)
            rows.append((int(surface.kind), tex, position, radius, size, first, count))

        self.num_surfaces = len(rows)
        self.num_triangles = len(triangles)
        self.num_textures = len(self._textures)
        self.num_texels = sum(r.width * r.height for r in self._rasters)

        self._allocate()
        self._upload_surfaces(rows)
        self._upload_triangles(triangles)
        self._upload_textures()

        logger.debug(
            "Scene with %d surfaces, %d triangles, %d textures, %d texels",
            self.num_surfaces,
            self.num_triangles,
            self.num_textures,
            self.num_texels,
        )

    # =========================================================================
    # Packing
    # =========================================================================

    def _register_texture(self, texture) -> int:
        key = id(texture)
        if key in self._texture_index:
            return self._texture_index[key]
        if not isinstance(
            texture, (SolidTexture, CheckerTexture, BitmapTexture, EmissionTexture)
        ):
            raise SceneError(f"Unsupported texture type: {type(texture).__name__}")
        if isinstance(texture, (BitmapTexture, EmissionTexture)):
            raster = texture.raster
            if id(raster) not in self._raster_base:
                self._raster_base[id(raster)] = sum(r.width * r.height for r in self._rasters)
                self._rasters.append(raster)
        self._texture_index[key] = len(self._textures)
        self._textures.append(texture)
        return self._texture_index[key]

    def _allocate(self) -> None:
        n = self.num_surfaces
        self.surface_kind = _scalar_field(ti.i32, n)
        self.surface_tex = _scalar_field(ti.i32, n)
        self.surface_pos = _vec_field(n)
        self.surface_radius = _scalar_field(ti.f64, n)
        self.surface_size = ti.Vector.field(2, dtype=ti.f64, shape=max(n, 1))
        self.surface_first = _scalar_field(ti.i32, n)
        self.surface_count = _scalar_field(ti.i32, n)

        m = self.num_triangles
        self.tri_anchor = _vec_field(m)
        self.tri_e1 = _vec_field(m)
        self.tri_e2 = _vec_field(m)
        self.tri_normal = _vec_field(m)

        k = self.num_textures
        self.tex_kind = _scalar_field(ti.i32, k)
        self.tex_emission1 = _vec_field(k)
        self.tex_color1 = _vec_field(k)
        self.tex_reflection1 = _scalar_field(ti.i32, k)
        self.tex_emission2 = _vec_field(k)
        self.tex_color2 = _vec_field(k)
        self.tex_reflection2 = _scalar_field(ti.i32, k)
        self.tex_frequency = _scalar_field(ti.f64, k)
        self.tex_base = _scalar_field(ti.i32, k)
        self.tex_width = _scalar_field(ti.i32, k)
        self.tex_height = _scalar_field(ti.i32, k)
        self.tex_offset = _scalar_field(ti.f64, k)
        self.tex_enhance = _scalar_field(ti.f64, k)
        self.tex_threshold = _scalar_field(ti.i32, k)

        self.texels = ti.Vector.field(4, dtype=ti.u8, shape=max(self.num_texels, 1))

        # Probe results (see probe())
        self._probe_hit = SceneHit.field(shape=())
        self._probe_normal = ti.Vector.field(3, dtype=ti.f64, shape=())
        self._probe_col = Col.field(shape=())

    def _upload_surfaces(self, rows) -> None:
        n = self.num_surfaces
        self.surface_kind.from_numpy(_padded([r[0] for r in rows], n, dtype=np.int32))
        self.surface_tex.from_numpy(_padded([r[1] for r in rows], n, dtype=np.int32))
        self.surface_pos.from_numpy(_padded([r[2] for r in rows], n, 3))
        self.surface_radius.from_numpy(_padded([r[3] for r in rows], n))
        self.surface_size.from_numpy(_padded([r[4] for r in rows], n, 2))
        self.surface_first.from_numpy(_padded([r[5] for r in rows], n, dtype=np.int32))
        self.surface_count.from_numpy(_padded([r[6] for r in rows], n, dtype=np.int32))

    def _upload_triangles(self, triangles: list[Polygon]) -> None:
        m = self.num_triangles
        self.tri_anchor.from_numpy(_padded([p.p2 for p in triangles], m, 3))
        self.tri_e1.from_numpy(_padded([p.e1 for p in triangles], m, 3))
        self.tri_e2.from_numpy(_padded([p.e2 for p in triangles], m, 3))
        self.tri_normal.from_numpy(_padded([p.normal for p in triangles], m, 3))

    def _upload_textures(self) -> None:
        k = self.num_textures
        kind = np.zeros(max(k, 1), dtype=np.int32)
        emission1 = np.zeros((max(k, 1), 3))
        color1 = np.zeros((max(k, 1), 3))
        reflection1 = np.full(max(k, 1), _DIFFUSE, dtype=np.int32)
        emission2 = np.zeros((max(k, 1), 3))
        color2 = np.zeros((max(k, 1), 3))
        reflection2 = np.full(max(k, 1), _DIFFUSE, dtype=np.int32)
        frequency = np.ones(max(k, 1))
        base = np.zeros(max(k, 1), dtype=np.int32)
        width = np.ones(max(k, 1), dtype=np.int32)
        height = np.ones(max(k, 1), dtype=np.int32)
        offset = np.zeros(max(k, 1))
        enhance = np.ones(max(k, 1))
        threshold = np.zeros(max(k, 1), dtype=np.int32)

        for i, texture in enumerate(self._textures):
            kind[i] = int(texture.kind)
            if isinstance(texture, CheckerTexture):
                first, second = texture.col1, texture.col2
                frequency[i] = texture.frequency
                emission2[i], color2[i], reflection2[i] = (
                    second.emission,
                    second.color,
                    int(second.reflection),
                )
            elif isinstance(texture, BitmapTexture):
                first = None
                offset[i] = texture.offset
                enhance[i] = texture.enhance
            else:
                first = texture.col
            if first is not None:
                emission1[i], color1[i], reflection1[i] = (
                    first.emission,
                    first.color,
                    int(first.reflection),
                )
            if isinstance(texture, EmissionTexture):
                threshold[i] = texture.threshold
            if isinstance(texture, (BitmapTexture, EmissionTexture)):
                base[i] = self._raster_base[id(texture.raster)]
                width[i] = texture.raster.width
                height[i] = texture.raster.height

        self.tex_kind.from_numpy(kind)
        self.tex_emission1.from_numpy(emission1)
        self.tex_color1.from_numpy(color1)
        self.tex_reflection1.from_numpy(reflection1)
        self.tex_emission2.from_numpy(emission2)
        self.tex_color2.from_numpy(color2)
        self.tex_reflection2.from_numpy(reflection2)
        self.tex_frequency.from_numpy(frequency)
        self.tex_base.from_numpy(base)
        self.tex_width.from_numpy(width)
        self.tex_height.from_numpy(height)
        self.tex_offset.from_numpy(offset)
        self.tex_enhance.from_numpy(enhance)
        self.tex_threshold.from_numpy(threshold)

        texels = np.zeros((max(self.num_texels, 1), 4), dtype=np.uint8)
        for raster in self._rasters:
            start = self._raster_base[id(raster)]
            texels[start : start + raster.width * raster.height] = raster.pixels.reshape(-1, 4)
        self.texels.from_numpy(texels)

    # =========================================================================
    # Texture Lookup
    # =========================================================================

    @ti.func
    def texel(self, tex: ti.i32, uv: vec2):
        """RGBA value of the raster pixel under uv, as four i32 channels."""
        width = self.tex_width[tex]
        height = self.tex_height[tex]
        px, py = raster_coords(uv, self.tex_offset[tex], width, height)
        return ti.cast(self.texels[self.tex_base[tex] + py * width + px], ti.i32)

    @ti.func
    def get_col(self, tex: ti.i32, uv: vec2) -> Col:
        """Material sample of a texture at a surface-space coordinate."""
        kind = self.tex_kind[tex]
        emission = self.tex_emission1[tex]
        color = self.tex_color1[tex]
        reflection = self.tex_reflection1[tex]
        if kind == _CHECKER:
            if checker_first(uv, self.tex_frequency[tex]) == 0:
                emission = self.tex_emission2[tex]
                color = self.tex_color2[tex]
                reflection = self.tex_reflection2[tex]
        elif kind == _BITMAP:
            rgba = self.texel(tex, uv)
            enhance = self.tex_enhance[tex]
            color = vec3(
                decode_channel(rgba[0], enhance),
                decode_channel(rgba[1], enhance),
                decode_channel(rgba[2], enhance),
            )
        return Col(emission=emission, color=color, reflection=reflection)

    @ti.func
    def is_hit(self, tex: ti.i32, uv: vec2) -> ti.i32:
        """Cutout test: 0 where the texture makes the surface transparent."""
        kind = self.tex_kind[tex]
        result = 1
        if kind == _BITMAP or kind == _EMISSION:
            rgba = self.texel(tex, uv)
            if rgba[3] == 0:
                result = 0
            elif kind == _EMISSION and rgba[0] >= self.tex_threshold[tex]:
                result = 0
        return result

    # =========================================================================
    # Intersection
    # =========================================================================

    @ti.func
    def surface_uv(self, surface: ti.i32, face: ti.i32, point: vec3) -> vec2:
        """Surface-space coordinate of a hit point; triangles map to (0, 0)."""
        kind = self.surface_kind[surface]
        uv = vec2(0.0, 0.0)
        if face < 0:
            if kind == _SPHERE:
                uv = sphere_uv(point, self.surface_pos[surface], self.surface_radius[surface])
            elif kind == _PLANE:
                size = self.surface_size[surface]
                uv = plane_uv(point, self.surface_pos[surface], size[0], size[1])
        return uv

    @ti.func
    def intersect_triangles(self, origin: vec3, direction: vec3, first: ti.i32, count: ti.i32):
        """Nearest hit among a run of triangles.

        Returns:
            A tuple (t, face), with t = 0 and face = -1 when nothing is hit.
        """
        t = INF
        face = -1
        for k in range(first, first + count):
            d = hit_triangle(origin, direction, self.tri_anchor[k], self.tri_e1[k], self.tri_e2[k])
            if d != 0.0 and d < t:
                t = d
                face = k
        if face < 0:
            t = 0.0
        return t, face

    @ti.func
    def intersect(self, origin: vec3, direction: vec3) -> SceneHit:
        """Find the nearest surface hit by a ray.

        Args:
            origin: Ray origin.
            direction: Unit ray direction.

        Returns:
            A SceneHit; hit == 0 when no surface is closer than INF.
        """
        nearest = INF
        surface = -1
        face = -1
        for i in range(self.num_surfaces):
            kind = self.surface_kind[i]
            pos = self.surface_pos[i]
            d = 0.0
            f = -1
            if kind == _SPHERE:
                d = hit_sphere(origin, direction, pos, self.surface_radius[i])
            elif kind == _PLANE:
                size = self.surface_size[i]
                d = hit_plane(origin, direction, pos, size[0], size[1])
                if d != 0.0:
                    uv = plane_uv(origin + direction * d, pos, size[0], size[1])
                    if self.is_hit(self.surface_tex[i], uv) == 0:
                        d = 0.0
            else:
                bounded = 1
                if kind == _POLYGON_SURFACE:
                    if hit_sphere(origin, direction, pos, self.surface_radius[i]) == 0.0:
                        bounded = 0
                if bounded == 1:
                    d, f = self.intersect_triangles(
                        origin, direction, self.surface_first[i], self.surface_count[i]
                    )
            if d != 0.0 and d < nearest:
                nearest = d
                surface = i
                face = f
        return SceneHit(hit=ti.select(surface >= 0, 1, 0), t=nearest, surface=surface, face=face)

    @ti.func
    def position(self, hit: SceneHit, point: vec3, direction: vec3):
        """Resolve the geometric normal and material sample at a hit.

        Args:
            hit: A SceneHit with hit == 1.
            point: The hit point.
            direction: Direction of the incoming ray.

        Returns:
            A tuple (normal, col). Sphere and triangle normals face outward;
            plane normals face the side the ray came from.
        """
        surface = hit.surface
        kind = self.surface_kind[surface]
        normal = vec3(0.0, 0.0, 1.0)
        if hit.face >= 0:
            normal = self.tri_normal[hit.face]
        elif kind == _SPHERE:
            normal = sphere_normal(point, self.surface_pos[surface])
        elif kind == _PLANE:
            normal = plane_normal(direction)
        col = self.get_col(self.surface_tex[surface], self.surface_uv(surface, hit.face, point))
        return normal, col

    # =========================================================================
    # Host Queries
    # =========================================================================

    @ti.kernel
    def _probe_kernel(self, origin: vec3, direction: vec3):
        hit = self.intersect(origin, direction)
        self._probe_hit[None] = hit
        self._probe_normal[None] = vec3(0.0, 0.0, 0.0)
        self._probe_col[None] = Col(
            emission=vec3(0.0, 0.0, 0.0), color=vec3(0.0, 0.0, 0.0), reflection=0
        )
        if hit.hit == 1:
            normal, col = self.position(hit, origin + direction * hit.t, direction)
            self._probe_normal[None] = normal
            self._probe_col[None] = col

    def probe(self, origin, direction) -> Probe:
        """Trace a single ray from the host and report what it hits.

        Args:
            origin: Ray origin (3-sequence).
            direction: Ray direction (3-sequence, normalized by the caller).

        Returns:
            A Probe. Normal and material fields are zero when nothing is hit.
        """
        self._probe_kernel(vec3(*map(float, origin)), vec3(*map(float, direction)))
        hit = self._probe_hit.to_numpy()
        col = self._probe_col.to_numpy()
        return Probe(
            hit=bool(hit["hit"]),
            t=float(hit["t"]),
            surface=int(hit["surface"]),
            face=int(hit["face"]),
            normal=tuple(float(c) for c in self._probe_normal.to_numpy()),
            emission=tuple(float(c) for c in col["emission"]),
            color=tuple(float(c) for c in col["color"]),
            reflection=int(col["reflection"]),
        )

    def __len__(self) -> int:
        return self.num_surfaces
