"""Texture variants mapping surface-space points to material samples.

Four texture kinds exist and the set is closed:

    SolidTexture    one constant Col everywhere
    CheckerTexture  two diffuse colors alternating in a UV checkerboard
    BitmapTexture   diffuse color decoded from a raster; alpha is a cutout
    EmissionTexture bright emitter masked by a raster's dark, opaque pixels

The classes in this module are the host-side description of a texture. The
scene packs them into Taichi fields tagged with TextureKind, and the kernel
helpers below (checker parity, raster addressing, channel decoding) are used
by the scene when it resolves a hit.

Example:
    >>> from smallpt.materials.textures import SolidTexture, CheckerTexture
    >>> from smallpt.materials.reflection import ReflectionKind
    >>> glass = SolidTexture((0, 0, 0), (0.999, 0.999, 0.999), ReflectionKind.DIELECTRIC)
    >>> floor = CheckerTexture((0.9, 0.9, 0.9), (0.1, 0.1, 0.1), frequency=0.1)
"""

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import ClassVar

import numpy as np
import numpy.typing as npt
import taichi as ti

from smallpt.core.vec import as_vec, vec2
from smallpt.errors import SceneError
from smallpt.materials.raster import Raster, load_raster
from smallpt.materials.reflection import ReflectionKind, as_reflection_kind

# Gamma used to decode 8-bit texture channels into linear reflectance
TEXTURE_GAMMA = 2.2

# Emitted radiance of an EmissionTexture and its red-channel mask threshold
DEFAULT_EMISSION = (12.0, 12.0, 12.0)
DEFAULT_EMISSION_THRESHOLD = 80

_ZERO = (0.0, 0.0, 0.0)


class TextureKind(IntEnum):
    """Tag identifying the texture variant inside kernels."""

    SOLID = 0
    CHECKER = 1
    BITMAP = 2
    EMISSION = 3


@dataclass(frozen=True)
class ColSpec:
    """Host-side material sample (emission, color, reflection kind)."""

    emission: npt.NDArray[np.float64]
    color: npt.NDArray[np.float64]
    reflection: ReflectionKind

    @classmethod
    def of(cls, emission, color, reflection) -> "ColSpec":
        return cls(as_vec(emission), as_vec(color), as_reflection_kind(reflection))


@dataclass(frozen=True, eq=False)
class SolidTexture:
    """A texture returning the same material sample everywhere."""

    emission: tuple[float, float, float]
    color: tuple[float, float, float]
    reflection: ReflectionKind = ReflectionKind.DIFFUSE

    kind: ClassVar[TextureKind] = TextureKind.SOLID

    def __post_init__(self) -> None:
        object.__setattr__(self, "reflection", as_reflection_kind(self.reflection))

    @property
    def col(self) -> "ColSpec":
        return ColSpec.of(self.emission, self.color, self.reflection)


@dataclass(frozen=True, eq=False)
class CheckerTexture:
    """Two diffuse colors alternating by UV parity.

    Attributes:
        color1: Used where (frac(u/f) - 0.5) * (frac(v/f) - 0.5) > 0.
        color2: Used elsewhere.
        frequency: Checker period in UV units.
    """

    color1: tuple[float, float, float]
    color2: tuple[float, float, float]
    frequency: float

    kind: ClassVar[TextureKind] = TextureKind.CHECKER

    def __post_init__(self) -> None:
        if self.frequency <= 0.0:
            raise SceneError(f"Checker frequency must be positive, got {self.frequency}")

    @property
    def col1(self) -> "ColSpec":
        return ColSpec.of(_ZERO, self.color1, ReflectionKind.DIFFUSE)

    @property
    def col2(self) -> "ColSpec":
        return ColSpec.of(_ZERO, self.color2, ReflectionKind.DIFFUSE)


@dataclass(frozen=True, eq=False)
class BitmapTexture:
    """Diffuse color sampled from a raster.

    Attributes:
        raster: The decoded image.
        offset: Horizontal shift added to U before wrapping (rotates a globe).
        enhance: Multiplier applied to the decoded linear channels.
    """

    raster: Raster
    offset: float = 0.0
    enhance: float = 1.0

    kind: ClassVar[TextureKind] = TextureKind.BITMAP

    @classmethod
    def load(
        cls, path: str | Path, offset: float = 0.0, enhance: float = 1.0
    ) -> "BitmapTexture":
        """Load the raster from an image file (raises AssetLoadError)."""
        return cls(load_raster(path), offset, enhance)


@dataclass(frozen=True, eq=False)
class EmissionTexture:
    """Masked area light cut out of a raster.

    The surface emits a fixed radiance and reflects nothing. It exists only
    where the raster pixel is opaque and its red channel is below the
    threshold.
    """

    raster: Raster
    emission: tuple[float, float, float] = DEFAULT_EMISSION
    threshold: int = DEFAULT_EMISSION_THRESHOLD

    kind: ClassVar[TextureKind] = TextureKind.EMISSION

    @property
    def col(self) -> "ColSpec":
        return ColSpec.of(self.emission, _ZERO, ReflectionKind.DIFFUSE)

    @classmethod
    def load(cls, path: str | Path, **kwargs) -> "EmissionTexture":
        """Load the raster from an image file (raises AssetLoadError)."""
        return cls(load_raster(path), **kwargs)


Texture = SolidTexture | CheckerTexture | BitmapTexture | EmissionTexture


# =============================================================================
# Kernel Helpers
# =============================================================================


@ti.func
def fractional(x: ti.f64) -> ti.f64:
    """Fractional part x - floor(x), always in [0, 1)."""
    return x - ti.floor(x)


@ti.func
def checker_first(uv: vec2, frequency: ti.f64) -> ti.i32:
    """Return 1 where the checkerboard shows its first color, else 0."""
    su = fractional(uv[0] / frequency) - 0.5
    sv = fractional(uv[1] / frequency) - 0.5
    return ti.select(su * sv > 0.0, 1, 0)


@ti.func
def raster_coords(uv: vec2, offset: ti.f64, width: ti.i32, height: ti.i32):
    """Map UV to raster pixel coordinates.

    U is shifted by offset and wraps around the image width. V is flipped
    (v = 1 is the top row) and clamped to the image instead of wrapping.

    Returns:
        A tuple (px, py) of integer pixel coordinates.
    """
    px = ti.cast(ti.floor((uv[0] + offset) * width), ti.i32) % width
    if px < 0:
        px += width
    py = ti.cast((1.0 - uv[1]) * height, ti.i32)
    py = ti.min(ti.max(py, 0), height - 1)
    return px, py


@ti.func
def decode_channel(value: ti.i32, enhance: ti.f64) -> ti.f64:
    """Gamma-decode an 8-bit channel into linear reflectance."""
    return (ti.cast(value, ti.f64) / 255.0) ** TEXTURE_GAMMA * enhance
