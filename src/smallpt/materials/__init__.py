"""Materials module: reflection kinds, material samples and textures.

Components:
    reflection: ReflectionKind enumeration and the per-hit Col sample
    raster: Decoded RGBA bitmaps loaded with Pillow
    textures: Solid, Checker, Bitmap and Emission texture variants

A texture maps a surface hit point to a Col (emission, color, reflection
kind) and may reject the hit through a cutout test. The integrator
dispatches on the reflection kind:

    DIFFUSE     cosine-weighted hemisphere sampling
    SPECULAR    ideal mirror reflection
    DIELECTRIC  glass with Schlick's Fresnel approximation
"""

from .raster import Raster, load_raster
from .reflection import Col, ReflectionKind, as_reflection_kind
from .textures import (
    DEFAULT_EMISSION,
    DEFAULT_EMISSION_THRESHOLD,
    TEXTURE_GAMMA,
    BitmapTexture,
    CheckerTexture,
    ColSpec,
    EmissionTexture,
    SolidTexture,
    Texture,
    TextureKind,
)

__all__ = [
    "Col",
    "ReflectionKind",
    "as_reflection_kind",
    "Raster",
    "load_raster",
    "ColSpec",
    "Texture",
    "TextureKind",
    "SolidTexture",
    "CheckerTexture",
    "BitmapTexture",
    "EmissionTexture",
    "TEXTURE_GAMMA",
    "DEFAULT_EMISSION",
    "DEFAULT_EMISSION_THRESHOLD",
]
