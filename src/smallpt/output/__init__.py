"""Output module: tone mapping and image export.

Components:
    tonemap: Clamp and gamma encoding of linear radiance to 8-bit RGBA
    export: PNG export via Pillow
"""

from .export import save_png
from .tonemap import DEFAULT_GAMMA, clamp, encode_image, to_int

__all__ = [
    "DEFAULT_GAMMA",
    "clamp",
    "to_int",
    "encode_image",
    "save_png",
]
