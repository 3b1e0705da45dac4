"""Camera module for primary ray generation.

Components:
    pinhole: Pinhole camera with tent-filtered sub-pixel jitter

Ray generation uses pixel coordinates with row 0 at the bottom of the image;
the renderer flips rows when writing the output buffer.
"""

from .pinhole import DEFAULT_CAMERA, PinholeCamera, primary_ray, tent_filter

__all__ = [
    "PinholeCamera",
    "DEFAULT_CAMERA",
    "primary_ray",
    "tent_filter",
]
