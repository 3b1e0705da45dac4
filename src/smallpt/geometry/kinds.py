"""Tags identifying the surface variant inside kernels."""

from enum import IntEnum


class SurfaceKind(IntEnum):
    """The closed set of surface primitives."""

    SPHERE = 0
    PLANE = 1
    POLYGON = 2
    POLYGON_SURFACE = 3
