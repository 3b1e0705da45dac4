"""Pinhole camera producing jittered primary rays.

The camera sits at a position looking along a fixed direction. For an image
of W x H pixels it spans the image plane with two axes:

    cx = (W * scale / H, 0, 0)
    cy = normalize(cx x direction) * scale

A primary ray through pixel (x, y), sub-pixel (sx, sy) and tent-filtered
jitter (dx, dy) has direction

    d = cx * (((sx + 0.5 + dx) / 2 + x) / W - 0.5)
      + cy * (((sy + 0.5 + dy) / 2 + y) / H - 0.5) + direction

and starts at position + near * d, pushed forward into the scene interior.
Row y = 0 is the bottom of the image.

Example:
    >>> from smallpt.camera.pinhole import PinholeCamera, DEFAULT_CAMERA
    >>> origin, direction, cx, cy = DEFAULT_CAMERA.basis(1024, 768)
"""

from dataclasses import dataclass

import numpy as np
import numpy.typing as npt
import taichi as ti

from smallpt.core.vec import Ray, as_vec, make_ray, normalize, normalize_array, vec3

# Half-height of the image plane at unit distance (about 54.4 degrees fov)
DEFAULT_SCALE = 0.5135

# Distance camera rays are pushed forward before tracing starts
DEFAULT_NEAR = 140.0


@dataclass(frozen=True)
class PinholeCamera:
    """Configuration for a pinhole camera.

    Attributes:
        position: Camera position in world space.
        direction: Viewing direction; normalized on construction.
        scale: Image plane half-height at unit distance.
        near: Distance camera rays are advanced along their unnormalized
            direction before tracing.
    """

    position: npt.NDArray[np.float64]
    direction: npt.NDArray[np.float64]
    scale: float = DEFAULT_SCALE
    near: float = DEFAULT_NEAR

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", as_vec(self.position))
        object.__setattr__(self, "direction", normalize_array(self.direction))

    def basis(self, width: int, height: int):
        """Image plane axes for a width x height image.

        Returns:
            A tuple (position, direction, cx, cy) of numpy vectors.
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        cx = np.array([width * self.scale / height, 0.0, 0.0])
        cy = normalize_array(np.cross(cx, self.direction)) * self.scale
        return self.position, self.direction, cx, cy


DEFAULT_CAMERA = PinholeCamera(position=(50.0, 52.0, 295.6), direction=(0.0, -0.042612, -1.0))


@ti.func
def tent_filter(r: ti.f64) -> ti.f64:
    """Map r in [0, 2) to a tent-distributed offset in [-1, 1)."""
    result = 0.0
    if r < 1.0:
        result = ti.sqrt(r) - 1.0
    else:
        result = 1.0 - ti.sqrt(2.0 - r)
    return result


@ti.func
def primary_ray(
    position: vec3,
    direction: vec3,
    cx: vec3,
    cy: vec3,
    near: ti.f64,
    x: ti.f64,
    y: ti.f64,
    width: ti.f64,
    height: ti.f64,
) -> Ray:
    """Build the camera ray through image-plane coordinate (x, y).

    Args:
        position: Camera position.
        direction: Unit viewing direction.
        cx: Horizontal image plane axis.
        cy: Vertical image plane axis.
        near: Forward offset applied to the ray origin.
        x: Horizontal pixel coordinate including sub-pixel offset and jitter.
        y: Vertical pixel coordinate (0 = bottom) including offset and jitter.
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray with normalized direction.
    """
    d = cx * (x / width - 0.5) + cy * (y / height - 0.5) + direction
    return make_ray(position + d * near, normalize(d))
