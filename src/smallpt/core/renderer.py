"""Scanline-parallel renderer with 2x2 sub-pixel supersampling.

For every pixel the renderer traces samples // 4 camera rays through each of
its four sub-pixels, jittered with a tent filter. Each sub-pixel's average is
clamped to [0, 1] and contributes a quarter of the pixel value. The outer
loop of the render kernel runs over scanlines, which Taichi distributes over
its thread pool; rows never share state and every pixel draws from its own
random stream, so a fixed seed always gives the same image.

The linear image is tone mapped only when it is read out (see
smallpt.output.tonemap).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from smallpt.core.renderer import Renderer
    >>> from smallpt.camera.pinhole import DEFAULT_CAMERA
    >>> from smallpt.scene.default_scene import create_default_scene
    >>>
    >>> renderer = Renderer(create_default_scene(), DEFAULT_CAMERA, 256, 192)
    >>> renderer.render(samples=8, seed=1)
    >>> renderer.save("image.png")
"""

import logging
import time
from datetime import timedelta
from pathlib import Path

import numpy as np
import numpy.typing as npt
import taichi as ti

from smallpt.camera.pinhole import PinholeCamera, primary_ray, tent_filter
from smallpt.core.integrator import trace_path
from smallpt.core.rng import next_uniform, seed_stream
from smallpt.core.vec import clamp01, vec3
from smallpt.errors import InvariantViolation
from smallpt.output.export import save_png
from smallpt.output.tonemap import DEFAULT_GAMMA, encode_image

logger = logging.getLogger(__name__)

# Sub-pixel grid is SUBPIXELS x SUBPIXELS
SUBPIXELS = 2


def samples_per_subpixel(samples: int) -> int:
    """Camera rays traced per sub-pixel for a per-pixel sample budget."""
    return max(1, samples // (SUBPIXELS * SUBPIXELS))


@ti.data_oriented
class Renderer:
    """Renders a scene through a pinhole camera into a linear image.

    Args:
        scene: The Scene to render.
        camera: The camera looking at the scene.
        width: Image width in pixels.
        height: Image height in pixels.
        backend: Label reported in the timing log line.

    Raises:
        ValueError: If the image size is not positive.
    """

    def __init__(
        self,
        scene,
        camera: PinholeCamera,
        width: int,
        height: int,
        backend: str = "cpu",
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"Image size must be positive, got {width}x{height}")
        self.scene = scene
        self.camera = camera
        self.width = int(width)
        self.height = int(height)
        self.backend = backend
        self.near = float(camera.near)
        self.samples = 0

        # Linear radiance, row 0 at the top of the image
        self.image = ti.Vector.field(3, dtype=ti.f64, shape=(self.height, self.width))
        self._invalid = ti.field(dtype=ti.i32, shape=())

        position, direction, cx, cy = camera.basis(self.width, self.height)
        self._cam_position = ti.Vector.field(3, dtype=ti.f64, shape=())
        self._cam_direction = ti.Vector.field(3, dtype=ti.f64, shape=())
        self._cam_cx = ti.Vector.field(3, dtype=ti.f64, shape=())
        self._cam_cy = ti.Vector.field(3, dtype=ti.f64, shape=())
        self._cam_position.from_numpy(position)
        self._cam_direction.from_numpy(direction)
        self._cam_cx.from_numpy(cx)
        self._cam_cy.from_numpy(cy)

    @ti.kernel
    def _render_kernel(self, spp: ti.i32, seed: ti.i32):
        for y in range(self.height):
            position = self._cam_position[None]
            direction = self._cam_direction[None]
            cx = self._cam_cx[None]
            cy = self._cam_cy[None]
            width = ti.cast(self.width, ti.f64)
            height = ti.cast(self.height, ti.f64)
            for x in range(self.width):
                rng = seed_stream(seed, y, x)
                pixel = vec3(0.0, 0.0, 0.0)
                for sy in range(SUBPIXELS):
                    for sx in range(SUBPIXELS):
                        acc = vec3(0.0, 0.0, 0.0)
                        for _ in range(spp):
                            u1, rng = next_uniform(rng)
                            u2, rng = next_uniform(rng)
                            dx = tent_filter(2.0 * u1)
                            dy = tent_filter(2.0 * u2)
                            ray = primary_ray(
                                position,
                                direction,
                                cx,
                                cy,
                                self.near,
                                (sx + 0.5 + dx) / 2.0 + x,
                                (sy + 0.5 + dy) / 2.0 + y,
                                width,
                                height,
                            )
                            radiance, _depth, invalid, rng = trace_path(self.scene, ray, rng)
                            if invalid == 1:
                                self._invalid[None] = 1
                            acc += radiance
                        acc = acc / ti.cast(spp, ti.f64)
                        pixel += clamp01(acc) * 0.25
                self.image[self.height - 1 - y, x] = pixel

    def render(self, samples: int, seed: int = 0) -> None:
        """Render the image, replacing any previous result.

        Args:
            samples: Per-pixel sample budget; samples // 4 (at least 1) camera
                rays are traced per sub-pixel.
            seed: Seed of the per-pixel random streams.

        Raises:
            ValueError: If samples is not positive.
            InvariantViolation: If a path met an unknown reflection kind.
        """
        if samples <= 0:
            raise ValueError(f"Sample count must be positive, got {samples}")
        spp = samples_per_subpixel(samples)

        self._invalid[None] = 0
        start = time.perf_counter()
        self._render_kernel(spp, int(seed))
        ti.sync()
        elapsed = time.perf_counter() - start

        if self._invalid[None] != 0:
            raise InvariantViolation("A material with an unknown reflection kind was hit")

        self.samples = spp * SUBPIXELS * SUBPIXELS
        logger.info(
            "Samples:%d Type:%s Time:%s", self.samples, self.backend, timedelta(seconds=elapsed)
        )

    def linear_image(self) -> npt.NDArray[np.float64]:
        """The rendered image as a (height, width, 3) float array, top row first."""
        return self.image.to_numpy()

    def to_rgba(self, gamma: float = DEFAULT_GAMMA) -> npt.NDArray[np.uint8]:
        """The rendered image gamma encoded to 8-bit RGBA."""
        return encode_image(self.linear_image(), gamma)

    def save(self, path: str | Path, gamma: float = DEFAULT_GAMMA) -> Path:
        """Encode the rendered image and write it as a PNG file."""
        return save_png(self.to_rgba(gamma), path)
