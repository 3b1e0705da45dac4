"""Decoded bitmap rasters used by image textures.

Images are loaded with Pillow and converted to 8-bit RGBA, so the alpha
channel is always present (fully opaque for formats without transparency).
Row 0 of the pixel array is the top of the image.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

from smallpt.errors import AssetLoadError, SceneError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class Raster:
    """An 8-bit RGBA pixel array.

    Attributes:
        pixels: Array of shape (height, width, 4) with dtype uint8.
        source: Where the pixels came from, for messages only.
    """

    pixels: npt.NDArray[np.uint8]
    source: str = "<array>"

    def __post_init__(self) -> None:
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise SceneError(f"Raster must have shape (H, W, 4), got {self.pixels.shape}")
        if self.pixels.shape[0] == 0 or self.pixels.shape[1] == 0:
            raise SceneError(f"Raster {self.source} is empty")
        if self.pixels.dtype != np.uint8:
            raise SceneError(f"Raster pixels must be uint8, got {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @classmethod
    def from_array(cls, pixels, source: str = "<array>") -> Raster:
        """Build a raster from an (H, W, 4) or (H, W, 3) array of 0-255 values.

        RGB input gets an opaque alpha channel.
        """
        arr = np.asarray(pixels)
        if arr.ndim == 3 and arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr.astype(np.uint8), alpha], axis=2)
        return cls(np.ascontiguousarray(arr, dtype=np.uint8), source)


def load_raster(path: str | Path) -> Raster:
    """Load an image file into an RGBA raster.

    Args:
        path: Path to any image format Pillow can decode.

    Returns:
        The decoded raster.

    Raises:
        AssetLoadError: If the file is missing or cannot be decoded.
    """
    path = Path(path)
    try:
        with PILImage.open(path) as image:
            pixels = np.array(image.convert("RGBA"), dtype=np.uint8)
    except OSError as exc:
        raise AssetLoadError(f"Cannot load bitmap {path}: {exc}") from exc

    logger.debug("Loaded bitmap %s (%dx%d)", path, pixels.shape[1], pixels.shape[0])
    return Raster(pixels, str(path))
