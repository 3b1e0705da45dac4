"""Image export for rendered output.

Supported formats:
    - PNG (8-bit RGBA via Pillow)

Example:
    >>> from smallpt.output.export import save_png
    >>> from smallpt.output.tonemap import encode_image
    >>> save_png(encode_image(linear_image), "image.png")
"""

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image as PILImage

logger = logging.getLogger(__name__)


def save_png(pixels: npt.NDArray[np.uint8], filepath: str | Path) -> Path:
    """Save an 8-bit RGBA pixel array as a PNG file.

    Args:
        pixels: Array of shape (H, W, 4) with dtype uint8, top row first.
        filepath: Output file path.

    Returns:
        The path written.

    Raises:
        ValueError: If the array is not (H, W, 4) uint8.
        OSError: If the file cannot be written.
    """
    pixels = np.asarray(pixels)
    if pixels.ndim != 3 or pixels.shape[2] != 4 or pixels.dtype != np.uint8:
        raise ValueError(
            f"Expected an (H, W, 4) uint8 array, got {pixels.shape} {pixels.dtype}"
        )
    path = Path(filepath)
    PILImage.fromarray(np.ascontiguousarray(pixels)).save(path, format="PNG")
    logger.debug("Wrote %s (%dx%d)", path, pixels.shape[1], pixels.shape[0])
    return path
