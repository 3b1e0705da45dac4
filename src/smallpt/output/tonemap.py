"""Tone mapping from linear radiance to 8-bit gamma-encoded pixels.

Each channel is clamped to [0, 1], raised to 1 / gamma and scaled to 0-255
with rounding:

    to_int(x) = min(255, int(clamp(x) ** (1 / gamma) * 255 + 0.5))

NaN is treated like a negative value and encodes to 0.
"""

import numpy as np
import numpy.typing as npt

# Display gamma used when encoding output pixels
DEFAULT_GAMMA = 2.2


def clamp(x: float) -> float:
    """Clamp x to [0, 1]."""
    if not x > 0.0:
        return 0.0
    return min(float(x), 1.0)


def to_int(x: float, gamma: float = DEFAULT_GAMMA) -> int:
    """Encode one linear channel value as an 8-bit integer."""
    return min(255, int(clamp(x) ** (1.0 / gamma) * 255 + 0.5))


def encode_image(
    image: npt.NDArray[np.floating], gamma: float = DEFAULT_GAMMA
) -> npt.NDArray[np.uint8]:
    """Encode a linear (H, W, 3) image as opaque 8-bit RGBA.

    Args:
        image: Linear RGB values, any range.
        gamma: Display gamma.

    Returns:
        A (H, W, 4) uint8 array; alpha is always 255.
    """
    image = np.asarray(image, dtype=np.float64)
    if image.ndim != 3 or image.shape[2] != 3:
        raise ValueError(f"Expected an (H, W, 3) image, got shape {image.shape}")
    clamped = np.where(image > 0.0, np.minimum(image, 1.0), 0.0)
    encoded = np.minimum(255, np.floor(clamped ** (1.0 / gamma) * 255 + 0.5)).astype(np.uint8)
    alpha = np.full(image.shape[:2] + (1,), 255, dtype=np.uint8)
    return np.concatenate([encoded, alpha], axis=2)
