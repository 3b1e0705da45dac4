"""Render configuration.

Example:
    >>> from smallpt.config import RenderConfig
    >>> config = RenderConfig(samples=100, width=512, height=384)
"""

from dataclasses import dataclass

# Architectures accepted by init_taichi
ARCHES = ("cpu", "gpu")

# Largest seed accepted by the random streams
MAX_SEED = 2**31 - 1


@dataclass(frozen=True)
class RenderConfig:
    """Settings for a single render.

    Attributes:
        width: Image width in pixels.
        height: Image height in pixels.
        samples: Per-pixel sample budget, split over the 2x2 sub-pixels.
        gamma: Display gamma used to encode the output.
        seed: Seed of the per-pixel random streams.
        arch: Taichi backend, "cpu" or "gpu".
        output: Output PNG path.
    """

    width: int = 1024
    height: int = 768
    samples: int = 40
    gamma: float = 2.2
    seed: int = 0
    arch: str = "cpu"
    output: str = "image.png"

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Image size must be positive, got {self.width}x{self.height}")
        if self.samples <= 0:
            raise ValueError(f"Sample count must be positive, got {self.samples}")
        if self.gamma <= 0.0:
            raise ValueError(f"Gamma must be positive, got {self.gamma}")
        if not 0 <= self.seed <= MAX_SEED:
            raise ValueError(f"Seed must be in [0, {MAX_SEED}], got {self.seed}")
        if self.arch not in ARCHES:
            raise ValueError(f"Unknown arch {self.arch!r}, expected one of {ARCHES}")
