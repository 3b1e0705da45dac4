"""Taichi runtime initialization."""

import logging

import taichi as ti

logger = logging.getLogger(__name__)

_ARCHES = {
    "cpu": ti.cpu,
    "gpu": ti.gpu,
}


def init_taichi(arch: str = "cpu", *, debug: bool = False) -> None:
    """Initialize Taichi with 64-bit default floats.

    Must run before any Scene or Renderer is created. The "gpu" arch picks
    the first available GPU backend and falls back to the CPU.

    Args:
        arch: "cpu" or "gpu".
        debug: Enable Taichi's bounds-checking debug mode.

    Raises:
        ValueError: If arch is not recognized.
    """
    if arch not in _ARCHES:
        raise ValueError(f"Unknown arch {arch!r}, expected one of {tuple(_ARCHES)}")
    ti.init(arch=_ARCHES[arch], default_fp=ti.f64, debug=debug)
    logger.debug("Taichi initialized (arch=%s)", arch)
