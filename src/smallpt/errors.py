"""Exception types raised by the renderer.

Degenerate geometry is never an error: intersection routines report "no hit"
and normalization falls back to a fixed axis. The exceptions here cover the
conditions that abort a run.
"""


class SmallPTError(Exception):
    """Base class for renderer errors."""


class SceneError(SmallPTError, ValueError):
    """Scene description data is invalid (bad sizes, kinds or mesh arrays)."""


class AssetLoadError(SmallPTError):
    """A bitmap asset could not be found or decoded.

    Raised while the scene is being built, before any rendering starts.
    """


class InvariantViolation(SmallPTError, RuntimeError):
    """The integrator met a material sample with an unknown reflection kind."""
