"""Reflection kinds and the per-hit material sample.

A texture lookup produces a Col: the light the surface emits, the color it
reflects, and the law used to reflect it. The set of reflection kinds is
closed; the integrator treats any other value as a fatal invariant violation.
"""

from enum import IntEnum

import taichi as ti

from smallpt.core.vec import vec3
from smallpt.errors import SceneError


class ReflectionKind(IntEnum):
    """How incident light is redistributed at a surface point."""

    DIFFUSE = 0
    SPECULAR = 1
    DIELECTRIC = 2


@ti.dataclass
class Col:
    """Material sample at a hit point.

    Attributes:
        emission: Emitted radiance (linear RGB).
        color: Reflectance (linear RGB, each component in [0, 1]).
        reflection: A ReflectionKind value.
    """

    emission: vec3
    color: vec3
    reflection: ti.i32


def as_reflection_kind(value) -> ReflectionKind:
    """Coerce a scene-data value to a ReflectionKind.

    Accepts enum members, their integer values, and case-insensitive names
    ("diffuse", "specular", "dielectric").

    Raises:
        SceneError: If the value does not name a known kind.
    """
    if isinstance(value, ReflectionKind):
        return value
    if isinstance(value, str):
        try:
            return ReflectionKind[value.upper()]
        except KeyError:
            raise SceneError(f"Unknown reflection kind: {value!r}") from None
    try:
        return ReflectionKind(value)
    except ValueError:
        raise SceneError(f"Unknown reflection kind: {value!r}") from None
