"""Core rendering module.

Components:
    vec: Vector algebra, the Ray type and hemisphere sampling
    rng: Per-pixel xorshift random streams
    integrator: Path tracing radiance estimator
    renderer: Scanline-parallel sub-pixel sampling driver

All compute-intensive operations run in Taichi kernels.
"""

from .rng import hash_u32, next_state, next_uniform, seed_stream
from .vec import (
    EPS,
    INF,
    UNIT_X,
    Ray,
    as_vec,
    clamp01,
    cosine_direction,
    dot,
    length,
    make_ray,
    max_component,
    mod,
    normalize,
    normalize_array,
    orthonormal_basis,
    ray_at,
    reflect,
    vec2,
    vec3,
    vecmul,
)

# The integrator and renderer are not imported here to avoid circular imports.
# Import them from smallpt.core.integrator and smallpt.core.renderer.

__all__ = [
    "EPS",
    "INF",
    "UNIT_X",
    "Ray",
    "ray_at",
    "make_ray",
    "vec2",
    "vec3",
    "dot",
    "mod",
    "vecmul",
    "length",
    "normalize",
    "max_component",
    "clamp01",
    "reflect",
    "orthonormal_basis",
    "cosine_direction",
    "as_vec",
    "normalize_array",
    "hash_u32",
    "seed_stream",
    "next_state",
    "next_uniform",
]
