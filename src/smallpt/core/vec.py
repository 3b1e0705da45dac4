"""Vector algebra and ray utilities for the path tracer.

This module provides the 3-component vector type used throughout the engine
as position, direction and linear RGB color, the Ray dataclass, and the pure
vector operations the integrator relies on. All kernel-side operations are
Taichi functions; a few numpy counterparts are provided for host-side scene
preparation (mesh normalization, camera setup).

Vectors are 64-bit: the reference scene uses spheres of radius 1e5 as walls,
which single precision cannot intersect reliably.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from smallpt.core.vec import Ray, vec3, ray_at
    >>> # Use within a Taichi kernel:
    >>> # ray = Ray(origin=vec3(0.0), direction=vec3(0.0, 0.0, -1.0))
    >>> # point = ray_at(ray, 5.0)
"""

import numpy as np
import numpy.typing as npt
import taichi as ti
import taichi.math as tm

# 64-bit vector types used by every kernel in the package
vec3 = ti.types.vector(3, ti.f64)
vec2 = ti.types.vector(2, ti.f64)

# Minimum valid hit distance along a ray (avoids self-intersection)
EPS = 1e-4

# Sentinel distance meaning "nothing closer"
INF = 1e20

# Fallback direction returned when normalizing a zero-length vector
UNIT_X = (1.0, 0.0, 0.0)


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray.
        direction: The direction of the ray. Normalized by whoever builds
            the ray; the engine does not re-normalize it.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f64) -> vec3:
    """Compute the point along the ray at parameter t."""
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Operations
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f64:
    """Compute the dot product a . b."""
    return a.x * b.x + a.y * b.y + a.z * b.z


@ti.func
def mod(a: vec3, b: vec3) -> vec3:
    """Compute the cross product a x b."""
    return vec3(a.y * b.z - a.z * b.y, a.z * b.x - a.x * b.z, a.x * b.y - a.y * b.x)


@ti.func
def vecmul(a: vec3, b: vec3) -> vec3:
    """Component-wise product, used to filter radiance by a color."""
    return vec3(a.x * b.x, a.y * b.y, a.z * b.z)


@ti.func
def length(v: vec3) -> ti.f64:
    """Compute the Euclidean length of a vector."""
    return ti.sqrt(dot(v, v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Return a unit vector in the direction of v.

    Normalizing a zero-length vector does not divide by zero: the result is
    the fixed fallback UNIT_X (1, 0, 0).

    Args:
        v: The input vector. It is not modified.

    Returns:
        A new unit-length vector.
    """
    dist = length(v)
    result = vec3(1.0, 0.0, 0.0)
    if dist != 0.0:
        result = v / dist
    return result


@ti.func
def max_component(v: vec3) -> ti.f64:
    """Largest of the three components (maximum reflectance of a color)."""
    return ti.max(v.x, ti.max(v.y, v.z))


@ti.func
def clamp01(v: vec3) -> vec3:
    """Clamp each component to [0, 1]."""
    return vec3(tm.clamp(v.x, 0.0, 1.0), tm.clamp(v.y, 0.0, 1.0), tm.clamp(v.z, 0.0, 1.0))


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Mirror an incident direction about a normal: d - 2(n.d)n."""
    return incident - normal * (2.0 * dot(normal, incident))


# =============================================================================
# Sampling Helpers
# =============================================================================


@ti.func
def orthonormal_basis(w: vec3):
    """Build an orthonormal basis (u, v, w) around a unit vector w.

    The helper axis is the global Y axis when w has a noticeable X
    component and the global X axis otherwise, so it is never close to
    parallel with w.

    Args:
        w: The unit vector that becomes the third basis axis.

    Returns:
        A tuple (u, v, w) of unit vectors.
    """
    axis = vec3(1.0, 0.0, 0.0)
    if ti.abs(w.x) > 0.1:
        axis = vec3(0.0, 1.0, 0.0)
    u = normalize(mod(axis, w))
    v = mod(w, u)
    return u, v, w


@ti.func
def cosine_direction(w: vec3, u1: ti.f64, u2: ti.f64) -> vec3:
    """Cosine-weighted direction on the hemisphere around w.

    Args:
        w: Unit vector at the pole of the hemisphere (the shading normal).
        u1: Uniform random number in [0, 1), drives the azimuth.
        u2: Uniform random number in [0, 1), drives the elevation.

    Returns:
        The sampled unit direction in world space.
    """
    u, v, _ = orthonormal_basis(w)
    r1 = 2.0 * tm.pi * u1
    r2s = ti.sqrt(u2)
    d = u * (ti.cos(r1) * r2s) + v * (ti.sin(r1) * r2s) + w * ti.sqrt(1.0 - u2)
    return normalize(d)


# =============================================================================
# Host-side (numpy) Counterparts
# =============================================================================


def as_vec(value) -> npt.NDArray[np.float64]:
    """Convert a 3-sequence to a float64 numpy vector."""
    arr = np.asarray(value, dtype=np.float64)
    if arr.shape != (3,):
        raise ValueError(f"Expected a 3-component vector, got shape {arr.shape}")
    return arr


def normalize_array(v) -> npt.NDArray[np.float64]:
    """Host-side normalize with the same zero-length fallback as normalize()."""
    arr = as_vec(v)
    dist = float(np.linalg.norm(arr))
    if dist == 0.0:
        return np.array(UNIT_X, dtype=np.float64)
    return arr / dist
