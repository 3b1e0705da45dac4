"""Path tracing integrator estimating the radiance carried along a ray.

The estimator follows smallpt. At each hit the surface's emission is added,
the path's weight is multiplied by the surface color, and the path continues
in a direction chosen by the reflection kind:

    DIFFUSE     cosine-weighted direction around the shading normal
    SPECULAR    ideal mirror reflection
    DIELECTRIC  reflection and/or refraction weighted by Schlick's Fresnel
                approximation

Paths deeper than MIN_BOUNCES_BEFORE_RR bounces survive Russian roulette with
probability max(color) and are reweighted by 1 / max(color); no path goes
deeper than MAX_DEPTH.

The estimator is naturally recursive. Here it runs as a loop carrying the
path throughput. At the two shallowest dielectric hits both the reflected and
the refracted rays are followed and blended by their Fresnel weights, so one
of them is parked on a two-slot stack and traced once the other path ends.
Deeper dielectric hits pick one branch at random.

Example:
    >>> # Inside a data-oriented renderer kernel:
    >>> # radiance, depth, invalid, rng = trace_path(self.scene, ray, rng)
"""

import taichi as ti

from smallpt.core.rng import next_uniform
from smallpt.core.vec import (
    Ray,
    cosine_direction,
    dot,
    max_component,
    normalize,
    reflect,
    vec3,
    vecmul,
)
from smallpt.materials.reflection import ReflectionKind

# =============================================================================
# Rendering Constants
# =============================================================================

# Depth beyond which Russian roulette may end a path
MIN_BOUNCES_BEFORE_RR = 5

# Paths are always terminated on reaching this depth
MAX_DEPTH = 50

# Depth up to which dielectric hits follow both branches
MAX_SPLIT_DEPTH = 2

# Refractive indices outside and inside dielectric surfaces
NC = 1.0
NT = 1.5

# Fresnel reflectance at normal incidence
R0 = ((NT - NC) / (NT + NC)) ** 2

_DIFFUSE = int(ReflectionKind.DIFFUSE)
_SPECULAR = int(ReflectionKind.SPECULAR)
_DIELECTRIC = int(ReflectionKind.DIELECTRIC)


@ti.func
def schlick_reflectance(c: ti.f64, r0: ti.f64) -> ti.f64:
    """Schlick's approximation R0 + (1 - R0)(1 - cos)^5, given c = 1 - cos."""
    return r0 + (1.0 - r0) * c * c * c * c * c


@ti.func
def trace_path(scene: ti.template(), ray: Ray, rng: ti.u32):
    """Estimate the radiance arriving along a ray.

    Args:
        scene: The Scene to trace against.
        ray: The ray, with normalized direction.
        rng: Random stream state.

    Returns:
        A tuple (radiance, depth, invalid, rng) where depth is the deepest
        path vertex reached, invalid is 1 if a material with an unknown
        reflection kind was hit (the estimate is then meaningless), and rng
        is the advanced stream state.
    """
    radiance = vec3(0.0, 0.0, 0.0)
    throughput = vec3(1.0, 1.0, 1.0)
    origin = ray.origin
    direction = ray.direction
    depth = 0
    deepest = 0
    invalid = 0

    # Parked refraction branches of shallow dielectric hits
    pending = 0
    slot0_origin = vec3(0.0, 0.0, 0.0)
    slot0_direction = vec3(0.0, 0.0, 0.0)
    slot0_weight = vec3(0.0, 0.0, 0.0)
    slot0_depth = 0
    slot1_origin = vec3(0.0, 0.0, 0.0)
    slot1_direction = vec3(0.0, 0.0, 0.0)
    slot1_weight = vec3(0.0, 0.0, 0.0)
    slot1_depth = 0

    active = 1
    while active == 1:
        alive = 0
        hit = scene.intersect(origin, direction)
        if hit.hit == 1:
            x = origin + direction * hit.t
            n, col = scene.position(hit, x, direction)
            nl = n
            if dot(n, direction) >= 0.0:
                nl = -n
            f = col.color
            p = max_component(f)
            depth += 1
            deepest = ti.max(deepest, depth)
            radiance += vecmul(throughput, col.emission)

            alive = 1
            if depth > MIN_BOUNCES_BEFORE_RR:
                survive = 0
                if depth < MAX_DEPTH:
                    u, rng = next_uniform(rng)
                    if u < p:
                        survive = 1
                if survive == 1:
                    f = f / p
                else:
                    alive = 0

            if alive == 1:
                weight = vecmul(throughput, f)
                kind = col.reflection
                if kind == _DIFFUSE:
                    u1, rng = next_uniform(rng)
                    u2, rng = next_uniform(rng)
                    direction = cosine_direction(nl, u1, u2)
                    throughput = weight
                elif kind == _SPECULAR:
                    direction = reflect(direction, n)
                    throughput = weight
                elif kind == _DIELECTRIC:
                    reflected = reflect(direction, n)
                    into = dot(n, nl) > 0.0
                    nnt = ti.select(into, NC / NT, NT / NC)
                    ddn = dot(direction, nl)
                    cos2t = 1.0 - nnt * nnt * (1.0 - ddn * ddn)
                    if cos2t < 0.0:
                        # Total internal reflection
                        direction = reflected
                        throughput = weight
                    else:
                        sign = ti.select(into, 1.0, -1.0)
                        tdir = normalize(direction * nnt - n * (sign * (ddn * nnt + ti.sqrt(cos2t))))
                        c = 1.0 - ti.select(into, -ddn, dot(tdir, n))
                        re = schlick_reflectance(c, R0)
                        tr = 1.0 - re
                        if depth > MAX_SPLIT_DEPTH:
                            prob = 0.25 + 0.5 * re
                            u, rng = next_uniform(rng)
                            if u < prob:
                                direction = reflected
                                throughput = weight * (re / prob)
                            else:
                                direction = tdir
                                throughput = weight * (tr / (1.0 - prob))
                        else:
                            if pending == 0:
                                slot0_origin = x
                                slot0_direction = tdir
                                slot0_weight = weight * tr
                                slot0_depth = depth
                            else:
                                slot1_origin = x
                                slot1_direction = tdir
                                slot1_weight = weight * tr
                                slot1_depth = depth
                            pending += 1
                            direction = reflected
                            throughput = weight * re
                else:
                    invalid = 1
                    alive = 0
                    pending = 0
                origin = x

        if alive == 0:
            if pending == 2:
                origin = slot1_origin
                direction = slot1_direction
                throughput = slot1_weight
                depth = slot1_depth
                pending = 1
            elif pending == 1:
                origin = slot0_origin
                direction = slot0_direction
                throughput = slot0_weight
                depth = slot0_depth
                pending = 0
            else:
                active = 0

    return radiance, deepest, invalid, rng
