"""Explicit random number streams for parallel Monte Carlo sampling.

Every pixel owns an independent stream seeded from (seed, row, column) through
an integer hash, and the stream state is threaded through the Taichi functions
that consume it. Nothing is shared between rows, so rendering is reproducible
for a fixed seed no matter how the scanlines are scheduled across threads.

The generator is a 32-bit xorshift. Seeds are scrambled with a Wang-style
integer hash so that neighbouring pixels start far apart in the sequence.

Example:
    >>> # Inside a Taichi kernel:
    >>> # state = seed_stream(seed, row, col)
    >>> # u, state = next_uniform(state)
"""

import taichi as ti

# Uniform values keep the top 24 bits of the 32-bit state
_UNIFORM_BITS = 24
_UNIFORM_SCALE = 1.0 / float(1 << _UNIFORM_BITS)


@ti.func
def hash_u32(value: ti.u32) -> ti.u32:
    """Scramble a 32-bit integer (Wang hash)."""
    h = value
    h = (h ^ ti.cast(61, ti.u32)) ^ ti.bit_shr(h, 16)
    h = h * ti.cast(9, ti.u32)
    h = h ^ ti.bit_shr(h, 4)
    h = h * ti.cast(0x27D4EB2D, ti.u32)
    h = h ^ ti.bit_shr(h, 15)
    return h


@ti.func
def seed_stream(seed: ti.i32, row: ti.i32, col: ti.i32) -> ti.u32:
    """Derive the initial state of the stream owned by pixel (row, col).

    Args:
        seed: Render-wide seed.
        row: Scanline index.
        col: Column index.

    Returns:
        A non-zero 32-bit generator state.
    """
    state = hash_u32(ti.cast(seed, ti.u32))
    state = hash_u32(state ^ ti.cast(row, ti.u32))
    state = hash_u32(state ^ ti.cast(col, ti.u32))
    # xorshift never leaves the all-zero state
    return ti.select(state == ti.cast(0, ti.u32), ti.cast(1, ti.u32), state)


@ti.func
def next_state(state: ti.u32) -> ti.u32:
    """Advance a xorshift32 state by one step."""
    x = state
    x = x ^ (x << 13)
    x = x ^ ti.bit_shr(x, 17)
    x = x ^ (x << 5)
    return x


@ti.func
def next_uniform(state: ti.u32):
    """Draw a uniform number in [0, 1) from a stream.

    Args:
        state: The current stream state.

    Returns:
        A tuple (u, new_state). Callers must keep new_state for the next draw.
    """
    x = next_state(state)
    u = ti.cast(ti.bit_shr(x, 32 - _UNIFORM_BITS), ti.f64) * _UNIFORM_SCALE
    return u, x
