"""Pytest configuration for smallpt tests.

This module provides shared fixtures for all test modules, including
Taichi initialization which must happen once per session.
"""

import numpy as np
import pytest
import taichi as ti


@pytest.fixture(scope="session", autouse=True)
def init_taichi_session():
    """Initialize Taichi once for the entire test session.

    Using session scope prevents multiple ti.init() calls which can cause
    segmentation faults due to Taichi runtime conflicts.
    """
    ti.init(arch=ti.cpu, default_fp=ti.f64, random_seed=42)
    yield


@pytest.fixture
def gray_texture():
    """A plain diffuse gray texture."""
    from smallpt.materials.textures import SolidTexture

    return SolidTexture((0.0, 0.0, 0.0), (0.5, 0.5, 0.5))


@pytest.fixture
def quadrant_raster():
    """A 2x2 raster: red, green on top; blue, transparent white below."""
    from smallpt.materials.raster import Raster

    pixels = np.array(
        [
            [(255, 0, 0, 255), (0, 255, 0, 255)],
            [(0, 0, 255, 255), (255, 255, 255, 0)],
        ],
        dtype=np.uint8,
    )
    return Raster(pixels, "quadrants")
