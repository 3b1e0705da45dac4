#!/usr/bin/env python3
"""Render a small room built from the library API instead of the CLI scene.

The room uses a checkerboard back wall, a triangle standing on the floor and
a glass ball, lit by a spherical light in the ceiling. It shows how to build
surfaces by hand, pack them into a Scene and render through a custom camera.

Usage:
    python examples/render_checker_room.py [SAMPLES] [--output OUTPUT]

Example:
    python examples/render_checker_room.py 64 --output checker_room.png
"""

import argparse
import logging
import sys

from smallpt.camera.pinhole import PinholeCamera
from smallpt.core.renderer import Renderer
from smallpt.errors import SmallPTError
from smallpt.geometry import Plane, Polygon, Sphere
from smallpt.logging_config import setup_logging
from smallpt.materials import CheckerTexture, ReflectionKind, SolidTexture
from smallpt.runtime import init_taichi
from smallpt.scene.scene import Scene

WIDTH, HEIGHT = 320, 240


def create_room() -> Scene:
    """Build the room: walls, checker back plane, triangle, glass ball and light."""
    r = 1e5
    white = SolidTexture((0, 0, 0), (0.75, 0.75, 0.75))
    glass = SolidTexture((0, 0, 0), (0.999, 0.999, 0.999), ReflectionKind.DIELECTRIC)
    surfaces = [
        Sphere(r, (r, 40, 50), SolidTexture((0, 0, 0), (0.25, 0.6, 0.25))),  # Left
        Sphere(r, (-r + 100, 40, 50), SolidTexture((0, 0, 0), (0.6, 0.25, 0.6))),  # Right
        Sphere(r, (50, r, 50), white),  # Floor
        Sphere(r, (50, -r + 80, 50), white),  # Ceiling
        Sphere(r, (50, 40, r - 1), white),  # Back
        Plane(100, 80, (0, 0, 0), CheckerTexture((0.9, 0.9, 0.9), (0.1, 0.1, 0.1), 0.1)),
        Polygon((70, 0, 40), (50, 0, 30), (60, 35, 35), SolidTexture((0, 0, 0), (0.8, 0.6, 0.2))),
        Sphere(12, (30, 12, 50), glass),
        Sphere(400, (50, 479.8, 50), SolidTexture((8, 8, 8), (0, 0, 0))),  # Light
    ]
    return Scene(surfaces)


def main() -> int:
    parser = argparse.ArgumentParser(description="Render a hand-built checker room.")
    parser.add_argument("samples", nargs="?", type=int, default=16)
    parser.add_argument("--output", default="checker_room.png")
    args = parser.parse_args()

    setup_logging(logging.INFO)
    init_taichi("cpu")

    camera = PinholeCamera((50, 40, 220), (0, -0.05, -1), near=100)
    try:
        renderer = Renderer(create_room(), camera, WIDTH, HEIGHT)
        renderer.render(args.samples)
        path = renderer.save(args.output)
    except (SmallPTError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Saved to: {path.absolute()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
