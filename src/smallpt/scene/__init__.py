"""Scene module: the packed surface collection and the reference scene.

Components:
    scene: Scene container with nearest-hit intersection and texture lookup
    default_scene: The reference smallpt box with optional bitmap extras

Scene data lives in Taichi fields in Structure of Arrays layout and is
written once, at construction.
"""

from .default_scene import SceneParams, create_default_scene, create_surfaces
from .scene import Probe, Scene, SceneHit

__all__ = [
    "Scene",
    "SceneHit",
    "Probe",
    "SceneParams",
    "create_surfaces",
    "create_default_scene",
]
