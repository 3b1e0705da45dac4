"""smallpt: a Taichi path tracer after Kevin Beason's smallpt.

The package renders a global-illumination image of a fixed scene by
Monte Carlo path tracing, with Russian roulette termination, diffuse,
mirror and glass materials, and image textures.

Subpackages:
    core: Vector algebra, random streams, integrator and renderer
    geometry: Spheres, planes, triangles and triangle meshes
    materials: Reflection kinds, rasters and textures
    scene: Scene packing and the reference scene
    camera: Pinhole camera ray generation
    output: Tone mapping and PNG export
"""

__version__ = "0.1.0"
