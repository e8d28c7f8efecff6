"""Taichi implementation of a Whitted-style recursive ray tracer.

This package renders spheres and planes lit by point lights, with support for:
- Lambert diffuse and Phong specular shading with hard shadows
- Recursive mirror reflection and Snell refraction
- A fixed pinhole camera and RGBA8/PNG export

Subpackages:
    core: Ray and vector utilities, the recursive integrator, the renderer
    geometry: Sphere and plane primitives and their intersection tests
    materials: Phong material table
    scene: Scene storage, lights, scene manager and demo scene
    camera: Pinhole camera ray generation
    preview: Image export utilities
"""

__version__ = "0.1.0"
