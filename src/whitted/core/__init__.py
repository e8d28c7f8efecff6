"""Core rendering module.

This module contains the fundamental building blocks for ray tracing:

Components:
    ray: Ray data structure and vector utilities (reflect, refract, bias)
    integrator: Recursive Whitted-style shading and the render kernel
    renderer: High-level renderer wrapper and render settings

The integrator combines local illumination (Lambert diffuse, Phong specular,
hard shadows) with recursive mirror reflection and Snell refraction, bounded
by a fixed recursion depth.

All compute-intensive operations use Taichi kernels.
"""

from .ray import (
    EPSILON,
    Ray,
    dot,
    length,
    length_squared,
    make_ray,
    near_zero,
    normalize,
    offset_origin,
    reflect,
    refract,
    vec3,
)

# Note: integrator and renderer are NOT imported here to avoid circular imports.
# Import directly from src.whitted.core.integrator or src.whitted.core.renderer.

__all__ = [
    "EPSILON",
    "Ray",
    "make_ray",
    "vec3",
    "dot",
    "length",
    "length_squared",
    "normalize",
    "reflect",
    "refract",
    "offset_origin",
    "near_zero",
]
