"""Geometry module for shape primitives.

This module provides geometric primitives and their intersection tests:

Components:
    sphere: Sphere primitive with analytic ray-sphere intersection
    plane: Infinite plane primitive with ray-plane intersection

All intersection routines are Taichi functions (@ti.func). Each test takes
the ray, the primitive and a t_max bound, and returns a HitRecord holding the
distance, hit point and unit outward normal:

    rec = hit_sphere(ray_origin, ray_direction, sphere, t_max)

There is no acceleration structure; the scene tests every primitive.
"""

from .plane import Plane, hit_plane
from .sphere import HitRecord, Sphere, hit_sphere, nearest_root

__all__ = [
    "Sphere",
    "HitRecord",
    "hit_sphere",
    "nearest_root",
    "Plane",
    "hit_plane",
]
