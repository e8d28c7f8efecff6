"""Infinite plane primitive with ray-plane intersection.

A plane is stored in Hessian normal form:

    dot(normal, P) = offset

where normal is a unit vector. For example the floor y = -4 is
normal=(0, 1, 0), offset=-4.

The ray-plane test substitutes the ray into the plane equation:

    t = (offset - dot(normal, origin)) / dot(normal, direction)

Rays parallel to the plane never hit it. The stored normal is returned as is
for both faces, matching the outward-normal convention used by spheres.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.geometry.plane import Plane, hit_plane
    >>> floor = Plane(normal=ti.math.vec3(0, 1, 0), offset=-4.0)
    >>> # Use hit_plane within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from .sphere import HitRecord

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Rays with |dot(normal, direction)| at or below this are treated as parallel
PARALLEL_EPSILON = 1e-8


@ti.dataclass
class Plane:
    """An infinite plane dot(normal, P) = offset.

    Attributes:
        normal: Unit normal of the plane (vec3).
        offset: Signed distance of the plane from the world origin along
            the normal.
    """

    normal: vec3
    offset: ti.f32


@ti.func
def hit_plane(
    ray_origin: vec3,
    ray_direction: vec3,
    plane: Plane,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-plane intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        plane: The plane to test intersection against.
        t_max: Only hits strictly closer than this are reported.

    Returns:
        A HitRecord containing intersection information. Check hit field
        to determine if intersection occurred.
    """
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    denom = tm.dot(plane.normal, ray_direction)

    if ti.abs(denom) > PARALLEL_EPSILON:
        t = (plane.offset - tm.dot(plane.normal, ray_origin)) / denom
        if t >= 0.0 and t < t_max:
            did_hit = 1
            hit_t = t
            hit_point = ray_origin + t * ray_direction
            hit_normal = plane.normal

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=hit_normal)

