"""Sphere primitive with analytic ray-sphere intersection.

This module provides a Sphere dataclass and the geometric ray-sphere test.
Rather than expanding the full quadratic, the test projects the sphere
center onto the ray:

    L   = center - origin
    tca = dot(L, D)              distance to the closest approach
    d2  = dot(L, L) - tca^2      squared distance from center to the ray

The ray misses when d2 > r^2. Otherwise the two roots are tca -/+ thc with
thc = sqrt(r^2 - d2). The near root is used unless it lies behind the origin,
in which case the far root is tried (origin inside the sphere).

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.geometry.sphere import Sphere, hit_sphere
    >>> sphere = Sphere(center=ti.math.vec3(0, 0, -5), radius=1.0)
    >>> # Use hit_sphere within a Taichi kernel
"""

import taichi as ti
import taichi.math as tm

from src.whitted.core.ray import normalize

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3


@ti.dataclass
class Sphere:
    """A sphere defined by center point and radius.

    Attributes:
        center: The center point of the sphere (vec3).
        radius: The radius of the sphere (positive float).
    """

    center: vec3
    radius: ti.f32


@ti.dataclass
class HitRecord:
    """Record of a ray-primitive intersection.

    Attributes:
        hit: Whether the ray intersected the primitive (1 if hit, 0 if miss).
        t: Distance along the ray to the intersection. Only valid if hit == 1.
        point: The world-space intersection point. Only valid if hit == 1.
        normal: The unit outward surface normal at the intersection point.
            It is never flipped toward the ray; shading decides which side
            of the surface the ray is on. Only valid if hit == 1.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3


@ti.func
def nearest_root(sphere: Sphere, ray_origin: vec3, ray_direction: vec3):
    """Find the nearest non-negative intersection distance with a sphere.

    Args:
        sphere: The sphere to test.
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        Tuple of (found, t). found is 1 when the ray hits the sphere at
        t >= 0, and 0 otherwise (t is then meaningless).
    """
    found = 0
    t = 0.0

    l_vec = sphere.center - ray_origin
    tca = tm.dot(l_vec, ray_direction)
    d2 = tm.dot(l_vec, l_vec) - tca * tca
    r2 = sphere.radius * sphere.radius

    if d2 <= r2:
        thc = ti.sqrt(r2 - d2)
        t = tca - thc
        if t < 0.0:
            t = tca + thc
        if t >= 0.0:
            found = 1

    return found, t


@ti.func
def hit_sphere(
    ray_origin: vec3,
    ray_direction: vec3,
    sphere: Sphere,
    t_max: ti.f32,
) -> HitRecord:
    """Test for ray-sphere intersection.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        sphere: The sphere to test intersection against.
        t_max: Only hits strictly closer than this are reported. The scene
            scan passes the closest distance found so far.

    Returns:
        A HitRecord containing intersection information. Check hit field
        to determine if intersection occurred.
    """
    did_hit = 0
    hit_t = 0.0
    hit_point = vec3(0.0, 0.0, 0.0)
    hit_normal = vec3(0.0, 0.0, 0.0)

    found, t = nearest_root(sphere, ray_origin, ray_direction)
    if found == 1 and t < t_max:
        did_hit = 1
        hit_t = t
        hit_point = ray_origin + t * ray_direction
        hit_normal = normalize(hit_point - sphere.center)

    return HitRecord(hit=did_hit, t=hit_t, point=hit_point, normal=hit_normal)

