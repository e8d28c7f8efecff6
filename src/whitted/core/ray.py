"""Ray data structure and vector utilities for Whitted-style ray tracing.

This module provides the Ray dataclass and the small set of vector helpers
the tracer is built from: dot products, lengths, normalization, mirror
reflection, Snell refraction and the secondary-ray origin bias. All
operations are Taichi functions so they can be used inside kernels.

Vectors are ``taichi.math.vec3`` values. Every helper returns a new vector;
nothing is modified in place.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = make_ray(origin, direction)
    >>> reflected = reflect(ray.direction, ti.math.vec3(0.0, 0.0, 1.0))
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Offset applied along the surface normal to secondary ray origins
EPSILON = 1e-4


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Primary and
            secondary rays are always unit length.
    """

    origin: vec3
    direction: vec3


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product of two vectors."""
    return tm.dot(a, b)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared length of a vector.

    Cheaper than length() when only comparing magnitudes.
    """
    return tm.dot(v, v)


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean length (magnitude) of a vector: sqrt(v . v)."""
    return ti.sqrt(length_squared(v))


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    A zero-length input has no direction. Instead of dividing by zero it
    maps to the zero vector, so degenerate cases (a light sitting exactly on
    the shaded point, a totally internally reflected ray) flow through the
    shading sums as zero contributions.

    Args:
        v: The input vector.

    Returns:
        A unit vector in the same direction as v, or the zero vector if v has
        zero length.
    """
    result = vec3(0.0, 0.0, 0.0)
    len_sq = length_squared(v)
    if len_sq > 0.0:
        result = v / ti.sqrt(len_sq)
    return result


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes R = I - 2(I . N)N. The normal should be unit length.

    Args:
        incident: The incoming direction vector.
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - 2.0 * tm.dot(incident, normal) * normal


@ti.func
def refract(incident: vec3, normal: vec3, refractive_index: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    The normal is the outward surface normal. Whether the ray is entering or
    leaving the medium is decided by the sign of cos(theta_i): when the ray
    is leaving, the indices are swapped and the normal is flipped so the
    cosine is always measured against the normal facing the incident ray.

    Total internal reflection (k < 0) produces the zero vector. Callers
    treat that as "no refracted light".

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        refractive_index: Index of refraction of the medium on the inner
            side of the surface. The outer side is assumed to be air (1.0).

    Returns:
        The refracted direction vector, or the zero vector on total internal
        reflection.
    """
    cos_i = -tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    eta_i = 1.0
    eta_t = refractive_index
    n = normal
    if cos_i < 0.0:
        # Ray is inside the object: swap the indices and flip the normal
        cos_i = -cos_i
        eta_i = refractive_index
        eta_t = 1.0
        n = -normal

    eta = eta_i / eta_t
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)

    result = vec3(0.0, 0.0, 0.0)
    if k >= 0.0:
        result = eta * incident + (eta * cos_i - ti.sqrt(k)) * n
    return result


@ti.func
def offset_origin(point: vec3, normal: vec3, direction: vec3) -> vec3:
    """Offset a secondary ray origin to avoid self-intersection.

    Pushes the point EPSILON along the normal, onto the side of the surface
    the outgoing direction points to (below the surface for refraction,
    above it for reflection and for shadow rays toward a visible light).

    Args:
        point: The intersection point.
        normal: The surface normal at the point.
        direction: The outgoing ray direction.

    Returns:
        The offset origin point.
    """
    offset_dir = normal
    if tm.dot(direction, normal) < 0.0:
        offset_dir = -normal
    return point + EPSILON * offset_dir


@ti.func
def near_zero(v: vec3) -> ti.i32:
    """Check if a vector is near zero in all components.

    Returns:
        1 if all components are near zero, 0 otherwise.
    """
    s = 1e-8
    return ti.abs(v.x) < s and ti.abs(v.y) < s and ti.abs(v.z) < s
