"""Scene-level primitive intersection testing.

This module stores the scene's spheres and planes in Taichi fields and
provides the closest-hit query used by every primary, shadow, reflection
and refraction ray.

The query is a linear scan: spheres in insertion order, then planes in
insertion order. A primitive replaces the current best hit only if it is
strictly closer, so on an exact distance tie the first one tested wins.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.intersection import (
    ...     SceneHitRecord, add_sphere, add_plane, scene_intersect, clear_scene
    ... )
    >>> clear_scene()
    >>> add_sphere(vec3(0, 0, -16), 2.0, material_id=0)
    >>> add_plane(vec3(0, 1, 0), -4.0, material_id=1)
    >>> # Use scene_intersect within a Taichi kernel
"""

import logging
import math

import taichi as ti
import taichi.math as tm

from src.whitted.geometry.plane import Plane, hit_plane
from src.whitted.geometry.sphere import HitRecord, Sphere, hit_sphere
from src.whitted.materials.phong import MAX_MATERIALS

logger = logging.getLogger(__name__)

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Upper bound on hit distance for the closest-hit scan
T_MAX = 1e10


@ti.dataclass
class SceneHitRecord:
    """Record of a ray-scene intersection with material information.

    Attributes:
        hit: Whether the ray intersected any primitive (1 if hit, 0 if miss).
        t: Distance along the ray to the closest intersection.
            Only valid if hit == 1.
        point: The world-space intersection point. Only valid if hit == 1.
        normal: The unit outward surface normal at the intersection point.
            Only valid if hit == 1.
        material_id: The material ID of the hit primitive.
            -1 indicates a miss.
    """

    hit: ti.i32
    t: ti.f32
    point: vec3
    normal: vec3
    material_id: ti.i32


# Maximum number of primitives supported in the scene
MAX_SPHERES = 1024
MAX_PLANES = 64

# Sphere storage: Structure of Arrays layout
sphere_centers = ti.Vector.field(3, dtype=ti.f32, shape=MAX_SPHERES)
sphere_radii = ti.field(dtype=ti.f32, shape=MAX_SPHERES)
sphere_material_ids = ti.field(dtype=ti.i32, shape=MAX_SPHERES)
num_spheres = ti.field(dtype=ti.i32, shape=())

# Plane storage: unit normal and offset of dot(normal, P) = offset
plane_normals = ti.Vector.field(3, dtype=ti.f32, shape=MAX_PLANES)
plane_offsets = ti.field(dtype=ti.f32, shape=MAX_PLANES)
plane_material_ids = ti.field(dtype=ti.i32, shape=MAX_PLANES)
num_planes = ti.field(dtype=ti.i32, shape=())


def _check_material_slot(material_id: int) -> None:
    # Primitives index the material table directly inside kernels
    if not 0 <= material_id < MAX_MATERIALS:
        raise ValueError(f"material_id = {material_id} must be in [0, {MAX_MATERIALS})")


def clear_scene() -> None:
    """Clear all primitives from the scene.

    Resets the primitive counts to zero. The actual field data is not
    cleared but will be overwritten when new primitives are added.
    """
    num_spheres[None] = 0
    num_planes[None] = 0


def add_sphere(center: vec3, radius: float, material_id: int = 0) -> int:
    """Add a sphere to the scene.

    Args:
        center: The center point of the sphere.
        radius: The radius of the sphere. Must be positive.
        material_id: The material ID to associate with this sphere.

    Returns:
        The index of the added sphere.

    Raises:
        RuntimeError: If the maximum number of spheres is exceeded.
        ValueError: If radius is not positive or material_id is outside
            the material table.
    """
    if not radius > 0.0:
        raise ValueError(f"Sphere radius = {radius} must be positive")
    _check_material_slot(material_id)

    idx = num_spheres[None]
    if idx >= MAX_SPHERES:
        raise RuntimeError(f"Maximum number of spheres ({MAX_SPHERES}) exceeded")
    sphere_centers[idx] = center
    sphere_radii[idx] = radius
    sphere_material_ids[idx] = material_id
    num_spheres[None] = idx + 1
    logger.debug("Added sphere %d (radius=%s, material=%d)", idx, radius, material_id)
    return idx


def add_plane(normal: vec3, offset: float, material_id: int = 0) -> int:
    """Add an infinite plane dot(normal, P) = offset to the scene.

    The normal is normalized on insertion; offset is interpreted relative to
    the normalized normal.

    Args:
        normal: The plane normal (any non-zero length).
        offset: Signed distance of the plane from the origin along normal.
        material_id: The material ID to associate with this plane.

    Returns:
        The index of the added plane.

    Raises:
        RuntimeError: If the maximum number of planes is exceeded.
        ValueError: If normal has zero length or material_id is outside
            the material table.
    """
    n_len = math.sqrt(normal[0] ** 2 + normal[1] ** 2 + normal[2] ** 2)
    if n_len == 0.0:
        raise ValueError("Plane normal must have non-zero length")
    _check_material_slot(material_id)

    idx = num_planes[None]
    if idx >= MAX_PLANES:
        raise RuntimeError(f"Maximum number of planes ({MAX_PLANES}) exceeded")
    plane_normals[idx] = [normal[0] / n_len, normal[1] / n_len, normal[2] / n_len]
    plane_offsets[idx] = offset
    plane_material_ids[idx] = material_id
    num_planes[None] = idx + 1
    logger.debug("Added plane %d (offset=%s, material=%d)", idx, offset, material_id)
    return idx


def get_sphere_count() -> int:
    """Get the number of spheres in the scene."""
    return int(num_spheres[None])


def get_plane_count() -> int:
    """Get the number of planes in the scene."""
    return int(num_planes[None])


@ti.func
def _hit_record_to_scene_hit_record(rec: HitRecord, material_id: ti.i32) -> SceneHitRecord:
    """Convert a HitRecord to a SceneHitRecord with material ID."""
    return SceneHitRecord(
        hit=rec.hit,
        t=rec.t,
        point=rec.point,
        normal=rec.normal,
        material_id=material_id,
    )


@ti.func
def _make_miss_record() -> SceneHitRecord:
    """Create a SceneHitRecord indicating no intersection."""
    return SceneHitRecord(
        hit=0,
        t=0.0,
        point=vec3(0.0, 0.0, 0.0),
        normal=vec3(0.0, 0.0, 0.0),
        material_id=-1,
    )


@ti.func
def scene_intersect(ray_origin: vec3, ray_direction: vec3) -> SceneHitRecord:
    """Find the closest intersection of a ray with the scene.

    Iterates through all spheres and planes, keeping the hit with the
    smallest distance.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.

    Returns:
        A SceneHitRecord containing the closest intersection, or a miss
        record if the ray hits nothing.
    """
    closest_t = T_MAX
    result = _make_miss_record()

    n_spheres = num_spheres[None]
    for i in range(n_spheres):
        sphere = Sphere(center=sphere_centers[i], radius=sphere_radii[i])
        rec = hit_sphere(ray_origin, ray_direction, sphere, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _hit_record_to_scene_hit_record(rec, sphere_material_ids[i])

    n_planes = num_planes[None]
    for i in range(n_planes):
        plane = Plane(normal=plane_normals[i], offset=plane_offsets[i])
        rec = hit_plane(ray_origin, ray_direction, plane, closest_t)
        if rec.hit == 1:
            closest_t = rec.t
            result = _hit_record_to_scene_hit_record(rec, plane_material_ids[i])

    return result
