"""Whitted-style recursive ray tracing integrator.

This module implements the shading model and the rendering kernel. Every
pixel gets exactly one primary ray from the camera. At each hit the shaded
color combines:

    - Local illumination from every point light: Lambert diffuse and Phong
      specular, each gated by a hard shadow ray
    - A mirror reflection ray, traced recursively
    - A Snell refraction ray, traced recursively

weighted by the material's (kd, ks, kr, kt) albedo. Rays that miss the scene,
or that exceed the recursion limit, return a constant background color.

Secondary rays are traced iteratively: cast_ray() keeps pending reflected
and refracted rays on a fixed-size local stack, each carrying the product of
the albedo weights along its path. max_depth is an ordinary kernel argument,
so changing it does not recompile anything. One primary ray spawns at most
2^(max_depth + 1) - 1 traced rays.

Key features:
    - Hard shadows (no soft falloff, no colored occluders)
    - Fixed-weight reflection/refraction mix (no Fresnel term)
    - Self-intersection avoidance with a normal-aligned origin offset
    - Unclamped linear output; clamping happens at export time

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.core.integrator import render_image, setup_render_target
    >>> from src.whitted.scene.demo import create_demo_scene
    >>> from src.whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>> setup_render_target(1024, 768)
    >>> render_image()
"""

import math

import taichi as ti
import taichi.math as tm

from src.whitted.camera.pinhole import get_ray
from src.whitted.core.ray import (
    length,
    near_zero,
    normalize,
    offset_origin,
    reflect,
    refract,
)
from src.whitted.materials.phong import get_phong_material
from src.whitted.scene.intersection import scene_intersect
from src.whitted.scene.lights import get_point_light, num_lights

# Type alias for 3D vectors
vec3 = tm.vec3

# =============================================================================
# Rendering Constants
# =============================================================================

# Deepest recursion level that is still shaded; rays beyond it see the background
MAX_DEPTH = 4

# Pending-ray capacity of cast_ray. A depth-first walk never holds more than
# max_depth + 1 rays, which bounds the supported depth.
RAY_STACK_SIZE = 10
MAX_SUPPORTED_DEPTH = RAY_STACK_SIZE - 1

# Color returned for rays that escape the scene
BACKGROUND_COLOR = (0.2, 0.7, 0.8)


# =============================================================================
# Render Target (Framebuffer)
# =============================================================================

# Maximum supported image dimensions (preallocated to avoid kernel recompilation)
MAX_IMAGE_WIDTH = 2048
MAX_IMAGE_HEIGHT = 2048

_image_width = ti.field(dtype=ti.i32, shape=())
_image_height = ti.field(dtype=ti.i32, shape=())

# Flat color buffer, pixel (i, j) lives at index i + j * width
_framebuffer = ti.Vector.field(3, dtype=ti.f32, shape=MAX_IMAGE_WIDTH * MAX_IMAGE_HEIGHT)

_render_target_initialized = ti.field(dtype=ti.i32, shape=())

# Scratch results for single-ray queries from Python
_trace_result = ti.Vector.field(3, dtype=ti.f32, shape=())
_shadow_result = ti.field(dtype=ti.i32, shape=())


def setup_render_target(width: int, height: int) -> None:
    """Initialize the render target.

    Sets the active image dimensions and clears the framebuffer. The buffer
    is preallocated to MAX_IMAGE_WIDTH x MAX_IMAGE_HEIGHT.

    Args:
        width: Image width in pixels (1..MAX_IMAGE_WIDTH).
        height: Image height in pixels (1..MAX_IMAGE_HEIGHT).

    Raises:
        ValueError: If dimensions are not positive or exceed the maximum.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Image dimensions ({width}x{height}) must be positive")
    if width > MAX_IMAGE_WIDTH or height > MAX_IMAGE_HEIGHT:
        raise ValueError(
            f"Image dimensions ({width}x{height}) exceed maximum supported "
            f"({MAX_IMAGE_WIDTH}x{MAX_IMAGE_HEIGHT})"
        )

    _image_width[None] = width
    _image_height[None] = height
    _render_target_initialized[None] = 1

    clear_render_target()


def clear_render_target() -> None:
    """Clear the framebuffer to black."""
    _framebuffer.fill(0.0)


def get_image_dimensions() -> tuple[int, int]:
    """Get the current render target dimensions.

    Returns:
        Tuple of (width, height).
    """
    return int(_image_width[None]), int(_image_height[None])


def _check_render_target_initialized() -> None:
    """Check if render target is initialized and raise if not."""
    if _render_target_initialized[None] == 0:
        raise RuntimeError("Render target not set up. Call setup_render_target() first.")


def _check_max_depth(max_depth: int) -> int:
    if isinstance(max_depth, bool) or not isinstance(max_depth, int):
        raise ValueError(f"max_depth must be an integer, got {max_depth!r}")
    if max_depth < 0:
        raise ValueError(f"max_depth = {max_depth} must be non-negative")
    if max_depth > MAX_SUPPORTED_DEPTH:
        raise ValueError(f"max_depth = {max_depth} exceeds the supported maximum {MAX_SUPPORTED_DEPTH}")
    return max_depth


# =============================================================================
# Shading
# =============================================================================


@ti.func
def in_shadow(point: vec3, normal: vec3, light_position: vec3) -> ti.i32:
    """Test whether a light is blocked from a surface point.

    The shadow ray starts EPSILON off the surface, on the side facing the
    light, and the light counts as occluded only if something is hit strictly
    closer than the light itself. A light sitting exactly on the point has
    distance zero and is never occluded.

    Args:
        point: The surface point being shaded.
        normal: The unit outward normal at the point.
        light_position: World-space position of the light.

    Returns:
        1 if the light is occluded, 0 otherwise.
    """
    to_light = light_position - point
    light_dir = normalize(to_light)
    light_distance = length(to_light)

    shadow_origin = offset_origin(point, normal, light_dir)
    shadow_rec = scene_intersect(shadow_origin, light_dir)

    occluded = 0
    if shadow_rec.hit == 1 and length(shadow_rec.point - shadow_origin) < light_distance:
        occluded = 1
    return occluded


@ti.func
def local_illumination(point: vec3, normal: vec3, view_direction: vec3, specular_exponent: ti.f32):
    """Accumulate diffuse and specular intensity from all visible lights.

    Args:
        point: The surface point being shaded.
        normal: The unit outward normal at the point.
        view_direction: Direction of the incoming ray (unit length).
        specular_exponent: Phong exponent of the surface material.

    Returns:
        A tuple (diffuse, specular) of scalar light intensities.
    """
    diffuse = 0.0
    specular = 0.0

    for k in range(num_lights[None]):
        light = get_point_light(k)
        if in_shadow(point, normal, light.position) == 0:
            light_dir = normalize(light.position - point)
            diffuse += light.intensity * tm.max(0.0, tm.dot(light_dir, normal))
            highlight = tm.max(0.0, tm.dot(view_direction, reflect(light_dir, normal)))
            specular += light.intensity * ti.pow(highlight, specular_exponent)

    return diffuse, specular


@ti.func
def cast_ray(ray_origin: vec3, ray_direction: vec3, max_depth: ti.i32) -> vec3:
    """Trace a ray and return the color it sees.

    Every hit spawns at most a reflected and a refracted child, each scaled
    by its albedo weight. Children are kept on a small local stack and
    processed depth first, so the final color is the same weighted sum the
    recursive formulation produces.

    Args:
        ray_origin: The starting point of the ray.
        ray_direction: The unit direction of the ray.
        max_depth: Deepest level that is still shaded.

    Returns:
        The linear RGB color. Components are not clamped and may exceed 1.
    """
    background = vec3(BACKGROUND_COLOR[0], BACKGROUND_COLOR[1], BACKGROUND_COLOR[2])
    color = vec3(0.0, 0.0, 0.0)

    # Pending rays: origin, direction and accumulated weight per row
    origins = ti.Matrix.zero(ti.f32, RAY_STACK_SIZE, 3)
    directions = ti.Matrix.zero(ti.f32, RAY_STACK_SIZE, 3)
    weights = ti.Matrix.zero(ti.f32, RAY_STACK_SIZE, 3)
    depths = ti.Vector.zero(ti.i32, RAY_STACK_SIZE)

    for c in ti.static(range(3)):
        origins[0, c] = ray_origin[c]
        directions[0, c] = ray_direction[c]
        weights[0, c] = 1.0
    stack_size = 1

    while stack_size > 0:
        stack_size -= 1
        top = stack_size
        origin = vec3(origins[top, 0], origins[top, 1], origins[top, 2])
        direction = vec3(directions[top, 0], directions[top, 1], directions[top, 2])
        weight = vec3(weights[top, 0], weights[top, 1], weights[top, 2])
        depth = depths[top]

        rec = scene_intersect(origin, direction)

        if rec.hit == 0:
            color += weight * background
        else:
            material = get_phong_material(rec.material_id)
            albedo = material.albedo
            point = rec.point
            normal = rec.normal

            diffuse, specular = local_illumination(
                point, normal, direction, material.specular_exponent
            )

            # Highlights are white regardless of surface color
            color += weight * (
                albedo[0] * diffuse * material.diffuse_color
                + albedo[1] * specular * vec3(1.0, 1.0, 1.0)
            )

            if albedo[3] > 0.0:
                refract_dir = normalize(refract(direction, normal, material.refractive_index))
                # Total internal reflection yields a zero vector: no refracted light
                if near_zero(refract_dir) == 0:
                    refract_weight = weight * albedo[3]
                    if depth < max_depth and stack_size < RAY_STACK_SIZE:
                        refract_origin = offset_origin(point, normal, refract_dir)
                        for c in ti.static(range(3)):
                            origins[stack_size, c] = refract_origin[c]
                            directions[stack_size, c] = refract_dir[c]
                            weights[stack_size, c] = refract_weight[c]
                        depths[stack_size] = depth + 1
                        stack_size += 1
                    else:
                        color += refract_weight * background

            if albedo[2] > 0.0:
                reflect_dir = normalize(reflect(direction, normal))
                reflect_weight = weight * albedo[2]
                if depth < max_depth and stack_size < RAY_STACK_SIZE:
                    reflect_origin = offset_origin(point, normal, reflect_dir)
                    for c in ti.static(range(3)):
                        origins[stack_size, c] = reflect_origin[c]
                        directions[stack_size, c] = reflect_dir[c]
                        weights[stack_size, c] = reflect_weight[c]
                    depths[stack_size] = depth + 1
                    stack_size += 1
                else:
                    color += reflect_weight * background

    return color


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.kernel
def _render_kernel(width: ti.i32, height: ti.i32, max_depth: ti.i32):
    """Trace one primary ray per pixel into the framebuffer."""
    for i, j in ti.ndrange(width, height):
        ray = get_ray(i, j, width, height)
        _framebuffer[i + j * width] = cast_ray(ray.origin, ray.direction, max_depth)


@ti.kernel
def _render_single_pixel(
    pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32, max_depth: ti.i32
):
    # Single-iteration loop keeps the scene scans inside cast_ray serial
    for _ in range(1):
        ray = get_ray(pixel_i, pixel_j, width, height)
        _trace_result[None] = cast_ray(ray.origin, ray.direction, max_depth)


@ti.kernel
def _trace_single_ray(origin: vec3, direction: vec3, max_depth: ti.i32):
    for _ in range(1):
        _trace_result[None] = cast_ray(origin, direction, max_depth)


@ti.kernel
def _shadow_query(point: vec3, normal: vec3, light_position: vec3):
    for _ in range(1):
        _shadow_result[None] = in_shadow(point, normal, light_position)


# =============================================================================
# Public Rendering API
# =============================================================================


def _read_trace_result() -> tuple[float, float, float]:
    color = _trace_result[None]
    return (float(color[0]), float(color[1]), float(color[2]))


def render_image(max_depth: int = MAX_DEPTH) -> None:
    """Render every pixel of the render target.

    Each call overwrites the framebuffer; rendering is deterministic, so
    repeated calls with an unchanged scene produce the same image.

    Args:
        max_depth: Deepest recursion level that is still shaded.

    Raises:
        RuntimeError: If render target has not been set up.
        ValueError: If max_depth is negative or not an integer.
    """
    _check_render_target_initialized()
    max_depth = _check_max_depth(max_depth)

    width, height = get_image_dimensions()
    _render_kernel(width, height, max_depth)


def render_pixel(pixel_i: int, pixel_j: int, max_depth: int = MAX_DEPTH) -> tuple[float, float, float]:
    """Render a single pixel without touching the framebuffer.

    This is a Python-callable function for testing. For production rendering,
    use render_image() which processes all pixels in parallel.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        max_depth: Deepest recursion level that is still shaded.

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    _check_render_target_initialized()
    max_depth = _check_max_depth(max_depth)

    width, height = get_image_dimensions()
    _render_single_pixel(pixel_i, pixel_j, width, height, max_depth)
    return _read_trace_result()


def trace_ray(
    origin: tuple[float, float, float],
    direction: tuple[float, float, float],
    max_depth: int = MAX_DEPTH,
) -> tuple[float, float, float]:
    """Trace an arbitrary ray through the current scene.

    Args:
        origin: The ray origin as (x, y, z).
        direction: The ray direction as (x, y, z); normalized here.
        max_depth: Deepest recursion level that is still shaded.

    Returns:
        Tuple of (R, G, B) linear color values.

    Raises:
        ValueError: If direction has zero length or max_depth is invalid.
    """
    max_depth = _check_max_depth(max_depth)

    d_len = math.sqrt(direction[0] ** 2 + direction[1] ** 2 + direction[2] ** 2)
    if d_len == 0.0:
        raise ValueError("Ray direction must have non-zero length")

    _trace_single_ray(
        vec3(origin[0], origin[1], origin[2]),
        vec3(direction[0] / d_len, direction[1] / d_len, direction[2] / d_len),
        max_depth,
    )
    return _read_trace_result()


def is_shadowed(
    point: tuple[float, float, float],
    normal: tuple[float, float, float],
    light_position: tuple[float, float, float],
) -> bool:
    """Run the shadow-ray test from Python.

    Args:
        point: The surface point as (x, y, z).
        normal: The unit outward normal at the point.
        light_position: The light position as (x, y, z).

    Returns:
        True if something in the scene blocks the light.
    """
    _shadow_query(
        vec3(point[0], point[1], point[2]),
        vec3(normal[0], normal[1], normal[2]),
        vec3(light_position[0], light_position[1], light_position[2]),
    )
    return bool(_shadow_result[None])


def get_framebuffer_numpy():
    """Get the framebuffer as a flat NumPy array.

    Row j of the image starts at index j * width. Values are linear and
    unclamped.

    Returns:
        NumPy float32 array of shape (width * height, 3).

    Raises:
        RuntimeError: If render target has not been set up.
    """
    import numpy as np

    _check_render_target_initialized()

    width, height = get_image_dimensions()
    buffer = _framebuffer.to_numpy()[: width * height]
    return buffer.astype(np.float32)


def get_image_numpy():
    """Get the framebuffer as an image array.

    Returns:
        NumPy float32 array of shape (height, width, 3), top row first.

    Raises:
        RuntimeError: If render target has not been set up.
    """
    width, height = get_image_dimensions()
    return get_framebuffer_numpy().reshape(height, width, 3)
