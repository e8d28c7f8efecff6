"""Pinhole camera model for perspective projection ray generation.

The camera is fixed: the eye sits at the world origin looking down -z with
+y up. There is no look-at transform. For an image of width W and height H,
the ray through the center of pixel (i, j) has direction

    normalize(i + 0.5 - W/2,  -(j + 0.5 - H/2),  -H / tan(vfov/2))

Pixel rows are numbered top to bottom (j = 0 is the top row) and both axes
are scaled by H, so square pixels stay square for any aspect ratio.

All ray generation is Taichi-compatible.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.camera.pinhole import PinholeCamera, setup_camera, get_ray
    >>>
    >>> setup_camera(PinholeCamera(vfov=90.0))
    >>>
    >>> @ti.kernel
    ... def render():
    ...     ray = get_ray(0, 0, 640, 480)  # Ray through the top-left pixel
"""

import math
from dataclasses import dataclass

import taichi as ti

from src.whitted.core.ray import Ray, make_ray, normalize, vec3

# Eye position; the camera is never moved
EYE_POSITION = (0.0, 0.0, 0.0)

# =============================================================================
# Camera Data Structures
# =============================================================================


@dataclass
class PinholeCamera:
    """Configuration for the fixed pinhole camera.

    Attributes:
        vfov: Vertical field of view in degrees, in the open range (0, 180).
    """

    vfov: float = 90.0

    def __post_init__(self) -> None:
        if not 0.0 < self.vfov < 180.0:
            raise ValueError(f"vfov = {self.vfov} must be in (0, 180) degrees")


# =============================================================================
# Taichi Fields for Camera State
# =============================================================================

_camera_origin = ti.Vector.field(3, dtype=ti.f32, shape=())

# tan(vfov / 2); the image plane distance is height / this value
_tan_half_fov = ti.field(dtype=ti.f32, shape=())


# =============================================================================
# Camera Setup (Python-side, called once per camera configuration)
# =============================================================================


def setup_camera(camera: PinholeCamera) -> None:
    """Initialize camera state from configuration.

    Args:
        camera: Camera configuration.

    Note:
        This function writes to Taichi fields and should be called from
        Python (not from within a Taichi kernel).
    """
    theta = math.radians(camera.vfov)
    _camera_origin[None] = list(EYE_POSITION)
    _tan_half_fov[None] = math.tan(theta / 2.0)


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def get_ray_direction(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> vec3:
    """Compute the unit direction of the primary ray through a pixel center.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The normalized camera-space direction.
    """
    w = ti.cast(width, ti.f32)
    h = ti.cast(height, ti.f32)
    x = ti.cast(pixel_i, ti.f32) + 0.5 - w / 2.0
    y = -(ti.cast(pixel_j, ti.f32) + 0.5 - h / 2.0)
    z = -h / _tan_half_fov[None]
    return normalize(vec3(x, y, z))


@ti.func
def get_ray(pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32) -> Ray:
    """Generate the primary ray through a pixel center.

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        A Ray from the eye through the center of pixel (i, j).
    """
    return make_ray(_camera_origin[None], get_ray_direction(pixel_i, pixel_j, width, height))


# =============================================================================
# Utility Functions
# =============================================================================


def get_camera_info() -> dict[str, object]:
    """Get current camera state for debugging.

    Returns:
        Dictionary with origin and tan_half_fov.
    """
    origin_vec = _camera_origin[None]
    return {
        "origin": (float(origin_vec[0]), float(origin_vec[1]), float(origin_vec[2])),
        "tan_half_fov": float(_tan_half_fov[None]),
    }


@ti.kernel
def _primary_direction_kernel(
    pixel_i: ti.i32, pixel_j: ti.i32, width: ti.i32, height: ti.i32
) -> vec3:
    return get_ray_direction(pixel_i, pixel_j, width, height)


def primary_ray_direction(
    pixel_i: int, pixel_j: int, width: int, height: int
) -> tuple[float, float, float]:
    """Compute a primary ray direction from Python (for tests and tooling).

    Args:
        pixel_i: Pixel column (0 = left).
        pixel_j: Pixel row (0 = top).
        width: Image width in pixels.
        height: Image height in pixels.

    Returns:
        The unit direction as an (x, y, z) tuple.
    """
    d = _primary_direction_kernel(pixel_i, pixel_j, width, height)
    return (float(d[0]), float(d[1]), float(d[2]))

