"""Point light storage.

A point light is a position and a scalar intensity. Lights emit white light;
color comes only from the surface materials. Every light contributes an
independent diffuse and specular term, so the order lights are added in
does not change the image.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.lights import add_point_light
    >>> add_point_light((-20.0, 20.0, 20.0), 1.5)
    0
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3


@ti.dataclass
class PointLight:
    """A point light source.

    Attributes:
        position: World-space position of the light (vec3).
        intensity: Scalar brightness (non-negative).
    """

    position: vec3
    intensity: ti.f32


# Maximum number of lights in the scene
MAX_LIGHTS = 64

light_positions = ti.Vector.field(3, dtype=ti.f32, shape=MAX_LIGHTS)
light_intensities = ti.field(dtype=ti.f32, shape=MAX_LIGHTS)
num_lights = ti.field(dtype=ti.i32, shape=())


def clear_lights() -> None:
    """Remove all lights from the scene."""
    num_lights[None] = 0


def add_point_light(position: tuple[float, float, float], intensity: float) -> int:
    """Add a point light to the scene.

    Args:
        position: The light position as (x, y, z).
        intensity: The light intensity. Must be non-negative.

    Returns:
        The index of the added light.

    Raises:
        RuntimeError: If the maximum number of lights is exceeded.
        ValueError: If intensity is negative.
    """
    if intensity < 0.0:
        raise ValueError(f"Light intensity = {intensity} is negative")

    idx = num_lights[None]
    if idx >= MAX_LIGHTS:
        raise RuntimeError(f"Maximum number of lights ({MAX_LIGHTS}) exceeded")

    light_positions[idx] = [position[0], position[1], position[2]]
    light_intensities[idx] = intensity
    num_lights[None] = idx + 1
    return idx


def get_light_count() -> int:
    """Get the number of lights in the scene."""
    return int(num_lights[None])


@ti.func
def get_point_light(light_idx: ti.i32) -> PointLight:
    """Get a light by index (inside Taichi kernels)."""
    return PointLight(
        position=light_positions[light_idx],
        intensity=light_intensities[light_idx],
    )
