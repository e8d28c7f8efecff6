"""Demo scene configuration.

This module provides a factory function for the classic four-sphere demo
scene: an ivory ball, a glass ball, a red rubber ball and a large mirror
ball, lit by three point lights and seen by a 90 degree camera.

The camera sits at the origin looking down -z, so every object is placed
at negative z. An optional floor plane at y = -4 can be added under the
spheres.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.demo import create_demo_scene
    >>> from src.whitted.camera.pinhole import setup_camera
    >>>
    >>> scene, camera = create_demo_scene()
    >>> setup_camera(camera)
    >>> # Now render using the scene and camera
"""

from dataclasses import dataclass

from src.whitted.camera.pinhole import PinholeCamera
from src.whitted.scene.manager import SceneManager

# =============================================================================
# Demo Scene Constants
# =============================================================================

# Native resolution of the demo image
DEMO_WIDTH = 1024
DEMO_HEIGHT = 768
DEMO_VFOV = 90.0


@dataclass(frozen=True)
class MaterialPreset:
    """Parameters for one of the demo materials."""

    diffuse_color: tuple[float, float, float]
    albedo: tuple[float, float, float, float]
    specular_exponent: float
    refractive_index: float = 1.0


IVORY = MaterialPreset((0.4, 0.4, 0.3), (0.6, 0.3, 0.1, 0.0), 50.0)
GLASS = MaterialPreset((0.6, 0.7, 0.8), (0.0, 0.5, 0.1, 0.8), 125.0, 1.5)
RED_RUBBER = MaterialPreset((0.3, 0.1, 0.1), (0.9, 0.1, 0.0, 0.0), 10.0)
MIRROR = MaterialPreset((1.0, 1.0, 1.0), (0.0, 10.0, 0.8, 0.0), 1425.0)
FLOOR = MaterialPreset((0.3, 0.3, 0.3), (0.9, 0.1, 0.0, 0.0), 10.0)

MATERIAL_PRESETS = {
    "ivory": IVORY,
    "glass": GLASS,
    "red_rubber": RED_RUBBER,
    "mirror": MIRROR,
}

# (center, radius, material name)
DEMO_SPHERES = [
    ((-3.0, 0.0, -16.0), 2.0, "ivory"),
    ((-1.0, -1.5, -12.0), 2.0, "glass"),
    ((1.5, -0.5, -18.0), 3.0, "red_rubber"),
    ((7.0, 5.0, -18.0), 4.0, "mirror"),
]

# (position, intensity)
DEMO_LIGHTS = [
    ((-20.0, 20.0, 20.0), 1.5),
    ((30.0, 50.0, -25.0), 1.8),
    ((30.0, 20.0, 30.0), 1.7),
]

FLOOR_NORMAL = (0.0, 1.0, 0.0)
FLOOR_OFFSET = -4.0


# =============================================================================
# Demo Scene Factory
# =============================================================================


def _add_preset(scene: SceneManager, preset: MaterialPreset) -> int:
    return scene.add_material(
        preset.diffuse_color,
        albedo=preset.albedo,
        specular_exponent=preset.specular_exponent,
        refractive_index=preset.refractive_index,
    )


def create_demo_scene(include_floor: bool = False) -> tuple[SceneManager, PinholeCamera]:
    """Create the four-sphere demo scene.

    Clears the current scene and builds:
    - Materials: ivory, glass, red rubber, mirror (IDs 0-3, in that order)
    - Four spheres, one per material
    - Three white point lights
    - Optionally a matte floor plane below the spheres

    Args:
        include_floor: If True, add the plane y = -4 with its own material.

    Returns:
        Tuple of (SceneManager, PinholeCamera).

    Example:
        >>> scene, camera = create_demo_scene()
        >>> print(f"Scene has {scene.get_sphere_count()} spheres")
        Scene has 4 spheres
    """
    scene = SceneManager()

    material_ids = {name: _add_preset(scene, preset) for name, preset in MATERIAL_PRESETS.items()}

    for center, radius, name in DEMO_SPHERES:
        scene.add_sphere(center, radius, material_ids[name])

    if include_floor:
        floor_mat = _add_preset(scene, FLOOR)
        scene.add_plane(FLOOR_NORMAL, FLOOR_OFFSET, floor_mat)

    for position, intensity in DEMO_LIGHTS:
        scene.add_light(position, intensity)

    camera = PinholeCamera(vfov=DEMO_VFOV)
    return scene, camera
