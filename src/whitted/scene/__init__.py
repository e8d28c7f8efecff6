"""Scene module for scene storage and ray-scene queries.

This module handles scene representation and ray-scene queries:

Components:
    intersection: Sphere and plane tables and the closest-hit query
    lights: Point light table
    manager: Scene builder coordinating primitives, materials and lights
    demo: The four-sphere demo scene

Scene data is organized for efficient kernel access:
    - Structure-of-Arrays layout for geometric data
    - Contiguous material ID arrays
    - Primitives and lights kept in insertion order
"""

# Scene intersection and hit records
from .intersection import (
    MAX_PLANES,
    MAX_SPHERES,
    SceneHitRecord,
    add_plane,
    add_sphere,
    clear_scene,
    get_plane_count,
    get_sphere_count,
    scene_intersect,
)

# Point lights
from .lights import (
    MAX_LIGHTS,
    PointLight,
    add_point_light,
    clear_lights,
    get_light_count,
    get_point_light,
)

# Scene manager
from .manager import (
    LightInfo,
    MaterialInfo,
    PlaneInfo,
    SceneConfig,
    SceneManager,
    SphereInfo,
)

# Demo scene
from .demo import MATERIAL_PRESETS, create_demo_scene

__all__ = [
    # Intersection module
    "SceneHitRecord",
    "add_sphere",
    "add_plane",
    "clear_scene",
    "get_sphere_count",
    "get_plane_count",
    "scene_intersect",
    "MAX_SPHERES",
    "MAX_PLANES",
    # Lights module
    "PointLight",
    "add_point_light",
    "clear_lights",
    "get_light_count",
    "get_point_light",
    "MAX_LIGHTS",
    # Manager module
    "SceneManager",
    "SceneConfig",
    "MaterialInfo",
    "SphereInfo",
    "PlaneInfo",
    "LightInfo",
    # Demo module
    "create_demo_scene",
    "MATERIAL_PRESETS",
]
