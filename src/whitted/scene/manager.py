"""Unified scene manager for coordinating primitives, materials and lights.

This module provides a high-level scene management API on top of the raw
Taichi field tables. It validates material references before primitives are
inserted and keeps a host-side record of everything added, so a scene can be
exported to and rebuilt from a plain configuration.

The SceneManager maintains:
- The material table (every primitive refers to a material by ID)
- Sphere and plane tables, in insertion order
- The point light table
- Scene serialization/configuration support

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.scene.manager import SceneManager
    >>> scene = SceneManager()
    >>> ivory = scene.add_material((0.4, 0.4, 0.3), albedo=(0.6, 0.3, 0.1, 0.0), specular_exponent=50.0)
    >>> scene.add_sphere(center=(-3, 0, -16), radius=2, material_id=ivory)
    >>> scene.add_light(position=(-20, 20, 20), intensity=1.5)
"""

from dataclasses import dataclass, field
from typing import Any

import taichi.math as tm

from src.whitted.materials.phong import (
    MAX_MATERIALS,
    add_phong_material,
    clear_phong_materials,
    get_phong_material_count,
)
from src.whitted.scene.intersection import (
    MAX_PLANES,
    MAX_SPHERES,
    add_plane,
    add_sphere,
    clear_scene,
    get_plane_count,
    get_sphere_count,
)
from src.whitted.scene.lights import (
    MAX_LIGHTS,
    add_point_light,
    clear_lights,
    get_light_count,
)

# Type alias for 3D vectors
vec3 = tm.vec3

_MATERIAL_KEYS = {"diffuse_color", "albedo", "specular_exponent", "refractive_index"}
_SPHERE_KEYS = {"center", "radius", "material_id"}
_PLANE_KEYS = {"normal", "offset", "material_id"}
_LIGHT_KEYS = {"position", "intensity"}
_SCENE_KEYS = {"materials", "spheres", "planes", "lights"}


def _check_keys(entry: dict[str, Any], allowed: set[str], kind: str) -> None:
    unknown = set(entry) - allowed
    if unknown:
        raise ValueError(f"Unknown {kind} keys: {sorted(unknown)}")


def _as_tuple3(values: Any, name: str) -> tuple[float, float, float]:
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return (float(values[0]), float(values[1]), float(values[2]))


@dataclass
class MaterialInfo:
    """Information about a registered material.

    Attributes:
        material_id: The index in the material table.
        diffuse_color: Base surface color (R, G, B).
        albedo: Contribution weights (kd, ks, kr, kt).
        specular_exponent: Phong exponent.
        refractive_index: Index of refraction.
    """

    material_id: int
    diffuse_color: tuple[float, float, float]
    albedo: tuple[float, float, float, float]
    specular_exponent: float
    refractive_index: float


@dataclass
class SphereInfo:
    """Information about a sphere in the scene.

    Attributes:
        sphere_index: The index in the sphere storage arrays.
        center: The center of the sphere.
        radius: The radius of the sphere.
        material_id: The material ID assigned to the sphere.
    """

    sphere_index: int
    center: tuple[float, float, float]
    radius: float
    material_id: int


@dataclass
class PlaneInfo:
    """Information about a plane in the scene.

    Attributes:
        plane_index: The index in the plane storage arrays.
        normal: The plane normal as given (normalized on insertion).
        offset: Signed distance from the origin along the normal.
        material_id: The material ID assigned to the plane.
    """

    plane_index: int
    normal: tuple[float, float, float]
    offset: float
    material_id: int


@dataclass
class LightInfo:
    """Information about a point light in the scene."""

    light_index: int
    position: tuple[float, float, float]
    intensity: float


@dataclass
class SceneConfig:
    """Configuration for scene serialization.

    Attributes:
        materials: List of material configurations.
        spheres: List of sphere configurations.
        planes: List of plane configurations.
        lights: List of light configurations.
    """

    materials: list[dict[str, Any]] = field(default_factory=list)
    spheres: list[dict[str, Any]] = field(default_factory=list)
    planes: list[dict[str, Any]] = field(default_factory=list)
    lights: list[dict[str, Any]] = field(default_factory=list)


class SceneManager:
    """Scene builder coordinating primitives, materials and lights.

    The Taichi field tables are module-level, so there is effectively one
    scene per process. Creating a SceneManager clears it.

    Attributes:
        materials: List of MaterialInfo for all registered materials.
        spheres: List of SphereInfo for all spheres in the scene.
        planes: List of PlaneInfo for all planes in the scene.
        lights: List of LightInfo for all lights in the scene.

    Example:
        >>> scene = SceneManager()
        >>> glass = scene.add_material(
        ...     (0.6, 0.7, 0.8), albedo=(0.0, 0.5, 0.1, 0.8),
        ...     specular_exponent=125.0, refractive_index=1.5,
        ... )
        >>> scene.add_sphere((-1.0, -1.5, -12.0), 2.0, glass)
        >>> scene.add_light((30.0, 50.0, -25.0), 1.8)
    """

    def __init__(self) -> None:
        """Initialize an empty scene."""
        self.materials: list[MaterialInfo] = []
        self.spheres: list[SphereInfo] = []
        self.planes: list[PlaneInfo] = []
        self.lights: list[LightInfo] = []
        self._clear_all()

    def _clear_all(self) -> None:
        """Clear all scene data including Taichi fields."""
        clear_scene()
        clear_phong_materials()
        clear_lights()
        self.materials.clear()
        self.spheres.clear()
        self.planes.clear()
        self.lights.clear()

    def clear(self) -> None:
        """Clear the entire scene (primitives, materials and lights)."""
        self._clear_all()

    def _check_material_id(self, material_id: int) -> None:
        if material_id < 0 or material_id >= get_phong_material_count():
            raise ValueError(f"Invalid material_id: {material_id}")

    # =========================================================================
    # Material Management
    # =========================================================================

    def add_material(
        self,
        diffuse_color: tuple[float, float, float],
        albedo: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0),
        specular_exponent: float = 1.0,
        refractive_index: float = 1.0,
    ) -> int:
        """Add a material to the scene.

        Args:
            diffuse_color: Base surface color as (R, G, B).
            albedo: Contribution weights (kd, ks, kr, kt).
            specular_exponent: Phong exponent.
            refractive_index: Index of refraction.

        Returns:
            The material ID for this material.

        Raises:
            RuntimeError: If the maximum number of materials is exceeded.
            ValueError: If any parameter is outside its valid range.
        """
        material_id = add_phong_material(
            diffuse_color, albedo, specular_exponent, refractive_index
        )
        self.materials.append(
            MaterialInfo(
                material_id=material_id,
                diffuse_color=tuple(diffuse_color),
                albedo=tuple(albedo),
                specular_exponent=specular_exponent,
                refractive_index=refractive_index,
            )
        )
        return material_id

    def get_material_count(self) -> int:
        """Get the total number of materials in the scene."""
        return get_phong_material_count()

    def get_material_info(self, material_id: int) -> MaterialInfo | None:
        """Get information about a material by ID.

        Returns:
            MaterialInfo for the material, or None if not found.
        """
        if 0 <= material_id < len(self.materials):
            return self.materials[material_id]
        return None

    # =========================================================================
    # Primitive Management
    # =========================================================================

    def add_sphere(
        self,
        center: tuple[float, float, float],
        radius: float,
        material_id: int,
    ) -> int:
        """Add a sphere to the scene.

        Args:
            center: The center point of the sphere as (x, y, z).
            radius: The radius of the sphere. Must be positive.
            material_id: The material ID to assign to the sphere.

        Returns:
            The index of the added sphere.

        Raises:
            RuntimeError: If the maximum number of spheres is exceeded.
            ValueError: If material_id or radius is invalid.
        """
        self._check_material_id(material_id)

        center_vec = vec3(center[0], center[1], center[2])
        sphere_index = add_sphere(center_vec, radius, material_id)

        self.spheres.append(
            SphereInfo(
                sphere_index=sphere_index,
                center=tuple(center),
                radius=radius,
                material_id=material_id,
            )
        )
        return sphere_index

    def add_plane(
        self,
        normal: tuple[float, float, float],
        offset: float,
        material_id: int,
    ) -> int:
        """Add an infinite plane dot(normal, P) = offset to the scene.

        Args:
            normal: The plane normal as (x, y, z). Any non-zero length.
            offset: Signed distance from the origin along the unit normal.
            material_id: The material ID to assign to the plane.

        Returns:
            The index of the added plane.

        Raises:
            RuntimeError: If the maximum number of planes is exceeded.
            ValueError: If material_id is invalid or normal has zero length.
        """
        self._check_material_id(material_id)

        normal_vec = vec3(normal[0], normal[1], normal[2])
        plane_index = add_plane(normal_vec, offset, material_id)

        self.planes.append(
            PlaneInfo(
                plane_index=plane_index,
                normal=tuple(normal),
                offset=offset,
                material_id=material_id,
            )
        )
        return plane_index

    def add_light(self, position: tuple[float, float, float], intensity: float) -> int:
        """Add a point light to the scene.

        Returns:
            The index of the added light.

        Raises:
            RuntimeError: If the maximum number of lights is exceeded.
            ValueError: If intensity is negative.
        """
        light_index = add_point_light(position, intensity)
        self.lights.append(
            LightInfo(light_index=light_index, position=tuple(position), intensity=intensity)
        )
        return light_index

    # =========================================================================
    # Convenience Methods (add object with material in one call)
    # =========================================================================

    def add_sphere_with_new_material(
        self,
        center: tuple[float, float, float],
        radius: float,
        diffuse_color: tuple[float, float, float],
        albedo: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0),
        specular_exponent: float = 1.0,
        refractive_index: float = 1.0,
    ) -> tuple[int, int]:
        """Add a sphere with a new material.

        Returns:
            Tuple of (sphere_index, material_id).
        """
        material_id = self.add_material(diffuse_color, albedo, specular_exponent, refractive_index)
        sphere_index = self.add_sphere(center, radius, material_id)
        return sphere_index, material_id

    # =========================================================================
    # Scene Queries
    # =========================================================================

    def get_sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return get_sphere_count()

    def get_plane_count(self) -> int:
        """Get the number of planes in the scene."""
        return get_plane_count()

    def get_light_count(self) -> int:
        """Get the number of lights in the scene."""
        return get_light_count()

    def get_primitive_count(self) -> int:
        """Get the total number of primitives in the scene."""
        return self.get_sphere_count() + self.get_plane_count()

    # =========================================================================
    # Scene Serialization
    # =========================================================================

    def to_config(self) -> SceneConfig:
        """Export the scene to a configuration object.

        Returns:
            A SceneConfig containing all materials, primitives and lights.
        """
        config = SceneConfig()

        for mat in self.materials:
            config.materials.append(
                {
                    "diffuse_color": list(mat.diffuse_color),
                    "albedo": list(mat.albedo),
                    "specular_exponent": mat.specular_exponent,
                    "refractive_index": mat.refractive_index,
                }
            )

        for sphere in self.spheres:
            config.spheres.append(
                {
                    "center": list(sphere.center),
                    "radius": sphere.radius,
                    "material_id": sphere.material_id,
                }
            )

        for plane in self.planes:
            config.planes.append(
                {
                    "normal": list(plane.normal),
                    "offset": plane.offset,
                    "material_id": plane.material_id,
                }
            )

        for light in self.lights:
            config.lights.append(
                {"position": list(light.position), "intensity": light.intensity}
            )

        return config

    def from_config(self, config: SceneConfig) -> None:
        """Load a scene from a configuration object.

        Clears the current scene and loads the configuration. Materials are
        loaded first so primitives can refer to them by position.

        Args:
            config: The scene configuration to load.

        Raises:
            ValueError: If the configuration contains unknown keys or
                invalid data.
        """
        self.clear()

        for mat_config in config.materials:
            _check_keys(mat_config, _MATERIAL_KEYS, "material")
            albedo_list = mat_config.get("albedo", [1.0, 0.0, 0.0, 0.0])
            if len(albedo_list) != 4:
                raise ValueError(f"albedo must have 4 components, got {len(albedo_list)}")
            self.add_material(
                _as_tuple3(mat_config.get("diffuse_color", [0.5, 0.5, 0.5]), "diffuse_color"),
                (
                    float(albedo_list[0]),
                    float(albedo_list[1]),
                    float(albedo_list[2]),
                    float(albedo_list[3]),
                ),
                float(mat_config.get("specular_exponent", 1.0)),
                float(mat_config.get("refractive_index", 1.0)),
            )

        for sphere_config in config.spheres:
            _check_keys(sphere_config, _SPHERE_KEYS, "sphere")
            self.add_sphere(
                _as_tuple3(sphere_config.get("center", [0, 0, 0]), "center"),
                float(sphere_config.get("radius", 1.0)),
                int(sphere_config.get("material_id", 0)),
            )

        for plane_config in config.planes:
            _check_keys(plane_config, _PLANE_KEYS, "plane")
            self.add_plane(
                _as_tuple3(plane_config.get("normal", [0, 1, 0]), "normal"),
                float(plane_config.get("offset", 0.0)),
                int(plane_config.get("material_id", 0)),
            )

        for light_config in config.lights:
            _check_keys(light_config, _LIGHT_KEYS, "light")
            self.add_light(
                _as_tuple3(light_config.get("position", [0, 0, 0]), "position"),
                float(light_config.get("intensity", 1.0)),
            )

    def to_dict(self) -> dict[str, Any]:
        """Export the scene to a dictionary (for JSON serialization).

        Returns:
            A dictionary representation of the scene.
        """
        config = self.to_config()
        return {
            "materials": config.materials,
            "spheres": config.spheres,
            "planes": config.planes,
            "lights": config.lights,
        }

    def from_dict(self, data: dict[str, Any]) -> None:
        """Load a scene from a dictionary.

        Args:
            data: Dictionary with 'materials', 'spheres', 'planes' and
                'lights' keys. Missing keys are treated as empty.

        Raises:
            ValueError: If data contains unknown keys.
        """
        _check_keys(data, _SCENE_KEYS, "scene")
        config = SceneConfig(
            materials=data.get("materials", []),
            spheres=data.get("spheres", []),
            planes=data.get("planes", []),
            lights=data.get("lights", []),
        )
        self.from_config(config)

    # =========================================================================
    # Capacity Information
    # =========================================================================

    @staticmethod
    def get_max_spheres() -> int:
        """Get the maximum number of spheres supported."""
        return MAX_SPHERES

    @staticmethod
    def get_max_planes() -> int:
        """Get the maximum number of planes supported."""
        return MAX_PLANES

    @staticmethod
    def get_max_materials() -> int:
        """Get the maximum number of materials supported."""
        return MAX_MATERIALS

    @staticmethod
    def get_max_lights() -> int:
        """Get the maximum number of lights supported."""
        return MAX_LIGHTS
