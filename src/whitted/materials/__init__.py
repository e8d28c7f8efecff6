"""Materials module for surface shading parameters.

This module implements the material model used by the Whitted tracer:

Components:
    phong: Phong material (diffuse color, specular exponent, albedo weights
        for diffuse/specular/reflection/refraction, refractive index) and
        the material table that primitives index into

Materials are stored once and shared by index. A mirror, a glass ball and
a matte rubber ball all use the same PhongMaterial type with different
albedo weights.
"""

from .phong import (
    MAX_MATERIALS,
    PhongMaterial,
    add_phong_material,
    clear_phong_materials,
    get_phong_material,
    get_phong_material_count,
    get_phong_material_python,
)

__all__ = [
    "MAX_MATERIALS",
    "PhongMaterial",
    "add_phong_material",
    "clear_phong_materials",
    "get_phong_material",
    "get_phong_material_count",
    "get_phong_material_python",
]
