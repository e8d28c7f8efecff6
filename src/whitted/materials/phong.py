"""Phong material model with reflection and refraction weights.

A material describes how a surface point responds to light. The shaded
color is a weighted sum of four contributions:

    color = kd * diffuse * diffuse_color
          + ks * specular * (1, 1, 1)
          + kr * reflected_color
          + kt * refracted_color

where (kd, ks, kr, kt) is the albedo vector. The weights are independent and
need not sum to one; reflection and refraction are mixed by these fixed
weights rather than by an angle-dependent Fresnel term.

Materials live in a table of Taichi fields and are referenced by index
(material_id) from any number of primitives. Nothing writes to the table
while a frame renders.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> from src.whitted.materials.phong import add_phong_material
    >>> ivory = add_phong_material(
    ...     diffuse_color=(0.4, 0.4, 0.3),
    ...     albedo=(0.6, 0.3, 0.1, 0.0),
    ...     specular_exponent=50.0,
    ... )
"""

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors
vec3 = tm.vec3
vec4 = tm.vec4


@ti.dataclass
class PhongMaterial:
    """Phong material properties.

    Attributes:
        diffuse_color: Base color of the surface (RGB).
        albedo: Weights (kd, ks, kr, kt) applied to the diffuse, specular,
            reflected and refracted contributions.
        specular_exponent: Phong exponent; larger values give tighter
            highlights.
        refractive_index: Index of refraction of the material's interior.
            1.0 means refracted rays pass straight through.
    """

    diffuse_color: vec3
    albedo: vec4
    specular_exponent: ti.f32
    refractive_index: ti.f32


# =============================================================================
# Material Field Storage
# =============================================================================

# Maximum number of materials in the scene
MAX_MATERIALS = 256

# Storage for material properties (Structure of Arrays)
material_diffuse_colors = ti.Vector.field(3, dtype=ti.f32, shape=MAX_MATERIALS)
material_albedos = ti.Vector.field(4, dtype=ti.f32, shape=MAX_MATERIALS)
material_specular_exponents = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
material_refractive_indices = ti.field(dtype=ti.f32, shape=MAX_MATERIALS)
num_materials = ti.field(dtype=ti.i32, shape=())


def clear_phong_materials() -> None:
    """Clear all materials.

    Resets the material count to zero. Existing data in the fields will be
    overwritten when new materials are added.
    """
    num_materials[None] = 0


def add_phong_material(
    diffuse_color: tuple[float, float, float],
    albedo: tuple[float, float, float, float] = (1.0, 0.0, 0.0, 0.0),
    specular_exponent: float = 1.0,
    refractive_index: float = 1.0,
) -> int:
    """Add a material to the material table.

    Args:
        diffuse_color: Base surface color as (R, G, B). Components must be
            non-negative.
        albedo: Contribution weights (kd, ks, kr, kt). Each must be
            non-negative. Default is purely diffuse.
        specular_exponent: Phong exponent. Must be non-negative.
        refractive_index: Index of refraction. Must be positive.
            Common values:
            - Air: 1.0
            - Water: 1.33
            - Glass: 1.5
            - Diamond: 2.4

    Returns:
        The material_id of the added material.

    Raises:
        RuntimeError: If the maximum number of materials is exceeded.
        ValueError: If any parameter is outside its valid range.
    """
    if len(diffuse_color) != 3:
        raise ValueError(f"diffuse_color must have 3 components, got {len(diffuse_color)}")
    if len(albedo) != 4:
        raise ValueError(f"albedo must have 4 components (kd, ks, kr, kt), got {len(albedo)}")
    for i, c in enumerate(diffuse_color):
        if c < 0.0:
            raise ValueError(f"diffuse_color component {i} = {c} is negative")
    for name, w in zip(("kd", "ks", "kr", "kt"), albedo):
        if w < 0.0:
            raise ValueError(f"albedo weight {name} = {w} is negative")
    if specular_exponent < 0.0:
        raise ValueError(f"specular_exponent = {specular_exponent} is negative")
    if refractive_index <= 0.0:
        raise ValueError(
            f"refractive_index = {refractive_index} must be positive"
        )

    idx = num_materials[None]
    if idx >= MAX_MATERIALS:
        raise RuntimeError(f"Maximum number of materials ({MAX_MATERIALS}) exceeded")

    material_diffuse_colors[idx] = [diffuse_color[0], diffuse_color[1], diffuse_color[2]]
    material_albedos[idx] = [albedo[0], albedo[1], albedo[2], albedo[3]]
    material_specular_exponents[idx] = specular_exponent
    material_refractive_indices[idx] = refractive_index
    num_materials[None] = idx + 1
    return idx


def get_phong_material_count() -> int:
    """Get the number of materials in the table."""
    return int(num_materials[None])


def get_phong_material_python(material_id: int) -> dict[str, object]:
    """Read a material back from the table (Python side).

    Args:
        material_id: The index of the material.

    Returns:
        Dictionary with diffuse_color, albedo, specular_exponent and
        refractive_index.

    Raises:
        ValueError: If material_id is out of range.
    """
    if material_id < 0 or material_id >= num_materials[None]:
        raise ValueError(f"Invalid material_id: {material_id}")

    color = material_diffuse_colors[material_id]
    albedo = material_albedos[material_id]
    return {
        "diffuse_color": (float(color[0]), float(color[1]), float(color[2])),
        "albedo": (float(albedo[0]), float(albedo[1]), float(albedo[2]), float(albedo[3])),
        "specular_exponent": float(material_specular_exponents[material_id]),
        "refractive_index": float(material_refractive_indices[material_id]),
    }


@ti.func
def get_phong_material(material_id: ti.i32) -> PhongMaterial:
    """Get a material by index (inside Taichi kernels).

    Args:
        material_id: The index of the material in the table.

    Returns:
        The PhongMaterial stored at that index.
    """
    return PhongMaterial(
        diffuse_color=material_diffuse_colors[material_id],
        albedo=material_albedos[material_id],
        specular_exponent=material_specular_exponents[material_id],
        refractive_index=material_refractive_indices[material_id],
    )
