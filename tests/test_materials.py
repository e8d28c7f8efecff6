"""Unit tests for the Phong material table."""

import pytest
import taichi as ti


class TestPhongMaterialRegistry:
    """Tests for adding and reading materials."""

    def test_add_and_read_back(self):
        """Test a material round-trips through the Taichi fields."""
        from src.whitted.materials.phong import add_phong_material, get_phong_material_python

        mat_id = add_phong_material(
            (0.6, 0.7, 0.8),
            albedo=(0.0, 0.5, 0.1, 0.8),
            specular_exponent=125.0,
            refractive_index=1.5,
        )
        assert mat_id == 0

        mat = get_phong_material_python(mat_id)
        assert mat["diffuse_color"] == pytest.approx((0.6, 0.7, 0.8))
        assert mat["albedo"] == pytest.approx((0.0, 0.5, 0.1, 0.8))
        assert mat["specular_exponent"] == pytest.approx(125.0)
        assert mat["refractive_index"] == pytest.approx(1.5)

    def test_defaults_are_pure_diffuse(self):
        """Test the default albedo only weights the diffuse term."""
        from src.whitted.materials.phong import add_phong_material, get_phong_material_python

        mat = get_phong_material_python(add_phong_material((0.3, 0.1, 0.1)))
        assert mat["albedo"] == pytest.approx((1.0, 0.0, 0.0, 0.0))
        assert mat["refractive_index"] == pytest.approx(1.0)

    def test_ids_are_sequential_and_clear_resets(self):
        """Test material IDs count up and clearing starts over."""
        from src.whitted.materials.phong import (
            add_phong_material,
            clear_phong_materials,
            get_phong_material_count,
        )

        assert add_phong_material((0.1, 0.1, 0.1)) == 0
        assert add_phong_material((0.2, 0.2, 0.2)) == 1
        assert get_phong_material_count() == 2

        clear_phong_materials()
        assert get_phong_material_count() == 0
        assert add_phong_material((0.3, 0.3, 0.3)) == 0

    def test_weights_need_not_sum_to_one(self):
        """Test albedo weights above one are accepted (e.g. strong highlights)."""
        from src.whitted.materials.phong import add_phong_material, get_phong_material_python

        mat_id = add_phong_material((1.0, 1.0, 1.0), albedo=(0.0, 10.0, 0.8, 0.0))
        assert get_phong_material_python(mat_id)["albedo"][1] == pytest.approx(10.0)

    def test_read_inside_kernel(self):
        """Test get_phong_material returns the stored values in a kernel."""
        from src.whitted.materials.phong import add_phong_material, get_phong_material

        add_phong_material((0.4, 0.4, 0.3), albedo=(0.6, 0.3, 0.1, 0.0), specular_exponent=50.0)

        color = ti.field(dtype=ti.math.vec3, shape=())
        albedo = ti.field(dtype=ti.math.vec4, shape=())
        exponent = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            mat = get_phong_material(0)
            color[None] = mat.diffuse_color
            albedo[None] = mat.albedo
            exponent[None] = mat.specular_exponent

        test_kernel()
        assert abs(color[None][2] - 0.3) < 1e-6
        assert abs(albedo[None][0] - 0.6) < 1e-6
        assert abs(albedo[None][3]) < 1e-6
        assert abs(exponent[None] - 50.0) < 1e-4


class TestPhongMaterialValidation:
    """Tests for build-time parameter validation."""

    def test_negative_albedo_weight_rejected(self):
        from src.whitted.materials.phong import add_phong_material

        with pytest.raises(ValueError, match="kr"):
            add_phong_material((0.5, 0.5, 0.5), albedo=(0.5, 0.5, -0.1, 0.0))

    def test_wrong_albedo_length_rejected(self):
        from src.whitted.materials.phong import add_phong_material

        with pytest.raises(ValueError, match="albedo"):
            add_phong_material((0.5, 0.5, 0.5), albedo=(0.5, 0.5, 0.0))

    def test_negative_color_rejected(self):
        from src.whitted.materials.phong import add_phong_material

        with pytest.raises(ValueError, match="diffuse_color"):
            add_phong_material((0.5, -0.5, 0.5))

    def test_negative_specular_exponent_rejected(self):
        from src.whitted.materials.phong import add_phong_material

        with pytest.raises(ValueError, match="specular_exponent"):
            add_phong_material((0.5, 0.5, 0.5), specular_exponent=-1.0)

    @pytest.mark.parametrize("index", [0.0, -1.5])
    def test_non_positive_refractive_index_rejected(self, index):
        from src.whitted.materials.phong import add_phong_material

        with pytest.raises(ValueError, match="refractive_index"):
            add_phong_material((0.5, 0.5, 0.5), refractive_index=index)

    def test_invalid_id_lookup_raises(self):
        from src.whitted.materials.phong import get_phong_material_python

        with pytest.raises(ValueError, match="Invalid material_id"):
            get_phong_material_python(0)

    def test_capacity_exceeded(self):
        from src.whitted.materials.phong import MAX_MATERIALS, add_phong_material

        for _ in range(MAX_MATERIALS):
            add_phong_material((0.5, 0.5, 0.5))
        with pytest.raises(RuntimeError, match="Maximum number of materials"):
            add_phong_material((0.5, 0.5, 0.5))
