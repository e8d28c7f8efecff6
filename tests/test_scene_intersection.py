"""Unit tests for scene-level intersection.

Tests cover:
- SceneHitRecord with material_id
- Closest hit selection across spheres and planes
- Tie-breaking between coincident primitives
- Scene clearing, primitive counts and build-time validation
"""

import pytest
import taichi as ti


def _intersect(origin, direction):
    """Run scene_intersect for one ray and return the record as a dict."""
    from src.whitted.scene.intersection import scene_intersect, vec3

    hit = ti.field(dtype=ti.i32, shape=())
    t_val = ti.field(dtype=ti.f32, shape=())
    point = ti.field(dtype=ti.math.vec3, shape=())
    normal = ti.field(dtype=ti.math.vec3, shape=())
    material_id = ti.field(dtype=ti.i32, shape=())

    @ti.kernel
    def query(o: vec3, d: vec3):
        # Single-iteration loop keeps the primitive scan serial
        for _ in range(1):
            rec = scene_intersect(o, d)
            hit[None] = rec.hit
            t_val[None] = rec.t
            point[None] = rec.point
            normal[None] = rec.normal
            material_id[None] = rec.material_id

    query(vec3(*origin), vec3(*direction))
    return {
        "hit": hit[None],
        "t": t_val[None],
        "point": tuple(float(v) for v in point[None].to_numpy()),
        "normal": tuple(float(v) for v in normal[None].to_numpy()),
        "material_id": material_id[None],
    }


class TestSceneHitRecordBasics:
    """Tests for SceneHitRecord dataclass."""

    def test_scene_hit_record_has_material_id(self):
        """Test that SceneHitRecord includes material_id field."""
        from src.whitted.scene.intersection import SceneHitRecord, vec3

        result_material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = SceneHitRecord(
                hit=1,
                t=5.0,
                point=vec3(0.0, 0.0, 0.0),
                normal=vec3(0.0, 0.0, 1.0),
                material_id=42,
            )
            result_material_id[None] = rec.material_id

        test_kernel()
        assert result_material_id[None] == 42

    def test_miss_record_has_negative_material_id(self):
        """Test that miss records have hit = 0 and material_id = -1."""
        from src.whitted.scene.intersection import _make_miss_record

        result_hit = ti.field(dtype=ti.i32, shape=())
        result_material_id = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            rec = _make_miss_record()
            result_hit[None] = rec.hit
            result_material_id[None] = rec.material_id

        test_kernel()
        assert result_hit[None] == 0
        assert result_material_id[None] == -1


class TestSceneIntersect:
    """Tests for the closest-hit query."""

    def test_empty_scene_misses(self):
        """Test every ray misses an empty scene."""
        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))
        assert rec["hit"] == 0
        assert rec["material_id"] == -1

    def test_single_sphere(self):
        """Test a single sphere hit reports its material."""
        from src.whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, material_id=3)
        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(4.0, abs=1e-5)
        assert rec["material_id"] == 3
        assert rec["normal"][2] == pytest.approx(1.0, abs=1e-5)

    def test_closest_sphere_wins_regardless_of_order(self):
        """Test the nearer sphere is returned even when added last."""
        from src.whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -20.0), 1.0, material_id=1)
        add_sphere(vec3(0.0, 0.0, -10.0), 1.0, material_id=2)
        add_sphere(vec3(0.0, 0.0, -30.0), 1.0, material_id=3)
        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert rec["hit"] == 1
        assert rec["material_id"] == 2
        assert rec["t"] == pytest.approx(9.0, abs=1e-4)

    def test_coincident_spheres_first_added_wins(self):
        """Test an exact distance tie keeps the first primitive tested."""
        from src.whitted.scene.intersection import add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, material_id=7)
        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, material_id=8)
        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert rec["material_id"] == 7

    def test_plane_behind_sphere_is_occluded(self):
        """Test a plane farther than a sphere does not win."""
        from src.whitted.scene.intersection import add_plane, add_sphere, vec3

        add_plane(vec3(0.0, 0.0, 1.0), -10.0, material_id=1)
        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, material_id=2)
        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert rec["material_id"] == 2

    def test_plane_in_front_of_sphere_wins(self):
        """Test a nearer plane replaces a sphere hit."""
        from src.whitted.scene.intersection import add_plane, add_sphere, vec3

        add_sphere(vec3(0.0, 0.0, -5.0), 1.0, material_id=2)
        add_plane(vec3(0.0, 0.0, 1.0), -2.0, material_id=1)
        rec = _intersect((0.0, 0.0, 0.0), (0.0, 0.0, -1.0))

        assert rec["material_id"] == 1
        assert rec["t"] == pytest.approx(2.0, abs=1e-5)

    def test_plane_normal_is_normalized_on_insertion(self):
        """Test add_plane stores a unit normal."""
        from src.whitted.scene.intersection import add_plane, vec3

        add_plane(vec3(0.0, 3.0, 0.0), -4.0, material_id=0)
        rec = _intersect((0.0, 0.0, 0.0), (0.0, -1.0, 0.0))

        assert rec["hit"] == 1
        assert rec["t"] == pytest.approx(4.0, abs=1e-5)
        assert rec["normal"][1] == pytest.approx(1.0, abs=1e-6)


class TestSceneManagement:
    """Tests for primitive storage."""

    def test_counts_and_clear(self):
        """Test primitive counts track insertions and clear resets them."""
        from src.whitted.scene.intersection import (
            add_plane,
            add_sphere,
            clear_scene,
            get_plane_count,
            get_sphere_count,
            vec3,
        )

        assert add_sphere(vec3(0.0, 0.0, -5.0), 1.0) == 0
        assert add_sphere(vec3(0.0, 0.0, -9.0), 1.0) == 1
        assert add_plane(vec3(0.0, 1.0, 0.0), -4.0) == 0
        assert get_sphere_count() == 2
        assert get_plane_count() == 1

        clear_scene()
        assert get_sphere_count() == 0
        assert get_plane_count() == 0

    @pytest.mark.parametrize("radius", [0.0, -1.0])
    def test_non_positive_radius_rejected(self, radius):
        """Test spheres with radius <= 0 are rejected at build time."""
        from src.whitted.scene.intersection import add_sphere, get_sphere_count, vec3

        with pytest.raises(ValueError, match="radius"):
            add_sphere(vec3(0.0, 0.0, -5.0), radius)
        assert get_sphere_count() == 0

    def test_zero_plane_normal_rejected(self):
        """Test a zero-length plane normal is rejected."""
        from src.whitted.scene.intersection import add_plane, vec3

        with pytest.raises(ValueError, match="normal"):
            add_plane(vec3(0.0, 0.0, 0.0), 1.0)

    @pytest.mark.parametrize("slot", ["negative", "past_end"])
    def test_material_id_outside_table_rejected(self, slot):
        """Test primitives cannot reference a slot outside the material table."""
        from src.whitted.materials.phong import MAX_MATERIALS
        from src.whitted.scene.intersection import (
            add_plane,
            add_sphere,
            get_plane_count,
            get_sphere_count,
            vec3,
        )

        bad_id = -1 if slot == "negative" else MAX_MATERIALS
        with pytest.raises(ValueError, match="material_id"):
            add_sphere(vec3(0.0, 0.0, -5.0), 1.0, bad_id)
        with pytest.raises(ValueError, match="material_id"):
            add_plane(vec3(0.0, 1.0, 0.0), -4.0, bad_id)
        assert get_sphere_count() == 0
        assert get_plane_count() == 0

    def test_last_material_slot_accepted(self):
        from src.whitted.materials.phong import MAX_MATERIALS
        from src.whitted.scene.intersection import add_sphere, vec3

        assert add_sphere(vec3(0.0, 0.0, -5.0), 1.0, MAX_MATERIALS - 1) == 0
