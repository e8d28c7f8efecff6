"""Unit tests for sphere intersection.

Tests cover:
- Ray hitting sphere from outside
- Ray missing sphere
- Ray starting inside sphere (far root, outward normal)
- Sphere entirely behind the ray
- t_max bound
"""

import pytest
import taichi as ti


class TestSphereIntersection:
    """Tests for ray-sphere intersection."""

    def test_hit_sphere_direct_hit(self):
        """Test ray hitting sphere head-on from outside."""
        from src.whitted.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        point = ti.field(dtype=ti.math.vec3, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            # Camera-style ray down -z toward a sphere at z=-5
            sphere = Sphere(center=vec3(0.0, 0.0, -5.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 1e10)
            hit[None] = record.hit
            t_val[None] = record.t
            point[None] = record.point
            normal[None] = record.normal

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 4.0) < 1e-5
        p = point[None]
        assert abs(p[0]) < 1e-5
        assert abs(p[1]) < 1e-5
        assert abs(p[2] + 4.0) < 1e-5
        # Outward normal faces the camera
        n = normal[None]
        assert abs(n[0]) < 1e-5
        assert abs(n[1]) < 1e-5
        assert abs(n[2] - 1.0) < 1e-5

    def test_hit_sphere_miss(self):
        """Test ray passing beside the sphere."""
        from src.whitted.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, -5.0), radius=1.0)
            record = hit_sphere(vec3(2.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 1e10)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_sphere_from_inside_uses_far_root(self):
        """Test a ray starting inside reports the exit point with outward normal."""
        from src.whitted.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())
        normal = ti.field(dtype=ti.math.vec3, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=2.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(1.0, 0.0, 0.0), sphere, 1e10)
            hit[None] = record.hit
            t_val[None] = record.t
            normal[None] = record.normal

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 2.0) < 1e-5
        n = normal[None]
        # Normal points out of the sphere, i.e. along the ray
        assert abs(n[0] - 1.0) < 1e-5

    def test_hit_sphere_behind_ray(self):
        """Test a sphere entirely behind the origin is not hit."""
        from src.whitted.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, 5.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 1e10)
            hit[None] = record.hit

        test_kernel()
        assert hit[None] == 0

    def test_hit_sphere_tangent(self):
        """Test a ray grazing the sphere counts as a hit."""
        from src.whitted.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, -5.0), radius=1.0)
            record = hit_sphere(vec3(1.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, 1e10)
            hit[None] = record.hit
            t_val[None] = record.t

        test_kernel()
        assert hit[None] == 1
        assert abs(t_val[None] - 5.0) < 1e-4

    @pytest.mark.parametrize("t_max,expected_hit", [(3.0, 0), (4.0, 0), (4.5, 1)])
    def test_hit_sphere_respects_t_max(self, t_max, expected_hit):
        """Test hits at or beyond t_max are rejected."""
        from src.whitted.geometry.sphere import Sphere, hit_sphere, vec3

        hit = ti.field(dtype=ti.i32, shape=())

        @ti.kernel
        def test_kernel(limit: ti.f32):
            sphere = Sphere(center=vec3(0.0, 0.0, -5.0), radius=1.0)
            record = hit_sphere(vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0), sphere, limit)
            hit[None] = record.hit

        test_kernel(t_max)
        assert hit[None] == expected_hit

    def test_nearest_root(self):
        """Test nearest_root returns the near distance from outside."""
        from src.whitted.geometry.sphere import Sphere, nearest_root, vec3

        found = ti.field(dtype=ti.i32, shape=())
        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel():
            sphere = Sphere(center=vec3(0.0, 0.0, -16.0), radius=2.0)
            f, t = nearest_root(sphere, vec3(0.0, 0.0, 0.0), vec3(0.0, 0.0, -1.0))
            found[None] = f
            t_val[None] = t

        test_kernel()
        assert found[None] == 1
        assert abs(t_val[None] - 14.0) < 1e-4

    @pytest.mark.parametrize("radius", [0.5, 1.0, 2.5])
    def test_distance_to_origin_sphere(self, radius):
        """Test a ray from (0, 0, 5) toward -z hits a sphere at the origin at t = 5 - r."""
        from src.whitted.geometry.sphere import Sphere, hit_sphere, vec3

        t_val = ti.field(dtype=ti.f32, shape=())

        @ti.kernel
        def test_kernel(r: ti.f32):
            sphere = Sphere(center=vec3(0.0, 0.0, 0.0), radius=r)
            record = hit_sphere(vec3(0.0, 0.0, 5.0), vec3(0.0, 0.0, -1.0), sphere, 1e10)
            t_val[None] = record.t

        test_kernel(radius)
        assert abs(t_val[None] - (5.0 - radius)) < 1e-5
