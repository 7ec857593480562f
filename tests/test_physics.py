"""
Unit Tests for the Physics Core
===============================
Units, central body, atmosphere, drag and both integrators.
Run: python -m pytest tests/ -v
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from impactsim.units import UnitConverter
from impactsim.atmosphere import exponential_density, density_profile
from impactsim.body import CentralBody, EARTH, IMPACT_MARGIN
from impactsim.drag_model import drag_acceleration
from impactsim.integrator import (
    ArcadeIntegrator, RealisticIntegrator, PhysicsModel, make_integrator,
    fly, PHYSICS_DT,
)
from impactsim.projectile import sphere_mass, cross_section


class TestUnits:
    """Display <-> SI conversion."""

    def test_round_trip(self):
        conv = UnitConverter(1.0e6)
        rng = np.random.default_rng(0)
        for p in rng.uniform(-50.0, 50.0, size=(20, 3)):
            assert np.allclose(conv.to_display(conv.to_si(p)), p, rtol=1e-12)

    def test_scale_applied(self):
        conv = UnitConverter(1.0e6)
        assert np.allclose(conv.to_si([1.0, 0.0, -2.0]), [1e6, 0.0, -2e6])
        assert conv.to_display(6371000.0) == pytest.approx(6.371)

    def test_does_not_alias_input(self):
        conv = UnitConverter(2.0)
        p = np.array([1.0, 2.0, 3.0])
        out = conv.to_display(conv.to_si(p))
        out[0] = 99.0
        assert p[0] == 1.0

    def test_rejects_bad_scale(self):
        for bad in [0.0, -1.0, float('nan'), float('inf')]:
            with pytest.raises(ValueError):
                UnitConverter(bad)


class TestCentralBody:
    """Constants, gravity and atmosphere of the central body."""

    def test_earth_display_radius(self):
        assert EARTH.display_radius == pytest.approx(6.371)

    def test_display_radius_invariant(self):
        CentralBody(radius_m=6371000.0, scale=1.0e6, display_radius=6.371)
        with pytest.raises(ValueError):
            CentralBody(radius_m=6371000.0, scale=1.0e6, display_radius=7.0)

    def test_rejects_non_positive_mass(self):
        with pytest.raises(ValueError):
            CentralBody(mass=0.0)

    def test_surface_gravity(self):
        g = EARTH.gravitational_acceleration([EARTH.radius_m, 0.0, 0.0])
        assert g[0] == pytest.approx(-9.82, abs=0.01)
        assert g[1] == 0.0 and g[2] == 0.0

    def test_gravity_attractive(self):
        p = np.array([3.0e6, -4.0e6, 5.0e6])
        g = EARTH.gravitational_acceleration(p)
        assert np.dot(g, p) < 0

    def test_gravity_finite_at_center(self):
        g = EARTH.gravitational_acceleration(np.zeros(3))
        assert np.all(np.isfinite(g))

    def test_density_sea_level(self):
        assert EARTH.atmospheric_density(0.0) == pytest.approx(1.225)

    def test_density_one_scale_height(self):
        rho = EARTH.atmospheric_density(EARTH.scale_height)
        assert rho == pytest.approx(1.225 / np.e)

    def test_density_clamped_inside_body(self):
        assert EARTH.atmospheric_density(-5000.0) == pytest.approx(1.225)
        assert exponential_density(-1e9) >= 0

    def test_density_decreases_with_altitude(self):
        profile = density_profile(np.array([0.0, 5000.0, 20000.0, 80000.0]))
        assert np.all(np.diff(profile['density']) < 0)

    def test_penetrates(self):
        assert EARTH.penetrates([0.0, 0.0, EARTH.display_radius + IMPACT_MARGIN / 2])
        assert not EARTH.penetrates([0.0, 0.0, EARTH.display_radius + 2 * IMPACT_MARGIN])


class TestDragModel:
    """Quadratic drag."""

    def test_drag_opposes_motion(self):
        v = np.array([100.0, 50.0, 0.0])
        a = drag_acceleration(v, rho=1.225, cd=1.0, area=0.2, mass=200.0)
        assert np.dot(a, v) < 0

    def test_drag_magnitude(self):
        v = np.array([0.0, 0.0, -1000.0])
        a = drag_acceleration(v, rho=1.0, cd=1.0, area=2.0, mass=10.0)
        assert np.linalg.norm(a) == pytest.approx(0.5 * 1.0 * 1000.0**2 * 2.0 / 10.0)

    def test_drag_zero_at_rest(self):
        a = drag_acceleration(np.zeros(3), rho=1.225, cd=1.0, area=0.2, mass=200.0)
        assert np.allclose(a, 0.0)
        assert np.all(np.isfinite(a))

    def test_no_drag_in_vacuum(self):
        a = drag_acceleration(np.array([1.0, 2.0, 3.0]), rho=0.0, cd=1.0, area=0.2, mass=2.0)
        assert np.allclose(a, 0.0)


class TestArcadeIntegrator:
    """Explicit inverse-square step in display units."""

    def test_monotonic_infall_from_rest(self):
        integ = ArcadeIntegrator()
        pos, vel = np.array([0.0, 0.0, 15.0]), np.zeros(3)
        distances = [np.linalg.norm(pos)]
        while not EARTH.penetrates(pos):
            pos, vel = integ.step(pos, vel, 1.0, 1.0, 1.0)
            distances.append(np.linalg.norm(pos))
            assert len(distances) < 5000
        assert np.all(np.diff(distances) < 0)

    def test_ignores_mass_and_area(self):
        integ = ArcadeIntegrator()
        p, v = np.array([3.0, 4.0, 12.0]), np.array([0.01, 0.0, -0.02])
        a = integ.step(p, v, 1.0, 1.0, 1.0)
        b = integ.step(p, v, 5000.0, 42.0, 1.0)
        assert np.array_equal(a[0], b[0]) and np.array_equal(a[1], b[1])

    def test_step_formula(self):
        integ = ArcadeIntegrator(strength=0.02)
        p, v = np.array([0.0, 0.0, 10.0]), np.zeros(3)
        new_p, new_v = integ.step(p, v, 1.0, 1.0, 2.0)
        assert new_v[2] == pytest.approx(-0.02 / 100.0 * 2.0)
        assert new_p[2] == pytest.approx(10.0 + new_v[2] * 2.0)

    def test_does_not_mutate_inputs(self):
        p, v = np.array([0.0, 0.0, 10.0]), np.array([0.0, 0.0, -0.1])
        ArcadeIntegrator().step(p, v, 1.0, 1.0, 1.0)
        assert np.array_equal(p, [0.0, 0.0, 10.0])
        assert np.array_equal(v, [0.0, 0.0, -0.1])

    def test_guarded_at_center(self):
        p, v = ArcadeIntegrator().step(np.zeros(3), np.zeros(3), 1.0, 1.0, 1.0)
        assert np.all(np.isfinite(p)) and np.all(np.isfinite(v))


class TestRealisticIntegrator:
    """RK4 over gravity + drag in SI units."""

    def test_energy_conserved_without_drag(self):
        vacuum = CentralBody(sea_level_density=0.0)
        integ = RealisticIntegrator(vacuum)
        r0 = 1.1 * vacuum.radius_m
        pos = np.array([r0, 0.0, 0.0])
        vel = np.array([0.0, 1.05 * np.sqrt(vacuum.mu / r0), 0.0])

        def energy(p, v):
            return 0.5 * np.dot(v, v) + vacuum.potential_energy(p)

        e0 = energy(pos, vel)
        for _ in range(1000):
            pos, vel = integ.step(pos, vel, 100.0, 1.0, 2.0)
        assert abs((energy(pos, vel) - e0) / e0) < 1e-6

    def test_drag_removes_energy(self):
        """Same tick in air and in vacuum: air ends slower."""
        air = RealisticIntegrator(EARTH)
        vacuum = RealisticIntegrator(CentralBody(sea_level_density=0.0))
        pos = np.array([EARTH.display_radius + 0.005, 0.0, 0.0])     # 5 km up
        vel = np.array([0.0, 2000.0, 0.0])
        m, a = sphere_mass(1.0), cross_section(1.0)
        _, v_air = air.advance(pos, vel, m, a, 5.0)
        _, v_vac = vacuum.advance(pos, vel, m, a, 5.0)
        assert np.linalg.norm(v_air) < np.linalg.norm(v_vac) - 10.0

    def test_heavier_projectile_less_drag(self):
        integ = RealisticIntegrator(EARTH)
        pos = np.array([EARTH.display_radius + 0.001, 0.0, 0.0])     # 1 km up
        vel = np.array([0.0, 3000.0, 0.0])
        _, light = integ.advance(pos, vel, sphere_mass(0.5), cross_section(0.5), 5.0)
        _, heavy = integ.advance(pos, vel, sphere_mass(5.0), cross_section(5.0), 5.0)
        assert np.all(np.isfinite(light)) and np.all(np.isfinite(heavy))
        assert np.linalg.norm(light) < 3000.0
        assert np.linalg.norm(heavy) > np.linalg.norm(light)

    def test_free_fall_from_rest(self):
        """Short drop near the surface: Δv ≈ g Δt."""
        integ = RealisticIntegrator(CentralBody(sea_level_density=0.0))
        pos = np.array([0.0, 0.0, EARTH.radius_m])
        _, vel = integ.step(pos, np.zeros(3), 1.0, 1.0, 0.1)
        assert vel[2] == pytest.approx(-0.982, abs=0.002)

    def test_substeps_keep_dt_small(self):
        integ = RealisticIntegrator(EARTH)
        assert integ.substeps(1.0) == (1, pytest.approx(PHYSICS_DT))
        n, h = integ.substeps(2.5)
        assert n == 3 and h == pytest.approx(PHYSICS_DT * 2.5 / 3)
        assert h <= PHYSICS_DT
        n, h = integ.substeps(0.5)
        assert n == 1 and h == pytest.approx(PHYSICS_DT / 2)
        n, h = integ.substeps(200.0)
        assert n == 200 and h == pytest.approx(PHYSICS_DT)

    @pytest.mark.parametrize("speed", [0.25, 1.0, 3.7, 64.0, 65.0, 200.0, 1000.0])
    def test_substep_never_exceeds_physics_dt(self, speed):
        n, h = RealisticIntegrator(EARTH).substeps(speed)
        assert h <= PHYSICS_DT * (1 + 1e-12)
        assert n * h == pytest.approx(PHYSICS_DT * speed)

    def test_advance_round_trips_units(self):
        """A tick in vacuum from rest moves inward by about ½ g t²."""
        body = CentralBody(sea_level_density=0.0)
        integ = RealisticIntegrator(body)
        start = np.array([0.0, 0.0, body.display_radius + 1.0])
        pos, vel = integ.advance(start, np.zeros(3), 1.0, 1.0, 1.0)
        assert pos[2] < start[2]
        assert vel[2] < 0


class TestFlights:
    """Bounded flights shared by prediction and analysis."""

    def test_make_integrator(self):
        assert isinstance(make_integrator(PhysicsModel.ARCADE, EARTH), ArcadeIntegrator)
        assert isinstance(make_integrator(PhysicsModel.REALISTIC, EARTH), RealisticIntegrator)

    def test_arcade_flight_hits(self):
        result = fly(ArcadeIntegrator(), EARTH, [0.0, 0.0, 15.0], [0.0, 0.0, -0.05],
                     1.0, 1.0, 1.0, record=True)
        assert result.reason == 'impact'
        assert len(result.positions) == result.steps + 1
        assert np.all(np.diff(result.distances) < 0)

    def test_flight_escapes(self):
        result = fly(ArcadeIntegrator(), EARTH, [0.0, 0.0, 15.0], [0.0, 0.0, 10.0],
                     1.0, 1.0, 1.0)
        assert result.reason == 'escaped'
        assert not result.hit

    def test_flight_budget(self):
        result = fly(ArcadeIntegrator(), EARTH, [0.0, 0.0, 15.0], [0.0, 0.0, -0.05],
                     1.0, 1.0, 1.0, max_steps=5)
        assert result.reason == 'budget'
        assert result.steps == 5


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
