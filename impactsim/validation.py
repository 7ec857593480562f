"""
Validation Against Reference Cases
==================================
Checks simulator output against hand-computed reference values:

  - Reference impact: 0.5 m rock (3000 kg/m³) striking at 1000 m/s
      mass ≈ 196.3 kg, KE ≈ 9.82e7 J, TNT ≈ 2.35e-2 kt
  - Energy conservation: drag-free RK4 orbit, specific mechanical energy
    drift over many steps
  - Arcade infall: launch from (0, 0, 15) display units straight at the
    center at 0.05 display units/tick must strike at ≈ the display radius
"""

import numpy as np
from dataclasses import dataclass, replace
from typing import List

from .body import CentralBody, EARTH, IMPACT_MARGIN
from .impact import resolve_impact
from .integrator import (
    PhysicsModel, RealisticIntegrator, ArcadeIntegrator, fly,
)
from .projectile import create_projectile


# (diameter_m, impact_speed_m_s, mass_kg, energy_J, tnt_kt)
REFERENCE_IMPACT = (0.5, 1000.0, 196.3, 9.82e7, 2.35e-2)

ARCADE_SCENARIO = {
    'origin': (0.0, 0.0, 15.0),
    'direction': (0.0, 0.0, -1.0),
    'speed': 0.05,
    'max_ticks': 2000,
}


@dataclass
class ValidationResult:
    """Result of one validation comparison."""
    name: str
    expected: float
    actual: float
    error_pct: float
    tolerance_pct: float

    @property
    def passed(self) -> bool:
        return abs(self.error_pct) <= self.tolerance_pct


def _compare(name, expected, actual, tolerance_pct) -> ValidationResult:
    error = 100.0 * (actual - expected) / expected if expected else 100.0 * actual
    return ValidationResult(name, expected, actual, error, tolerance_pct)


def check_reference_impact(body: CentralBody = EARTH) -> List[ValidationResult]:
    """Mass, kinetic energy and TNT equivalent for the reference impact."""
    diameter, speed, mass, energy, tnt = REFERENCE_IMPACT
    converter = body.converter
    proj = create_projectile((0.0, 0.0, 10.0), (0.0, 0.0, -1.0),
                             converter.to_display(speed), diameter, converter)
    event = resolve_impact(proj, proj.position, PhysicsModel.REALISTIC, converter)
    return [
        _compare('mass (kg)', mass, proj.mass, 0.1),
        _compare('kinetic energy (J)', energy, event.kinetic_energy_j, 0.1),
        _compare('TNT (kt)', tnt, event.tnt_kilotons, 0.5),
    ]


def check_energy_conservation(body: CentralBody = EARTH, steps: int = 2000,
                              dt: float = 1.0) -> ValidationResult:
    """
    Relative drift of specific energy (v²/2 - μ/r) for a drag-free RK4
    elliptical orbit starting at 1.1 body radii.
    """
    vacuum = replace(body, sea_level_density=0.0, display_radius=None)
    integrator = RealisticIntegrator(vacuum)

    r0 = 1.1 * vacuum.radius_m
    pos = np.array([r0, 0.0, 0.0])
    vel = np.array([0.0, 1.05 * np.sqrt(vacuum.mu / r0), 0.0])

    def energy(p, v):
        return 0.5 * np.dot(v, v) + vacuum.potential_energy(p)

    e0 = energy(pos, vel)
    for _ in range(steps):
        pos, vel = integrator.step(pos, vel, 1.0, 1.0, dt)
    drift = 100.0 * abs((energy(pos, vel) - e0) / e0)
    return ValidationResult('RK4 energy drift (%)', 0.0, drift, drift, 1e-4)


def check_arcade_scenario(body: CentralBody = EARTH) -> ValidationResult:
    """Impact distance from the center for the straight-in Arcade launch."""
    s = ARCADE_SCENARIO
    unit = np.asarray(s['direction'], dtype=float)
    result = fly(ArcadeIntegrator(), body, s['origin'], unit * s['speed'],
                 1.0, 1.0, 1.0, max_steps=s['max_ticks'])
    actual = float(np.linalg.norm(result.impact_point)) if result.hit else np.inf
    tolerance = 100.0 * 1.5 * IMPACT_MARGIN / body.display_radius
    return _compare('Arcade impact radius', body.display_radius, actual, tolerance)


def run_all_validations(verbose: bool = True) -> List[ValidationResult]:
    """Run every reference check; print a table when ``verbose``."""
    results = check_reference_impact()
    results.append(check_energy_conservation())
    results.append(check_arcade_scenario())

    if verbose:
        print(f"\n{'='*72}")
        print(f"  {'Check':<24} {'Expected':>12} {'Actual':>12} {'Err %':>9}  Status")
        print("-" * 72)
        for r in results:
            status = "✓ PASS" if r.passed else "✗ FAIL"
            print(f"  {r.name:<24} {r.expected:>12.4g} {r.actual:>12.4g} "
                  f"{r.error_pct:>+9.3f}  {status}")
        print(f"{'='*72}\n")

    return results


if __name__ == "__main__":
    run_all_validations(verbose=True)
