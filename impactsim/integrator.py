"""
Numerical Integration Engine
=============================
Implements the two interchangeable step functions that move a projectile:

1. **Arcade** — a cheap inverse-square pull applied directly in display
   units, one explicit update per tick, no drag. The strength ``k`` is a
   hand-tuned game-feel constant, not G*M.
2. **Realistic** — classical Runge-Kutta 4th order in SI units over

       dx/dt = v
       dv/dt = g(x) + a_drag(x, v)

   with gravity from the central body and quadratic drag from the
   exponential atmosphere.

Both expose ``step(position, velocity, mass_kg, cross_section_m2, dt)`` and
``advance(...)``, the per-tick schedule shared by the live simulation and the
ballistic predictor. ``fly`` runs a bounded, disposable flight and returns a
TrajectoryResult.
"""

import enum
import math
import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple

from .body import CentralBody
from .drag_model import drag_acceleration, DRAG_COEFFICIENT


# ── Time-stepping constants ───────────────────────────────────────────────
PHYSICS_DT = 0.02             # s of simulated time per tick at speed 1
ARCADE_STRENGTH = 0.02        # display units³ / tick²
MIN_RADIUS_DISPLAY = 1e-6     # display units

MAX_STEPS = 2000              # ticks, bounded flights
ESCAPE_DISTANCE = 1.0e4       # display units


class PhysicsModel(enum.Enum):
    """Which integrator (and which velocity representation) is active."""
    ARCADE = 'arcade'
    REALISTIC = 'realistic'


class ArcadeIntegrator:
    """
    Explicit inverse-square attraction in display units.

        v += normalize(-x) * k / |x|² * dt
        x += v * dt

    ``dt`` is the speed multiplier (display velocity is per tick). Mass and
    cross-section are accepted for a uniform signature and ignored.
    """
    model = PhysicsModel.ARCADE

    def __init__(self, strength: float = ARCADE_STRENGTH):
        self.strength = strength

    def acceleration(self, position: np.ndarray) -> np.ndarray:
        r = max(np.linalg.norm(position), MIN_RADIUS_DISPLAY)
        return -position / r * (self.strength / r**2)

    def step(self, position, velocity, mass_kg, cross_section_m2, dt):
        position = np.asarray(position, dtype=float)
        velocity = np.asarray(velocity, dtype=float)

        velocity = velocity + self.acceleration(position) * dt
        position = position + velocity * dt
        return position, velocity

    def advance(self, position_display, velocity_display, mass_kg,
                cross_section_m2, speed_multiplier):
        """One tick: a single step scaled by the speed multiplier."""
        return self.step(position_display, velocity_display, mass_kg,
                         cross_section_m2, speed_multiplier)


class RealisticIntegrator:
    """
    RK4 over gravity + quadratic drag, in SI units.
    """
    model = PhysicsModel.REALISTIC

    def __init__(self, body: CentralBody, drag_coefficient: float = DRAG_COEFFICIENT,
                 physics_dt: float = PHYSICS_DT):
        self.body = body
        self.drag_coefficient = drag_coefficient
        self.physics_dt = physics_dt

    def acceleration(self, position, velocity, mass_kg, cross_section_m2):
        """Total acceleration (m/s²): gravity + drag."""
        rho = self.body.atmospheric_density(self.body.altitude(position))
        a_gravity = self.body.gravitational_acceleration(position)
        a_drag = drag_acceleration(velocity, rho, self.drag_coefficient,
                                   cross_section_m2, mass_kg)
        return a_gravity + a_drag

    def step(self, position, velocity, mass_kg, cross_section_m2, dt):
        pos = np.asarray(position, dtype=float)
        vel = np.asarray(velocity, dtype=float)

        def accel(p, v):
            return self.acceleration(p, v, mass_kg, cross_section_m2)

        # RK4 stages
        k1v = accel(pos, vel)
        k1x = vel

        k2v = accel(pos + 0.5 * dt * k1x, vel + 0.5 * dt * k1v)
        k2x = vel + 0.5 * dt * k1v

        k3v = accel(pos + 0.5 * dt * k2x, vel + 0.5 * dt * k2v)
        k3x = vel + 0.5 * dt * k2v

        k4v = accel(pos + dt * k3x, vel + dt * k3v)
        k4x = vel + dt * k3v

        pos = pos + (dt / 6.0) * (k1x + 2*k2x + 2*k3x + k4x)
        vel = vel + (dt / 6.0) * (k1v + 2*k2v + 2*k3v + k4v)
        return pos, vel

    def substeps(self, speed_multiplier: float) -> Tuple[int, float]:
        """
        Split one tick (physics_dt * speed_multiplier seconds) into equal
        sub-steps no longer than physics_dt. Faster multipliers cost more
        sub-steps, never a longer step.
        """
        total = self.physics_dt * speed_multiplier
        n = max(int(math.ceil(speed_multiplier)), 1)
        return n, total / n

    def advance(self, position_display, velocity_si, mass_kg,
                cross_section_m2, speed_multiplier):
        """One tick: display position in, display position out; SI velocity."""
        converter = self.body.converter
        pos = converter.to_si(position_display)
        vel = np.array(velocity_si, dtype=float)

        n, h = self.substeps(speed_multiplier)
        for _ in range(n):
            pos, vel = self.step(pos, vel, mass_kg, cross_section_m2, h)
        return converter.to_display(pos), vel


def make_integrator(model: PhysicsModel, body: CentralBody,
                    arcade_strength: float = ARCADE_STRENGTH):
    """Build the integrator for ``model``."""
    if model is PhysicsModel.REALISTIC:
        return RealisticIntegrator(body)
    return ArcadeIntegrator(arcade_strength)


# ══════════════════════════════════════════════════════════════════════════
#  Bounded flights
# ══════════════════════════════════════════════════════════════════════════

@dataclass
class TrajectoryResult:
    """Outcome of one bounded flight."""
    model: PhysicsModel
    reason: str                        # 'impact', 'escaped' or 'budget'
    steps: int                         # ticks advanced
    impact_point: Optional[np.ndarray]  # display units

    # Arrays — N recorded samples (only start and end when not recording)
    positions: np.ndarray              # (N, 3) display units
    speeds: np.ndarray                 # (N,) m/s
    final_velocity: np.ndarray         # native units of the model

    @property
    def hit(self) -> bool:
        return self.impact_point is not None

    @property
    def distances(self) -> np.ndarray:
        """Distance to the body center at each sample (display units)."""
        return np.linalg.norm(self.positions, axis=1)

    @property
    def impact_speed(self) -> float:
        """Speed at the last sample (m/s)."""
        return float(self.speeds[-1])

    def summary(self) -> str:
        lines = [
            f"  Model        : {self.model.value}",
            f"  Outcome      : {self.reason} after {self.steps} ticks",
            f"  Final speed  : {self.impact_speed:.3e} m/s",
        ]
        if self.hit:
            p = self.impact_point
            lines.append(f"  Impact point : ({p[0]:+.3f}, {p[1]:+.3f}, {p[2]:+.3f})")
        return '\n'.join(lines)


def _speed_si(integrator, velocity, body: CentralBody) -> float:
    if integrator.model is PhysicsModel.REALISTIC:
        return float(np.linalg.norm(velocity))
    return float(np.linalg.norm(body.converter.to_si(velocity)))


def fly(integrator, body: CentralBody, position_display, velocity,
        mass_kg: float, cross_section_m2: float, speed_multiplier: float,
        max_steps: int = MAX_STEPS, escape_distance: float = ESCAPE_DISTANCE,
        record: bool = False) -> TrajectoryResult:
    """
    Advance a private copy of a state tick by tick until it penetrates the
    body, escapes past ``escape_distance`` or spends ``max_steps`` ticks.

    ``velocity`` is in the integrator's native units (display units/tick for
    Arcade, m/s for Realistic).
    """
    pos = np.array(position_display, dtype=float)
    vel = np.array(velocity, dtype=float)

    positions = [pos.copy()]
    speeds = [_speed_si(integrator, vel, body)]
    reason = 'budget'
    impact_point = None
    steps = 0

    for steps in range(1, max_steps + 1):
        pos, vel = integrator.advance(pos, vel, mass_kg, cross_section_m2,
                                      speed_multiplier)
        if record:
            positions.append(pos.copy())
            speeds.append(_speed_si(integrator, vel, body))

        if body.penetrates(pos):
            reason = 'impact'
            impact_point = pos.copy()
            break
        if np.linalg.norm(pos) > escape_distance or not np.all(np.isfinite(pos)):
            reason = 'escaped'
            break

    if not record:
        positions.append(pos.copy())
        speeds.append(_speed_si(integrator, vel, body))

    return TrajectoryResult(
        model=integrator.model,
        reason=reason,
        steps=steps,
        impact_point=impact_point,
        positions=np.array(positions),
        speeds=np.array(speeds),
        final_velocity=vel,
    )
