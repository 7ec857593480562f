"""
Simulation Tick Loop
====================
Owns the live projectile set and advances it one frame at a time.

The host calls ``tick(dt_seconds, config)`` once per rendered frame (or not
at all while paused). ``config`` carries the physics-model selection and the
global speed multiplier; it is read once at the start of the tick and held
for every projectile in it.

Per projectile, each tick:
  1. cosmetic tumble
  2. integrate with the active model, re-derive the other velocity
  3. count down the time-to-live
  4. surface penetration  -> resolve impact, remove
  5. otherwise TTL expired -> fade, remove at zero opacity
"""

import logging
import numpy as np
from dataclasses import dataclass, field, replace
from typing import List, Optional

from .body import CentralBody, EARTH
from .catalog import CatalogEntry
from .impact import ImpactEvent, resolve_impact
from .integrator import PhysicsModel, make_integrator, ARCADE_STRENGTH
from .predictor import BallisticPredictor, PredictionResult
from .projectile import (
    Projectile, LifecycleState, create_projectile,
    DEFAULT_DIAMETER, DEFAULT_TTL, FADE_RATE,
)

logger = logging.getLogger(__name__)


TUMBLE_SPEED = 0.6     # rad/s per axis, upper bound for random spin


@dataclass(frozen=True)
class SimulationConfig:
    """Model and speed controls, threaded into each tick."""
    model: PhysicsModel = PhysicsModel.ARCADE
    speed_multiplier: float = 1.0
    arcade_strength: float = ARCADE_STRENGTH

    def __post_init__(self):
        if not np.isfinite(self.speed_multiplier) or self.speed_multiplier <= 0:
            raise ValueError(
                f"speed_multiplier must be positive and finite, got {self.speed_multiplier!r}"
            )

    def with_model(self, model: PhysicsModel) -> 'SimulationConfig':
        return replace(self, model=model)

    def with_speed(self, speed_multiplier: float) -> 'SimulationConfig':
        return replace(self, speed_multiplier=speed_multiplier)


@dataclass(frozen=True)
class ProjectileFrame:
    """What the renderer needs for one live projectile this tick."""
    projectile_id: int
    position: np.ndarray          # display units
    rotation_delta: np.ndarray    # rotation vector applied this tick (rad)
    opacity: float
    state: LifecycleState


@dataclass
class TickResult:
    frames: List[ProjectileFrame] = field(default_factory=list)
    impacts: List[ImpactEvent] = field(default_factory=list)
    removed: List[int] = field(default_factory=list)


class Simulation:
    """
    The live projectile collection and its per-frame update.

    Parameters
    ----------
    body : CentralBody
    rng : numpy Generator, int seed or None
        Source of the random tumble given to camera-fired projectiles.
    """

    def __init__(self, body: CentralBody = EARTH, rng=None):
        self.body = body
        self.converter = body.converter
        self.rng = np.random.default_rng(rng)
        self.predictor = BallisticPredictor(body)
        self.projectiles: List[Projectile] = []
        self.impact_count = 0
        self.last_impact: Optional[ImpactEvent] = None

    # ── Spawning ──────────────────────────────────────────────────────────
    def spawn(self, origin, direction, speed: float,
              diameter: float = DEFAULT_DIAMETER,
              time_to_live: float = DEFAULT_TTL, tumble: bool = True,
              label: str = "") -> Projectile:
        """
        Launch a projectile from ``origin`` along ``direction`` at ``speed``
        display units per tick. Raises InvalidSpawnError on bad input.
        """
        angular_velocity = None
        if tumble:
            angular_velocity = self.rng.uniform(-1.0, 1.0, 3) * TUMBLE_SPEED
        proj = create_projectile(origin, direction, speed, diameter,
                                 self.converter, time_to_live=time_to_live,
                                 angular_velocity=angular_velocity, label=label)
        self.projectiles.append(proj)
        return proj

    def spawn_from_catalog(self, entry: CatalogEntry, origin, direction,
                           time_to_live: float = DEFAULT_TTL) -> Projectile:
        """Launch a catalog object at its recorded relative velocity."""
        speed = self.converter.to_display(entry.velocity_si)
        return self.spawn(origin, direction, speed, entry.diameter,
                          time_to_live=time_to_live, tumble=False,
                          label=f"{entry.name} ({entry.diameter:.0f} m)")

    # ── Per-frame update ──────────────────────────────────────────────────
    def tick(self, dt_seconds: float, config: SimulationConfig = SimulationConfig()) -> TickResult:
        """Advance every live projectile by one frame."""
        model = config.model
        speed = config.speed_multiplier
        sim_dt = dt_seconds * speed
        integrator = make_integrator(model, self.body, config.arcade_strength)

        result = TickResult()
        for proj in self.projectiles:
            if not proj.active:
                continue

            rotation_delta = proj.tumble(sim_dt)

            velocity = proj.velocity_for(model, self.converter)
            position, velocity = integrator.advance(
                proj.position, velocity, proj.mass, proj.area, speed)
            proj.position = position
            proj.set_velocity(model, velocity, self.converter)

            proj.time_to_live -= sim_dt

            if self.body.penetrates(proj.position):
                event = resolve_impact(proj, proj.position, model, self.converter)
                proj.state = LifecycleState.REMOVED
                self.impact_count += 1
                self.last_impact = event
                result.impacts.append(event)
            else:
                self._fade(proj, sim_dt)

            if proj.state is LifecycleState.REMOVED:
                result.removed.append(proj.id)
            else:
                result.frames.append(ProjectileFrame(
                    projectile_id=proj.id,
                    position=proj.position.copy(),
                    rotation_delta=rotation_delta,
                    opacity=proj.opacity,
                    state=proj.state,
                ))

        self.projectiles = [p for p in self.projectiles if p.active]
        return result

    def _fade(self, proj: Projectile, sim_dt: float):
        if proj.time_to_live <= 0 and proj.state is LifecycleState.FLYING:
            proj.state = LifecycleState.FADING
            logger.debug("Projectile %d expired, fading", proj.id)
        if proj.state is LifecycleState.FADING:
            proj.opacity = max(0.0, proj.opacity - FADE_RATE * sim_dt)
            if proj.opacity <= 0:
                proj.state = LifecycleState.REMOVED

    # ── Aim feedback ──────────────────────────────────────────────────────
    def predict(self, origin, direction, speed: float,
                config: SimulationConfig = SimulationConfig(),
                diameter: float = DEFAULT_DIAMETER) -> PredictionResult:
        """Where a projectile fired now would land; never touches live state."""
        return self.predictor.predict(
            origin, direction, speed, model=config.model,
            speed_multiplier=config.speed_multiplier,
            arcade_strength=config.arcade_strength, diameter=diameter)

    def reset(self):
        self.projectiles = []
        self.impact_count = 0
        self.last_impact = None
