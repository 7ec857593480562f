"""
Ballistic Predictor
===================
Previews where a not-yet-launched projectile would strike, for aiming
feedback. Each call runs a throwaway flight on private copies of the launch
state with the same per-tick schedule and integrator as the live simulation,
so the answer matches what a projectile fired now would do.

Cost is bounded by ``max_steps`` ticks, independent of how many projectiles
are live, so it is safe to call every tick. The predictor holds no state
between calls: identical inputs give identical results.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from .body import CentralBody, EARTH
from .integrator import (
    PhysicsModel, make_integrator, fly, TrajectoryResult,
    ARCADE_STRENGTH, MAX_STEPS, ESCAPE_DISTANCE,
)
from .projectile import (
    sphere_mass, cross_section, validate_launch, InvalidSpawnError, DEFAULT_DIAMETER,
)


@dataclass(frozen=True)
class PredictionResult:
    """Predicted impact point (display units), or None for no impact."""
    point: Optional[tuple]
    steps: int
    reason: str              # 'impact', 'escaped', 'budget' or 'invalid'

    @property
    def hit(self) -> bool:
        return self.point is not None


NO_IMPACT = PredictionResult(point=None, steps=0, reason='invalid')


class BallisticPredictor:
    """
    Bounded forward integration from a hypothetical launch state.

    Parameters
    ----------
    body : CentralBody
    max_steps : int
        Tick budget per prediction.
    escape_distance : float
        Distance from the center (display units) past which the flight is
        considered escaped.
    """

    def __init__(self, body: CentralBody = EARTH, max_steps: int = MAX_STEPS,
                 escape_distance: float = ESCAPE_DISTANCE):
        self.body = body
        self.max_steps = max_steps
        self.escape_distance = escape_distance

    def _flight(self, origin, direction, launch_speed, model, speed_multiplier,
                arcade_strength, diameter, record) -> TrajectoryResult:
        origin, unit, launch_speed, diameter = validate_launch(
            origin, direction, launch_speed, diameter)

        velocity = unit * launch_speed
        if model is PhysicsModel.REALISTIC:
            velocity = self.body.converter.to_si(velocity)

        integrator = make_integrator(model, self.body, arcade_strength)
        return fly(integrator, self.body, origin, velocity,
                   sphere_mass(diameter), cross_section(diameter),
                   speed_multiplier, max_steps=self.max_steps,
                   escape_distance=self.escape_distance, record=record)

    def predict(self, origin, direction, launch_speed: float,
                model: PhysicsModel = PhysicsModel.ARCADE,
                speed_multiplier: float = 1.0,
                arcade_strength: float = ARCADE_STRENGTH,
                diameter: float = DEFAULT_DIAMETER) -> PredictionResult:
        """
        Would-be impact point for a launch from ``origin`` along
        ``direction`` at ``launch_speed`` display units per tick.
        """
        try:
            result = self._flight(origin, direction, launch_speed, model,
                                  speed_multiplier, arcade_strength, diameter,
                                  record=False)
        except InvalidSpawnError:
            return NO_IMPACT
        point = tuple(float(c) for c in result.impact_point) if result.hit else None
        return PredictionResult(point=point, steps=result.steps, reason=result.reason)

    def predict_path(self, origin, direction, launch_speed: float,
                     model: PhysicsModel = PhysicsModel.ARCADE,
                     speed_multiplier: float = 1.0,
                     arcade_strength: float = ARCADE_STRENGTH,
                     diameter: float = DEFAULT_DIAMETER) -> np.ndarray:
        """Sampled display positions of the predicted flight, shape (N, 3)."""
        try:
            result = self._flight(origin, direction, launch_speed, model,
                                  speed_multiplier, arcade_strength, diameter,
                                  record=True)
        except InvalidSpawnError:
            return np.empty((0, 3))
        return result.positions
