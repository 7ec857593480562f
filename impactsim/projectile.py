"""
Projectile Definition & Lifecycle State
========================================
Defines the Projectile dataclass owned by the simulation tick loop and the
spawn boundary that builds one from launch parameters.

Lifecycle:
    FLYING  --TTL expired-->  FADING  --opacity <= 0-->  REMOVED
    FLYING / FADING  --surface penetration-->  REMOVED  (emits ImpactEvent)

Velocity is kept in two representations: display units per tick (Arcade)
and m/s (Realistic). ``velocity_model`` names the authoritative one; the
other is re-derived through the unit converter, never integrated on its own.

Coordinate system: display units, origin at the central body's center.
"""

import enum
import itertools
import logging
import numpy as np
from dataclasses import dataclass, field
from typing import Optional

from scipy.spatial.transform import Rotation

from .integrator import PhysicsModel
from .units import UnitConverter

logger = logging.getLogger(__name__)


ROCK_DENSITY = 3000.0          # kg/m³
DEFAULT_DIAMETER = 0.5         # m
DEFAULT_TTL = 8.0              # s
FADE_RATE = 0.5                # opacity per simulated second
TUMBLE_DAMPING = 0.998         # angular velocity kept per tick

_ids = itertools.count(1)


class InvalidSpawnError(ValueError):
    """Launch parameters that cannot produce a projectile."""


class LifecycleState(enum.Enum):
    FLYING = "flying"
    FADING = "fading"
    REMOVED = "removed"


def sphere_mass(diameter: float, density: float = ROCK_DENSITY) -> float:
    """Mass (kg) of a solid sphere of ``diameter`` meters."""
    return density * (4.0 / 3.0) * np.pi * (diameter / 2) ** 3


def cross_section(diameter: float) -> float:
    """Frontal area (m²) of a sphere of ``diameter`` meters."""
    return np.pi * (diameter / 2) ** 2


@dataclass(eq=False)
class Projectile:
    """
    One projectile's kinematic and lifecycle state.
    """
    position: np.ndarray                 # display units
    velocity_display: np.ndarray         # display units / tick
    velocity_si: np.ndarray              # m/s
    diameter: float                      # m
    velocity_model: PhysicsModel = PhysicsModel.ARCADE
    time_to_live: float = DEFAULT_TTL    # s
    opacity: float = 1.0
    state: LifecycleState = LifecycleState.FLYING
    angular_velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))  # rad/s
    orientation: Rotation = field(default_factory=Rotation.identity, repr=False)
    label: str = ""
    id: int = field(default_factory=lambda: next(_ids))

    def __post_init__(self):
        self.mass = sphere_mass(self.diameter)       # kg
        self.area = cross_section(self.diameter)     # m²

    @property
    def active(self) -> bool:
        return self.state in (LifecycleState.FLYING, LifecycleState.FADING)

    def velocity_for(self, model: PhysicsModel,
                     converter: UnitConverter) -> np.ndarray:
        """Velocity in ``model``'s units, derived when it is not authoritative."""
        if model is self.velocity_model:
            source = self.velocity_si if model is PhysicsModel.REALISTIC else self.velocity_display
            return np.array(source, dtype=float)
        if model is PhysicsModel.REALISTIC:
            return converter.to_si(self.velocity_display)
        return converter.to_display(self.velocity_si)

    def set_velocity(self, model: PhysicsModel, velocity: np.ndarray,
                     converter: UnitConverter):
        """Store ``velocity`` as authoritative for ``model`` and re-derive the other."""
        self.velocity_model = model
        if model is PhysicsModel.REALISTIC:
            self.velocity_si = np.array(velocity, dtype=float)
            self.velocity_display = converter.to_display(self.velocity_si)
        else:
            self.velocity_display = np.array(velocity, dtype=float)
            self.velocity_si = converter.to_si(self.velocity_display)

    def tumble(self, dt: float) -> np.ndarray:
        """
        Apply the cosmetic spin for ``dt`` seconds and return the rotation
        vector applied this tick. Has no effect on the trajectory.
        """
        delta = self.angular_velocity * dt
        if np.linalg.norm(delta) > 0:
            self.orientation = Rotation.from_rotvec(delta) * self.orientation
            self.angular_velocity = self.angular_velocity * TUMBLE_DAMPING
        return delta


def _finite_vector(value, name: str) -> np.ndarray:
    try:
        vec = np.array(value, dtype=float).reshape(3)
    except (TypeError, ValueError) as exc:
        raise InvalidSpawnError(f"{name} must be a 3-vector, got {value!r}") from exc
    if not np.all(np.isfinite(vec)):
        raise InvalidSpawnError(f"{name} must be finite, got {vec}")
    return vec


def validate_launch(origin, direction, speed: float, diameter: float):
    """
    Check launch parameters; returns (origin, unit direction, speed, diameter).

    Raises InvalidSpawnError for a non-positive or non-finite diameter, a
    non-finite or negative speed, or a zero/non-finite direction.
    """
    origin = _finite_vector(origin, 'origin')
    direction = _finite_vector(direction, 'direction')

    norm = np.linalg.norm(direction)
    if norm <= 0:
        raise InvalidSpawnError("direction must be non-zero")
    try:
        speed, diameter = float(speed), float(diameter)
    except (TypeError, ValueError) as exc:
        raise InvalidSpawnError("launch speed and diameter must be numbers") from exc
    if not np.isfinite(speed) or speed < 0:
        raise InvalidSpawnError(f"launch speed must be finite and >= 0, got {speed!r}")
    if not np.isfinite(diameter) or diameter <= 0:
        raise InvalidSpawnError(f"diameter must be positive and finite, got {diameter!r}")
    return origin, direction / norm, speed, diameter


def create_projectile(origin, direction, speed: float, diameter: float,
                      converter: UnitConverter,
                      time_to_live: float = DEFAULT_TTL,
                      angular_velocity: Optional[np.ndarray] = None,
                      label: str = "") -> Projectile:
    """
    Spawn boundary: build a Flying projectile from a display-space origin,
    aim direction, launch speed (display units/tick) and diameter (m).
    """
    try:
        origin, unit, speed, diameter = validate_launch(origin, direction, speed, diameter)
    except InvalidSpawnError as exc:
        logger.warning("Rejected spawn: %s", exc)
        raise

    velocity_display = unit * speed
    proj = Projectile(
        position=origin,
        velocity_display=velocity_display,
        velocity_si=converter.to_si(velocity_display),
        diameter=diameter,
        time_to_live=float(time_to_live),
        angular_velocity=np.zeros(3) if angular_velocity is None
        else np.array(angular_velocity, dtype=float),
        label=label or f"Meteor ({diameter:.2f} m)",
    )
    logger.debug("Spawned projectile %d: %.2f m, %.1f kg", proj.id, proj.diameter, proj.mass)
    return proj
