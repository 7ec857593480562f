"""
Meteor Impact Trajectory Engine
===============================
Simulates small bodies falling toward a spherical central body and reports
where and how hard they strike:
  - Inverse-square gravity from a single central mass
  - Quadratic drag in an exponential atmosphere
  - Display-scaled <-> SI unit conversion with one global scale factor
  - Impact detection, kinetic energy and TNT equivalent
  - Bounded ballistic prediction for aiming feedback

Two integration models share one projectile state: a cheap Arcade
inverse-square step in display units, and a Realistic RK4 step in SI units.
"""

from .units import UnitConverter
from .atmosphere import exponential_density, density_profile
from .body import CentralBody, EARTH, IMPACT_MARGIN
from .drag_model import drag_acceleration, DRAG_COEFFICIENT
from .integrator import (
    PhysicsModel, ArcadeIntegrator, RealisticIntegrator, make_integrator,
    fly, TrajectoryResult, PHYSICS_DT,
)
from .projectile import (
    Projectile, LifecycleState, InvalidSpawnError, create_projectile,
    ROCK_DENSITY,
)
from .impact import ImpactEvent, resolve_impact, JOULES_PER_KILOTON
from .predictor import BallisticPredictor, PredictionResult
from .catalog import CatalogEntry, CatalogError
from .simulation import Simulation, SimulationConfig, TickResult, ProjectileFrame
from .logging_config import setup_logging

__version__ = "1.0.0"
__all__ = [
    'UnitConverter', 'CentralBody', 'EARTH', 'IMPACT_MARGIN',
    'exponential_density', 'density_profile',
    'drag_acceleration', 'DRAG_COEFFICIENT',
    'PhysicsModel', 'ArcadeIntegrator', 'RealisticIntegrator',
    'make_integrator', 'fly', 'TrajectoryResult', 'PHYSICS_DT',
    'Projectile', 'LifecycleState', 'InvalidSpawnError', 'create_projectile',
    'ROCK_DENSITY',
    'ImpactEvent', 'resolve_impact', 'JOULES_PER_KILOTON',
    'BallisticPredictor', 'PredictionResult',
    'CatalogEntry', 'CatalogError',
    'Simulation', 'SimulationConfig', 'TickResult', 'ProjectileFrame',
    'setup_logging',
]
