"""
Impact Resolver
===============
Turns a projectile that just penetrated the central body into an
ImpactEvent carrying its kinetic energy and TNT equivalent:

    KE  = ½ m v²
    TNT = KE / 4.184e9   (kilotons)

The impact speed comes from whichever velocity representation the active
model treats as authoritative (m/s directly for Realistic, display velocity
rescaled to SI for Arcade).

The resolver never raises: non-finite mass, speed or energy produce a
zero-energy event flagged ``valid=False`` so one malformed projectile
cannot abort the host tick loop.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Optional

from .integrator import PhysicsModel
from .units import UnitConverter

logger = logging.getLogger(__name__)


JOULES_PER_KILOTON = 4.184e9


@dataclass(frozen=True)
class ImpactEvent:
    """Created once per impact and handed to the effects collaborator."""
    point: Optional[tuple]       # display units
    kinetic_energy_j: float
    tnt_kilotons: float
    projectile_id: int
    speed: float = 0.0           # m/s
    valid: bool = True

    def summary(self) -> str:
        if not self.valid:
            return f"Impact #{self.projectile_id}: energy unavailable"
        return (f"Impact #{self.projectile_id}: {self.kinetic_energy_j:.3e} J "
                f"(~{self.tnt_kilotons:.2f} kt) at {self.speed:.1f} m/s")


def tnt_equivalent(kinetic_energy_j: float) -> float:
    """Kilotons of TNT for an energy in joules."""
    return kinetic_energy_j / JOULES_PER_KILOTON


def _as_point(value) -> Optional[tuple]:
    try:
        return tuple(float(c) for c in np.asarray(value, dtype=float).reshape(3))
    except (TypeError, ValueError):
        return None


def _invalid(projectile_id, point, reason) -> ImpactEvent:
    logger.warning("Impact energy unavailable for projectile %s: %s",
                   projectile_id, reason)
    return ImpactEvent(point=_as_point(point), kinetic_energy_j=0.0, tnt_kilotons=0.0,
                       projectile_id=projectile_id, valid=False)


def resolve_impact(projectile, impact_point, model: PhysicsModel,
                   converter: UnitConverter) -> ImpactEvent:
    """
    Compute the ImpactEvent for ``projectile`` striking at ``impact_point``
    (display units) under ``model``.
    """
    projectile_id = getattr(projectile, 'id', None)
    try:
        point = _as_point(impact_point)
        if model is PhysicsModel.REALISTIC:
            velocity = np.asarray(projectile.velocity_si, dtype=float)
        else:
            velocity = converter.to_si(projectile.velocity_display)

        mass = float(projectile.mass)
        with np.errstate(over='ignore', invalid='ignore'):
            speed = float(np.linalg.norm(velocity))
            energy = 0.5 * mass * speed * speed
    except (AttributeError, TypeError, ValueError) as exc:
        return _invalid(projectile_id, impact_point, exc)
    if point is None:
        return _invalid(projectile_id, None, f"impact point {impact_point!r} is not a 3-vector")

    if not (np.isfinite(mass) and np.isfinite(speed) and np.isfinite(energy)):
        return _invalid(projectile_id, point,
                        f"mass={mass!r} speed={speed!r}")
    if energy < 0:
        return _invalid(projectile_id, point, f"negative mass {mass!r}")

    event = ImpactEvent(
        point=point,
        kinetic_energy_j=energy,
        tnt_kilotons=tnt_equivalent(energy),
        projectile_id=projectile_id,
        speed=speed,
    )
    logger.info(event.summary())
    return event
