"""
Central Body
============
Read-only physical description of the single massive body every projectile
falls toward: gravitational parameter, physical and display radius, the
display scale factor and the exponential atmosphere constants.

Gravity is always attractive toward the origin:

    g(r) = -G M / |r|³ * r

The radius is floored at MIN_RADIUS_M before the inverse-cube evaluation so
a state at the body center cannot produce a division by zero.
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Optional

from .atmosphere import exponential_density, SEA_LEVEL_DENSITY, SCALE_HEIGHT
from .units import UnitConverter


# ── Physical constants ────────────────────────────────────────────────────
GRAVITATIONAL_CONSTANT = 6.67430e-11   # m³/(kg·s²)
EARTH_MASS             = 5.972e24      # kg
EARTH_RADIUS           = 6371000.0     # m
DISPLAY_SCALE          = 1.0e6         # m per display unit

MIN_RADIUS_M = 1.0                     # m, floor for inverse-square terms

# Projectile visual radius, so impacts read as touching the surface
IMPACT_MARGIN = 0.2                    # display units


@dataclass(frozen=True)
class CentralBody:
    """
    Immutable constants of the central body.

    ``display_radius`` defaults to ``radius_m / scale``; passing an explicit
    value that breaks that relation raises ``ValueError``.
    """
    name: str = "Earth"
    G: float = GRAVITATIONAL_CONSTANT
    mass: float = EARTH_MASS                 # kg
    radius_m: float = EARTH_RADIUS           # m
    scale: float = DISPLAY_SCALE             # m per display unit
    sea_level_density: float = SEA_LEVEL_DENSITY   # kg/m³
    scale_height: float = SCALE_HEIGHT             # m
    display_radius: Optional[float] = None         # display units
    converter: UnitConverter = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        for attr in ('G', 'mass', 'radius_m', 'scale', 'scale_height'):
            value = getattr(self, attr)
            if not np.isfinite(value) or value <= 0:
                raise ValueError(f"{attr} must be positive and finite, got {value!r}")
        if not np.isfinite(self.sea_level_density) or self.sea_level_density < 0:
            raise ValueError(
                f"sea_level_density must be >= 0, got {self.sea_level_density!r}"
            )

        expected = self.radius_m / self.scale
        if self.display_radius is None:
            object.__setattr__(self, 'display_radius', expected)
        elif not np.isclose(self.display_radius, expected, rtol=1e-9, atol=0.0):
            raise ValueError(
                f"display_radius {self.display_radius} does not match "
                f"radius_m / scale = {expected}"
            )
        object.__setattr__(self, 'converter', UnitConverter(self.scale))

    @property
    def mu(self) -> float:
        """Standard gravitational parameter G*M (m³/s²)."""
        return self.G * self.mass

    def gravitational_acceleration(self, position_si: np.ndarray) -> np.ndarray:
        """Acceleration vector (m/s²) at ``position_si`` meters from the center."""
        r_vec = np.asarray(position_si, dtype=float)
        r = max(np.linalg.norm(r_vec), MIN_RADIUS_M)
        return -self.mu / r**3 * r_vec

    def altitude(self, position_si: np.ndarray) -> float:
        """Height above the surface (m); negative inside the body."""
        return float(np.linalg.norm(position_si)) - self.radius_m

    def atmospheric_density(self, altitude_m: float) -> float:
        """Exponential-profile density (kg/m³), clamped at the surface."""
        return exponential_density(altitude_m, self.sea_level_density,
                                   self.scale_height)

    def penetrates(self, position_display: np.ndarray,
                   margin: float = IMPACT_MARGIN) -> bool:
        """True once a display-space position is inside radius + margin."""
        return float(np.linalg.norm(position_display)) < self.display_radius + margin

    def potential_energy(self, position_si: np.ndarray) -> float:
        """Specific gravitational potential energy (J/kg)."""
        r = max(np.linalg.norm(position_si), MIN_RADIUS_M)
        return -self.mu / r


EARTH = CentralBody()
