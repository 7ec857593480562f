"""
Unit Conversion
===============
Maps between display-scaled coordinates (what the renderer draws) and
physical SI coordinates (what the realistic integrator works in).

One linear scale factor S (meters per display unit) covers positions and
velocities alike:

    x_SI      = x_display * S
    x_display = x_SI / S

The scale is fixed for the lifetime of the process; every projectile shares
the converter owned by the central body.
"""

import numpy as np
from dataclasses import dataclass


@dataclass(frozen=True)
class UnitConverter:
    """Bidirectional display <-> SI mapping with a single global scale."""
    scale: float = 1.0e6   # meters per display unit

    def __post_init__(self):
        if not np.isfinite(self.scale) or self.scale <= 0:
            raise ValueError(f"Scale must be positive and finite, got {self.scale!r}")

    def to_si(self, value):
        """Display units -> meters (or display units/tick -> m/s)."""
        return _as_float(value) * self.scale

    def to_display(self, value):
        """Meters -> display units (or m/s -> display units/tick)."""
        return _as_float(value) / self.scale


def _as_float(value):
    # Always hand back a fresh array so callers never alias the input
    if np.isscalar(value):
        return float(value)
    return np.array(value, dtype=float)
