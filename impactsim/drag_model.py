"""
Aerodynamic Drag Model
======================
Quadratic drag on a projectile moving through the exponential atmosphere:

    a_drag = -½ ρ |v| Cd A / m · v

The drag coefficient is fixed (Cd = 1.0, a blunt tumbling rock). The speed is
floored at MIN_SPEED before it enters the magnitude, so a projectile at rest
gets zero drag instead of a division by zero.
"""

import numpy as np


DRAG_COEFFICIENT = 1.0     # dimensionless
MIN_SPEED = 1e-9           # m/s


def drag_acceleration(velocity: np.ndarray, rho: float, cd: float,
                      area: float, mass: float) -> np.ndarray:
    """
    Compute aerodynamic drag acceleration vector (m/s²).

    Parameters
    ----------
    velocity : np.ndarray
        Velocity relative to the atmosphere [vx, vy, vz] (m/s)
    rho : float
        Air density (kg/m³)
    cd : float
        Drag coefficient (dimensionless)
    area : float
        Reference cross-sectional area (m²)
    mass : float
        Projectile mass (kg)

    Returns
    -------
    np.ndarray
        Drag acceleration [ax, ay, az] (m/s²)
    """
    velocity = np.asarray(velocity, dtype=float)
    if rho <= 0.0 or area <= 0.0 or mass <= 0.0:
        return np.zeros_like(velocity)

    v_mag = max(np.linalg.norm(velocity), MIN_SPEED)
    return -0.5 * rho * v_mag * cd * area / mass * velocity

