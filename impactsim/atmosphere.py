"""
Exponential Atmosphere Model
============================
Air density as a function of geometric altitude above the central body's
surface, using the single-scale-height exponential profile:

    rho(h) = rho_0 * exp(-h / H)

Altitudes below the surface (h < 0) are clamped to h = 0, so the density
there equals rho_0. The result is never negative and the model never divides
by zero for a positive scale height.
"""

import numpy as np


# ── Earth reference constants ─────────────────────────────────────────────
SEA_LEVEL_DENSITY = 1.225      # kg/m³
SCALE_HEIGHT      = 8000.0     # m


def exponential_density(altitude: float, rho0: float = SEA_LEVEL_DENSITY,
                        scale_height: float = SCALE_HEIGHT) -> float:
    """
    Air density (kg/m³) at ``altitude`` meters above the surface.
    """
    h = max(float(altitude), 0.0)
    return max(rho0 * np.exp(-h / scale_height), 0.0)


def density_profile(alt_array: np.ndarray, rho0: float = SEA_LEVEL_DENSITY,
                    scale_height: float = SCALE_HEIGHT) -> dict:
    """
    Vectorised density over an array of altitudes, for plotting.
    Returns dict with keys: 'altitude', 'density'.
    """
    alt_array = np.asarray(alt_array, dtype=float)
    h = np.clip(alt_array, 0.0, None)
    rho = np.clip(rho0 * np.exp(-h / scale_height), 0.0, None)
    return {
        'altitude': alt_array,
        'density': rho,
    }


if __name__ == "__main__":
    print("Exponential Atmosphere")
    print("=" * 30)
    print(f"{'Alt (m)':>10} {'ρ (kg/m³)':>14}")
    print("-" * 30)
    for h in [0, 1000, 5000, 10000, 20000, 50000, 100000]:
        print(f"{h:>10.0f} {exponential_density(h):>14.6e}")
