"""
Visualization Engine
====================
Analysis plots for recorded flights (not the real-time renderer):
  1. Atmospheric density profile
  2. Distance to center and speed vs tick for one flight
  3. Arcade vs Realistic comparison
  4. Predicted path over the body outline
"""

import numpy as np
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.patches import Circle
import os

from .atmosphere import density_profile
from .body import CentralBody, EARTH, IMPACT_MARGIN
from .integrator import TrajectoryResult


# ── Style Configuration ───────────────────────────────────────────────────
STYLE = {
    'bg_color': '#0a0a0a',
    'text_color': '#e0e0e0',
    'grid_color': '#333333',
    'accent_colors': ['#00d4ff', '#ff6b35', '#00e676', '#ffeb3b',
                      '#e040fb', '#ff5252'],
    'body_color': '#1e4d7a',
}


def _apply_dark_style(fig, axes):
    """Apply consistent dark theme to figure and axes."""
    fig.patch.set_facecolor(STYLE['bg_color'])
    if not isinstance(axes, np.ndarray):
        axes = [axes]
    else:
        axes = axes.flatten()

    for ax in axes:
        ax.set_facecolor(STYLE['bg_color'])
        ax.tick_params(colors=STYLE['text_color'])
        ax.xaxis.label.set_color(STYLE['text_color'])
        ax.yaxis.label.set_color(STYLE['text_color'])
        ax.title.set_color(STYLE['text_color'])
        ax.grid(True, color=STYLE['grid_color'], alpha=0.4, linewidth=0.5)
        for spine in ax.spines.values():
            spine.set_color(STYLE['grid_color'])


def ensure_output_dir(path: str = 'outputs'):
    os.makedirs(path, exist_ok=True)
    return path


def _finish(fig, save_path, show):
    plt.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, facecolor=fig.get_facecolor())
    if show:
        plt.show()
    return fig


# ══════════════════════════════════════════════════════════════════════════
#  1. Density profile
# ══════════════════════════════════════════════════════════════════════════

def plot_density_profile(body: CentralBody = EARTH, max_altitude: float = 100e3,
                         save_path: str = None, show: bool = False) -> plt.Figure:
    """Exponential density vs altitude, log scale."""
    profile = density_profile(np.linspace(0.0, max_altitude, 400),
                              body.sea_level_density, body.scale_height)

    fig, ax = plt.subplots(figsize=(7, 6))
    _apply_dark_style(fig, ax)
    ax.semilogx(profile['density'], profile['altitude'] / 1000,
                color=STYLE['accent_colors'][0], linewidth=2.5)
    ax.set_xlabel('Density (kg/m³)')
    ax.set_ylabel('Altitude (km)')
    ax.set_title(f'{body.name} atmosphere  (ρ0={body.sea_level_density}, '
                 f'H={body.scale_height/1000:.1f} km)', fontweight='bold')
    return _finish(fig, save_path, show)


# ══════════════════════════════════════════════════════════════════════════
#  2. Single flight
# ══════════════════════════════════════════════════════════════════════════

def plot_flight(result: TrajectoryResult, body: CentralBody = EARTH,
                save_path: str = None, show: bool = False) -> plt.Figure:
    """Distance to center and speed against tick for one recorded flight."""
    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(11, 8), sharex=True)
    _apply_dark_style(fig, np.array([ax1, ax2]))

    ticks = np.arange(len(result.distances))
    ax1.plot(ticks, result.distances, color=STYLE['accent_colors'][0], linewidth=2)
    ax1.axhline(body.display_radius, color=STYLE['accent_colors'][5],
                linestyle='--', label='Surface')
    ax1.axhline(body.display_radius + IMPACT_MARGIN, color=STYLE['accent_colors'][3],
                linestyle=':', label='Impact threshold')
    ax1.set_ylabel('Distance to center (display units)')
    ax1.set_title(f'{result.model.value.upper()} flight — {result.reason}',
                  fontweight='bold')
    ax1.legend(facecolor='#111111', labelcolor=STYLE['text_color'])

    ax2.plot(ticks, result.speeds / 1000, color=STYLE['accent_colors'][1], linewidth=2)
    ax2.set_xlabel('Tick')
    ax2.set_ylabel('Speed (km/s)')
    return _finish(fig, save_path, show)


# ══════════════════════════════════════════════════════════════════════════
#  3. Model comparison
# ══════════════════════════════════════════════════════════════════════════

def plot_model_comparison(arcade: TrajectoryResult, realistic: TrajectoryResult,
                          body: CentralBody = EARTH, save_path: str = None,
                          show: bool = False) -> plt.Figure:
    """Distance to center for the same launch under both models."""
    fig, ax = plt.subplots(figsize=(11, 6))
    _apply_dark_style(fig, ax)

    for i, result in enumerate((arcade, realistic)):
        ax.plot(np.arange(len(result.distances)), result.distances,
                color=STYLE['accent_colors'][i], linewidth=2,
                label=f'{result.model.value} ({result.reason}, {result.steps} ticks)')
    ax.axhline(body.display_radius, color=STYLE['accent_colors'][5],
               linestyle='--', label='Surface')
    ax.set_xlabel('Tick')
    ax.set_ylabel('Distance to center (display units)')
    ax.set_title('Arcade vs Realistic', fontweight='bold')
    ax.legend(facecolor='#111111', labelcolor=STYLE['text_color'])
    return _finish(fig, save_path, show)


# ══════════════════════════════════════════════════════════════════════════
#  4. Predicted path
# ══════════════════════════════════════════════════════════════════════════

def plot_prediction(path: np.ndarray, body: CentralBody = EARTH,
                    save_path: str = None, show: bool = False) -> plt.Figure:
    """Predicted path projected on the x-z plane, with the body outline."""
    fig, ax = plt.subplots(figsize=(8, 8))
    _apply_dark_style(fig, ax)

    ax.add_patch(Circle((0, 0), body.display_radius, color=STYLE['body_color'], alpha=0.8))
    if len(path):
        ax.plot(path[:, 0], path[:, 2], color=STYLE['accent_colors'][3], linewidth=2)
        ax.plot(path[0, 0], path[0, 2], 'o', color=STYLE['accent_colors'][2],
                markersize=9, label='Launch')
        ax.plot(path[-1, 0], path[-1, 2], 'x', color=STYLE['accent_colors'][5],
                markersize=12, markeredgewidth=3, label='End')
        ax.legend(facecolor='#111111', labelcolor=STYLE['text_color'])

    ax.set_aspect('equal')
    ax.set_xlabel('x (display units)')
    ax.set_ylabel('z (display units)')
    ax.set_title('Predicted impact path', fontweight='bold')
    return _finish(fig, save_path, show)
