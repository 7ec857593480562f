#!/usr/bin/env python3
"""
═══════════════════════════════════════════════════════════════════════════════
  METEOR IMPACT SIMULATOR — Main Runner
═══════════════════════════════════════════════════════════════════════════════

  Executes a scripted session of the trajectory engine:
    1. Atmosphere profile
    2. Ballistic prediction for a candidate launch
    3. Live Arcade session: spawn, tick, impacts
    4. Realistic (RK4 + drag) flight
    5. Arcade vs Realistic comparison
    6. Reference validations

  All figures saved to outputs/ directory.

  Usage:
    python main.py              # Run everything
    python main.py --quick      # Skip the comparison figure
    python main.py --verbose    # DEBUG logging
═══════════════════════════════════════════════════════════════════════════════
"""

import sys
import os
import time
import logging
import numpy as np

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from impactsim.atmosphere import exponential_density
from impactsim.body import EARTH
from impactsim.catalog import CatalogEntry
from impactsim.integrator import PhysicsModel, ArcadeIntegrator, RealisticIntegrator, fly
from impactsim.logging_config import setup_logging
from impactsim.projectile import sphere_mass, cross_section
from impactsim.simulation import Simulation, SimulationConfig
from impactsim.validation import run_all_validations
from impactsim.visualization import (
    plot_density_profile, plot_flight, plot_model_comparison, plot_prediction,
    ensure_output_dir,
)

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt


FRAME_DT = 1.0 / 60.0     # s per rendered frame
SWITCH_TICK = 240         # live session moves to Realistic here

SAMPLE_NEO = {
    'id': '3542519',
    'name': '(2010 PK9)',
    'estimated_diameter': {'meters': {'estimated_diameter_max': 320.0}},
    'close_approach_data': [{
        'relative_velocity': {'kilometers_per_second': '20.4'},
        'miss_distance': {'kilometers': '4190000'},
    }],
}


def banner():
    print("""
╔═══════════════════════════════════════════════════════════════════════╗
║                                                                       ║
║     METEOR IMPACT SIMULATOR                                           ║
║     ─────────────────────────────────────────────────────             ║
║     Gravity · Exponential atmosphere · Drag · Impact energy           ║
║     Models: Arcade │ Realistic (RK4)                                  ║
║                                                                       ║
╚═══════════════════════════════════════════════════════════════════════╝
""")


def section(title):
    print(f"\n{'─'*60}")
    print(f"  {title}")
    print(f"{'─'*60}")


def main():
    start_time = time.time()
    quick = '--quick' in sys.argv
    setup_logging(logging.DEBUG if '--verbose' in sys.argv else logging.WARNING)

    banner()
    out = ensure_output_dir('outputs')

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 1: Atmosphere
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 1: Exponential Atmosphere")
    print(f"  {'Alt (m)':>8} {'ρ (kg/m³)':>12}")
    for h in [0, 1000, 5000, 10000, 20000, 50000]:
        print(f"  {h:>8} {exponential_density(h, EARTH.sea_level_density, EARTH.scale_height):>12.5f}")

    fig = plot_density_profile(EARTH, save_path=f'{out}/01_density_profile.png')
    plt.close(fig)
    print(f"\n  ✓ Saved: {out}/01_density_profile.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 2: Prediction
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 2: Ballistic Prediction")
    sim = Simulation(EARTH, rng=42)
    config = SimulationConfig()
    origin = np.array([4.0, 0.0, 15.0])
    aim = -origin / np.linalg.norm(origin)

    prediction = sim.predict(origin, aim, 0.05, config)
    if prediction.hit:
        print(f"  Predicted impact at {np.round(prediction.point, 3)} "
              f"after {prediction.steps} ticks")
    else:
        print(f"  No impact predicted ({prediction.reason})")

    path = sim.predictor.predict_path(origin, aim, 0.05)
    fig = plot_prediction(path, EARTH, save_path=f'{out}/02_prediction.png')
    plt.close(fig)
    print(f"  ✓ Saved: {out}/02_prediction.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 3: Live session
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 3: Live Arcade Session")
    sim.spawn(origin, aim, 0.05, diameter=0.5)
    sim.spawn((0.0, 0.0, 15.0), (0.0, 0.0, -1.0), 0.05, diameter=2.0)
    sim.spawn((0.0, 30.0, 0.0), (0.0, 1.0, 0.0), 0.05, time_to_live=1.0)
    entry = CatalogEntry.from_neo(SAMPLE_NEO)
    print(f"  Catalog: {entry.describe()}")
    sim.spawn_from_catalog(entry, (-12.0, 0.0, 0.0), (1.0, 0.0, 0.0))

    ticks = 0
    while sim.projectiles and ticks < 5000:
        if ticks == SWITCH_TICK:
            config = config.with_model(PhysicsModel.REALISTIC)
            print(f"  tick {ticks:>4}: switching to {config.model.value} physics")
        result = sim.tick(FRAME_DT, config)
        ticks += 1
        for event in result.impacts:
            print(f"  tick {ticks:>4}: {event.summary()}")
    print(f"  Impacts: {sim.impact_count} | Live after {ticks} ticks: {len(sim.projectiles)}")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 4: Realistic flight
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 4: Realistic Flight (RK4 + drag)")
    diameter = 10.0
    start = np.array([0.0, 0.0, EARTH.display_radius + 0.25])
    v0 = EARTH.converter.to_si(np.array([0.0, 0.0, -0.02]))
    realistic = fly(RealisticIntegrator(EARTH), EARTH, start, v0,
                    sphere_mass(diameter), cross_section(diameter),
                    speed_multiplier=50.0, record=True)
    print(realistic.summary())
    fig = plot_flight(realistic, EARTH, save_path=f'{out}/03_realistic_flight.png')
    plt.close(fig)
    print(f"  ✓ Saved: {out}/03_realistic_flight.png")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 5: Model comparison
    # ══════════════════════════════════════════════════════════════════════
    if not quick:
        section("PHASE 5: Arcade vs Realistic")
        arcade = fly(ArcadeIntegrator(), EARTH, start, EARTH.converter.to_display(v0),
                     sphere_mass(diameter), cross_section(diameter),
                     speed_multiplier=1.0, record=True)
        print(arcade.summary())
        fig = plot_model_comparison(arcade, realistic, EARTH,
                                    save_path=f'{out}/04_model_comparison.png')
        plt.close(fig)
        print(f"  ✓ Saved: {out}/04_model_comparison.png")
    else:
        section("PHASE 5: Comparison SKIPPED (--quick mode)")

    # ══════════════════════════════════════════════════════════════════════
    #  PHASE 6: Validation
    # ══════════════════════════════════════════════════════════════════════
    section("PHASE 6: Reference Validations")
    results = run_all_validations(verbose=True)
    failed = [r.name for r in results if not r.passed]

    elapsed = time.time() - start_time
    section("COMPLETE")
    print(f"""
  All outputs saved to: {os.path.abspath(out)}/
  Physics model at end of live session: {config.model.value}
  Validation failures: {', '.join(failed) if failed else 'none'}

  Total runtime: {elapsed:.1f} seconds
""")


if __name__ == "__main__":
    main()
