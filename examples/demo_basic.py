#!/usr/bin/env python3
"""
Basic Closed-Loop Demo

Demonstrates:
- Running the gain presets on the default mechanical plant
- CSV logging of every step
- Response metrics and linearised stability check
- Basic plotting
"""

import sys
from pathlib import Path

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from pid_loop.core.pid_params import PIDPresets
from pid_loop.plants.mechanical import PlantPresets
from pid_loop.simulation.simulator import Simulator
from pid_loop.simulation.scenarios import ScenarioLibrary
from pid_loop.simulation.driver import DEFAULT_TIMESTEP
from pid_loop.analyzer.control_analysis import ControlSystemAnalyzer


def main():
    print("=" * 60)
    print("Basic Closed-Loop Demo")
    print("=" * 60)

    plant_params = PlantPresets.default()
    print(f"\nPlant: {plant_params.to_dict()}")

    sim = Simulator(plant_params, PIDPresets.pid_damped(),
                    csv_log_path="output/basic_demo.csv")

    scenario = ScenarioLibrary.step_response(setpoint=80.0, duration=20.0)
    print(f"\nRunning scenario: {scenario.name} ({scenario.n_steps} steps)")

    results = sim.run_comparison(
        scenario, {name: PIDPresets.get(name) for name in PIDPresets.names()}
    )

    print("\n" + "=" * 60)
    print("Analysis Results")
    print("=" * 60)

    for name, result in results.items():
        metrics = sim.analyze(result)
        step = metrics['step_response']
        linear = ControlSystemAnalyzer.analyze_closed_loop(
            plant_params, PIDPresets.get(name), DEFAULT_TIMESTEP
        )

        print(f"\n{name}:")
        print(f"  Final position: {result.final_position:8.2f}")
        print(f"  Final velocity: {result.final_velocity:8.3f}")
        print(f"  Overshoot: {step['overshoot_percent']:.1f}%")
        print(f"  Settling Time (2%): {step['settling_time_2pct']:.2f}s")
        print(f"  Steady-State Error: {step['steady_state_error']:.3f}")
        print(f"  Error sign changes: {metrics['error_sign_changes']}")
        print(f"  IAE: {metrics['error']['iae']:.1f}")
        print(f"  Linear model stable: {linear['is_stable']}, "
              f"min damping ratio: {linear['min_damping_ratio']:.3f}")

    # Disturbance rejection with logging
    print("\nRunning disturbance rejection (logged to output/basic_demo.csv)...")
    disturbance_result = sim.run(ScenarioLibrary.disturbance_rejection())
    print(f"Final position after -30 force step: {disturbance_result.final_position:.2f}")

    print("\nGenerating plots...")
    sim.plot_comparison(results, title="Preset Comparison")
    sim.plot_results(disturbance_result)

    print("\nClose plot window to exit.")
    Simulator.show()


if __name__ == "__main__":
    Path("output").mkdir(exist_ok=True)
    main()
