#!/usr/bin/env python3
"""
Plot a CSV log written by the closed-loop simulator.

Usage:
    python plot_sim_log.py <csv_file> [options]

Examples:
    python plot_sim_log.py output/basic_demo.csv
    python plot_sim_log.py output/basic_demo.csv --components
    python plot_sim_log.py output/basic_demo.csv --all --analyze
    python plot_sim_log.py output/basic_demo.csv --all --save plots/
"""

import argparse
import sys
from pathlib import Path

import numpy as np

from pid_loop.analyzer.metrics import PerformanceMetrics
from pid_loop.analyzer.plots import SimulationPlotter
from pid_loop.logging.csv_logger import STEP_COLUMNS
from pid_loop.simulation.simulator import SimulationResult


def load_result(csv_path: Path) -> SimulationResult:
    """Read a simulator CSV log back into a SimulationResult."""
    data = np.genfromtxt(csv_path, delimiter=',', names=True, dtype=float)
    missing = [c for c in STEP_COLUMNS if c not in (data.dtype.names or ())]
    if missing:
        raise ValueError(f"missing columns: {', '.join(missing)}")
    data = np.atleast_1d(data)

    return SimulationResult(
        timestamps=data['time'],
        setpoints=data['setpoint'],
        positions=data['position'],
        velocities=data['velocity'],
        outputs=data['output'],
        errors=data['error'],
        p_terms=data['p_term'],
        i_terms=data['i_term'],
        d_terms=data['d_term'],
        disturbances=data['disturbance'],
        scenario_name=csv_path.stem,
    )


def print_metrics(result: SimulationResult, output_limits=None):
    metrics = PerformanceMetrics().calculate_all_metrics(
        result.timestamps, result.setpoints, result.positions, result.outputs,
        output_limits=output_limits,
    )
    step = metrics['step_response']
    error = metrics['error']

    print("Step response:")
    print(f"  Rise time:          {step['rise_time']:.3f} s")
    print(f"  Overshoot:          {step['overshoot_percent']:.1f} %")
    print(f"  Settling time (2%): {step['settling_time_2pct']:.3f} s")
    print(f"  Steady-state error: {step['steady_state_error']:.3f}")
    print("Error:")
    print(f"  IAE: {error['iae']:.2f}  ISE: {error['ise']:.2f}  RMSE: {error['rmse']:.3f}")
    print(f"  Sign changes: {metrics['error_sign_changes']}")
    print(f"  First-crossing overshoot: {metrics['first_crossing_overshoot']:.3f}")
    effort = metrics['control_effort']
    print("Control effort:")
    print(f"  Max |output|: {effort['max_absolute']:.2f}")
    print(f"  Saturated fraction: {effort['saturated_fraction']:.1%}")
    print()


def main():
    parser = argparse.ArgumentParser(
        description='Plot closed-loop simulation logs from CSV files',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s run.csv
  %(prog)s run.csv --components
  %(prog)s run.csv --all --save output_dir/
  %(prog)s run.csv --analyze --output-limits -100 100
        """
    )

    parser.add_argument('csv_file', type=str, help='Path to CSV log file')
    parser.add_argument(
        '-r', '--response',
        action='store_true',
        help='Plot position, setpoint and output (default if no other plot specified)'
    )
    parser.add_argument(
        '-p', '--components',
        action='store_true',
        help='Plot PID component breakdown'
    )
    parser.add_argument(
        '-a', '--all',
        action='store_true',
        help='Generate all available plots'
    )
    parser.add_argument(
        '--analyze',
        action='store_true',
        help='Print response metrics'
    )
    parser.add_argument(
        '--output-limits',
        type=float,
        nargs=2,
        metavar=('MIN', 'MAX'),
        help='Output limits for saturation metrics'
    )
    parser.add_argument(
        '--save',
        type=str,
        metavar='DIR',
        help='Save plots to directory instead of displaying'
    )
    parser.add_argument(
        '--dpi',
        type=int,
        default=150,
        help='DPI for saved figures (default: 150)'
    )

    args = parser.parse_args()

    csv_path = Path(args.csv_file)
    if not csv_path.exists():
        print(f"Error: CSV file not found: {csv_path}", file=sys.stderr)
        sys.exit(1)

    print(f"Loading simulation log from: {csv_path}")
    try:
        result = load_result(csv_path)
    except ValueError as e:
        print(f"Error loading CSV: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Loaded {len(result)} steps")
    print()

    if args.analyze:
        if len(result) < 2:
            print("Not enough samples to analyze.", file=sys.stderr)
        else:
            limits = tuple(args.output_limits) if args.output_limits else None
            print_metrics(result, limits)

    if not (args.response or args.components or args.all or args.analyze):
        args.response = True

    plotter = SimulationPlotter()
    figures = []
    if args.response or args.all:
        print("Generating response plot...")
        figures.append(('response', plotter.plot_response(result)))
    if args.components or args.all:
        print("Generating PID components plot...")
        figures.append(('components', plotter.plot_components(result)))

    if args.save:
        save_dir = Path(args.save)
        save_dir.mkdir(parents=True, exist_ok=True)
        for name, fig in figures:
            filepath = save_dir / f"{csv_path.stem}_{name}.png"
            SimulationPlotter.save(fig, str(filepath), dpi=args.dpi)
            print(f"  Saved: {filepath}")
    elif figures:
        print(f"\nDisplaying {len(figures)} plot(s)...")
        SimulationPlotter.show()


if __name__ == '__main__':
    main()
