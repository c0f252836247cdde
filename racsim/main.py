"""
Main entry point for the random-access contention simulator.

This script runs every backoff algorithm on the same random-access
scenario and prints the comparative metrics.

Experiment Design:
    - Fixed device population, all present from slot 1
    - Each device transmits once successfully and then leaves contention
    - Compare BEB, LILD and Adaptive window control on identical settings

What to look for:
    - BEB backs off hardest after a collision and resets on success
    - LILD moves the window one slot at a time, so it reacts slowly
    - Adaptive scales its steps with the current window
"""

import argparse
import math
from typing import Dict, List, Optional

from racsim.config import (
    ALGORITHMS,
    DEFAULT_MAX_CW,
    DEFAULT_MIN_CW,
    DEFAULT_NUM_DEVICES,
    DEFAULT_NUM_PREAMBLES,
    DEFAULT_NUM_SLOTS,
    DEFAULT_SEED,
    ConfigurationError,
    SimulationConfig,
)
from racsim.metrics import RunMetrics
from racsim.simulator import compare_algorithms


def print_header(title: str) -> None:
    """Print a formatted section header."""
    width = 70
    print("\n" + "=" * width)
    print(f" {title}")
    print("=" * width)


def format_delay(delay: float) -> str:
    return "n/a" if math.isnan(delay) else f"{delay:.2f}"


def print_table(results: Dict[str, RunMetrics]) -> None:
    """
    Print a comparison table with one row per algorithm.

    Args:
        results: Metrics by algorithm, from compare_algorithms
    """
    header = (
        f"{'Algorithm':<10} | {'Throughput':>10} | {'Fairness':>8} | "
        f"{'Avg Delay':>9} | {'Coll. Prob':>10}"
    )
    print(header)
    print("-" * len(header))

    for name, metrics in results.items():
        row = (
            f"{name:<10} | {metrics.throughput:>10.4f} | {metrics.fairness_index:>8.4f} | "
            f"{format_delay(metrics.avg_access_delay):>9} | "
            f"{metrics.collision_probability:>10.4f}"
        )
        print(row)


def print_metric_lists(results: Dict[str, RunMetrics]) -> None:
    """Print each metric as a labeled list of per-algorithm values."""
    metrics = list(results.values())
    print(f"\nAlgorithms: {list(results.keys())}")
    print("Throughput:")
    print("   " + "  ".join(f"{m.throughput:.4f}" for m in metrics))
    print("Fairness:")
    print("   " + "  ".join(f"{m.fairness_index:.4f}" for m in metrics))
    print("Average Access Delay:")
    print("   " + "  ".join(format_delay(m.avg_access_delay) for m in metrics))
    print("Collision Probability:")
    print("   " + "  ".join(f"{m.collision_probability:.4f}" for m in metrics))


def print_detailed_results(results: Dict[str, RunMetrics]) -> None:
    """Print raw counters for each algorithm."""
    for name, metrics in results.items():
        print(f"\n  {name}:")
        print(f"    Successes:     {metrics.successes}")
        print(f"    Collisions:    {metrics.collisions}")
        print(f"    Idle Slots:    {metrics.idle_slots}/{metrics.num_slots}")
        print(f"    Devices Done:  {metrics.successes}/{metrics.num_devices}")
        if not metrics.has_successes:
            print("    No device succeeded; access delay is undefined")


def run_experiments(
    config: SimulationConfig,
    seed: int = DEFAULT_SEED,
    verbose: bool = True,
    parallel: bool = True,
    max_workers: Optional[int] = None
) -> Dict[str, RunMetrics]:
    """
    Run the full algorithm comparison.

    Args:
        config: Scenario parameters
        seed: Random seed for reproducibility
        verbose: Whether to print progress output
        parallel: Use multiprocessing for speedup
        max_workers: Number of parallel workers (default: CPU count)

    Returns:
        Metrics by algorithm, in config order
    """
    import time

    if verbose:
        print_header("Random-Access Backoff Simulator")
        print("\nComparing contention-window control for preamble-based random access")
        print(f"\nDevices: {config.num_devices}, Slots: {config.num_slots}, "
              f"Preambles: {config.num_preambles}")
        print(f"Contention window: [{config.min_cw}, {config.max_cw}], seed={seed}")
        print(f"Algorithms: {list(config.algorithms)}")
        if parallel:
            print("Parallel execution")
        else:
            print("Sequential execution")
        print("\nRunning simulations...")

    start_time = time.time()

    results = compare_algorithms(
        config=config,
        seed=seed,
        parallel=parallel,
        max_workers=max_workers
    )

    elapsed = time.time() - start_time
    if verbose:
        print(f"Completed in {elapsed:.2f}s")

    return results


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        description="Slotted random-access simulator comparing backoff algorithms"
    )
    parser.add_argument(
        "--devices", "-n", type=int, default=DEFAULT_NUM_DEVICES,
        help=f"Number of devices (default: {DEFAULT_NUM_DEVICES})"
    )
    parser.add_argument(
        "--slots", "-t", type=int, default=DEFAULT_NUM_SLOTS,
        help=f"Number of slots (default: {DEFAULT_NUM_SLOTS})"
    )
    parser.add_argument(
        "--min-cw", type=int, default=DEFAULT_MIN_CW,
        help=f"Minimum contention window (default: {DEFAULT_MIN_CW})"
    )
    parser.add_argument(
        "--max-cw", type=int, default=DEFAULT_MAX_CW,
        help=f"Maximum contention window (default: {DEFAULT_MAX_CW})"
    )
    parser.add_argument(
        "--preambles", "-p", type=int, default=DEFAULT_NUM_PREAMBLES,
        help=f"Number of preambles (default: {DEFAULT_NUM_PREAMBLES})"
    )
    parser.add_argument(
        "--algorithms", "-a", nargs="+", default=list(ALGORITHMS),
        help=f"Algorithms to compare (default: {' '.join(ALGORITHMS)})"
    )
    parser.add_argument(
        "--seed", "-s", type=int, default=DEFAULT_SEED,
        help=f"Random seed (default: {DEFAULT_SEED})"
    )
    parser.add_argument(
        "--no-parallel", action="store_true",
        help="Disable parallel execution"
    )
    parser.add_argument(
        "--workers", "-w", type=int, default=None,
        help="Number of parallel workers (default: CPU count)"
    )
    parser.add_argument(
        "--plot", action="store_true",
        help="Save the 2x2 metrics chart after the run"
    )
    parser.add_argument(
        "--output-dir", "-o", type=str, default="results",
        help="Directory for the chart (default: results)"
    )
    parser.add_argument(
        "--show", action="store_true",
        help="Display the chart interactively"
    )
    parser.add_argument(
        "--no-details", action="store_true",
        help="Skip raw counter output"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> SimulationConfig:
    """Build a validated SimulationConfig from parsed CLI arguments."""
    return SimulationConfig(
        num_devices=args.devices,
        num_slots=args.slots,
        min_cw=args.min_cw,
        max_cw=args.max_cw,
        num_preambles=args.preambles,
        algorithms=tuple(args.algorithms)
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point with CLI argument parsing."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
    except ConfigurationError as exc:
        parser.error(str(exc))

    results = run_experiments(
        config=config,
        seed=args.seed,
        verbose=True,
        parallel=not args.no_parallel,
        max_workers=args.workers
    )

    print_header("Performance Metrics by Algorithm")
    print_table(results)
    print_metric_lists(results)

    if not args.no_details:
        print_header("Raw Counters")
        print_detailed_results(results)

    if args.plot:
        from pathlib import Path
        from racsim.plotter import plot_metrics_comparison

        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        plot_metrics_comparison(
            results,
            str(output_dir / "metrics_comparison.png"),
            show=args.show
        )

    print("\n" + "=" * 70)
    print(" Simulation Complete!")
    if not args.plot:
        print(" Run with --plot (or 'python -m racsim.plotter') to save the charts")
    print("=" * 70 + "\n")


if __name__ == "__main__":
    main()
