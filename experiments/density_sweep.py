"""
Device Density Sweep Experiment for random-access backoff control.

This experiment shows how each backoff algorithm copes as the number
of devices sharing the preamble pool grows.

Systems Insight:
    With a fixed preamble pool, the chance that two ready devices pick
    the same preamble rises quickly with the number of ready devices.
    The contention window is the only lever a device has to thin out
    the ready set:
    - Too small: the same devices keep colliding
    - Too large: slots go idle and access delay grows

    BEB reacts sharply, LILD barely reacts, Adaptive sits between the
    two. The sweep shows where each policy saturates.

Experiment Design:
    Sweep the device population and, for each size, run every algorithm
    on the same scenario. Report throughput and collision probability.
"""

import sys
from dataclasses import replace
from pathlib import Path
from typing import Dict, List

import matplotlib.pyplot as plt

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from racsim.config import ALGORITHMS, DEFAULT_SEED, SimulationConfig
from racsim.metrics import RunMetrics
from racsim.simulator import compare_algorithms


# =============================================================================
# Configuration
# =============================================================================

DEFAULT_DEVICE_RANGE = [50, 100, 200, 300, 400, 500, 750, 1000]

LINESTYLES = {
    "BEB": {"color": "#E69F00", "marker": "o"},
    "LILD": {"color": "#0072B2", "marker": "s"},
    "Adaptive": {"color": "#CC79A7", "marker": "^"},
}


# =============================================================================
# Experiment Runner
# =============================================================================

def run_density_sweep(
    device_range: List[int],
    base_config: SimulationConfig,
    seed: int = DEFAULT_SEED,
    parallel: bool = True,
    verbose: bool = True
) -> Dict[str, Dict[int, RunMetrics]]:
    """
    Run the comparison for every device count.

    Args:
        device_range: Device populations to test
        base_config: Scenario used for every other parameter
        seed: Base random seed
        parallel: Run algorithms in parallel for each point
        verbose: Print progress updates

    Returns:
        Nested dict: {algorithm: {num_devices: metrics}}
    """
    results: Dict[str, Dict[int, RunMetrics]] = {
        algorithm: {} for algorithm in base_config.algorithms
    }

    for idx, num_devices in enumerate(device_range, start=1):
        config = replace(base_config, num_devices=num_devices)
        point = compare_algorithms(config, seed=seed, parallel=parallel)

        for algorithm, metrics in point.items():
            results[algorithm][num_devices] = metrics

        if verbose:
            summary = ", ".join(
                f"{name}={metrics.throughput:.3f}" for name, metrics in point.items()
            )
            print(f"  [{idx}/{len(device_range)}] {num_devices} devices: throughput {summary}")

    return results


# =============================================================================
# Analysis
# =============================================================================

def find_best_algorithm_per_density(
    results: Dict[str, Dict[int, RunMetrics]],
    device_range: List[int]
) -> Dict[int, str]:
    """
    Determine which algorithm has the highest throughput at each density.

    Ties go to the algorithm listed first.
    """
    winners = {}
    for num_devices in device_range:
        winners[num_devices] = max(
            results,
            key=lambda name: results[name][num_devices].throughput
        )
    return winners


# =============================================================================
# Visualization
# =============================================================================

def plot_density_curves(
    results: Dict[str, Dict[int, RunMetrics]],
    device_range: List[int],
    output_path: str = "results/density_sweep.png"
) -> None:
    """Plot throughput and collision probability vs device count."""
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 5))

    for name, by_density in results.items():
        style = LINESTYLES.get(name, {"color": "gray", "marker": "o"})
        throughputs = [by_density[n].throughput for n in device_range]
        collision_probs = [by_density[n].collision_probability for n in device_range]

        ax1.plot(device_range, throughputs, linewidth=2.5, markersize=7,
                 label=name, **style)
        ax2.plot(device_range, collision_probs, linewidth=2.5, markersize=7,
                 label=name, **style)

    ax1.set_xlabel('Number of Devices', fontsize=12, fontweight='bold')
    ax1.set_ylabel('Throughput (successes / slot)', fontsize=12, fontweight='bold')
    ax1.set_title('Throughput vs Device Density', fontsize=14, fontweight='bold')
    ax1.set_ylim(bottom=0)

    ax2.set_xlabel('Number of Devices', fontsize=12, fontweight='bold')
    ax2.set_ylabel('Collisions / slot', fontsize=12, fontweight='bold')
    ax2.set_title('Collisions vs Device Density', fontsize=14, fontweight='bold')
    ax2.set_ylim(bottom=0)

    for ax in (ax1, ax2):
        ax.legend(loc='upper left', fontsize=10, framealpha=0.9)
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, dpi=300, bbox_inches='tight')
    print(f"Saved: {output_path}")
    plt.close(fig)


def print_summary_table(
    results: Dict[str, Dict[int, RunMetrics]],
    device_range: List[int]
) -> None:
    """Print a summary table of results."""
    print("\n" + "=" * 80)
    print(" Throughput by Device Count")
    print("=" * 80)

    header = f"{'Algorithm':<10} | " + " | ".join(f"{n:>6d}" for n in device_range)
    print(header)
    print("-" * len(header))

    for name in results:
        row = f"{name:<10} | " + " | ".join(
            f"{results[name][n].throughput:>6.3f}" for n in device_range
        )
        print(row)

    print("\n" + "-" * 40)
    print("Best throughput per density:")
    for num_devices, winner in find_best_algorithm_per_density(results, device_range).items():
        print(f"  {num_devices:>5d} devices: {winner}")


# =============================================================================
# Main Entry Point
# =============================================================================

def main() -> None:
    """Run the device density sweep experiment."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Device Density Sweep: backoff algorithms under growing load"
    )
    parser.add_argument(
        "--output-dir", "-o", type=str, default="results",
        help="Directory to save plots (default: results)"
    )
    parser.add_argument(
        "--seed", "-s", type=int, default=DEFAULT_SEED,
        help=f"Random seed (default: {DEFAULT_SEED})"
    )
    parser.add_argument(
        "--devices", "-n", type=int, nargs="+", default=DEFAULT_DEVICE_RANGE,
        help="Device counts to test"
    )
    parser.add_argument(
        "--no-parallel", action="store_true",
        help="Disable parallel execution"
    )

    args = parser.parse_args()
    output_dir = Path(args.output_dir)
    device_range = sorted(args.devices)
    base_config = SimulationConfig(num_devices=device_range[0], algorithms=ALGORITHMS)

    print("=" * 60)
    print(" Device Density Sweep Experiment")
    print("=" * 60)
    print(f"\nAlgorithms: {list(base_config.algorithms)}")
    print(f"Device counts: {device_range}")
    print(f"Slots: {base_config.num_slots}, Preambles: {base_config.num_preambles}")
    print()

    print("Running density sweep...")
    results = run_density_sweep(
        device_range=device_range,
        base_config=base_config,
        seed=args.seed,
        parallel=not args.no_parallel,
        verbose=True
    )

    print_summary_table(results, device_range)

    print("\nGenerating visualizations...")
    plot_density_curves(
        results, device_range,
        str(output_dir / "density_sweep.png")
    )

    print("\n" + "=" * 60)
    print(" Experiment Complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
