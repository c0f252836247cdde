"""
Visualization module for the random-access contention simulator.

This module renders the comparative metrics as a 2x2 grid of bar
charts, one panel per metric and one bar per algorithm:

    Throughput             | Fairness
    -----------------------+-----------------------
    Average Access Delay   | Collision Probability

A run with no successful transmission has no access delay; its bar is
left empty and labeled "n/a" instead of being drawn at zero.
"""

import math
from pathlib import Path
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np

from racsim.config import DEFAULT_SEED, SimulationConfig
from racsim.main import run_experiments
from racsim.metrics import RunMetrics


# Style configuration for publication-quality plots
plt.rcParams.update({
    'font.family': 'serif',
    'font.size': 11,
    'axes.titlesize': 13,
    'axes.labelsize': 11,
    'xtick.labelsize': 10,
    'ytick.labelsize': 10,
    'figure.titlesize': 16,
    'figure.dpi': 150,
    'savefig.dpi': 300,
    'savefig.bbox': 'tight',
})

# Color palette (colorblind-friendly)
COLORS = {
    'BEB': '#E69F00',       # Orange
    'LILD': '#0072B2',      # Blue
    'Adaptive': '#CC79A7',  # Pink
    'grid': '#CCCCCC',      # Light gray
}

# (attribute, y-axis label, panel title)
PANELS = [
    ('throughput', 'Successes / slot', 'Throughput Comparison'),
    ('fairness_index', 'Fairness', 'Fairness Comparison'),
    ('avg_access_delay', 'Average Access Delay', 'Access Delay Comparison'),
    ('collision_probability', 'Collisions / slot', 'Collision Probability Comparison'),
]


def _bar_panel(
    ax,
    names: List[str],
    values: List[float],
    ylabel: str,
    title: str
) -> None:
    """Draw one bar chart panel, marking NaN values as n/a."""
    x = np.arange(len(names))
    heights = [0.0 if math.isnan(v) else v for v in values]
    colors = [COLORS.get(name, 'gray') for name in names]

    ax.bar(x, heights, color=colors, alpha=0.85)

    for idx, value in enumerate(values):
        if math.isnan(value):
            ax.annotate(
                'n/a',
                xy=(idx, 0),
                xytext=(0, 3),
                textcoords="offset points",
                ha='center', va='bottom',
                fontsize=9, color='gray'
            )

    ax.set_xticks(x)
    ax.set_xticklabels(names)
    ax.set_ylabel(ylabel, fontweight='bold')
    ax.set_title(title, fontweight='bold')
    ax.grid(True, alpha=0.3, axis='y', color=COLORS['grid'])
    ax.set_ylim(bottom=0)


def plot_metrics_comparison(
    results: Dict[str, RunMetrics],
    output_path: str = "metrics_comparison.png",
    show: bool = False
) -> None:
    """
    Generate the 2x2 performance comparison figure.

    Args:
        results: Metrics by algorithm, from compare_algorithms
        output_path: Where to save the figure
        show: Whether to display interactively
    """
    names = list(results.keys())
    fig, axes = plt.subplots(2, 2, figsize=(12, 9))

    for ax, (attr, ylabel, title) in zip(axes.flat, PANELS):
        values = [getattr(results[name], attr) for name in names]
        _bar_panel(ax, names, values, ylabel, title)

    fig.suptitle('Performance Metrics Comparison', fontweight='bold')

    plt.tight_layout()
    plt.savefig(output_path)
    print(f"Saved: {output_path}")

    if show:
        plt.show()
    plt.close(fig)


def generate_all_plots(
    results: Optional[Dict[str, RunMetrics]] = None,
    config: Optional[SimulationConfig] = None,
    seed: int = DEFAULT_SEED,
    output_dir: str = "results",
    show: bool = False
) -> None:
    """
    Generate all visualization plots.

    Args:
        results: Pre-computed results (if None, runs the comparison)
        config: Scenario used when results must be computed
        seed: Random seed used when results must be computed
        output_dir: Directory to save plots
        show: Whether to display plots interactively
    """
    if results is None:
        print("Running simulations for plotting...")
        results = run_experiments(config or SimulationConfig(), seed=seed, verbose=False)

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    print("\nGenerating plots...")
    plot_metrics_comparison(
        results,
        str(output_path / "metrics_comparison.png"),
        show
    )
    print("\nAll plots generated successfully!")


def main() -> None:
    """Main entry point for plotting with CLI arguments."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Generate the metrics chart for the backoff algorithm comparison"
    )
    parser.add_argument(
        "--output-dir", "-o", type=str, default="results",
        help="Directory to save plots (default: results)"
    )
    parser.add_argument(
        "--show", action="store_true",
        help="Display plots interactively"
    )
    parser.add_argument(
        "--seed", "-s", type=int, default=DEFAULT_SEED,
        help=f"Random seed (default: {DEFAULT_SEED})"
    )

    args = parser.parse_args()

    generate_all_plots(seed=args.seed, output_dir=args.output_dir, show=args.show)


if __name__ == "__main__":
    main()
