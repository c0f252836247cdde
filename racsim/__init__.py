"""
Random-Access Contention Simulator

A slotted simulator for comparing contention-window backoff policies on
a preamble-based random-access channel (e.g. NB-IoT / LTE-M RACH).

Key Components:
    - config: Scenario defaults and validated SimulationConfig
    - device: Per-device contention state
    - backoff: Window control policies (BEB, LILD, Adaptive)
    - resolver: Preamble assignment and collision resolution
    - simulator: Slot loop and multi-algorithm comparison
    - metrics: Throughput, fairness, access delay, collision probability
    - plotter: Visualization utilities

Usage:
    # Run full comparison
    python -m racsim.main

    # Generate plots
    python -m racsim.plotter

    # Run tests
    pytest racsim/tests/
"""

from racsim.config import (
    ALGORITHMS,
    ConfigurationError,
    SimulationConfig,
)

from racsim.device import (
    Device,
    DeviceState,
    DeviceStore,
)

from racsim.backoff import (
    BackoffController,
    BEBController,
    LILDController,
    AdaptiveController,
    create_controller,
    round_half_up,
)

from racsim.resolver import (
    CollisionResolver,
    SlotOutcome,
)

from racsim.metrics import (
    RunMetrics,
    compute_metrics,
    jain_fairness_index,
)

from racsim.simulator import (
    Simulator,
    run_simulation,
    compare_algorithms,
    derive_seed,
)

__version__ = "0.1.0"

__all__ = [
    # Config
    "ALGORITHMS",
    "ConfigurationError",
    "SimulationConfig",
    # Devices
    "Device",
    "DeviceState",
    "DeviceStore",
    # Backoff
    "BackoffController",
    "BEBController",
    "LILDController",
    "AdaptiveController",
    "create_controller",
    "round_half_up",
    # Resolver
    "CollisionResolver",
    "SlotOutcome",
    # Metrics
    "RunMetrics",
    "compute_metrics",
    "jain_fairness_index",
    # Simulator
    "Simulator",
    "run_simulation",
    "compare_algorithms",
    "derive_seed",
]
