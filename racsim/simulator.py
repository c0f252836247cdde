"""
Core simulation engine for the random-access contention simulator.

This module implements a slotted, discrete-time simulation of a
preamble-based random-access channel. For one backoff algorithm, the
simulator tracks:
    - Device population (contention windows, timers, successes)
    - Global success and collision counters
    - Per-slot outcomes (for idle-slot accounting)

Simulation Approach:
    Time advances one slot at a time for exactly num_slots slots. Each
    slot is fully resolved before the next begins. Every random draw
    comes from a single random.Random owned by the run, so a seed fully
    determines the result.

Comparisons across algorithms are embarrassingly parallel: each run
owns its devices and its generator, and results are simply collected.
"""

from typing import Dict, List, Optional, Sequence
import hashlib
import random

from racsim.backoff import create_controller
from racsim.config import SimulationConfig, canonical_algorithm_name
from racsim.device import DeviceStore
from racsim.metrics import RunMetrics, compute_metrics
from racsim.resolver import CollisionResolver, SlotOutcome


class Simulator:
    """
    Slotted random-access simulator for a single backoff algorithm.

    Attributes:
        algorithm: Canonical backoff algorithm name
        config: Scenario parameters
        rng: Random generator shared by every draw in this run
        store: Device population for this run
        resolver: Per-slot contention resolver
        slot_outcomes: Record of every resolved slot (for analysis)
        successes: Successful transmissions so far
        collisions: Collision events so far
    """

    def __init__(
        self,
        algorithm: str,
        config: SimulationConfig,
        rng: random.Random,
        initial_timers: Optional[Sequence[int]] = None
    ) -> None:
        """
        Initialize the simulator and its device population.

        Args:
            algorithm: "BEB", "LILD" or "Adaptive"
            config: Validated scenario parameters
            rng: Random generator for the whole run
            initial_timers: Optional forced initial backoff timers
        """
        self.algorithm = canonical_algorithm_name(algorithm)
        self.config = config
        self.rng = rng

        self.store = DeviceStore(
            num_devices=config.num_devices,
            min_cw=config.min_cw,
            rng=rng,
            initial_timers=initial_timers
        )
        controller = create_controller(self.algorithm, config.min_cw, config.max_cw, rng)
        self.resolver = CollisionResolver(
            store=self.store,
            controller=controller,
            num_preambles=config.num_preambles,
            rng=rng
        )

        # Run state
        self.slot_outcomes: List[SlotOutcome] = []
        self.successes: int = 0
        self.collisions: int = 0
        self._finished: bool = False

    def step(self, slot: int) -> SlotOutcome:
        """Resolve one slot and accumulate its counters."""
        outcome = self.resolver.resolve(slot)
        self.successes += outcome.successes
        self.collisions += outcome.collisions
        self.slot_outcomes.append(outcome)
        return outcome

    def run(self) -> RunMetrics:
        """
        Execute all slots and return metrics.

        Returns:
            RunMetrics computed once from the final counters

        Raises:
            RuntimeError: If this simulator has already run
        """
        if self._finished:
            raise RuntimeError("Simulator has already run; create a new one")

        for slot in range(1, self.config.num_slots + 1):
            self.step(slot)

        self._finished = True
        return self._compute_metrics()

    @property
    def idle_slots(self) -> int:
        return sum(1 for outcome in self.slot_outcomes if outcome.is_idle)

    def _compute_metrics(self) -> RunMetrics:
        return compute_metrics(
            algorithm=self.algorithm,
            successes=self.successes,
            collisions=self.collisions,
            num_slots=self.config.num_slots,
            transmission_counts=self.store.transmission_counts,
            cumulative_delays=self.store.cumulative_delays,
            idle_slots=self.idle_slots
        )


def derive_seed(seed: int, algorithm: str) -> int:
    """
    Seed for one algorithm's private generator.

    Depends only on the base seed and the algorithm name, so a result
    does not change with the order in which algorithms are listed.
    The result is non-negative and unique per (seed, name) pair, since
    random.Random seeds with abs(n).
    """
    key = f"{seed}:{canonical_algorithm_name(algorithm)}".encode()
    return int.from_bytes(hashlib.sha256(key).digest()[:8], "big")


def run_simulation(
    algorithm: str,
    config: Optional[SimulationConfig] = None,
    seed: Optional[int] = None,
    initial_timers: Optional[Sequence[int]] = None
) -> RunMetrics:
    """
    Convenience function to run a complete simulation.

    Args:
        algorithm: Backoff algorithm name
        config: Scenario parameters (defaults if None)
        seed: Random seed for reproducibility
        initial_timers: Optional forced initial backoff timers

    Returns:
        RunMetrics from the simulation
    """
    if config is None:
        config = SimulationConfig()

    sim = Simulator(
        algorithm=algorithm,
        config=config,
        rng=random.Random(seed),
        initial_timers=initial_timers
    )
    return sim.run()


def _run_single_experiment(args: tuple) -> tuple:
    """
    Worker function for parallel experiment execution.

    Args:
        args: Tuple of (algorithm, config, seed)

    Returns:
        Tuple of (algorithm, metrics)
    """
    algorithm, config, seed = args
    metrics = run_simulation(algorithm=algorithm, config=config, seed=seed)
    return (algorithm, metrics)


def compare_algorithms(
    config: SimulationConfig,
    seed: int = 42,
    parallel: bool = True,
    max_workers: Optional[int] = None
) -> Dict[str, RunMetrics]:
    """
    Run every configured algorithm on the same scenario.

    Uses multiprocessing to run algorithms in parallel. Each run gets
    its own generator seeded by derive_seed, so parallel and sequential
    execution produce identical metrics.

    Args:
        config: Scenario parameters, including the algorithms to compare
        seed: Base random seed
        parallel: Whether to use parallel execution (default: True)
        max_workers: Max parallel workers (default: CPU count)

    Returns:
        Dict mapping algorithm name to metrics, in config order
    """
    experiments = [
        (algorithm, config, derive_seed(seed, algorithm))
        for algorithm in config.algorithms
    ]

    collected: Dict[str, RunMetrics] = {}

    if parallel and len(experiments) > 1:
        from concurrent.futures import ProcessPoolExecutor, as_completed
        import os

        n_workers = max_workers or min(os.cpu_count() or 4, len(experiments))

        with ProcessPoolExecutor(max_workers=n_workers) as executor:
            futures = {executor.submit(_run_single_experiment, exp): exp
                       for exp in experiments}

            for future in as_completed(futures):
                algorithm, metrics = future.result()
                collected[algorithm] = metrics
    else:
        for exp in experiments:
            algorithm, metrics = _run_single_experiment(exp)
            collected[algorithm] = metrics

    # Futures complete in any order; report in config order
    return {algorithm: collected[algorithm] for algorithm in config.algorithms}
