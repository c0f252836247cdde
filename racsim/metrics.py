"""
Metrics aggregation for the random-access contention simulator.

Metrics are computed once, after a run completes, from the counters the
driver accumulated:
    - throughput: successful transmissions per slot
    - fairness_index: Jain's index over per-device success counts
    - avg_access_delay: mean slot of success over devices that succeeded
    - collision_probability: collision events per slot

A run in which nobody succeeds is reported with fairness 0.0 and an
access delay of NaN. NaN marks "no measurement" and must never be
replaced with 0, which would read as an instantaneous access.
"""

from dataclasses import dataclass, fields
from typing import Sequence, Tuple
import math


@dataclass(frozen=True)
class RunMetrics:
    """
    Aggregated metrics from one algorithm run.

    Attributes:
        algorithm: Backoff algorithm name
        throughput: Successes per slot
        fairness_index: Jain's fairness index in [0, 1]
        avg_access_delay: Mean access delay in slots (NaN if no success)
        collision_probability: Collisions per slot
        successes: Total successful transmissions
        collisions: Total collision events (one per colliding preamble)
        idle_slots: Slots in which no device transmitted
        num_slots: Slots simulated
        num_devices: Device population
    """
    algorithm: str
    throughput: float
    fairness_index: float
    avg_access_delay: float
    collision_probability: float
    successes: int
    collisions: int
    idle_slots: int
    num_slots: int
    num_devices: int

    @property
    def has_successes(self) -> bool:
        return self.successes > 0

    def _key(self) -> tuple:
        # NaN marks a missing delay; two missing delays are the same result
        return tuple(
            None if isinstance(value, float) and math.isnan(value) else value
            for value in (getattr(self, f.name) for f in fields(self))
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RunMetrics):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """The (throughput, fairness, delay, collision probability) tuple."""
        return (
            self.throughput,
            self.fairness_index,
            self.avg_access_delay,
            self.collision_probability,
        )

    def __str__(self) -> str:
        delay = "n/a" if math.isnan(self.avg_access_delay) else f"{self.avg_access_delay:.2f}"
        return (
            f"{self.algorithm}: "
            f"Throughput: {self.throughput:.4f}, "
            f"Fairness: {self.fairness_index:.4f}, "
            f"Avg Delay: {delay} slots, "
            f"Collision Prob: {self.collision_probability:.4f}"
        )


def jain_fairness_index(values: Sequence[int]) -> float:
    """
    Jain's fairness index: (sum x)^2 / (n * sum x^2).

    Returns 0.0 when every value is zero.

    Example:
        >>> jain_fairness_index([1, 1, 1, 1])
        1.0
        >>> jain_fairness_index([1, 0])
        0.5
    """
    total = sum(values)
    squares = sum(v * v for v in values)
    if squares == 0:
        return 0.0
    return (total * total) / (len(values) * squares)


def mean_access_delay(
    transmission_counts: Sequence[int],
    cumulative_delays: Sequence[int]
) -> float:
    """Mean cumulative delay over devices with at least one success, else NaN."""
    delays = [
        delay for count, delay in zip(transmission_counts, cumulative_delays)
        if count > 0
    ]
    if not delays:
        return float("nan")
    return sum(delays) / len(delays)


def compute_metrics(
    algorithm: str,
    successes: int,
    collisions: int,
    num_slots: int,
    transmission_counts: Sequence[int],
    cumulative_delays: Sequence[int],
    idle_slots: int = 0
) -> RunMetrics:
    """
    Derive RunMetrics from the counters of a completed run.

    Args:
        algorithm: Backoff algorithm name
        successes: Total successful transmissions
        collisions: Total collision events
        num_slots: Slots simulated (denominator for rates)
        transmission_counts: Per-device success counts
        cumulative_delays: Per-device sums of success slot indices
        idle_slots: Slots with no transmission

    Returns:
        RunMetrics for the run
    """
    return RunMetrics(
        algorithm=algorithm,
        throughput=successes / num_slots,
        fairness_index=jain_fairness_index(transmission_counts),
        avg_access_delay=mean_access_delay(transmission_counts, cumulative_delays),
        collision_probability=collisions / num_slots,
        successes=successes,
        collisions=collisions,
        idle_slots=idle_slots,
        num_slots=num_slots,
        num_devices=len(transmission_counts),
    )
