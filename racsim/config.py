"""
Configuration module for the random-access contention simulator.

This module stores the default scenario parameters and the validated
``SimulationConfig`` consumed by the simulation driver. The defaults
describe a single NB-IoT style cell: a few hundred machine-type devices
contending for a small pool of preambles.

Validation happens when the config is constructed, so an invalid
parameter set is rejected before any slot is simulated.
"""

from dataclasses import dataclass
from typing import Tuple


# =============================================================================
# Algorithm Names
# =============================================================================

ALGORITHMS: Tuple[str, ...] = ("BEB", "LILD", "Adaptive")
"""Canonical names of the supported backoff algorithms, in report order."""


# =============================================================================
# Simulation Constants
# =============================================================================

DEFAULT_NUM_DEVICES: int = 300
"""Number of devices contending in the cell."""

DEFAULT_NUM_SLOTS: int = 1000
"""Number of random-access slots simulated per algorithm."""

DEFAULT_MIN_CW: int = 24
"""Minimum contention window size."""

DEFAULT_MAX_CW: int = 1024
"""Maximum contention window size."""

DEFAULT_NUM_PREAMBLES: int = 10
"""Number of available preambles (typical for NB-IoT)."""

DEFAULT_SEED: int = 42
"""Default base seed for reproducible runs."""


class ConfigurationError(ValueError):
    """Raised when simulation parameters are invalid."""


def canonical_algorithm_name(name: str) -> str:
    """
    Map a case-insensitive algorithm name onto its canonical spelling.

    Raises:
        ValueError: If the name is not one of ALGORITHMS
    """
    for candidate in ALGORITHMS:
        if candidate.lower() == name.lower():
            return candidate
    raise ValueError(
        f"Unknown algorithm: {name}. "
        f"Available: {list(ALGORITHMS)}"
    )


@dataclass(frozen=True)
class SimulationConfig:
    """
    Scalar parameters of one comparison run.

    Attributes:
        num_devices: Fixed device population
        num_slots: Number of slots simulated per algorithm
        min_cw: Minimum contention window
        max_cw: Maximum contention window
        num_preambles: Preambles available per slot
        algorithms: Algorithms to compare, in report order

    Raises:
        ConfigurationError: On construction, if any parameter is invalid
    """
    num_devices: int = DEFAULT_NUM_DEVICES
    num_slots: int = DEFAULT_NUM_SLOTS
    min_cw: int = DEFAULT_MIN_CW
    max_cw: int = DEFAULT_MAX_CW
    num_preambles: int = DEFAULT_NUM_PREAMBLES
    algorithms: Tuple[str, ...] = ALGORITHMS

    def __post_init__(self) -> None:
        if self.num_devices < 1:
            raise ConfigurationError(f"num_devices must be >= 1, got {self.num_devices}")
        if self.num_slots < 1:
            raise ConfigurationError(f"num_slots must be >= 1, got {self.num_slots}")
        if self.min_cw <= 0:
            raise ConfigurationError(f"min_cw must be >= 1, got {self.min_cw}")
        if self.max_cw < self.min_cw:
            raise ConfigurationError(
                f"max_cw must be >= min_cw ({self.min_cw}), got {self.max_cw}"
            )
        if self.num_preambles < 1:
            raise ConfigurationError(f"num_preambles must be >= 1, got {self.num_preambles}")

        if not self.algorithms:
            raise ConfigurationError("algorithms must not be empty")

        # Normalize spelling so downstream lookups and reports agree
        try:
            names = tuple(canonical_algorithm_name(a) for a in self.algorithms)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        if len(set(names)) != len(names):
            raise ConfigurationError(f"algorithms must not repeat, got {list(self.algorithms)}")

        # Frozen dataclass: bypass __setattr__ for the normalized tuple
        object.__setattr__(self, "algorithms", names)
