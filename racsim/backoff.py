"""
Backoff control module for the random-access contention simulator.

This module implements the contention-window policies compared by the
simulator. Each policy reacts to two events for a single device:
a successful transmission and a collision. After adjusting the
contention window (always clamped to [min_cw, max_cw]) the device's
backoff timer is redrawn uniformly from [0, contention_window - 1].

Policies Implemented:
    1. BEBController: Binary Exponential Backoff (double / reset)
    2. LILDController: Linear Increase Linear Decrease (+1 / -1)
    3. AdaptiveController: Proportional increase (70%) / decrease (10%)
"""

from abc import ABC, abstractmethod
from typing import Dict, Type
import math
import random

from racsim.config import canonical_algorithm_name
from racsim.device import Device


def round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves away from zero.

    Python's built-in round() uses banker's rounding (round(2.5) == 2),
    which would make window sizes differ from other implementations.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(-2.5)
        -3
    """
    if value >= 0:
        return int(math.floor(value + 0.5))
    return -int(math.floor(-value + 0.5))


class BackoffController(ABC):
    """
    Abstract base class for contention-window policies.

    A controller only ever touches the device passed to it. Subclasses
    provide the raw window update; clamping and the timer redraw are
    shared here.

    Attributes:
        min_cw: Lower bound on the contention window
        max_cw: Upper bound on the contention window
        rng: Random generator for timer redraws
    """

    def __init__(self, min_cw: int, max_cw: int, rng: random.Random) -> None:
        self.min_cw = min_cw
        self.max_cw = max_cw
        self.rng = rng

    def on_success(self, device: Device) -> None:
        """Apply the success rule and redraw the device's timer."""
        self._apply(device, self._window_after_success(device.contention_window))

    def on_collision(self, device: Device) -> None:
        """Apply the collision rule and redraw the device's timer."""
        self._apply(device, self._window_after_collision(device.contention_window))

    def _apply(self, device: Device, window: int) -> None:
        device.contention_window = max(self.min_cw, min(window, self.max_cw))
        device.backoff_timer = self.rng.randint(0, device.contention_window - 1)

    @abstractmethod
    def _window_after_success(self, window: int) -> int:
        pass

    @abstractmethod
    def _window_after_collision(self, window: int) -> int:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Canonical algorithm name."""
        pass


class BEBController(BackoffController):
    """Binary Exponential Backoff: reset on success, double on collision."""

    def _window_after_success(self, window: int) -> int:
        return self.min_cw

    def _window_after_collision(self, window: int) -> int:
        return min(window * 2, self.max_cw)

    @property
    def name(self) -> str:
        return "BEB"


class LILDController(BackoffController):
    """Linear Increase Linear Decrease: one step either way."""

    def _window_after_success(self, window: int) -> int:
        return max(self.min_cw, window - 1)

    def _window_after_collision(self, window: int) -> int:
        return min(window + 1, self.max_cw)

    @property
    def name(self) -> str:
        return "LILD"


class AdaptiveController(BackoffController):
    """
    Proportional window control.

    Grows the window by 70% of its size on collision and shrinks it by
    10% on success, so congested devices back off quickly while recovery
    stays gradual.
    """

    INCREASE_FACTOR: float = 0.7
    DECREASE_FACTOR: float = 0.1

    def _window_after_success(self, window: int) -> int:
        return max(self.min_cw, window - round_half_up(window * self.DECREASE_FACTOR))

    def _window_after_collision(self, window: int) -> int:
        return min(window + round_half_up(window * self.INCREASE_FACTOR), self.max_cw)

    @property
    def name(self) -> str:
        return "Adaptive"


# =============================================================================
# Factory function for controller creation
# =============================================================================

_CONTROLLERS: Dict[str, Type[BackoffController]] = {
    "BEB": BEBController,
    "LILD": LILDController,
    "Adaptive": AdaptiveController,
}


def create_controller(
    algorithm: str,
    min_cw: int,
    max_cw: int,
    rng: random.Random
) -> BackoffController:
    """
    Create a backoff controller by algorithm name.

    Args:
        algorithm: "BEB", "LILD" or "Adaptive" (case-insensitive)
        min_cw: Minimum contention window
        max_cw: Maximum contention window
        rng: Random generator for timer redraws

    Returns:
        Configured controller instance

    Raises:
        ValueError: If the algorithm is unknown
    """
    return _CONTROLLERS[canonical_algorithm_name(algorithm)](min_cw, max_cw, rng)
