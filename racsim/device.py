"""
Device state module for the random-access contention simulator.

Every device carries its own contention window and backoff timer. A
device transmits only when its timer reaches zero, and it leaves the
contention for good after its first successful transmission.

At any slot boundary a device is in exactly one of three states:
    - NOT_READY: still counting down (timer > 0)
    - READY: timer expired, will transmit this slot
    - DONE: already transmitted successfully
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional, Sequence
import random


class DeviceState(Enum):
    """Contention state of a device at a slot boundary."""
    NOT_READY = auto()
    READY = auto()
    DONE = auto()


@dataclass
class Device:
    """
    A single device taking part in random access.

    Attributes:
        device_id: Stable 0-based identity
        contention_window: Current CW, kept within [min_cw, max_cw]
        backoff_timer: Slots left before the next transmission attempt
        transmission_count: Number of successful transmissions
        cumulative_delay: Sum of slot indices of successful transmissions
        has_succeeded: Whether the device is done contending
    """
    device_id: int
    contention_window: int
    backoff_timer: int = 0
    transmission_count: int = 0
    cumulative_delay: int = 0
    has_succeeded: bool = False

    @property
    def state(self) -> DeviceState:
        if self.has_succeeded:
            return DeviceState.DONE
        if self.backoff_timer == 0:
            return DeviceState.READY
        return DeviceState.NOT_READY

    @property
    def is_ready(self) -> bool:
        return self.state is DeviceState.READY

    def record_success(self, slot: int) -> None:
        """Mark a successful transmission in the given 1-based slot."""
        self.transmission_count += 1
        self.cumulative_delay += slot
        self.has_succeeded = True


class DeviceStore:
    """
    Fixed population of devices for a single algorithm run.

    The store is created fresh for each run. Devices start with the
    minimum contention window and a timer drawn uniformly from
    [0, min_cw - 1].
    """

    def __init__(
        self,
        num_devices: int,
        min_cw: int,
        rng: random.Random,
        initial_timers: Optional[Sequence[int]] = None
    ) -> None:
        """
        Create the device population.

        Args:
            num_devices: Number of devices
            min_cw: Initial contention window for every device
            rng: Random generator used for the initial timers
            initial_timers: Forced timers, one per device (skips the draw)

        Raises:
            ValueError: If initial_timers has the wrong length or a value
                outside [0, min_cw - 1]
        """
        if initial_timers is not None:
            if len(initial_timers) != num_devices:
                raise ValueError(
                    f"Expected {num_devices} initial timers, got {len(initial_timers)}"
                )
            for timer in initial_timers:
                if not 0 <= timer <= min_cw - 1:
                    raise ValueError(
                        f"Initial timer must be in [0, {min_cw - 1}], got {timer}"
                    )
            timers = list(initial_timers)
        else:
            timers = [rng.randint(0, min_cw - 1) for _ in range(num_devices)]

        self._devices: List[Device] = [
            Device(device_id=i, contention_window=min_cw, backoff_timer=timer)
            for i, timer in enumerate(timers)
        ]

    def ready_devices(self) -> List[Device]:
        """Snapshot of devices that transmit this slot, by ascending id."""
        return [d for d in self._devices if d.is_ready]

    @property
    def transmission_counts(self) -> List[int]:
        return [d.transmission_count for d in self._devices]

    @property
    def cumulative_delays(self) -> List[int]:
        return [d.cumulative_delay for d in self._devices]

    def __iter__(self) -> Iterator[Device]:
        return iter(self._devices)

    def __len__(self) -> int:
        return len(self._devices)

    def __getitem__(self, device_id: int) -> Device:
        return self._devices[device_id]
