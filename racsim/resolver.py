"""
Preamble assignment and collision resolution for one random-access slot.

Each slot, every ready device picks a preamble uniformly at random. A
preamble chosen by exactly one device carries a successful transmission;
a preamble chosen by two or more devices is a single collision event,
and every device involved backs off.

The ready set is snapshotted at the start of the slot, so the backoff
controller redrawing a timer to zero cannot make a device transmit twice
in the same slot.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List
import random

from racsim.backoff import BackoffController
from racsim.device import Device, DeviceStore


@dataclass(frozen=True)
class SlotOutcome:
    """
    Result of resolving one slot.

    Attributes:
        slot: 1-based slot index
        ready: Number of devices that transmitted
        successes: Number of singleton preambles
        collisions: Number of preambles with two or more devices
    """
    slot: int
    ready: int
    successes: int
    collisions: int

    @property
    def is_idle(self) -> bool:
        return self.ready == 0


class CollisionResolver:
    """
    Resolves contention among ready devices on a shared preamble pool.

    Attributes:
        store: Device population, mutated in place
        controller: Backoff policy applied on success and collision
        num_preambles: Size of the preamble pool
        rng: Random generator for preamble draws
    """

    def __init__(
        self,
        store: DeviceStore,
        controller: BackoffController,
        num_preambles: int,
        rng: random.Random
    ) -> None:
        self.store = store
        self.controller = controller
        self.num_preambles = num_preambles
        self.rng = rng

    def assign_preambles(self, devices: List[Device]) -> Dict[int, List[Device]]:
        """
        Draw one preamble per device and group devices by preamble.

        Draws happen in the order of ``devices``; groups are returned in
        ascending preamble order.
        """
        groups: Dict[int, List[Device]] = defaultdict(list)
        for device in devices:
            groups[self.rng.randint(1, self.num_preambles)].append(device)
        return {preamble: groups[preamble] for preamble in sorted(groups)}

    def resolve(self, slot: int) -> SlotOutcome:
        """
        Run one slot: transmit, classify, back off, count down.

        Args:
            slot: 1-based slot index (used as the access delay)

        Returns:
            SlotOutcome for this slot
        """
        ready = self.store.ready_devices()
        successes = 0
        collisions = 0

        for group in self.assign_preambles(ready).values():
            if len(group) == 1:
                device = group[0]
                device.record_success(slot)
                self.controller.on_success(device)
                successes += 1
            else:
                collisions += 1
                for device in group:
                    self.controller.on_collision(device)

        # Devices that transmitted already got a fresh timer this slot
        transmitted = {d.device_id for d in ready}
        for device in self.store:
            if device.has_succeeded or device.device_id in transmitted:
                continue
            if device.backoff_timer > 0:
                device.backoff_timer -= 1

        return SlotOutcome(
            slot=slot,
            ready=len(ready),
            successes=successes,
            collisions=collisions
        )
