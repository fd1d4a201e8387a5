"""
Marker pool.

An arena of reusable marker slots indexed by integer. The pool only grows:
slots unused in a frame are deactivated, never destroyed, and slot i keeps
its identity for the lifetime of the pool.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from models.color import RGBA
from rendering.base import MarkerFactory, MarkerHandle


@dataclass
class MarkerSlot:
    """One pooled marker."""
    index: int
    handle: MarkerHandle
    active: bool = True


class MarkerPool:
    """
    Pool of markers created through a MarkerFactory.

    The pool is owned by a single projector; nothing else may resize or
    reorder it.
    """

    def __init__(self, factory: MarkerFactory):
        self._factory = factory
        self._slots: List[MarkerSlot] = []

    @property
    def factory(self) -> MarkerFactory:
        return self._factory

    @property
    def slots(self) -> Tuple[MarkerSlot, ...]:
        return tuple(self._slots)

    @property
    def active_count(self) -> int:
        return sum(1 for s in self._slots if s.active)

    def __len__(self) -> int:
        return len(self._slots)

    def acquire(self, index: int, color: RGBA) -> MarkerSlot:
        """
        Get slot `index` ready for new data.

        An existing slot is reactivated and re-tinted; slot len(pool) is
        created. Slots must be acquired densely from 0.

        Raises:
            IndexError: If index would leave a gap in the pool.
        """
        if index < len(self._slots):
            slot = self._slots[index]
            if not slot.active:
                self._factory.set_active(slot.handle, True)
                slot.active = True
            self._factory.set_color(slot.handle, color)
            return slot

        if index != len(self._slots):
            raise IndexError(f"Slot {index} requested but pool has {len(self._slots)} slots")

        slot = MarkerSlot(index=index, handle=self._factory.create_marker(color))
        self._slots.append(slot)
        return slot

    def release_from(self, start: int) -> int:
        """
        Deactivate every active slot with index >= start.

        Returns:
            Number of slots deactivated.
        """
        released = 0
        for slot in self._slots[max(start, 0):]:
            if slot.active:
                self._factory.set_active(slot.handle, False)
                slot.active = False
                released += 1
        return released
