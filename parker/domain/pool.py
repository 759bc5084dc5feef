# File: parker/domain/pool.py
"""
Free slot id pool

A bounded binary min-heap of free slot ids. The root is always the slot
nearest to the entrance (the lowest id). A membership set mirrors the heap
contents so that range and duplicate checks on reinsertion are O(1).

Bounds:
- the pool never holds more than `capacity` ids
- every id lies in [1, capacity]
- no id appears twice

Any operation that would break a bound raises a PoolInvariantViolation
subclass and leaves the pool exactly as it was.
"""

import logging
from typing import FrozenSet, Iterator, List, Set

from .exceptions import (
    PoolEmptyError, PoolFullError, OutOfRangeError, DuplicateIdError
)
from .models import validate_capacity


logger = logging.getLogger(__name__)


class SlotIdPool:
    """
    Min-priority pool of free slot ids

    Backed by a list laid out as an implicit binary heap: the parent of
    index i is (i - 1) // 2, its children are 2i + 1 and 2i + 2.
    """

    def __init__(self, capacity: int):
        self._capacity = validate_capacity(capacity)
        # 1..capacity in ascending order already satisfies the heap property
        self._heap: List[int] = list(range(1, capacity + 1))
        self._members: Set[int] = set(self._heap)

    @property
    def capacity(self) -> int:
        return self._capacity

    def is_empty(self) -> bool:
        return not self._heap

    def is_full(self) -> bool:
        return len(self._heap) == self._capacity

    def __len__(self) -> int:
        return len(self._heap)

    def __contains__(self, slot_id: object) -> bool:
        return slot_id in self._members

    def __iter__(self) -> Iterator[int]:
        """Iterate the free ids in ascending order (does not consume the pool)"""
        return iter(sorted(self._members))

    def __repr__(self) -> str:
        return f"SlotIdPool(capacity={self._capacity}, free={len(self._heap)})"

    # ========================================================================
    # PUBLIC OPERATIONS
    # ========================================================================

    def peek(self) -> int:
        """Return the lowest free id without removing it"""
        if self.is_empty():
            raise PoolEmptyError("Slot pool is empty")
        return self._heap[0]

    def extract_min(self) -> int:
        """
        Remove and return the lowest free id
        Raises: PoolEmptyError if no ids remain
        """
        if self.is_empty():
            raise PoolEmptyError("Slot pool is empty")

        slot_id = self._heap[0]
        self._remove_root()
        self._members.discard(slot_id)

        logger.debug(f"Extracted slot id {slot_id} ({len(self._heap)} free)")
        return slot_id

    def insert(self, slot_id: int) -> None:
        """
        Return a previously extracted id to the pool

        Raises:
            PoolFullError: the pool already holds `capacity` ids
            OutOfRangeError: the id is outside [1, capacity]
            DuplicateIdError: the id is already free
        """
        if self.is_full():
            raise PoolFullError(f"Slot pool is at its full capacity of {self._capacity}")

        if isinstance(slot_id, bool) or not isinstance(slot_id, int) \
                or slot_id < 1 or slot_id > self._capacity:
            raise OutOfRangeError(
                f"Accepted ids are in the range of [1, {self._capacity}], got: {slot_id!r}"
            )

        if slot_id in self._members:
            raise DuplicateIdError(f"ID {slot_id} is already present in the pool")

        self._append(slot_id)
        self._members.add(slot_id)

        logger.debug(f"Returned slot id {slot_id} ({len(self._heap)} free)")

    def snapshot(self) -> FrozenSet[int]:
        """Current content set, for invariant checks"""
        return frozenset(self._members)

    # ========================================================================
    # HEAP INTERNALS
    # ========================================================================

    @staticmethod
    def _parent(index: int) -> int:
        return (index - 1) // 2

    @staticmethod
    def _left(index: int) -> int:
        return 2 * index + 1

    @staticmethod
    def _right(index: int) -> int:
        return 2 * index + 2

    def _swap(self, i: int, j: int) -> None:
        self._heap[i], self._heap[j] = self._heap[j], self._heap[i]

    def _remove_root(self) -> None:
        """Move the last element to the root and sift it down"""
        heap = self._heap
        self._swap(0, len(heap) - 1)
        heap.pop()

        size = len(heap)
        current = 0
        while True:
            left = self._left(current)
            if left >= size:
                break

            smaller = left
            right = self._right(current)
            if right < size and heap[right] < heap[left]:
                smaller = right

            if heap[smaller] < heap[current]:
                self._swap(current, smaller)
                current = smaller
            else:
                break

    def _append(self, slot_id: int) -> None:
        """Append at the bottom and sift up"""
        heap = self._heap
        heap.append(slot_id)

        current = len(heap) - 1
        while current > 0:
            parent = self._parent(current)
            if heap[current] < heap[parent]:
                self._swap(current, parent)
                current = parent
            else:
                break
