# File: parker/domain/aggregates.py
"""
Aggregates for the Parker allocation engine
Following Domain-Driven Design (DDD) Aggregate Pattern

Aggregates:
1. OccupancyRegistry - owns every Slot and the free id pool
2. AllocationManager - aggregate root for park / vacate operations

Key Concepts:
- Slots are only reachable through the registry
- Free ids and occupied ids always partition 1..capacity
- Domain events are raised for parks and departures
"""

from typing import List, Optional, Tuple
import logging
import uuid

from .exceptions import (
    AlreadyParkedError, NotFoundError, OutOfRangeError, RegistryInvariantError
)
from .models import (
    DomainEvent, Slot, Vehicle, VehicleLeftEvent, VehicleParkedEvent,
    validate_capacity
)
from .pool import SlotIdPool


# ============================================================================
# BASE AGGREGATE ROOT
# ============================================================================

class AggregateRoot:
    """
    Base class for all aggregate roots
    Provides identity, domain event collection and versioning
    """

    def __init__(self, id: Optional[str] = None):
        self._id = id or str(uuid.uuid4())
        self._version: int = 1
        self._changes: List[DomainEvent] = []
        self._logger = logging.getLogger(self.__class__.__name__)

    @property
    def id(self) -> str:
        return self._id

    @property
    def version(self) -> int:
        """Incremented after every state change"""
        return self._version

    def _increment_version(self) -> None:
        self._version += 1

    def _add_domain_event(self, event: DomainEvent) -> None:
        self._changes.append(event)
        self._logger.debug(f"Added domain event: {event.__class__.__name__}")

    def clear_events(self) -> List[DomainEvent]:
        """Clear and return all domain events"""
        events = self._changes.copy()
        self._changes.clear()
        return events

    @property
    def has_changes(self) -> bool:
        return len(self._changes) > 0


# ============================================================================
# OCCUPANCY REGISTRY
# ============================================================================

class OccupancyRegistry:
    """
    Owns the fixed-size slot array and the free id pool

    Translates pool-level id operations into slot booking and release, and
    answers occupancy queries. Not thread-safe: callers serialize access.
    """

    def __init__(self, capacity: int):
        self._capacity = validate_capacity(capacity)
        self._slots: List[Slot] = [Slot(slot_id) for slot_id in range(1, capacity + 1)]
        self._pool = SlotIdPool(capacity)
        self._logger = logging.getLogger(self.__class__.__name__)
        self._logger.debug(f"Initialized {capacity} slots")

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def available_count(self) -> int:
        return len(self._pool)

    @property
    def occupied_count(self) -> int:
        return self._capacity - len(self._pool)

    def has_empty_slot(self) -> bool:
        return not self._pool.is_empty()

    def get_slot(self, slot_id: int) -> Slot:
        """Look up a slot by id"""
        if slot_id < 1 or slot_id > self._capacity:
            raise OutOfRangeError(
                f"Accepted ids are in the range of [1, {self._capacity}], got: {slot_id}"
            )
        return self._slots[slot_id - 1]

    def book_slot(self) -> Optional[Slot]:
        """
        Reserve the nearest free slot
        Returns: the Slot with no occupant assigned, or None if the lot is full
        """
        if not self.has_empty_slot():
            return None

        slot_id = self._pool.extract_min()
        return self._slots[slot_id - 1]

    def release(self, slot: Slot) -> None:
        """
        Clear the slot's occupant and return its id to the pool

        The slot must have been booked through this registry. Releasing a
        free slot raises a PoolInvariantViolation from the pool (PoolFullError
        when every slot is free, DuplicateIdError otherwise) and changes nothing.
        """
        if self.get_slot(slot.id) is not slot:
            raise RegistryInvariantError(f"Slot {slot.id} does not belong to this registry")

        # Pool first: if it rejects the id the occupant is left untouched
        self._pool.insert(slot.id)
        slot.occupant = None

    def find_by_registration(self, registration_number: str) -> Optional[Slot]:
        # Registration numbers are unique among parked vehicles, so the first hit is the only one
        for slot in self._slots:
            if slot.occupant is not None and slot.occupant.registration_number == registration_number:
                return slot
        return None

    def occupied_snapshot(self) -> List[Tuple[int, str]]:
        """All occupied slots as (slot id, registration number), ascending by id"""
        return [
            (slot.id, slot.occupant.registration_number)
            for slot in self._slots
            if slot.occupant is not None
        ]

    def free_ids(self) -> List[int]:
        return list(self._pool)

    def check_invariants(self) -> None:
        """
        Verify that free and occupied ids partition 1..capacity, that every
        occupant points back at its slot and that no plate is parked twice.
        Raises: RegistryInvariantError
        """
        free = self._pool.snapshot()
        occupied = {slot.id for slot in self._slots if slot.is_occupied}
        everything = set(range(1, self._capacity + 1))

        overlap = free & occupied
        if overlap:
            raise RegistryInvariantError(f"Slot ids both free and occupied: {sorted(overlap)}")

        missing = everything - (free | occupied)
        if missing:
            raise RegistryInvariantError(f"Slot ids neither free nor occupied: {sorted(missing)}")

        if len(free) + len(occupied) != self._capacity:
            raise RegistryInvariantError(
                f"Free ({len(free)}) + occupied ({len(occupied)}) != capacity ({self._capacity})"
            )

        seen = set()
        for slot in self._slots:
            vehicle = slot.occupant
            if vehicle is None:
                continue
            if vehicle.parked_at is not slot:
                raise RegistryInvariantError(
                    f"Vehicle {vehicle.registration_number} does not point back at slot {slot.id}"
                )
            if vehicle.registration_number in seen:
                raise RegistryInvariantError(
                    f"Registration number {vehicle.registration_number} is parked twice"
                )
            seen.add(vehicle.registration_number)


# ============================================================================
# ALLOCATION MANAGER AGGREGATE
# ============================================================================

class AllocationManager(AggregateRoot):
    """
    Aggregate Root: the vehicle-facing API of a lot

    Binds vehicles to slots handed out by the registry and enforces one
    active parking session per registration number.
    """

    def __init__(self, registry: OccupancyRegistry, id: Optional[str] = None):
        super().__init__(id)
        self.registry = registry

    def park(self, registration_number: str) -> Optional[int]:
        """
        Park a vehicle in the nearest free slot
        Returns: the slot id, or None if the lot is full (nothing changes)
        Raises: ValidationError for an empty registration number,
                AlreadyParkedError if the plate already holds a slot
        """
        vehicle = Vehicle(registration_number)

        existing = self.registry.find_by_registration(vehicle.registration_number)
        if existing is not None:
            raise AlreadyParkedError(vehicle.registration_number, existing.id)

        slot = self.registry.book_slot()
        if slot is None:
            self._logger.info(f"Lot full, cannot park {vehicle.registration_number}")
            return None

        slot.occupant = vehicle
        vehicle.parked_at = slot

        self._increment_version()
        self._add_domain_event(VehicleParkedEvent(vehicle.registration_number, slot.id))
        self._logger.info(f"Parked {vehicle.registration_number} at slot {slot.id}")
        return slot.id

    def vacate(self, registration_number: str) -> int:
        """
        Free the slot held by the given registration number
        Returns: the freed slot id
        Raises: NotFoundError if no such vehicle is parked
        """
        slot = self.registry.find_by_registration(registration_number)
        if slot is None:
            raise NotFoundError(registration_number)

        vehicle = slot.occupant
        self.registry.release(slot)
        vehicle.parked_at = None

        self._increment_version()
        self._add_domain_event(VehicleLeftEvent(registration_number, slot.id))
        self._logger.info(f"Vacated slot {slot.id} held by {registration_number}")
        return slot.id

    def status(self) -> List[Tuple[int, str]]:
        return self.registry.occupied_snapshot()
