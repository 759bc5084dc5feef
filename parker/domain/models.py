# File: parker/domain/models.py
"""
Domain Models for the Parker allocation engine

This module contains:
1. Entities: Slot and Vehicle, bound to each other while a vehicle is parked
2. Value Objects: ParkingCharge, the transient result of a departure
3. Domain Events: events raised by the allocation manager
4. Validation helpers shared by the domain services

Slots are owned by the OccupancyRegistry and never exist outside it.
Vehicles live only as long as their parking session.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
import uuid

from .exceptions import ValidationError


# ============================================================================
# DOMAIN ENTITIES
# ============================================================================

class Slot:
    """
    Entity: one unit of parking capacity

    The id is immutable and doubles as the array index inside the registry
    (id k lives at offset k - 1).
    """

    __slots__ = ("_id", "occupant")

    def __init__(self, id: int):
        if id < 1:
            raise ValidationError(f"Slot id must be positive, got: {id}")
        self._id = id
        self.occupant: Optional["Vehicle"] = None

    @property
    def id(self) -> int:
        return self._id

    @property
    def is_occupied(self) -> bool:
        return self.occupant is not None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Slot):
            return False
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(("Slot", self._id))

    def __repr__(self) -> str:
        occupant = self.occupant.registration_number if self.occupant else None
        return f"Slot(id={self._id}, occupant={occupant!r})"


class Vehicle:
    """
    Entity: a parked vehicle identified by its registration number

    `parked_at` is the back-reference to the slot holding the vehicle; it is
    set iff the vehicle is parked.
    """

    def __init__(self, registration_number: str):
        self.registration_number = validate_registration_number(registration_number)
        self.parked_at: Optional[Slot] = None

    @property
    def is_parked(self) -> bool:
        return self.parked_at is not None

    def __repr__(self) -> str:
        slot_id = self.parked_at.id if self.parked_at else None
        return f"Vehicle(registration_number={self.registration_number!r}, slot={slot_id})"

    def __str__(self) -> str:
        return self.registration_number


# ============================================================================
# VALUE OBJECTS
# ============================================================================

@dataclass(frozen=True)
class ParkingCharge:
    """
    Value Object: what a departing vehicle owes

    slot_number is the slot the vehicle held at departure.
    """
    registration_number: str
    slot_number: int
    charge: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "registration_number": self.registration_number,
            "slot_number": self.slot_number,
            "charge": self.charge,
        }

    def __iter__(self):
        # Allows `reg, slot, fee = charge`
        return iter((self.registration_number, self.slot_number, self.charge))


# ============================================================================
# DOMAIN EVENTS
# ============================================================================

class DomainEvent(ABC):
    """
    Base class for all domain events
    Events represent something that happened in the lot
    """

    def __init__(self, timestamp: Optional[datetime] = None):
        self.event_id = str(uuid.uuid4())
        self.timestamp = timestamp or datetime.now()

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization"""
        pass

    def __str__(self) -> str:
        return f"{self.__class__.__name__} at {self.timestamp}"


class ParkingLotCreatedEvent(DomainEvent):
    """Event raised when a lot is created"""

    def __init__(self, capacity: int, timestamp: Optional[datetime] = None):
        super().__init__(timestamp)
        self.capacity = capacity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": "parking_lot_created",
            "timestamp": self.timestamp.isoformat(),
            "capacity": self.capacity,
        }


class VehicleParkedEvent(DomainEvent):
    """Event raised when a vehicle is bound to a slot"""

    def __init__(self, registration_number: str, slot_id: int, timestamp: Optional[datetime] = None):
        super().__init__(timestamp)
        self.registration_number = registration_number
        self.slot_id = slot_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": "vehicle_parked",
            "timestamp": self.timestamp.isoformat(),
            "registration_number": self.registration_number,
            "slot_id": self.slot_id,
        }


class VehicleLeftEvent(DomainEvent):
    """Event raised when a vehicle leaves; the charge is attached once computed"""

    def __init__(
        self,
        registration_number: str,
        slot_id: int,
        charge: Optional[int] = None,
        timestamp: Optional[datetime] = None
    ):
        super().__init__(timestamp)
        self.registration_number = registration_number
        self.slot_id = slot_id
        self.charge = charge

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_id": self.event_id,
            "event_type": "vehicle_left",
            "timestamp": self.timestamp.isoformat(),
            "registration_number": self.registration_number,
            "slot_id": self.slot_id,
            "charge": self.charge,
        }


# ============================================================================
# VALIDATION HELPERS
# ============================================================================

def validate_registration_number(registration_number: Any) -> str:
    """
    Registration numbers are opaque to the core: any non-blank string.
    Format checking belongs to the command layer.
    """
    if not isinstance(registration_number, str) or not registration_number.strip():
        raise ValidationError(
            f"Registration number must be a non-empty string, got: {registration_number!r}"
        )
    return registration_number


def validate_capacity(capacity: Any) -> int:
    """Capacity must be a positive integer"""
    if isinstance(capacity, bool) or not isinstance(capacity, int):
        raise ValidationError(f"Capacity must be an integer, got: {capacity!r}")
    if capacity <= 0:
        raise ValidationError(f"Capacity must be greater than 0, got: {capacity}")
    return capacity
