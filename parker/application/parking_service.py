# File: parker/application/parking_service.py
"""
Parking Application Service

The narrow surface the rest of the program uses to talk to a lot:

    service = ParkingService.create_lot(3)
    service.park("KA-01-HH-1234")        # -> 1, or None when full
    service.leave("KA-01-HH-1234", 4)    # -> ParkingCharge(reg, 1, 30)
    service.status()                     # -> [(slot id, reg), ...]

Responsibilities:
1. Wire the registry, allocation manager and pricing strategy of one lot
2. Run every compound operation under a single lock
3. Publish the domain events raised by each operation
4. Let internal invariant violations surface loudly
"""

from typing import List, Optional, Protocol, Tuple
import logging
import threading

from ..domain.aggregates import AllocationManager, OccupancyRegistry
from ..domain.exceptions import PoolInvariantViolation
from ..domain.models import (
    ParkingCharge, ParkingLotCreatedEvent, VehicleLeftEvent, validate_capacity
)
from ..domain.strategies import (
    PerHourPricingStrategy, PricingStrategy, validate_parking_duration
)
from ..infrastructure.messaging import EventBus
from .dtos import LotStatusDTO, SlotStatusDTO


class IParkingService(Protocol):
    """What the command layer needs from the current lot"""

    @property
    def lot_id(self) -> str:
        ...

    def park(self, registration_number: str) -> Optional[int]:
        ...

    def leave(self, registration_number: str, hours_parked: int) -> ParkingCharge:
        ...

    def status(self) -> List[Tuple[int, str]]:
        ...


class ParkingService:
    """
    Application service for a single lot

    The lock is the one mutual-exclusion boundary around the registry's
    book/release pair; nothing below this class is thread-safe.
    """

    def __init__(
        self,
        manager: AllocationManager,
        pricing_strategy: Optional[PricingStrategy] = None,
        event_bus: Optional[EventBus] = None,
        verify_invariants: bool = False
    ):
        self.manager = manager
        self.pricing_strategy = pricing_strategy or PerHourPricingStrategy()
        self.event_bus = event_bus
        self.verify_invariants = verify_invariants
        self._lock = threading.RLock()
        self.logger = logging.getLogger(self.__class__.__name__)

    @classmethod
    def create_lot(
        cls,
        capacity: int,
        pricing_strategy: Optional[PricingStrategy] = None,
        event_bus: Optional[EventBus] = None,
        verify_invariants: bool = False
    ) -> "ParkingService":
        """
        Create a lot with `capacity` slots and return its service
        Raises: ValidationError if capacity is not a positive integer
        """
        capacity = validate_capacity(capacity)
        registry = OccupancyRegistry(capacity)
        service = cls(
            AllocationManager(registry),
            pricing_strategy=pricing_strategy,
            event_bus=event_bus,
            verify_invariants=verify_invariants,
        )
        service.logger.info(f"Created parking lot {service.lot_id} with {capacity} slots")
        service._publish([ParkingLotCreatedEvent(capacity)])
        return service

    @property
    def lot_id(self) -> str:
        return self.manager.id

    @property
    def capacity(self) -> int:
        return self.manager.registry.capacity

    # ========================================================================
    # USE CASES
    # ========================================================================

    def park(self, registration_number: str) -> Optional[int]:
        """
        Park a vehicle
        Returns: the allotted slot id, or None when the lot is full
        Raises: ValidationError, AlreadyParkedError
        """
        with self._lock:
            try:
                slot_id = self.manager.park(registration_number)
            except PoolInvariantViolation:
                self.logger.critical(f"Pool invariant broken while parking {registration_number}", exc_info=True)
                raise
            self._after_operation()
            return slot_id

    def leave(self, registration_number: str, hours_parked: int) -> ParkingCharge:
        """
        Vacate the vehicle's slot and charge for the time parked

        The duration is validated before anything changes; the fee is only
        computed once the vehicle has been found and its slot released.
        Raises: InvalidDurationError, NotFoundError
        """
        hours_parked = validate_parking_duration(hours_parked)

        with self._lock:
            try:
                slot_id = self.manager.vacate(registration_number)
            except PoolInvariantViolation:
                self.logger.critical(f"Pool invariant broken while vacating {registration_number}", exc_info=True)
                raise

            fee = self.pricing_strategy.compute_fee(hours_parked)
            charge = ParkingCharge(registration_number, slot_id, fee)

            self._after_operation(charge)
            self.logger.info(
                f"{registration_number} left slot {slot_id} after {hours_parked}h, charged {fee}"
            )
            return charge

    def status(self) -> List[Tuple[int, str]]:
        """Occupied slots as (slot id, registration number), ascending by id"""
        with self._lock:
            return self.manager.status()

    def lot_status(self) -> LotStatusDTO:
        with self._lock:
            registry = self.manager.registry
            return LotStatusDTO(
                lot_id=self.lot_id,
                capacity=registry.capacity,
                occupied_slots=registry.occupied_count,
                available_slots=registry.available_count,
                slots=[
                    SlotStatusDTO(slot_number=slot_id, registration_number=reg)
                    for slot_id, reg in registry.occupied_snapshot()
                ],
            )

    # ========================================================================
    # INTERNALS
    # ========================================================================

    def _after_operation(self, charge: Optional[ParkingCharge] = None) -> None:
        if self.verify_invariants:
            try:
                self.manager.registry.check_invariants()
            except PoolInvariantViolation:
                self.logger.critical("Registry invariants violated", exc_info=True)
                raise

        events = self.manager.clear_events()
        if charge is not None:
            for event in events:
                if isinstance(event, VehicleLeftEvent) and event.slot_id == charge.slot_number:
                    event.charge = charge.charge
        self._publish(events)

    def _publish(self, events) -> None:
        if self.event_bus is not None and events:
            self.event_bus.publish_all(events)
