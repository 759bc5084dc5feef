# File: parker/infrastructure/messaging.py
"""
Messaging Infrastructure for the Parker application

In-process publish/subscribe for domain events. The application service
drains events from the allocation manager after each operation and hands
them to the bus; handlers react (logging, auditing, tests).

Handler failures are logged and never propagate back into the operation
that raised the event.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Dict, List, Type
import logging

from ..domain.models import (
    DomainEvent, ParkingLotCreatedEvent, VehicleLeftEvent, VehicleParkedEvent
)


class EventType(str, Enum):
    """Domain event types"""
    PARKING_LOT_CREATED = "parking_lot_created"
    VEHICLE_PARKED = "vehicle_parked"
    VEHICLE_LEFT = "vehicle_left"


_EVENT_TYPES: Dict[Type[DomainEvent], EventType] = {
    ParkingLotCreatedEvent: EventType.PARKING_LOT_CREATED,
    VehicleParkedEvent: EventType.VEHICLE_PARKED,
    VehicleLeftEvent: EventType.VEHICLE_LEFT,
}


def event_type_of(event: DomainEvent) -> EventType:
    try:
        return _EVENT_TYPES[type(event)]
    except KeyError:
        raise ValueError(f"Unknown domain event: {event.__class__.__name__}") from None


# ============================================================================
# EVENT HANDLERS
# ============================================================================

class EventHandler(ABC):
    """Abstract base class for event handlers"""

    @abstractmethod
    def handle(self, event: DomainEvent) -> None:
        """Handle a domain event"""
        pass

    def can_handle(self, event: DomainEvent) -> bool:
        return True


class LoggingEventHandler(EventHandler):
    """Writes every event it receives to the log"""

    def __init__(self, level: int = logging.INFO):
        self.level = level
        self._logger = logging.getLogger(self.__class__.__name__)

    def handle(self, event: DomainEvent) -> None:
        self._logger.log(self.level, f"{event_type_of(event).value}: {event.to_dict()}")


class RecordingEventHandler(EventHandler):
    """Keeps every event it receives, in order"""

    def __init__(self):
        self.events: List[DomainEvent] = []

    def handle(self, event: DomainEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()


# ============================================================================
# EVENT BUS (In-memory)
# ============================================================================

class EventBus:
    """
    In-memory event bus for intra-process event publishing

    Handlers are called synchronously, in subscription order.
    """

    def __init__(self):
        self._subscribers: Dict[EventType, List[EventHandler]] = {}
        self._logger = logging.getLogger(self.__class__.__name__)

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """Subscribe to events of a specific type"""
        handlers = self._subscribers.setdefault(event_type, [])
        if handler not in handlers:
            handlers.append(handler)
            self._logger.debug(f"Subscribed {handler.__class__.__name__} to {event_type.value}")

    def subscribe_all(self, handler: EventHandler) -> None:
        for event_type in EventType:
            self.subscribe(event_type, handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        handlers = self._subscribers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            self._logger.debug(f"Unsubscribed {handler.__class__.__name__} from {event_type.value}")

    def publish(self, event: DomainEvent) -> None:
        """Publish an event to all subscribers"""
        event_type = event_type_of(event)
        self._logger.debug(f"Publishing event: {event_type.value} (ID: {event.event_id})")

        for handler in list(self._subscribers.get(event_type, [])):
            if not handler.can_handle(event):
                continue
            try:
                handler.handle(event)
            except Exception as e:
                self._logger.error(
                    f"Error handling event {event_type.value} with {handler.__class__.__name__}: {e}",
                    exc_info=True
                )

    def publish_all(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    def clear_subscribers(self) -> None:
        """Drop every subscription"""
        self._subscribers.clear()
