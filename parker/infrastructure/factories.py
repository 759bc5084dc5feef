# File: parker/infrastructure/factories.py
"""
Factories and the application context

The ApplicationContext is built once by `build_context` and handed to every
command. It holds the configuration, the event bus and the lot currently in
use; there is no process-wide registry.
"""

from dataclasses import dataclass, field
from typing import Optional
import logging

from ..application.parking_service import IParkingService, ParkingService
from ..config import ParkerConfig
from ..domain.exceptions import LotNotCreatedError
from ..domain.strategies import PerHourPricingStrategy, PricingStrategy
from .messaging import EventBus, LoggingEventHandler


class PricingStrategyFactory:
    """Creates the pricing strategy described by the configuration"""

    def __init__(self, config: ParkerConfig):
        self.config = config

    def create(self) -> PricingStrategy:
        pricing = self.config.pricing
        return PerHourPricingStrategy(
            flat_rate_charge=pricing.flat_rate_charge,
            flat_rate_hours=pricing.flat_rate_hours,
            per_hour_charge=pricing.per_hour_charge,
        )


class ServiceFactory:
    """Creates parking services wired from one configuration and event bus"""

    def __init__(self, config: ParkerConfig, event_bus: EventBus):
        self.config = config
        self.event_bus = event_bus
        self.pricing_factory = PricingStrategyFactory(config)
        self.logger = logging.getLogger(self.__class__.__name__)

    def create_parking_service(self, capacity: int) -> ParkingService:
        return ParkingService.create_lot(
            capacity,
            pricing_strategy=self.pricing_factory.create(),
            event_bus=self.event_bus,
            verify_invariants=self.config.verify_invariants,
        )


@dataclass
class ApplicationContext:
    """Everything a command needs, passed explicitly"""
    config: ParkerConfig
    event_bus: EventBus
    service_factory: ServiceFactory
    service: Optional[IParkingService] = field(default=None)

    def create_lot(self, capacity: int) -> ParkingService:
        """Create a lot and make it the current one, replacing any previous lot"""
        service = self.service_factory.create_parking_service(capacity)
        if self.service is not None:
            self.service_factory.logger.warning(
                f"Replacing parking lot {self.service.lot_id} with {service.lot_id}"
            )
        self.service = service
        return service

    def require_service(self) -> IParkingService:
        if self.service is None:
            raise LotNotCreatedError()
        return self.service


def build_context(config: Optional[ParkerConfig] = None, log_events: bool = True) -> ApplicationContext:
    """Build a fresh context; events are logged at INFO unless log_events is False"""
    config = config or ParkerConfig()
    event_bus = EventBus()
    if log_events:
        event_bus.subscribe_all(LoggingEventHandler())
    return ApplicationContext(
        config=config,
        event_bus=event_bus,
        service_factory=ServiceFactory(config, event_bus),
    )
