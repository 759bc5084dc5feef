"""Domain layer: slot pool, occupancy registry, allocation and pricing."""

from .exceptions import (
    ErrorKind, ParkerError, ValidationError, InvalidDurationError, CommandError,
    ConfigError, NotFoundError, AlreadyParkedError, LotNotCreatedError,
    PoolInvariantViolation, PoolEmptyError, PoolFullError, OutOfRangeError,
    DuplicateIdError, RegistryInvariantError
)
from .models import Slot, Vehicle, ParkingCharge
from .pool import SlotIdPool
from .aggregates import OccupancyRegistry, AllocationManager
from .strategies import PricingStrategy, PerHourPricingStrategy, compute_fee

__all__ = [
    "ErrorKind", "ParkerError", "ValidationError", "InvalidDurationError",
    "CommandError", "ConfigError", "NotFoundError", "AlreadyParkedError",
    "LotNotCreatedError", "PoolInvariantViolation", "PoolEmptyError",
    "PoolFullError", "OutOfRangeError", "DuplicateIdError",
    "RegistryInvariantError", "Slot", "Vehicle", "ParkingCharge",
    "SlotIdPool", "OccupancyRegistry", "AllocationManager",
    "PricingStrategy", "PerHourPricingStrategy", "compute_fee",
]
