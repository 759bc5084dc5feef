# File: parker/domain/strategies.py
"""
Pricing Strategies for the Parker allocation engine

Fees are computed by a PricingStrategy chosen when the lot is created. The
only strategy the lot ships with is a per-hour model: a flat charge covers
the first hours, every further hour costs a fixed amount.

Fees are plain integers; there is no currency handling.
"""

from abc import ABC, abstractmethod
from typing import Any
import logging

from .exceptions import InvalidDurationError, ValidationError


FLAT_RATE_CHARGE = 10
FLAT_RATE_DURATION_HOURS = 2
PER_HOUR_CHARGE = 10


def validate_parking_duration(hours_parked: Any) -> int:
    """
    Hours parked must be a non-negative integer
    Raises: InvalidDurationError
    """
    if isinstance(hours_parked, bool) or not isinstance(hours_parked, int):
        raise InvalidDurationError(f"Hours parked must be an integer, got: {hours_parked!r}")
    if hours_parked < 0:
        raise InvalidDurationError(f"Hours parked cannot be negative, got: {hours_parked}")
    return hours_parked


# ============================================================================
# STRATEGY INTERFACE
# ============================================================================

class PricingStrategy(ABC):
    """
    Abstract base class for pricing strategies
    Implementations must be pure: same hours in, same fee out
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def compute_fee(self, hours_parked: int) -> int:
        """
        Compute the fee for the given number of hours
        Raises: InvalidDurationError for negative durations
        """
        pass

    def get_strategy_name(self) -> str:
        return self.__class__.__name__.replace("PricingStrategy", "")

    def __str__(self) -> str:
        return f"{self.get_strategy_name()} Pricing"


# ============================================================================
# CONCRETE STRATEGIES
# ============================================================================

class PerHourPricingStrategy(PricingStrategy):
    """
    Strategy: flat rate for the first hours, then a per-hour charge

    With the defaults: 0-2 hours cost 10, every hour after that costs 10 more.
    """

    def __init__(
        self,
        flat_rate_charge: int = FLAT_RATE_CHARGE,
        flat_rate_hours: int = FLAT_RATE_DURATION_HOURS,
        per_hour_charge: int = PER_HOUR_CHARGE
    ):
        super().__init__()
        for name, value in (
            ("flat_rate_charge", flat_rate_charge),
            ("flat_rate_hours", flat_rate_hours),
            ("per_hour_charge", per_hour_charge),
        ):
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValidationError(f"{name} must be a non-negative integer, got: {value!r}")

        self.flat_rate_charge = flat_rate_charge
        self.flat_rate_hours = flat_rate_hours
        self.per_hour_charge = per_hour_charge

    def compute_fee(self, hours_parked: int) -> int:
        hours_parked = validate_parking_duration(hours_parked)

        overtime_hours = max(hours_parked - self.flat_rate_hours, 0)
        fee = self.flat_rate_charge + overtime_hours * self.per_hour_charge

        self.logger.debug(f"Fee for {hours_parked}h: {fee}")
        return fee

    def __repr__(self) -> str:
        return (
            f"PerHourPricingStrategy(flat_rate_charge={self.flat_rate_charge}, "
            f"flat_rate_hours={self.flat_rate_hours}, per_hour_charge={self.per_hour_charge})"
        )


_DEFAULT_STRATEGY = PerHourPricingStrategy()


def compute_fee(hours_parked: int) -> int:
    """Fee under the default per-hour schedule"""
    return _DEFAULT_STRATEGY.compute_fee(hours_parked)
