# File: parker/domain/exceptions.py
"""
Domain Errors for the Parker allocation engine

Every error raised by the core derives from ParkerError and carries an
ErrorKind so that callers (the command layer, tests) can branch on the kind
instead of the concrete class.

Categories:
1. Validation errors - malformed input reaching the core boundary
2. Lookup errors - no active parking session for a registration number
3. Pool invariant violations - internal bugs, never expected at runtime

"Lot full" is deliberately absent: it is a normal outcome, not an error.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Enumeration of error kinds surfaced by the core"""
    VALIDATION = "validation"
    INVALID_DURATION = "invalid_duration"
    BAD_COMMAND = "bad_command"
    CONFIG = "config"
    NOT_FOUND = "not_found"
    ALREADY_PARKED = "already_parked"
    LOT_NOT_CREATED = "lot_not_created"
    POOL_EMPTY = "pool_empty"
    POOL_FULL = "pool_full"
    OUT_OF_RANGE = "out_of_range"
    DUPLICATE_ID = "duplicate_id"
    INVARIANT = "invariant"


class ParkerError(Exception):
    """Base class for all domain errors"""

    kind: ErrorKind = ErrorKind.VALIDATION

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind

    def __str__(self) -> str:
        return self.message


# ============================================================================
# RECOVERABLE ERRORS
# ============================================================================

class ValidationError(ParkerError):
    """Malformed input (negative hours, non-positive capacity, empty plate)"""
    kind = ErrorKind.VALIDATION


class InvalidDurationError(ValidationError):
    kind = ErrorKind.INVALID_DURATION


class CommandError(ValidationError):
    """Unknown command, missing arguments or badly formatted arguments"""
    kind = ErrorKind.BAD_COMMAND


class ConfigError(ValidationError):
    kind = ErrorKind.CONFIG


class NotFoundError(ParkerError):
    """No vehicle with the given registration number is parked"""
    kind = ErrorKind.NOT_FOUND

    def __init__(self, registration_number: str):
        super().__init__(
            f"No vehicle with registration number {registration_number} is parked right now."
        )
        self.registration_number = registration_number


class AlreadyParkedError(ParkerError):
    """A vehicle with the same registration number already holds a slot"""
    kind = ErrorKind.ALREADY_PARKED

    def __init__(self, registration_number: str, slot_id: int):
        super().__init__(
            f"Vehicle {registration_number} is already parked at slot {slot_id}"
        )
        self.registration_number = registration_number
        self.slot_id = slot_id


class LotNotCreatedError(ParkerError):
    kind = ErrorKind.LOT_NOT_CREATED

    def __init__(self):
        super().__init__("Parking lot has not been created yet. Use `create_parking_lot` first.")


# ============================================================================
# INTERNAL CONTRACT VIOLATIONS
# ============================================================================

class PoolInvariantViolation(ParkerError):
    """
    Base class for slot pool contract violations

    These indicate a bug in the caller (normally the registry). They abort
    the offending operation without touching state and must never be
    swallowed.
    """
    kind = ErrorKind.INVARIANT


class PoolEmptyError(PoolInvariantViolation):
    kind = ErrorKind.POOL_EMPTY


class PoolFullError(PoolInvariantViolation):
    kind = ErrorKind.POOL_FULL


class OutOfRangeError(PoolInvariantViolation):
    kind = ErrorKind.OUT_OF_RANGE


class DuplicateIdError(PoolInvariantViolation):
    kind = ErrorKind.DUPLICATE_ID


class RegistryInvariantError(PoolInvariantViolation):
    """Free and occupied slot ids no longer partition the lot"""
    kind = ErrorKind.INVARIANT
