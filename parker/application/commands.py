# File: parker/application/commands.py
"""
Command Pattern Implementation for the Parker command language

Each input line is one command:

    create_parking_lot 6
    park KA-01-HH-1234
    leave KA-01-HH-1234 4
    status

A command is a first-class object built from its arguments, validated, then
executed against the ApplicationContext. Execution produces a CommandResult
holding the console lines to print and, on failure, the ErrorKind so callers
can branch on what went wrong.

Recoverable domain errors become failed results. Pool invariant violations
are internal bugs and propagate.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type
import logging

from ..domain.exceptions import (
    CommandError, ErrorKind, NotFoundError, ParkerError, PoolInvariantViolation
)
from ..infrastructure.factories import ApplicationContext
from .dtos import ParkingAllocationDTO, ParkingChargeDTO
from .validators import check_args_length, is_digit, is_registration_number


CREATED_MSG = "Created parking lot with {capacity} slots"
ALLOCATED_MSG = "Allocated slot number: {slot_id}"
FULL_MSG = "Sorry, parking lot is full"
LEAVE_MSG = "Registration number {registration_number} with Slot Number {slot_number} is free with Charge {charge}"
NOT_FOUND_MSG = "Registration number {registration_number} not found"
STATUS_HEADER = "Slot No. Registration No."
STATUS_LINE = "{slot_id} {registration_number}"


# ============================================================================
# COMMAND RESULT
# ============================================================================

@dataclass
class CommandResult:
    """Outcome of executing one command"""
    success: bool
    command_type: str
    output: List[str] = field(default_factory=list)
    data: Optional[Dict[str, Any]] = None
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None
    executed_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def failure(cls, command_type: str, error: ParkerError, output: Optional[List[str]] = None) -> "CommandResult":
        return cls(
            success=False,
            command_type=command_type,
            output=output or [],
            error_kind=error.kind,
            error_message=error.message,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "command_type": self.command_type,
            "output": list(self.output),
            "data": self.data,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error_message": self.error_message,
            "executed_at": self.executed_at.isoformat(),
        }


# ============================================================================
# COMMAND BASE CLASS
# ============================================================================

class Command(ABC):
    """
    Abstract base class for all commands

    Subclasses declare `name` (the keyword on the input line) and
    `min_args`, and implement validate() and execute().
    """

    name: str = ""
    min_args: int = 0

    def __init__(self, args: Sequence[str]):
        self.args = [arg.strip() for arg in args]
        self.logger = logging.getLogger(self.__class__.__name__)

    def validate(self, context: ApplicationContext) -> Tuple[bool, List[str]]:
        """
        Check the arguments before execution
        Returns: (is_valid, error_messages)
        """
        try:
            check_args_length(self.args, self.min_args)
        except CommandError as e:
            return False, [e.message]
        return True, []

    @abstractmethod
    def execute(self, context: ApplicationContext) -> CommandResult:
        pass

    def get_description(self) -> str:
        return " ".join([self.name, *self.args])


class CreateParkingLotCommand(Command):
    name = "create_parking_lot"
    min_args = 1

    def validate(self, context: ApplicationContext) -> Tuple[bool, List[str]]:
        is_valid, errors = super().validate(context)
        if is_valid and not is_digit(self.args[0]):
            return False, ["Invalid `capacity`, expecting a positive whole number"]
        return is_valid, errors

    def execute(self, context: ApplicationContext) -> CommandResult:
        capacity = int(self.args[0])
        service = context.create_lot(capacity)
        return CommandResult(
            success=True,
            command_type=self.name,
            output=[CREATED_MSG.format(capacity=capacity)],
            data={"lot_id": service.lot_id, "capacity": capacity},
        )


class ParkCommand(Command):
    name = "park"
    min_args = 1

    def validate(self, context: ApplicationContext) -> Tuple[bool, List[str]]:
        is_valid, errors = super().validate(context)
        if is_valid and not is_registration_number(self.args[0], context.config.registration_pattern):
            return False, [f"Bad registration number: {self.args[0]}"]
        return is_valid, errors

    def execute(self, context: ApplicationContext) -> CommandResult:
        registration_number = self.args[0]
        slot_id = context.require_service().park(registration_number)

        allocation = ParkingAllocationDTO(registration_number=registration_number, slot_number=slot_id)
        if allocation.lot_full:
            line = FULL_MSG
        else:
            line = ALLOCATED_MSG.format(slot_id=slot_id)
        return CommandResult(success=True, command_type=self.name, output=[line], data=allocation.to_dict())


class LeaveCommand(Command):
    name = "leave"
    min_args = 2

    def validate(self, context: ApplicationContext) -> Tuple[bool, List[str]]:
        is_valid, errors = super().validate(context)
        if not is_valid:
            return is_valid, errors
        registration_number, hours = self.args[0], self.args[1]
        if not is_registration_number(registration_number, context.config.registration_pattern) \
                or not is_digit(hours):
            return False, [f"Incorrect format of input: {registration_number} {hours}"]
        return True, []

    def execute(self, context: ApplicationContext) -> CommandResult:
        registration_number = self.args[0]
        hours_parked = int(self.args[1])
        service = context.require_service()

        try:
            charge = service.leave(registration_number, hours_parked)
        except NotFoundError as e:
            return CommandResult.failure(
                self.name, e,
                output=[NOT_FOUND_MSG.format(registration_number=registration_number)],
            )

        dto = ParkingChargeDTO.from_domain(charge)
        return CommandResult(
            success=True,
            command_type=self.name,
            output=[LEAVE_MSG.format(**dto.to_dict())],
            data=dto.to_dict(),
        )


class StatusCommand(Command):
    name = "status"

    def execute(self, context: ApplicationContext) -> CommandResult:
        occupied = context.require_service().status()

        output: List[str] = []
        if occupied:
            output.append(STATUS_HEADER)
            output.extend(
                STATUS_LINE.format(slot_id=slot_id, registration_number=reg)
                for slot_id, reg in occupied
            )
        return CommandResult(
            success=True,
            command_type=self.name,
            output=output,
            data={"slots": [{"slot_number": s, "registration_number": r} for s, r in occupied]},
        )


DEFAULT_COMMANDS: Tuple[Type[Command], ...] = (
    CreateParkingLotCommand, ParkCommand, LeaveCommand, StatusCommand,
)


# ============================================================================
# COMMAND INVOKER
# ============================================================================

class CommandInvoker:
    """
    Maps command keywords to command classes and runs input lines

    Keeps the results of everything it executed in `history`.
    """

    def __init__(self, context: ApplicationContext, register_defaults: bool = True):
        self.context = context
        self._commands: Dict[str, Type[Command]] = {}
        self.history: List[CommandResult] = []
        self.logger = logging.getLogger(self.__class__.__name__)

        if register_defaults:
            for command_cls in DEFAULT_COMMANDS:
                self.register(command_cls.name, command_cls)

    def register(self, keyword: str, command_cls: Type[Command]) -> None:
        self._commands[keyword] = command_cls

    @property
    def keywords(self) -> List[str]:
        return sorted(self._commands)

    def build(self, tokens: Sequence[str]) -> Command:
        """
        Turn a tokenized line into a command object
        Raises: CommandError for an empty line or unknown keyword
        """
        if not tokens or not tokens[0].strip():
            raise CommandError("Insufficient number of arguments.")

        keyword = tokens[0].strip()
        command_cls = self._commands.get(keyword)
        if command_cls is None:
            raise CommandError(f"Invalid command: {keyword}")
        return command_cls(tokens[1:])

    def execute_line(self, line: str) -> Optional[CommandResult]:
        """Run one input line; blank lines are skipped and return None"""
        tokens = line.split()
        if not tokens:
            return None
        return self.execute(tokens)

    def execute(self, tokens: Sequence[str]) -> CommandResult:
        keyword = tokens[0] if tokens else ""
        try:
            command = self.build(tokens)
            is_valid, errors = command.validate(self.context)
            if not is_valid:
                raise CommandError("; ".join(errors))

            self.logger.debug(f"Executing: {command.get_description()}")
            result = command.execute(self.context)
        except PoolInvariantViolation:
            self.logger.critical(f"Internal error while executing {' '.join(tokens)}", exc_info=True)
            raise
        except ParkerError as e:
            self.logger.warning(f"Command {' '.join(tokens)!r} failed: {e.message}")
            result = CommandResult.failure(keyword, e)

        self.history.append(result)
        return result

    def execute_all(self, lines) -> List[CommandResult]:
        results = []
        for line in lines:
            result = self.execute_line(line)
            if result is not None:
                results.append(result)
        return results
