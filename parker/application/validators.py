# File: parker/application/validators.py
"""Input format checks used by the command layer."""

import re
from typing import Pattern, Sequence, Union

from ..config import DEFAULT_REGISTRATION_PATTERN
from ..domain.exceptions import CommandError


_IS_DIGIT = re.compile(r"\d+")
_IS_REG_NUM = re.compile(DEFAULT_REGISTRATION_PATTERN)


def is_digit(value: str) -> bool:
    """True if value is made of ASCII digits only"""
    return value.isascii() and bool(_IS_DIGIT.fullmatch(value))


def is_registration_number(value: str, pattern: Union[str, Pattern, None] = None) -> bool:
    """True if value looks like KA-01-HH-1234 (or matches the given pattern)"""
    if pattern is None:
        regex = _IS_REG_NUM
    elif isinstance(pattern, str):
        regex = re.compile(pattern)
    else:
        regex = pattern
    return bool(regex.fullmatch(value))


def check_args_length(args: Sequence[str], expected: int) -> None:
    if len(args) < expected:
        raise CommandError("Insufficient number of arguments.")
