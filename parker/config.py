# File: parker/config.py
"""
Application configuration

Settings are pydantic models so that a YAML file is validated on load. Every
field has a default; running without a config file gives the standard fee
schedule (10 flat for two hours, 10 per extra hour) and INFO logging.

Example parker.yaml:

    pricing:
      flat_rate_charge: 10
      flat_rate_hours: 2
      per_hour_charge: 10
    verify_invariants: true
    logging:
      level: DEBUG
      file: logs/parker.log
"""

from pathlib import Path
from typing import Optional, Union
import logging
import re

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError, field_validator

from .domain.exceptions import ConfigError
from .domain.strategies import FLAT_RATE_CHARGE, FLAT_RATE_DURATION_HOURS, PER_HOUR_CHARGE


DEFAULT_REGISTRATION_PATTERN = r"^[A-Z]{2}-\d{2}-[A-Z]{1,2}-\d{3,4}$"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class PricingConfig(BaseModel):
    """Per-hour fee schedule"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    flat_rate_charge: int = Field(default=FLAT_RATE_CHARGE, ge=0)
    flat_rate_hours: int = Field(default=FLAT_RATE_DURATION_HOURS, ge=0)
    per_hour_charge: int = Field(default=PER_HOUR_CHARGE, ge=0)


class LoggingConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file: Optional[str] = None

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


class ParkerConfig(BaseModel):
    """Top-level settings"""
    model_config = ConfigDict(frozen=True, extra="forbid")

    pricing: PricingConfig = Field(default_factory=PricingConfig)
    registration_pattern: str = DEFAULT_REGISTRATION_PATTERN
    verify_invariants: bool = False
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("registration_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid registration pattern {v!r}: {e}") from e
        return v


def load_config(path: Optional[Union[str, Path]] = None) -> ParkerConfig:
    """
    Load configuration from a YAML file
    Returns defaults when no path is given.
    Raises: ConfigError if the file cannot be read or fails validation
    """
    if path is None:
        return ParkerConfig()

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {path} is not valid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping at the top level")

    try:
        return ParkerConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e
