# File: parker/application/dtos.py
"""
Data Transfer Objects (DTOs) for the Parker application layer

DTOs carry results out of the application service to callers (the command
layer, tests, anything that wants JSON). They hold data only.

- Immutable (frozen models)
- Validated at creation
- Serializable with to_dict() / to_json()
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import json

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..domain.models import ParkingCharge


# ============================================================================
# BASE DTO
# ============================================================================

class BaseDTO(BaseModel):
    """Base DTO with common functionality"""

    model_config = ConfigDict(
        frozen=True,
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_dict(self, exclude_none: bool = False, **kwargs) -> Dict[str, Any]:
        """Convert DTO to dictionary"""
        return self.model_dump(exclude_none=exclude_none, **kwargs)

    def to_json(self, **kwargs) -> str:
        return self.model_dump_json(**kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> "BaseDTO":
        return cls(**json.loads(json_str))


# ============================================================================
# PARKING DTOs
# ============================================================================

class ParkingAllocationDTO(BaseDTO):
    """Outcome of a park request; slot_number is None when the lot is full"""
    registration_number: str = Field(min_length=1)
    slot_number: Optional[int] = Field(default=None, ge=1)

    @property
    def lot_full(self) -> bool:
        return self.slot_number is None


class ParkingChargeDTO(BaseDTO):
    """Outcome of a leave request"""
    registration_number: str = Field(min_length=1)
    slot_number: int = Field(ge=1)
    charge: int = Field(ge=0)

    @classmethod
    def from_domain(cls, charge: ParkingCharge) -> "ParkingChargeDTO":
        return cls(
            registration_number=charge.registration_number,
            slot_number=charge.slot_number,
            charge=charge.charge,
        )


class SlotStatusDTO(BaseDTO):
    slot_number: int = Field(ge=1)
    registration_number: str


class LotStatusDTO(BaseDTO):
    """Snapshot of a lot's occupancy"""
    lot_id: str
    capacity: int = Field(gt=0)
    occupied_slots: int = Field(ge=0)
    available_slots: int = Field(ge=0)
    slots: List[SlotStatusDTO] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=datetime.now)

    @model_validator(mode="after")
    def validate_counts(self) -> "LotStatusDTO":
        if self.occupied_slots + self.available_slots != self.capacity:
            raise ValueError(
                f"occupied ({self.occupied_slots}) + available ({self.available_slots}) "
                f"must equal capacity ({self.capacity})"
            )
        if len(self.slots) != self.occupied_slots:
            raise ValueError("slots must list exactly the occupied slots")
        return self

    @property
    def occupancy_rate(self) -> float:
        return self.occupied_slots / self.capacity
