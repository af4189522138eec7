"""
Clinic-related data models.
"""

import json
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DoctorRecord(BaseModel):
    """
    A doctor from the static clinic dataset.

    Availability maps a weekday name to hour ranges such as ``"9:00-12:00"``,
    kept in dataset order.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Doctor's name")
    specialization: str = Field(description="Medical specialization")
    availability: Dict[str, List[str]] = Field(
        default_factory=dict, description="Weekday -> hour ranges"
    )
    consultation_fee: float = Field(ge=0, description="Consultation fee")
    rating: float = Field(description="Rating, higher is better")

    @field_validator("availability", mode="before")
    @classmethod
    def parse_availability_string(cls, v):
        """The dataset stores availability as a quoted mapping string."""
        if isinstance(v, str):
            return json.loads(v.replace("'", '"'))
        return v

    @property
    def available_days(self) -> List[str]:
        return list(self.availability)

    def ranges_for(self, weekday: str) -> List[str]:
        """Hour ranges for a weekday, empty when the doctor does not work that day."""
        return list(self.availability.get(weekday, []))


class SlotWindow(BaseModel):
    """A one-hour interval ``[start, start + 1)`` on a weekday."""

    model_config = ConfigDict(frozen=True)

    weekday: Optional[str] = None
    start: int

    @property
    def end(self) -> int:
        return self.start + 1

    @property
    def label(self) -> str:
        return f"{self.start}:00-{self.end}:00"


class SlotStatus(str, Enum):
    """Outcome of resolving a requested time against a doctor's day."""

    DAY_AGNOSTIC = "day_agnostic"
    DAY_SCHEDULE = "day_schedule"
    EXACT_MATCH = "exact_match"
    NEAREST_LATER = "nearest_later"
    NO_LATER_SLOT = "no_later_slot"
    NOT_ON_DAY = "not_on_day"


class SlotResolution(BaseModel):
    """Result of the slot resolver for one doctor."""

    status: SlotStatus
    weekday: Optional[str] = None
    windows: List[SlotWindow] = Field(
        default_factory=list, description="Split slots in dataset order"
    )
    window: Optional[SlotWindow] = Field(
        default=None, description="Matched or suggested window"
    )


class DoctorMatch(BaseModel):
    """A matched doctor together with its availability message."""

    doctor: str
    specialization: str
    available_days: List[str]
    message: str
    consultation_fee: float
    rating: float
    resolution: SlotResolution
