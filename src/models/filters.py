"""
Filter models decoded from completion-service output.

Model output is free-form, so decoding is lenient: unknown keys are
ignored and a value of the wrong type is treated as absent instead of
failing the whole filter.
"""

import datetime as dt
import re
from typing import Any, List, Optional, Union

from loguru import logger
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

from src.config import WEEKDAY_NAMES

_NULL_WORDS = {"", "null", "none"}

TIME_PATTERN = re.compile(r"^\d{1,2}:\d{2}$")


class Hour(BaseModel):
    """A requested hour of the day."""

    model_config = ConfigDict(frozen=True)

    value: int


class Absent(BaseModel):
    """No usable time was requested."""

    model_config = ConfigDict(frozen=True)


RequestedTime = Union[Hour, Absent]


def parse_requested_time(text: Optional[str]) -> RequestedTime:
    """
    Parse an ``H:MM`` / ``HH:MM`` string into the requested hour.

    Anything else, including ``None``, yields ``Absent()``. Minutes are
    ignored since availability has hour granularity.
    """
    if text is None:
        return Absent()
    candidate = text.strip()
    if not TIME_PATTERN.match(candidate):
        return Absent()
    return Hour(value=int(candidate.split(":")[0]))


class LenientFilter(BaseModel):
    """Base for filters where every field is optional and mismatches are dropped."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    @field_validator("*", mode="wrap")
    @classmethod
    def _absent_on_mismatch(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        if isinstance(value, str) and value.strip().lower() in _NULL_WORDS:
            return cls._field_default(info.field_name)
        try:
            return handler(value)
        except ValidationError:
            logger.debug(f"Ignoring unusable value for '{info.field_name}': {value!r}")
            return cls._field_default(info.field_name)

    @classmethod
    def _field_default(cls, name: str) -> Any:
        return cls.model_fields[name].get_default(call_default_factory=True)

    @property
    def is_empty(self) -> bool:
        """True when no field constrains the search."""
        return all(
            getattr(self, name) in (None, [])
            for name in type(self).model_fields
        )


class ClinicFilter(LenientFilter):
    """Structured doctor search extracted from a user message."""

    doctor_name: Optional[str] = Field(default=None, description="Doctor name substring")
    specialization: Optional[str] = Field(default=None, description="Exact specialization")
    date: Optional[dt.date] = Field(default=None, description="Requested calendar date")
    time: Optional[str] = Field(default=None, description="Requested time, HH:MM")

    @property
    def weekday(self) -> Optional[str]:
        """Weekday name of the requested date."""
        if self.date is None:
            return None
        return WEEKDAY_NAMES[self.date.weekday()]

    @property
    def requested_time(self) -> RequestedTime:
        return parse_requested_time(self.time)


class MenuFilter(LenientFilter):
    """Structured dish search extracted from a user message."""

    dietary: Optional[str] = Field(default=None, description="Dietary category")
    price_range: Optional[float] = Field(default=None, description="Maximum price")
    restaurant: Optional[str] = Field(default=None, description="Restaurant name substring")
    ingredients: List[str] = Field(default_factory=list, description="Ingredient keywords")
    spiciness: Optional[str] = Field(default=None, description="Spice level")
    gluten_free: Optional[bool] = Field(default=None, description="Gluten-free requested")

    @field_validator("price_range")
    @classmethod
    def zero_price_is_absent(cls, v: Optional[float]) -> Optional[float]:
        """A zero price carries no constraint."""
        return v or None

    @property
    def wants_gluten_free(self) -> bool:
        if self.gluten_free:
            return True
        return any(keyword.strip().lower() == "gluten-free" for keyword in self.ingredients)
