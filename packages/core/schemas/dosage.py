from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _LookupEnum(str, Enum):
    @classmethod
    def lookup(cls, token: object):
        """Exact, case-sensitive name lookup. Returns None for unknown tokens."""
        if not isinstance(token, str):
            return None
        return cls.__members__.get(token)


class DayMoment(_LookupEnum):
    BEFOREBREAKFAST = "BEFOREBREAKFAST"
    DURINGBREAKFAST = "DURINGBREAKFAST"
    AFTERBREAKFAST = "AFTERBREAKFAST"
    BEFORELUNCH = "BEFORELUNCH"
    DURINGLUNCH = "DURINGLUNCH"
    AFTERLUNCH = "AFTERLUNCH"
    BEFOREDINNER = "BEFOREDINNER"
    DURINGDINNER = "DURINGDINNER"
    AFTERDINNER = "AFTERDINNER"
    BEFOREMEALS = "BEFOREMEALS"
    DURINGMEALS = "DURINGMEALS"
    AFTERMEALS = "AFTERMEALS"


class FrequencyUnit(_LookupEnum):
    HOUR = "HOUR"
    DAY = "DAY"
    WEEK = "WEEK"
    MONTH = "MONTH"


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


class Posology(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    dose: float = Field(gt=0, allow_inf_nan=False)
    frequency: float = Field(gt=0, allow_inf_nan=False)
    frequency_unit: FrequencyUnit


class TakingGuideline(BaseModel):
    """How a medicine is taken: when, for how many days, how much and how often."""
    model_config = ConfigDict(validate_assignment=True)

    day_moment: DayMoment
    duration: float = Field(gt=0, allow_inf_nan=False)
    posology: Posology
    instructions: str

    @field_validator("instructions")
    @classmethod
    def _instructions_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("instructions cannot be blank")
        return value

    def to_fields(self) -> List[str]:
        """Render back to the positional six-string boundary form."""
        return [
            self.day_moment.value,
            _format_number(self.duration),
            _format_number(self.posology.dose),
            _format_number(self.posology.frequency),
            self.posology.frequency_unit.value,
            self.instructions,
        ]


GUIDELINE_FIELD_NAMES = (
    "day_moment",
    "duration",
    "dose",
    "frequency",
    "frequency_unit",
    "instructions",
)


__all__ = [
    "DayMoment",
    "FrequencyUnit",
    "Posology",
    "TakingGuideline",
    "GUIDELINE_FIELD_NAMES",
]
