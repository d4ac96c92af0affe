"""Turn the positional string form of a taking guideline into typed objects.

The boundary form is ``[day_moment, duration, dose, frequency, frequency_unit,
instructions, ...]``; trailing extra elements are ignored.
"""

from __future__ import annotations

import math
from typing import Optional, Sequence

from packages.core.errors import IncorrectTakingGuidelinesError
from packages.core.schemas.dosage import DayMoment, FrequencyUnit, Posology, TakingGuideline

REQUIRED_FIELDS = 6


def _parse_positive(token: object, label: str) -> float:
    if not isinstance(token, str):
        raise IncorrectTakingGuidelinesError(f"{label} is missing", detail={"field": label})
    try:
        value = float(token)
    except ValueError:
        raise IncorrectTakingGuidelinesError(
            f"{label} is not a number: {token!r}", detail={"field": label, "value": token}
        ) from None
    if not math.isfinite(value):
        raise IncorrectTakingGuidelinesError(
            f"{label} is not a number: {token!r}", detail={"field": label, "value": token}
        )
    if value <= 0:
        raise IncorrectTakingGuidelinesError(
            f"{label} must be positive", detail={"field": label, "value": token}
        )
    return value


def _instructions(token: object) -> str:
    if not isinstance(token, str) or not token.strip():
        raise IncorrectTakingGuidelinesError(
            "instructions cannot be empty", detail={"field": "instructions"}
        )
    return token


def build_taking_guideline(raw: Optional[Sequence[str]]) -> TakingGuideline:
    """Validate raw guideline fields and build a ``TakingGuideline``.

    Raises ``IncorrectTakingGuidelinesError`` naming the first offending field.
    """
    if raw is None or isinstance(raw, str) or len(raw) < REQUIRED_FIELDS:
        raise IncorrectTakingGuidelinesError(
            "Incomplete taking guidelines. Expected at least 6 elements: "
            "[day_moment, duration, dose, frequency, frequency_unit, instructions]",
            detail={"received": 0 if raw is None else len(raw)},
        )

    day_moment = DayMoment.lookup(raw[0])
    if day_moment is None:
        raise IncorrectTakingGuidelinesError(
            f"unknown day moment: {raw[0]!r}", detail={"field": "day_moment", "value": raw[0]}
        )
    duration = _parse_positive(raw[1], "duration")
    dose = _parse_positive(raw[2], "dose")
    frequency = _parse_positive(raw[3], "frequency")
    frequency_unit = FrequencyUnit.lookup(raw[4])
    if frequency_unit is None:
        raise IncorrectTakingGuidelinesError(
            f"unknown frequency unit: {raw[4]!r}",
            detail={"field": "frequency_unit", "value": raw[4]},
        )
    instructions = _instructions(raw[5])

    posology = Posology(dose=dose, frequency=frequency, frequency_unit=frequency_unit)
    return TakingGuideline(
        day_moment=day_moment,
        duration=duration,
        posology=posology,
        instructions=instructions,
    )


__all__ = ["REQUIRED_FIELDS", "build_taking_guideline"]
