import pytest

from packages.core.errors import IncorrectTakingGuidelinesError
from packages.core.guidelines import build_taking_guideline
from packages.core.schemas.dosage import DayMoment, FrequencyUnit

VALID = ["BEFORELUNCH", "15", "1", "1", "DAY", "Take with water"]


def _with(index: int, value) -> list:
    raw = list(VALID)
    raw[index] = value
    return raw


def test_builds_typed_guideline_from_raw_fields() -> None:
    guideline = build_taking_guideline(VALID)

    assert guideline.day_moment is DayMoment.BEFORELUNCH
    assert guideline.duration == 15
    assert guideline.posology.dose == 1
    assert guideline.posology.frequency == 1
    assert guideline.posology.frequency_unit is FrequencyUnit.DAY
    assert guideline.instructions == "Take with water"


def test_accepts_decimals_and_ignores_trailing_elements() -> None:
    guideline = build_taking_guideline(
        ["AFTERMEALS", "7.5", "0.5", "8", "HOUR", "Dissolve in water", "extra", "ignored"]
    )
    assert guideline.duration == 7.5
    assert guideline.posology.dose == 0.5
    assert guideline.posology.frequency_unit is FrequencyUnit.HOUR


@pytest.mark.parametrize("raw", [None, [], VALID[:5], "BEFORELUNCH,15,1,1,DAY,x"])
def test_rejects_incomplete_input(raw) -> None:
    with pytest.raises(IncorrectTakingGuidelinesError):
        build_taking_guideline(raw)


@pytest.mark.parametrize("token", ["beforelunch", "LUNCH", "", None])
def test_rejects_unknown_day_moment(token) -> None:
    with pytest.raises(IncorrectTakingGuidelinesError) as excinfo:
        build_taking_guideline(_with(0, token))
    assert excinfo.value.detail["field"] == "day_moment"


@pytest.mark.parametrize(
    "index,token",
    [
        (1, "fifteen"),
        (1, "0"),
        (1, "-3"),
        (2, "abc"),
        (2, "0"),
        (2, "nan"),
        (3, "-1"),
        (3, "inf"),
        (3, None),
    ],
)
def test_rejects_non_positive_or_non_numeric_values(index, token) -> None:
    with pytest.raises(IncorrectTakingGuidelinesError):
        build_taking_guideline(_with(index, token))


@pytest.mark.parametrize("token", ["day", "YEAR", ""])
def test_rejects_unknown_frequency_unit(token) -> None:
    with pytest.raises(IncorrectTakingGuidelinesError) as excinfo:
        build_taking_guideline(_with(4, token))
    assert excinfo.value.detail["field"] == "frequency_unit"


@pytest.mark.parametrize("token", ["", "   ", None])
def test_rejects_blank_instructions(token) -> None:
    with pytest.raises(IncorrectTakingGuidelinesError) as excinfo:
        build_taking_guideline(_with(5, token))
    assert excinfo.value.detail["field"] == "instructions"
