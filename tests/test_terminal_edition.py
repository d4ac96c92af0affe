from datetime import datetime, timedelta, timezone

import pytest

from packages.core.errors import (
    IncorrectEndingDateError,
    IncorrectParametersError,
    IncorrectTakingGuidelinesError,
    ProductAlreadyInPrescriptionError,
    ProductNotInPrescriptionError,
)
from tests.doubles import NOW, OTHER_PRODUCT_ID, PRODUCT_ID, VALID_GUIDELINE, editing_terminal


def test_add_line_round_trip() -> None:
    terminal = editing_terminal()

    terminal.add_line(PRODUCT_ID, ["BEFORELUNCH", "15", "1", "1", "DAY", "Take with water"])

    guideline = terminal.prescription.get_line(PRODUCT_ID).guideline
    assert guideline.day_moment.value == "BEFORELUNCH"
    assert guideline.duration == 15
    assert guideline.posology.dose == 1
    assert guideline.posology.frequency == 1
    assert guideline.posology.frequency_unit.value == "DAY"
    assert guideline.instructions == "Take with water"


@pytest.mark.parametrize(
    "product_id,raw,error",
    [
        (None, VALID_GUIDELINE, IncorrectParametersError),
        ("243516578917", VALID_GUIDELINE, IncorrectParametersError),
        (OTHER_PRODUCT_ID, ["BEFORELUNCH", "15", "0", "1", "DAY", "x"], IncorrectTakingGuidelinesError),
        (OTHER_PRODUCT_ID, ["BEFORELUNCH", "15", "1", "1", "DAY", ""], IncorrectTakingGuidelinesError),
        (PRODUCT_ID, VALID_GUIDELINE, ProductAlreadyInPrescriptionError),
    ],
)
def test_failed_add_line_does_not_touch_prescription(product_id, raw, error) -> None:
    terminal = editing_terminal()
    terminal.add_line(PRODUCT_ID, VALID_GUIDELINE)
    keys_before = set(terminal.prescription.lines)

    with pytest.raises(error):
        terminal.add_line(product_id, raw)

    assert set(terminal.prescription.lines) == keys_before
    assert terminal.prescription.get_line(PRODUCT_ID).guideline.to_fields() == VALID_GUIDELINE


def test_modify_dose_and_remove_line() -> None:
    terminal = editing_terminal()
    terminal.add_line(PRODUCT_ID, VALID_GUIDELINE)
    terminal.add_line(OTHER_PRODUCT_ID, VALID_GUIDELINE)

    terminal.modify_dose(PRODUCT_ID, 3)
    terminal.remove_line(OTHER_PRODUCT_ID)

    assert terminal.prescription.get_line(PRODUCT_ID).guideline.posology.dose == 3
    assert terminal.prescription.product_ids() == [PRODUCT_ID]


def test_modify_dose_errors() -> None:
    terminal = editing_terminal()
    terminal.add_line(PRODUCT_ID, VALID_GUIDELINE)

    with pytest.raises(IncorrectParametersError):
        terminal.modify_dose(None, 2)
    with pytest.raises(IncorrectParametersError):
        terminal.modify_dose(PRODUCT_ID, 0)
    with pytest.raises(ProductNotInPrescriptionError):
        terminal.modify_dose(OTHER_PRODUCT_ID, 2)


def test_remove_line_errors() -> None:
    terminal = editing_terminal()
    with pytest.raises(IncorrectParametersError):
        terminal.remove_line(None)
    with pytest.raises(ProductNotInPrescriptionError):
        terminal.remove_line(PRODUCT_ID)


def test_set_ending_date_records_both_dates() -> None:
    terminal = editing_terminal()
    ending = NOW + timedelta(days=30)

    terminal.set_ending_date(ending)

    assert terminal.prescription.prescription_date == NOW
    assert terminal.prescription.end_date == ending
    assert terminal.session.dates_set


@pytest.mark.parametrize(
    "offset",
    [
        timedelta(0),
        timedelta(seconds=-1),
        timedelta(days=-3),
        timedelta(days=1) - timedelta(seconds=1),
        timedelta(hours=12),
    ],
)
def test_ending_date_less_than_a_day_ahead_is_rejected(offset) -> None:
    terminal = editing_terminal()

    with pytest.raises(IncorrectEndingDateError):
        terminal.set_ending_date(NOW + offset)

    assert terminal.prescription.end_date is None
    assert terminal.prescription.prescription_date is None
    assert not terminal.session.dates_set


@pytest.mark.parametrize("offset", [timedelta(days=1), timedelta(days=1, seconds=1), timedelta(days=90)])
def test_ending_date_at_least_a_day_ahead_is_accepted(offset) -> None:
    terminal = editing_terminal()
    terminal.set_ending_date(NOW + offset)
    assert terminal.session.dates_set


def test_ending_date_with_timezone_is_compared_in_absolute_time() -> None:
    now = datetime(2025, 3, 10, 9, 30, tzinfo=timezone.utc)
    terminal = editing_terminal(now=now)
    plus_two = timezone(timedelta(hours=2))

    with pytest.raises(IncorrectEndingDateError):
        terminal.set_ending_date(datetime(2025, 3, 11, 11, 29, tzinfo=plus_two))
    terminal.set_ending_date(datetime(2025, 3, 11, 11, 30, tzinfo=plus_two))


@pytest.mark.parametrize("value", [None, "2030-01-01", 1735689600])
def test_ending_date_must_be_a_datetime(value) -> None:
    terminal = editing_terminal()
    with pytest.raises(IncorrectParametersError):
        terminal.set_ending_date(value)


def test_finish_edition_closes_line_editing() -> None:
    terminal = editing_terminal()
    terminal.finish_edition()

    assert not terminal.session.edition_open
    assert terminal.session.phase() == "edition_finished"

    terminal.begin_edition()
    terminal.add_line(PRODUCT_ID, VALID_GUIDELINE)
    assert terminal.prescription.has_line(PRODUCT_ID)
