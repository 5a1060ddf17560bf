from datetime import date

import pytest
from pydantic import ValidationError

from affiliate_ops.engine import PeriodSpec, available_months, available_years, filter_by_period, period_bounds
from engine_helpers import TODAY, record


@pytest.fixture
def records():
    return [
        record("a1", date(2024, 3, 31), 10, 100),
        record("a1", date(2024, 4, 1), 10, 100),
        record("a1", date(2024, 4, 30), 10, 100),
        record("a2", date(2024, 5, 1), 10, 100),
        record("a2", date(2024, 5, 24), 10, 100),
        record("a2", date(2024, 5, 31), 10, 100),
        record("a2", date(2023, 12, 31), 10, 100),
    ]


def test_all_time_keeps_everything(records):
    assert filter_by_period(records, PeriodSpec.all_time(), TODAY) == records


def test_preset_days_is_inclusive_of_cutoff(records):
    kept = filter_by_period(records, PeriodSpec.last_days(7), TODAY)
    assert [r.date for r in kept] == [date(2024, 5, 24), date(2024, 5, 31)]


def test_calendar_month(records):
    kept = filter_by_period(records, PeriodSpec.for_month(2024, 4), TODAY)
    assert [r.date for r in kept] == [date(2024, 4, 1), date(2024, 4, 30)]


def test_december_month_window_ends_on_31st():
    assert period_bounds(PeriodSpec.for_month(2023, 12)) == (date(2023, 12, 1), date(2023, 12, 31))


def test_explicit_range_is_inclusive_on_both_ends(records):
    kept = filter_by_period(records, PeriodSpec.between(date(2024, 3, 31), date(2024, 5, 1)), TODAY)
    assert [r.date for r in kept] == [
        date(2024, 3, 31), date(2024, 4, 1), date(2024, 4, 30), date(2024, 5, 1),
    ]


def test_no_match_is_an_empty_list(records):
    assert filter_by_period(records, PeriodSpec.for_month(2022, 1), TODAY) == []
    assert filter_by_period([], PeriodSpec.last_days(30), TODAY) == []


def test_range_end_before_start_is_rejected():
    with pytest.raises(ValidationError):
        PeriodSpec.between(date(2024, 5, 2), date(2024, 5, 1))


def test_month_period_requires_year():
    with pytest.raises(ValidationError):
        PeriodSpec(kind="month", month=4)


def test_available_years_and_months(records):
    assert available_years(records) == [2024, 2023]
    assert available_months(records, 2024) == [3, 4, 5]
    assert available_months(records, 2021) == []
