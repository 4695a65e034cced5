from datetime import date

import pytest

from pocketbook.errors import InvalidArgument
from pocketbook.utils import months

FAR_FUTURE = date(9999, 12, 31)


def test_previous_then_next_is_identity():
    for year in range(1999, 2031):
        for month in range(1, 13):
            prev = months.previous_month(year, month)
            assert months.next_month(*prev, today=FAR_FUTURE) == (year, month)


def test_year_rollover():
    assert months.previous_month(2024, 1) == (2023, 12)
    assert months.next_month(2024, 12, today=FAR_FUTURE) == (2025, 1)


def test_next_month_blocked_at_current_month():
    today = date(2024, 3, 15)
    assert months.next_month(2024, 2, today=today) == (2024, 3)
    assert months.next_month(2024, 3, today=today) is None
    assert months.next_month(2023, 12, today=date(2023, 12, 1)) is None


def test_is_current_month_uses_wall_clock():
    today = months.local_today()
    assert months.is_current_month(today.year, today.month)
    assert not months.is_current_month(*months.previous_month(today.year, today.month))
    assert not months.is_current_month(today.year + 1, today.month)


def test_is_past_month():
    today = date(2024, 3, 15)
    assert months.is_past_month(2024, 2, today=today)
    assert months.is_past_month(2023, 12, today=today)
    assert not months.is_past_month(2024, 3, today=today)
    assert not months.is_past_month(2024, 4, today=today)


@pytest.mark.parametrize("bad", [0, 13, -1, "x", None])
def test_invalid_month_rejected(bad):
    with pytest.raises(InvalidArgument):
        months.previous_month(2024, bad)


def test_month_bounds_and_lengths():
    assert months.month_bounds(2024, 12) == (date(2024, 12, 1), date(2025, 1, 1))
    assert months.days_in_month(2024, 2) == 29
    assert months.days_in_month(2023, 2) == 28


def test_labels():
    assert months.format_date_range(2024, 2) == "1st Feb 24 - 29th Feb 24"
    assert months.format_date_range(2024, 4) == "1st Apr 24 - 30th Apr 24"
    assert months.month_name(9) == "September"
    assert [months.ordinal_suffix(n) for n in (1, 2, 3, 4, 11, 12, 13, 21, 22, 31)] == [
        "st", "nd", "rd", "th", "th", "th", "th", "st", "nd", "st",
    ]


def test_navigation_payload():
    nav = months.navigation(2024, 3, today=date(2024, 3, 5))
    assert nav["previous"] == {"year": 2024, "month": 2}
    assert nav["next"] is None
    assert nav["is_current_month"] is True
    assert nav["label"] == "March 2024"


@pytest.mark.parametrize("bad", [True, False, 3.7, float("nan"), "3.5"])
def test_non_integral_months_rejected(bad):
    with pytest.raises(InvalidArgument):
        months.validate_month(2024, bad)


def test_whole_numbers_accepted_from_query_strings_and_floats():
    assert months.validate_month("2024", "3") == (2024, 3)
    assert months.validate_month(2024.0, 3.0) == (2024, 3)


def test_no_month_before_year_one():
    with pytest.raises(InvalidArgument):
        months.previous_month(1, 1)
    assert months.previous_month(1, 2) == (1, 1)
    assert months.navigation(1, 1, today=date(2024, 3, 5))["previous"] is None
