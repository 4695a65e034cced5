from datetime import date
from decimal import Decimal

import pytest

from pocketbook.errors import InvalidArgument, NotFound
from pocketbook.extensions import db
from pocketbook.services import budget, budget_shifts

from .conftest import make_category, make_expense


@pytest.fixture
def march(user, other_user):
    """C1 with a 500 budget and 150 spent in March 2024, C2 with nothing."""
    c1 = make_category(user, "Food", monthly_budget=Decimal("500"))
    c2 = make_category(user, "Travel")
    make_expense(user, c1, Decimal("100"), on=date(2024, 3, 1))
    make_expense(user, c1, Decimal("50"), on=date(2024, 3, 31))
    # outside the month and outside the user: must not be counted
    make_expense(user, c1, Decimal("999"), on=date(2024, 4, 1))
    make_expense(user, c1, Decimal("999"), on=date(2024, 2, 29))
    foreign = make_category(other_user, "Food", monthly_budget=Decimal("10"))
    make_expense(other_user, foreign, Decimal("75"), on=date(2024, 3, 15))
    return c1, c2


def _by_name(rows):
    return {row.category_name: row for row in rows}


def test_budget_vs_actual_sums_month_and_user(user, march):
    rows = _by_name(budget.get_budget_vs_actual(user.id, 2024, 3))
    assert set(rows) == {"Food", "Travel"}

    food = rows["Food"]
    assert food.budgeted == Decimal("500")
    assert food.spent == Decimal("150")
    assert food.remaining == Decimal("350")
    assert food.percent_used == Decimal("30")
    assert food.status == "safe"

    travel = rows["Travel"]
    assert travel.budgeted == Decimal("0")
    assert travel.spent == Decimal("0")
    assert travel.percent_used == Decimal("0")


def test_rows_ordered_by_budget_then_spending(user, march):
    rows = budget.get_budget_vs_actual(user.id, 2024, 3)
    assert [r.category_name for r in rows] == ["Food", "Travel"]


def test_untracked_categories_are_skipped(user, march):
    c1, c2 = march
    c2.tracked_in_budget = False
    db.session.commit()
    rows = budget.get_budget_vs_actual(user.id, 2024, 3)
    assert [r.category_id for r in rows] == [c1.id]


def test_no_categories_gives_empty_list(user):
    assert budget.get_budget_vs_actual(user.id, 2024, 3) == []


def test_missing_identity_gives_empty_list(app):
    assert budget.get_budget_vs_actual(None, 2024, 3) == []


@pytest.mark.parametrize("month", [0, 13, "march"])
def test_invalid_month_raises(user, month):
    with pytest.raises(InvalidArgument):
        budget.get_budget_vs_actual(user.id, 2024, month)


def test_store_failure_degrades_to_empty(user, march):
    user_id = user.id
    db.drop_all()
    assert budget.get_budget_vs_actual(user_id, 2024, 3) == []


def test_spending_without_budget_is_fully_used(user, march):
    _, c2 = march
    make_expense(user, c2, Decimal("20"), on=date(2024, 3, 5))
    travel = _by_name(budget.get_budget_vs_actual(user.id, 2024, 3))["Travel"]
    assert travel.percent_used == Decimal("100")
    assert travel.status == "danger"
    assert travel.remaining == Decimal("-20")


def test_budget_shift_moves_budget_for_that_month_only(user, march):
    c1, c2 = march
    budget_shifts.create_budget_shift(
        user.id,
        {"year": 2024, "month": 3, "from_category_id": c1.id, "to_category_id": c2.id, "amount": "100"},
    )

    rows = _by_name(budget.get_budget_vs_actual(user.id, 2024, 3))
    assert rows["Food"].adjustment == Decimal("-100")
    assert rows["Food"].adjusted_budget == Decimal("400")
    assert rows["Travel"].adjusted_budget == Decimal("100")
    # budgeted stays the configured value
    assert rows["Food"].budgeted == Decimal("500")

    april = _by_name(budget.get_budget_vs_actual(user.id, 2024, 4))
    assert april["Food"].adjustment == Decimal("0")


def test_budget_shift_validation(user, other_user, march):
    c1, c2 = march
    base = {"year": 2024, "month": 3, "from_category_id": c1.id, "to_category_id": c2.id}
    with pytest.raises(InvalidArgument):
        budget_shifts.create_budget_shift(user.id, {**base, "to_category_id": c1.id, "amount": 5})
    with pytest.raises(InvalidArgument):
        budget_shifts.create_budget_shift(user.id, {**base, "amount": 0})
    with pytest.raises(InvalidArgument):
        budget_shifts.create_budget_shift(user.id, {**base, "month": 13, "amount": 5})

    foreign = make_category(other_user, "Elsewhere")
    with pytest.raises(NotFound):
        budget_shifts.create_budget_shift(user.id, {**base, "to_category_id": foreign.id, "amount": 5})


def test_shiftable_amount_never_negative():
    assert budget_shifts.shiftable_amount(500, -100, 150) == Decimal("250")
    assert budget_shifts.shiftable_amount(100, 0, 300) == Decimal("0")
    assert budget_shifts.shiftable_amount(None, 50, 0) == Decimal("50")


def test_summary_for_past_month(user, march):
    summary = budget.get_budget_summary(user.id, 2024, 3, today=date(2024, 5, 2))
    assert summary["total_budget"] == Decimal("500")
    assert summary["total_spent"] == Decimal("150")
    assert summary["remaining"] == Decimal("350")
    assert summary["days_in_month"] == 31
    assert summary["current_day"] == 31
    assert round(summary["expected_spent_by_today"], 2) == Decimal("500.00")
    assert summary["pacing_status"] == "under"


def test_summary_for_current_month_paces_linearly(user, march):
    summary = budget.get_budget_summary(user.id, 2024, 3, today=date(2024, 3, 10))
    assert summary["current_day"] == 10
    assert round(summary["expected_spent_by_today"], 2) == Decimal("161.29")
    assert summary["pacing_status"] == "on-track"


def test_summary_for_future_month(user, march):
    summary = budget.get_budget_summary(user.id, 2024, 3, today=date(2024, 1, 1))
    assert summary["current_day"] == 0
    assert summary["expected_spent_by_today"] == Decimal("0")


def test_serialized_rows_are_json_numbers(user, march):
    row = budget.get_budget_vs_actual(user.id, 2024, 3)[0].serialize()
    assert row["spent"] == 150.0
    assert row["budgeted"] == 500.0
    assert isinstance(row["percent_used"], float)
