from decimal import Decimal

import pytest

from pocketbook.errors import InvalidArgument
from pocketbook.utils import budget


def test_default_category_icon_lookup():
    assert budget.default_category_icon("Housing") == "home"
    assert budget.default_category_icon("groceries") == "shopping-cart"
    assert budget.default_category_icon("Dining out") == "utensils-crossed"
    assert budget.default_category_icon("Quux") == budget.FALLBACK_ICON


def test_spending_pace_status():
    assert budget.spending_pace_status(50, 100) == "under"
    assert budget.spending_pace_status(95, 100) == "on-track"
    assert budget.spending_pace_status(110, 100) == "on-track"
    assert budget.spending_pace_status(120, 100) == "over"
    assert budget.spending_pace_status(5, 0) == "on-track"


def test_budget_usage_status():
    assert budget.budget_usage_status(10) == "safe"
    assert budget.budget_usage_status(80) == "warning"
    assert budget.budget_usage_status(90) == "danger"


def test_daily_pacing_math():
    assert budget.daily_budget(300, 30) == Decimal("10")
    assert budget.expected_spending_by_day(300, 15, 30) == Decimal("150")
    assert budget.percent_used(50, 200) == Decimal("25")
    assert budget.percent_used(50, 0) == Decimal("0")


def test_parse_money():
    assert budget.parse_money("12.5") == Decimal("12.50")
    assert budget.parse_money(" 7 ") == Decimal("7.00")
    assert budget.parse_money(0, positive=False) == Decimal("0.00")
    assert budget.parse_money(None, allow_none=True) is None
    for bad in ("abc", True, -5, 0, None):
        with pytest.raises(InvalidArgument):
            budget.parse_money(bad)


def test_parse_date():
    assert budget.parse_date("2024-03-01").isoformat() == "2024-03-01"
    with pytest.raises(InvalidArgument):
        budget.parse_date("03/01/2024")
