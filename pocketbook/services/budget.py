"""Budget-vs-actual aggregation.

For a user and a month, every tracked category reports its budgeted amount
(``monthly_budget``, zero when unset), the net budget shifts for the month and
the sum of the user's expenses in that category dated inside the month.
"""
import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import func

from ..extensions import db
from ..models import Expense, ExpenseCategory
from ..utils.budget import (
    budget_usage_status,
    daily_budget,
    expected_spending_by_day,
    percent_used,
    spending_pace_status,
    to_decimal,
)
from ..utils.months import days_in_month, local_today, month_bounds, validate_month
from ._scoping import read_path
from .budget_shifts import budget_adjustments

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass
class BudgetVsActual:
    category_id: str
    category_name: str
    icon: Optional[str]
    budgeted: Decimal
    adjustment: Decimal
    adjusted_budget: Decimal
    spent: Decimal
    remaining: Decimal
    percent_used: Decimal
    status: str

    def serialize(self):
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, Decimal):
                data[key] = float(round(value, 2))
        return data


def get_budget_vs_actual(user_id, year, month):
    year, month = validate_month(year, month)
    return _budget_vs_actual(user_id, year, month)


@read_path(list)
def _budget_vs_actual(user_id, year, month):
    categories = ExpenseCategory.query.filter_by(user_id=user_id, tracked_in_budget=True).all()
    if not categories:
        return []

    start, end = month_bounds(year, month)
    spending = dict(
        db.session.query(Expense.category_id, func.sum(Expense.amount))
        .filter(Expense.user_id == user_id, Expense.date >= start, Expense.date < end)
        .group_by(Expense.category_id)
        .all()
    )
    adjustments = budget_adjustments(user_id, year, month)

    rows = []
    for category in categories:
        budgeted = to_decimal(category.monthly_budget)
        adjustment = adjustments.get(category.id, ZERO)
        adjusted = budgeted + adjustment
        spent = to_decimal(spending.get(category.id))
        if adjusted > 0:
            pct = percent_used(spent, adjusted)
        else:
            pct = Decimal("100") if spent > 0 else ZERO
        rows.append(
            BudgetVsActual(
                category_id=category.id,
                category_name=category.name,
                icon=category.icon,
                budgeted=budgeted,
                adjustment=adjustment,
                adjusted_budget=adjusted,
                spent=spent,
                remaining=adjusted - spent,
                percent_used=pct,
                status=budget_usage_status(pct),
            )
        )

    rows.sort(key=lambda r: (-r.budgeted, -r.spent, r.category_name))
    return rows


@read_path(lambda: ZERO)
def get_total_monthly_budget(user_id):
    total = (
        db.session.query(func.sum(ExpenseCategory.monthly_budget))
        .filter(ExpenseCategory.user_id == user_id, ExpenseCategory.tracked_in_budget.is_(True))
        .scalar()
    )
    return to_decimal(total)


def _empty_summary(days=30):
    return {
        "total_budget": ZERO,
        "total_spent": ZERO,
        "remaining": ZERO,
        "percent_used": ZERO,
        "daily_budget": ZERO,
        "expected_spent_by_today": ZERO,
        "pacing_status": "on-track",
        "days_in_month": days,
        "current_day": 1,
    }


def get_budget_summary(user_id, year, month, today=None):
    """Month totals over tracked categories plus linear spending pace."""
    year, month = validate_month(year, month)
    days = days_in_month(year, month)
    if not user_id:
        return _empty_summary(days)

    rows = get_budget_vs_actual(user_id, year, month)
    total_budget = sum((r.adjusted_budget for r in rows), ZERO)
    total_spent = sum((r.spent for r in rows), ZERO)

    today = today or local_today()
    if (year, month) == (today.year, today.month):
        current_day = today.day
    elif (year, month) < (today.year, today.month):
        current_day = days
    else:
        current_day = 0

    expected = expected_spending_by_day(total_budget, current_day, days)
    return {
        "total_budget": total_budget,
        "total_spent": total_spent,
        "remaining": total_budget - total_spent,
        "percent_used": percent_used(total_spent, total_budget),
        "daily_budget": daily_budget(total_budget, days),
        "expected_spent_by_today": expected,
        "pacing_status": spending_pace_status(total_spent, expected),
        "days_in_month": days,
        "current_day": current_day,
    }


def serialize_summary(summary):
    return {
        key: float(round(value, 2)) if isinstance(value, Decimal) else value
        for key, value in summary.items()
    }
