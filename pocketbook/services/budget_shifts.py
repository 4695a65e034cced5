from collections import defaultdict
from decimal import Decimal

from ..errors import InvalidArgument
from ..extensions import db
from ..models import BudgetShift, ExpenseCategory
from ..revalidation import revalidate_entity
from ..utils.budget import parse_money, to_decimal
from ..utils.months import validate_month
from ._scoping import commit, get_owned, read_path, require_user


def create_budget_shift(user_id, data):
    """Move ``amount`` of budget from one owned category to another for a month."""
    require_user(user_id)
    data = data or {}
    year, month = validate_month(data.get("year"), data.get("month"))
    amount = parse_money(data.get("amount"))

    from_id, to_id = data.get("from_category_id"), data.get("to_category_id")
    if from_id and from_id == to_id:
        raise InvalidArgument("Source and destination categories must be different")
    source = get_owned(ExpenseCategory, from_id, user_id, "Category")
    target = get_owned(ExpenseCategory, to_id, user_id, "Category")

    shift = BudgetShift(
        user_id=user_id,
        year=year,
        month=month,
        from_category_id=source.id,
        to_category_id=target.id,
        amount=amount,
        note=data.get("note") or None,
    )
    db.session.add(shift)
    commit()
    revalidate_entity(user_id, "budget_shift")
    return shift


def list_budget_shifts(user_id, year, month):
    year, month = validate_month(year, month)
    return _shifts_for(user_id, year, month)


@read_path(list)
def _shifts_for(user_id, year, month):
    return (
        BudgetShift.query.filter_by(user_id=user_id, year=year, month=month)
        .order_by(BudgetShift.created_at.asc())
        .all()
    )


def delete_budget_shift(user_id, shift_id):
    shift = get_owned(BudgetShift, shift_id, user_id, "Budget shift")
    db.session.delete(shift)
    commit()
    revalidate_entity(user_id, "budget_shift")


def budget_adjustments(user_id, year, month):
    """Net adjustment per category id; positive means budget was received."""
    adjustments = defaultdict(Decimal)
    for shift in list_budget_shifts(user_id, year, month):
        amount = to_decimal(shift.amount)
        adjustments[shift.from_category_id] -= amount
        adjustments[shift.to_category_id] += amount
    return dict(adjustments)


def shiftable_amount(original_budget, adjustment, spent):
    """Budget still available to move out of a category."""
    remaining = to_decimal(original_budget) + to_decimal(adjustment) - to_decimal(spent)
    return max(Decimal("0"), remaining)
