import logging
from decimal import Decimal

from sqlalchemy import func

from ..errors import InvalidArgument
from ..extensions import db
from ..models import Expense, ExpenseCategory, ExpenseSubcategory
from ..revalidation import revalidate_entity
from ..utils.budget import parse_date, parse_money
from ..utils.months import local_today, month_bounds, validate_month
from ._scoping import commit, get_owned, read_path, require_user

logger = logging.getLogger(__name__)


def _newest_first(query):
    return query.order_by(Expense.date.desc(), Expense.created_at.desc())


def list_expenses_for_month(user_id, year, month):
    year, month = validate_month(year, month)
    start, end = month_bounds(year, month)
    return _list_between(user_id, start, end)


def list_expenses(user_id, start_date, end_date):
    """Expenses dated from ``start_date`` to ``end_date`` inclusive."""
    start, end = parse_date(start_date, "start_date"), parse_date(end_date, "end_date")
    if end < start:
        raise InvalidArgument("end_date must not be before start_date")
    return _list_between(user_id, start, end, inclusive=True)


@read_path(list)
def _list_between(user_id, start, end, inclusive=False):
    upper = Expense.date <= end if inclusive else Expense.date < end
    query = Expense.query.filter(Expense.user_id == user_id, Expense.date >= start, upper)
    return _newest_first(query).all()


@read_path(list)
def list_recent_expenses(user_id, limit=10):
    return _newest_first(Expense.query.filter_by(user_id=user_id)).limit(limit).all()


def _resolve_subcategory(user_id, subcategory_id, category_id):
    if not subcategory_id:
        return None
    subcategory = get_owned(ExpenseSubcategory, subcategory_id, user_id, "Subcategory")
    if subcategory.category_id != category_id:
        raise InvalidArgument("Subcategory does not belong to the selected category")
    return subcategory.id


def _currency_changes(data):
    """Validated values for the foreign-currency keys present in ``data``."""
    changes = {}
    if "original_currency" in data:
        code = data.get("original_currency")
        if code in (None, ""):
            changes["original_currency"] = None
        elif isinstance(code, str) and len(code.strip()) == 3 and code.strip().isalpha():
            changes["original_currency"] = code.strip().upper()
        else:
            raise InvalidArgument("original_currency must be a 3-letter currency code")
    if "original_amount" in data:
        changes["original_amount"] = parse_money(data.get("original_amount"), "original_amount", allow_none=True)
    if "exchange_rate" in data:
        rate = data.get("exchange_rate")
        if rate in (None, ""):
            changes["exchange_rate"] = None
        else:
            if isinstance(rate, bool):
                raise InvalidArgument("exchange_rate must be a number")
            try:
                rate = Decimal(str(rate))
            except ArithmeticError:
                raise InvalidArgument("exchange_rate must be a number")
            if not rate.is_finite() or rate <= 0:
                raise InvalidArgument("exchange_rate must be greater than 0")
            changes["exchange_rate"] = rate
    return changes


def add_expense(user_id, data):
    require_user(user_id)
    data = data or {}
    category = get_owned(ExpenseCategory, data.get("category_id"), user_id, "Category")
    fields = {
        "category_id": category.id,
        "subcategory_id": _resolve_subcategory(user_id, data.get("subcategory_id"), category.id),
        "amount": parse_money(data.get("amount")),
        "date": parse_date(data.get("date")),
        "note": data.get("note") or None,
        **_currency_changes(data),
    }
    expense = Expense(user_id=user_id, **fields)
    db.session.add(expense)
    commit()
    revalidate_entity(user_id, "expense")
    return expense


def update_expense(user_id, expense_id, data):
    """Partial update; only keys present in ``data`` are touched.

    Every value is validated before the row is modified, so a rejected update
    leaves nothing pending in the session.
    """
    expense = get_owned(Expense, expense_id, user_id, "Expense")
    data = data or {}
    changes = {}

    category_id = expense.category_id
    if "category_id" in data:
        category_id = get_owned(ExpenseCategory, data["category_id"], user_id, "Category").id
        changes["category_id"] = category_id
        if category_id != expense.category_id and "subcategory_id" not in data:
            changes["subcategory_id"] = None
    if "subcategory_id" in data:
        changes["subcategory_id"] = _resolve_subcategory(user_id, data["subcategory_id"], category_id)
    if "amount" in data:
        changes["amount"] = parse_money(data["amount"])
    if "date" in data:
        changes["date"] = parse_date(data["date"])
    if "note" in data:
        changes["note"] = data["note"] or None
    changes.update(_currency_changes(data))

    for field, value in changes.items():
        setattr(expense, field, value)
    commit()
    revalidate_entity(user_id, "expense")
    return expense


def delete_expense(user_id, expense_id):
    expense = get_owned(Expense, expense_id, user_id, "Expense")
    db.session.delete(expense)
    commit()
    revalidate_entity(user_id, "expense")


def category_spending_for_month(user_id, year, month):
    """Total and count of expenses per category for the month."""
    year, month = validate_month(year, month)
    return _category_spending(user_id, *month_bounds(year, month))


@read_path(list)
def _category_spending(user_id, start, end):
    rows = (
        db.session.query(
            ExpenseCategory.id,
            ExpenseCategory.name,
            func.sum(Expense.amount),
            func.count(Expense.id),
        )
        .join(Expense, Expense.category_id == ExpenseCategory.id)
        .filter(Expense.user_id == user_id, Expense.date >= start, Expense.date < end)
        .group_by(ExpenseCategory.id, ExpenseCategory.name)
        .all()
    )
    return [
        {
            "category_id": category_id,
            "category_name": name,
            "total_spent": Decimal(str(total or 0)),
            "count": count,
        }
        for category_id, name, total, count in rows
    ]


def daily_spending_by_day(user_id, year, month):
    """Per-day spending totals for a month, for charts."""
    year, month = validate_month(year, month)
    return _daily_spending(user_id, *month_bounds(year, month))


@read_path(list)
def _daily_spending(user_id, start, end):
    rows = (
        db.session.query(Expense.date, func.sum(Expense.amount))
        .filter(Expense.user_id == user_id, Expense.date >= start, Expense.date < end)
        .group_by(Expense.date)
        .order_by(Expense.date)
        .all()
    )
    return [
        {"day": day.day, "date": day.isoformat(), "amount": Decimal(str(total or 0))}
        for day, total in rows
    ]


@read_path(lambda: Decimal("0"))
def today_spending(user_id, today=None):
    """Spending dated today in the application time zone."""
    today = today or local_today()
    total = (
        db.session.query(func.sum(Expense.amount))
        .filter(Expense.user_id == user_id, Expense.date == today)
        .scalar()
    )
    return Decimal(str(total or 0))
