"""Page composers: everything one screen needs, fetched concurrently."""
from flask import Blueprint
from flask_jwt_extended import get_jwt_identity, jwt_required

from ..composer import fan_out
from ..revalidation import cached_page
from ..services import budget, budget_shifts, categories, expenses, subcategories
from ..utils.months import navigation
from ._params import month_args

bp = Blueprint("pages", __name__, url_prefix="/pages")


def _serialized(rows):
    return [r.serialize() for r in rows]


@bp.get("/budget")
@jwt_required()
@cached_page("/budget")
def budget_page():
    user_id = get_jwt_identity()
    year, month = month_args()
    data = fan_out({
        "categories": lambda: _serialized(categories.list_categories(user_id)),
        "subcategories": lambda: _serialized(subcategories.list_all_subcategories(user_id)),
        "budget_vs_actual": lambda: _serialized(budget.get_budget_vs_actual(user_id, year, month)),
        "summary": lambda: budget.serialize_summary(budget.get_budget_summary(user_id, year, month)),
        "expenses": lambda: _serialized(expenses.list_expenses_for_month(user_id, year, month)),
        "daily_spending": lambda: [
            {**d, "amount": float(d["amount"])} for d in expenses.daily_spending_by_day(user_id, year, month)
        ],
        "shifts": lambda: _serialized(budget_shifts.list_budget_shifts(user_id, year, month)),
    })
    data["navigation"] = navigation(year, month)
    return data


@bp.get("/overview")
@jwt_required()
@cached_page("/overview")
def overview_page():
    user_id = get_jwt_identity()
    year, month = month_args()
    return fan_out({
        "summary": lambda: budget.serialize_summary(budget.get_budget_summary(user_id, year, month)),
        "today_spending": lambda: float(expenses.today_spending(user_id)),
        "recent_expenses": lambda: _serialized(expenses.list_recent_expenses(user_id, limit=5)),
        "category_spending": lambda: [
            {**r, "total_spent": float(r["total_spent"])}
            for r in expenses.category_spending_for_month(user_id, year, month)
        ],
    })
