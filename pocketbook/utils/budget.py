from datetime import date
from decimal import Decimal, InvalidOperation

from ..errors import InvalidArgument

PACE_BAND = Decimal("0.1")

DEFAULT_CATEGORY_ICONS = {
    "Housing": "home",
    "Food": "utensils",
    "Transportation": "train-front",
    "Utilities": "zap",
    "Healthcare": "heart-pulse",
    "Insurance": "shield-check",
    "Children": "baby",
    "Entertainment": "film",
    "Allowances": "wallet",
    "Vehicle": "car",
    "Shopping": "shopping-bag",
    "Savings": "piggy-bank",
    "Education": "graduation-cap",
    "Travel": "plane",
    "Groceries": "shopping-cart",
    "Dining": "utensils-crossed",
    "Fitness": "dumbbell",
    "Beauty": "sparkles",
    "Hobbies": "gamepad-2",
    "Gifts": "gift",
    "Pets": "paw-print",
    "Subscriptions": "repeat",
    "Bills & Subscriptions": "file-text",
    "Healthcare & Fitness": "activity",
    "Helper": "hand-helping",
}
FALLBACK_ICON = "circle-dollar-sign"


def default_category_icon(name):
    """Exact match, then case-insensitive, then substring either way."""
    if name in DEFAULT_CATEGORY_ICONS:
        return DEFAULT_CATEGORY_ICONS[name]
    lower = (name or "").lower()
    for key, icon in DEFAULT_CATEGORY_ICONS.items():
        if key.lower() == lower:
            return icon
    if lower:
        for key, icon in DEFAULT_CATEGORY_ICONS.items():
            if lower in key.lower() or key.lower() in lower:
                return icon
    return FALLBACK_ICON


def to_decimal(value):
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def percent_used(spent, budget):
    spent, budget = to_decimal(spent), to_decimal(budget)
    if budget <= 0:
        return Decimal("0")
    return spent / budget * 100


def daily_budget(monthly_budget, days):
    return to_decimal(monthly_budget) / days


def expected_spending_by_day(monthly_budget, day_of_month, days):
    return daily_budget(monthly_budget, days) * day_of_month


def spending_pace_status(actual, expected):
    """'under', 'on-track' or 'over' within a +/-10% band of linear pacing."""
    actual, expected = to_decimal(actual), to_decimal(expected)
    if expected == 0:
        return "on-track"
    ratio = actual / expected
    if ratio < 1 - PACE_BAND:
        return "under"
    if ratio <= 1 + PACE_BAND:
        return "on-track"
    return "over"


def budget_usage_status(pct):
    pct = to_decimal(pct)
    if pct < 75:
        return "safe"
    if pct < 90:
        return "warning"
    return "danger"


def parse_money(value, field="amount", positive=True, allow_none=False):
    """Validate a user-supplied amount and return it as a 2dp Decimal."""
    if value is None or value == "":
        if allow_none:
            return None
        raise InvalidArgument(f"{field} is required")
    if isinstance(value, bool):
        raise InvalidArgument(f"{field} must be a number")
    try:
        amount = Decimal(str(value)).quantize(Decimal("0.01"))
    except (InvalidOperation, ValueError):
        raise InvalidArgument(f"{field} must be a number")
    if not amount.is_finite():
        raise InvalidArgument(f"{field} must be a number")
    if positive and amount <= 0:
        raise InvalidArgument(f"{field} must be greater than 0")
    if not positive and amount < 0:
        raise InvalidArgument(f"{field} cannot be negative")
    return amount


def parse_date(value, field="date"):
    if isinstance(value, date):
        return value
    if not value:
        raise InvalidArgument(f"{field} is required")
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise InvalidArgument(f"Invalid {field} format. Use YYYY-MM-DD")
