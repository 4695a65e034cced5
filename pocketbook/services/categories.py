import logging

from ..errors import InvalidArgument
from ..extensions import db
from ..models import BudgetShift, Expense, ExpenseCategory, ExpenseSubcategory
from ..revalidation import revalidate_entity
from ..utils.budget import default_category_icon, parse_money
from ._scoping import commit, get_owned, read_path, require_user

logger = logging.getLogger(__name__)

# Seeded for every new user
DEFAULT_CATEGORIES = [
    "Housing",
    "Food",
    "Transportation",
    "Utilities",
    "Healthcare",
    "Insurance",
    "Children",
    "Entertainment",
    "Allowances",
    "Vehicle",
    "Shopping",
]

UPDATABLE_FIELDS = ("name", "icon", "monthly_budget", "tracked_in_budget")


@read_path(list)
def list_categories(user_id):
    return (
        ExpenseCategory.query.filter_by(user_id=user_id)
        .order_by(ExpenseCategory.name.asc())
        .all()
    )


def get_category(user_id, category_id):
    return get_owned(ExpenseCategory, category_id, user_id, "Category")


def ensure_default_categories(user_id):
    """Create the default category set for a user who has none yet."""
    require_user(user_id)
    if ExpenseCategory.query.filter_by(user_id=user_id).count():
        return []
    created = [
        ExpenseCategory(user_id=user_id, name=name, icon=default_category_icon(name), is_default=True)
        for name in DEFAULT_CATEGORIES
    ]
    db.session.add_all(created)
    commit()
    revalidate_entity(user_id, "category")
    logger.info("Seeded %d default categories for user %s", len(created), user_id)
    return created


def _clean_name(name):
    name = (name or "").strip() if isinstance(name, str) else ""
    if not name:
        raise InvalidArgument("name is required")
    return name


def _check_unique(user_id, name, exclude_id=None):
    query = ExpenseCategory.query.filter_by(user_id=user_id, name=name)
    if exclude_id:
        query = query.filter(ExpenseCategory.id != exclude_id)
    if query.first():
        raise InvalidArgument(f"A category named {name!r} already exists")


def add_category(user_id, name, icon=None, monthly_budget=None, tracked_in_budget=True):
    require_user(user_id)
    name = _clean_name(name)
    _check_unique(user_id, name)
    category = ExpenseCategory(
        user_id=user_id,
        name=name,
        icon=icon or default_category_icon(name),
        is_default=False,
        tracked_in_budget=bool(tracked_in_budget),
        monthly_budget=parse_money(monthly_budget, "monthly_budget", positive=False, allow_none=True),
    )
    db.session.add(category)
    commit()
    revalidate_entity(user_id, "category")
    return category


def update_category(user_id, category_id, changes):
    """Apply the ``UPDATABLE_FIELDS`` present in ``changes``; other keys are rejected."""
    changes = changes or {}
    category = get_owned(ExpenseCategory, category_id, user_id, "Category")
    unknown = set(changes) - set(UPDATABLE_FIELDS)
    if unknown:
        raise InvalidArgument(f"Cannot update: {', '.join(sorted(unknown))}")

    # validate everything first so a rejected update leaves the row untouched
    values = {}
    if "name" in changes:
        values["name"] = _clean_name(changes["name"])
        _check_unique(user_id, values["name"], exclude_id=category.id)
    if "icon" in changes:
        values["icon"] = changes["icon"] or None
    if "monthly_budget" in changes:
        values["monthly_budget"] = parse_money(
            changes["monthly_budget"], "monthly_budget", positive=False, allow_none=True
        )
    if "tracked_in_budget" in changes:
        values["tracked_in_budget"] = bool(changes["tracked_in_budget"])

    for field, value in values.items():
        setattr(category, field, value)
    commit()
    revalidate_entity(user_id, "category")
    return category


def delete_category(user_id, category_id):
    """Delete a category together with its subcategories, expenses and shifts."""
    category = get_owned(ExpenseCategory, category_id, user_id, "Category")
    Expense.query.filter_by(user_id=user_id, category_id=category.id).delete(synchronize_session=False)
    BudgetShift.query.filter(
        BudgetShift.user_id == user_id,
        db.or_(BudgetShift.from_category_id == category.id, BudgetShift.to_category_id == category.id),
    ).delete(synchronize_session=False)
    ExpenseSubcategory.query.filter_by(user_id=user_id, category_id=category.id).delete(
        synchronize_session=False
    )
    db.session.delete(category)
    commit()
    revalidate_entity(user_id, "category")


def update_tracked_categories(user_id, tracked_ids):
    """Mark exactly ``tracked_ids`` as counting toward the budget."""
    require_user(user_id)
    tracked = set(tracked_ids or [])
    categories = ExpenseCategory.query.filter_by(user_id=user_id).all()
    owned = {c.id for c in categories}
    foreign = tracked - owned
    if foreign:
        raise InvalidArgument(f"Unknown category ids: {', '.join(sorted(foreign))}")
    for category in categories:
        category.tracked_in_budget = category.id in tracked
    commit()
    revalidate_entity(user_id, "category")
    return categories


@read_path(list)
def list_expenses_by_category(user_id, category):
    """Expenses in one of the user's categories, given by id or by name (id wins)."""
    owned = ExpenseCategory.query.filter_by(user_id=user_id)
    match = owned.filter_by(id=category).first() or owned.filter_by(name=category).first()
    if match is None:
        return []
    return (
        Expense.query.filter_by(user_id=user_id, category_id=match.id)
        .order_by(Expense.date.desc(), Expense.created_at.desc())
        .all()
    )
