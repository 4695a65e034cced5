from ..errors import InvalidArgument
from ..extensions import db
from ..models import Expense, ExpenseCategory, ExpenseSubcategory
from ..revalidation import revalidate_entity
from ._scoping import commit, get_owned, read_path


def _clean_name(name):
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        raise InvalidArgument("name is required")
    return name


@read_path(list)
def list_subcategories(user_id, category_id):
    return (
        ExpenseSubcategory.query.filter_by(user_id=user_id, category_id=category_id)
        .order_by(ExpenseSubcategory.name.asc())
        .all()
    )


@read_path(list)
def list_all_subcategories(user_id):
    return (
        ExpenseSubcategory.query.filter_by(user_id=user_id)
        .order_by(ExpenseSubcategory.name.asc())
        .all()
    )


def add_subcategory(user_id, category_id, name):
    category = get_owned(ExpenseCategory, category_id, user_id, "Category")
    subcategory = ExpenseSubcategory(user_id=user_id, category_id=category.id, name=_clean_name(name))
    db.session.add(subcategory)
    commit()
    revalidate_entity(user_id, "subcategory")
    return subcategory


def update_subcategory(user_id, subcategory_id, name):
    subcategory = get_owned(ExpenseSubcategory, subcategory_id, user_id, "Subcategory")
    subcategory.name = _clean_name(name)
    commit()
    revalidate_entity(user_id, "subcategory")
    return subcategory


def delete_subcategory(user_id, subcategory_id):
    subcategory = get_owned(ExpenseSubcategory, subcategory_id, user_id, "Subcategory")
    # expenses keep their category, they just lose the finer label
    Expense.query.filter_by(user_id=user_id, subcategory_id=subcategory.id).update(
        {"subcategory_id": None}, synchronize_session=False
    )
    db.session.delete(subcategory)
    commit()
    revalidate_entity(user_id, "subcategory")
