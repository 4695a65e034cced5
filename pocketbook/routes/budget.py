from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from ..errors import InvalidArgument
from ..revalidation import cached_page
from ..services import budget as svc
from ..services import budget_shifts as shifts
from ..services.categories import get_category
from ..utils.months import navigation
from ._params import json_body, month_args

bp = Blueprint("budget", __name__, url_prefix="/budget")


@bp.get("")
@jwt_required()
@cached_page("/budget")
def budget_vs_actual():
    year, month = month_args()
    rows = svc.get_budget_vs_actual(get_jwt_identity(), year, month)
    return {"year": year, "month": month, "categories": [r.serialize() for r in rows]}


@bp.get("/summary")
@jwt_required()
@cached_page("/budget")
def budget_summary():
    year, month = month_args()
    summary = svc.get_budget_summary(get_jwt_identity(), year, month)
    return {"year": year, "month": month, **svc.serialize_summary(summary)}


@bp.get("/navigation")
@jwt_required()
def month_navigation():
    return jsonify(navigation(*month_args())), 200


@bp.get("/shifts")
@jwt_required()
def list_shifts():
    rows = shifts.list_budget_shifts(get_jwt_identity(), *month_args())
    return jsonify({"shifts": [s.serialize() for s in rows]}), 200


@bp.post("/shifts")
@jwt_required()
def create_shift():
    shift = shifts.create_budget_shift(get_jwt_identity(), json_body())
    return jsonify(shift.serialize()), 201


@bp.delete("/shifts/<shift_id>")
@jwt_required()
def delete_shift(shift_id):
    shifts.delete_budget_shift(get_jwt_identity(), shift_id)
    return "", 204


@bp.get("/shiftable")
@jwt_required()
def shiftable():
    """How much budget can still be moved out of ``?category_id=`` this month."""
    user_id = get_jwt_identity()
    year, month = month_args()
    category_id = request.args.get("category_id")
    if not category_id:
        raise InvalidArgument("category_id is required")
    category = get_category(user_id, category_id)
    row = next((r for r in svc.get_budget_vs_actual(user_id, year, month) if r.category_id == category.id), None)
    amount = 0
    if row is not None:
        amount = shifts.shiftable_amount(row.budgeted, row.adjustment, row.spent)
    return jsonify({"category_id": category.id, "year": year, "month": month, "shiftable": float(amount)}), 200
