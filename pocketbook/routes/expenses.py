from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from ..revalidation import cached_page
from ..services import expenses as svc
from ._params import json_body, month_args

bp = Blueprint("expenses", __name__)


@bp.get("/expenses")
@jwt_required()
@cached_page("/expenses")
def list_expenses():
    """Expenses for ``?year=&month=`` or an inclusive ``?start_date=&end_date=`` range."""
    user_id = get_jwt_identity()
    start, end = request.args.get("start_date"), request.args.get("end_date")
    if start or end:
        rows = svc.list_expenses(user_id, start, end)
    else:
        rows = svc.list_expenses_for_month(user_id, *month_args())
    return {"total": len(rows), "expenses": [e.serialize() for e in rows]}


@bp.post("/expenses")
@jwt_required()
def create_expense():
    expense = svc.add_expense(get_jwt_identity(), json_body())
    return jsonify(expense.serialize()), 201


@bp.patch("/expenses/<expense_id>")
@jwt_required()
def update_expense(expense_id):
    expense = svc.update_expense(get_jwt_identity(), expense_id, json_body())
    return jsonify(expense.serialize()), 200


@bp.delete("/expenses/<expense_id>")
@jwt_required()
def delete_expense(expense_id):
    svc.delete_expense(get_jwt_identity(), expense_id)
    return "", 204


@bp.get("/expenses/by-category")
@jwt_required()
def spending_by_category():
    rows = svc.category_spending_for_month(get_jwt_identity(), *month_args())
    return jsonify({
        "categories": [{**r, "total_spent": float(r["total_spent"])} for r in rows]
    }), 200


@bp.get("/expenses/daily")
@jwt_required()
def spending_by_day():
    rows = svc.daily_spending_by_day(get_jwt_identity(), *month_args())
    return jsonify({"days": [{**r, "amount": float(r["amount"])} for r in rows]}), 200


@bp.get("/expenses/today")
@jwt_required()
def spending_today():
    return jsonify({"total": float(svc.today_spending(get_jwt_identity()))}), 200
