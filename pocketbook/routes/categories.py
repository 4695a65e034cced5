from flask import Blueprint, jsonify
from flask_jwt_extended import get_jwt_identity, jwt_required

from ..services import categories as svc
from ..services import subcategories as sub_svc
from ._params import json_body

bp = Blueprint("categories", __name__)


@bp.get("/categories")
@jwt_required()
def list_categories():
    rows = svc.list_categories(get_jwt_identity())
    return jsonify({"categories": [c.serialize() for c in rows]}), 200


@bp.post("/categories")
@jwt_required()
def create_category():
    data = json_body()
    category = svc.add_category(
        get_jwt_identity(),
        data.get("name"),
        icon=data.get("icon"),
        monthly_budget=data.get("monthly_budget"),
        tracked_in_budget=data.get("tracked_in_budget", True),
    )
    return jsonify(category.serialize()), 201


@bp.get("/categories/<category_id>")
@jwt_required()
def get_category(category_id):
    return jsonify(svc.get_category(get_jwt_identity(), category_id).serialize()), 200


@bp.patch("/categories/<category_id>")
@jwt_required()
def update_category(category_id):
    category = svc.update_category(get_jwt_identity(), category_id, json_body())
    return jsonify(category.serialize()), 200


@bp.delete("/categories/<category_id>")
@jwt_required()
def delete_category(category_id):
    svc.delete_category(get_jwt_identity(), category_id)
    return "", 204


@bp.put("/categories/tracked")
@jwt_required()
def update_tracked():
    data = json_body()
    rows = svc.update_tracked_categories(get_jwt_identity(), data.get("category_ids") or [])
    return jsonify({"categories": [c.serialize() for c in rows]}), 200


@bp.get("/categories/<category_id>/expenses")
@jwt_required()
def category_expenses(category_id):
    user_id = get_jwt_identity()
    svc.get_category(user_id, category_id)
    rows = svc.list_expenses_by_category(user_id, category_id)
    return jsonify({"expenses": [e.serialize() for e in rows]}), 200


# ---------- Subcategories ----------

@bp.get("/subcategories")
@jwt_required()
def list_all_subcategories():
    rows = sub_svc.list_all_subcategories(get_jwt_identity())
    return jsonify({"subcategories": [s.serialize() for s in rows]}), 200


@bp.get("/categories/<category_id>/subcategories")
@jwt_required()
def list_subcategories(category_id):
    rows = sub_svc.list_subcategories(get_jwt_identity(), category_id)
    return jsonify({"subcategories": [s.serialize() for s in rows]}), 200


@bp.post("/categories/<category_id>/subcategories")
@jwt_required()
def create_subcategory(category_id):
    sub = sub_svc.add_subcategory(get_jwt_identity(), category_id, json_body().get("name"))
    return jsonify(sub.serialize()), 201


@bp.patch("/subcategories/<subcategory_id>")
@jwt_required()
def update_subcategory(subcategory_id):
    sub = sub_svc.update_subcategory(get_jwt_identity(), subcategory_id, json_body().get("name"))
    return jsonify(sub.serialize()), 200


@bp.delete("/subcategories/<subcategory_id>")
@jwt_required()
def delete_subcategory(subcategory_id):
    sub_svc.delete_subcategory(get_jwt_identity(), subcategory_id)
    return "", 204
