# pocketbook/routes/auth.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import create_access_token, create_refresh_token, get_jwt_identity, jwt_required

from ..extensions import db
from ..models import User
from ..security import active_user_required
from ..services.categories import ensure_default_categories

bp = Blueprint("auth", __name__, url_prefix="/auth")

MIN_PASSWORD_LENGTH = 8


def _tokens_for(user):
    claims = {"email": user.email}
    return {
        "access_token": create_access_token(identity=user.id, additional_claims=claims),
        "refresh_token": create_refresh_token(identity=user.id),
        "user": user.serialize(),
    }


@bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        return jsonify({"error": "validation_error", "message": "email and password required"}), 400
    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({
            "error": "validation_error",
            "message": f"Password must be at least {MIN_PASSWORD_LENGTH} characters long",
        }), 400
    if User.query.filter_by(email=email).first():
        return jsonify({"error": "validation_error", "message": "email already registered"}), 409

    user = User(email=email, name=(data.get("name") or "").strip() or None)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    ensure_default_categories(user.id)
    current_app.logger.info("Registered user %s", user.id)
    return jsonify(_tokens_for(user)), 201


@bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get("email") or "").strip().lower()
    password = data.get("password") or ""
    if not email or not password:
        return jsonify({"error": "validation_error", "message": "email and password required"}), 400

    user = User.query.filter_by(email=email).first()
    if not user or not user.is_active or not user.check_password(password):
        return jsonify({"error": "unauthorized", "message": "bad credentials"}), 401
    return jsonify(_tokens_for(user)), 200


@bp.post("/refresh")
@jwt_required(refresh=True)
def refresh():
    ident = get_jwt_identity()
    return jsonify(access_token=create_access_token(identity=ident)), 200


@bp.get("/me")
@active_user_required
def me():
    user = db.session.get(User, get_jwt_identity())
    return jsonify(user.serialize()), 200
