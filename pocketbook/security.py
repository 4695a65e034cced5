# pocketbook/security.py
from functools import wraps

from flask import jsonify
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from .extensions import db, jwt
from .models import User


def current_user_id(optional=False):
    """Identity of the caller as a string, or None when ``optional`` and absent."""
    verify_jwt_in_request(optional=optional)
    ident = get_jwt_identity()
    return str(ident) if ident is not None else None


def active_user_required(fn):
    """Usage: @active_user_required  (rejects tokens of deleted/disabled users)"""
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        user = db.session.get(User, str(get_jwt_identity()))
        if user is None or not user.is_active:
            return jsonify({"error": "unauthorized", "message": "account disabled"}), 401
        return fn(*args, **kwargs)
    return wrapper


@jwt.unauthorized_loader
def _missing_token(reason):
    return jsonify({"error": "unauthorized", "message": reason}), 401


@jwt.invalid_token_loader
def _invalid_token(reason):
    return jsonify({"error": "unauthorized", "message": reason}), 401


@jwt.expired_token_loader
def _expired_token(jwt_header, jwt_payload):
    return jsonify({"error": "unauthorized", "message": "token expired"}), 401
