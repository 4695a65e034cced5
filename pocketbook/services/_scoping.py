"""Ownership checks and the read/write error tiers shared by all services.

Writes fail loudly (``Unauthorized`` / ``NotFound`` propagate). Reads that hit
a store failure log it and return an empty value instead.
"""
import logging
from functools import wraps

from sqlalchemy.exc import SQLAlchemyError

from ..errors import NotFound, Unauthorized
from ..extensions import db
from ..revalidation import mark_degraded_read

logger = logging.getLogger("pocketbook.services")


def require_user(user_id):
    if not user_id:
        raise Unauthorized("Unauthorized")
    return user_id


def get_owned(model, row_id, user_id, label=None):
    """Row ``row_id`` of ``model`` if it belongs to ``user_id``.

    Foreign and missing rows raise the same ``NotFound``.
    """
    require_user(user_id)
    row = model.query.filter_by(id=row_id, user_id=user_id).first() if row_id else None
    if row is None:
        raise NotFound(f"{label or model.__name__} not found")
    return row


def read_path(default):
    """Degrade a read to ``default()`` on a missing identity or store failure."""
    def deco(fn):
        @wraps(fn)
        def wrapper(user_id, *args, **kwargs):
            if not user_id:
                logger.warning("%s called without an identity", fn.__name__)
                return default()
            try:
                return fn(user_id, *args, **kwargs)
            except SQLAlchemyError:
                logger.exception("Error in %s", fn.__name__)
                db.session.rollback()
                mark_degraded_read()
                return default()
        return wrapper
    return deco


def commit():
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
