"""Per-user page cache with path revalidation.

Cached views are stored under a key that embeds a revision token for
``(user, path)``.  Revalidating a path swaps the token, so every cached view
for that user and path misses on its next read.  The old entries simply age
out of the cache.
"""
import logging
import uuid
from functools import wraps

from flask import g, has_app_context, jsonify, request
from flask_jwt_extended import get_jwt_identity

from .extensions import cache

logger = logging.getLogger(__name__)

# Which cached pages depend on which entity
ENTITY_PATHS = {
    "category": ("/budget", "/expenses", "/overview"),
    "subcategory": ("/budget", "/expenses", "/overview"),
    "expense": ("/budget", "/expenses", "/overview"),
    "budget_shift": ("/budget", "/overview"),
}


def mark_degraded_read():
    """Flag the current app context as having served a fallback value."""
    if has_app_context():
        g.pocketbook_degraded_read = True


def degraded_read():
    return bool(g.get("pocketbook_degraded_read"))


def reset_degraded_read():
    g.pop("pocketbook_degraded_read", None)


def _revision_key(user_id, path):
    return f"rev:{user_id}:{path}"


def current_revision(user_id, path):
    key = _revision_key(user_id, path)
    rev = cache.get(key)
    if rev is None:
        rev = uuid.uuid4().hex
        cache.set(key, rev, timeout=0)
    return rev


def revalidate_path(user_id, path):
    cache.set(_revision_key(user_id, path), uuid.uuid4().hex, timeout=0)
    logger.debug("Revalidated %s for user %s", path, user_id)


def revalidate_entity(user_id, entity):
    for path in ENTITY_PATHS.get(entity, ()):
        revalidate_path(user_id, path)


def cached_page(path, timeout=None):
    """Cache a view's JSON payload per user and URL until ``path`` is
    revalidated. The wrapped view returns a plain dict.

    Must be applied under ``@jwt_required()`` so the identity is available.
    """
    def deco(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            user_id = get_jwt_identity()
            view = f"{request.path}?{request.query_string.decode()}"
            key = f"page:{user_id}:{path}:{current_revision(user_id, path)}:{view}"
            payload = cache.get(key)
            if payload is None:
                reset_degraded_read()
                payload = fn(*args, **kwargs)
                if degraded_read():
                    # a fallback must not outlive the failure that produced it
                    logger.warning("Not caching %s for user %s: degraded read", view, user_id)
                else:
                    cache.set(key, payload, timeout=timeout)
            return jsonify(payload), 200
        return wrapper
    return deco
