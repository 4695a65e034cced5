# pocketbook/routes/vectors.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, jwt_required

from ..security import current_user_id
from ..vectors import (
    build_context_from_results,
    ingest_to_user_store,
    list_user_store_docs,
    search_all,
    search_knowledge_base,
    search_user_chunks,
)

bp = Blueprint("vectors", __name__, url_prefix="/vectors")

SOURCES = ("kb", "user", "all")


def _search_options(body):
    try:
        return {
            "limit": max(1, min(int(body.get("limit", 5)), 50)),
            "min_similarity": float(body.get("minSimilarity", 0.7)),
            "doc_id": body.get("docId"),
        }
    except (TypeError, ValueError):
        return None


@bp.post("/search")
def search():
    """Search the knowledge base and/or the caller's private documents."""
    # a bad token is rejected by the JWT error handlers; no token means anonymous
    user_id = current_user_id(optional=True)
    try:
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            body = {}

        query = body.get("query")
        source = body.get("source") or "all"
        if not query or not isinstance(query, str):
            return jsonify({"error": "query is required and must be a string"}), 400
        if source not in SOURCES:
            return jsonify({"error": f"source must be one of {', '.join(SOURCES)}"}), 400
        if source in ("user", "all") and not user_id:
            return jsonify({"error": "Authentication required for user document search"}), 401
        options = _search_options(body)
        if options is None:
            return jsonify({"error": "limit and minSimilarity must be numbers"}), 400

        if source == "kb":
            results = search_knowledge_base(query, **options)
        elif source == "user":
            results = search_user_chunks(user_id, query, **options)
        else:
            results = search_all(user_id, query, **options)

        response = {"results": results, "query": query, "source": source}
        if body.get("buildContext") and results:
            response["context"] = build_context_from_results(results)
        return jsonify(response), 200
    except Exception:
        current_app.logger.exception("Vector search error")
        return jsonify({"error": "Failed to perform search"}), 500


@bp.post("/documents")
@jwt_required()
def upload_document():
    """Chunk, embed and store a private document for the caller."""
    body = request.get_json(silent=True) or {}
    doc_id, content = body.get("docId"), body.get("content")
    if not doc_id or not isinstance(content, str) or not content.strip():
        return jsonify({"error": "docId and content are required"}), 400
    result = ingest_to_user_store(get_jwt_identity(), doc_id, content, metadata=body.get("metadata"))
    return jsonify(result), 201


@bp.get("/documents")
@jwt_required()
def list_documents():
    return jsonify({"documents": list_user_store_docs(get_jwt_identity())}), 200
