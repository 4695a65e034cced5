"""Semantic search over the knowledge base and users' private chunks.

Similarity is cosine similarity computed in process over the stored
embeddings. User chunks are always filtered by owner before scoring.
"""
import json

import numpy as np

from ..models import KbChunk, UserChunk
from .embeddings import get_embeddings_client

DEFAULT_LIMIT = 5
DEFAULT_MIN_SIMILARITY = 0.5


def _score(rows, query_vector, limit, min_similarity):
    rows = [r for r in rows if r.embedding]
    if not rows:
        return []
    matrix = np.asarray([r.embedding for r in rows], dtype=np.float64)
    query = np.asarray(query_vector, dtype=np.float64)
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    with np.errstate(divide="ignore", invalid="ignore"):
        sims = np.where(norms > 0, matrix @ query / norms, 0.0)

    order = np.argsort(-sims)[:limit]
    results = []
    for i in order:
        similarity = float(sims[i])
        if similarity < min_similarity:
            continue
        results.append({**rows[i].serialize(), "similarity": similarity})
    return results


def search_knowledge_base(query, limit=DEFAULT_LIMIT, min_similarity=DEFAULT_MIN_SIMILARITY, doc_id=None):
    vector = get_embeddings_client().embed_query(query)
    rows = KbChunk.query
    if doc_id:
        rows = rows.filter_by(doc_id=doc_id)
    return _score(rows.all(), vector, limit, min_similarity)


def search_user_chunks(user_id, query, limit=DEFAULT_LIMIT, min_similarity=DEFAULT_MIN_SIMILARITY, doc_id=None):
    if not user_id:
        raise ValueError("user_id is required for user chunk search")
    vector = get_embeddings_client().embed_query(query)
    rows = UserChunk.query.filter_by(user_id=user_id)
    if doc_id:
        rows = rows.filter_by(doc_id=doc_id)
    return _score(rows.all(), vector, limit, min_similarity)


def search_all(user_id, query, limit=10, min_similarity=0.7, doc_id=None):
    """Both stores merged, best first, tagged with their ``source``."""
    kb = search_knowledge_base(query, limit, min_similarity, doc_id)
    mine = search_user_chunks(user_id, query, limit, min_similarity, doc_id)
    combined = [{**r, "source": "kb"} for r in kb] + [{**r, "source": "user"} for r in mine]
    combined.sort(key=lambda r: r["similarity"], reverse=True)
    return combined[:limit]


def build_context_from_results(results, max_length=4000, include_metadata=False):
    """Format results as a prompt context block, truncated to ``max_length``."""
    parts, length = [], 0
    for result in results:
        header = f"[Source: {result['doc_id']}, Chunk {result['chunk_index'] + 1}]"
        meta = ""
        if include_metadata and result.get("metadata"):
            meta = f"\nMetadata: {json.dumps(result['metadata'])}"
        entry = f"{header}{meta}\n{result['content']}"
        if length + len(entry) > max_length:
            break
        parts.append(entry)
        length += len(entry) + 2
    return "\n\n---\n\n".join(parts)
