"""Chunk, embed and store documents for search."""
import logging

from sqlalchemy import func

from ..extensions import db
from ..models import KbChunk, UserChunk
from ..services._scoping import commit, require_user
from .chunker import TextChunker
from .embeddings import get_embeddings_client

logger = logging.getLogger(__name__)


def _ingest(model, doc_id, content, metadata=None, owner=None, chunker_config=None,
            replace_existing=True, skip_embeddings=False):
    if not doc_id or not (content or "").strip():
        raise ValueError("doc_id and content are required")

    chunker = TextChunker(base_metadata={"doc_id": doc_id, **(metadata or {})}, **(chunker_config or {}))
    chunks = chunker.chunk(content)
    embeddings = [None] * len(chunks)
    if not skip_embeddings and chunks:
        embeddings = get_embeddings_client().embed_batch([c["content"] for c in chunks])

    scope = {"doc_id": doc_id}
    if owner is not None:
        scope["user_id"] = owner
    if replace_existing:
        model.query.filter_by(**scope).delete(synchronize_session=False)

    for chunk, embedding in zip(chunks, embeddings):
        db.session.add(model(
            chunk_index=chunk["metadata"]["chunk_index"],
            content=chunk["content"],
            metadata_=chunk["metadata"],
            embedding=embedding,
            **scope,
        ))
    commit()
    logger.info("Ingested %s into %s: %d chunks", doc_id, model.__tablename__, len(chunks))
    return {"doc_id": doc_id, "chunks_created": len(chunks)}


def ingest_to_knowledge_base(doc_id, content, metadata=None, **options):
    return _ingest(KbChunk, doc_id, content, metadata, **options)


def ingest_to_user_store(user_id, doc_id, content, metadata=None, **options):
    require_user(user_id)
    return _ingest(UserChunk, doc_id, content, metadata, owner=user_id, **options)


def delete_from_knowledge_base(doc_id):
    KbChunk.query.filter_by(doc_id=doc_id).delete(synchronize_session=False)
    commit()


def delete_from_user_store(user_id, doc_id):
    require_user(user_id)
    UserChunk.query.filter_by(user_id=user_id, doc_id=doc_id).delete(synchronize_session=False)
    commit()


def _list_docs(query, model):
    rows = (
        query.with_entities(model.doc_id, func.count(model.id), func.min(model.created_at))
        .group_by(model.doc_id)
        .order_by(model.doc_id)
        .all()
    )
    return [
        {"doc_id": doc_id, "chunk_count": count, "created_at": created.isoformat() if created else None}
        for doc_id, count, created in rows
    ]


def list_knowledge_base_docs():
    return _list_docs(KbChunk.query, KbChunk)


def list_user_store_docs(user_id):
    require_user(user_id)
    return _list_docs(UserChunk.query.filter_by(user_id=user_id), UserChunk)
