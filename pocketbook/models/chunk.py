from ..extensions import db
from ._base import new_id, utcnow


class _ChunkMixin:
    id = db.Column(db.String(36), primary_key=True, default=new_id)
    doc_id = db.Column(db.String(255), nullable=False, index=True)
    chunk_index = db.Column(db.Integer, nullable=False)
    content = db.Column(db.Text, nullable=False)
    metadata_ = db.Column("metadata", db.JSON)
    embedding = db.Column(db.JSON)                     # list[float], null until embedded
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def serialize(self):
        return {
            "id": self.id,
            "doc_id": self.doc_id,
            "chunk_index": self.chunk_index,
            "content": self.content,
            "metadata": self.metadata_,
        }


class KbChunk(_ChunkMixin, db.Model):
    """Shared knowledge base, visible to everyone."""

    __tablename__ = "kb_chunks"


class UserChunk(_ChunkMixin, db.Model):
    """Private documents; always filtered by owner."""

    __tablename__ = "user_chunks"

    user_id = db.Column(db.String(36), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
