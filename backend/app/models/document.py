"""Document ORM — one row per record of the users, reviews and drinks collections.

Invariants:
    - id is a 32-char hex string assigned on insert (exposed as "_id" on read)
    - collection is one of Collection's values
    - body holds the record fields; "_id" is never stored inside body

Design Decisions:
    - Single JSON-bodied table instead of one table per entity: records keep
      the free-form shape of a document database
    - body is reassigned, never mutated in place, so SQLAlchemy sees every change
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


def new_document_id() -> str:
    return uuid.uuid4().hex


class Document(Base):
    """A stored record and the collection it belongs to."""
    __tablename__ = "documents"
    __table_args__ = (
        Index("ix_documents_collection_created", "collection", "created_at"),
    )

    id: Mapped[str] = mapped_column(
        String(32), primary_key=True, default=new_document_id,
    )
    collection: Mapped[str] = mapped_column(String(20), nullable=False)
    body: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    def to_record(self) -> dict:
        return {"_id": self.id, **self.body}
