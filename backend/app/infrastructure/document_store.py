"""SQL Record Store — RecordStore implementation over the documents table.

Invariants:
    - One store instance wraps one AsyncSession (one per request / per unit of work)
    - Outside transaction() every write commits immediately; inside it, writes are
      flushed and committed once when the outermost block exits cleanly
    - Any exception inside transaction(), cancellation included, rolls back every
      write made in the block and resets the nesting depth
    - Reads return deep copies: callers can never mutate ORM state behind its back
    - modified_count is 0 when the patch leaves the document unchanged

Design Decisions:
    - Filters other than "_id" are evaluated in Python over the collection
      (no query optimization is attempted)
    - populate_existing on every select: rows expired by a rollback reload cleanly
"""

import copy
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.document_patch import apply_patch, matches
from app.core.domain_types import Collection
from app.core.repository_protocols import DeleteResult, InsertResult, UpdateResult
from app.models.document import Document, new_document_id

logger = logging.getLogger(__name__)


class SqlRecordStore:
    """Document-style collections persisted through async SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self._transaction_depth = 0

    # ── Reads ─────────────────────────────────────────────────

    async def find(
        self, collection: Collection, filter_: dict[str, Any],
    ) -> dict | None:
        rows = await self._matching_rows(collection, filter_)
        return _to_record(rows[0]) if rows else None

    async def find_many(
        self, collection: Collection, filter_: dict[str, Any] | None = None,
    ) -> list[dict]:
        rows = await self._matching_rows(collection, filter_ or {})
        return [_to_record(row) for row in rows]

    # ── Writes ────────────────────────────────────────────────

    async def insert(
        self, collection: Collection, record: dict[str, Any],
    ) -> InsertResult:
        body = copy.deepcopy(record)
        document = Document(
            id=body.pop("_id", None) or new_document_id(),
            collection=Collection(collection).value,
            body=body,
        )
        self.session.add(document)
        await self._persist()
        logger.debug(
            f"Inserted {document.id}",
            extra={"collection": document.collection},
        )
        return InsertResult(acknowledged=True, inserted_id=document.id)

    async def update(
        self, collection: Collection, filter_: dict[str, Any],
        patch: dict[str, dict[str, Any]],
    ) -> UpdateResult:
        rows = await self._matching_rows(collection, filter_)
        if not rows:
            return UpdateResult(matched_count=0, modified_count=0)
        document = rows[0]
        updated = apply_patch(document.body, patch)
        if updated == document.body:
            return UpdateResult(matched_count=1, modified_count=0)
        document.body = updated
        await self._persist()
        return UpdateResult(matched_count=1, modified_count=1)

    async def delete(
        self, collection: Collection, filter_: dict[str, Any],
    ) -> DeleteResult:
        rows = await self._matching_rows(collection, filter_)
        if not rows:
            return DeleteResult(deleted_count=0)
        await self.session.delete(rows[0])
        await self._persist()
        return DeleteResult(deleted_count=1)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator["SqlRecordStore"]:
        """Group writes into one commit; nested blocks join the outer one."""
        outermost = self._transaction_depth == 0
        self._transaction_depth += 1
        try:
            yield self
        except BaseException:
            # CancelledError included
            if outermost:
                await self.session.rollback()
                logger.warning("Transaction rolled back")
            raise
        else:
            if outermost:
                await self.session.commit()
        finally:
            self._transaction_depth -= 1

    # ── Internals ─────────────────────────────────────────────

    async def _persist(self) -> None:
        if self._transaction_depth:
            await self.session.flush()
        else:
            await self.session.commit()

    async def _matching_rows(
        self, collection: Collection, filter_: dict[str, Any],
    ) -> list[Document]:
        query = (
            select(Document)
            .where(Document.collection == Collection(collection).value)
            .order_by(Document.created_at, Document.id)
            .execution_options(populate_existing=True)
        )
        if "_id" in filter_:
            query = query.where(Document.id == filter_["_id"])
        rest = {k: v for k, v in filter_.items() if k != "_id"}
        result = await self.session.execute(query)
        return [row for row in result.scalars().all() if matches(row.body, rest)]


def _to_record(document: Document) -> dict:
    return copy.deepcopy(document.to_record())
