"""Boundary Protocols — contracts between the repositories and their IO collaborators.

Invariants:
    - Repositories NEVER import infrastructure — dependency arrows point inward only
    - Record store, asset store and password hasher are reached only through these Protocols
    - Implementations are handed to repositories via constructor injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
    - Write results are small frozen dataclasses mirroring document-store acknowledgements
      (acknowledged/insertedId, matched/modifiedCount, deletedCount)
"""

from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Any, Protocol

from app.core.domain_types import Collection


@dataclass(frozen=True)
class InsertResult:
    acknowledged: bool
    inserted_id: str | None


@dataclass(frozen=True)
class UpdateResult:
    matched_count: int
    modified_count: int


@dataclass(frozen=True)
class DeleteResult:
    deleted_count: int


class RecordStore(Protocol):
    """Document store scoped to the users, reviews and drinks collections.

    Documents are plain dicts; reads expose the identifier under "_id".
    update/delete act on the first document matching the filter.
    """
    async def find(
        self, collection: Collection, filter_: dict[str, Any],
    ) -> dict | None: ...
    async def find_many(
        self, collection: Collection, filter_: dict[str, Any] | None = None,
    ) -> list[dict]: ...
    async def insert(
        self, collection: Collection, record: dict[str, Any],
    ) -> InsertResult: ...
    async def update(
        self, collection: Collection, filter_: dict[str, Any],
        patch: dict[str, dict[str, Any]],
    ) -> UpdateResult: ...
    async def delete(
        self, collection: Collection, filter_: dict[str, Any],
    ) -> DeleteResult: ...
    def transaction(self) -> AbstractAsyncContextManager[Any]: ...


class AssetStore(Protocol):
    """Byte-level file access rooted under the public assets directory.

    Relative paths are resolved against the root; absolute paths (temporary
    upload files) are used as-is.
    """
    async def read_bytes(self, path: str) -> bytes: ...
    async def write_bytes(self, path: str, data: bytes) -> None: ...
    async def delete(self, path: str) -> None: ...
    async def exists(self, path: str) -> bool: ...


class PasswordHasher(Protocol):
    def hash(self, password: str) -> str: ...
    def verify(self, password: str, hashed: str) -> bool: ...
