"""Request Dependencies — builds repositories per request around one record store.

Invariants:
    - One SqlRecordStore per request: user and review repositories share it, so
      cascades and reservations run inside the same transaction
    - Hasher and asset manager are process-wide (stateless), cached with lru_cache

Design Decisions:
    - Plain Depends() chain over a DI container; tests swap pieces through
      app.dependency_overrides
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.infrastructure.asset_store import LocalAssetStore
from app.infrastructure.database import get_db
from app.infrastructure.document_store import SqlRecordStore
from app.infrastructure.password_hasher import BcryptPasswordHasher
from app.services.picture_assets import PictureAssetManager
from app.services.reconciliation import ConsistencyReconciler
from app.services.review_repository import ReviewRepository
from app.services.user_repository import UserRepository


async def get_store(db: AsyncSession = Depends(get_db)) -> SqlRecordStore:
    return SqlRecordStore(db)


@lru_cache
def get_password_hasher() -> BcryptPasswordHasher:
    return BcryptPasswordHasher(rounds=get_settings().password_hash_rounds)


@lru_cache
def get_picture_manager() -> PictureAssetManager:
    settings = get_settings()
    return PictureAssetManager(
        LocalAssetStore(settings.assets_dir), settings.pictures_subdir,
    )


def get_user_repository(
    store: SqlRecordStore = Depends(get_store),
    hasher: BcryptPasswordHasher = Depends(get_password_hasher),
    pictures: PictureAssetManager = Depends(get_picture_manager),
) -> UserRepository:
    return UserRepository(store, hasher, pictures)


def get_review_repository(
    store: SqlRecordStore = Depends(get_store),
    users: UserRepository = Depends(get_user_repository),
    pictures: PictureAssetManager = Depends(get_picture_manager),
) -> ReviewRepository:
    return ReviewRepository(store, users, pictures)


def get_reconciler(
    store: SqlRecordStore = Depends(get_store),
) -> ConsistencyReconciler:
    return ConsistencyReconciler(store)
