"""Service test fixtures — in-memory document store, repositories, FastAPI client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Every test gets its own public directory under tmp_path
    - get_db, the hasher and the picture manager are overridden for route tests

Design Decisions:
    - SQLite in-memory: fast, no external dependency; the aiosqlite dialect uses a
      static pool for :memory:, so every session sees the same database
    - bcrypt cost 4 (the minimum) keeps hashing out of test runtime
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_password_hasher, get_picture_manager
from app.core.domain_types import Collection
from app.db.session import create_schema
from app.infrastructure.asset_store import LocalAssetStore
from app.infrastructure.database import get_db, DatabaseSessionManager
from app.infrastructure.document_store import SqlRecordStore
from app.infrastructure.password_hasher import BcryptPasswordHasher
from app.services.picture_assets import PictureAssetManager
from app.services.review_repository import ReviewRepository
from app.services.user_repository import UserRepository
import app.infrastructure.database as db_module
from app.main import app

from tests.services.factories import PASSWORD


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def store(test_db):
    return SqlRecordStore(test_db)


@pytest.fixture
def public_dir(tmp_path):
    directory = tmp_path / "public"
    (directory / "pictures").mkdir(parents=True)
    return directory


@pytest.fixture
def pictures(public_dir):
    return PictureAssetManager(LocalAssetStore(public_dir))


@pytest.fixture(scope="session")
def hasher():
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def users(store, hasher, pictures):
    return UserRepository(store, hasher, pictures)


@pytest.fixture
def reviews(store, users, pictures):
    return ReviewRepository(store, users, pictures)


@pytest.fixture
def make_user(users):
    """Register a user and return its id. Keyword overrides go to create_user."""
    async def _make(email: str = "alice@example.com", **overrides) -> str:
        fields = {
            "first_name": "Alice",
            "last_name": "Smith",
            "email": email,
            "phone_number": "201-555-0123",
            "password": PASSWORD,
            "profile_picture": "",
            "role": "user",
        }
        fields.update(overrides)
        result = await users.create_user(**fields)
        return result["userId"]
    return _make


@pytest.fixture
def make_drink(store):
    """Insert a drink document directly (drinks are owned elsewhere)."""
    async def _make(available: bool = True, reserved_counts: int = 0,
                    name: str = "Matcha Latte") -> str:
        result = await store.insert(Collection.DRINKS, {
            "name": name,
            "available": available,
            "reservedCounts": reserved_counts,
        })
        return result.inserted_id
    return _make


@pytest.fixture
async def client(test_engine, test_session_factory, hasher, pictures):
    """FastAPI test client with DB, hasher and asset dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_password_hasher] = lambda: hasher
    app.dependency_overrides[get_picture_manager] = lambda: pictures

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
