"""Schema bootstrap — creates the documents table on an async engine.

Invariants:
    - create_schema() is idempotent (create_all skips existing tables)
    - Used by the app lifespan and by test fixtures; there are no migrations
"""

from sqlalchemy.ext.asyncio import AsyncEngine

from app.db.base import Base


async def create_schema(engine: AsyncEngine) -> None:
    """Create the documents table if it does not exist yet."""
    # Registers Document on Base.metadata
    import app.models.document  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
