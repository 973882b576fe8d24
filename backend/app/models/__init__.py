"""ORM Models — SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - Imported here so Base.metadata is complete before create_all runs
"""

from app.models.document import Document  # noqa: F401
