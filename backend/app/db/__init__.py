"""Database Infrastructure — declarative Base and schema bootstrap.

Invariants:
    - All sessions are async (AsyncSession)
"""
