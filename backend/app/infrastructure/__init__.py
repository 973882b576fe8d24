"""Infrastructure Layer — database sessions, document store, assets, hashing, logging.

Invariants:
    - Implements the Protocols of core/repository_protocols.py
    - Driver exceptions mapped to DatabaseError before reaching repositories
"""
