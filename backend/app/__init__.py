"""Drink Review backend — data-access layer for users, reviews and drinks.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
