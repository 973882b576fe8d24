"""Services Layer — user and review repositories, picture assets, reconciliation.

Invariants:
    - Repositories receive their store, hasher and asset manager via constructor
    - Every public operation validates input before its first store call
"""
