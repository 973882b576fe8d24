"""Core Layer — pure domain logic: errors, types, validation, patch operators, consistency checks.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - No function in core/ performs IO

Design Decisions:
    - Functional core separated from imperative shell: repositories orchestrate
      awaited store calls around these functions
"""
