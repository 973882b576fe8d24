"""Pydantic Schemas — request/response contracts for API endpoints.

Invariants:
    - Field names follow the stored document names (camelCase) on responses
"""
