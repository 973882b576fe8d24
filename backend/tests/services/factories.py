"""Shared test data — credentials and id constants used across service tests."""

PASSWORD = "Secret#123"
OTHER_PASSWORD = "Another#456"

# Well-formed ids that no document ever receives
MISSING_ID = "0" * 32
