"""Error Hierarchy — codes, categories, status codes and the REST envelope."""

import pytest

from app.core.errors import (
    AssetCleanupError, AssetWriteError, CascadeError, DatabaseError,
    DrinkReviewError, DrinkUnavailableError, DuplicateEmailError, ErrorCategory,
    ErrorContext, INVALID_CREDENTIALS_MESSAGE, InputValidationError,
    InvalidCredentialsError, PersistenceError, ResourceNotFoundError,
)


@pytest.mark.parametrize("error,status,code", [
    (InputValidationError("bad", "email"), 400, "VALIDATION_ERROR"),
    (DuplicateEmailError("a@x.com"), 409, "DUPLICATE_EMAIL"),
    (ResourceNotFoundError("User", "u1"), 404, "RESOURCE_NOT_FOUND"),
    (InvalidCredentialsError(), 401, "INVALID_CREDENTIALS"),
    (DrinkUnavailableError("d1"), 409, "DRINK_UNAVAILABLE"),
    (PersistenceError("boom", "update"), 500, "PERSISTENCE_ERROR"),
    (CascadeError("boom"), 500, "CASCADE_ERROR"),
    (AssetWriteError("disk full"), 500, "ASSET_WRITE_ERROR"),
    (AssetCleanupError("pictures/a.png"), 500, "ASSET_CLEANUP_ERROR"),
    (DatabaseError("down", "execute"), 503, "DATABASE_ERROR"),
])
def test_status_and_code(error, status, code):
    assert isinstance(error, DrinkReviewError)
    assert error.http_status == status
    assert error.code == code


def test_invalid_credentials_message_is_fixed():
    error = InvalidCredentialsError(ErrorContext(user_id="u1"))
    assert error.message == INVALID_CREDENTIALS_MESSAGE


def test_not_found_exposes_resource_type():
    error = ResourceNotFoundError("Drink", "d1")
    assert error.resource_type == "Drink"
    assert error.category is ErrorCategory.RESOURCE_NOT_FOUND


def test_response_envelope_carries_context_ids():
    error = CascadeError("boom", ErrorContext(user_id="u1", review_id="r1"))
    body = error.to_response()["error"]
    assert body["code"] == "CASCADE_ERROR"
    assert body["category"] == "consistency"
    assert body["context"] == {"user_id": "u1", "review_id": "r1", "drink_id": None}
    assert body["timestamp"]
