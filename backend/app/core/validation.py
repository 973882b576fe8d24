"""Input Validation — pure format checks returning normalized values.

Invariants:
    - Every validator returns the normalized value or raises InputValidationError
    - No validator touches the store or the filesystem (existence checks live in
      PictureAssetManager)
    - Timestamps are normalized to ISO-8601 UTC strings

Design Decisions:
    - Plain functions over Pydantic models: repositories are called by non-HTTP
      code too, and the checks must run there as well
    - bool is rejected wherever an int is expected (bool subclasses int)
"""

import re
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any
from uuid import UUID

from app.core.domain_types import Reservation, Role
from app.core.errors import InputValidationError

NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z' \-]*$")
EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+\-]+@[A-Za-z0-9\-]+(\.[A-Za-z0-9\-]+)*\.[A-Za-z]{2,}$")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 25
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 64
REVIEW_TEXT_MAX_LENGTH = 2000
RATING_MIN = 1
RATING_MAX = 5


def _require_string(value: Any, field: str) -> str:
    if not isinstance(value, str):
        raise InputValidationError(f"{field} must be a string", field)
    value = value.strip()
    if not value:
        raise InputValidationError(f"{field} cannot be empty or whitespace", field)
    return value


def validate_id(value: Any, field: str = "id") -> str:
    """Normalize an identifier to 32-char lowercase hex."""
    value = _require_string(value, field)
    try:
        return UUID(value).hex
    except ValueError:
        raise InputValidationError(f"{field} is not a valid id: {value}", field)


def validate_name(value: Any, field: str = "name") -> str:
    value = _require_string(value, field)
    if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
        raise InputValidationError(
            f"{field} must be {NAME_MIN_LENGTH}-{NAME_MAX_LENGTH} characters", field,
        )
    if not NAME_PATTERN.match(value):
        raise InputValidationError(f"{field} contains invalid characters", field)
    return value


def validate_email(value: Any, field: str = "email") -> str:
    """Emails are compared case-insensitively, so they are stored lowercased."""
    value = _require_string(value, field).lower()
    if not EMAIL_PATTERN.match(value):
        raise InputValidationError(f"{field} is not a valid email address", field)
    return value


def validate_phone_number(value: Any, field: str = "phoneNumber") -> str:
    """Accept ten digits in any common grouping, normalize to ddd-ddd-dddd."""
    value = _require_string(value, field)
    digits = re.sub(r"[\s().\-]", "", value)
    if digits.startswith("+1"):
        digits = digits[2:]
    if not digits.isdigit() or len(digits) != 10:
        raise InputValidationError(f"{field} must contain exactly 10 digits", field)
    return f"{digits[:3]}-{digits[3:6]}-{digits[6:]}"


def validate_password(value: Any, field: str = "password") -> str:
    """8-64 chars, no whitespace, at least one uppercase, one digit and one symbol."""
    if not isinstance(value, str):
        raise InputValidationError(f"{field} must be a string", field)
    if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
        raise InputValidationError(
            f"{field} must be {PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters",
            field,
        )
    if re.search(r"\s", value):
        raise InputValidationError(f"{field} cannot contain whitespace", field)
    if not re.search(r"[A-Z]", value):
        raise InputValidationError(f"{field} needs an uppercase letter", field)
    if not re.search(r"\d", value):
        raise InputValidationError(f"{field} needs a digit", field)
    if not re.search(r"[^A-Za-z0-9]", value):
        raise InputValidationError(f"{field} needs a special character", field)
    return value


def validate_rating(value: Any, field: str = "rating") -> int:
    if isinstance(value, bool):
        raise InputValidationError(f"{field} must be an integer", field)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int):
        raise InputValidationError(f"{field} must be an integer", field)
    if not RATING_MIN <= value <= RATING_MAX:
        raise InputValidationError(
            f"{field} must be between {RATING_MIN} and {RATING_MAX}", field,
        )
    return value


def validate_role(value: Any, field: str = "role") -> str:
    value = _require_string(value, field).lower()
    try:
        return Role(value).value
    except ValueError:
        allowed = ", ".join(r.value for r in Role)
        raise InputValidationError(f"{field} must be one of: {allowed}", field)


def validate_review_text(value: Any, field: str = "reviewText") -> str:
    value = _require_string(value, field)
    if len(value) > REVIEW_TEXT_MAX_LENGTH:
        raise InputValidationError(
            f"{field} cannot exceed {REVIEW_TEXT_MAX_LENGTH} characters", field,
        )
    return value


# ─── Time ────────────────────────────────────────────────────────

def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 string; naive values are taken as UTC."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")


def generate_current_date() -> str:
    """Current time as the ISO-8601 UTC string stored on documents."""
    return format_timestamp(datetime.now(timezone.utc))


def validate_date_time(value: Any, field: str = "timeStamp") -> str:
    value = _require_string(value, field)
    try:
        return format_timestamp(parse_timestamp(value))
    except ValueError:
        raise InputValidationError(f"{field} is not a valid date-time: {value}", field)


# ─── Collections ─────────────────────────────────────────────────

def validate_array_of_ids(value: Any, field: str = "ids") -> list[str]:
    if not isinstance(value, list):
        raise InputValidationError(f"{field} must be an array", field)
    return [validate_id(item, f"{field}[{i}]") for i, item in enumerate(value)]


def validate_reservations(value: Any, field: str = "drinkReserved") -> list[Reservation]:
    """Each entry must be {drinkId, timestamp}; extra keys are dropped."""
    if not isinstance(value, list):
        raise InputValidationError(f"{field} must be an array", field)
    reservations: list[Reservation] = []
    for i, item in enumerate(value):
        if not isinstance(item, dict):
            raise InputValidationError(f"{field}[{i}] must be an object", field)
        reservations.append(Reservation(
            drinkId=validate_id(item.get("drinkId"), f"{field}[{i}].drinkId"),
            timestamp=validate_date_time(item.get("timestamp"), f"{field}[{i}].timestamp"),
        ))
    return reservations


def validate_picture_location(value: Any, field: str = "pictureLocation") -> str:
    """Shape check for a stored picture path: relative, no parent segments.

    Empty string means "no picture" and is returned unchanged.
    """
    if value is None or value == "":
        return ""
    value = _require_string(value, field)
    path = PurePosixPath(value.replace("\\", "/"))
    if path.is_absolute() or ".." in path.parts:
        raise InputValidationError(
            f"{field} must be a path relative to the public directory", field,
        )
    return path.as_posix()
