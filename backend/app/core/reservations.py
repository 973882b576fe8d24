"""Reservation helpers — building and ordering drinkReserved entries."""

from app.core.domain_types import Reservation
from app.core.validation import generate_current_date, parse_timestamp


def new_reservation(drink_id: str, timestamp: str | None = None) -> Reservation:
    return Reservation(drinkId=drink_id, timestamp=timestamp or generate_current_date())


def sort_reservations(reservations: list[Reservation]) -> list[Reservation]:
    """Ascending by parsed timestamp. sorted() is stable, so ties keep insertion order."""
    return sorted(reservations, key=lambda r: parse_timestamp(r["timestamp"]))
