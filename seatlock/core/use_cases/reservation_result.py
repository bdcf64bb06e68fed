from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from seatlock.core.entities.errors import ReservationError
from seatlock.core.entities.seat import SeatSnapshot


@dataclass(frozen=True, slots=True)
class ReservationResult:
    """
    Outcome of a reservation operation: either a seat snapshot or an error kind, never both.
    """
    seat: SeatSnapshot | None = None
    error: ReservationError | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, seat: SeatSnapshot) -> ReservationResult:
        return cls(seat=seat)

    @classmethod
    def failure(cls, error: ReservationError, message: str) -> ReservationResult:
        return cls(error=error, message=message)


def validate_seat_id(seat_id: Any) -> str | None:
    """Returns an error message if seat_id is not an int"""

    if isinstance(seat_id, bool) or not isinstance(seat_id, int):
        return f"seat_id must be an int, got {seat_id!r}"
    return None


def validate_owner_id(owner_id: Any) -> str | None:
    """Returns an error message if owner_id is not a non-blank string"""

    if not isinstance(owner_id, str) or not owner_id.strip():
        return "owner_id must be a non-empty string"
    return None


def validate_ttl(ttl: Any, max_ttl: float) -> str | None:
    """Returns an error message unless 0 < ttl <= max_ttl"""

    if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
        return f"ttl must be a number of seconds, got {ttl!r}"
    try:
        seconds = float(ttl)
    except OverflowError:
        return f"ttl must be greater than 0 and at most {max_ttl} seconds"

    if not math.isfinite(seconds) or seconds <= 0:
        return f"ttl must be a positive number of seconds, got {ttl!r}"
    if seconds > max_ttl:
        return f"ttl must be at most {max_ttl} seconds, got {seconds!r}"
    return None
