from __future__ import annotations

from enum import Enum


class ReservationError(str, Enum):
    """
    Expected, recoverable outcomes of a reservation operation.

    These are returned to callers as values. They never signal a fault in the service itself.
    """
    NOT_FOUND = "NotFound"
    INVALID_INPUT = "InvalidInput"
    ALREADY_BOOKED = "AlreadyBooked"
    ALREADY_LOCKED_BY_OTHER = "AlreadyLockedByOther"
    NOT_LOCKED = "NotLocked"
    NOT_OWNER = "NotOwner"
    LOCK_EXPIRED = "LockExpired"


class SeatInvariantError(RuntimeError):
    """A seat record reached a state the transitions can never produce. Always a programming error."""
