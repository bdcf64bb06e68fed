from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from seatlock.core.entities.errors import ReservationError, SeatInvariantError


class SeatStatus(str, Enum):
    AVAILABLE = "Available"
    LOCKED = "Locked"
    BOOKED = "Booked"


@dataclass(frozen=True, slots=True)
class SeatSnapshot:
    """
    Immutable copy of a seat taken inside its critical section.
    """
    seat_id: int
    status: SeatStatus
    owner_id: str | None
    lock_deadline: float | None


@dataclass(slots=True)
class Seat:
    seat_id: int
    status: SeatStatus = SeatStatus.AVAILABLE
    owner_id: str | None = None
    lock_deadline: float | None = None

    def is_expired(self, now: float) -> bool:
        return self.status is SeatStatus.LOCKED and self.lock_deadline is not None and self.lock_deadline <= now

    def reclaim_if_expired(self, now: float) -> bool:
        """
        Return the seat to Available if its lock deadline has passed. Returns True if it did.
        """
        if not self.is_expired(now):
            return False
        self._clear()
        return True

    def reclaim_expired_lock(self, *, owner_id: str, deadline: float, now: float) -> bool:
        """
        Reclaim only the specific lock identified by (owner_id, deadline), and only once it has expired.
        A newer lock on the same seat is left alone.
        """
        if self.status is not SeatStatus.LOCKED:
            return False
        if self.owner_id != owner_id or self.lock_deadline != deadline:
            return False
        return self.reclaim_if_expired(now)

    def lock(self, owner_id: str, now: float, ttl: float) -> ReservationError | None:
        if self.status is SeatStatus.BOOKED:
            return ReservationError.ALREADY_BOOKED

        # an expired lock is replaced in the same step, never observed by the new owner
        self.reclaim_if_expired(now)

        if self.status is SeatStatus.LOCKED:
            return ReservationError.ALREADY_LOCKED_BY_OTHER

        self.status = SeatStatus.LOCKED
        self.owner_id = owner_id
        self.lock_deadline = now + ttl
        return None

    def confirm(self, owner_id: str, now: float) -> ReservationError | None:
        if self.status is SeatStatus.BOOKED:
            return ReservationError.ALREADY_BOOKED
        if self.status is SeatStatus.AVAILABLE:
            return ReservationError.NOT_LOCKED
        if self.reclaim_if_expired(now):
            return ReservationError.LOCK_EXPIRED
        if self.owner_id != owner_id:
            return ReservationError.NOT_OWNER

        self.status = SeatStatus.BOOKED
        self.lock_deadline = None
        return None

    def release(self, owner_id: str, now: float) -> ReservationError | None:
        self.reclaim_if_expired(now)
        if self.status is not SeatStatus.LOCKED:
            return ReservationError.NOT_LOCKED
        if self.owner_id != owner_id:
            return ReservationError.NOT_OWNER

        self._clear()
        return None

    def check_invariants(self) -> None:
        if self.status is SeatStatus.AVAILABLE:
            ok = self.owner_id is None and self.lock_deadline is None
        elif self.status is SeatStatus.LOCKED:
            ok = self.owner_id is not None and self.lock_deadline is not None
        elif self.status is SeatStatus.BOOKED:
            ok = self.owner_id is not None and self.lock_deadline is None
        else:
            ok = False

        if not ok:
            raise SeatInvariantError(
                f"Seat {self.seat_id} is inconsistent: status={self.status!r}, "
                f"owner_id={self.owner_id!r}, lock_deadline={self.lock_deadline!r}"
            )

    def snapshot(self) -> SeatSnapshot:
        return SeatSnapshot(
            seat_id=self.seat_id,
            status=self.status,
            owner_id=self.owner_id,
            lock_deadline=self.lock_deadline,
        )

    def _clear(self) -> None:
        self.status = SeatStatus.AVAILABLE
        self.owner_id = None
        self.lock_deadline = None
