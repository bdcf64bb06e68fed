from __future__ import annotations

from typing import Any

from loguru import logger

from seatlock.core.clock import Clock
from seatlock.core.entities.errors import ReservationError
from seatlock.core.entities.seat import Seat
from seatlock.core.repositories.seat_repository import SeatRepository
from seatlock.core.scheduling import ExpiryScheduler
from seatlock.core.use_cases.reservation_result import (
    ReservationResult,
    validate_owner_id,
    validate_seat_id,
    validate_ttl,
)


class LockSeatUseCase:
    """
    Places a time-bounded hold on a seat for one owner.

    An expired lock found on the seat is reclaimed and replaced in the same critical section,
    so the previous owner never holds the seat past its deadline.
    """

    def __init__(
            self,
            *,
            seat_repo: SeatRepository,
            clock: Clock,
            scheduler: ExpiryScheduler,
            default_ttl: float,
            max_ttl: float,
    ) -> None:
        self._seat_repo = seat_repo
        self._clock = clock
        self._scheduler = scheduler
        self._default_ttl = default_ttl
        self._max_ttl = max_ttl

    def execute(self, *, seat_id: Any, owner_id: Any, ttl: Any = None) -> ReservationResult:
        if ttl is None:
            ttl = self._default_ttl

        problem = validate_seat_id(seat_id) or validate_owner_id(owner_id) or validate_ttl(ttl, self._max_ttl)
        if problem:
            return ReservationResult.failure(ReservationError.INVALID_INPUT, problem)
        if not self._seat_repo.contains(seat_id):
            return ReservationResult.failure(ReservationError.NOT_FOUND, f"Seat {seat_id} not found")

        return self._seat_repo.apply_transition(seat_id, lambda seat: self._lock(seat, owner_id, float(ttl)))

    def _lock(self, seat: Seat, owner_id: str, ttl: float) -> ReservationResult:
        now = self._clock.now()
        expired_owner = seat.owner_id if seat.is_expired(now) else None

        error = seat.lock(owner_id, now, ttl)
        if error is ReservationError.ALREADY_BOOKED:
            logger.debug(f"[lock-rejected] seat={seat.seat_id} owner={owner_id} reason=booked")
            return ReservationResult.failure(error, f"Seat {seat.seat_id} is already booked")
        if error is not None:
            logger.debug(f"[lock-rejected] seat={seat.seat_id} owner={owner_id} reason=locked")
            return ReservationResult.failure(error, f"Seat {seat.seat_id} is currently locked")

        if expired_owner is not None:
            logger.info(f"[reclaim] seat={seat.seat_id} owner={expired_owner} reason=relock")

        self._scheduler.schedule(seat.seat_id, owner_id, seat.lock_deadline)
        logger.debug(f"[lock] seat={seat.seat_id} owner={owner_id} ttl={ttl}s deadline={seat.lock_deadline}")
        return ReservationResult.success(seat.snapshot())
