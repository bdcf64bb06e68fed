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
)


class ConfirmSeatUseCase:
    """
    Turns a still-valid lock into a permanent booking for the lock's owner.
    """

    _MESSAGES = {
        ReservationError.ALREADY_BOOKED: "Seat {seat_id} is already booked",
        ReservationError.NOT_LOCKED: "Seat {seat_id} is not locked",
        ReservationError.LOCK_EXPIRED: "Lock on seat {seat_id} has expired",
        ReservationError.NOT_OWNER: "Seat {seat_id} is locked by another owner",
    }

    def __init__(self, *, seat_repo: SeatRepository, clock: Clock, scheduler: ExpiryScheduler) -> None:
        self._seat_repo = seat_repo
        self._clock = clock
        self._scheduler = scheduler

    def execute(self, *, seat_id: Any, owner_id: Any) -> ReservationResult:
        problem = validate_seat_id(seat_id) or validate_owner_id(owner_id)
        if problem:
            return ReservationResult.failure(ReservationError.INVALID_INPUT, problem)
        if not self._seat_repo.contains(seat_id):
            return ReservationResult.failure(ReservationError.NOT_FOUND, f"Seat {seat_id} not found")

        return self._seat_repo.apply_transition(seat_id, lambda seat: self._confirm(seat, owner_id))

    def _confirm(self, seat: Seat, owner_id: str) -> ReservationResult:
        locked_by = seat.owner_id
        error = seat.confirm(owner_id, self._clock.now())

        if error is ReservationError.LOCK_EXPIRED:
            self._scheduler.cancel(seat.seat_id)
            logger.info(f"[reclaim] seat={seat.seat_id} owner={locked_by} reason=confirm")
        if error is not None:
            logger.debug(f"[confirm-rejected] seat={seat.seat_id} owner={owner_id} reason={error.value}")
            return ReservationResult.failure(error, self._MESSAGES[error].format(seat_id=seat.seat_id))

        self._scheduler.cancel(seat.seat_id)
        logger.info(f"[book] seat={seat.seat_id} owner={owner_id}")
        return ReservationResult.success(seat.snapshot())
