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


class ReleaseSeatUseCase:
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

        return self._seat_repo.apply_transition(seat_id, lambda seat: self._release(seat, owner_id))

    def _release(self, seat: Seat, owner_id: str) -> ReservationResult:
        now = self._clock.now()
        expired_owner = seat.owner_id if seat.is_expired(now) else None

        error = seat.release(owner_id, now)
        if expired_owner is not None:
            self._scheduler.cancel(seat.seat_id)
            logger.info(f"[reclaim] seat={seat.seat_id} owner={expired_owner} reason=release")

        if error is ReservationError.NOT_OWNER:
            logger.debug(f"[release-rejected] seat={seat.seat_id} owner={owner_id} reason=not-owner")
            return ReservationResult.failure(error, f"Seat {seat.seat_id} is locked by another owner")
        if error is not None:
            logger.debug(f"[release-rejected] seat={seat.seat_id} owner={owner_id} reason=not-locked")
            return ReservationResult.failure(error, f"Seat {seat.seat_id} is not locked")

        self._scheduler.cancel(seat.seat_id)
        logger.debug(f"[release] seat={seat.seat_id} owner={owner_id}")
        return ReservationResult.success(seat.snapshot())
