from __future__ import annotations

from typing import Any

from seatlock.core.clock import Clock
from seatlock.core.entities.errors import ReservationError
from seatlock.core.repositories.seat_repository import SeatRepository
from seatlock.core.scheduling import ExpiryScheduler
from seatlock.core.use_cases.list_seats import observe_seat
from seatlock.core.use_cases.reservation_result import ReservationResult, validate_seat_id


class GetSeatUseCase:
    def __init__(self, *, seat_repo: SeatRepository, clock: Clock, scheduler: ExpiryScheduler) -> None:
        self._seat_repo = seat_repo
        self._clock = clock
        self._scheduler = scheduler

    def execute(self, *, seat_id: Any) -> ReservationResult:
        problem = validate_seat_id(seat_id)
        if problem:
            return ReservationResult.failure(ReservationError.INVALID_INPUT, problem)
        if not self._seat_repo.contains(seat_id):
            return ReservationResult.failure(ReservationError.NOT_FOUND, f"Seat {seat_id} not found")

        snapshot = self._seat_repo.apply_transition(
            seat_id,
            lambda seat: observe_seat(seat, self._clock.now(), self._scheduler),
        )
        return ReservationResult.success(snapshot)
