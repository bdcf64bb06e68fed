from __future__ import annotations

from loguru import logger

from seatlock.core.clock import Clock
from seatlock.core.entities.seat import Seat, SeatSnapshot
from seatlock.core.repositories.seat_repository import SeatRepository
from seatlock.core.scheduling import ExpiryScheduler


def observe_seat(seat: Seat, now: float, scheduler: ExpiryScheduler) -> SeatSnapshot:
    """
    Snapshot a seat after reclaiming it if its lock has run out. Runs inside the seat's critical section.
    """
    expired_owner = seat.owner_id
    if seat.reclaim_if_expired(now):
        scheduler.cancel(seat.seat_id)
        logger.info(f"[reclaim] seat={seat.seat_id} owner={expired_owner} reason=read")
    return seat.snapshot()


class ListSeatsUseCase:
    def __init__(self, *, seat_repo: SeatRepository, clock: Clock, scheduler: ExpiryScheduler) -> None:
        self._seat_repo = seat_repo
        self._clock = clock
        self._scheduler = scheduler

    def execute(self) -> list[SeatSnapshot]:
        return [
            self._seat_repo.apply_transition(
                seat_id,
                lambda seat: observe_seat(seat, self._clock.now(), self._scheduler),
            )
            for seat_id in self._seat_repo.seat_ids()
        ]
