from __future__ import annotations

from typing import Any

from loguru import logger

from seatlock.core.clock import Clock, MonotonicClock
from seatlock.core.entities.seat import SeatSnapshot
from seatlock.core.repositories.seat_repository import SeatRepository
from seatlock.core.use_cases.confirm_seat import ConfirmSeatUseCase
from seatlock.core.use_cases.get_seat import GetSeatUseCase
from seatlock.core.use_cases.list_seats import ListSeatsUseCase
from seatlock.core.use_cases.lock_seat import LockSeatUseCase
from seatlock.core.use_cases.release_seat import ReleaseSeatUseCase
from seatlock.core.use_cases.reservation_result import ReservationResult
from seatlock.infrastructure.config import Settings
from seatlock.infrastructure.expiry_scheduler import ThreadingExpiryScheduler
from seatlock.infrastructure.repositories.seat_repository_impl import InMemorySeatRepository
from seatlock.schemas.models import Seat as SeatOut
from seatlock.schemas.models import SeatStatus as SeatStatusOut


class ReservationService:
    """
    Public reservation operations over one seat repository.

    The service owns its expiry scheduler: close() stops timers and the sweeper.
    """

    def __init__(
            self,
            *,
            seat_repo: SeatRepository,
            clock: Clock,
            scheduler: ThreadingExpiryScheduler,
            lock_ttl_seconds: float,
            max_lock_ttl_seconds: float,
    ) -> None:
        self._seat_repo = seat_repo
        self._clock = clock
        self._scheduler = scheduler

        self._list_seats = ListSeatsUseCase(seat_repo=seat_repo, clock=clock, scheduler=scheduler)
        self._get_seat = GetSeatUseCase(seat_repo=seat_repo, clock=clock, scheduler=scheduler)
        self._lock_seat = LockSeatUseCase(
            seat_repo=seat_repo,
            clock=clock,
            scheduler=scheduler,
            default_ttl=lock_ttl_seconds,
            max_ttl=max_lock_ttl_seconds,
        )
        self._confirm_seat = ConfirmSeatUseCase(seat_repo=seat_repo, clock=clock, scheduler=scheduler)
        self._release_seat = ReleaseSeatUseCase(seat_repo=seat_repo, clock=clock, scheduler=scheduler)

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def scheduler(self) -> ThreadingExpiryScheduler:
        return self._scheduler

    def list_seats(self) -> list[SeatSnapshot]:
        return self._list_seats.execute()

    def get_seat(self, seat_id: Any) -> ReservationResult:
        return self._get_seat.execute(seat_id=seat_id)

    def lock_seat(self, seat_id: Any, owner_id: Any, ttl: Any = None) -> ReservationResult:
        return self._lock_seat.execute(seat_id=seat_id, owner_id=owner_id, ttl=ttl)

    def confirm_seat(self, seat_id: Any, owner_id: Any) -> ReservationResult:
        return self._confirm_seat.execute(seat_id=seat_id, owner_id=owner_id)

    def release_seat(self, seat_id: Any, owner_id: Any) -> ReservationResult:
        return self._release_seat.execute(seat_id=seat_id, owner_id=owner_id)

    def close(self) -> None:
        self._scheduler.shutdown()

    def __enter__(self) -> ReservationService:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def build_reservation_service(settings: Settings, clock: Clock | None = None) -> ReservationService:
    """
    Construct a service with a fresh seat table, all seats Available, and start its background sweep.
    """
    clock = clock or MonotonicClock()
    seat_repo = InMemorySeatRepository(settings.seat_count)
    scheduler = ThreadingExpiryScheduler(
        seat_repo=seat_repo,
        clock=clock,
        grace_seconds=settings.expiry_grace_seconds,
        sweep_interval_seconds=settings.sweep_interval_seconds,
        timers_enabled=settings.active_expiry_enabled,
    )
    scheduler.start()

    logger.info(
        f"[startup] seats={settings.seat_count} ttl={settings.lock_ttl_seconds}s "
        f"max_ttl={settings.max_lock_ttl_seconds}s "
        f"active_expiry={settings.active_expiry_enabled} sweep={settings.sweep_interval_seconds}s"
    )
    return ReservationService(
        seat_repo=seat_repo,
        clock=clock,
        scheduler=scheduler,
        lock_ttl_seconds=settings.lock_ttl_seconds,
        max_lock_ttl_seconds=settings.max_lock_ttl_seconds,
    )


def to_seat_schema(snapshot: SeatSnapshot, now: float) -> SeatOut:
    """
    Translate a core SeatSnapshot into the API schema. Deadlines become seconds remaining,
    since clock readings mean nothing outside the process.
    """
    expires_in = None
    if snapshot.lock_deadline is not None:
        expires_in = max(0.0, snapshot.lock_deadline - now)

    return SeatOut(
        seat_id=snapshot.seat_id,
        status=SeatStatusOut(snapshot.status.value),
        owner_id=snapshot.owner_id,
        lock_expires_in=expires_in,
    )


def list_seats_service(service: ReservationService) -> list[SeatOut]:
    seats = service.list_seats()
    now = service.clock.now()
    return [to_seat_schema(seat, now) for seat in seats]
