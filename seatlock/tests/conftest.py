from __future__ import annotations

import pytest

from seatlock.core.clock import ManualClock
from seatlock.infrastructure.expiry_scheduler import ThreadingExpiryScheduler
from seatlock.infrastructure.repositories.seat_repository_impl import InMemorySeatRepository
from seatlock.services.reservation_service import ReservationService

SEAT_COUNT = 10
LOCK_TTL_SECONDS = 60.0
MAX_LOCK_TTL_SECONDS = 3600.0


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock(start=0.0)


@pytest.fixture()
def seat_repo() -> InMemorySeatRepository:
    return InMemorySeatRepository(SEAT_COUNT)


@pytest.fixture()
def scheduler(seat_repo: InMemorySeatRepository, clock: ManualClock) -> ThreadingExpiryScheduler:
    """
    Scheduler with timers armed. Under the manual clock their real-time delay is long, so they only
    matter for bookkeeping; shutdown cancels them.
    """
    scheduler = ThreadingExpiryScheduler(seat_repo=seat_repo, clock=clock, grace_seconds=0.05)
    yield scheduler
    scheduler.shutdown()


@pytest.fixture()
def service(
    seat_repo: InMemorySeatRepository,
    clock: ManualClock,
    scheduler: ThreadingExpiryScheduler,
) -> ReservationService:
    service = ReservationService(
        seat_repo=seat_repo,
        clock=clock,
        scheduler=scheduler,
        lock_ttl_seconds=LOCK_TTL_SECONDS,
        max_lock_ttl_seconds=MAX_LOCK_TTL_SECONDS,
    )
    yield service
    service.close()
