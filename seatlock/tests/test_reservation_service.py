from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from seatlock.core.clock import ManualClock
from seatlock.core.entities.errors import ReservationError
from seatlock.core.entities.seat import SeatStatus
from seatlock.infrastructure.config import Settings
from seatlock.services.reservation_service import ReservationService, build_reservation_service


def test_concurrent_locks_on_one_seat_have_exactly_one_winner(service: ReservationService) -> None:
    callers = 32
    barrier = threading.Barrier(callers)

    def attempt(i: int):
        barrier.wait()
        return service.lock_seat(1, f"owner-{i}")

    with ThreadPoolExecutor(max_workers=callers) as pool:
        results = list(pool.map(attempt, range(callers)))

    winners = [r for r in results if r.ok]
    losers = [r for r in results if not r.ok]
    assert len(winners) == 1
    assert all(r.error is ReservationError.ALREADY_LOCKED_BY_OTHER for r in losers)

    seat = service.get_seat(1).seat
    assert seat.status is SeatStatus.LOCKED
    assert seat.owner_id == winners[0].seat.owner_id


def test_concurrent_lock_and_confirm_race_leaves_a_consistent_seat(service: ReservationService) -> None:
    assert service.lock_seat(2, "A").ok
    callers = 16
    barrier = threading.Barrier(callers)

    def attempt(i: int):
        barrier.wait()
        if i == 0:
            return service.confirm_seat(2, "A")
        return service.lock_seat(2, f"owner-{i}")

    with ThreadPoolExecutor(max_workers=callers) as pool:
        results = list(pool.map(attempt, range(callers)))

    assert results[0].ok
    assert all(r.error in {ReservationError.ALREADY_LOCKED_BY_OTHER, ReservationError.ALREADY_BOOKED}
               for r in results[1:])
    seat = service.get_seat(2).seat
    assert seat.status is SeatStatus.BOOKED
    assert seat.owner_id == "A"


def test_confirm_before_any_lock_is_not_locked(service: ReservationService) -> None:
    result = service.confirm_seat(4, "A")

    assert result.error is ReservationError.NOT_LOCKED
    assert service.get_seat(4).seat.status is SeatStatus.AVAILABLE


def test_confirm_after_ttl_reports_expiry_and_frees_seat(service: ReservationService, clock: ManualClock) -> None:
    assert service.lock_seat(3, "A", ttl=60).ok

    clock.set(61.0)
    result = service.confirm_seat(3, "A")

    assert result.error is ReservationError.LOCK_EXPIRED
    assert service.get_seat(3).seat.status is SeatStatus.AVAILABLE
    assert not service.scheduler.is_scheduled(3)


def test_lock_then_confirm_books_and_blocks_other_owners(service: ReservationService) -> None:
    assert service.lock_seat(6, "A").ok

    confirmed = service.confirm_seat(6, "A")
    assert confirmed.ok
    assert confirmed.seat.status is SeatStatus.BOOKED
    assert confirmed.seat.owner_id == "A"
    assert confirmed.seat.lock_deadline is None

    assert service.lock_seat(6, "B").error is ReservationError.ALREADY_BOOKED
    assert service.confirm_seat(6, "A").error is ReservationError.ALREADY_BOOKED


def test_release_on_available_seat_is_not_locked_and_changes_nothing(service: ReservationService) -> None:
    before = service.get_seat(7).seat

    result = service.release_seat(7, "A")

    assert result.error is ReservationError.NOT_LOCKED
    assert service.get_seat(7).seat == before


def test_expired_lock_is_fully_replaced_by_new_owner(service: ReservationService, clock: ManualClock) -> None:
    assert service.lock_seat(5, "A", ttl=1).ok

    clock.set(2.0)
    result = service.lock_seat(5, "B", ttl=60)

    assert result.ok
    seat = service.get_seat(5).seat
    assert seat.status is SeatStatus.LOCKED
    assert seat.owner_id == "B"
    assert seat.lock_deadline == 62.0
    assert service.release_seat(5, "A").error is ReservationError.NOT_OWNER


def test_list_seats_never_shows_expired_locks(service: ReservationService, clock: ManualClock) -> None:
    assert service.lock_seat(1, "A", ttl=10).ok
    assert service.lock_seat(2, "B", ttl=100).ok

    clock.advance(50.0)
    seats = {s.seat_id: s for s in service.list_seats()}

    assert seats[1].status is SeatStatus.AVAILABLE
    assert seats[1].owner_id is None
    assert seats[2].status is SeatStatus.LOCKED
    assert not service.scheduler.is_scheduled(1)
    assert service.scheduler.is_scheduled(2)


def test_list_seats_is_in_ascending_id_order(service: ReservationService) -> None:
    assert [s.seat_id for s in service.list_seats()] == list(range(1, 11))


def test_release_by_owner_frees_seat_and_cancels_timer(service: ReservationService) -> None:
    assert service.lock_seat(8, "A").ok
    assert service.scheduler.is_scheduled(8)

    result = service.release_seat(8, "A")

    assert result.ok
    assert result.seat.status is SeatStatus.AVAILABLE
    assert not service.scheduler.is_scheduled(8)
    assert service.lock_seat(8, "B").ok


def test_release_by_other_owner_is_rejected(service: ReservationService) -> None:
    assert service.lock_seat(8, "A").ok

    assert service.release_seat(8, "B").error is ReservationError.NOT_OWNER
    assert service.get_seat(8).seat.owner_id == "A"


def test_confirm_by_other_owner_is_rejected(service: ReservationService) -> None:
    assert service.lock_seat(9, "A").ok

    assert service.confirm_seat(9, "B").error is ReservationError.NOT_OWNER
    assert service.get_seat(9).seat.status is SeatStatus.LOCKED


def test_confirm_cancels_scheduled_reclamation(service: ReservationService) -> None:
    assert service.lock_seat(10, "A").ok
    assert service.scheduler.is_scheduled(10)

    assert service.confirm_seat(10, "A").ok
    assert not service.scheduler.is_scheduled(10)


def test_default_ttl_comes_from_configuration(service: ReservationService, clock: ManualClock) -> None:
    result = service.lock_seat(1, "A")

    assert result.seat.lock_deadline == clock.now() + 60.0


@pytest.mark.parametrize("seat_id", [0, 11, 999])
def test_unknown_seat_is_not_found(service: ReservationService, seat_id: int) -> None:
    assert service.get_seat(seat_id).error is ReservationError.NOT_FOUND
    assert service.lock_seat(seat_id, "A").error is ReservationError.NOT_FOUND
    assert service.confirm_seat(seat_id, "A").error is ReservationError.NOT_FOUND
    assert service.release_seat(seat_id, "A").error is ReservationError.NOT_FOUND


@pytest.mark.parametrize(
    "seat_id, owner_id, ttl",
    [
        ("1", "A", None),
        (True, "A", None),
        (None, "A", None),
        (1, "", None),
        (1, "   ", None),
        (1, None, None),
        (1, 42, None),
        (1, "A", 0),
        (1, "A", -5),
        (1, "A", float("inf")),
        (1, "A", float("nan")),
        (1, "A", 10**400),
        (1, "A", 1e10),
        (1, "A", 3600.5),
        (1, "A", "60"),
    ],
)
def test_invalid_input_is_rejected_without_touching_state(service: ReservationService, seat_id, owner_id, ttl) -> None:
    result = service.lock_seat(seat_id, owner_id, ttl)

    assert result.error is ReservationError.INVALID_INPUT
    assert result.message
    assert all(s.status is SeatStatus.AVAILABLE for s in service.list_seats())


def test_invalid_owner_on_confirm_and_release(service: ReservationService) -> None:
    assert service.confirm_seat(1, "").error is ReservationError.INVALID_INPUT
    assert service.release_seat(1, None).error is ReservationError.INVALID_INPUT


def test_failures_carry_no_seat(service: ReservationService) -> None:
    assert service.lock_seat(1, "A").ok

    result = service.lock_seat(1, "B")
    assert not result.ok
    assert result.seat is None


def test_build_reservation_service_uses_settings() -> None:
    settings = Settings(seat_count=5, lock_ttl_seconds=30.0, active_expiry_enabled=False)
    clock = ManualClock(start=100.0)

    with build_reservation_service(settings, clock=clock) as service:
        assert len(service.list_seats()) == 5
        result = service.lock_seat(5, "A")
        assert result.seat.lock_deadline == 130.0
        assert not service.scheduler.is_scheduled(5)


def test_ttl_at_the_configured_maximum_is_accepted(service: ReservationService, clock: ManualClock) -> None:
    result = service.lock_seat(1, "A", ttl=3600)

    assert result.ok
    assert result.seat.lock_deadline == clock.now() + 3600


def test_build_reservation_service_applies_max_ttl() -> None:
    settings = Settings(seat_count=2, lock_ttl_seconds=30.0, max_lock_ttl_seconds=120.0, active_expiry_enabled=False)

    with build_reservation_service(settings, clock=ManualClock(start=0.0)) as service:
        assert service.lock_seat(1, "A", ttl=121).error is ReservationError.INVALID_INPUT
        assert service.lock_seat(1, "A", ttl=120).ok


def test_settings_reject_default_ttl_above_maximum() -> None:
    with pytest.raises(ValueError):
        Settings(lock_ttl_seconds=600.0, max_lock_ttl_seconds=60.0)
