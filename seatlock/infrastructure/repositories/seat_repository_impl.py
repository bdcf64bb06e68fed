from __future__ import annotations

import threading
from typing import Callable, TypeVar

from seatlock.core.entities.seat import Seat, SeatSnapshot
from seatlock.core.repositories.seat_repository import SeatNotFoundError, SeatRepository

T = TypeVar("T")


class InMemorySeatRepository(SeatRepository):
    """
    Process-local seat table with one mutex per seat.

    The set of seat ids is fixed at construction, so the id -> (seat, mutex) maps are
    never written afterwards and can be read without a table-wide lock.
    """

    def __init__(self, seat_count: int) -> None:
        if seat_count < 1:
            raise ValueError("seat_count must be at least 1")

        self._seats: dict[int, Seat] = {}
        self._locks: dict[int, threading.Lock] = {}
        for seat_id in range(1, seat_count + 1):
            self._seats[seat_id] = Seat(seat_id=seat_id)
            self._locks[seat_id] = threading.Lock()
        self._ids: tuple[int, ...] = tuple(sorted(self._seats))

    def get(self, seat_id: int) -> SeatSnapshot | None:
        if not self.contains(seat_id):
            return None
        return self.apply_transition(seat_id, Seat.snapshot)

    def list(self) -> list[SeatSnapshot]:
        return [self.apply_transition(seat_id, Seat.snapshot) for seat_id in self._ids]

    def contains(self, seat_id: int) -> bool:
        return seat_id in self._seats

    def seat_ids(self) -> tuple[int, ...]:
        return self._ids

    def apply_transition(self, seat_id: int, fn: Callable[[Seat], T]) -> T:
        seat = self._seats.get(seat_id)
        if seat is None:
            raise SeatNotFoundError(f"Seat not found: {seat_id!r}")

        with self._locks[seat_id]:
            result = fn(seat)
            seat.check_invariants()
            return result
