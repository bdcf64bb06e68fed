from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Sequence, TypeVar

from seatlock.core.entities.seat import Seat, SeatSnapshot

T = TypeVar("T")


class SeatNotFoundError(LookupError):
    """Raised by apply_transition for a seat id the repository does not hold."""


class SeatRepository(ABC):
    """
    Owns every seat record. Mutation happens only through apply_transition.
    """

    @abstractmethod
    def get(self, seat_id: int) -> SeatSnapshot | None:
        """Return a snapshot of the seat as stored, or None if the id is unknown."""
        raise NotImplementedError

    @abstractmethod
    def list(self) -> Sequence[SeatSnapshot]:
        """Snapshots of all seats in ascending id order."""
        raise NotImplementedError

    @abstractmethod
    def contains(self, seat_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    def seat_ids(self) -> Sequence[int]:
        raise NotImplementedError

    @abstractmethod
    def apply_transition(self, seat_id: int, fn: Callable[[Seat], T]) -> T:
        """
        Run fn against the live record under exclusive per-seat access and return its result.

        Seat invariants are verified before exclusive access is given up.
        Raises SeatNotFoundError for an unknown id.
        """
        raise NotImplementedError
