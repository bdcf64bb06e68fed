from __future__ import annotations

from typing import Protocol


class ExpiryScheduler(Protocol):
    """
    Active reclamation of timed-out locks. Called from inside a seat's critical section.
    """

    def schedule(self, seat_id: int, owner_id: str, deadline: float) -> None: ...

    def cancel(self, seat_id: int) -> None: ...
