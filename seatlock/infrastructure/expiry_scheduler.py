from __future__ import annotations

import threading

from loguru import logger

from seatlock.core.clock import Clock
from seatlock.core.entities.seat import Seat
from seatlock.core.repositories.seat_repository import SeatRepository

MAX_TIMER_DELAY_SECONDS = threading.TIMEOUT_MAX / 2


class ThreadingExpiryScheduler:
    """
    Active reclamation of expired seat locks.

    Two mechanisms, both optional:
      - one threading.Timer per locked seat, firing shortly after the lock deadline
      - a background sweep over every seat at a fixed interval

    Neither is needed for correctness: every service operation also reclaims lazily. They only bound
    how long an untouched expired lock stays visible as Locked.

    schedule() and cancel() are called from inside a seat's critical section. A timer that fires after
    being cancelled or replaced is harmless, since reclaim() re-checks owner and deadline under the
    seat's lock.
    """

    def __init__(
            self,
            *,
            seat_repo: SeatRepository,
            clock: Clock,
            grace_seconds: float = 0.05,
            sweep_interval_seconds: float = 0.0,
            timers_enabled: bool = True,
    ) -> None:
        self._seat_repo = seat_repo
        self._clock = clock
        self._grace_seconds = grace_seconds
        self._sweep_interval_seconds = sweep_interval_seconds
        self._timers_enabled = timers_enabled

        self._timers: dict[int, threading.Timer] = {}
        self._lock = threading.Lock()
        self._stopped = threading.Event()
        self._sweeper: threading.Thread | None = None

    # -----------------------------
    # Lifecycle
    # -----------------------------
    def start(self) -> None:
        if self._sweep_interval_seconds <= 0 or self._sweeper is not None:
            return
        self._sweeper = threading.Thread(target=self._sweep_loop, name="seat-expiry-sweeper", daemon=True)
        self._sweeper.start()
        logger.info(f"[sweep-start] interval={self._sweep_interval_seconds}s")

    def shutdown(self) -> None:
        self._stopped.set()
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
        for timer in timers:
            timer.cancel()

        if self._sweeper is not None:
            self._sweeper.join()
            self._sweeper = None
        logger.info(f"[expiry-shutdown] cancelled_timers={len(timers)}")

    # -----------------------------
    # Per-lock timers
    # -----------------------------
    def schedule(self, seat_id: int, owner_id: str, deadline: float) -> None:
        if not self._timers_enabled or self._stopped.is_set():
            return

        delay = max(0.0, deadline - self._clock.now()) + self._grace_seconds
        # Event.wait adds the delay to the current monotonic time, which must stay representable
        delay = min(delay, MAX_TIMER_DELAY_SECONDS)
        timer = threading.Timer(
            delay,
            self.reclaim,
            kwargs={"seat_id": seat_id, "owner_id": owner_id, "deadline": deadline},
        )
        timer.daemon = True

        with self._lock:
            previous = self._timers.get(seat_id)
            self._timers[seat_id] = timer
        if previous is not None:
            previous.cancel()

        timer.start()
        logger.debug(f"[timer-set] seat={seat_id} owner={owner_id} delay={delay:.3f}s")

    def cancel(self, seat_id: int) -> None:
        with self._lock:
            timer = self._timers.pop(seat_id, None)
        if timer is not None:
            timer.cancel()
            logger.debug(f"[timer-cancel] seat={seat_id}")

    def is_scheduled(self, seat_id: int) -> bool:
        with self._lock:
            return seat_id in self._timers

    def reclaim(self, *, seat_id: int, owner_id: str, deadline: float) -> bool:
        """
        Reclaim the lock (owner_id, deadline) on seat_id if it is still the current lock and has expired.
        """
        reclaimed = self._seat_repo.apply_transition(
            seat_id,
            lambda seat: seat.reclaim_expired_lock(owner_id=owner_id, deadline=deadline, now=self._clock.now()),
        )

        current = threading.current_thread()
        with self._lock:
            if self._timers.get(seat_id) is current:
                del self._timers[seat_id]

        if reclaimed:
            logger.info(f"[reclaim] seat={seat_id} owner={owner_id} reason=timer")
        else:
            logger.debug(f"[timer-skip] seat={seat_id} owner={owner_id} lock superseded or not yet expired")
        return reclaimed

    # -----------------------------
    # Periodic sweep
    # -----------------------------
    def sweep(self) -> int:
        """
        Reclaim every expired lock. Returns how many seats were reclaimed.
        """
        reclaimed = 0
        for seat_id in self._seat_repo.seat_ids():
            if self._seat_repo.apply_transition(seat_id, self._reclaim_if_expired):
                reclaimed += 1

        if reclaimed:
            logger.info(f"[sweep] reclaimed={reclaimed}")
        return reclaimed

    def _reclaim_if_expired(self, seat: Seat) -> bool:
        if not seat.reclaim_if_expired(self._clock.now()):
            return False
        self.cancel(seat.seat_id)
        return True

    def _sweep_loop(self) -> None:
        while not self._stopped.wait(self._sweep_interval_seconds):
            with logger.catch(reraise=True):
                self.sweep()
