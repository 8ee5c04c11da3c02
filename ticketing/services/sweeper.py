"""Expiry sweeper.

Moves past events to finished and stale reservations to expired. The two
effects are independent: a failure in one never skips the other. The
sweeper keeps no state between ticks, so any number of runners may share
the same database.
"""

import logging
import threading
from dataclasses import dataclass
from datetime import timedelta

from ticketing.clock import Clock
from ticketing.stores.interfaces import CapacityLedger, EventStore, TicketStore

logger = logging.getLogger(__name__)

RESERVATION_WINDOW = timedelta(minutes=15)
SWEEP_INTERVAL_SECONDS = 600.0


@dataclass(frozen=True)
class SweepResult:
    events_finished: int
    tickets_expired: int


class SweepFailedError(Exception):
    """One or both sweep effects failed. The other effect still ran."""

    def __init__(self, result: SweepResult, errors: list[Exception]) -> None:
        super().__init__(f"{len(errors)} sweep step(s) failed")
        self.result = result
        self.errors = errors


class ExpirySweeper:
    """Periodic expiry of events and reservations."""

    def __init__(
        self,
        events: EventStore,
        tickets: TicketStore,
        ledger: CapacityLedger,
        clock: Clock,
        reservation_window: timedelta = RESERVATION_WINDOW,
        release_capacity: bool = True,
        timeout: float | None = None,
    ) -> None:
        self._events = events
        self._tickets = tickets
        self._ledger = ledger
        self._clock = clock
        self._reservation_window = reservation_window
        self._release_capacity = release_capacity
        self._timeout = timeout

    def expire_events(self) -> int:
        """Finish every active event whose date has passed."""
        with self._events.atomic(self._timeout):
            return self._events.finish_past_events(self._clock.now())

    def expire_tickets(self) -> int:
        """Expire reservations older than the reservation window.

        With the reclaim policy on, each event gets its seats back in the
        same transaction that expires the tickets.
        """
        cutoff = self._clock.now() - self._reservation_window
        with self._events.atomic(self._timeout):
            expired = self._tickets.expire_reservations(cutoff)
            if self._release_capacity:
                for event_id, count in expired.items():
                    self._ledger.release_sold(event_id, count)
        return sum(expired.values())

    def sweep(self) -> SweepResult:
        """Run both effects.

        Raises:
            SweepFailedError: If either effect failed, carrying the partial
                result and the underlying errors.
        """
        errors: list[Exception] = []
        events_finished = tickets_expired = 0

        try:
            events_finished = self.expire_events()
        except Exception as exc:
            logger.exception("Failed to expire events")
            errors.append(exc)

        try:
            tickets_expired = self.expire_tickets()
        except Exception as exc:
            logger.exception("Failed to expire tickets")
            errors.append(exc)

        result = SweepResult(events_finished=events_finished, tickets_expired=tickets_expired)
        if errors:
            raise SweepFailedError(result, errors)
        if events_finished or tickets_expired:
            logger.info(
                "Sweep completed",
                extra={"events_finished": events_finished, "tickets_expired": tickets_expired},
            )
        return result

    def tick(self) -> SweepResult | None:
        """Run one sweep; failures are logged and left for the next tick."""
        try:
            return self.sweep()
        except SweepFailedError as exc:
            logger.warning(
                "Sweep tick failed; retrying next interval",
                extra={
                    "events_finished": exc.result.events_finished,
                    "tickets_expired": exc.result.tickets_expired,
                    "failures": len(exc.errors),
                },
            )
            return None

    def run(self, stop_event: threading.Event, interval: float = SWEEP_INTERVAL_SECONDS) -> None:
        """Tick now, then every `interval` seconds until stop_event is set."""
        logger.info("Sweeper started", extra={"interval_seconds": interval})
        while not stop_event.is_set():
            self.tick()
            if stop_event.wait(interval):
                break
        logger.info("Sweeper stopped")
