import signal
import threading

from django.conf import settings
from django.core.management.base import BaseCommand

from ticketing.container import build_sweeper


class Command(BaseCommand):
    help = "Expire past events and stale reservations, once or on an interval."

    def add_arguments(self, parser):
        parser.add_argument("--once", action="store_true", help="Run a single sweep and exit.")
        parser.add_argument(
            "--interval",
            type=float,
            default=None,
            help="Seconds between sweeps (default: TICKETING_SWEEP_INTERVAL_SECONDS).",
        )

    def handle(self, *args, **options):
        sweeper = build_sweeper()

        if options["once"]:
            result = sweeper.tick()
            if result is None:
                self.stderr.write(self.style.ERROR("Sweep failed; see logs."))
                return
            self.stdout.write(
                self.style.SUCCESS(
                    f"Finished {result.events_finished} event(s), "
                    f"expired {result.tickets_expired} ticket(s)."
                )
            )
            return

        interval = options["interval"] or settings.TICKETING_SWEEP_INTERVAL_SECONDS
        stop_event = threading.Event()

        def request_stop(signum, frame):
            stop_event.set()

        signal.signal(signal.SIGINT, request_stop)
        signal.signal(signal.SIGTERM, request_stop)
        sweeper.run(stop_event, interval=interval)
