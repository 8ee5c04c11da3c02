import logging

from celery import shared_task

from ticketing.container import build_sweeper

logger = logging.getLogger(__name__)


@shared_task(name="ticketing.tasks.sweep_expired", ignore_result=True)
def sweep_expired() -> dict | None:
    """Beat-scheduled expiry sweep. Failures are logged; the next run retries."""
    result = build_sweeper().tick()
    if result is None:
        return None
    return {"events_finished": result.events_finished, "tickets_expired": result.tickets_expired}
