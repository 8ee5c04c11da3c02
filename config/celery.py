from celery import Celery
from celery.signals import worker_ready

app = Celery("boxoffice")
app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# Sweep once when a worker comes up instead of waiting for the first beat.
@worker_ready.connect
def on_worker_ready(sender, **kwargs):
    from ticketing.tasks import sweep_expired

    sweep_expired.delay()
