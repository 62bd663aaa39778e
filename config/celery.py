import os

from celery import Celery
from celery.schedules import crontab  # type: ignore

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings.dev")

app = Celery("proptoken")

app.config_from_object("django.conf:settings", namespace="CELERY")
app.autodiscover_tasks()


# ============================================================================
# CELERY BEAT SCHEDULE (Periodic Tasks)
# ============================================================================

app.conf.beat_schedule = {
    # Release dates held by unpaid reservations - every 5 minutes
    "expire-unpaid-reservations": {
        "task": "reservations.expire_unpaid_reservations",
        "schedule": 300.0,
        "options": {"expires": 240},
    },
    # Confirmed -> active on check-in day - hourly
    "start-checked-in-reservations": {
        "task": "reservations.start_checked_in_reservations",
        "schedule": crontab(minute=0),
    },
    # Complete stays after check-out - hourly
    "complete-finished-reservations": {
        "task": "reservations.complete_finished_reservations",
        "schedule": crontab(minute=15),
    },
    # Verify checkouts whose webhook never arrived - every 10 minutes
    "reconcile-pending-payments": {
        "task": "payments.reconcile_pending_payments",
        "schedule": crontab(minute="*/10"),
    },
}

app.conf.timezone = "Africa/Lagos"
