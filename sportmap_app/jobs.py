# sportmap_app/jobs.py
# -*- coding: utf-8 -*-
"""Rotinas agendadas (APScheduler, gatilhos cron)."""
from __future__ import annotations

from .extensions import scheduler
from .services.billing_cron import generate_billing_cycles
from .services.payments_cron import check_users_and_generate_boletos, poll_pending_payments

# id -> (função, argumentos do gatilho cron)
JOBS = {
    "billing-cycle": (generate_billing_cycles, {"hour": "*/3", "minute": 0}),
    "issue-boletos": (check_users_and_generate_boletos, {"hour": 0, "minute": 0}),
    "poll-payments": (poll_pending_payments, {"hour": "*/6", "minute": 0}),
}


def _in_context(app, func):
    def run():
        with app.app_context():
            try:
                func()
            except Exception:
                app.logger.exception("Rotina %s abortada", func.__name__)
    run.__name__ = func.__name__
    return run


def register_jobs(app):
    for job_id, (func, trigger) in JOBS.items():
        scheduler.add_job(_in_context(app, func), "cron", id=job_id, replace_existing=True, **trigger)
