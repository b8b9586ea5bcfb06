# ledgerapp/accrual/lock.py

import logging
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from ledgerapp.models import AccrualLock

logger = logging.getLogger(__name__)

STALE_LOCK_MINUTES = 10


def run_with_lock(run_date, batch_func, now=None, allow_rerun_today=True, cooldown_minutes=5):
    """
    Run batch_func(run_date) unless another batch holds the lock for run_date.

    - a running lock older than STALE_LOCK_MINUTES is treated as crashed
    - finished past dates are never re-run
    - today's date may be re-run after the cooldown (late purchases)

    Returns (True, result) when batch_func ran, (False, None) when skipped.
    """
    if now is None:
        now = timezone.now()
    today = timezone.localdate(now)

    with transaction.atomic():
        lock, _ = AccrualLock.objects.select_for_update().get_or_create(run_date=run_date)

        if lock.is_running:
            if lock.started_at and now - lock.started_at > timedelta(minutes=STALE_LOCK_MINUTES):
                logger.warning("Releasing stale accrual lock for %s", run_date)
                lock.is_running = False
                lock.started_at = None
                lock.save(update_fields=["is_running", "started_at"])
            else:
                logger.info("Accrual batch already running for %s, skipped", run_date)
                return False, None

        if lock.finished_at:
            if run_date != today:
                logger.info("Accrual batch already finished for %s, skipped", run_date)
                return False, None
            if not allow_rerun_today:
                logger.info("Rerun disabled for %s, skipped", run_date)
                return False, None
            if now - lock.finished_at < timedelta(minutes=cooldown_minutes):
                logger.info("Accrual batch cooldown active (%sm), skipped", cooldown_minutes)
                return False, None

        lock.is_running = True
        lock.started_at = now
        lock.save(update_fields=["is_running", "started_at"])

    try:
        result = batch_func(run_date)

        with transaction.atomic():
            fresh_lock = AccrualLock.objects.select_for_update().get(run_date=run_date)
            if fresh_lock.is_running and fresh_lock.started_at == now:
                fresh_lock.is_running = False
                fresh_lock.started_at = None
                fresh_lock.finished_at = now
                fresh_lock.save(update_fields=["is_running", "started_at", "finished_at"])
            else:
                logger.warning("Accrual lock for %s was taken over while running", run_date)

        return True, result

    finally:
        # release only our own hold; finished_at stays untouched
        with transaction.atomic():
            AccrualLock.objects.filter(run_date=run_date, is_running=True, started_at=now).update(
                is_running=False, started_at=None
            )
