# ledgerapp/accrual/runner.py
# ----------------------------------------------------------
# Best-effort entry points used by views, tasks, signals and admin
# ----------------------------------------------------------

import logging

from django.utils import timezone

from ledgerapp.accrual.engine import run_accrual
from ledgerapp.accrual.lock import run_with_lock
from ledgerapp.accrual.targets import REGULAR, WEEKEND
from ledgerapp.models import Order, WeekendOrder, STATUS_ACTIVE

logger = logging.getLogger(__name__)


def sync_user_income(user_id, now=None, targets=(REGULAR, WEEKEND)):
    """
    Run every pool for one user. A failing pool is logged and skipped;
    nothing is retried. Returns {pool: plan or None} for the pools that did
    not fail.
    """
    results = {}
    if not user_id:
        return results
    if now is None:
        now = timezone.now()

    for target in targets:
        try:
            results[target.pool] = run_accrual(user_id, now=now, target=target)
        except Exception:
            logger.exception("%s sync failed for user %s", target.label.capitalize(), user_id)
    return results


def users_with_active_orders():
    regular = Order.objects.filter(status=STATUS_ACTIVE).values_list("user_id", flat=True)
    weekend = WeekendOrder.objects.filter(status=STATUS_ACTIVE).values_list("user_id", flat=True)
    return sorted(set(regular) | set(weekend))


def sync_all_users_income(now=None):
    """
    Scheduled batch over every user owning an active order.
    Returns the number of users processed, or None if the lock skipped it.
    """
    if now is None:
        now = timezone.now()
    run_date = timezone.localdate(now)

    def _batch(_run_date):
        user_ids = users_with_active_orders()
        logger.info("Income sync batch for %s: %d users", _run_date, len(user_ids))
        for user_id in user_ids:
            sync_user_income(user_id, now=now)
        return len(user_ids)

    ran, processed = run_with_lock(run_date, _batch, now=now)
    if not ran:
        return None
    return processed
