# ledgerapp/tasks.py
import logging

from celery import shared_task
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from .accrual.runner import sync_all_users_income, sync_user_income

logger = logging.getLogger(__name__)


def _parse_at(at):
    """ISO timestamp → aware datetime; naive values are read in TIME_ZONE."""
    if not at:
        return None
    now = parse_datetime(at)
    if now is None:
        raise ValueError(f"Invalid 'at' timestamp: {at!r}")
    if timezone.is_naive(now):
        now = timezone.make_aware(now)
    return now


@shared_task(queue="ledger")
def sync_user_income_task(user_id, at=None):
    """Both pools for one user. `at` is an optional ISO timestamp for "now"."""
    results = sync_user_income(user_id, now=_parse_at(at))
    return {pool: bool(plan) for pool, plan in results.items()}


@shared_task(queue="ledger")
def sync_all_users_income_task():
    processed = sync_all_users_income()
    if processed is None:
        logger.info("Income sync batch skipped by lock")
    return processed
