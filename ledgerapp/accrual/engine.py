# ==========================================================
# ledgerapp/accrual/engine.py
# ==========================================================
"""
Daily income accrual for one user and one pool.

A pass loads the user's active orders, pays every order that has not been
paid since local midnight, and commits the order countdowns together with
the owner credit in one transaction. Calling it again the same day is a
no-op because each paid order's last_sync has moved past midnight.

Commit modes:
- guarded: each order update only matches if status and last_sync are still
  what the pass read, so two overlapping passes cannot both pay a day.
- unguarded: updates match on id only. Overlapping passes that both read an
  order before either commits will both pay it.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from ledgerapp.accrual.targets import REGULAR, WEEKEND, PayoutTarget
from ledgerapp.conf import ledger_setting
from ledgerapp.exceptions import StaleOrderError
from ledgerapp.models import AccrualRun, STATUS_ACTIVE, STATUS_COMPLETED

logger = logging.getLogger(__name__)

# last_sync NULL compares as the epoch
EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)
ZERO = Decimal("0.00")


@dataclass
class OrderPayout:
    order_id: int
    amount: Decimal
    remaining_days: int
    status: str
    previous_last_sync: Optional[datetime]


@dataclass
class AccrualPlan:
    user_id: int
    target: PayoutTarget
    today_midnight: datetime
    payouts: List[OrderPayout] = field(default_factory=list)
    total_payout: Decimal = ZERO
    # Sum of daily_income over orders still active after this pass
    total_active_daily_income: Decimal = ZERO

    @property
    def is_empty(self):
        return not self.payouts

    @property
    def completed_order_ids(self):
        return [p.order_id for p in self.payouts if p.status == STATUS_COMPLETED]


def start_of_local_day(now):
    """Midnight of now's calendar day in the active Django time zone."""
    local_now = timezone.localtime(now)
    return local_now.replace(hour=0, minute=0, second=0, microsecond=0)


def is_eligible(order, today_midnight):
    last_sync = order.last_sync or EPOCH
    return (
        order.purchase_date < today_midnight
        and order.remaining_days > 0
        and last_sync < today_midnight
    )


def plan_accrual(user_id, orders, now, target=REGULAR):
    """
    Decide the payouts for one pass without writing anything.

    orders: the user's active orders for target's pool.
    """
    plan = AccrualPlan(user_id=user_id, target=target, today_midnight=start_of_local_day(now))

    for order in orders:
        daily_income = order.daily_income or ZERO
        active_after = True

        if is_eligible(order, plan.today_midnight):
            remaining_days = max(order.remaining_days - 1, 0)
            status = STATUS_ACTIVE
            if remaining_days <= 0:
                status = STATUS_COMPLETED
                active_after = False

            plan.payouts.append(OrderPayout(
                order_id=order.pk,
                amount=daily_income,
                remaining_days=remaining_days,
                status=status,
                previous_last_sync=order.last_sync,
            ))
            plan.total_payout += daily_income

        if active_after:
            plan.total_active_daily_income += daily_income

    return plan


def commit_plan(plan, now, guarded=True):
    """
    Write one plan atomically. Any failure rolls back every order update,
    the owner credit and the audit row together.
    """
    target = plan.target
    order_model = target.order_model

    with transaction.atomic():
        for payout in plan.payouts:
            qs = order_model.objects.filter(pk=payout.order_id)
            if guarded:
                qs = qs.filter(status=STATUS_ACTIVE)
                if payout.previous_last_sync is None:
                    qs = qs.filter(last_sync__isnull=True)
                else:
                    qs = qs.filter(last_sync=payout.previous_last_sync)

            updated = qs.update(
                remaining_days=payout.remaining_days,
                status=payout.status,
                last_sync=now,
                **target.order_updates(payout),
            )
            if updated != 1:
                raise StaleOrderError(payout.order_id, target.pool)

        target.credit_owner(plan, now)

        AccrualRun.objects.create(
            pool=target.pool,
            user_id=plan.user_id,
            orders_paid=len(plan.payouts),
            payout=plan.total_payout,
            active_daily_income=(
                plan.total_active_daily_income if target.tracks_active_income else None
            ),
            ran_at=now,
        )


def run_accrual(user_id, now=None, target=REGULAR, guarded=None):
    """
    Run one payout pass. Returns the committed AccrualPlan, or None when
    there was nothing to do. Store and commit errors propagate.
    """
    if not user_id:
        return None
    if now is None:
        now = timezone.now()
    if guarded is None:
        guarded = ledger_setting("GUARDED_COMMIT")

    logger.info("Checking %s for user %s on %s", target.label, user_id, timezone.localdate(now))

    orders = list(target.active_orders(user_id))
    if not orders:
        logger.info("No active %s orders for user %s", target.pool, user_id)
        return None

    plan = plan_accrual(user_id, orders, now, target)
    if plan.is_empty:
        logger.info("User %s already received %s today", user_id, target.label)
        return None

    if target.tracks_active_income:
        logger.info(
            "Syncing %d %s orders for user %s: payout=%s active rate=%s",
            len(plan.payouts), target.pool, user_id,
            plan.total_payout, plan.total_active_daily_income,
        )
    else:
        logger.info(
            "Syncing %d %s orders for user %s: payout=%s",
            len(plan.payouts), target.pool, user_id, plan.total_payout,
        )

    commit_plan(plan, now, guarded=guarded)
    if plan.completed_order_ids:
        logger.info("Completed %s orders for user %s: %s", target.pool, user_id, plan.completed_order_ids)
    logger.info("%s sync completed for user %s", target.label.capitalize(), user_id)
    return plan


def sync_daily_income(user_id, now=None, guarded=None):
    return run_accrual(user_id, now=now, target=REGULAR, guarded=guarded)


def sync_weekend_daily_income(user_id, now=None, guarded=None):
    return run_accrual(user_id, now=now, target=WEEKEND, guarded=guarded)
