# ledgerapp/accrual/targets.py
# ----------------------------------------------------------
# Payout targets: which orders a pass scans and what it credits
# ----------------------------------------------------------

from django.db.models import F

from ledgerapp.conf import ledger_setting
from ledgerapp.exceptions import LedgerOwnerMissing
from ledgerapp.models import (
    InvestorProfile,
    Order,
    WeekendOrder,
    POOL_REGULAR,
    POOL_WEEKEND,
    STATUS_ACTIVE,
)


class PayoutTarget:
    pool = None
    label = None
    order_model = None
    # Whether the pass maintains the owner's active daily income snapshot
    tracks_active_income = False

    def active_orders(self, user_id):
        return self.order_model.objects.filter(
            user_id=user_id, status=STATUS_ACTIVE
        ).order_by("pk")

    def order_updates(self, payout):
        """Extra column updates for one paid order."""
        return {}

    def credit_owner(self, plan, now):
        """Credit whoever owns the pool. Runs inside the commit transaction."""


class UserBalanceTarget(PayoutTarget):
    """Regular orders: payouts go to the investor profile balance."""

    pool = POOL_REGULAR
    label = "daily income"
    order_model = Order
    tracks_active_income = True

    def credit_owner(self, plan, now):
        updates = {
            "balance": F("balance") + plan.total_payout,
            "total_income": F("total_income") + plan.total_payout,
            # replaced, not incremented
            "daily_income": plan.total_active_daily_income,
            "updated_at": now,
        }
        if ledger_setting("CREDIT_RECHARGE_BALANCE"):
            updates["recharge_balance"] = F("recharge_balance") + plan.total_payout

        updated = InvestorProfile.objects.filter(user_id=plan.user_id).update(**updates)
        if not updated:
            raise LedgerOwnerMissing(plan.user_id)


class WeekendBalanceTarget(PayoutTarget):
    """Weekend orders: each order keeps its own weekend_balance."""

    pool = POOL_WEEKEND
    label = "weekend income"
    order_model = WeekendOrder

    def order_updates(self, payout):
        return {"weekend_balance": F("weekend_balance") + payout.amount}


REGULAR = UserBalanceTarget()
WEEKEND = WeekendBalanceTarget()

TARGETS = {target.pool: target for target in (REGULAR, WEEKEND)}
