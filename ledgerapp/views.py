# ledgerapp/views.py
from decimal import Decimal

from django.contrib.auth.decorators import login_required
from django.core.cache import cache
from django.db.models import Count, Q, Sum
from django.http import JsonResponse
from django.views.decorators.http import require_GET, require_POST

from .accrual.runner import sync_user_income
from .conf import ledger_setting
from .models import InvestorProfile, Order, WeekendOrder, STATUS_ACTIVE

ACTIVE = Q(status=STATUS_ACTIVE)
CENT = Decimal("0.01")


def _throttle_key(user_id):
    return f"ledger:sync:{user_id}"


def _profile_snapshot(user):
    profile = InvestorProfile.objects.filter(user=user).first()
    if profile is None:
        return None

    weekend = WeekendOrder.objects.filter(user=user).aggregate(
        total=Sum("weekend_balance"),
        active=Count("id", filter=ACTIVE),
    )
    regular = Order.objects.filter(user=user).aggregate(
        active=Count("id", filter=ACTIVE),
    )
    return {
        "balance": str(profile.balance),
        "recharge_balance": str(profile.recharge_balance),
        "total_income": str(profile.total_income),
        "daily_income": str(profile.daily_income),
        "weekend_balance": str(profile.weekend_balance),
        "weekend_orders_balance": str((weekend["total"] or Decimal("0")).quantize(CENT)),
        "active_orders": regular["active"],
        "active_weekend_orders": weekend["active"],
    }


# ======================================================
# PAGE-LOAD INCOME SYNC
# ======================================================
@login_required
@require_POST
def sync_income(request):
    """
    Called by the portal on page load. Runs both payout pools at most once
    per throttle window; failures are logged by the runner, never shown.
    """
    user_id = request.user.pk
    throttle = ledger_setting("TRIGGER_THROTTLE_SECONDS")

    if throttle > 0 and not cache.add(_throttle_key(user_id), 1, timeout=throttle):
        return JsonResponse({"synced": False, "throttled": True,
                             "profile": _profile_snapshot(request.user)})

    results = sync_user_income(user_id)
    return JsonResponse({
        "synced": True,
        "throttled": False,
        "paid": {pool: plan is not None for pool, plan in results.items()},
        "profile": _profile_snapshot(request.user),
    })


@login_required
@require_GET
def ledger_summary(request):
    snapshot = _profile_snapshot(request.user)
    if snapshot is None:
        return JsonResponse({"error": "PROFILE_MISSING"}, status=404)
    return JsonResponse(snapshot)
