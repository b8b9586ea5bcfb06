from datetime import datetime, timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from ledgerapp.models import InvestorProfile, Order, WeekendOrder, STATUS_ACTIVE


def local_dt(*args):
    """Aware datetime in the project time zone."""
    return timezone.make_aware(datetime(*args))


# 14:00 local on a Tuesday
NOW = local_dt(2026, 3, 10, 14, 0)
MIDNIGHT = local_dt(2026, 3, 10, 0, 0)
END_OF_DAY = local_dt(2026, 3, 10, 23, 59)
TWO_DAYS_AGO = NOW - timedelta(days=2)


def make_user(username, balance="0.00", recharge="0.00"):
    user = get_user_model().objects.create_user(username=username, password="pass12345")
    InvestorProfile.objects.filter(user=user).update(
        balance=Decimal(balance), recharge_balance=Decimal(recharge)
    )
    return user


def make_order(user, daily_income="50.00", remaining_days=3, purchase_date=TWO_DAYS_AGO,
               last_sync=None, status=STATUS_ACTIVE, **extra):
    return Order.objects.create(
        user=user,
        product_name=extra.pop("product_name", "Vitamin Pack"),
        daily_income=Decimal(daily_income),
        contract_period=extra.pop("contract_period", remaining_days),
        remaining_days=remaining_days,
        purchase_date=purchase_date,
        last_sync=last_sync,
        status=status,
        **extra,
    )


def make_weekend_order(user, daily_income="20.00", remaining_days=3, purchase_date=TWO_DAYS_AGO,
                       last_sync=None, weekend_balance="0.00", **extra):
    return WeekendOrder.objects.create(
        user=user,
        product_name=extra.pop("product_name", "Weekend Care"),
        daily_income=Decimal(daily_income),
        contract_period=extra.pop("contract_period", remaining_days),
        remaining_days=remaining_days,
        purchase_date=purchase_date,
        last_sync=last_sync,
        weekend_balance=Decimal(weekend_balance),
        **extra,
    )


def profile_of(user):
    return InvestorProfile.objects.get(user=user)
