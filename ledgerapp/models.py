from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"

ORDER_STATUS_CHOICES = [
    (STATUS_ACTIVE, "Active"),
    (STATUS_COMPLETED, "Completed"),
]

POOL_REGULAR = "regular"
POOL_WEEKEND = "weekend"

POOL_CHOICES = [
    (POOL_REGULAR, "Regular"),
    (POOL_WEEKEND, "Weekend"),
]


def _money(**kwargs):
    return models.DecimalField(max_digits=14, decimal_places=2, default=Decimal("0.00"), **kwargs)


# ==========================================================
# INVESTOR PROFILE (per-user ledger figures)
# ==========================================================
class InvestorProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="investor_profile",
    )

    # Withdrawable funds, credited by the daily income sync
    balance = _money()
    # Deposited funds, spent on product purchases
    recharge_balance = _money()
    total_income = _money()
    # Sum of daily_income over the user's active orders (a snapshot, not a delta)
    daily_income = _money()
    # Weekend rewards granted at purchase time
    weekend_balance = _money()

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.user} - balance {self.balance}"


# ==========================================================
# PRODUCT CATALOG
# ==========================================================
class BaseProduct(models.Model):
    name = models.CharField(max_length=200)
    price = _money()
    daily_income = _money(validators=[MinValueValidator(Decimal("0"))])
    contract_period = models.PositiveIntegerField(help_text="Payout days")
    total_profit = _money()
    purchase_limit = models.PositiveIntegerField(default=1)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        abstract = True

    def __str__(self):
        return f"{self.name} - {self.price} ({self.daily_income}/day x {self.contract_period})"


class Product(BaseProduct):
    principal_income = _money()


class WeekendProduct(BaseProduct):
    # Fixed reward wins over reward_percent when set
    reward_amount = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    reward_percent = models.DecimalField(max_digits=7, decimal_places=2, default=Decimal("0.00"))
    withdrawal_days = models.PositiveIntegerField(default=30)


# ==========================================================
# INVESTMENT ORDERS
# ==========================================================
class BaseOrder(models.Model):
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE)

    product_name = models.CharField(max_length=200, blank=True)
    price = _money()
    daily_income = _money(validators=[MinValueValidator(Decimal("0"))])
    contract_period = models.PositiveIntegerField(default=0)
    total_profit = _money()

    remaining_days = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20, choices=ORDER_STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True
    )

    purchase_date = models.DateTimeField(default=timezone.now)
    # NULL means never paid out
    last_sync = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True

    @property
    def is_active(self):
        return self.status == STATUS_ACTIVE

    def __str__(self):
        return f"Order #{self.pk} - {self.user} - {self.product_name} ({self.status})"


class Order(BaseOrder):
    product = models.ForeignKey(
        Product, on_delete=models.SET_NULL, null=True, blank=True, related_name="orders"
    )
    principal_income = _money()


class WeekendOrder(BaseOrder):
    product = models.ForeignKey(
        WeekendProduct, on_delete=models.SET_NULL, null=True, blank=True, related_name="orders"
    )
    # Running total of this order's own weekend payouts
    weekend_balance = _money()
    withdrawal_days = models.PositiveIntegerField(default=30)
    reward_percent = models.DecimalField(max_digits=7, decimal_places=2, default=Decimal("0.00"))


# ==========================================================
# ACCRUAL AUDIT + BATCH LOCK
# ==========================================================
class AccrualRun(models.Model):
    """
    One row per committed payout pass, written in the same transaction.
    Audit only: order.last_sync remains the duplicate-payout guard.
    """
    pool = models.CharField(max_length=20, choices=POOL_CHOICES)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="accrual_runs"
    )
    orders_paid = models.PositiveIntegerField(default=0)
    payout = _money()
    active_daily_income = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    ran_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-ran_at"]

    def __str__(self):
        return f"{self.pool} payout {self.payout} for {self.user} at {self.ran_at}"


class AccrualLock(models.Model):
    run_date = models.DateField(unique=True)
    is_running = models.BooleanField(default=False)
    started_at = models.DateTimeField(null=True, blank=True)
    finished_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        state = "running" if self.is_running else ("finished" if self.finished_at else "idle")
        return f"Accrual lock {self.run_date} ({state})"
