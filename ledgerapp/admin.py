# ==========================================================
# ledgerapp/admin.py
# ==========================================================
from django.contrib import admin, messages

from .accrual.runner import sync_user_income
from .models import (
    InvestorProfile,
    Product,
    WeekendProduct,
    Order,
    WeekendOrder,
    AccrualRun,
    AccrualLock,
)


# ==========================================================
# ✅ INVESTOR PROFILE ADMIN
# ==========================================================
@admin.register(InvestorProfile)
class InvestorProfileAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "balance",
        "recharge_balance",
        "total_income",
        "daily_income",
        "weekend_balance",
        "updated_at",
    )
    search_fields = ("user__username", "user__email")
    actions = ["run_income_sync"]

    @admin.action(description="Run income sync now")
    def run_income_sync(self, request, queryset):
        paid = 0
        for profile in queryset:
            results = sync_user_income(profile.user_id)
            paid += sum(1 for plan in results.values() if plan is not None)
        self.message_user(request, f"✅ Income sync finished: {paid} payout pass(es) committed",
                          messages.SUCCESS)


# ==========================================================
# ✅ PRODUCT ADMIN
# ==========================================================
@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["name", "price", "daily_income", "contract_period", "purchase_limit", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name"]


@admin.register(WeekendProduct)
class WeekendProductAdmin(admin.ModelAdmin):
    list_display = ["name", "price", "daily_income", "contract_period", "reward_amount",
                    "reward_percent", "withdrawal_days", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name"]


# ==========================================================
# ✅ ORDER ADMIN
# ==========================================================
@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "product_name", "daily_income", "remaining_days",
                    "status", "purchase_date", "last_sync"]
    list_filter = ["status"]
    search_fields = ["user__username", "product_name"]
    readonly_fields = ["remaining_days", "status", "last_sync"]


@admin.register(WeekendOrder)
class WeekendOrderAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "product_name", "daily_income", "weekend_balance",
                    "remaining_days", "status", "purchase_date", "last_sync"]
    list_filter = ["status"]
    search_fields = ["user__username", "product_name"]
    readonly_fields = ["remaining_days", "status", "last_sync", "weekend_balance"]


# ==========================================================
# ✅ ACCRUAL LOG ADMIN
# ==========================================================
@admin.register(AccrualRun)
class AccrualRunAdmin(admin.ModelAdmin):
    list_display = ("ran_at", "pool", "user", "orders_paid", "payout", "active_daily_income")
    list_filter = ("pool", "ran_at")
    search_fields = ("user__username",)


@admin.register(AccrualLock)
class AccrualLockAdmin(admin.ModelAdmin):
    list_display = ("run_date", "is_running", "started_at", "finished_at")


# ==========================================================
# ✅ Admin Branding
# ==========================================================
admin.site.site_header = "VPharm Ledger Administration"
admin.site.site_title = "VPharm Admin"
admin.site.index_title = "Daily income ledger"
