from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def money(**kwargs):
    return models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=14, **kwargs)


ORDER_STATUS_CHOICES = [("active", "Active"), ("completed", "Completed")]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="InvestorProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("balance", money()),
                ("recharge_balance", money()),
                ("total_income", money()),
                ("daily_income", money()),
                ("weekend_balance", money()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.OneToOneField(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="investor_profile",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("price", money()),
                ("daily_income", money(validators=[django.core.validators.MinValueValidator(Decimal("0"))])),
                ("contract_period", models.PositiveIntegerField(help_text="Payout days")),
                ("total_profit", money()),
                ("purchase_limit", models.PositiveIntegerField(default=1)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("principal_income", money()),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="WeekendProduct",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("price", money()),
                ("daily_income", money(validators=[django.core.validators.MinValueValidator(Decimal("0"))])),
                ("contract_period", models.PositiveIntegerField(help_text="Payout days")),
                ("total_profit", money()),
                ("purchase_limit", models.PositiveIntegerField(default=1)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("reward_amount", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("reward_percent", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=7)),
                ("withdrawal_days", models.PositiveIntegerField(default=30)),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(blank=True, max_length=200)),
                ("price", money()),
                ("daily_income", money(validators=[django.core.validators.MinValueValidator(Decimal("0"))])),
                ("contract_period", models.PositiveIntegerField(default=0)),
                ("total_profit", money()),
                ("remaining_days", models.PositiveIntegerField(default=0)),
                ("status", models.CharField(choices=ORDER_STATUS_CHOICES, db_index=True, default="active", max_length=20)),
                ("purchase_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("last_sync", models.DateTimeField(blank=True, null=True)),
                ("principal_income", money()),
                ("product", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="orders",
                    to="ledgerapp.product",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="WeekendOrder",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(blank=True, max_length=200)),
                ("price", money()),
                ("daily_income", money(validators=[django.core.validators.MinValueValidator(Decimal("0"))])),
                ("contract_period", models.PositiveIntegerField(default=0)),
                ("total_profit", money()),
                ("remaining_days", models.PositiveIntegerField(default=0)),
                ("status", models.CharField(choices=ORDER_STATUS_CHOICES, db_index=True, default="active", max_length=20)),
                ("purchase_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("last_sync", models.DateTimeField(blank=True, null=True)),
                ("weekend_balance", money()),
                ("withdrawal_days", models.PositiveIntegerField(default=30)),
                ("reward_percent", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=7)),
                ("product", models.ForeignKey(
                    blank=True,
                    null=True,
                    on_delete=django.db.models.deletion.SET_NULL,
                    related_name="orders",
                    to="ledgerapp.weekendproduct",
                )),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={"abstract": False},
        ),
        migrations.CreateModel(
            name="AccrualRun",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("pool", models.CharField(choices=[("regular", "Regular"), ("weekend", "Weekend")], max_length=20)),
                ("orders_paid", models.PositiveIntegerField(default=0)),
                ("payout", money()),
                ("active_daily_income", models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ("ran_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("user", models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name="accrual_runs",
                    to=settings.AUTH_USER_MODEL,
                )),
            ],
            options={"ordering": ["-ran_at"]},
        ),
        migrations.CreateModel(
            name="AccrualLock",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("run_date", models.DateField(unique=True)),
                ("is_running", models.BooleanField(default=False)),
                ("started_at", models.DateTimeField(blank=True, null=True)),
                ("finished_at", models.DateTimeField(blank=True, null=True)),
            ],
        ),
    ]
