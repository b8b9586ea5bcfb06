from datetime import timedelta
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from ledgerapp.accrual.engine import sync_daily_income, sync_weekend_daily_income
from ledgerapp.exceptions import (
    InsufficientFunds,
    ProductUnavailable,
    ProfileMissing,
    PurchaseLimitReached,
)
from ledgerapp.models import InvestorProfile, Order, Product, WeekendProduct, STATUS_ACTIVE
from ledgerapp.services import purchase_product, purchase_weekend_product, weekend_reward
from ledgerapp.tests.utils import NOW, make_user, profile_of


class PurchaseProductTest(TestCase):
    def setUp(self):
        self.user = make_user("hana", recharge="1000.00")
        self.product = Product.objects.create(
            name="Herbal Tonic",
            price=Decimal("600.00"),
            daily_income=Decimal("45.00"),
            contract_period=30,
            total_profit=Decimal("1350.00"),
            principal_income=Decimal("600.00"),
        )

    def test_order_copies_product_terms(self):
        order = purchase_product(self.user.pk, self.product.pk, now=NOW)

        self.assertEqual(order.product_name, "Herbal Tonic")
        self.assertEqual(order.daily_income, Decimal("45.00"))
        self.assertEqual(order.contract_period, 30)
        self.assertEqual(order.remaining_days, 30)
        self.assertEqual(order.status, STATUS_ACTIVE)
        self.assertEqual(order.purchase_date, NOW)
        self.assertEqual(order.last_sync, NOW)

        profile = profile_of(self.user)
        self.assertEqual(profile.recharge_balance, Decimal("400.00"))
        self.assertEqual(profile.daily_income, Decimal("45.00"))

    def test_first_payout_is_the_next_day(self):
        order = purchase_product(self.user.pk, self.product.pk, now=NOW)

        self.assertIsNone(sync_daily_income(self.user.pk, now=NOW + timedelta(hours=2)))
        self.assertIsNotNone(sync_daily_income(self.user.pk, now=NOW + timedelta(days=1)))

        order.refresh_from_db()
        self.assertEqual(order.remaining_days, 29)
        self.assertEqual(profile_of(self.user).balance, Decimal("45.00"))

    def test_insufficient_recharge_balance(self):
        InvestorProfile.objects.filter(user=self.user).update(recharge_balance=Decimal("599.99"))

        with self.assertRaises(InsufficientFunds) as ctx:
            purchase_product(self.user.pk, self.product.pk, now=NOW)

        self.assertEqual(ctx.exception.code, "INSUFFICIENT_FUNDS")
        self.assertFalse(Order.objects.exists())

    def test_purchase_limit(self):
        InvestorProfile.objects.filter(user=self.user).update(recharge_balance=Decimal("5000.00"))
        purchase_product(self.user.pk, self.product.pk, now=NOW)

        with self.assertRaises(PurchaseLimitReached):
            purchase_product(self.user.pk, self.product.pk, now=NOW)

        self.assertEqual(Order.objects.count(), 1)
        self.assertEqual(profile_of(self.user).recharge_balance, Decimal("4400.00"))

    def test_inactive_product(self):
        self.product.is_active = False
        self.product.save()

        with self.assertRaises(ProductUnavailable):
            purchase_product(self.user.pk, self.product.pk, now=NOW)

    def test_missing_profile(self):
        InvestorProfile.objects.filter(user=self.user).delete()

        with self.assertRaises(ProfileMissing):
            purchase_product(self.user.pk, self.product.pk, now=NOW)


class DailyIncomeValidationTest(TestCase):
    def test_negative_daily_income_is_rejected(self):
        product = Product(name="Bad", price=Decimal("10.00"), daily_income=Decimal("-1.00"),
                          contract_period=5)

        with self.assertRaises(ValidationError) as ctx:
            product.full_clean()
        self.assertIn("daily_income", ctx.exception.message_dict)

    def test_negative_order_rate_is_rejected(self):
        user = make_user("neg")
        order = Order(user=user, product_name="Bad", daily_income=Decimal("-5.00"), remaining_days=3)

        with self.assertRaises(ValidationError) as ctx:
            order.full_clean()
        self.assertEqual(list(ctx.exception.message_dict), ["daily_income"])

    def test_zero_daily_income_is_allowed(self):
        WeekendProduct(name="Free", price=Decimal("0.00"), daily_income=Decimal("0.00"),
                       contract_period=1).full_clean()


class PurchaseWeekendProductTest(TestCase):
    def setUp(self):
        self.user = make_user("meron", recharge="2000.00")

    def _product(self, **kwargs):
        defaults = dict(
            name="Weekend Care",
            price=Decimal("1000.00"),
            daily_income=Decimal("20.00"),
            contract_period=5,
        )
        defaults.update(kwargs)
        return WeekendProduct.objects.create(**defaults)

    def test_fixed_reward_is_granted_up_front(self):
        product = self._product(reward_amount=Decimal("150.00"))

        order = purchase_weekend_product(self.user.pk, product.pk, now=NOW)

        self.assertEqual(order.reward_percent, Decimal("15.00"))
        self.assertEqual(order.weekend_balance, Decimal("170.00"))
        self.assertEqual(order.total_profit, Decimal("100.00"))
        self.assertEqual(order.withdrawal_days, 30)
        self.assertEqual(order.last_sync, NOW)

        profile = profile_of(self.user)
        self.assertEqual(profile.recharge_balance, Decimal("1000.00"))
        self.assertEqual(profile.weekend_balance, Decimal("150.00"))
        self.assertEqual(profile.daily_income, Decimal("0.00"))

    def test_percent_reward(self):
        product = self._product(reward_percent=Decimal("12.50"), total_profit=Decimal("90.00"))

        order = purchase_weekend_product(self.user.pk, product.pk, now=NOW)

        self.assertEqual(order.reward_percent, Decimal("12.50"))
        self.assertEqual(order.weekend_balance, Decimal("145.00"))
        self.assertEqual(order.total_profit, Decimal("90.00"))

    def test_weekend_order_accrues_from_next_day(self):
        product = self._product(reward_amount=Decimal("150.00"))
        order = purchase_weekend_product(self.user.pk, product.pk, now=NOW)

        self.assertIsNone(sync_weekend_daily_income(self.user.pk, now=NOW + timedelta(hours=1)))
        sync_weekend_daily_income(self.user.pk, now=NOW + timedelta(days=1))

        order.refresh_from_db()
        self.assertEqual(order.weekend_balance, Decimal("190.00"))
        self.assertEqual(order.remaining_days, 4)

    def test_free_product_has_zero_rate(self):
        product = self._product(price=Decimal("0.00"), reward_amount=Decimal("10.00"))

        self.assertEqual(weekend_reward(product), (Decimal("10.00"), Decimal("0.00")))

    def test_weekend_limit_is_separate_from_regular(self):
        product = self._product(reward_percent=Decimal("5.00"))
        purchase_weekend_product(self.user.pk, product.pk, now=NOW)

        with self.assertRaises(PurchaseLimitReached) as ctx:
            purchase_weekend_product(self.user.pk, product.pk, now=NOW)
        self.assertEqual(ctx.exception.code, "PURCHASE_LIMIT_REACHED")
