from decimal import Decimal

from django.test import TestCase, override_settings

from ledgerapp.accrual.engine import commit_plan, plan_accrual, sync_daily_income
from ledgerapp.accrual.targets import REGULAR
from ledgerapp.exceptions import StaleOrderError
from ledgerapp.models import AccrualRun, Order
from ledgerapp.tests.utils import MIDNIGHT, NOW, make_order, make_user, profile_of


class OverlappingPassesTest(TestCase):
    """Two passes that read the same orders before either commits."""

    def setUp(self):
        self.user = make_user("dawit", balance="1000.00")
        self.order = make_order(self.user, daily_income="50.00", remaining_days=3)

    def _two_stale_plans(self):
        orders = list(REGULAR.active_orders(self.user.pk))
        return (
            plan_accrual(self.user.pk, orders, NOW, REGULAR),
            plan_accrual(self.user.pk, orders, NOW, REGULAR),
        )

    def test_planning_writes_nothing(self):
        self._two_stale_plans()

        self.order.refresh_from_db()
        self.assertEqual(self.order.remaining_days, 3)
        self.assertEqual(profile_of(self.user).balance, Decimal("1000.00"))

    def test_guarded_commit_rejects_second_pass(self):
        first, second = self._two_stale_plans()
        commit_plan(first, NOW, guarded=True)

        with self.assertRaises(StaleOrderError):
            commit_plan(second, NOW, guarded=True)

        self.order.refresh_from_db()
        self.assertEqual(self.order.remaining_days, 2)
        self.assertEqual(profile_of(self.user).balance, Decimal("1050.00"))
        self.assertEqual(AccrualRun.objects.count(), 1)

    def test_unguarded_commit_pays_the_same_day_twice(self):
        first, second = self._two_stale_plans()
        commit_plan(first, NOW, guarded=False)
        commit_plan(second, NOW, guarded=False)

        self.order.refresh_from_db()
        # both passes wrote the same countdown but both credited the balance
        self.assertEqual(self.order.remaining_days, 2)
        self.assertEqual(profile_of(self.user).balance, Decimal("1100.00"))

    def test_stale_order_rolls_back_whole_pass(self):
        other = make_order(self.user, daily_income="30.00", remaining_days=4)
        plan = plan_accrual(self.user.pk, list(REGULAR.active_orders(self.user.pk)), NOW, REGULAR)
        Order.objects.filter(pk=other.pk).update(last_sync=MIDNIGHT)

        with self.assertRaises(StaleOrderError):
            commit_plan(plan, NOW, guarded=True)

        self.order.refresh_from_db()
        self.assertEqual(self.order.remaining_days, 3)
        self.assertIsNone(self.order.last_sync)
        self.assertEqual(profile_of(self.user).balance, Decimal("1000.00"))

    def test_completed_by_other_pass_is_stale(self):
        plan = plan_accrual(self.user.pk, list(REGULAR.active_orders(self.user.pk)), NOW, REGULAR)
        Order.objects.filter(pk=self.order.pk).update(status="completed")

        with self.assertRaises(StaleOrderError):
            commit_plan(plan, NOW, guarded=True)

    @override_settings(LEDGER_ACCRUAL={"GUARDED_COMMIT": False})
    def test_commit_mode_comes_from_settings(self):
        self.assertIsNotNone(sync_daily_income(self.user.pk, now=NOW))
        self.assertEqual(profile_of(self.user).balance, Decimal("1050.00"))
