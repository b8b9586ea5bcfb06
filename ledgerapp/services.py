# ledgerapp/services.py
from __future__ import annotations

import logging
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from ledgerapp.exceptions import (
    InsufficientFunds,
    ProductUnavailable,
    ProfileMissing,
    PurchaseLimitReached,
)
from ledgerapp.models import (
    InvestorProfile,
    Order,
    Product,
    WeekendOrder,
    WeekendProduct,
    STATUS_ACTIVE,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def _q(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def _lock_profile(user_id) -> InvestorProfile:
    try:
        return InvestorProfile.objects.select_for_update().get(user_id=user_id)
    except InvestorProfile.DoesNotExist:
        raise ProfileMissing(f"No investor profile for user {user_id}")


def _load_product(model, product_id):
    product = model.objects.filter(pk=product_id, is_active=True).first()
    if product is None:
        raise ProductUnavailable(f"Product {product_id} is not available")
    return product


def _check_funds_and_limit(profile, product, order_model):
    if profile.recharge_balance < product.price:
        raise InsufficientFunds(
            f"Recharge balance {profile.recharge_balance} is below price {product.price}"
        )

    owned = order_model.objects.filter(user_id=profile.user_id, product=product).count()
    if owned >= (product.purchase_limit or 1):
        raise PurchaseLimitReached(f"Limit reached: {product.purchase_limit} items max.")


def weekend_reward(product: WeekendProduct) -> tuple[Decimal, Decimal]:
    """
    Return (reward, reward_percent) for a weekend product.
    A fixed reward_amount wins; otherwise reward_percent of the price.
    """
    if product.reward_amount is not None:
        reward = _q(product.reward_amount)
        rate = _q(reward / product.price * HUNDRED) if product.price > 0 else Decimal("0.00")
        return reward, rate

    rate = _q(product.reward_percent or 0)
    return _q(product.price * rate / HUNDRED), rate


# ============================================================
# REGULAR PRODUCT → ORDER
# ============================================================
def purchase_product(user_id, product_id, now=None) -> Order:
    """
    Buy one regular product with the recharge balance.
    The order starts paying out the day after purchase.
    """
    if now is None:
        now = timezone.now()

    with transaction.atomic():
        profile = _lock_profile(user_id)
        product = _load_product(Product, product_id)
        _check_funds_and_limit(profile, product, Order)

        order = Order.objects.create(
            user_id=user_id,
            product=product,
            product_name=product.name,
            price=product.price,
            daily_income=product.daily_income,
            contract_period=product.contract_period,
            remaining_days=product.contract_period,
            total_profit=product.total_profit,
            principal_income=product.principal_income,
            status=STATUS_ACTIVE,
            purchase_date=now,
            last_sync=now,
        )

        InvestorProfile.objects.filter(pk=profile.pk).update(
            recharge_balance=F("recharge_balance") - product.price,
            daily_income=F("daily_income") + product.daily_income,
            updated_at=now,
        )

    logger.info("User %s bought %s (order %s)", user_id, product.name, order.pk)
    return order


# ============================================================
# WEEKEND PRODUCT → WEEKEND ORDER
# ============================================================
def purchase_weekend_product(user_id, product_id, now=None) -> WeekendOrder:
    """
    Buy one weekend product. The reward is granted up front: the order's
    weekend_balance starts at reward + one day of income, and the profile's
    weekend_balance grows by the reward.
    """
    if now is None:
        now = timezone.now()

    with transaction.atomic():
        profile = _lock_profile(user_id)
        product = _load_product(WeekendProduct, product_id)
        _check_funds_and_limit(profile, product, WeekendOrder)

        reward, rate = weekend_reward(product)
        total_profit = product.total_profit or product.daily_income * product.contract_period

        order = WeekendOrder.objects.create(
            user_id=user_id,
            product=product,
            product_name=product.name,
            price=product.price,
            daily_income=product.daily_income,
            contract_period=product.contract_period,
            remaining_days=product.contract_period,
            total_profit=total_profit,
            status=STATUS_ACTIVE,
            purchase_date=now,
            last_sync=now,
            withdrawal_days=product.withdrawal_days or 30,
            weekend_balance=reward + product.daily_income,
            reward_percent=rate,
        )

        InvestorProfile.objects.filter(pk=profile.pk).update(
            recharge_balance=F("recharge_balance") - product.price,
            weekend_balance=F("weekend_balance") + reward,
            updated_at=now,
        )

    logger.info("User %s bought weekend product %s (order %s)", user_id, product.name, order.pk)
    return order
