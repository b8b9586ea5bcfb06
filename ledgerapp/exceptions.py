# ledgerapp/exceptions.py


class AccrualError(Exception):
    """A payout pass could not be committed; nothing was written."""


class StaleOrderError(AccrualError):
    """An order changed between planning and commit (guarded mode only)."""

    def __init__(self, order_id, pool):
        self.order_id = order_id
        self.pool = pool
        super().__init__(f"{pool} order {order_id} was modified by another sync pass")


class LedgerOwnerMissing(AccrualError):
    """The investor profile to credit does not exist."""

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"No investor profile for user {user_id}")


class PurchaseError(Exception):
    code = "PURCHASE_FAILED"


class ProfileMissing(PurchaseError):
    code = "PROFILE_MISSING"


class ProductUnavailable(PurchaseError):
    code = "PRODUCT_UNAVAILABLE"


class InsufficientFunds(PurchaseError):
    code = "INSUFFICIENT_FUNDS"


class PurchaseLimitReached(PurchaseError):
    code = "PURCHASE_LIMIT_REACHED"
