# ledgerapp/conf.py
from django.conf import settings

DEFAULTS = {
    "GUARDED_COMMIT": True,
    "CREDIT_RECHARGE_BALANCE": True,
    "SYNC_ON_LOGIN": True,
    "TRIGGER_THROTTLE_SECONDS": 300,
}


def ledger_setting(name):
    """Read one LEDGER_ACCRUAL value, falling back to DEFAULTS."""
    overrides = getattr(settings, "LEDGER_ACCRUAL", {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
