"""Django Lab Orders configuration.

All settings can be overridden in your Django settings.py.

Example:
    # settings.py
    LAB_ORDERS_MIN_APPROVAL_KEY_LENGTH = 8
    LAB_ORDERS_REFUND_METHOD = 'BANK_TRANSFER'
"""

from django.conf import settings


DEFAULTS = {
    # Minimum length of the cancellation approval key accepted by set_key()
    "MIN_APPROVAL_KEY_LENGTH": 6,
    # Payment method stamped on auto-generated refunds
    "REFUND_METHOD": "CASH",
    # Environment variable consulted when no approval hash is stored in the DB
    "CANCELLATION_KEY_ENV": "LAB_ORDERS_CANCELLATION_KEY_HASH",
}


def get_setting(name: str, default=None):
    """Get a setting with LAB_ORDERS_ prefix, falling back to DEFAULTS."""
    if default is None:
        default = DEFAULTS.get(name)
    return getattr(settings, f"LAB_ORDERS_{name}", default)


def get_min_approval_key_length() -> int:
    """Minimum number of characters for a cancellation approval key."""
    return int(get_setting("MIN_APPROVAL_KEY_LENGTH"))


def get_refund_method() -> str:
    """Payment method used for refunds posted by cancellation."""
    return get_setting("REFUND_METHOD")


# =============================================================================
# DEFAULT SETTINGS REFERENCE
# =============================================================================

# LAB_ORDERS_MIN_APPROVAL_KEY_LENGTH = 6
# LAB_ORDERS_REFUND_METHOD = 'CASH'
# LAB_ORDERS_CANCELLATION_KEY_ENV = 'LAB_ORDERS_CANCELLATION_KEY_HASH'
