"""django-lab-orders: Laboratory order lifecycle with inventory, billing and commission consistency.

Provides:
- LabOrder / LabResult: order aggregate with owned result rows
- InventoryItem / ConsumptionRecipe: stock deducted on order, restocked on cancel
- CommissionLedgerRow: referring-doctor commission, one per order
- Payment: income/expense sink used for refunds
- Services for order creation, result entry and authorized cancellation

Usage:
    INSTALLED_APPS = [
        ...
        'django_lab_orders',
    ]

    from django_lab_orders.services import create_order, save_order_results, cancel_order

See conf.py for all configuration options.
"""

__version__ = "0.1.0"

__all__ = [
    "CancellationApprovalKey",
    "CancellationResult",
    "LabOrderError",
]


def __getattr__(name):
    """Lazy imports to prevent AppRegistryNotReady errors."""
    if name == "CancellationApprovalKey":
        from .approval import CancellationApprovalKey

        return CancellationApprovalKey
    if name == "CancellationResult":
        from .services.cancellation import CancellationResult

        return CancellationResult
    if name == "LabOrderError":
        from .exceptions import LabOrderError

        return LabOrderError
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
