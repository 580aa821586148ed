"""django-lab-orders services.

Re-exports all services for convenient importing. All order, result,
inventory and commission writes go through these functions; direct model
manipulation bypasses the cross-ledger invariants and is unsupported.
"""

from .cancellation import (
    CancellationResult,
    can_cancel,
    cancel_order,
    has_lab_activity,
    mark_under_lab_review,
    release_lab_review,
)
from .commission import mark_commission_paid, mark_commission_unpaid
from .delivery import mark_delivered, record_reprint
from .inventory import deduct_for_tests, restock_for_tests
from .ordering import calculate_total, create_order, resolve_tests
from .payments import record_payment
from .results import (
    classify_result_value,
    enter_single_result,
    save_edited_results,
    save_order_results,
)

__all__ = [
    "CancellationResult",
    "calculate_total",
    "can_cancel",
    "cancel_order",
    "classify_result_value",
    "create_order",
    "deduct_for_tests",
    "enter_single_result",
    "has_lab_activity",
    "mark_commission_paid",
    "mark_commission_unpaid",
    "mark_delivered",
    "mark_under_lab_review",
    "record_payment",
    "record_reprint",
    "release_lab_review",
    "resolve_tests",
    "restock_for_tests",
    "save_edited_results",
    "save_order_results",
]
