"""Order cancellation.

An order can be cancelled only while it is PENDING and no lab activity
has happened. Cancellation needs the system-wide approval key, checked
before the order is even looked up.

Once authorized, cancel_order() runs in a single transaction holding the
order row lock:
1. re-check eligibility
2. return recipe quantities to inventory
3. delete the unpaid commission row (paid commission aborts everything)
4. post one EXPENSE/REFUND payment for the paid amount
5. delete the order and its results
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from django.db import transaction

from ..approval import ApprovalKeyStore, CancellationApprovalKey
from ..conf import get_refund_method
from ..exceptions import (
    CancellationNotAuthorized,
    CommissionAlreadyPaid,
    OrderNotCancellable,
)
from ..models import (
    CommissionLedgerRow,
    LabOrder,
    LabResult,
    OrderStatus,
    Payment,
    PaymentType,
)
from .inventory import restock_for_tests
from .payments import record_payment
from .results import lock_order

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CancellationResult:
    """Outcome of a successful cancellation."""

    order_id: int
    refund_amount: Decimal


def has_lab_activity(order: LabOrder) -> bool:
    """True once the lab started the order or touched any of its results."""
    if order.lab_started_at is not None:
        return True
    return any(result.has_activity for result in order.results.all())


def can_cancel(order) -> bool:
    """
    Check whether reception may still cancel an order.

    Args:
        order: LabOrder instance or primary key; None is never cancellable

    Returns:
        True if the order is PENDING with no lab activity
    """
    if order is None:
        return False
    if not isinstance(order, LabOrder):
        order = LabOrder.objects.filter(pk=order).first()
        if order is None:
            return False
    if order.pk is None:
        return False
    if order.status != OrderStatus.PENDING:
        return False
    return not has_lab_activity(order)


@transaction.atomic
def mark_under_lab_review(order_id) -> LabOrder:
    """Flip PENDING to IN_PROGRESS when lab staff open the order; else no-op."""
    order = lock_order(order_id)
    if order.status == OrderStatus.PENDING:
        order.status = OrderStatus.IN_PROGRESS
        order.save(update_fields=["status"])
    return order


@transaction.atomic
def release_lab_review(order_id) -> LabOrder:
    """Flip IN_PROGRESS back to PENDING if no lab work actually started; else no-op."""
    order = lock_order(order_id)
    if order.status == OrderStatus.IN_PROGRESS and not has_lab_activity(order):
        order.status = OrderStatus.PENDING
        order.save(update_fields=["status"])
    return order


def _delete_commission_row(order: LabOrder) -> None:
    commission = (
        CommissionLedgerRow.objects.select_for_update()
        .filter(order=order)
        .first()
    )
    if commission is None:
        return
    if commission.is_paid:
        raise CommissionAlreadyPaid(order.pk)
    commission.delete()


def cancel_order(
    order_id,
    approval_key: Optional[str],
    key_store: Optional[ApprovalKeyStore] = None,
    cancelled_by=None,
) -> CancellationResult:
    """
    Cancel an order before lab work starts and refund what was paid.

    Args:
        order_id: LabOrder primary key
        approval_key: Cancellation approval key supplied by the approver
        key_store: Where the approval key hash lives (defaults to the
            LabOrderSettings singleton)
        cancelled_by: Optional user recorded on the refund payment

    Returns:
        CancellationResult with the order id and refunded amount

    Raises:
        CancellationNotAuthorized: If the approval key does not verify
        OrderNotFound: If the order does not exist
        OrderNotCancellable: If lab work started or the order left PENDING
        InventoryItemMissing: If a recipe item vanished (nothing is changed)
        CommissionAlreadyPaid: If doctor commission was paid (nothing is changed)
    """
    if not CancellationApprovalKey(store=key_store).verify(approval_key):
        logger.warning(f"Rejected cancellation of order {order_id}: approval key did not verify")
        raise CancellationNotAuthorized()

    with transaction.atomic():
        order = lock_order(order_id)
        results = list(
            LabResult.objects.select_for_update()
            .filter(order=order)
            .order_by("id")
        )

        if not can_cancel(order):
            raise OrderNotCancellable(order.pk)

        restock_for_tests([result.test for result in results if result.test_id is not None])
        _delete_commission_row(order)

        refund_amount = order.paid_amount or Decimal("0")
        if refund_amount > 0:
            record_payment(
                payment_type=PaymentType.EXPENSE,
                category=Payment.CATEGORY_REFUND,
                description=f"Refund for cancelled order #{order.pk}",
                amount=refund_amount,
                method=get_refund_method(),
                remarks="Auto-generated refund for pre-test cancellation",
                recorded_by=cancelled_by,
            )

        cancelled_id = order.pk
        order.delete()

    logger.info(f"Cancelled order #{cancelled_id}; refunded {refund_amount}")
    return CancellationResult(order_id=cancelled_id, refund_amount=refund_amount)
