"""Doctor commission payout.

A commission row is opened UNPAID by create_order(). Paying it out
stamps the calculated amount and the payment date; once paid, the order
can no longer be cancelled. Marking it unpaid again reverses both stamps.
"""

import logging
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from ..exceptions import CommissionNotFound
from ..models import CommissionLedgerRow, CommissionStatus

logger = logging.getLogger(__name__)


def _lock_commission(order_id) -> CommissionLedgerRow:
    try:
        return CommissionLedgerRow.objects.select_for_update().get(order_id=order_id)
    except CommissionLedgerRow.DoesNotExist:
        raise CommissionNotFound(order_id)


@transaction.atomic
def mark_commission_paid(order_id) -> CommissionLedgerRow:
    """
    Pay out an order's doctor commission.

    Idempotent: a row already PAID keeps its amount and payment date.

    Args:
        order_id: LabOrder primary key

    Returns:
        The updated CommissionLedgerRow

    Raises:
        CommissionNotFound: If the order has no commission row
    """
    commission = _lock_commission(order_id)
    if commission.status == CommissionStatus.PAID:
        return commission

    commission.status = CommissionStatus.PAID
    commission.paid_amount = commission.calculate_amount()
    commission.payment_date = timezone.localdate()
    commission.save(update_fields=["status", "paid_amount", "calculated_amount", "payment_date"])

    logger.info(
        f"Paid commission {commission.paid_amount} to doctor {commission.doctor_id} "
        f"for order #{order_id}"
    )
    return commission


@transaction.atomic
def mark_commission_unpaid(order_id) -> CommissionLedgerRow:
    """Reverse a payout: back to UNPAID with no paid amount or payment date."""
    commission = _lock_commission(order_id)
    commission.status = CommissionStatus.UNPAID
    commission.paid_amount = Decimal("0")
    commission.payment_date = None
    commission.save(update_fields=["status", "paid_amount", "payment_date"])

    logger.info(f"Commission for order #{order_id} marked unpaid")
    return commission
