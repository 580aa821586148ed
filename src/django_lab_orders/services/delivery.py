"""Report delivery and reprint tracking."""

import logging

from django.db import transaction
from django.utils import timezone

from ..models import LabOrder
from .results import lock_order

logger = logging.getLogger(__name__)


@transaction.atomic
def mark_delivered(order_id) -> LabOrder:
    """
    Record that the report was handed to the patient.

    Idempotent: a second call keeps the original delivery time.
    Once delivered, results can only change through save_edited_results().
    """
    order = lock_order(order_id)
    if not order.is_report_delivered:
        order.is_report_delivered = True
        order.delivery_date = timezone.now()
        order.save(update_fields=["is_report_delivered", "delivery_date"])
        logger.info(f"Report for order #{order.pk} delivered")
    return order


@transaction.atomic
def record_reprint(order_id, printed_by=None) -> LabOrder:
    """Clear the reprint flag and count a reprint of the report."""
    order = lock_order(order_id)
    order.reprint_required = False
    order.reprint_count = (order.reprint_count or 0) + 1
    order.last_reprint_at = timezone.now()
    order.last_reprint_by = printed_by
    order.save(update_fields=[
        "reprint_required",
        "reprint_count",
        "last_reprint_at",
        "last_reprint_by",
    ])
    return order
