"""Result entry services.

Three entry points share one classification routine:
- enter_single_result(): set one value and classify it
- save_order_results(): batch save, partial saves allowed, drives status
- save_edited_results(): corrections after completion, with audit rows

Batch saves lock the order row and its results for the whole call, so the
completion check sees exactly the rows written in that call and cannot
interleave with a cancellation.
"""

import logging
from typing import Mapping, Optional

from django.db import transaction
from django.utils import timezone

from ..exceptions import (
    EditReasonRequired,
    OrderAlreadyDelivered,
    OrderNotCompleted,
    OrderNotFound,
    ResultNotFound,
)
from ..models import (
    LabOrder,
    LabResult,
    LabResultEditAudit,
    OrderStatus,
    ResultStatus,
)
from ..ranges import Classification, classify_value

logger = logging.getLogger(__name__)

RESULT_FIELDS = [
    "result_value",
    "is_abnormal",
    "remarks",
    "performed_by",
    "performed_at",
    "status",
    "updated_at",
]


def _has_text(value) -> bool:
    return value is not None and bool(str(value).strip())


def classify_result_value(value, test, patient) -> Classification:
    """Classify a value for a test against the patient's reference range."""
    return classify_value(
        value,
        list(test.ranges.all()),
        age=patient.age if patient is not None else None,
        gender=patient.gender if patient is not None else None,
        default_min=test.min_range,
        default_max=test.max_range,
    )


def _apply(result: LabResult, value, patient, performed_by=None, stamp: bool = True) -> None:
    result.result_value = str(value).strip()
    outcome = classify_result_value(result.result_value, result.test, patient)
    result.is_abnormal = outcome.is_abnormal
    result.remarks = outcome.remarks
    result.status = ResultStatus.COMPLETED if result.has_value else ResultStatus.PENDING
    if stamp:
        result.performed_by = performed_by
        result.performed_at = timezone.now()


def lock_order(order_id) -> LabOrder:
    """Fetch and lock an order row for the current transaction."""
    try:
        return LabOrder.objects.select_for_update().get(pk=order_id)
    except LabOrder.DoesNotExist:
        raise OrderNotFound(order_id)


def _lock_results(order: LabOrder) -> dict:
    results = (
        LabResult.objects.select_for_update()
        .filter(order=order)
        .prefetch_related("test__ranges")
        .order_by("id")
    )
    return {result.pk: result for result in results}


def _submitted(values: Mapping, results: dict):
    """Yield (result, value) for non-blank submissions; unknown ids raise."""
    for result_id, value in values.items():
        try:
            result = results[int(result_id)]
        except (KeyError, TypeError, ValueError):
            raise ResultNotFound(result_id)
        if _has_text(value):
            yield result, value


@transaction.atomic
def enter_single_result(result_id, value) -> LabResult:
    """
    Set one result's value and classify it.

    Args:
        result_id: LabResult primary key
        value: Entered value; non-numeric text is stored without a range check

    Returns:
        The saved LabResult

    Raises:
        ResultNotFound: If the result does not exist
    """
    order_id = LabResult.objects.filter(pk=result_id).values_list("order_id", flat=True).first()
    if order_id is None:
        raise ResultNotFound(result_id)

    order = lock_order(order_id)
    result = LabResult.objects.select_for_update().select_related("test").get(pk=result_id)

    _apply(result, "" if value is None else value, order.patient, stamp=False)
    result.save(update_fields=["result_value", "is_abnormal", "remarks", "status", "updated_at"])
    return result


@transaction.atomic
def save_order_results(order_id, values: Mapping, performed_by=None) -> LabOrder:
    """
    Save submitted result values for an order and update its status.

    Blank submissions leave the stored value untouched. Each non-blank
    value is stored, stamped with performer and time, and classified.
    The order becomes COMPLETED when every result has a value, otherwise
    IN_PROGRESS.

    Args:
        order_id: LabOrder primary key
        values: Mapping of result id to submitted value
        performed_by: User entering the results

    Returns:
        The updated LabOrder

    Raises:
        OrderNotFound: If the order does not exist
        OrderAlreadyDelivered: If the report was already delivered
        ResultNotFound: If a result id does not belong to the order
    """
    order = lock_order(order_id)
    if order.is_report_delivered:
        raise OrderAlreadyDelivered(order.pk)

    results = _lock_results(order)
    patient = order.patient

    saved = 0
    for result, value in list(_submitted(values, results)):
        _apply(result, value, patient, performed_by=performed_by)
        result.save(update_fields=RESULT_FIELDS)
        saved += 1

    if saved and order.lab_started_at is None:
        order.lab_started_at = timezone.now()

    all_done = all(result.has_value for result in results.values())
    order.status = OrderStatus.COMPLETED if all_done else OrderStatus.IN_PROGRESS
    order.save(update_fields=["status", "lab_started_at"])

    logger.info(
        f"Saved {saved} result(s) for order #{order.pk}; status {order.status}"
    )
    return order


@transaction.atomic
def save_edited_results(
    order_id,
    values: Mapping,
    edit_reason: Optional[str] = None,
    edited_by=None,
) -> LabOrder:
    """
    Correct results of a completed order.

    A delivered order needs a reason and is flagged for reprint. One
    LabResultEditAudit row is written per result whose value changed.
    Without an editor the original performer stamp is kept.

    Args:
        order_id: LabOrder primary key
        values: Mapping of result id to corrected value; blanks are ignored
        edit_reason: Why the results changed (required once delivered)
        edited_by: User making the correction

    Returns:
        The updated LabOrder

    Raises:
        OrderNotFound: If the order does not exist
        OrderNotCompleted: If the order is not COMPLETED
        EditReasonRequired: If delivered and no reason was given
        ResultNotFound: If a result id does not belong to the order
    """
    order = lock_order(order_id)
    if order.status != OrderStatus.COMPLETED:
        raise OrderNotCompleted(order.pk, order.status)

    delivered = order.is_report_delivered
    reason = (edit_reason or "").strip()
    if delivered and not reason:
        raise EditReasonRequired(order.pk)

    results = _lock_results(order)
    patient = order.patient
    now = timezone.now()

    audits = []
    for result, value in list(_submitted(values, results)):
        previous = (result.result_value, result.remarks, result.is_abnormal)
        _apply(result, value, patient, performed_by=edited_by, stamp=edited_by is not None)
        result.save(update_fields=RESULT_FIELDS)

        if previous[0] != result.result_value:
            audits.append(LabResultEditAudit(
                order=order,
                result=result,
                test_name=result.test.name,
                previous_value=previous[0],
                new_value=result.result_value,
                previous_remarks=previous[1],
                new_remarks=result.remarks,
                previous_abnormal=previous[2],
                new_abnormal=result.is_abnormal,
                edited_by=edited_by,
                edited_at=now,
                reason=reason,
                report_delivered_at_edit=delivered,
            ))

    LabResultEditAudit.objects.bulk_create(audits)

    order.results_edited = True
    order.results_edited_at = now
    order.results_edited_by = edited_by
    order.results_edit_reason = reason
    if delivered:
        order.reprint_required = True
    order.save(update_fields=[
        "results_edited",
        "results_edited_at",
        "results_edited_by",
        "results_edit_reason",
        "reprint_required",
    ])

    logger.info(
        f"Edited {len(audits)} result(s) on completed order #{order.pk}"
        + (" (reprint required)" if delivered else "")
    )
    return order
