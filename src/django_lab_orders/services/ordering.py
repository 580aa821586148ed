"""Order creation.

create_order() is the only way orders come into existence. In one
transaction it:
- expands panels into tests and de-duplicates the selection
- prices the order (flat panel prices win over member test prices)
- deducts every recipe ingredient from inventory
- creates one empty result slot per test
- opens an UNPAID commission row for a referring doctor with a positive rate
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Iterable, List, Optional, Sequence

from django.core.exceptions import ValidationError
from django.db import transaction

from ..exceptions import InvalidAmount, NoTestsSelected, PatientNotFound
from ..models import (
    CommissionLedgerRow,
    CommissionStatus,
    Doctor,
    LabOrder,
    LabResult,
    OrderStatus,
    Panel,
    Patient,
    ResultStatus,
    TestDefinition,
)
from .inventory import deduct_for_tests

logger = logging.getLogger(__name__)


def _to_amount(field: str, value) -> Decimal:
    if value is None:
        return Decimal("0")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidAmount(field, value)
    if not amount.is_finite() or amount < 0:
        raise InvalidAmount(field, value)
    return amount


def _unique(model, ids: Optional[Iterable]) -> List:
    """Normalise ids to the model's pk type, dropping invalid ones and repeats."""
    seen = []
    for raw in ids or ():
        try:
            pk = model._meta.pk.to_python(raw)
        except ValidationError:
            continue
        if pk is not None and pk not in seen:
            seen.append(pk)
    return seen


def resolve_tests(test_ids: Sequence, panel_ids: Sequence):
    """
    Resolve the individual tests, the panels, and their de-duplicated union.

    Ids may be ints or numeric strings; unknown or malformed ids are
    ignored. Individual tests come first, in request order,
    followed by panel members not already selected.

    Returns:
        Tuple of (individual_tests, panels, all_tests)
    """
    test_ids = _unique(TestDefinition, test_ids)
    panel_ids = _unique(Panel, panel_ids)

    by_pk = TestDefinition.objects.in_bulk(test_ids)
    individual_tests = [by_pk[pk] for pk in test_ids if pk in by_pk]

    panels = []
    if panel_ids:
        panel_by_pk = Panel.objects.prefetch_related("tests").in_bulk(panel_ids)
        panels = [panel_by_pk[pk] for pk in panel_ids if pk in panel_by_pk]

    all_tests = []
    seen = set()
    for test in individual_tests + [t for panel in panels for t in panel.tests.all()]:
        if test.pk not in seen:
            seen.add(test.pk)
            all_tests.append(test)

    return individual_tests, panels, all_tests


def calculate_total(individual_tests: Sequence[TestDefinition], panels: Sequence[Panel]) -> Decimal:
    """
    Price an order.

    Each panel with a flat price adds it once. An individually selected test
    adds its own price only when no priced panel already covers it.
    """
    total = Decimal("0")
    covered = set()
    for panel in panels:
        if panel.price is not None:
            total += panel.price
            covered.update(test.pk for test in panel.tests.all())

    for test in individual_tests:
        if test.pk not in covered and test.price is not None:
            total += test.price

    return total


def create_order(
    patient_id,
    doctor_id=None,
    test_ids: Sequence = (),
    panel_ids: Sequence = (),
    discount=Decimal("0"),
    cash_paid=Decimal("0"),
    created_by=None,
) -> LabOrder:
    """
    Create a lab order with results, stock deduction and commission.

    Args:
        patient_id: Patient primary key (required)
        doctor_id: Referring doctor primary key; an unknown id means no doctor
        test_ids: Individually selected test ids
        panel_ids: Selected panel ids
        discount: Discount amount (>= 0)
        cash_paid: Amount paid now (>= 0)
        created_by: Optional user booking the order

    Returns:
        The persisted LabOrder

    Raises:
        InvalidAmount: If discount or cash_paid is negative or not a number
        PatientNotFound: If patient_id does not exist
        NoTestsSelected: If tests and panels resolve to nothing
        InsufficientStock: If any recipe ingredient is short; nothing is saved
    """
    discount = _to_amount("discount", discount)
    cash_paid = _to_amount("cash paid", cash_paid)

    with transaction.atomic():
        try:
            patient = Patient.objects.get(pk=patient_id)
        except Patient.DoesNotExist:
            raise PatientNotFound(patient_id)

        doctor = None
        if doctor_id is not None:
            doctor = Doctor.objects.filter(pk=doctor_id).first()

        individual_tests, panels, all_tests = resolve_tests(test_ids, panel_ids)
        if not all_tests:
            raise NoTestsSelected()

        total = calculate_total(individual_tests, panels)

        deduct_for_tests(all_tests)

        order = LabOrder(
            patient=patient,
            referring_doctor=doctor,
            created_by=created_by,
            status=OrderStatus.PENDING,
            total_amount=total,
            discount_amount=discount,
            paid_amount=cash_paid,
        )
        order.save()

        if panels:
            order.panels.set(panels)

        LabResult.objects.bulk_create([
            LabResult(
                order=order,
                test=test,
                result_value="",
                status=ResultStatus.PENDING,
            )
            for test in all_tests
        ])

        rate = doctor.commission_percentage if doctor is not None else None
        if rate is not None and rate > 0:
            commission = CommissionLedgerRow(
                order=order,
                doctor=doctor,
                total_bill_amount=total,
                commission_percentage=rate,
                status=CommissionStatus.UNPAID,
            )
            commission.calculate_amount()
            commission.save()

    logger.info(
        f"Created order #{order.pk} for patient {patient.pk}: "
        f"{len(all_tests)} tests, total {total}, balance {order.balance_due}"
    )
    return order
