"""Tests for doctor commission payout."""

from decimal import Decimal

import pytest
from django.utils import timezone

from django_lab_orders.exceptions import CommissionNotFound
from django_lab_orders.models import CommissionLedgerRow, CommissionStatus
from django_lab_orders.services import mark_commission_paid, mark_commission_unpaid


@pytest.mark.django_db
class TestCommissionPayout:
    """Tests for mark_commission_paid and mark_commission_unpaid."""

    @pytest.fixture
    def order(self, make_order, test_a, doctor):
        return make_order(test_ids=[test_a.pk], doctor_id=doctor.pk)

    def test_mark_paid(self, order):
        commission = mark_commission_paid(order.pk)

        commission.refresh_from_db()
        assert commission.status == CommissionStatus.PAID
        assert commission.paid_amount == Decimal("65")
        assert commission.payment_date == timezone.localdate()
        assert commission.is_paid is True

    def test_mark_paid_is_idempotent(self, order):
        mark_commission_paid(order.pk)
        CommissionLedgerRow.objects.filter(order=order).update(payment_date=None)

        commission = mark_commission_paid(order.pk)

        commission.refresh_from_db()
        assert commission.payment_date is None
        assert commission.paid_amount == Decimal("65")

    def test_mark_unpaid(self, order):
        mark_commission_paid(order.pk)
        commission = mark_commission_unpaid(order.pk)

        commission.refresh_from_db()
        assert commission.status == CommissionStatus.UNPAID
        assert commission.paid_amount == Decimal("0")
        assert commission.payment_date is None
        assert commission.is_paid is False

    def test_partial_payout_counts_as_paid(self, order):
        CommissionLedgerRow.objects.filter(order=order).update(paid_amount=Decimal("10"))
        assert CommissionLedgerRow.objects.get(order=order).is_paid is True

    def test_order_without_commission(self, make_order, test_a):
        order = make_order(test_ids=[test_a.pk])
        with pytest.raises(CommissionNotFound) as exc_info:
            mark_commission_paid(order.pk)
        assert exc_info.value.category == "not_found"

        with pytest.raises(CommissionNotFound):
            mark_commission_unpaid(order.pk)
