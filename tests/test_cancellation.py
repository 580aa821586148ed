"""Tests for order cancellation."""

from decimal import Decimal

import pytest

from django_lab_orders.exceptions import (
    CancellationNotAuthorized,
    CommissionAlreadyPaid,
    InventoryItemMissing,
    OrderNotCancellable,
    OrderNotFound,
)
from django_lab_orders.models import (
    CommissionLedgerRow,
    LabOrder,
    LabResult,
    OrderStatus,
    Payment,
    PaymentMethod,
    PaymentType,
)
from django_lab_orders.services import (
    can_cancel,
    cancel_order,
    mark_commission_paid,
    mark_commission_unpaid,
    mark_under_lab_review,
    release_lab_review,
    save_order_results,
)


@pytest.fixture
def paid_order(make_order, test_a, test_b, doctor):
    return make_order(
        test_ids=[test_a.pk, test_b.pk],
        doctor_id=doctor.pk,
        cash_paid=Decimal("500"),
    )


def stock(item):
    item.refresh_from_db()
    return item.current_stock


@pytest.mark.django_db
class TestCanCancel:
    """Tests for can_cancel."""

    def test_fresh_order(self, paid_order):
        assert can_cancel(paid_order) is True
        assert can_cancel(paid_order.pk) is True

    def test_none_and_unknown(self):
        assert can_cancel(None) is False
        assert can_cancel(9999) is False

    def test_in_progress_order(self, paid_order):
        mark_under_lab_review(paid_order.pk)
        assert can_cancel(paid_order.pk) is False

    def test_result_value_blocks(self, paid_order):
        LabResult.objects.filter(order=paid_order).update(result_value="14")
        assert can_cancel(paid_order.pk) is False

    def test_result_timestamp_blocks(self, paid_order):
        from django.utils import timezone

        LabResult.objects.filter(order=paid_order).update(performed_at=timezone.now())
        assert can_cancel(paid_order.pk) is False


@pytest.mark.django_db
class TestLabReview:
    """Tests for mark_under_lab_review and release_lab_review."""

    def test_review_round_trip(self, paid_order):
        assert mark_under_lab_review(paid_order.pk).status == OrderStatus.IN_PROGRESS
        assert release_lab_review(paid_order.pk).status == OrderStatus.PENDING

    def test_release_after_activity_keeps_status(self, paid_order, test_a):
        mark_under_lab_review(paid_order.pk)
        result = paid_order.results.get(test=test_a)
        save_order_results(paid_order.pk, {result.pk: "14"})
        assert release_lab_review(paid_order.pk).status == OrderStatus.IN_PROGRESS

    def test_review_of_completed_order_is_noop(self, make_order, test_a):
        order = make_order(test_ids=[test_a.pk])
        save_order_results(order.pk, {order.results.get().pk: "14"})
        assert mark_under_lab_review(order.pk).status == OrderStatus.COMPLETED


@pytest.mark.django_db
class TestCancelOrder:
    """Tests for cancel_order."""

    def test_cancel_restores_everything(self, paid_order, approval_key, approval_store, tube, reagent, user):
        assert stock(tube) == Decimal("4")
        assert stock(reagent) == Decimal("8")
        order_id = paid_order.pk

        outcome = cancel_order(order_id, approval_key, key_store=approval_store, cancelled_by=user)

        assert outcome.order_id == order_id
        assert outcome.refund_amount == Decimal("500")
        assert stock(tube) == Decimal("5")
        assert stock(reagent) == Decimal("10")
        assert not LabOrder.objects.filter(pk=order_id).exists()
        assert not LabResult.objects.filter(order_id=order_id).exists()
        assert not CommissionLedgerRow.objects.exists()

        refund = Payment.objects.get()
        assert refund.payment_type == PaymentType.EXPENSE
        assert refund.category == Payment.CATEGORY_REFUND
        assert refund.amount == Decimal("500")
        assert refund.method == PaymentMethod.CASH
        assert refund.description == f"Refund for cancelled order #{order_id}"
        assert refund.recorded_by == user

    def test_unpaid_order_posts_no_refund(self, make_order, test_a, approval_key, approval_store):
        order = make_order(test_ids=[test_a.pk])
        outcome = cancel_order(order.pk, approval_key, key_store=approval_store)
        assert outcome.refund_amount == Decimal("0")
        assert Payment.objects.count() == 0

    def test_refund_method_setting(self, paid_order, approval_key, approval_store, settings):
        settings.LAB_ORDERS_REFUND_METHOD = PaymentMethod.BANK_TRANSFER
        cancel_order(paid_order.pk, approval_key, key_store=approval_store)
        assert Payment.objects.get().method == PaymentMethod.BANK_TRANSFER

    @pytest.mark.parametrize("key", [None, "", "wrong-key"])
    def test_wrong_key_changes_nothing(self, paid_order, approval_store, tube, key):
        with pytest.raises(CancellationNotAuthorized) as exc_info:
            cancel_order(paid_order.pk, key, key_store=approval_store)

        assert exc_info.value.category == "not_permitted"
        assert LabOrder.objects.filter(pk=paid_order.pk).exists()
        assert stock(tube) == Decimal("4")
        assert Payment.objects.count() == 0

    def test_key_checked_before_order_lookup(self, approval_store):
        with pytest.raises(CancellationNotAuthorized):
            cancel_order(9999, "wrong-key", key_store=approval_store)

    def test_unknown_order(self, approval_key, approval_store):
        with pytest.raises(OrderNotFound):
            cancel_order(9999, approval_key, key_store=approval_store)

    def test_unconfigured_key_rejects(self, paid_order, approval_key):
        from django_lab_orders.approval import InMemoryApprovalKeyStore

        with pytest.raises(CancellationNotAuthorized):
            cancel_order(paid_order.pk, approval_key, key_store=InMemoryApprovalKeyStore())

    def test_lab_activity_changes_nothing(self, paid_order, approval_key, approval_store, test_a, tube):
        LabResult.objects.filter(order=paid_order, test=test_a).update(result_value="14")

        with pytest.raises(OrderNotCancellable):
            cancel_order(paid_order.pk, approval_key, key_store=approval_store)

        assert LabOrder.objects.filter(pk=paid_order.pk).exists()
        assert CommissionLedgerRow.objects.filter(order=paid_order).exists()
        assert stock(tube) == Decimal("4")
        assert Payment.objects.count() == 0

    def test_paid_commission_changes_nothing(self, paid_order, approval_key, approval_store, tube, reagent):
        mark_commission_paid(paid_order.pk)

        with pytest.raises(CommissionAlreadyPaid):
            cancel_order(paid_order.pk, approval_key, key_store=approval_store)

        assert LabOrder.objects.filter(pk=paid_order.pk).exists()
        assert CommissionLedgerRow.objects.filter(order=paid_order).exists()
        assert stock(tube) == Decimal("4")
        assert stock(reagent) == Decimal("8")
        assert Payment.objects.count() == 0

    def test_reversed_payout_allows_cancellation(self, paid_order, approval_key, approval_store):
        mark_commission_paid(paid_order.pk)
        mark_commission_unpaid(paid_order.pk)

        outcome = cancel_order(paid_order.pk, approval_key, key_store=approval_store)

        assert outcome.refund_amount == Decimal("500")
        assert not CommissionLedgerRow.objects.exists()

    def test_missing_inventory_item_changes_nothing(self, paid_order, approval_key, approval_store, tube, reagent, monkeypatch):
        from django_lab_orders.services import inventory

        real_lock_items = inventory._lock_items

        def lock_without_reagent(item_ids):
            items = real_lock_items(item_ids)
            items.pop(reagent.pk, None)
            return items

        monkeypatch.setattr(inventory, "_lock_items", lock_without_reagent)

        with pytest.raises(InventoryItemMissing) as exc_info:
            cancel_order(paid_order.pk, approval_key, key_store=approval_store)

        assert exc_info.value.item_id == reagent.pk
        assert exc_info.value.category == "integrity"
        assert LabOrder.objects.filter(pk=paid_order.pk).exists()
        assert stock(tube) == Decimal("4")
