"""Money-side models: doctor commission ledger and payments."""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone


class CommissionStatus(models.TextChoices):
    """Payout status of a commission row."""

    UNPAID = "UNPAID", "Unpaid"
    PAID = "PAID", "Paid"


class CommissionLedgerRow(models.Model):
    """
    Commission owed to a referring doctor for one order.

    Created together with the order when the doctor has a positive rate.
    Protects the order from deletion; cancellation removes an unpaid row
    first and refuses to cancel once any commission was paid out.
    """

    order = models.OneToOneField(
        "django_lab_orders.LabOrder",
        on_delete=models.PROTECT,
        related_name="commission",
    )
    doctor = models.ForeignKey(
        "django_lab_orders.Doctor",
        on_delete=models.PROTECT,
        related_name="commission_rows",
    )
    total_bill_amount = models.DecimalField(
        max_digits=19,
        decimal_places=4,
        help_text="Order total at the time the order was created",
    )
    commission_percentage = models.DecimalField(
        max_digits=7,
        decimal_places=4,
        help_text="Doctor's rate at the time the order was created",
    )
    calculated_amount = models.DecimalField(
        max_digits=19,
        decimal_places=4,
        default=Decimal("0"),
    )
    paid_amount = models.DecimalField(
        max_digits=19,
        decimal_places=4,
        default=Decimal("0"),
    )
    status = models.CharField(
        max_length=10,
        choices=CommissionStatus.choices,
        default=CommissionStatus.UNPAID,
        db_index=True,
    )
    transaction_date = models.DateField(default=timezone.localdate)
    payment_date = models.DateField(null=True, blank=True)

    class Meta:
        ordering = ["-transaction_date", "-id"]

    def __str__(self):
        return f"Commission for order #{self.order_id}: {self.calculated_amount} ({self.status})"

    def calculate_amount(self) -> Decimal:
        """Commission due: rate percent of the snapshotted bill."""
        self.calculated_amount = (
            self.total_bill_amount * self.commission_percentage / Decimal("100")
        ).quantize(Decimal("0.0001"))
        return self.calculated_amount

    @property
    def is_paid(self) -> bool:
        """True once the row is marked PAID or any amount went out."""
        return self.status == CommissionStatus.PAID or (self.paid_amount or 0) > 0


class PaymentType(models.TextChoices):
    """Direction of a payment."""

    INCOME = "INCOME", "Income"
    EXPENSE = "EXPENSE", "Expense"
    ADJUSTMENT = "ADJUSTMENT", "Adjustment"


class PaymentMethod(models.TextChoices):
    """How money moved."""

    CASH = "CASH", "Cash"
    BANK_TRANSFER = "BANK_TRANSFER", "Bank transfer"
    CHEQUE = "CHEQUE", "Cheque"


class Payment(models.Model):
    """Income or expense entry; cancellations post EXPENSE/REFUND rows."""

    CATEGORY_REFUND = "REFUND"

    payment_type = models.CharField(
        max_length=20,
        choices=PaymentType.choices,
        db_index=True,
    )
    category = models.CharField(
        max_length=50,
        help_text="RENT, SALARY, UTILITIES, MISC, REFUND, ...",
    )
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=19, decimal_places=4)
    method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )
    reference_number = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Bank transaction id or cheque number",
    )
    remarks = models.TextField(blank=True, default="")
    transaction_date = models.DateTimeField(default=timezone.now)
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        ordering = ["-transaction_date", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="lab_payment_amount_positive",
            ),
        ]

    def __str__(self):
        return f"{self.payment_type}/{self.category}: {self.amount}"
