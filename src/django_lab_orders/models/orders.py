"""Order aggregate models.

- LabOrder: patient order with billing totals and delivery state
- LabResult: one result slot per ordered test, cascade-deleted with the order
- LabResultEditAudit: immutable trail of post-completion corrections
"""

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.utils import timezone

from .base import TimeStampedModel


class OrderStatus(models.TextChoices):
    """Lifecycle status of an order."""

    PENDING = "PENDING", "Pending"
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    COMPLETED = "COMPLETED", "Completed"


class ResultStatus(models.TextChoices):
    """Status of a single result slot."""

    PENDING = "PENDING", "Pending"
    COMPLETED = "COMPLETED", "Completed"


def _money(value) -> Decimal:
    return value if value is not None else Decimal("0")


class LabOrder(TimeStampedModel):
    """
    Lab order with its billing totals.

    balance_due is derived (total - discount - paid) and recomputed on
    every save, including saves restricted with update_fields.

    Cancellation deletes the order outright; there is no CANCELLED status.
    """

    patient = models.ForeignKey(
        "django_lab_orders.Patient",
        on_delete=models.PROTECT,
        related_name="orders",
    )
    referring_doctor = models.ForeignKey(
        "django_lab_orders.Doctor",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    panels = models.ManyToManyField(
        "django_lab_orders.Panel",
        related_name="orders",
        blank=True,
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    order_date = models.DateTimeField(default=timezone.now)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
    )

    # === Billing ===
    total_amount = models.DecimalField(max_digits=19, decimal_places=4, default=Decimal("0"))
    discount_amount = models.DecimalField(max_digits=19, decimal_places=4, default=Decimal("0"))
    paid_amount = models.DecimalField(max_digits=19, decimal_places=4, default=Decimal("0"))
    balance_due = models.DecimalField(max_digits=19, decimal_places=4, default=Decimal("0"))

    # === Delivery ===
    is_report_delivered = models.BooleanField(default=False)
    delivery_date = models.DateTimeField(null=True, blank=True)

    # === Lab activity ===
    lab_started_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="First time lab staff recorded a result; blocks cancellation",
    )

    # === Post-completion edits ===
    results_edited = models.BooleanField(default=False)
    results_edited_at = models.DateTimeField(null=True, blank=True)
    results_edited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    results_edit_reason = models.TextField(blank=True, default="")

    # === Reprints ===
    reprint_required = models.BooleanField(default=False)
    reprint_count = models.PositiveIntegerField(default=0)
    last_reprint_at = models.DateTimeField(null=True, blank=True)
    last_reprint_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        ordering = ["-order_date", "-id"]
        indexes = [
            models.Index(fields=["status", "order_date"], name="lab_order_status_date_idx"),
        ]

    def __str__(self):
        return f"Order #{self.pk} ({self.status})"

    def calculate_balance(self) -> Decimal:
        """Recompute balance_due from the billing fields."""
        self.total_amount = _money(self.total_amount)
        self.discount_amount = _money(self.discount_amount)
        self.paid_amount = _money(self.paid_amount)
        self.balance_due = self.total_amount - self.discount_amount - self.paid_amount
        return self.balance_due

    def save(self, *args, **kwargs):
        self.calculate_balance()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {
                "total_amount",
                "discount_amount",
                "paid_amount",
                "balance_due",
                "updated_at",
            }
        super().save(*args, **kwargs)

    @property
    def pending_test_count(self) -> int:
        """Number of result slots still waiting for a value."""
        return self.results.filter(status=ResultStatus.PENDING).count()


class LabResult(TimeStampedModel):
    """Result slot for one test of an order."""

    order = models.ForeignKey(
        LabOrder,
        on_delete=models.CASCADE,
        related_name="results",
    )
    test = models.ForeignKey(
        "django_lab_orders.TestDefinition",
        on_delete=models.PROTECT,
        related_name="results",
    )
    result_value = models.TextField(
        blank=True,
        default="",
        help_text="Free text; numeric values are checked against reference ranges",
    )
    is_abnormal = models.BooleanField(default=False)
    remarks = models.CharField(
        max_length=20,
        blank=True,
        default="",
        help_text="LOW / HIGH / Normal, blank when no range applies",
    )
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    performed_at = models.DateTimeField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=ResultStatus.choices,
        default=ResultStatus.PENDING,
    )

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["order", "test"],
                name="lab_result_unique_order_test",
            ),
        ]

    def __str__(self):
        return f"Result #{self.pk} of order #{self.order_id}: {self.result_value or '-'}"

    @property
    def has_value(self) -> bool:
        return bool((self.result_value or "").strip())

    @property
    def has_activity(self) -> bool:
        """True once anyone has touched this result."""
        return (
            self.has_value
            or self.performed_by_id is not None
            or self.performed_at is not None
        )


class LabResultEditAudit(models.Model):
    """
    Immutable record of one result change made after completion.

    Rows are written by save_edited_results() only.
    """

    order = models.ForeignKey(
        LabOrder,
        on_delete=models.CASCADE,
        related_name="edit_audits",
    )
    result = models.ForeignKey(
        LabResult,
        on_delete=models.CASCADE,
        related_name="edit_audits",
    )
    test_name = models.CharField(max_length=200)
    previous_value = models.TextField(blank=True, default="")
    new_value = models.TextField(blank=True, default="")
    previous_remarks = models.CharField(max_length=20, blank=True, default="")
    new_remarks = models.CharField(max_length=20, blank=True, default="")
    previous_abnormal = models.BooleanField(default=False)
    new_abnormal = models.BooleanField(default=False)
    edited_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    edited_at = models.DateTimeField(default=timezone.now)
    reason = models.TextField(blank=True, default="")
    report_delivered_at_edit = models.BooleanField(default=False)

    class Meta:
        ordering = ["-edited_at", "-id"]

    def __str__(self):
        return f"Edit of result #{self.result_id}: {self.previous_value!r} -> {self.new_value!r}"
