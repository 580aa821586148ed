"""Master data read by the order engine.

Patients, doctors and the test catalog are maintained by the host project.
The lab order services only read them:
- TestDefinition + ReferenceRange: what is measured and what is normal
- Panel: a bundle of tests sold at one flat price
- ConsumptionRecipe: inventory each test consumes when ordered
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q

from .base import TimeStampedModel


class Gender(models.TextChoices):
    """Gender scope of a reference range."""

    MALE = "Male", "Male"
    FEMALE = "Female", "Female"
    BOTH = "Both", "Both"


class Patient(TimeStampedModel):
    """Patient the order is drawn for."""

    mrn = models.CharField(
        max_length=50,
        unique=True,
        help_text="Medical record number",
    )
    full_name = models.CharField(max_length=200)
    age = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Age in whole years, used to select reference ranges",
    )
    gender = models.CharField(
        max_length=20,
        blank=True,
        default="",
        help_text="Male / Female, used to select reference ranges",
    )
    mobile_number = models.CharField(max_length=30, blank=True, default="")

    class Meta:
        ordering = ["full_name"]

    def __str__(self):
        return f"{self.full_name} ({self.mrn})"


class Doctor(TimeStampedModel):
    """Referring doctor, optionally earning commission on orders."""

    name = models.CharField(max_length=200)
    clinic_name = models.CharField(max_length=200, blank=True, default="")
    mobile = models.CharField(max_length=30, blank=True, default="")
    commission_percentage = models.DecimalField(
        max_digits=7,
        decimal_places=4,
        default=Decimal("0"),
        help_text="Commission rate in percent of the order total",
    )
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class Department(models.Model):
    """Lab department owning tests (Hematology, Biochemistry, ...)."""

    name = models.CharField(max_length=100, unique=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class TestDefinition(TimeStampedModel):
    """An orderable lab test."""

    name = models.CharField(max_length=200)
    short_code = models.CharField(max_length=30, blank=True, default="")
    department = models.ForeignKey(
        Department,
        on_delete=models.PROTECT,
        related_name="tests",
    )
    unit = models.CharField(max_length=30, blank=True, default="")
    min_range = models.DecimalField(
        max_digits=19,
        decimal_places=4,
        null=True,
        blank=True,
        help_text="Default lower bound when the test has no reference ranges",
    )
    max_range = models.DecimalField(
        max_digits=19,
        decimal_places=4,
        null=True,
        blank=True,
        help_text="Default upper bound when the test has no reference ranges",
    )
    price = models.DecimalField(
        max_digits=19,
        decimal_places=4,
        null=True,
        blank=True,
        help_text="Individual price; null until the test is priced",
    )
    active = models.BooleanField(default=True)

    # Not collected by pytest despite the Test* name
    __test__ = False

    class Meta:
        ordering = ["name"]

    def __str__(self):
        if self.short_code:
            return f"{self.name} ({self.short_code})"
        return self.name


class ReferenceRange(models.Model):
    """Age and gender scoped normal band for a test."""

    test = models.ForeignKey(
        TestDefinition,
        on_delete=models.CASCADE,
        related_name="ranges",
    )
    gender = models.CharField(
        max_length=10,
        choices=Gender.choices,
        default=Gender.BOTH,
    )
    min_age = models.PositiveIntegerField(null=True, blank=True)
    max_age = models.PositiveIntegerField(null=True, blank=True)
    min_val = models.DecimalField(max_digits=19, decimal_places=4, null=True, blank=True)
    max_val = models.DecimalField(max_digits=19, decimal_places=4, null=True, blank=True)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.test_id} {self.gender} age {self.min_age}-{self.max_age}: {self.min_val}..{self.max_val}"


class Panel(TimeStampedModel):
    """Named bundle of tests, optionally sold at one flat price."""

    name = models.CharField(max_length=200)
    price = models.DecimalField(
        max_digits=19,
        decimal_places=4,
        null=True,
        blank=True,
        help_text="Flat price; supersedes member test prices when set",
    )
    department = models.ForeignKey(
        Department,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="panels",
    )
    tests = models.ManyToManyField(TestDefinition, related_name="panels", blank=True)
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class ConsumptionRecipe(models.Model):
    """Quantity of an inventory item consumed each time a test is ordered."""

    test = models.ForeignKey(
        TestDefinition,
        on_delete=models.CASCADE,
        related_name="recipe",
    )
    item = models.ForeignKey(
        "django_lab_orders.InventoryItem",
        on_delete=models.PROTECT,
        related_name="recipes",
        help_text="Inventory rows cannot be deleted while a recipe references them",
    )
    quantity = models.DecimalField(max_digits=19, decimal_places=4)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(
                fields=["test", "item"],
                name="lab_recipe_unique_test_item",
            ),
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name="lab_recipe_quantity_positive",
            ),
        ]

    def __str__(self):
        return f"{self.test_id} uses {self.quantity} of {self.item_id}"
