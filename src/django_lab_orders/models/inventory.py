"""Inventory item model.

Stock is mutated by this app only through services.inventory:
deducted on order creation, restocked on cancellation.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q

from .base import TimeStampedModel


class InventoryItem(TimeStampedModel):
    """
    Consumable stock item (tubes, reagents, strips).

    current_stock is null when the stock level is unknown; an unknown level
    never satisfies a recipe.
    """

    name = models.CharField(max_length=200, unique=True)
    current_stock = models.DecimalField(
        max_digits=19,
        decimal_places=4,
        null=True,
        blank=True,
        default=Decimal("0"),
    )
    unit = models.CharField(
        max_length=30,
        blank=True,
        default="",
        help_text="pcs, ml, strips, ...",
    )
    min_threshold = models.DecimalField(
        max_digits=19,
        decimal_places=4,
        default=Decimal("0"),
        help_text="Low stock alert level",
    )
    average_cost = models.DecimalField(
        max_digits=19,
        decimal_places=4,
        default=Decimal("0"),
        help_text="Weighted-average purchase cost per unit",
    )
    active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=Q(current_stock__isnull=True) | Q(current_stock__gte=0),
                name="lab_inventory_stock_non_negative",
            ),
        ]

    def __str__(self):
        return f"{self.name} ({self.current_stock} {self.unit})"

    @property
    def is_low_stock(self) -> bool:
        """True when stock is unknown or at/below the alert threshold."""
        if self.current_stock is None:
            return True
        return self.current_stock <= self.min_threshold
