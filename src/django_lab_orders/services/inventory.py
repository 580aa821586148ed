"""Inventory stock movements driven by lab orders.

Both operations lock the affected InventoryItem rows with
select_for_update(), in primary key order, before reading stock. Callers
must run them inside the transaction that owns the order change.
"""

import logging
from collections import defaultdict
from decimal import Decimal
from typing import Dict, Iterable, List

from django.db import transaction

from ..exceptions import InsufficientStock, InventoryItemMissing
from ..models import ConsumptionRecipe, InventoryItem, TestDefinition

logger = logging.getLogger(__name__)


def _recipes_by_test(test_ids: Iterable[int]) -> Dict[int, List[ConsumptionRecipe]]:
    recipes = defaultdict(list)
    for recipe in ConsumptionRecipe.objects.filter(test_id__in=list(test_ids)).order_by("id"):
        recipes[recipe.test_id].append(recipe)
    return recipes


def _lock_items(item_ids: Iterable[int]) -> Dict[int, InventoryItem]:
    """Lock and load inventory rows, in pk order to avoid deadlocks."""
    items = InventoryItem.objects.select_for_update().filter(pk__in=list(item_ids)).order_by("pk")
    return {item.pk: item for item in items}


@transaction.atomic
def deduct_for_tests(tests: List[TestDefinition]) -> Dict[int, Decimal]:
    """
    Deduct recipe quantities for every test, all or nothing.

    Each ingredient is checked against the stock left after the tests
    before it, so two tests sharing an item are both covered.

    Args:
        tests: Ordered, de-duplicated tests of the new order

    Returns:
        Mapping of inventory item id to total quantity deducted

    Raises:
        InsufficientStock: If any item's stock is unknown or too low
    """
    recipes = _recipes_by_test(test.pk for test in tests)
    item_ids = {recipe.item_id for rows in recipes.values() for recipe in rows}
    items = _lock_items(item_ids)

    deducted = defaultdict(lambda: Decimal("0"))
    for test in tests:
        for recipe in recipes.get(test.pk, []):
            item = items[recipe.item_id]
            needed = recipe.quantity
            available = item.current_stock
            if available is None or needed is None or available < needed:
                logger.warning(
                    f"Insufficient stock for test '{test.name}': needs {needed} of "
                    f"'{item.name}', {available} available"
                )
                raise InsufficientStock(
                    test_name=test.name,
                    item_name=item.name,
                    required=needed,
                    available=available,
                    unit=item.unit,
                )
            item.current_stock = available - needed
            deducted[item.pk] += needed

    for item_id in deducted:
        items[item_id].save(update_fields=["current_stock", "updated_at"])

    return dict(deducted)


@transaction.atomic
def restock_for_tests(tests: List[TestDefinition]) -> Dict[int, Decimal]:
    """
    Return recipe quantities of the given tests to stock.

    Quantities are summed per item across all tests before any row is
    touched. Non-positive recipe quantities are skipped.

    Returns:
        Mapping of inventory item id to quantity restocked

    Raises:
        InventoryItemMissing: If a recipe points at a vanished item
    """
    recipes = _recipes_by_test(test.pk for test in tests)

    restock = defaultdict(lambda: Decimal("0"))
    for test in tests:
        for recipe in recipes.get(test.pk, []):
            quantity = recipe.quantity or Decimal("0")
            if quantity <= 0:
                continue
            restock[recipe.item_id] += quantity

    items = _lock_items(restock.keys())
    for item_id in sorted(restock):
        item = items.get(item_id)
        if item is None:
            logger.error(f"Inventory item {item_id} missing while restocking; recipe data is inconsistent")
            raise InventoryItemMissing(item_id)
        item.current_stock = (item.current_stock or Decimal("0")) + restock[item_id]
        item.save(update_fields=["current_stock", "updated_at"])

    return dict(restock)
