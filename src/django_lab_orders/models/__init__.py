"""django-lab-orders models.

Re-exports all models for convenient importing:
    from django_lab_orders.models import LabOrder, LabResult, InventoryItem
"""

from .catalog import (
    ConsumptionRecipe,
    Department,
    Doctor,
    Gender,
    Panel,
    Patient,
    ReferenceRange,
    TestDefinition,
)
from .finance import (
    CommissionLedgerRow,
    CommissionStatus,
    Payment,
    PaymentMethod,
    PaymentType,
)
from .inventory import InventoryItem
from .orders import (
    LabOrder,
    LabResult,
    LabResultEditAudit,
    OrderStatus,
    ResultStatus,
)
from .settings import LabOrderSettings

__all__ = [
    "CommissionLedgerRow",
    "CommissionStatus",
    "ConsumptionRecipe",
    "Department",
    "Doctor",
    "Gender",
    "InventoryItem",
    "LabOrder",
    "LabOrderSettings",
    "LabResult",
    "LabResultEditAudit",
    "OrderStatus",
    "Panel",
    "Patient",
    "Payment",
    "PaymentMethod",
    "PaymentType",
    "ReferenceRange",
    "ResultStatus",
    "TestDefinition",
]
