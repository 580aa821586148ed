"""Pytest configuration for django-lab-orders tests."""

from decimal import Decimal

import pytest

from django_lab_orders.approval import CancellationApprovalKey, InMemoryApprovalKeyStore
from django_lab_orders.models import (
    ConsumptionRecipe,
    Department,
    Doctor,
    InventoryItem,
    Panel,
    Patient,
    ReferenceRange,
    TestDefinition,
)
from django_lab_orders.services import create_order

APPROVAL_KEY = "approve-123"


@pytest.fixture
def user(db, django_user_model):
    """Create a test user."""
    return django_user_model.objects.create_user(
        username="labtech",
        password="testpass123",
    )


@pytest.fixture
def department(db):
    return Department.objects.create(name="Hematology")


@pytest.fixture
def patient(db):
    """Adult male patient."""
    return Patient.objects.create(mrn="MRN-0001", full_name="John Doe", age=30, gender="Male")


@pytest.fixture
def doctor(db):
    """Referring doctor earning 10% commission."""
    return Doctor.objects.create(name="Dr. Rahman", commission_percentage=Decimal("10"))


@pytest.fixture
def tube(db):
    return InventoryItem.objects.create(name="EDTA tube", current_stock=Decimal("5"), unit="pcs")


@pytest.fixture
def reagent(db):
    return InventoryItem.objects.create(name="Glucose reagent", current_stock=Decimal("10"), unit="ml")


@pytest.fixture
def test_a(department, tube):
    """Hemoglobin, 650, one tube per test, gendered ranges."""
    test = TestDefinition.objects.create(
        name="Hemoglobin",
        short_code="HB",
        department=department,
        unit="g/dL",
        price=Decimal("650"),
    )
    ConsumptionRecipe.objects.create(test=test, item=tube, quantity=Decimal("1"))
    ReferenceRange.objects.create(test=test, gender="Male", min_val=Decimal("13.5"), max_val=Decimal("17.5"))
    ReferenceRange.objects.create(test=test, gender="Female", min_val=Decimal("12"), max_val=Decimal("15.5"))
    return test


@pytest.fixture
def test_b(department, reagent):
    """Blood glucose, 300, two ml of reagent, default bounds only."""
    test = TestDefinition.objects.create(
        name="Blood glucose",
        short_code="GLU",
        department=department,
        unit="mmol/L",
        price=Decimal("300"),
        min_range=Decimal("3.9"),
        max_range=Decimal("7.8"),
    )
    ConsumptionRecipe.objects.create(test=test, item=reagent, quantity=Decimal("2"))
    return test


@pytest.fixture
def panel_p(department, test_a, test_b):
    """Flat priced panel covering both tests."""
    panel = Panel.objects.create(name="Basic screen", price=Decimal("200"), department=department)
    panel.tests.set([test_a, test_b])
    return panel


@pytest.fixture
def approval_key():
    """Raw cancellation approval key configured in approval_store."""
    return APPROVAL_KEY


@pytest.fixture
def approval_store():
    """In-memory approval key store with APPROVAL_KEY configured."""
    store = InMemoryApprovalKeyStore()
    CancellationApprovalKey(store=store).set_key(APPROVAL_KEY)
    return store


@pytest.fixture
def make_order(patient):
    """Factory creating orders for the default patient."""

    def _make(**kwargs):
        kwargs.setdefault("patient_id", patient.pk)
        return create_order(**kwargs)

    return _make
