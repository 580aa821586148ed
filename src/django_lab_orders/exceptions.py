"""Exceptions for django-lab-orders.

Every error carries a ``category`` so callers can tell apart:
- ``input``: fix the request and retry (validation, stock)
- ``not_found``: a referenced record is missing
- ``not_permitted``: state or authorization forbids the action
- ``integrity``: stored data is inconsistent, treat as an operational alarm
"""


class LabOrderError(Exception):
    """Base exception for lab order errors."""

    category = "input"


# =============================================================================
# Validation
# =============================================================================

class ValidationFailure(LabOrderError):
    """Raised when caller input is invalid."""

    category = "input"


class NoTestsSelected(ValidationFailure):
    """Raised when an order would contain no tests."""

    def __init__(self):
        super().__init__("At least one test must be selected to create an order.")


class InvalidAmount(ValidationFailure):
    """Raised when a money amount is negative or otherwise unusable."""

    def __init__(self, field: str, amount):
        self.field = field
        self.amount = amount
        super().__init__(f"Invalid {field}: {amount}")


class InvalidApprovalKey(ValidationFailure):
    """Raised when a new cancellation approval key is too short."""

    def __init__(self, min_length: int):
        self.min_length = min_length
        super().__init__(
            f"Cancellation key must be at least {min_length} characters."
        )


class InsufficientStock(LabOrderError):
    """Raised when an inventory item cannot cover a test's recipe."""

    category = "input"

    def __init__(self, test_name: str, item_name: str, required, available, unit: str = ""):
        self.test_name = test_name
        self.item_name = item_name
        self.required = required
        self.available = available
        self.unit = unit
        shown_available = "0" if available is None else str(available)
        super().__init__(
            f"Out of stock: test '{test_name}' requires {required} {unit} of "
            f"'{item_name}', but only {shown_available} is available."
        )


# =============================================================================
# Not found
# =============================================================================

class NotFound(LabOrderError):
    """Raised when a required record does not exist."""

    category = "not_found"
    entity = "Record"

    def __init__(self, pk):
        self.pk = pk
        super().__init__(f"{self.entity} not found: {pk}")


class PatientNotFound(NotFound):
    entity = "Patient"


class OrderNotFound(NotFound):
    entity = "Order"


class ResultNotFound(NotFound):
    entity = "Result"


class CommissionNotFound(NotFound):
    """Raised when an order has no doctor commission row."""

    entity = "Commission for order"


# =============================================================================
# State transitions
# =============================================================================

class IllegalStateTransition(LabOrderError):
    """Raised when the order's state forbids the requested action."""

    category = "not_permitted"


class OrderAlreadyDelivered(IllegalStateTransition):
    """Raised when saving results on an order whose report was delivered."""

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(
            f"Cannot modify results of order #{order_id} after report delivery."
        )


class OrderNotCompleted(IllegalStateTransition):
    """Raised when editing results of an order that is not completed."""

    def __init__(self, order_id, status: str):
        self.order_id = order_id
        self.status = status
        super().__init__(
            f"Only completed orders can be edited; order #{order_id} is {status}."
        )


class EditReasonRequired(IllegalStateTransition):
    """Raised when editing a delivered order without a reason."""

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(
            f"Edit reason is required after report delivery (order #{order_id})."
        )


class OrderNotCancellable(IllegalStateTransition):
    """Raised when lab work has started or the order left PENDING."""

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(
            f"Order #{order_id} cannot be cancelled because lab work has already started."
        )


class CommissionAlreadyPaid(IllegalStateTransition):
    """Raised when the order's doctor commission was already paid out."""

    def __init__(self, order_id):
        self.order_id = order_id
        super().__init__(
            f"Order #{order_id} cannot be cancelled because linked doctor "
            "commission has already been paid."
        )


# =============================================================================
# Authorization
# =============================================================================

class AuthorizationFailure(LabOrderError):
    """Raised when the caller is not authorized for the action."""

    category = "not_permitted"


class CancellationNotAuthorized(AuthorizationFailure):
    """Raised when the cancellation approval key does not verify."""

    def __init__(self):
        super().__init__("Cancellation approver authorization is required.")


# =============================================================================
# Data integrity
# =============================================================================

class DataIntegrityError(LabOrderError):
    """Raised when stored data violates a cross-entity invariant."""

    category = "integrity"


class InventoryItemMissing(DataIntegrityError):
    """Raised when a recipe references an inventory item that no longer exists."""

    def __init__(self, item_id):
        self.item_id = item_id
        super().__init__(f"Inventory item missing while rolling back: {item_id}")
