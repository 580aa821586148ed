"""Payment recording."""

from decimal import Decimal

from ..exceptions import InvalidAmount
from ..models import Payment, PaymentMethod


def record_payment(
    payment_type: str,
    category: str,
    description: str,
    amount,
    method: str = PaymentMethod.CASH,
    remarks: str = "",
    reference_number: str = "",
    recorded_by=None,
) -> Payment:
    """
    Record an income, expense or adjustment.

    Args:
        payment_type: PaymentType value (INCOME, EXPENSE, ADJUSTMENT)
        category: Free-text category (e.g., 'REFUND', 'RENT')
        description: Human-readable description
        amount: Positive amount
        method: PaymentMethod value
        remarks: Optional remarks
        reference_number: Bank transaction id or cheque number
        recorded_by: Optional user recording the payment

    Returns:
        The created Payment

    Raises:
        InvalidAmount: If amount is not positive
    """
    amount = Decimal(str(amount))
    if amount <= 0:
        raise InvalidAmount("payment amount", amount)

    return Payment.objects.create(
        payment_type=payment_type,
        category=category,
        description=description,
        amount=amount,
        method=method,
        remarks=remarks,
        reference_number=reference_number,
        recorded_by=recorded_by,
    )
