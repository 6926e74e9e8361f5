"""
Monetary helpers shared by every engine component.

All amounts are Decimal and are rounded to 2 places after each operation so
repeated add/subtract chains never accumulate drift.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from shopledger.common.exceptions import InvalidAmount
from shopledger.core.config import settings
from shopledger.models.order import PaymentStatus

Number = Union[Decimal, int, float, str]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # str() keeps 69.99 as 69.99 instead of its binary expansion
        return Decimal(str(value))
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmount(f"Amount must be a valid number, got {value!r}", field="amount")


def round_money(value: Number) -> Decimal:
    """Round to 2 decimal places, half away from zero."""
    amount = to_decimal(value)
    if not amount.is_finite():
        raise InvalidAmount("Amount must be a valid number", field="amount", amount=value)
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def add(a: Number, b: Number) -> Decimal:
    return round_money(to_decimal(a) + to_decimal(b))


def subtract(a: Number, b: Number) -> Decimal:
    return round_money(to_decimal(a) - to_decimal(b))


def multiply(a: Number, b: Number) -> Decimal:
    return round_money(to_decimal(a) * to_decimal(b))


def validate(value: Number) -> Decimal:
    """
    Validate a monetary amount and return it as a Decimal.

    Raises InvalidAmount when the value is NaN, negative, above MAX_AMOUNT,
    or carries more than 2 decimal places.
    """
    amount = to_decimal(value)

    if amount.is_nan() or not amount.is_finite():
        raise InvalidAmount("Amount must be a valid number", field="amount", amount=value)

    if amount < 0:
        raise InvalidAmount("Amount cannot be negative", field="amount", amount=amount)

    if amount > settings.MAX_AMOUNT:
        raise InvalidAmount(
            f"Amount cannot exceed {format_amount(settings.MAX_AMOUNT)}",
            field="amount",
            amount=amount,
            ceiling=settings.MAX_AMOUNT,
        )

    if round_money(amount) != amount:
        raise InvalidAmount(
            "Amount can only have up to 2 decimal places", field="amount", amount=amount
        )

    return amount


def validate_payment(value: Number) -> Decimal:
    amount = validate(value)
    if amount <= 0:
        raise InvalidAmount("Payment amount must be greater than ₹0", field="amount", amount=amount)
    return amount


def format_amount(value: Number) -> str:
    return f"₹{round_money(value):.2f}"


def payment_status_for(total_amount: Number, paid_amount: Number) -> str:
    """
    Derive an order's payment status from its amounts.

    paid           -> paid >= total - tolerance
    partially_paid -> 0 < paid < total - tolerance
    pending        -> otherwise
    """
    total = round_money(total_amount)
    paid = round_money(paid_amount)
    threshold = total - settings.BALANCE_TOLERANCE

    if paid >= threshold:
        return PaymentStatus.PAID.value
    if paid > 0:
        return PaymentStatus.PARTIALLY_PAID.value
    return PaymentStatus.PENDING.value
