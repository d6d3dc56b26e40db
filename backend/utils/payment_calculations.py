"""
Payment-state helpers shared by every path that changes what an obligation owes.

Sales, purchases and payments must agree on what "paid" means, so nothing else
recomputes amount_due or payment_status inline.
"""

from decimal import Decimal, ROUND_HALF_UP

from models.payment_tracking import PaymentStatus

# Absorbs floating rounding left over from upstream totals (one paisa/cent)
ROUNDING_TOLERANCE = Decimal("0.01")

_CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return Decimal("0")
    # str() keeps 99.995 as 99.995 instead of its binary float expansion
    return Decimal(str(value))


def round2(value) -> Decimal:
    """Round to 2 decimal places, halves away from zero."""
    return to_decimal(value).quantize(_CENTS, rounding=ROUND_HALF_UP)


def calculate_payment_status(amount_paid, total_amount) -> PaymentStatus:
    amount_paid = to_decimal(amount_paid)
    total_amount = to_decimal(total_amount)

    if amount_paid < ROUNDING_TOLERANCE:
        return PaymentStatus.PENDING
    if amount_paid >= total_amount - ROUNDING_TOLERANCE:
        return PaymentStatus.PAID
    return PaymentStatus.PARTIAL


def calculate_amount_due(total_amount, amount_paid) -> Decimal:
    amount_due = to_decimal(total_amount) - to_decimal(amount_paid)
    return round2(max(Decimal("0"), amount_due))
