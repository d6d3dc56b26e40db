from decimal import Decimal

import pytest

from models.payment_tracking import PaymentStatus
from utils.payment_calculations import calculate_amount_due, calculate_payment_status, round2, to_decimal


@pytest.mark.parametrize("amount_paid, total_amount, expected", [
    (0, 100, PaymentStatus.PENDING),
    (100, 100, PaymentStatus.PAID),
    (99.995, 100, PaymentStatus.PAID),
    (50, 100, PaymentStatus.PARTIAL),
    (Decimal("0.009"), 100, PaymentStatus.PENDING),
    (120, 100, PaymentStatus.PAID),
])
def test_payment_status(amount_paid, total_amount, expected):
    assert calculate_payment_status(amount_paid, total_amount) == expected


def test_amount_due_is_never_negative():
    assert calculate_amount_due(100, 150) == Decimal("0.00")
    assert calculate_amount_due(Decimal("700"), Decimal("400")) == Decimal("300.00")


def test_round2_rounds_half_away_from_zero():
    assert round2(Decimal("2.345")) == Decimal("2.35")
    assert round2(Decimal("-2.345")) == Decimal("-2.35")
    assert round2(Decimal("2.344")) == Decimal("2.34")


def test_to_decimal_uses_the_float_literal():
    assert to_decimal(99.995) == Decimal("99.995")
    assert to_decimal(None) == Decimal("0")
