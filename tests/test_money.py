import pytest
from decimal import Decimal

from cashbook.core.exceptions import ArithmeticOverflowError, InvalidEntryError
from cashbook.engine.money import (
    MAX_MINOR_UNITS, checked_add, format_amount, from_minor_units, to_minor_units
)


def test_to_minor_units_accepts_decimal_strings_and_ints():
    assert to_minor_units(Decimal("1250.50")) == 125050
    assert to_minor_units("0.10") == 10
    assert to_minor_units(7) == 700
    assert to_minor_units(Decimal("3"), digits=0) == 3


def test_to_minor_units_rejects_excess_precision_and_floats():
    with pytest.raises(InvalidEntryError, match="decimal places"):
        to_minor_units(Decimal("1.005"))
    with pytest.raises(InvalidEntryError, match="floating point"):
        to_minor_units(0.1)
    with pytest.raises(InvalidEntryError):
        to_minor_units("abc")
    with pytest.raises(InvalidEntryError):
        to_minor_units(Decimal("Infinity"))


def test_from_minor_units_and_format():
    assert from_minor_units(125050) == Decimal("1250.50")
    assert from_minor_units(-500) == Decimal("-5.00")
    assert format_amount(10000) == "100.00"
    assert format_amount(5) == "0.05"


def test_tenths_do_not_drift():
    # 0.1 + 0.2 style sums stay exact in minor units
    total = 0
    for _ in range(1000):
        total = checked_add(total, to_minor_units("0.10"))
    assert from_minor_units(total) == Decimal("100.00")


def test_checked_add_overflow():
    with pytest.raises(ArithmeticOverflowError, match="representable range"):
        checked_add(MAX_MINOR_UNITS, 1)


def test_to_minor_units_rejects_huge_exponents():
    with pytest.raises(InvalidEntryError, match="too large"):
        to_minor_units("1E+999999999")
    with pytest.raises(InvalidEntryError, match="too large"):
        to_minor_units(Decimal("9E+40"))
    with pytest.raises(ArithmeticOverflowError):
        to_minor_units(Decimal("1E+17"))
