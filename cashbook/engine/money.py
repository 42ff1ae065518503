"""
Fixed-point money helpers.

Every amount inside the engine is an ``int`` count of minor units (paise,
cents). ``Decimal`` appears only when converting from request payloads and
back into responses.
"""
from decimal import Decimal, InvalidOperation, Overflow
from typing import Union

from cashbook.core.exceptions import ArithmeticOverflowError, raise_invalid_entry

# Width of the BigInteger storage column.
MAX_MINOR_UNITS = 2 ** 63 - 1
MIN_MINOR_UNITS = -(2 ** 63)

AmountLike = Union[Decimal, str, int]


def to_minor_units(amount: AmountLike, digits: int = 2) -> int:
    """Convert a decimal amount to minor units, rejecting excess precision."""
    if isinstance(amount, float):
        raise_invalid_entry("amount", "floating point amounts are not accepted", amount)
    try:
        value = Decimal(str(amount)) if not isinstance(amount, Decimal) else amount
    except InvalidOperation:
        raise_invalid_entry("amount", "not a decimal number", amount)

    if not value.is_finite():
        raise_invalid_entry("amount", "must be a finite number", amount)

    # Reject absurd exponents before scaling can overflow the decimal context
    if value.adjusted() > len(str(MAX_MINOR_UNITS)):
        raise_invalid_entry("amount", "is too large", amount)
    try:
        scaled = value.scaleb(digits)
    except (InvalidOperation, Overflow):
        raise_invalid_entry("amount", "is too large", amount)
    if scaled != scaled.to_integral_value():
        raise_invalid_entry("amount", f"at most {digits} decimal places are allowed", amount)
    return ensure_in_range(int(scaled), "amount")


def from_minor_units(minor: int, digits: int = 2) -> Decimal:
    quantum = Decimal(1).scaleb(-digits)
    return (Decimal(minor).scaleb(-digits)).quantize(quantum)


def format_amount(minor: int, digits: int = 2) -> str:
    """Plain text form used by free-text search, e.g. ``1250.50``."""
    return f"{from_minor_units(minor, digits):f}"


def ensure_in_range(value: int, label: str = "total") -> int:
    if value > MAX_MINOR_UNITS or value < MIN_MINOR_UNITS:
        raise ArithmeticOverflowError(
            f"Ledger {label} exceeds the representable range of {MAX_MINOR_UNITS} minor units",
            {"label": label, "value": str(value)}
        )
    return value


def checked_add(total: int, delta: int, label: str = "total") -> int:
    return ensure_in_range(total + delta, label)
