"""
Domain records the ledger engine computes over.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional, Tuple

from cashbook.core.exceptions import raise_invalid_entry


class EntryType(str, Enum):
    CASH_IN = "cash_in"
    CASH_OUT = "cash_out"

    @property
    def opposite(self) -> "EntryType":
        return EntryType.CASH_OUT if self is EntryType.CASH_IN else EntryType.CASH_IN


@dataclass(frozen=True)
class LedgerEntry:
    """A single cash-in or cash-out fact of one cashbook.

    Construction validates the structural invariants: a positive integer
    amount of minor units and a calendar date.
    """
    id: str
    cashbook_id: str
    entry_type: EntryType
    amount_minor: int
    occurred_on: date
    occurred_at: Optional[time] = None
    party_id: Optional[str] = None
    party_name: Optional[str] = None
    category_id: Optional[str] = None
    category_name: Optional[str] = None
    payment_mode: Optional[str] = None
    remarks: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    attachment_ids: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        try:
            object.__setattr__(self, "entry_type", EntryType(self.entry_type))
        except ValueError:
            raise_invalid_entry("entry_type", "must be cash_in or cash_out", self.entry_type)

        if isinstance(self.amount_minor, bool) or not isinstance(self.amount_minor, int):
            raise_invalid_entry("amount", "must be an integer number of minor units", self.amount_minor)
        if self.amount_minor <= 0:
            raise_invalid_entry("amount", "must be greater than zero", self.amount_minor)

        if self.occurred_on is None:
            raise_invalid_entry("occurred_on", "date is required")
        if isinstance(self.occurred_on, datetime):
            object.__setattr__(self, "occurred_on", self.occurred_on.date())

        object.__setattr__(self, "attachment_ids", tuple(self.attachment_ids))

    @property
    def signed_amount(self) -> int:
        """Contribution to the running balance"""
        if self.entry_type is EntryType.CASH_IN:
            return self.amount_minor
        return -self.amount_minor

    @property
    def is_cash_in(self) -> bool:
        return self.entry_type is EntryType.CASH_IN
