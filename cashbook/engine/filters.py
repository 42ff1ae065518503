"""
Ledger filters.

A filter only selects rows. The running balance on each surviving row is the
one computed over the whole cashbook, so a filtered view still shows the true
account state at that point.
"""
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from cashbook.core.exceptions import raise_invalid_filter
from cashbook.engine.balance import BalancedRow
from cashbook.engine.entry import EntryType, LedgerEntry
from cashbook.engine.money import format_amount
from cashbook.engine.date_service import DateService

ALL = "all"


class Duration(str, Enum):
    ALL = "all"
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    CUSTOM = "custom"


@dataclass(frozen=True)
class LedgerFilter:
    duration: Duration = Duration.ALL
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    entry_type: Optional[EntryType] = None
    party_id: Optional[str] = None
    category_id: Optional[str] = None
    payment_modes: FrozenSet[str] = field(default_factory=frozenset)
    member_id: Optional[str] = None
    search: Optional[str] = None

    def __post_init__(self):
        try:
            object.__setattr__(self, "duration", Duration(self.duration))
        except ValueError:
            raise_invalid_filter("duration", f"must be one of {[d.value for d in Duration]}", self.duration)

        if self.entry_type is not None:
            try:
                object.__setattr__(self, "entry_type", EntryType(self.entry_type))
            except ValueError:
                raise_invalid_filter("type", "must be cash_in, cash_out or all", self.entry_type)

        object.__setattr__(self, "payment_modes", frozenset(m for m in self.payment_modes if m))

        search = self.search.strip() if self.search else None
        object.__setattr__(self, "search", search or None)

        if self.duration is Duration.CUSTOM:
            if self.start_date is None or self.end_date is None:
                raise_invalid_filter("duration", "custom range needs both start_date and end_date")
            if self.start_date > self.end_date:
                raise_invalid_filter(
                    "start_date", "must not be after end_date",
                    f"{self.start_date} > {self.end_date}"
                )

    @classmethod
    def from_params(
        cls,
        duration: str = ALL,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        entry_type: Optional[str] = ALL,
        party: Optional[str] = ALL,
        category: Optional[str] = ALL,
        payment_modes: Union[None, str, Iterable[str]] = None,
        member: Optional[str] = ALL,
        search: Optional[str] = None,
    ) -> "LedgerFilter":
        """Build a filter from loosely typed query values where ``all`` means off."""
        if isinstance(payment_modes, str):
            payment_modes = payment_modes.split(",")
        modes = [m.strip() for m in (payment_modes or []) if m and m.strip()]
        if any(m.lower() == ALL for m in modes):
            modes = []

        return cls(
            duration=(duration or ALL).lower(),
            start_date=start_date,
            end_date=end_date,
            entry_type=_optional(entry_type.lower() if entry_type else None),
            party_id=_optional(party),
            category_id=_optional(category),
            payment_modes=frozenset(modes),
            member_id=_optional(member),
            search=search,
        )

    def window(self, today: Optional[date] = None) -> Optional[Tuple[date, date]]:
        if self.duration is Duration.ALL:
            return None
        return DateService.get_duration_window(
            self.duration.value, today or DateService.today(), self.start_date, self.end_date
        )

    def echo(self, today: Optional[date] = None) -> Dict[str, Any]:
        """Plain values describing this filter, for labelling reports."""
        window = self.window(today)
        return {
            "duration": self.duration.value,
            "start_date": window[0] if window else None,
            "end_date": window[1] if window else None,
            "type": self.entry_type.value if self.entry_type else ALL,
            "party": self.party_id or ALL,
            "category": self.category_id or ALL,
            "payment_modes": sorted(self.payment_modes),
            "member": self.member_id or ALL,
            "search": self.search,
        }


def _optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == ALL:
        return None
    return value


def matches(entry: LedgerEntry, ledger_filter: LedgerFilter, window: Optional[Tuple[date, date]], digits: int = 2) -> bool:
    if window is not None:
        start, end = window
        if entry.occurred_on < start or entry.occurred_on > end:
            return False
    if ledger_filter.entry_type is not None and entry.entry_type is not ledger_filter.entry_type:
        return False
    if ledger_filter.party_id is not None and entry.party_id != ledger_filter.party_id:
        return False
    if ledger_filter.category_id is not None and entry.category_id != ledger_filter.category_id:
        return False
    if ledger_filter.payment_modes and entry.payment_mode not in ledger_filter.payment_modes:
        return False
    if ledger_filter.member_id is not None and entry.created_by != ledger_filter.member_id:
        return False
    if ledger_filter.search:
        needle = ledger_filter.search.casefold()
        haystacks = (entry.remarks or "", format_amount(entry.amount_minor, digits))
        if not any(needle in text.casefold() for text in haystacks):
            return False
    return True


def apply_filter(
    rows: Iterable[BalancedRow],
    ledger_filter: LedgerFilter,
    today: Optional[date] = None,
    digits: int = 2,
) -> List[BalancedRow]:
    """Select rows matching every active predicate, keeping input order and balances."""
    window = ledger_filter.window(today)
    return [row for row in rows if matches(row.entry, ledger_filter, window, digits)]
