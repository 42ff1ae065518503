"""
Grouped summaries of filtered ledger rows.

Every row lands in exactly one group; rows without the grouping attribute
share a single ``Unspecified`` group. Group totals and the grand summary are
accumulated independently in integer minor units, so they reconcile exactly.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from cashbook.core.exceptions import raise_invalid_filter
from cashbook.engine.balance import BalancedRow
from cashbook.engine.entry import LedgerEntry
from cashbook.engine.money import checked_add

UNSPECIFIED = "Unspecified"
# Bucket key for rows missing the attribute; cannot collide with a real id
UNSPECIFIED_KEY = "__unspecified__"
ALL_GROUP_KEY = "All"


class GroupBy(str, Enum):
    NONE = "none"
    DAY = "day"
    PARTY = "party"
    CATEGORY = "category"
    PAYMENT_MODE = "payment_mode"

    @classmethod
    def parse(cls, value: Optional[str]) -> "GroupBy":
        # The export screen calls the ungrouped report "all"
        if value is None or value.strip().lower() in ("", "all"):
            return cls.NONE
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise_invalid_filter("group_by", f"must be one of {[g.value for g in cls]}", value)


@dataclass(frozen=True)
class GroupSummary:
    key: str
    label: str
    cash_in: int
    cash_out: int
    balance: int
    entry_count: int


@dataclass(frozen=True)
class GrandSummary:
    total_cash_in: int
    total_cash_out: int
    final_balance: int
    entry_count: int


@dataclass(frozen=True)
class Aggregation:
    group_by: GroupBy
    groups: Tuple[GroupSummary, ...]
    grand: GrandSummary


class _Totals:
    def __init__(self, key: str, label: str, sort_key=None):
        self.key = key
        self.label = label
        self.sort_key = sort_key
        self.cash_in = 0
        self.cash_out = 0
        self.count = 0

    def add(self, entry: LedgerEntry):
        if entry.is_cash_in:
            self.cash_in = checked_add(self.cash_in, entry.amount_minor, "cash in total")
        else:
            self.cash_out = checked_add(self.cash_out, entry.amount_minor, "cash out total")
        self.count += 1

    def to_group(self) -> GroupSummary:
        return GroupSummary(
            key=self.key,
            label=self.label,
            cash_in=self.cash_in,
            cash_out=self.cash_out,
            balance=checked_add(self.cash_in, -self.cash_out, "group balance"),
            entry_count=self.count,
        )


def _day_key(entry: LedgerEntry):
    day = entry.occurred_on.isoformat()
    return day, day, entry.occurred_on


def _attribute_key(ref: Callable[[LedgerEntry], Optional[str]], name: Callable[[LedgerEntry], Optional[str]]):
    def extract(entry: LedgerEntry):
        key = ref(entry)
        if not key:
            return UNSPECIFIED_KEY, UNSPECIFIED, None
        return key, name(entry) or key, None
    return extract


_KEY_EXTRACTORS = {
    GroupBy.DAY: _day_key,
    GroupBy.PARTY: _attribute_key(lambda e: e.party_id, lambda e: e.party_name),
    GroupBy.CATEGORY: _attribute_key(lambda e: e.category_id, lambda e: e.category_name),
    GroupBy.PAYMENT_MODE: _attribute_key(lambda e: e.payment_mode, lambda e: e.payment_mode),
}


def summarize(rows: Iterable[BalancedRow]) -> GrandSummary:
    totals = _Totals(ALL_GROUP_KEY, ALL_GROUP_KEY)
    for row in rows:
        totals.add(row.entry)
    return GrandSummary(
        total_cash_in=totals.cash_in,
        total_cash_out=totals.cash_out,
        final_balance=checked_add(totals.cash_in, -totals.cash_out, "final balance"),
        entry_count=totals.count,
    )


def aggregate(rows: Iterable[BalancedRow], group_by: GroupBy = GroupBy.NONE) -> Aggregation:
    """
    Group filtered rows and total them.

    Day groups come out in ascending date order; party, category and payment
    mode groups in order of first appearance. With ``GroupBy.NONE`` the single
    implicit group mirrors the grand summary. No rows means no groups.
    """
    rows = list(rows)
    group_by = GroupBy(group_by)
    grand = summarize(rows)

    if not rows:
        return Aggregation(group_by=group_by, groups=(), grand=grand)

    if group_by is GroupBy.NONE:
        implicit = GroupSummary(
            key=ALL_GROUP_KEY,
            label=ALL_GROUP_KEY,
            cash_in=grand.total_cash_in,
            cash_out=grand.total_cash_out,
            balance=grand.final_balance,
            entry_count=grand.entry_count,
        )
        return Aggregation(group_by=group_by, groups=(implicit,), grand=grand)

    extract = _KEY_EXTRACTORS[group_by]
    buckets: Dict[str, _Totals] = {}
    for row in rows:
        key, label, sort_key = extract(row.entry)
        bucket = buckets.get(key)
        if bucket is None:
            bucket = buckets[key] = _Totals(key, label, sort_key)
        bucket.add(row.entry)

    ordered: List[_Totals] = list(buckets.values())
    if group_by is GroupBy.DAY:
        ordered.sort(key=lambda t: t.sort_key)

    return Aggregation(
        group_by=group_by,
        groups=tuple(t.to_group() for t in ordered),
        grand=grand,
    )
