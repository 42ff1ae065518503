"""
Canonical chronological order of a cashbook's entries.

Sort keys, in priority order:

1. ``occurred_on`` ascending
2. ``occurred_at`` ascending; an entry without a time is placed before every
   timed entry of the same date
3. ``created_at`` ascending; an entry without a creation stamp comes first
4. ``id`` ascending

The chain is total, so ordering an unchanged set twice gives the same
sequence. Callers that expect untimed entries at the end of the day get a
different per-row balance than they might assume; the final balance is the
same either way.
"""
from datetime import datetime, time, timezone
from typing import Iterable, List

from cashbook.core.exceptions import ValidationError
from cashbook.engine.entry import LedgerEntry


def ordering_key(entry: LedgerEntry):
    return (
        entry.occurred_on,
        entry.occurred_at is not None,
        entry.occurred_at or time.min,
        entry.created_at is not None,
        _naive(entry.created_at) if entry.created_at else datetime.min,
        entry.id,
    )


def order_entries(entries: Iterable[LedgerEntry]) -> List[LedgerEntry]:
    entries = list(entries)
    cashbooks = {e.cashbook_id for e in entries}
    if len(cashbooks) > 1:
        raise ValidationError(
            "Entries from more than one cashbook cannot share a running balance",
            {"cashbook_ids": sorted(cashbooks)}
        )
    return sorted(entries, key=ordering_key)


def _naive(value: datetime) -> datetime:
    # Aware and naive stamps do not compare; aware ones are folded to naive UTC.
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value
