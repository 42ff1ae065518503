from dataclasses import dataclass
from typing import Iterable, List, Sequence

from cashbook.engine.entry import LedgerEntry
from cashbook.engine.money import checked_add, ensure_in_range


@dataclass(frozen=True)
class BalancedRow:
    entry: LedgerEntry
    running_balance: int


def compute_running_balances(ordered_entries: Iterable[LedgerEntry], opening_balance: int = 0) -> List[BalancedRow]:
    """
    Walk entries in ledger order and attach the cumulative balance.

    The input must already be in canonical order (see ``order_entries``).
    Raises ArithmeticOverflowError instead of returning a partial list.
    """
    running = ensure_in_range(opening_balance, "opening balance")
    rows = []
    for entry in ordered_entries:
        running = checked_add(running, entry.signed_amount, "running balance")
        rows.append(BalancedRow(entry=entry, running_balance=running))
    return rows


def closing_balance(rows: Sequence[BalancedRow], opening_balance: int = 0) -> int:
    if not rows:
        return opening_balance
    return rows[-1].running_balance
