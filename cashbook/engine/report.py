"""
Export-ready report structure consumed by the PDF / Excel renderers.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Sequence, Tuple

from cashbook.engine.aggregation import Aggregation, GroupBy, GroupSummary, GrandSummary
from cashbook.engine.balance import BalancedRow
from cashbook.engine.filters import LedgerFilter

GROUP_TITLES = {
    GroupBy.DAY: "Day-wise Summary",
    GroupBy.PARTY: "Party-wise Summary",
    GroupBy.CATEGORY: "Category-wise Summary",
    GroupBy.PAYMENT_MODE: "Payment Mode-wise Summary",
}


@dataclass(frozen=True)
class LedgerReport:
    group_by: GroupBy
    title_suffix: Optional[str]
    balance_caption: str
    groups: Tuple[GroupSummary, ...]
    grand: GrandSummary
    rows: Tuple[BalancedRow, ...]
    filter_echo: Dict[str, Any]
    generated_at: datetime
    generated_by: Optional[str]

    @property
    def is_summary(self) -> bool:
        return self.group_by is not GroupBy.NONE


def assemble_report(
    rows: Sequence[BalancedRow],
    aggregation: Aggregation,
    ledger_filter: LedgerFilter,
    generated_by: Optional[str] = None,
    generated_at: Optional[datetime] = None,
    today: Optional[date] = None,
) -> LedgerReport:
    """Combine filtered rows and their aggregation into one report value.

    Entry rows are carried only for the ungrouped report; a grouped report
    lists its groups instead.
    """
    grouped = aggregation.group_by is not GroupBy.NONE
    return LedgerReport(
        group_by=aggregation.group_by,
        title_suffix=GROUP_TITLES.get(aggregation.group_by),
        balance_caption="Net Balance" if grouped else "Final Balance",
        groups=aggregation.groups,
        grand=aggregation.grand,
        rows=() if grouped else tuple(rows),
        filter_echo=ledger_filter.echo(today),
        generated_at=generated_at or datetime.now(timezone.utc),
        generated_by=generated_by,
    )
