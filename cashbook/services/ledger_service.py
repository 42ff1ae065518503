"""
Ledger Service
Runs the ledger pipeline over a fresh snapshot of a cashbook:
snapshot -> order -> running balance -> filter -> aggregate.
Nothing is cached between calls.
"""
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple
import logging

from sqlalchemy.orm import Session

from cashbook import schemas
from cashbook.config import settings
from cashbook.core.exceptions import raise_invalid_filter
from cashbook.engine.aggregation import Aggregation, GroupBy, GroupSummary, GrandSummary, aggregate
from cashbook.engine.balance import BalancedRow, compute_running_balances
from cashbook.engine.entry import LedgerEntry
from cashbook.engine.filters import LedgerFilter, apply_filter
from cashbook.engine.money import from_minor_units
from cashbook.engine.ordering import order_entries
from cashbook.models import CashbookEntry
from cashbook.services.entry_service import EntryService

logger = logging.getLogger("cashbook.ledger")


@dataclass(frozen=True)
class LedgerView:
    cashbook_id: str
    ledger_filter: LedgerFilter
    balanced: Tuple[BalancedRow, ...]
    filtered: Tuple[BalancedRow, ...]
    aggregation: Aggregation


# --- Schema conversion (minor units -> Decimal happens only here) ---

def entry_response(entry: LedgerEntry, digits: int = None) -> schemas.EntryResponse:
    digits = settings.minor_unit_digits if digits is None else digits
    return schemas.EntryResponse(
        id=entry.id,
        cashbook_id=entry.cashbook_id,
        entry_type=entry.entry_type,
        amount=from_minor_units(entry.amount_minor, digits),
        occurred_on=entry.occurred_on,
        occurred_at=entry.occurred_at,
        party_id=entry.party_id,
        party_name=entry.party_name,
        category_id=entry.category_id,
        category_name=entry.category_name,
        payment_mode=entry.payment_mode,
        remarks=entry.remarks,
        created_by=entry.created_by,
        created_at=entry.created_at,
        attachment_ids=list(entry.attachment_ids),
    )


def entry_model_response(row: CashbookEntry) -> schemas.EntryResponse:
    return entry_response(EntryService.to_ledger_entry(row))


def ledger_row(row: BalancedRow, digits: int) -> schemas.LedgerRow:
    return schemas.LedgerRow(
        entry=entry_response(row.entry, digits),
        running_balance=from_minor_units(row.running_balance, digits),
    )


def group_response(group: GroupSummary, digits: int) -> schemas.GroupSummaryResponse:
    return schemas.GroupSummaryResponse(
        key=group.key,
        label=group.label,
        cash_in=from_minor_units(group.cash_in, digits),
        cash_out=from_minor_units(group.cash_out, digits),
        balance=from_minor_units(group.balance, digits),
        entry_count=group.entry_count,
    )


def grand_response(grand: GrandSummary, digits: int) -> schemas.GrandSummaryResponse:
    return schemas.GrandSummaryResponse(
        total_cash_in=from_minor_units(grand.total_cash_in, digits),
        total_cash_out=from_minor_units(grand.total_cash_out, digits),
        final_balance=from_minor_units(grand.final_balance, digits),
        entry_count=grand.entry_count,
    )


def paginate(rows: List[BalancedRow], page: Optional[int], page_size: Optional[int]) -> Tuple[List[BalancedRow], Optional[int], Optional[int]]:
    """Slice already balanced and filtered rows; no paging arguments means every row"""
    if page is None and page_size is None:
        return rows, None, None
    page = 1 if page is None else page
    page_size = page_size or settings.default_page_size
    if page < 1:
        raise_invalid_filter("page", "must be 1 or greater", page)
    if page_size < 1 or page_size > settings.max_page_size:
        raise_invalid_filter("page_size", f"must be between 1 and {settings.max_page_size}", page_size)
    start = (page - 1) * page_size
    return rows[start:start + page_size], page, page_size


class LedgerService:
    def __init__(self, db: Session, entry_service: EntryService = None):
        self.db = db
        self.entries = entry_service if entry_service else EntryService(db)

    def build(
        self,
        cashbook_id: str,
        ledger_filter: LedgerFilter,
        group_by: GroupBy = GroupBy.NONE,
        today: Optional[date] = None,
        opening_balance: int = 0,
    ) -> LedgerView:
        snapshot = self.entries.list_entries(cashbook_id)
        ordered = order_entries(snapshot)
        balanced = compute_running_balances(ordered, opening_balance)
        filtered = apply_filter(balanced, ledger_filter, today, settings.minor_unit_digits)
        aggregation = aggregate(filtered, group_by)
        logger.debug(
            f"Ledger for cashbook {cashbook_id}: {len(balanced)} entries, "
            f"{len(filtered)} after filter, {len(aggregation.groups)} groups by {aggregation.group_by.value}"
        )
        return LedgerView(
            cashbook_id=cashbook_id,
            ledger_filter=ledger_filter,
            balanced=tuple(balanced),
            filtered=tuple(filtered),
            aggregation=aggregation,
        )

    def get_ledger(
        self,
        cashbook_id: str,
        ledger_filter: LedgerFilter,
        group_by: GroupBy = GroupBy.NONE,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
        today: Optional[date] = None,
    ) -> schemas.LedgerResponse:
        digits = settings.minor_unit_digits
        view = self.build(cashbook_id, ledger_filter, group_by, today)
        visible, page, page_size = paginate(list(view.filtered), page, page_size)

        return schemas.LedgerResponse(
            cashbook_id=cashbook_id,
            group_by=view.aggregation.group_by.value,
            groups=[group_response(g, digits) for g in view.aggregation.groups],
            grand=grand_response(view.aggregation.grand, digits),
            entries=[ledger_row(row, digits) for row in visible],
            filter_echo=schemas.FilterEcho(**ledger_filter.echo(today)),
            page=page,
            page_size=page_size,
            total_entries=len(view.filtered),
        )
