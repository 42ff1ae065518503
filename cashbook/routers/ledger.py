"""
Ledger Router
Running balances and grouped totals for one cashbook
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query

from cashbook import schemas
from cashbook.core.dependencies import get_current_member, get_group_by, get_ledger_filter, get_ledger_service
from cashbook.engine.aggregation import GroupBy
from cashbook.engine.filters import LedgerFilter
from cashbook.services.ledger_service import LedgerService

router = APIRouter(
    prefix="/cashbooks",
    tags=["Ledger"],
    responses={404: {"description": "Not found"}},
)


@router.get("/{cashbook_id}/ledger", response_model=schemas.LedgerResponse)
def get_ledger(
    cashbook_id: str,
    ledger_filter: LedgerFilter = Depends(get_ledger_filter),
    group_by: GroupBy = Depends(get_group_by),
    page: Optional[int] = Query(None, ge=1, description="Page of filtered rows; defaults to 1 when page_size is given, omit both for all rows"),
    page_size: Optional[int] = Query(None, ge=1, description="Rows per page"),
    member_id: str = Depends(get_current_member),
    service: LedgerService = Depends(get_ledger_service)
):
    """
    Entries in ledger order with their running balance, plus grouped and
    grand totals over the filtered rows.
    """
    return service.get_ledger(cashbook_id, ledger_filter, group_by, page, page_size)
