"""
Reports Router
"""
from fastapi import APIRouter, Depends

from cashbook import schemas
from cashbook.core.dependencies import get_current_member, get_group_by, get_ledger_filter, get_report_service
from cashbook.engine.aggregation import GroupBy
from cashbook.engine.filters import LedgerFilter
from cashbook.services.report_service import ReportService

router = APIRouter(
    prefix="/cashbooks",
    tags=["Reports"],
    responses={404: {"description": "Not found"}},
)


@router.get("/{cashbook_id}/reports/preview", response_model=schemas.ReportResponse)
def get_report_preview(
    cashbook_id: str,
    ledger_filter: LedgerFilter = Depends(get_ledger_filter),
    group_by: GroupBy = Depends(get_group_by),
    member_id: str = Depends(get_current_member),
    service: ReportService = Depends(get_report_service)
):
    """
    Report structure for PDF / Excel export, labelled with the filters that
    produced it.
    """
    return service.preview(cashbook_id, ledger_filter, group_by, generated_by=member_id)
