"""
Report Service
Builds the report preview that PDF / Excel exports are rendered from.
"""
from datetime import date
from typing import Optional
import logging

from sqlalchemy.orm import Session

from cashbook import schemas
from cashbook.config import settings
from cashbook.engine.aggregation import GroupBy
from cashbook.engine.filters import LedgerFilter
from cashbook.engine.report import assemble_report
from cashbook.services.ledger_service import LedgerService, grand_response, group_response, ledger_row

logger = logging.getLogger("cashbook.reports")


class ReportService:
    def __init__(self, db: Session, ledger_service: LedgerService = None):
        self.db = db
        self.ledger = ledger_service if ledger_service else LedgerService(db)

    def preview(
        self,
        cashbook_id: str,
        ledger_filter: LedgerFilter,
        group_by: GroupBy = GroupBy.NONE,
        generated_by: Optional[str] = None,
        today: Optional[date] = None,
    ) -> schemas.ReportResponse:
        digits = settings.minor_unit_digits
        view = self.ledger.build(cashbook_id, ledger_filter, group_by, today)
        report = assemble_report(
            view.filtered, view.aggregation, ledger_filter,
            generated_by=generated_by, today=today,
        )
        logger.info(
            f"Report for cashbook {cashbook_id} by {report.group_by.value}: "
            f"{report.grand.entry_count} entries, {len(report.groups)} groups"
        )

        return schemas.ReportResponse(
            cashbook_id=cashbook_id,
            group_by=report.group_by.value,
            is_summary=report.is_summary,
            title_suffix=report.title_suffix,
            balance_caption=report.balance_caption,
            currency_code=settings.currency_code,
            groups=[group_response(g, digits) for g in report.groups],
            grand=grand_response(report.grand, digits),
            entries=[ledger_row(row, digits) for row in report.rows],
            total_entries=report.grand.entry_count,
            filter_echo=schemas.FilterEcho(**report.filter_echo),
            generated_at=report.generated_at,
            generated_by=report.generated_by,
        )
