"""
Dependency injection configuration
"""
from datetime import date
from typing import Optional

from fastapi import Depends, Header, Query
from sqlalchemy.orm import Session

from cashbook.core.exceptions import AuthenticationError
from cashbook.database import get_db
from cashbook.engine.aggregation import GroupBy
from cashbook.engine.filters import LedgerFilter
from cashbook.services.entry_service import EntryService
from cashbook.services.ledger_service import LedgerService
from cashbook.services.report_service import ReportService
import logging

logger = logging.getLogger(__name__)


# Service Dependencies
def get_entry_service(db: Session = Depends(get_db)) -> EntryService:
    return EntryService(db)


def get_ledger_service(db: Session = Depends(get_db)) -> LedgerService:
    return LedgerService(db)


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db)


def get_health_service(db: Session = Depends(get_db)):
    from cashbook.services.health_service import HealthService
    return HealthService(db)


# Context Dependencies
def get_current_member(x_member_id: Optional[str] = Header(None)) -> str:
    """Acting member id, set by the authenticating gateway in front of this service"""
    if not x_member_id or not x_member_id.strip():
        raise AuthenticationError("Missing X-Member-Id header")
    return x_member_id.strip()


def get_ledger_filter(
    duration: str = Query("all", description="all, today, yesterday, this_month, last_month or custom"),
    start_date: Optional[date] = Query(None, description="Start of a custom range (inclusive)"),
    end_date: Optional[date] = Query(None, description="End of a custom range (inclusive)"),
    type: str = Query("all", description="cash_in, cash_out or all"),
    party: str = Query("all", description="Party id or all"),
    category: str = Query("all", description="Category id or all"),
    payment_modes: Optional[str] = Query(None, description="Comma-separated payment modes; empty means all"),
    member: str = Query("all", description="Creator member id or all"),
    search: Optional[str] = Query(None, description="Matches remarks or amount, case-insensitive"),
) -> LedgerFilter:
    return LedgerFilter.from_params(
        duration=duration,
        start_date=start_date,
        end_date=end_date,
        entry_type=type,
        party=party,
        category=category,
        payment_modes=payment_modes,
        member=member,
        search=search,
    )


def get_group_by(group_by: Optional[str] = Query(None, description="none, day, party, category or payment_mode")) -> GroupBy:
    return GroupBy.parse(group_by)
