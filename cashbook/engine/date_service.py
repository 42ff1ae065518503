from datetime import date, datetime, timedelta, timezone
from typing import Optional, Tuple
import calendar

from dateutil.relativedelta import relativedelta


class DateService:
    @staticmethod
    def today() -> date:
        return datetime.now(timezone.utc).date()

    @staticmethod
    def get_month_dates(year: int, month: int) -> Tuple[date, date]:
        start_date = date(year, month, 1)
        end_date = date(year, month, calendar.monthrange(year, month)[1])
        return start_date, end_date

    @staticmethod
    def get_duration_window(
        duration: str,
        today: date,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Optional[Tuple[date, date]]:
        """Inclusive [start, end] window for a named duration, None for all-time."""
        if duration == "all":
            return None
        if duration == "today":
            return today, today
        if duration == "yesterday":
            yesterday = today - timedelta(days=1)
            return yesterday, yesterday
        if duration == "this_month":
            return DateService.get_month_dates(today.year, today.month)
        if duration == "last_month":
            previous = today.replace(day=1) - relativedelta(months=1)
            return DateService.get_month_dates(previous.year, previous.month)
        if duration == "custom":
            return start_date, end_date
        raise ValueError(f"Unknown duration: {duration}")
