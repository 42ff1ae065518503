from datetime import datetime, timezone
import logging

from sqlalchemy.orm import Session

from cashbook.config import settings
from cashbook.core.exceptions import DatabaseError
from cashbook.database import get_database_info
from cashbook.repositories.entry_repository import EntryRepository

logger = logging.getLogger("cashbook.health")


class HealthService:
    def __init__(self, db: Session, repository: EntryRepository = None):
        self.db = db
        self.repository = repository if repository else EntryRepository(db)

    def _storage(self):
        """Entry counts, or None when the store cannot be read"""
        try:
            return self.repository.storage_stats()
        except DatabaseError as e:
            logger.warning(f"Ledger store unavailable: {e.message}")
            return None

    def health_check(self):
        stats = self._storage()

        return {
            "status": "healthy" if stats is not None else "unhealthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": settings.app_name,
            "version": settings.version,
            "ledger": {
                "currency_code": settings.currency_code,
                "minor_unit_digits": settings.minor_unit_digits,
                "max_entry_amount": settings.max_entry_amount,
                "entries": stats["entries"] if stats else None,
                "cashbooks": stats["cashbooks"] if stats else None,
            },
            "database": {
                "profile": settings.database_profile,
                "connection": "connected" if stats is not None else "disconnected",
            }
        }

    def get_database_info(self):
        db_info = get_database_info()
        stats = self._storage()

        return {
            "profile": db_info["profile"],
            "is_sqlite": db_info["is_sqlite"],
            "is_postgresql": db_info["is_postgresql"],
            "connection_status": "connected" if stats is not None else "disconnected",
            "url_masked": db_info["url"],
            "tables": {"cashbook_entries": stats["entries"] if stats else None},
        }
