"""
Entry persistence
"""
from typing import Dict, List
from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import SQLAlchemyError
from cashbook.core.exceptions import raise_not_found, DatabaseError
from cashbook.models import CashbookEntry
from cashbook.repositories.base import BaseRepository
import logging

logger = logging.getLogger(__name__)


class EntryRepository(BaseRepository[CashbookEntry]):

    def __init__(self, db: Session):
        super().__init__(CashbookEntry, db)

    def get_in_cashbook_or_raise(self, cashbook_id: str, entry_id: str) -> CashbookEntry:
        """Entries of other cashbooks are reported as missing"""
        entry = self.get_by_id(entry_id)
        if not entry or entry.cashbook_id != cashbook_id:
            raise_not_found("Entry", entry_id)
        return entry

    def list_for_cashbook(self, cashbook_id: str) -> List[CashbookEntry]:
        """Every entry of the cashbook, read in one statement"""
        try:
            stmt = (
                select(CashbookEntry)
                .options(selectinload(CashbookEntry.attachments))
                .where(CashbookEntry.cashbook_id == cashbook_id)
            )
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing entries for cashbook {cashbook_id}: {e}")
            raise DatabaseError("Failed to retrieve cashbook entries", {"cashbook_id": cashbook_id})

    def storage_stats(self) -> Dict[str, int]:
        """Stored entry and cashbook counts; also proves the session can read"""
        try:
            entries, cashbooks = self.db.execute(
                select(func.count(CashbookEntry.id), func.count(distinct(CashbookEntry.cashbook_id)))
            ).one()
            return {"entries": entries, "cashbooks": cashbooks}
        except SQLAlchemyError as e:
            logger.error(f"Error reading entry statistics: {e}")
            raise DatabaseError("Failed to read entry statistics")
