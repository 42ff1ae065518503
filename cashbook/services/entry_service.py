"""
Entry Store Service
Validates and persists cashbook entries; supplies the snapshot the ledger
engine computes over.
"""
from contextlib import ExitStack
from datetime import datetime, timezone
from typing import List
import threading
import weakref
import logging

from sqlalchemy.orm import Session

from cashbook.config import settings
from cashbook.core.exceptions import ValidationError, raise_invalid_entry
from cashbook.engine.entry import EntryType, LedgerEntry
from cashbook.engine.money import to_minor_units
from cashbook.models import CashbookEntry, EntryAttachment
from cashbook.repositories.entry_repository import EntryRepository
from cashbook.schemas import EntryBase

logger = logging.getLogger("cashbook.entries")


class CashbookWriteLocks:
    """One lock per cashbook so writes to the same book run one at a time.

    Locks are held weakly: a cashbook's lock lives only while some writer
    holds or waits on it, so idle cashbooks leave nothing behind.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()

    def __contains__(self, cashbook_id: str) -> bool:
        return cashbook_id in self._locks

    def for_cashbook(self, cashbook_id: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(cashbook_id)
            if lock is None:
                lock = self._locks[cashbook_id] = threading.Lock()
            return lock

    def hold(self, *cashbook_ids: str) -> ExitStack:
        # Sorted acquisition keeps two-book moves from deadlocking
        stack = ExitStack()
        for cashbook_id in sorted(set(cashbook_ids)):
            stack.enter_context(self.for_cashbook(cashbook_id))
        return stack


write_locks = CashbookWriteLocks()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class EntryService:
    def __init__(self, db: Session, repository: EntryRepository = None, locks: CashbookWriteLocks = None):
        self.db = db
        self.repository = repository if repository else EntryRepository(db)
        self.locks = locks if locks else write_locks

    # --- Validation ---

    def _mutable_fields(self, data: EntryBase) -> dict:
        """Validated column values for create and full-replace update"""
        digits = settings.minor_unit_digits
        amount_minor = to_minor_units(data.amount, digits)
        if amount_minor <= 0:
            raise_invalid_entry("amount", "must be greater than zero", data.amount)
        if amount_minor > settings.max_entry_amount * 10 ** digits:
            raise_invalid_entry("amount", f"must not exceed {settings.max_entry_amount}", data.amount)
        if data.occurred_on is None:
            raise_invalid_entry("occurred_on", "date is required")

        return {
            "entry_type": EntryType(data.entry_type).value,
            "amount_minor": amount_minor,
            "occurred_on": data.occurred_on,
            "occurred_at": data.occurred_at,
            "party_id": data.party_id,
            "party_name": data.party_name,
            "category_id": data.category_id,
            "category_name": data.category_name,
            "payment_mode": data.payment_mode,
            "remarks": data.remarks,
        }

    @staticmethod
    def _attachments(attachment_ids: List[str]) -> List[EntryAttachment]:
        return [
            EntryAttachment(attachment_id=attachment_id, position=position)
            for position, attachment_id in enumerate(attachment_ids)
        ]

    # --- Writes ---

    def create_entry(self, cashbook_id: str, data: EntryBase, member_id: str) -> CashbookEntry:
        fields = self._mutable_fields(data)
        with self.locks.hold(cashbook_id):
            entry = CashbookEntry(
                cashbook_id=cashbook_id,
                created_by=member_id,
                created_at=_utcnow(),
                attachments=self._attachments(data.attachment_ids),
                **fields
            )
            self.repository.add(entry)
            self.repository.commit()
        logger.info(f"Created {entry.entry_type} entry {entry.id} in cashbook {cashbook_id}")
        return entry

    def update_entry(self, cashbook_id: str, entry_id: str, data: EntryBase) -> CashbookEntry:
        fields = self._mutable_fields(data)
        with self.locks.hold(cashbook_id):
            entry = self.repository.get_in_cashbook_or_raise(cashbook_id, entry_id)
            for name, value in fields.items():
                setattr(entry, name, value)
            entry.attachments = self._attachments(data.attachment_ids)
            entry.updated_at = _utcnow()
            self.repository.flush()
            self.repository.commit()
        logger.info(f"Updated entry {entry_id} in cashbook {cashbook_id}")
        return entry

    def delete_entry(self, cashbook_id: str, entry_id: str) -> None:
        with self.locks.hold(cashbook_id):
            entry = self.repository.get_in_cashbook_or_raise(cashbook_id, entry_id)
            self.repository.delete(entry)
            self.repository.commit()
        logger.info(f"Deleted entry {entry_id} from cashbook {cashbook_id}")

    def move_entry(self, cashbook_id: str, entry_id: str, target_cashbook_id: str) -> CashbookEntry:
        """Delete the entry here and recreate it in the target book.

        The recreated entry gets a new id but keeps its creator and creation
        time, so it sorts among the target's entries as it did at home.
        """
        if target_cashbook_id == cashbook_id:
            raise ValidationError(
                "Entry is already in this cashbook",
                {"cashbook_id": cashbook_id, "entry_id": entry_id}
            )
        with self.locks.hold(cashbook_id, target_cashbook_id):
            source = self.repository.get_in_cashbook_or_raise(cashbook_id, entry_id)
            moved = self._clone(source, target_cashbook_id, source.created_by, source.created_at)
            self.repository.add(moved)
            self.repository.delete(source)
            self.repository.commit()
        logger.info(f"Moved entry {entry_id} from cashbook {cashbook_id} to {target_cashbook_id} as {moved.id}")
        return moved

    def copy_entry(
        self,
        cashbook_id: str,
        entry_id: str,
        target_cashbook_id: str,
        member_id: str,
        opposite: bool = False,
    ) -> CashbookEntry:
        """Recreate the entry in the target book, optionally as the opposite type"""
        with self.locks.hold(cashbook_id, target_cashbook_id):
            source = self.repository.get_in_cashbook_or_raise(cashbook_id, entry_id)
            copied = self._clone(source, target_cashbook_id, member_id, _utcnow())
            if opposite:
                copied.entry_type = EntryType(source.entry_type).opposite.value
            self.repository.add(copied)
            self.repository.commit()
        logger.info(
            f"Copied entry {entry_id} from cashbook {cashbook_id} to {target_cashbook_id} "
            f"as {copied.id}{' (opposite)' if opposite else ''}"
        )
        return copied

    def _clone(self, source: CashbookEntry, cashbook_id: str, created_by: str, created_at: datetime) -> CashbookEntry:
        return CashbookEntry(
            cashbook_id=cashbook_id,
            entry_type=source.entry_type,
            amount_minor=source.amount_minor,
            occurred_on=source.occurred_on,
            occurred_at=source.occurred_at,
            party_id=source.party_id,
            party_name=source.party_name,
            category_id=source.category_id,
            category_name=source.category_name,
            payment_mode=source.payment_mode,
            remarks=source.remarks,
            created_by=created_by,
            created_at=created_at,
            attachments=self._attachments(source.attachment_ids),
        )

    # --- Reads ---

    def get_entry(self, cashbook_id: str, entry_id: str) -> CashbookEntry:
        return self.repository.get_in_cashbook_or_raise(cashbook_id, entry_id)

    def list_entries(self, cashbook_id: str) -> List[LedgerEntry]:
        """Unordered, complete snapshot of the cashbook for the ledger engine"""
        rows = self.repository.list_for_cashbook(cashbook_id)
        logger.debug(f"Loaded {len(rows)} entries for cashbook {cashbook_id}")
        return [self.to_ledger_entry(row) for row in rows]

    @staticmethod
    def to_ledger_entry(row: CashbookEntry) -> LedgerEntry:
        return LedgerEntry(
            id=row.id,
            cashbook_id=row.cashbook_id,
            entry_type=row.entry_type,
            amount_minor=row.amount_minor,
            occurred_on=row.occurred_on,
            occurred_at=row.occurred_at,
            party_id=row.party_id,
            party_name=row.party_name,
            category_id=row.category_id,
            category_name=row.category_name,
            payment_mode=row.payment_mode,
            remarks=row.remarks,
            created_by=row.created_by,
            created_at=row.created_at,
            attachment_ids=tuple(row.attachment_ids),
        )
