import gc
import pytest
from datetime import date, time
from decimal import Decimal

from cashbook.core.exceptions import InvalidEntryError, NotFoundError, ValidationError
from cashbook.engine.entry import EntryType
from cashbook.models import CashbookEntry, EntryAttachment
from cashbook.schemas import EntryCreate, EntryUpdate
from cashbook.services.entry_service import CashbookWriteLocks, EntryService


def _create(service, cashbook_id="book-1", member="alice", **overrides):
    data = {
        "entry_type": "cash_in",
        "amount": Decimal("100.00"),
        "occurred_on": date(2024, 1, 1),
    }
    data.update(overrides)
    return service.create_entry(cashbook_id, EntryCreate(**data), member)


def test_create_entry_stores_minor_units(db_session):
    service = EntryService(db_session)

    entry = _create(service, amount=Decimal("1250.5"), occurred_at=time(9, 30),
                    party_id="p1", party_name="Asha", payment_mode="Cash",
                    remarks="Advance", attachment_ids=["att-1", "att-2"])

    saved = db_session.get(CashbookEntry, entry.id)
    assert saved.amount_minor == 125050
    assert saved.entry_type == "cash_in"
    assert saved.created_by == "alice"
    assert saved.created_at is not None
    assert saved.attachment_ids == ["att-1", "att-2"]


def test_create_rejects_invalid_entries(db_session):
    service = EntryService(db_session)

    with pytest.raises(InvalidEntryError, match="greater than zero"):
        _create(service, amount=Decimal("0"))
    with pytest.raises(InvalidEntryError, match="greater than zero"):
        _create(service, amount=Decimal("-10"))
    with pytest.raises(InvalidEntryError, match="date is required"):
        _create(service, occurred_on=None)
    with pytest.raises(InvalidEntryError, match="decimal places"):
        _create(service, amount=Decimal("10.001"))
    with pytest.raises(InvalidEntryError, match="must not exceed"):
        _create(service, amount=Decimal("1000000000.01"))

    assert db_session.query(CashbookEntry).count() == 0


def test_update_replaces_mutable_fields(db_session):
    service = EntryService(db_session)
    entry = _create(service, party_id="p1", remarks="first", attachment_ids=["att-1"])

    updated = service.update_entry("book-1", entry.id, EntryUpdate(
        entry_type="cash_out",
        amount=Decimal("40"),
        occurred_on=date(2024, 1, 5),
        attachment_ids=["att-9"],
    ))

    assert updated.id == entry.id
    assert updated.entry_type == "cash_out"
    assert updated.amount_minor == 4000
    assert updated.party_id is None
    assert updated.remarks is None
    assert updated.created_by == "alice"
    assert updated.attachment_ids == ["att-9"]
    assert db_session.query(EntryAttachment).count() == 1


def test_entries_are_scoped_to_their_cashbook(db_session):
    service = EntryService(db_session)
    entry = _create(service)

    with pytest.raises(NotFoundError):
        service.get_entry("book-2", entry.id)
    with pytest.raises(NotFoundError):
        service.delete_entry("book-2", entry.id)


def test_delete_removes_entry_and_attachments(db_session):
    service = EntryService(db_session)
    entry = _create(service, attachment_ids=["att-1"])

    service.delete_entry("book-1", entry.id)

    assert db_session.query(CashbookEntry).count() == 0
    assert db_session.query(EntryAttachment).count() == 0


def test_move_recreates_in_target_with_new_id(db_session):
    service = EntryService(db_session)
    entry = _create(service, remarks="misfiled", attachment_ids=["att-1"])
    original_id, created_at = entry.id, entry.created_at

    moved = service.move_entry("book-1", original_id, "book-2")

    assert moved.id != original_id
    assert moved.cashbook_id == "book-2"
    assert moved.created_by == "alice"
    assert moved.created_at == created_at
    assert moved.attachment_ids == ["att-1"]
    assert service.list_entries("book-1") == []
    assert [e.remarks for e in service.list_entries("book-2")] == ["misfiled"]

    with pytest.raises(ValidationError, match="already in this cashbook"):
        service.move_entry("book-2", moved.id, "book-2")


def test_copy_keeps_source_and_can_flip_type(db_session):
    service = EntryService(db_session)
    entry = _create(service, amount=Decimal("75.25"))

    plain = service.copy_entry("book-1", entry.id, "book-2", "bob")
    flipped = service.copy_entry("book-1", entry.id, "book-2", "bob", opposite=True)

    assert plain.entry_type == "cash_in"
    assert flipped.entry_type == "cash_out"
    assert flipped.amount_minor == 7525
    assert flipped.created_by == "bob"
    assert len(service.list_entries("book-1")) == 1
    assert len(service.list_entries("book-2")) == 2


def test_list_entries_returns_domain_records(db_session):
    service = EntryService(db_session)
    _create(service, amount=Decimal("10"))
    _create(service, entry_type="cash_out", amount=Decimal("2.50"))
    _create(service, cashbook_id="other")

    snapshot = service.list_entries("book-1")

    assert sorted(e.amount_minor for e in snapshot) == [250, 1000]
    assert {e.entry_type for e in snapshot} == {EntryType.CASH_IN, EntryType.CASH_OUT}
    assert all(e.cashbook_id == "book-1" for e in snapshot)


def test_write_locks_are_per_cashbook():
    locks = CashbookWriteLocks()

    assert locks.for_cashbook("a") is locks.for_cashbook("a")
    assert locks.for_cashbook("a") is not locks.for_cashbook("b")
    with locks.hold("b", "a", "a"):
        assert locks.for_cashbook("a").locked()
        assert locks.for_cashbook("b").locked()
    assert not locks.for_cashbook("a").locked()


def test_idle_cashbook_locks_are_released():
    locks = CashbookWriteLocks()

    with locks.hold("busy"):
        assert "busy" in locks
    gc.collect()

    assert "busy" not in locks
