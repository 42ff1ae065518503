import pytest
from datetime import date, datetime
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from fastapi.testclient import TestClient
from fastapi import FastAPI

from cashbook.config import settings
from cashbook.database import Base, get_db
from cashbook.core.error_handler import register_exception_handlers
from cashbook.core.middleware import RequestTrackingMiddleware
from cashbook.engine.entry import LedgerEntry
from cashbook.routers import entries, health, ledger, reports
from cashbook import models  # noqa: F401

# Override settings for testing
settings.testing = True
settings.database_profile = "sqlite"

# Create a test engine and session
engine = create_engine(settings.database_url, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(name="db_session")
def db_session_fixture():
    Base.metadata.create_all(bind=engine)  # Create tables
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)  # Drop tables after tests


@pytest.fixture(name="client")
def client_fixture(db_session):
    app = FastAPI(title=settings.app_name, version=settings.version)
    register_exception_handlers(app)
    app.add_middleware(RequestTrackingMiddleware)

    app.include_router(entries.router, prefix="/api")
    app.include_router(ledger.router, prefix="/api")
    app.include_router(reports.router, prefix="/api")
    app.include_router(health.router, prefix="/api")

    def override_get_db():
        yield db_session
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="make_entry")
def make_entry_fixture():
    """Factory for engine-level entries; amounts are minor units"""
    counter = {"n": 0}

    def make(entry_type="cash_in", amount=100, occurred_on=date(2024, 1, 1), **kwargs):
        counter["n"] += 1
        kwargs.setdefault("id", f"e{counter['n']:03d}")
        kwargs.setdefault("cashbook_id", "book-1")
        kwargs.setdefault("created_by", "member-1")
        kwargs.setdefault("created_at", datetime(2024, 1, 1, 9, 0, counter["n"]))
        return LedgerEntry(
            entry_type=entry_type,
            amount_minor=amount,
            occurred_on=occurred_on,
            **kwargs
        )
    return make


@pytest.fixture(name="sample_entries")
def sample_entries_fixture(make_entry):
    """in 100 and out 40 on 2024-01-01, in 25 on 2024-01-02 (untimed, whole units)"""
    return [
        make_entry("cash_in", 10000, date(2024, 1, 1), remarks="Opening sale"),
        make_entry("cash_out", 4000, date(2024, 1, 1), remarks="Rent"),
        make_entry("cash_in", 2500, date(2024, 1, 2), remarks="Misc sale"),
    ]
