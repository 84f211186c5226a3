"""Shared pytest fixtures for ledgerline tests."""

import tempfile
import os
from datetime import datetime, timedelta, UTC
from pathlib import Path
import pytest

from ledgerline.database.factories import create_sqlite_database
from ledgerline.database.sqlalchemy_db import SQLAlchemyDatabase
from ledgerline.domain.csv_import import ImportService
from ledgerline.domain.import_record import ImportRecordService
from ledgerline.domain.pending import PendingImportRegistry
from ledgerline.domain.rules import RuleService


class FakeClock:
    """Clock the tests move by hand."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> None:
        self.current += timedelta(**kwargs)


class FlakyDatabase(SQLAlchemyDatabase):
    """SQLAlchemy database that fails chosen calls.

    Add method names to ``fail_on`` to make every call fail, descriptions to
    ``fail_descriptions`` to fail single inserts, and ids to ``fail_ids`` to
    fail bulk updates touching them. ``calls`` records id batches.
    """

    def __init__(self, database_url: str):
        super().__init__(database_url)
        self.fail_on: set[str] = set()
        self.fail_descriptions: set[str] = set()
        self.fail_ids: set[int] = set()
        self.calls: dict[str, list] = {}

    def _record(self, name, value=None):
        self.calls.setdefault(name, []).append(value)
        if name in self.fail_on:
            raise RuntimeError(f"{name} unavailable")

    def list_rules(self, user_id, active_only=True):
        self._record("list_rules")
        return super().list_rules(user_id, active_only)

    def get_transactions_by_date(self, user_id, txn_date):
        self._record("get_transactions_by_date", txn_date)
        return super().get_transactions_by_date(user_id, txn_date)

    def get_transactions_by_ids(self, transaction_ids):
        self._record("get_transactions_by_ids", list(transaction_ids))
        return super().get_transactions_by_ids(transaction_ids)

    def create_transaction(self, *args, **kwargs):
        self._record("create_transaction")
        if kwargs.get("description") in self.fail_descriptions:
            raise RuntimeError(f"insert failed for {kwargs.get('description')}")
        return super().create_transaction(*args, **kwargs)

    def update_transactions(self, transaction_ids, patch):
        self._record("update_transactions", list(transaction_ids))
        if self.fail_ids.intersection(transaction_ids):
            raise RuntimeError("update rejected")
        return super().update_transactions(transaction_ids, patch)

    def finalize_import_record(self, *args, **kwargs):
        self._record("finalize_import_record")
        return super().finalize_import_record(*args, **kwargs)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def flaky_db(tmp_path):
    """Create a temporary database whose calls can be made to fail."""
    db = FlakyDatabase(f"sqlite:///{tmp_path / 'flaky.db'}")
    yield db
    db.disconnect()


@pytest.fixture
def clock():
    """Create a fake clock starting at a fixed instant."""
    return FakeClock(datetime(2024, 2, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def registry(clock):
    """Create a pending import registry on the fake clock."""
    return PendingImportRegistry(entries={}, clock=clock)


@pytest.fixture
def import_service(temp_db, registry):
    """Create an ImportService with a temporary database."""
    return ImportService(temp_db, registry=registry)


@pytest.fixture
def rule_service(temp_db):
    """Create a RuleService with a temporary database."""
    return RuleService(temp_db)


@pytest.fixture
def import_record_service(temp_db):
    """Create an ImportRecordService with a temporary database."""
    return ImportRecordService(temp_db)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
