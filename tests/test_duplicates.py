"""Tests for duplicate detection."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from ledgerline.domain.duplicates import DuplicateDetector, descriptions_overlap, is_duplicate
from ledgerline.domain.entities import TransactionCandidate, TransactionType


def make_candidate(description="SHELL OIL #123", amount="-45.00", txn_date=date(2024, 1, 15)):
    return TransactionCandidate(date=txn_date, amount=Decimal(amount), description=description)


@pytest.fixture
def existing_shell(temp_db):
    """Persist one Shell purchase for user u1."""
    temp_db.create_transaction(
        user_id="u1",
        date=date(2024, 1, 15),
        amount=Decimal("-45.00"),
        description="SHELL OIL",
        type=TransactionType.EXPENSE,
    )
    return temp_db.get_transactions_by_date("u1", date(2024, 1, 15))


@pytest.mark.parametrize(
    "first, second, expected",
    [
        ("SHELL OIL", "shell oil", True),
        ("  Shell   Oil ", "SHELL OIL", True),
        ("SHELL OIL #123", "SHELL OIL", True),
        ("SHELL", "CHEVRON", False),
        ("", "SHELL", False),
        (None, None, True),
    ],
)
def test_descriptions_overlap(first, second, expected):
    assert descriptions_overlap(first, second) is expected


def test_containing_description_is_duplicate(existing_shell):
    """Test that a longer description over the same amount is a duplicate."""
    assert is_duplicate(make_candidate(), existing_shell)


def test_amount_one_cent_apart_is_not_duplicate(existing_shell):
    assert not is_duplicate(make_candidate(amount="-45.01"), existing_shell)
    assert not is_duplicate(make_candidate(amount="-45.02"), existing_shell)


def test_different_description_is_not_duplicate(existing_shell):
    assert not is_duplicate(make_candidate(description="HOME DEPOT"), existing_shell)


def test_detector_checks_same_day_only(temp_db, existing_shell):
    detector = DuplicateDetector(temp_db)

    assert asyncio.run(detector.check("u1", make_candidate()))
    assert not asyncio.run(detector.check("u1", make_candidate(txn_date=date(2024, 1, 16))))
    assert not asyncio.run(detector.check("someone-else", make_candidate()))


def test_detector_lookup_failure_is_not_duplicate(flaky_db, caplog):
    """A failed lookup is logged and the candidate treated as new."""
    flaky_db.fail_on.add("get_transactions_by_date")
    detector = DuplicateDetector(flaky_db)

    assert asyncio.run(detector.check("u1", make_candidate())) is False
    assert "Duplicate check failed" in caplog.text
