"""Tests for the import orchestrator."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from ledgerline.domain.csv_import import ImportService
from ledgerline.domain.entities import (
    ClassificationSource,
    MatchType,
    TransactionSource,
)
from ledgerline.domain.errors import AccessDeniedError, NotFoundError, ValidationError


def read_fixture(fixtures_dir, name):
    return (fixtures_dir / name).read_text(encoding="utf-8")


def generic_csv(descriptions, amount="-10.00", txn_date="01/15/2024"):
    lines = ["Date,Description,Amount"]
    lines.extend(f"{txn_date},{description},{amount}" for description in descriptions)
    return "\n".join(lines) + "\n"


def upload_chase(service, fixtures_dir, user_id="u1"):
    text = read_fixture(fixtures_dir, "chase.csv")
    return asyncio.run(service.upload_csv(user_id, "chase.csv", text))


def test_upload_returns_preview(import_service, fixtures_dir, registry, clock):
    """Test that an upload is parsed and parked without touching the database."""
    preview = upload_chase(import_service, fixtures_dir)

    assert preview.success
    assert preview.detected_bank == "chase"
    assert preview.parsed_count == 6
    assert preview.total_rows == 7
    assert preview.error_count == 1
    assert len(preview.sample_transactions) == 6
    assert preview.expires_at == clock() + registry.ttl
    assert preview.upload_id in registry
    assert import_service.db.list_import_records("u1", status=None) == []


def test_upload_invalid_bank_format_leaves_no_entry(import_service, registry):
    with pytest.raises(ValidationError):
        asyncio.run(import_service.upload_csv("u1", "x.csv", "Date\n1\n", bank_format="nope"))
    assert len(registry) == 0


def test_confirm_persists_and_classifies(import_service, fixtures_dir, temp_db, registry):
    """Test confirm end to end with the Chase fixture."""
    preview = upload_chase(import_service, fixtures_dir)

    result = asyncio.run(import_service.confirm("u1", preview.upload_id))

    assert result.imported == 6
    assert result.duplicate_count == 0
    assert result.error_count == 0
    assert result.date_range == (date(2024, 1, 15), date(2024, 1, 20))
    assert result.classified == 3
    assert result.unclassified == 3
    assert result.classified + result.unclassified == result.imported
    assert result.classification_stats.classified_by_default_vendors == 3
    assert {t.description for t in result.unclassified_transactions} == {
        "ACME PAYROLL DIRECT DEP",
        "CHECK 1042",
        "DEPOSIT ID NUMBER 99",
    }
    assert preview.upload_id not in registry

    record = temp_db.get_import_record(result.import_id)
    assert record.transaction_count == 6
    assert record.source == TransactionSource.CSV_IMPORT
    assert record.bank == "chase"
    assert record.date_range_start == date(2024, 1, 15)
    assert record.file_size == len(read_fixture(fixtures_dir, "chase.csv").encode("utf-8"))

    transactions = temp_db.list_transactions_by_import(result.import_id)
    assert len(transactions) == 6
    shell = transactions[0]
    assert shell.category == "CAR_TRUCK_EXPENSES"
    assert shell.classification_source == ClassificationSource.DEFAULT_VENDOR
    assert shell.amount == Decimal("-45.00")
    assert shell.source == TransactionSource.CSV_IMPORT


def test_confirm_without_classification(import_service, fixtures_dir, temp_db):
    preview = upload_chase(import_service, fixtures_dir)

    result = asyncio.run(import_service.confirm("u1", preview.upload_id, classify=False))

    assert result.imported == 6
    assert result.unclassified == 6
    assert result.classification_stats is None
    assert all(t.category is None for t in temp_db.list_transactions_by_import(result.import_id))


def test_reimport_skips_duplicates(import_service, fixtures_dir):
    """The same file imported twice only persists once."""
    first = upload_chase(import_service, fixtures_dir)
    asyncio.run(import_service.confirm("u1", first.upload_id))

    second = upload_chase(import_service, fixtures_dir)
    result = asyncio.run(import_service.confirm("u1", second.upload_id))

    assert result.imported == 0
    assert result.duplicate_count == 6
    assert result.duplicates[0].description == "SHELL OIL 12345 HOUSTON TX"
    assert result.date_range == (None, None)


def test_reimport_with_duplicates_allowed(import_service, fixtures_dir):
    first = upload_chase(import_service, fixtures_dir)
    asyncio.run(import_service.confirm("u1", first.upload_id))

    second = upload_chase(import_service, fixtures_dir)
    result = asyncio.run(import_service.confirm("u1", second.upload_id, skip_duplicates=False))

    assert result.imported == 6
    assert result.duplicate_count == 0


def test_confirm_then_cancel_is_not_found(import_service, fixtures_dir):
    """A confirmed upload is gone for good."""
    preview = upload_chase(import_service, fixtures_dir)
    asyncio.run(import_service.confirm("u1", preview.upload_id))

    with pytest.raises(NotFoundError):
        asyncio.run(import_service.cancel("u1", preview.upload_id))
    with pytest.raises(NotFoundError):
        asyncio.run(import_service.confirm("u1", preview.upload_id))


def test_cancel_then_confirm_is_not_found(import_service, fixtures_dir, temp_db):
    preview = upload_chase(import_service, fixtures_dir)

    assert asyncio.run(import_service.cancel("u1", preview.upload_id)) is True

    with pytest.raises(NotFoundError, match="not found or expired"):
        asyncio.run(import_service.confirm("u1", preview.upload_id))
    assert temp_db.list_import_records("u1", status=None) == []


def test_other_user_is_denied(import_service, fixtures_dir, registry):
    """Test that only the uploader can act on an upload."""
    preview = upload_chase(import_service, fixtures_dir)

    with pytest.raises(AccessDeniedError):
        asyncio.run(import_service.preview("u2", preview.upload_id))
    with pytest.raises(AccessDeniedError):
        asyncio.run(import_service.confirm("u2", preview.upload_id))
    with pytest.raises(AccessDeniedError):
        asyncio.run(import_service.cancel("u2", preview.upload_id))

    assert preview.upload_id in registry


def test_expired_upload_is_not_found(import_service, fixtures_dir, clock):
    preview = upload_chase(import_service, fixtures_dir)
    clock.advance(minutes=31)

    with pytest.raises(NotFoundError):
        asyncio.run(import_service.confirm("u1", preview.upload_id))


def test_preview_refreshes_expiry(import_service, fixtures_dir, clock):
    """Looking at an upload again keeps it alive."""
    preview = upload_chase(import_service, fixtures_dir)

    clock.advance(minutes=20)
    refreshed = asyncio.run(import_service.preview("u1", preview.upload_id))
    clock.advance(minutes=20)

    assert refreshed.expires_at > preview.expires_at
    result = asyncio.run(import_service.confirm("u1", preview.upload_id))
    assert result.imported == 6


def test_preview_with_mapping(import_service, fixtures_dir):
    """Unknown headers can be mapped after upload."""
    text = read_fixture(fixtures_dir, "unknown_headers.csv")
    preview = asyncio.run(import_service.upload_csv("u1", "odd.csv", text))
    assert preview.requires_mapping
    assert preview.headers == ["When", "What", "Value"]

    mapped = asyncio.run(
        import_service.preview(
            "u1",
            preview.upload_id,
            mapping={"date": "When", "description": "What", "amount": "Value"},
        )
    )

    assert not mapped.requires_mapping
    assert mapped.parsed_count == 2
    assert mapped.detected_bank == "custom"

    result = asyncio.run(import_service.confirm("u1", preview.upload_id))
    assert result.imported == 2


def test_preview_keeps_earlier_date_format(import_service):
    """A re-preview that only adds a mapping reuses the upload's date format."""
    text = "When,What,Value\n03/04/2024,Coffee shop,-4.50\n"
    preview = asyncio.run(import_service.upload_csv("u1", "eu.csv", text, date_format="%d/%m/%Y"))
    assert preview.requires_mapping

    mapped = asyncio.run(
        import_service.preview(
            "u1",
            preview.upload_id,
            mapping={"date": "When", "description": "What", "amount": "Value"},
        )
    )

    assert mapped.sample_transactions[0].date == date(2024, 4, 3)


def test_preview_with_invalid_mapping_keeps_entry(import_service, fixtures_dir, registry):
    text = read_fixture(fixtures_dir, "unknown_headers.csv")
    preview = asyncio.run(import_service.upload_csv("u1", "odd.csv", text))

    with pytest.raises(ValidationError):
        asyncio.run(import_service.preview("u1", preview.upload_id, mapping={"date": "When"}))

    assert preview.upload_id in registry


def test_confirm_unmapped_upload_imports_nothing(import_service, fixtures_dir):
    text = read_fixture(fixtures_dir, "unknown_headers.csv")
    preview = asyncio.run(import_service.upload_csv("u1", "odd.csv", text))

    result = asyncio.run(import_service.confirm("u1", preview.upload_id))

    assert result.imported == 0
    assert result.error_count == 0


def test_statement_upload_and_confirm(import_service, fixtures_dir, temp_db):
    """Statements flow through the same pending lifecycle."""
    text = read_fixture(fixtures_dir, "statement.txt")
    preview = asyncio.run(import_service.upload_statement("u1", "jan.txt", text))

    assert preview.summary.reconciles is True
    assert preview.account_info.account_number == "000123456789"
    assert preview.parsed_count == 7

    with pytest.raises(ValidationError, match="Statement uploads"):
        asyncio.run(
            import_service.preview("u1", preview.upload_id, mapping={"date": "Date"})
        )

    result = asyncio.run(
        import_service.confirm("u1", preview.upload_id, company_id="c1", company_name="Acme LLC")
    )
    assert result.imported == 7

    record = temp_db.get_import_record(result.import_id)
    assert record.source == TransactionSource.STATEMENT_IMPORT
    assert record.bank == "chase"
    assert record.company_id == "c1"

    transactions = temp_db.list_transactions_by_import(result.import_id)
    assert all(t.company_name == "Acme LLC" for t in transactions)
    flagged = [t for t in transactions if t.needs_review]
    assert len(flagged) == 1
    assert flagged[0].amount == Decimal("100.00")


def test_rule_fetch_failure_still_imports(flaky_db, registry, fixtures_dir):
    """Without rules the vendor table still classifies."""
    flaky_db.fail_on.add("list_rules")
    service = ImportService(flaky_db, registry=registry)
    preview = upload_chase(service, fixtures_dir)

    result = asyncio.run(service.confirm("u1", preview.upload_id))

    assert result.imported == 6
    assert result.classification_stats.classified_by_user_rules == 0
    assert result.classification_stats.classified_by_default_vendors == 3


def test_row_failure_does_not_stop_import(flaky_db, registry, fixtures_dir):
    """A row that fails to save is reported; the rest are kept."""
    flaky_db.fail_descriptions.add("HOME DEPOT #4521")
    service = ImportService(flaky_db, registry=registry)
    preview = upload_chase(service, fixtures_dir)

    result = asyncio.run(service.confirm("u1", preview.upload_id))

    assert result.imported == 5
    assert result.error_count == 1
    assert result.errors[0].row_index == 4
    assert result.errors[0].description == "HOME DEPOT #4521"
    assert "insert failed" in result.errors[0].error
    assert flaky_db.get_import_record(result.import_id).error_count == 1


def test_result_samples_are_capped(flaky_db, registry):
    """Sample lists hold at most ten entries; counts stay exact."""
    descriptions = [f"STORE {i}" for i in range(25)]
    flaky_db.fail_descriptions.update(descriptions[:12])
    service = ImportService(flaky_db, registry=registry)

    text = generic_csv(descriptions) + "\n".join(f"bad,ROW {i},-1.00" for i in range(15)) + "\n"
    preview = asyncio.run(service.upload_csv("u1", "big.csv", text))

    assert preview.error_count == 15
    assert len(preview.errors) == 10
    assert len(preview.sample_transactions) == 10

    result = asyncio.run(service.confirm("u1", preview.upload_id, skip_duplicates=False))

    assert result.imported == 13
    assert result.error_count == 12
    assert len(result.errors) == 10


def test_large_import_classified_by_rules(import_service, rule_service, temp_db):
    """A large file is classified entirely by the user's rules."""
    asyncio.run(rule_service.create_rule("u1", "shell oil", "FUEL", priority=10))
    asyncio.run(
        rule_service.create_rule("u1", "^home depot", "SUPPLIES", match_type=MatchType.REGEX, priority=5)
    )
    descriptions = [
        f"SHELL OIL #{i}" if i % 3 != 2 else f"HOME DEPOT #{i}" for i in range(999)
    ]
    preview = asyncio.run(import_service.upload_csv("u1", "year.csv", generic_csv(descriptions)))

    result = asyncio.run(import_service.confirm("u1", preview.upload_id, skip_duplicates=False))

    assert result.imported == 999
    assert result.unclassified == 0
    assert result.classification_stats.classified_by_user_rules == 999

    transactions = temp_db.list_transactions_by_import(result.import_id)
    categories = [t.category for t in transactions]
    assert categories.count("FUEL") == 666
    assert categories.count("SUPPLIES") == 333
    assert all(t.classification_source == ClassificationSource.USER_RULE for t in transactions)


def test_confirm_counts_with_unmatched_third(import_service, rule_service, temp_db):
    """Rows neither rules nor vendors match are counted as unclassified."""
    asyncio.run(rule_service.create_rule("u1", "SHELL", "FUEL"))
    asyncio.run(rule_service.create_rule("u1", "HOME DEPOT", "SUPPLIES"))
    labels = ["SHELL", "HOME DEPOT", "MISC VENDOR"]
    descriptions = [f"{labels[i % 3]} {i}" for i in range(999)]
    preview = asyncio.run(import_service.upload_csv("u1", "mixed.csv", generic_csv(descriptions)))

    result = asyncio.run(import_service.confirm("u1", preview.upload_id, skip_duplicates=False))

    assert result.imported == 999
    assert result.classified == 666
    assert result.unclassified == 333
    assert result.classification_stats.classified_by_user_rules == 666
    categories = [t.category for t in temp_db.list_transactions_by_import(result.import_id)]
    assert categories.count(None) == 333


def test_confirm_and_cancel_race_confirm_first(import_service, temp_db, registry):
    """A cancel queued behind a running confirm finds the upload gone."""
    descriptions = [f"ROW {i}" for i in range(50)]
    preview = asyncio.run(import_service.upload_csv("u1", "race.csv", generic_csv(descriptions)))

    async def race():
        return await asyncio.gather(
            import_service.confirm("u1", preview.upload_id, skip_duplicates=False),
            import_service.cancel("u1", preview.upload_id),
            return_exceptions=True,
        )

    confirmed, cancelled = asyncio.run(race())

    assert confirmed.imported == 50
    assert isinstance(cancelled, NotFoundError)
    assert len(temp_db.list_transactions_by_import(confirmed.import_id, limit=100)) == 50
    assert preview.upload_id not in registry


def test_confirm_and_cancel_race_cancel_first(import_service, temp_db):
    descriptions = [f"ROW {i}" for i in range(50)]
    preview = asyncio.run(import_service.upload_csv("u1", "race.csv", generic_csv(descriptions)))

    async def race():
        return await asyncio.gather(
            import_service.cancel("u1", preview.upload_id),
            import_service.confirm("u1", preview.upload_id),
            return_exceptions=True,
        )

    cancelled, confirmed = asyncio.run(race())

    assert cancelled is True
    assert isinstance(confirmed, NotFoundError)
    assert temp_db.list_import_records("u1", status=None) == []
