"""Mapper functions to convert between domain models and SQLAlchemy models.

Enum-valued columns are stored as plain strings; this layer turns them back
into the domain enums.
"""

from decimal import Decimal
from typing import Optional

from ledgerline.domain import entities as domain
from ledgerline.database.models import (
    ClassificationRule as ORMClassificationRule,
    ImportRecord as ORMImportRecord,
    Transaction as ORMTransaction,
)


def _decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    return Decimal(str(value)).quantize(Decimal("0.01"))


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        user_id=orm_transaction.user_id,
        date=orm_transaction.date,
        amount=_decimal(orm_transaction.amount),
        description=orm_transaction.description,
        payee=orm_transaction.payee,
        type=domain.TransactionType(orm_transaction.type),
        source=domain.TransactionSource(orm_transaction.source),
        import_id=orm_transaction.import_id,
        created_at=orm_transaction.created_at,
        section_code=(
            domain.SectionCode(orm_transaction.section_code)
            if orm_transaction.section_code
            else None
        ),
        category=orm_transaction.category,
        subcategory=orm_transaction.subcategory,
        vendor=orm_transaction.vendor,
        classification_source=domain.ClassificationSource(orm_transaction.classification_source),
        confidence=orm_transaction.confidence,
        rule_id=orm_transaction.rule_id,
        needs_review=orm_transaction.needs_review,
        reference_number=orm_transaction.reference_number,
        check_number=orm_transaction.check_number,
        company_id=orm_transaction.company_id,
        company_name=orm_transaction.company_name,
    )


def import_record_to_domain(orm_record: ORMImportRecord) -> domain.ImportRecord:
    """Convert SQLAlchemy ImportRecord model to domain ImportRecord entity."""
    return domain.ImportRecord(
        id=orm_record.id,
        user_id=orm_record.user_id,
        file_name=orm_record.file_name,
        source=domain.TransactionSource(orm_record.source),
        status=domain.ImportStatus(orm_record.status),
        created_at=orm_record.created_at,
        updated_at=orm_record.updated_at,
        file_size=orm_record.file_size,
        bank=orm_record.bank,
        bank_name=orm_record.bank_name,
        company_id=orm_record.company_id,
        company_name=orm_record.company_name,
        transaction_count=orm_record.transaction_count,
        duplicate_count=orm_record.duplicate_count,
        error_count=orm_record.error_count,
        date_range_start=orm_record.date_range_start,
        date_range_end=orm_record.date_range_end,
    )


def rule_to_domain(orm_rule: ORMClassificationRule) -> domain.ClassificationRule:
    """Convert SQLAlchemy ClassificationRule model to domain entity."""
    return domain.ClassificationRule(
        id=orm_rule.id,
        user_id=orm_rule.user_id,
        pattern=orm_rule.pattern,
        match_type=domain.MatchType(orm_rule.match_type),
        category=orm_rule.category,
        subcategory=orm_rule.subcategory,
        vendor=orm_rule.vendor,
        priority=orm_rule.priority,
        is_active=orm_rule.is_active,
        amount_direction=domain.AmountDirection(orm_rule.amount_direction),
        amount_min=_decimal(orm_rule.amount_min),
        amount_max=_decimal(orm_rule.amount_max),
        created_at=orm_rule.created_at,
    )
