"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain services
from ledgerline.domain.entities import (
    AmountDirection,
    ClassificationRule,
    ClassificationSource,
    ImportRecord,
    ImportStatus,
    MatchType,
    SectionCode,
    Transaction,
    TransactionSource,
    TransactionType,
)

# Largest id list a single bulk read or write may carry
MAX_ITEMS_PER_CALL = 250

# Fields update_transactions() may change
UPDATABLE_TRANSACTION_FIELDS = frozenset(
    {
        "category",
        "subcategory",
        "vendor",
        "classification_source",
        "confidence",
        "rule_id",
        "needs_review",
        "import_id",
        "company_id",
        "company_name",
    }
)


class Database(ABC):
    """Abstract database interface for ledgerline.

    Bulk id-list operations accept at most ``max_items_per_call`` ids and
    raise ValueError beyond that; callers split their work with the
    chunking helpers.
    """

    max_items_per_call: int = MAX_ITEMS_PER_CALL

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Import record operations
    @abstractmethod
    def create_import_record(
        self,
        user_id: str,
        file_name: str,
        source: TransactionSource,
        file_size: Optional[int] = None,
        bank: Optional[str] = None,
        bank_name: Optional[str] = None,
        company_id: Optional[str] = None,
        company_name: Optional[str] = None,
    ) -> int:
        """Create an import record with zero counts. Returns record ID."""
        pass

    @abstractmethod
    def get_import_record(self, import_id: int) -> Optional[ImportRecord]:
        """Get import record by ID."""
        pass

    @abstractmethod
    def finalize_import_record(
        self,
        import_id: int,
        transaction_count: int,
        duplicate_count: int,
        error_count: int,
        date_range_start: Optional[date],
        date_range_end: Optional[date],
    ) -> None:
        """Write the final counts and date range of an import."""
        pass

    @abstractmethod
    def set_import_record_status(self, import_id: int, status: ImportStatus) -> None:
        """Change an import record's status."""
        pass

    @abstractmethod
    def list_import_records(
        self,
        user_id: str,
        company_id: Optional[str] = None,
        status: Optional[ImportStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ImportRecord]:
        """List a user's import records, newest first."""
        pass

    @abstractmethod
    def delete_import_record(self, import_id: int) -> None:
        """Delete an import record. Its transactions must be gone or unlinked."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        user_id: str,
        date: date,
        amount: Decimal,
        description: Optional[str],
        type: TransactionType,
        source: TransactionSource = TransactionSource.MANUAL,
        import_id: Optional[int] = None,
        payee: Optional[str] = None,
        section_code: Optional[SectionCode] = None,
        category: Optional[str] = None,
        subcategory: Optional[str] = None,
        vendor: Optional[str] = None,
        classification_source: ClassificationSource = ClassificationSource.NONE,
        confidence: float = 0.0,
        rule_id: Optional[int] = None,
        needs_review: bool = False,
        reference_number: Optional[str] = None,
        check_number: Optional[str] = None,
        company_id: Optional[str] = None,
        company_name: Optional[str] = None,
    ) -> int:
        """Create a new transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transactions_by_date(self, user_id: str, txn_date: date) -> list[Transaction]:
        """Get a user's transactions dated exactly ``txn_date``."""
        pass

    @abstractmethod
    def get_transactions_by_ids(self, transaction_ids: list[int]) -> list[Transaction]:
        """Get transactions by ID, in ID order."""
        pass

    @abstractmethod
    def list_transaction_ids(self, user_id: str, uncategorized_only: bool = False) -> list[int]:
        """List a user's transaction IDs in ascending order."""
        pass

    @abstractmethod
    def list_transactions_by_import(
        self, import_id: int, limit: Optional[int] = None, offset: int = 0
    ) -> list[Transaction]:
        """List transactions created by an import, by date then ID."""
        pass

    @abstractmethod
    def list_transaction_ids_by_import(self, import_id: int) -> list[int]:
        """List IDs of transactions created by an import."""
        pass

    @abstractmethod
    def update_transactions(self, transaction_ids: list[int], patch: dict[str, Any]) -> int:
        """Apply the same field changes to several transactions. Returns rows updated."""
        pass

    @abstractmethod
    def delete_transactions(self, transaction_ids: list[int]) -> int:
        """Delete several transactions. Returns rows deleted."""
        pass

    # Classification rule operations
    @abstractmethod
    def create_rule(
        self,
        user_id: str,
        pattern: str,
        match_type: MatchType,
        category: str,
        subcategory: Optional[str] = None,
        vendor: Optional[str] = None,
        priority: int = 0,
        is_active: bool = True,
        amount_direction: AmountDirection = AmountDirection.ANY,
        amount_min: Optional[Decimal] = None,
        amount_max: Optional[Decimal] = None,
    ) -> int:
        """Create a classification rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[ClassificationRule]:
        """Get classification rule by ID."""
        pass

    @abstractmethod
    def list_rules(self, user_id: str, active_only: bool = True) -> list[ClassificationRule]:
        """List a user's rules by descending priority, then ID."""
        pass

    @abstractmethod
    def set_rule_active(self, rule_id: int, is_active: bool) -> None:
        """Enable or disable a rule."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule."""
        pass
