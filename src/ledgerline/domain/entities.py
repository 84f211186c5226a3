"""Domain model entities for ledgerline.

These are pure data classes representing business concepts, independent of
database schema. Parsers produce ``TransactionCandidate`` objects; only the
import orchestrator turns them into persisted ``Transaction`` rows.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from ledgerline.utils.chunking import ChunkError


class TransactionType(str, Enum):
    """Direction of a transaction."""

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class SectionCode(str, Enum):
    """Statement section a line was read from."""

    DEPOSITS = "deposits"
    CHECKS = "checks"
    CARD = "card"
    ELECTRONIC = "electronic"
    FEES = "fees"
    OTHER = "other"


class MatchType(str, Enum):
    """How a classification rule pattern is tested against text."""

    CONTAINS = "contains"
    EXACT = "exact"
    STARTS_WITH = "starts_with"
    REGEX = "regex"


class AmountDirection(str, Enum):
    """Which amount signs a rule or vendor entry applies to."""

    ANY = "any"
    POSITIVE = "positive"
    NEGATIVE = "negative"

    def allows(self, amount: Optional[Decimal]) -> bool:
        if self == AmountDirection.ANY or amount is None:
            return True
        if self == AmountDirection.POSITIVE:
            return amount >= 0
        return amount < 0


class ClassificationSource(str, Enum):
    """Why a category was assigned."""

    USER_RULE = "user_rule"
    DEFAULT_VENDOR = "default_vendor"
    NONE = "none"


class TransactionSource(str, Enum):
    """Where a persisted transaction came from."""

    MANUAL = "manual"
    CSV_IMPORT = "csv_import"
    STATEMENT_IMPORT = "statement_import"


class ImportStatus(str, Enum):
    """Lifecycle of an import audit record."""

    COMPLETED = "completed"
    DELETED = "deleted"


@dataclass(frozen=True)
class ClassificationResult:
    """Category assignment attached to a candidate."""

    category: Optional[str] = None
    subcategory: Optional[str] = None
    vendor: Optional[str] = None
    source: ClassificationSource = ClassificationSource.NONE
    confidence: float = 0.0
    rule_id: Optional[int] = None

    def __post_init__(self):
        if self.source == ClassificationSource.NONE:
            if self.category is not None or self.confidence != 0:
                raise ValueError("Unclassified result cannot carry a category or confidence")
        if self.rule_id is not None and self.source != ClassificationSource.USER_RULE:
            raise ValueError("Only user rule results carry a rule id")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence {self.confidence} outside 0.0-1.0")

    @property
    def is_classified(self) -> bool:
        return self.source != ClassificationSource.NONE


UNCLASSIFIED = ClassificationResult()


@dataclass(frozen=True)
class TransactionCandidate:
    """Parsed transaction not yet persisted.

    ``date`` and ``amount`` are None only for needs-mapping rows, which keep
    the untouched source row in ``raw``.
    """

    date: Optional[date]
    amount: Optional[Decimal]
    description: str
    payee: Optional[str] = None
    type: TransactionType = TransactionType.EXPENSE
    section_code: Optional[SectionCode] = None
    needs_mapping: bool = False
    needs_review: bool = False
    row_index: Optional[int] = None
    reference_number: Optional[str] = None
    check_number: Optional[str] = None
    raw: Optional[dict[str, Any]] = None
    classification: Optional[ClassificationResult] = None

    @property
    def category(self) -> Optional[str]:
        if self.classification is None:
            return None
        return self.classification.category

    def with_classification(self, result: ClassificationResult) -> "TransactionCandidate":
        """Return a copy carrying ``result``."""
        return replace(self, classification=result)


@dataclass(frozen=True)
class ClassificationRule:
    """User-owned rule mapping text patterns to a category.

    For contains, exact and starts_with rules ``pattern`` is a comma-separated
    list of keyword fragments, any of which may match. For regex rules the
    whole pattern is one expression. ``amount_direction`` and the optional
    magnitude bounds further restrict which transactions the rule applies to.
    """

    id: int
    user_id: str
    pattern: str
    match_type: MatchType
    category: str
    subcategory: Optional[str] = None
    vendor: Optional[str] = None
    priority: int = 0
    is_active: bool = True
    amount_direction: AmountDirection = AmountDirection.ANY
    amount_min: Optional[Decimal] = None
    amount_max: Optional[Decimal] = None
    created_at: Optional[datetime] = None

    @property
    def keywords(self) -> list[str]:
        if self.match_type == MatchType.REGEX:
            return [self.pattern]
        return [part.strip() for part in self.pattern.split(",") if part.strip()]

    def applies_to_amount(self, amount: Optional[Decimal]) -> bool:
        """Check direction and magnitude bounds against an amount."""
        if not self.amount_direction.allows(amount):
            return False
        if amount is None:
            return True
        magnitude = abs(amount)
        if self.amount_min is not None and magnitude < self.amount_min:
            return False
        if self.amount_max is not None and magnitude > self.amount_max:
            return False
        return True


@dataclass(frozen=True)
class Transaction:
    """Persisted transaction domain entity."""

    id: int
    user_id: str
    date: date
    amount: Decimal
    description: Optional[str]
    payee: Optional[str]
    type: TransactionType
    source: TransactionSource
    import_id: Optional[int]
    created_at: datetime
    section_code: Optional[SectionCode] = None
    category: Optional[str] = None
    subcategory: Optional[str] = None
    vendor: Optional[str] = None
    classification_source: ClassificationSource = ClassificationSource.NONE
    confidence: float = 0.0
    rule_id: Optional[int] = None
    needs_review: bool = False
    reference_number: Optional[str] = None
    check_number: Optional[str] = None
    company_id: Optional[str] = None
    company_name: Optional[str] = None


@dataclass(frozen=True)
class ImportRecord:
    """Audit row for one confirmed import."""

    id: int
    user_id: str
    file_name: str
    source: TransactionSource
    status: ImportStatus
    created_at: datetime
    updated_at: datetime
    file_size: Optional[int] = None
    bank: Optional[str] = None
    bank_name: Optional[str] = None
    company_id: Optional[str] = None
    company_name: Optional[str] = None
    transaction_count: int = 0
    duplicate_count: int = 0
    error_count: int = 0
    date_range_start: Optional[date] = None
    date_range_end: Optional[date] = None


@dataclass(frozen=True)
class RowError:
    """A source row or line that could not be parsed."""

    row_index: int
    reason: str

    def __str__(self) -> str:
        return f"Row {self.row_index}: {self.reason}"


@dataclass(frozen=True)
class AccountInfo:
    """Account header details printed on a statement."""

    account_number: Optional[str] = None
    period_start: Optional[date] = None
    period_end: Optional[date] = None
    opening_balance: Optional[Decimal] = None
    closing_balance: Optional[Decimal] = None


@dataclass(frozen=True)
class StatementSummary:
    """Counts and totals for reconciling a parsed statement."""

    total_transactions: int
    section_counts: dict[str, int]
    section_totals: dict[str, Decimal]
    reported_totals: dict[str, Decimal]
    total_income: Decimal
    total_expenses: Decimal
    net: Decimal
    needs_review_count: int
    dropped_lines: int
    reconciles: Optional[bool] = None


@dataclass(frozen=True)
class ParseResult:
    """Normalized output of the CSV and statement parsers."""

    success: bool
    transactions: list[TransactionCandidate] = field(default_factory=list)
    detected_bank: Optional[str] = None
    detected_bank_name: Optional[str] = None
    headers: list[str] = field(default_factory=list)
    total_rows: int = 0
    parsed_count: int = 0
    requires_mapping: bool = False
    errors: list[RowError] = field(default_factory=list)
    error: Optional[str] = None
    sample_rows: list[dict[str, str]] = field(default_factory=list)
    account_info: Optional[AccountInfo] = None
    summary: Optional[StatementSummary] = None

    @property
    def valid_transactions(self) -> list[TransactionCandidate]:
        return [t for t in self.transactions if not t.needs_mapping]


@dataclass(frozen=True)
class ClassificationStats:
    """Per-source counts of one classification batch."""

    total: int = 0
    classified_by_user_rules: int = 0
    classified_by_default_vendors: int = 0
    unclassified: int = 0


@dataclass(frozen=True)
class BatchClassification:
    """Candidates split by whether a category was assigned.

    ``candidates`` keeps every classified copy in input order.
    """

    candidates: list[TransactionCandidate]
    classified: list[TransactionCandidate]
    unclassified: list[TransactionCandidate]
    stats: ClassificationStats


@dataclass
class PendingImport:
    """In-memory state of one upload awaiting confirm or cancel."""

    upload_id: str
    user_id: str
    file_name: str
    source: TransactionSource
    raw_text: str
    parse_result: ParseResult
    created_at: datetime
    expires_at: datetime
    file_size: Optional[int] = None
    bank_format: str = "auto"
    mapping: Optional[dict[str, str]] = None
    date_format: Optional[str] = None
    company_id: Optional[str] = None
    company_name: Optional[str] = None

    @property
    def candidates(self) -> list[TransactionCandidate]:
        return self.parse_result.transactions


@dataclass(frozen=True)
class PreviewResult:
    """What a caller sees after upload or re-preview."""

    upload_id: str
    file_name: str
    success: bool
    detected_bank: Optional[str]
    detected_bank_name: Optional[str]
    headers: list[str]
    total_rows: int
    parsed_count: int
    sample_transactions: list[TransactionCandidate]
    requires_mapping: bool
    errors: list[RowError]
    error_count: int
    expires_at: datetime
    error: Optional[str] = None
    sample_rows: list[dict[str, str]] = field(default_factory=list)
    account_info: Optional[AccountInfo] = None
    summary: Optional[StatementSummary] = None


@dataclass(frozen=True)
class DuplicateSkip:
    """A candidate skipped as a probable duplicate."""

    row_index: Optional[int]
    date: date
    amount: Decimal
    description: str


@dataclass(frozen=True)
class ImportRowError:
    """A candidate whose persistence failed."""

    row_index: Optional[int]
    description: str
    error: str


@dataclass(frozen=True)
class UnclassifiedTransaction:
    """Persisted transaction left without a category."""

    id: int
    description: str
    amount: Decimal
    date: date


@dataclass(frozen=True)
class ConfirmResult:
    """Outcome of confirming one pending import.

    ``duplicates`` and ``errors`` hold at most a small sample; the counts
    are always exact.
    """

    import_id: int
    imported: int
    classified: int
    unclassified: int
    unclassified_transactions: list[UnclassifiedTransaction]
    duplicate_count: int
    duplicates: list[DuplicateSkip]
    error_count: int
    errors: list[ImportRowError]
    date_range: tuple[Optional[date], Optional[date]]
    classification_stats: Optional[ClassificationStats] = None


@dataclass(frozen=True)
class DeleteImportResult:
    """Outcome of deleting an import record."""

    import_id: int
    transactions_affected: int
    transactions_failed: int
    deleted_transactions: bool
    record_removed: bool
    errors: list[ChunkError] = field(default_factory=list)


@dataclass(frozen=True)
class ApplyRulesResult:
    """Outcome of re-classifying persisted transactions."""

    checked: int
    classified: int
    unclassified: int
    rules_count: int
    stats: ClassificationStats
    updated: int
    failed: int
    errors: list[ChunkError] = field(default_factory=list)
