"""Import orchestrator: upload, preview, confirm and cancel.

An upload is parsed straight away and parked in the pending registry. Nothing
is written to the database until confirm, which creates the import record,
persists rows one at a time in source order, then finalizes the record and
drops the pending entry.
"""

import asyncio
import logging
import uuid
from datetime import date
from typing import Optional

from ledgerline.database.base import Database
from ledgerline.domain.bank_formats import AUTO
from ledgerline.domain.classification import classify_batch
from ledgerline.domain.csv_parser import parse_csv
from ledgerline.domain.default_vendors import DefaultVendor
from ledgerline.domain.duplicates import DuplicateDetector
from ledgerline.domain.entities import (
    ClassificationRule,
    ClassificationSource,
    ConfirmResult,
    DuplicateSkip,
    ImportRowError,
    ParseResult,
    PendingImport,
    PreviewResult,
    TransactionCandidate,
    TransactionSource,
    UnclassifiedTransaction,
)
from ledgerline.domain.errors import (
    AccessDeniedError,
    NotFoundError,
    ValidationError,
    upload_access_denied,
    upload_not_found,
)
from ledgerline.domain.pending import PendingImportRegistry
from ledgerline.domain.statement_parser import parse_statement
from ledgerline.utils.text import truncate

logger = logging.getLogger(__name__)

# Cap on sample lists returned to callers; counts are always exact
RESULT_SAMPLE_LIMIT = 10


class ImportService:
    """Service driving pending imports from upload to a terminal state."""

    def __init__(
        self,
        db: Database,
        registry: Optional[PendingImportRegistry] = None,
        default_vendors: Optional[list[DefaultVendor]] = None,
    ):
        """Initialize import service.

        Args:
            db: Database instance
            registry: Pending import registry; a private one is created if omitted
            default_vendors: Override for the built-in vendor table
        """
        self.db = db
        self.registry = registry if registry is not None else PendingImportRegistry()
        self.default_vendors = default_vendors
        self.duplicate_detector = DuplicateDetector(db)

    async def upload_csv(
        self,
        user_id: str,
        file_name: str,
        text: str,
        bank_format: str = AUTO,
        mapping: Optional[dict[str, str]] = None,
        date_format: Optional[str] = None,
        company_id: Optional[str] = None,
        company_name: Optional[str] = None,
        file_size: Optional[int] = None,
    ) -> PreviewResult:
        """Parse CSV text and park it as a pending import.

        Raises:
            ValidationError: If the bank format hint or mapping is invalid
        """
        parse_result = parse_csv(text, bank_format, mapping, date_format)
        entry = self._new_entry(
            user_id=user_id,
            file_name=file_name,
            source=TransactionSource.CSV_IMPORT,
            text=text,
            parse_result=parse_result,
            file_size=file_size,
            company_id=company_id,
            company_name=company_name,
        )
        entry.bank_format = bank_format
        entry.mapping = mapping
        entry.date_format = date_format
        self.registry.add(entry)
        return self._preview(entry)

    async def upload_statement(
        self,
        user_id: str,
        file_name: str,
        text: str,
        year: Optional[int] = None,
        company_id: Optional[str] = None,
        company_name: Optional[str] = None,
        file_size: Optional[int] = None,
    ) -> PreviewResult:
        """Extract statement text and park it as a pending import."""
        parse_result = parse_statement(text, year=year)
        entry = self._new_entry(
            user_id=user_id,
            file_name=file_name,
            source=TransactionSource.STATEMENT_IMPORT,
            text=text,
            parse_result=parse_result,
            file_size=file_size,
            company_id=company_id,
            company_name=company_name,
        )
        self.registry.add(entry)
        return self._preview(entry)

    async def preview(
        self,
        user_id: str,
        upload_id: str,
        mapping: Optional[dict[str, str]] = None,
        bank_format: Optional[str] = None,
        date_format: Optional[str] = None,
    ) -> PreviewResult:
        """Show a pending import again, optionally re-parsed with a new mapping.

        Refreshes the upload's expiry.

        Raises:
            NotFoundError: If the upload is gone
            AccessDeniedError: If another user owns the upload
            ValidationError: If the new mapping is invalid, or a mapping is
                given for a statement upload
        """
        async with self.registry.lock(upload_id):
            entry = self._owned_entry(user_id, upload_id)
            if mapping is not None or bank_format is not None or date_format is not None:
                if entry.source == TransactionSource.STATEMENT_IMPORT:
                    raise ValidationError("Statement uploads do not take a column mapping")
                if bank_format is None:
                    bank_format = AUTO if mapping is not None else entry.bank_format
                if mapping is None and bank_format == entry.bank_format:
                    mapping = entry.mapping
                if date_format is None:
                    date_format = entry.date_format
                entry.parse_result = parse_csv(entry.raw_text, bank_format, mapping, date_format)
                entry.bank_format = bank_format
                entry.mapping = mapping
                entry.date_format = date_format
            self.registry.touch(entry)
            return self._preview(entry)

    async def confirm(
        self,
        user_id: str,
        upload_id: str,
        skip_duplicates: bool = True,
        classify: bool = True,
        company_id: Optional[str] = None,
        company_name: Optional[str] = None,
    ) -> ConfirmResult:
        """Persist a pending import.

        Args:
            user_id: Caller
            upload_id: Pending import to confirm
            skip_duplicates: Skip rows that look like already-imported ones
            classify: Run the classification engine before persisting
            company_id: Overrides the upload's company
            company_name: Overrides the upload's company name

        Returns:
            ConfirmResult with exact counts and bounded samples

        Raises:
            NotFoundError: If the upload is gone
            AccessDeniedError: If another user owns the upload
        """
        async with self.registry.lock(upload_id):
            entry = self._owned_entry(user_id, upload_id)
            parse_result = entry.parse_result
            candidates = parse_result.valid_transactions

            stats = None
            if classify:
                rules = await self._fetch_rules(user_id)
                batch = classify_batch(candidates, rules, self.default_vendors)
                candidates = batch.candidates
                stats = batch.stats

            company_id = company_id or entry.company_id
            company_name = company_name or entry.company_name

            import_id = await asyncio.to_thread(
                self.db.create_import_record,
                user_id,
                entry.file_name,
                entry.source,
                entry.file_size,
                parse_result.detected_bank,
                parse_result.detected_bank_name,
                company_id,
                company_name,
            )
            logger.info(
                "Confirming upload %s as import %d (%d candidates)",
                upload_id,
                import_id,
                len(candidates),
            )

            imported = 0
            duplicates: list[DuplicateSkip] = []
            errors: list[ImportRowError] = []
            unclassified: list[UnclassifiedTransaction] = []
            first_date: Optional[date] = None
            last_date: Optional[date] = None

            for candidate in candidates:
                if skip_duplicates and await self.duplicate_detector.check(user_id, candidate):
                    duplicates.append(
                        DuplicateSkip(
                            row_index=candidate.row_index,
                            date=candidate.date,
                            amount=candidate.amount,
                            description=candidate.description,
                        )
                    )
                    continue
                try:
                    transaction_id = await self._persist(
                        user_id, candidate, entry.source, import_id, company_id, company_name
                    )
                except Exception as e:
                    logger.warning(
                        "Failed to save row %s of upload %s: %s", candidate.row_index, upload_id, e
                    )
                    errors.append(
                        ImportRowError(
                            row_index=candidate.row_index,
                            description=truncate(candidate.description),
                            error=str(e),
                        )
                    )
                    continue

                imported += 1
                if first_date is None or candidate.date < first_date:
                    first_date = candidate.date
                if last_date is None or candidate.date > last_date:
                    last_date = candidate.date
                if not candidate.category:
                    unclassified.append(
                        UnclassifiedTransaction(
                            id=transaction_id,
                            description=candidate.description,
                            amount=candidate.amount,
                            date=candidate.date,
                        )
                    )

            await asyncio.to_thread(
                self.db.finalize_import_record,
                import_id,
                imported,
                len(duplicates),
                len(errors),
                first_date,
                last_date,
            )
            self.registry.remove(upload_id)

        logger.info(
            "Import %d complete: %d imported, %d duplicates, %d errors",
            import_id,
            imported,
            len(duplicates),
            len(errors),
        )
        return ConfirmResult(
            import_id=import_id,
            imported=imported,
            classified=imported - len(unclassified),
            unclassified=len(unclassified),
            unclassified_transactions=unclassified,
            duplicate_count=len(duplicates),
            duplicates=duplicates[:RESULT_SAMPLE_LIMIT],
            error_count=len(errors),
            errors=errors[:RESULT_SAMPLE_LIMIT],
            date_range=(first_date, last_date),
            classification_stats=stats,
        )

    async def cancel(self, user_id: str, upload_id: str) -> bool:
        """Discard a pending import without persisting anything.

        Raises:
            NotFoundError: If the upload is gone
            AccessDeniedError: If another user owns the upload
        """
        async with self.registry.lock(upload_id):
            self._owned_entry(user_id, upload_id)
            self.registry.remove(upload_id)
        logger.info("Upload %s cancelled", upload_id)
        return True

    def _new_entry(
        self,
        user_id: str,
        file_name: str,
        source: TransactionSource,
        text: str,
        parse_result: ParseResult,
        file_size: Optional[int],
        company_id: Optional[str],
        company_name: Optional[str],
    ) -> PendingImport:
        now = self.registry.now()
        return PendingImport(
            upload_id=str(uuid.uuid4()),
            user_id=user_id,
            file_name=file_name,
            source=source,
            raw_text=text,
            parse_result=parse_result,
            created_at=now,
            expires_at=now + self.registry.ttl,
            file_size=file_size if file_size is not None else len(text.encode("utf-8")),
            company_id=company_id,
            company_name=company_name,
        )

    def _owned_entry(self, user_id: str, upload_id: str) -> PendingImport:
        entry = self.registry.get(upload_id)
        if entry is None:
            raise NotFoundError(upload_not_found(upload_id))
        if entry.user_id != user_id:
            logger.warning("User %s denied access to upload %s", user_id, upload_id)
            raise AccessDeniedError(upload_access_denied(upload_id))
        return entry

    def _preview(self, entry: PendingImport) -> PreviewResult:
        result = entry.parse_result
        return PreviewResult(
            upload_id=entry.upload_id,
            file_name=entry.file_name,
            success=result.success,
            detected_bank=result.detected_bank,
            detected_bank_name=result.detected_bank_name,
            headers=result.headers,
            total_rows=result.total_rows,
            parsed_count=result.parsed_count,
            sample_transactions=result.transactions[:RESULT_SAMPLE_LIMIT],
            requires_mapping=result.requires_mapping,
            errors=result.errors[:RESULT_SAMPLE_LIMIT],
            error_count=len(result.errors),
            expires_at=entry.expires_at,
            error=result.error,
            sample_rows=result.sample_rows,
            account_info=result.account_info,
            summary=result.summary,
        )

    async def _fetch_rules(self, user_id: str) -> list[ClassificationRule]:
        try:
            return await asyncio.to_thread(self.db.list_rules, user_id, True)
        except Exception as e:
            logger.warning("Could not load rules for user %s, classifying without them: %s", user_id, e)
            return []

    async def _persist(
        self,
        user_id: str,
        candidate: TransactionCandidate,
        source: TransactionSource,
        import_id: int,
        company_id: Optional[str],
        company_name: Optional[str],
    ) -> int:
        result = candidate.classification
        return await asyncio.to_thread(
            self.db.create_transaction,
            user_id=user_id,
            date=candidate.date,
            amount=candidate.amount,
            description=candidate.description,
            type=candidate.type,
            source=source,
            import_id=import_id,
            payee=candidate.payee,
            section_code=candidate.section_code,
            category=result.category if result else None,
            subcategory=result.subcategory if result else None,
            vendor=result.vendor if result else None,
            classification_source=result.source if result else ClassificationSource.NONE,
            confidence=result.confidence if result else 0.0,
            rule_id=result.rule_id if result else None,
            needs_review=candidate.needs_review,
            reference_number=candidate.reference_number,
            check_number=candidate.check_number,
            company_id=company_id,
            company_name=company_name,
        )
