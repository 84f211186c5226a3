"""Import record domain service."""

import asyncio
import logging
from typing import Optional

from ledgerline.database.base import Database
from ledgerline.domain.entities import (
    DeleteImportResult,
    ImportRecord,
    ImportStatus,
    Transaction,
)
from ledgerline.domain.errors import (
    ConflictError,
    NotFoundError,
    import_already_deleted,
    import_not_found,
)
from ledgerline.utils.chunking import BATCH_SIZE, update_chunked

logger = logging.getLogger(__name__)

MAX_RECORDS_PAGE = 100
MAX_TRANSACTIONS_PAGE = 500


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


class ImportRecordService:
    """Service for browsing and deleting confirmed imports."""

    def __init__(self, db: Database):
        """Initialize import record service.

        Args:
            db: Database instance
        """
        self.db = db

    async def list_imports(
        self,
        user_id: str,
        company_id: Optional[str] = None,
        status: Optional[ImportStatus] = ImportStatus.COMPLETED,
        limit: int = 50,
        offset: int = 0,
    ) -> list[ImportRecord]:
        """List a user's imports, newest first.

        Args:
            user_id: Owner
            company_id: Only imports for this company
            status: Only imports in this status; None lists every status
            limit: Page size, clamped to 1-100
            offset: Rows to skip, at least 0
        """
        return await asyncio.to_thread(
            self.db.list_import_records,
            user_id,
            company_id,
            status,
            _clamp(limit, 1, MAX_RECORDS_PAGE),
            max(offset, 0),
        )

    async def get_import(self, user_id: str, import_id: int) -> ImportRecord:
        """Get one import owned by ``user_id``.

        Raises:
            NotFoundError: If the import does not exist or belongs to someone else
        """
        record = await asyncio.to_thread(self.db.get_import_record, import_id)
        if record is None or record.user_id != user_id:
            raise NotFoundError(import_not_found(import_id))
        return record

    async def list_transactions(
        self, user_id: str, import_id: int, limit: int = 100, offset: int = 0
    ) -> list[Transaction]:
        """List transactions an import created, limit clamped to 1-500."""
        await self.get_import(user_id, import_id)
        return await asyncio.to_thread(
            self.db.list_transactions_by_import,
            import_id,
            _clamp(limit, 1, MAX_TRANSACTIONS_PAGE),
            max(offset, 0),
        )

    async def delete_import(
        self,
        user_id: str,
        import_id: int,
        delete_transactions: bool = False,
        remove_record: bool = False,
    ) -> DeleteImportResult:
        """Delete an import.

        Linked transactions are either unlinked (kept, with no import id) or
        deleted, in chunks so one failing chunk does not stop the rest. The
        record is then marked deleted, or removed entirely when
        ``remove_record`` is set and every transaction was handled.

        Raises:
            NotFoundError: If the import does not exist or belongs to someone else
            ConflictError: If the import is already marked deleted and would
                only be marked again
        """
        record = await self.get_import(user_id, import_id)
        if record.status == ImportStatus.DELETED and not remove_record:
            raise ConflictError(import_already_deleted(import_id))

        ids = await asyncio.to_thread(self.db.list_transaction_ids_by_import, import_id)

        if delete_transactions:

            async def op(group: list[int]) -> int:
                return await asyncio.to_thread(self.db.delete_transactions, group)

        else:

            async def op(group: list[int]) -> int:
                return await asyncio.to_thread(self.db.update_transactions, group, {"import_id": None})

        outcome = await update_chunked(ids, BATCH_SIZE, op)

        record_removed = False
        if remove_record and outcome.failed == 0:
            await asyncio.to_thread(self.db.delete_import_record, import_id)
            record_removed = True
        else:
            if remove_record:
                logger.warning(
                    "Keeping import %d: %d transaction(s) could not be detached", import_id, outcome.failed
                )
            await asyncio.to_thread(self.db.set_import_record_status, import_id, ImportStatus.DELETED)

        logger.info(
            "Import %d deleted (%s %d transactions, %d failed)",
            import_id,
            "deleted" if delete_transactions else "unlinked",
            outcome.success,
            outcome.failed,
        )
        return DeleteImportResult(
            import_id=import_id,
            transactions_affected=outcome.success,
            transactions_failed=outcome.failed,
            deleted_transactions=delete_transactions,
            record_removed=record_removed,
            errors=outcome.errors,
        )
