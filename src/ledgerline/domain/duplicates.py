"""Probable-duplicate detection for imported transactions."""

import asyncio
import logging
from decimal import Decimal
from typing import Iterable, Optional

from ledgerline.database.base import Database
from ledgerline.domain.entities import Transaction, TransactionCandidate
from ledgerline.utils.text import normalize_text

logger = logging.getLogger(__name__)

AMOUNT_TOLERANCE = Decimal("0.01")


def descriptions_overlap(first: Optional[str], second: Optional[str]) -> bool:
    """Equal, or one contains the other, after case-folding and trimming."""
    a = normalize_text(first)
    b = normalize_text(second)
    if a == b:
        return True
    if not a or not b:
        return False
    return a in b or b in a


def is_duplicate(candidate: TransactionCandidate, existing: Iterable[Transaction]) -> bool:
    """Decide whether a candidate repeats an already-persisted transaction.

    Args:
        candidate: Parsed transaction
        existing: Persisted transactions dated the same day as the candidate

    Returns:
        True if some existing transaction's amount differs by less than one
        cent and its description overlaps the candidate's
    """
    if candidate.amount is None:
        return False
    for txn in existing:
        if abs(Decimal(txn.amount) - candidate.amount) >= AMOUNT_TOLERANCE:
            continue
        if descriptions_overlap(txn.description, candidate.description):
            return True
    return False


class DuplicateDetector:
    """Looks up same-day transactions and applies ``is_duplicate``."""

    def __init__(self, db: Database):
        self.db = db

    async def check(self, user_id: str, candidate: TransactionCandidate) -> bool:
        """Return True for a probable duplicate.

        A failed lookup is logged and reported as not a duplicate so the
        import can go on.
        """
        if candidate.date is None:
            return False
        try:
            existing = await asyncio.to_thread(
                self.db.get_transactions_by_date, user_id, candidate.date
            )
        except Exception as e:
            logger.warning(
                "Duplicate check failed for %s %s: %s", candidate.date, candidate.description, e
            )
            return False
        return is_duplicate(candidate, existing)
