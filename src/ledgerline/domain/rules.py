"""Classification rule domain service."""

import asyncio
import logging
from decimal import Decimal
from typing import Optional, Union

from ledgerline.database.base import Database
from ledgerline.domain.classification import classify_batch, validate_rule_pattern
from ledgerline.domain.default_vendors import DefaultVendor
from ledgerline.domain.entities import (
    AmountDirection,
    ApplyRulesResult,
    ClassificationRule,
    MatchType,
    Transaction,
    TransactionCandidate,
)
from ledgerline.domain.errors import NotFoundError, ValidationError, rule_not_found
from ledgerline.utils.chunking import BATCH_SIZE, ChunkError, map_chunked, update_chunked

logger = logging.getLogger(__name__)


def _candidate_from_transaction(txn: Transaction) -> TransactionCandidate:
    return TransactionCandidate(
        date=txn.date,
        amount=txn.amount,
        description=txn.description or "",
        payee=txn.payee,
        type=txn.type,
        section_code=txn.section_code,
        reference_number=txn.reference_number,
        check_number=txn.check_number,
    )


class RuleService:
    """Service for managing classification rules and applying them."""

    def __init__(self, db: Database, default_vendors: Optional[list[DefaultVendor]] = None):
        """Initialize rule service.

        Args:
            db: Database instance
            default_vendors: Override for the built-in vendor table
        """
        self.db = db
        self.default_vendors = default_vendors

    async def create_rule(
        self,
        user_id: str,
        pattern: str,
        category: str,
        match_type: Union[MatchType, str] = MatchType.CONTAINS,
        subcategory: Optional[str] = None,
        vendor: Optional[str] = None,
        priority: int = 0,
        amount_direction: Union[AmountDirection, str] = AmountDirection.ANY,
        amount_min: Optional[Decimal] = None,
        amount_max: Optional[Decimal] = None,
    ) -> int:
        """Create a rule.

        Args:
            user_id: Owner
            pattern: Comma-separated keywords, or one regular expression
            category: Category assigned on match
            match_type: contains, exact, starts_with or regex
            subcategory: Optional subcategory assigned on match
            vendor: Optional vendor name assigned on match
            priority: Higher priorities are tried first
            amount_direction: any, positive or negative
            amount_min: Smallest absolute amount the rule applies to
            amount_max: Largest absolute amount the rule applies to

        Returns:
            Rule ID

        Raises:
            ValidationError: If the rule could never be used as given
        """
        try:
            match_type = MatchType(match_type)
        except ValueError:
            raise ValidationError(f"Unknown match type '{match_type}'")
        try:
            amount_direction = AmountDirection(amount_direction)
        except ValueError:
            raise ValidationError(f"Unknown amount direction '{amount_direction}'")

        validate_rule_pattern(match_type, pattern)
        if not category or not category.strip():
            raise ValidationError("Rule category cannot be empty")
        for bound in (amount_min, amount_max):
            if bound is not None and bound < 0:
                raise ValidationError("Amount bounds apply to absolute amounts and cannot be negative")
        if amount_min is not None and amount_max is not None and amount_min > amount_max:
            raise ValidationError(f"Minimum amount {amount_min} is larger than maximum {amount_max}")

        rule_id = await asyncio.to_thread(
            self.db.create_rule,
            user_id,
            pattern.strip(),
            match_type,
            category.strip(),
            subcategory,
            vendor,
            priority,
            True,
            amount_direction,
            amount_min,
            amount_max,
        )
        logger.info("Created %s rule %d for user %s", match_type.value, rule_id, user_id)
        return rule_id

    async def list_rules(self, user_id: str, active_only: bool = True) -> list[ClassificationRule]:
        """List rules by descending priority, then ID."""
        return await asyncio.to_thread(self.db.list_rules, user_id, active_only)

    async def get_rule(self, user_id: str, rule_id: int) -> ClassificationRule:
        """Get a rule owned by ``user_id``.

        Raises:
            NotFoundError: If the rule does not exist or belongs to someone else
        """
        rule = await asyncio.to_thread(self.db.get_rule, rule_id)
        if rule is None or rule.user_id != user_id:
            raise NotFoundError(rule_not_found(rule_id))
        return rule

    async def set_active(self, user_id: str, rule_id: int, is_active: bool) -> None:
        await self.get_rule(user_id, rule_id)
        await asyncio.to_thread(self.db.set_rule_active, rule_id, is_active)

    async def delete_rule(self, user_id: str, rule_id: int) -> None:
        await self.get_rule(user_id, rule_id)
        await asyncio.to_thread(self.db.delete_rule, rule_id)
        logger.info("Deleted rule %d", rule_id)

    async def apply_rules(
        self, user_id: str, transaction_ids: Optional[list[int]] = None
    ) -> ApplyRulesResult:
        """Classify a user's uncategorized transactions with the current rules.

        Transactions are fetched in ``BATCH_SIZE`` chunks; each distinct
        classification is then written to its transactions in chunks, and a
        failing write chunk does not stop the others.

        Args:
            user_id: Owner
            transaction_ids: Restrict to these transactions; defaults to all
                of the user's uncategorized transactions

        Returns:
            ApplyRulesResult with classification stats and write tallies
        """
        if transaction_ids is None:
            transaction_ids = await asyncio.to_thread(self.db.list_transaction_ids, user_id, True)

        async def fetch(group: list[int]) -> list[Transaction]:
            return await asyncio.to_thread(self.db.get_transactions_by_ids, group)

        fetched = await map_chunked(transaction_ids, BATCH_SIZE, fetch)
        transactions = [t for t in fetched if t.user_id == user_id and not t.category]

        rules = await asyncio.to_thread(self.db.list_rules, user_id, True)
        batch = classify_batch(
            [_candidate_from_transaction(t) for t in transactions], rules, self.default_vendors
        )

        # Identical classifications share one chunked update
        groups: dict[tuple, list[int]] = {}
        for txn, candidate in zip(transactions, batch.candidates):
            result = candidate.classification
            if not result.is_classified:
                continue
            key = (
                result.category,
                result.subcategory,
                result.vendor,
                result.source,
                result.confidence,
                result.rule_id,
            )
            groups.setdefault(key, []).append(txn.id)

        updated = 0
        failed = 0
        errors: list[ChunkError] = []
        for (category, subcategory, vendor, source, confidence, rule_id), ids in groups.items():
            patch = {
                "category": category,
                "subcategory": subcategory,
                "vendor": vendor,
                "classification_source": source,
                "confidence": confidence,
                "rule_id": rule_id,
            }

            async def write(group: list[int], patch=patch) -> int:
                return await asyncio.to_thread(self.db.update_transactions, group, patch)

            outcome = await update_chunked(ids, BATCH_SIZE, write)
            updated += outcome.success
            failed += outcome.failed
            errors.extend(outcome.errors)

        logger.info(
            "Applied %d rule(s) to %d transaction(s): %d classified, %d written, %d failed",
            len(rules),
            len(transactions),
            len(batch.classified),
            updated,
            failed,
        )
        return ApplyRulesResult(
            checked=len(transactions),
            classified=len(batch.classified),
            unclassified=len(batch.unclassified),
            rules_count=len(rules),
            stats=batch.stats,
            updated=updated,
            failed=failed,
            errors=errors,
        )
