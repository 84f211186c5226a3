"""Rule-based transaction classification.

User rules are evaluated in descending priority and the first match wins.
Candidates no user rule matches fall back to the built-in vendor table.
Everything here is pure: no store access, no clock, no randomness.
"""

import logging
import re
from functools import lru_cache
from itertools import groupby
from typing import Callable, Iterable, Optional

from ledgerline.domain.default_vendors import DEFAULT_VENDORS, DefaultVendor
from ledgerline.domain.entities import (
    BatchClassification,
    ClassificationResult,
    ClassificationRule,
    ClassificationSource,
    ClassificationStats,
    MatchType,
    TransactionCandidate,
    UNCLASSIFIED,
)
from ledgerline.domain.errors import ValidationError
from ledgerline.utils.text import normalize_text

logger = logging.getLogger(__name__)

USER_RULE_CONFIDENCE = 0.95
DEFAULT_VENDOR_CONFIDENCE = 0.9


@lru_cache(maxsize=512)
def compile_rule_regex(pattern: str) -> Optional[re.Pattern]:
    """Compile a regex rule pattern, or return None if it is invalid."""
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        logger.warning("Invalid regex rule pattern %r: %s", pattern, e)
        return None


@lru_cache(maxsize=1024)
def _word_pattern(keyword: str) -> re.Pattern:
    left = r"(?<![a-z0-9])" if keyword[:1].isalnum() else ""
    right = r"(?![a-z0-9])" if keyword[-1:].isalnum() else ""
    return re.compile(left + re.escape(keyword) + right)


def _contains(fragment: str, text: str) -> bool:
    return fragment in text


def _exact(fragment: str, text: str) -> bool:
    return text == fragment


def _starts_with(fragment: str, text: str) -> bool:
    return text.startswith(fragment)


def _regex(pattern: str, text: str) -> bool:
    compiled = compile_rule_regex(pattern)
    return compiled is not None and compiled.search(text) is not None


_MATCHERS: dict[MatchType, Callable[[str, str], bool]] = {
    MatchType.CONTAINS: _contains,
    MatchType.EXACT: _exact,
    MatchType.STARTS_WITH: _starts_with,
    MatchType.REGEX: _regex,
}


def matches(match_type: MatchType, pattern: str, text: str) -> bool:
    """Test one pattern fragment against normalized search text.

    Args:
        match_type: How to compare
        pattern: A single keyword fragment, or a full expression for regex
        text: Search text, already passed through ``normalize_text``

    Returns:
        True on a match; an empty fragment never matches
    """
    matcher = _MATCHERS[MatchType(match_type)]
    if match_type != MatchType.REGEX:
        pattern = normalize_text(pattern)
    if not pattern:
        return False
    return matcher(pattern, text)


def rule_matches(rule: ClassificationRule, text: str, amount=None) -> bool:
    """Return True if any of the rule's keywords match and the amount fits."""
    if not any(matches(rule.match_type, keyword, text) for keyword in rule.keywords):
        return False
    return rule.applies_to_amount(amount)


def validate_rule_pattern(match_type: MatchType, pattern: str) -> None:
    """Reject patterns that could never match.

    Raises:
        ValidationError: If the pattern is empty or an invalid regex
    """
    if not pattern or not pattern.strip():
        raise ValidationError("Rule pattern cannot be empty")
    if match_type == MatchType.REGEX:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValidationError(f"Invalid regular expression '{pattern}': {e}")
    elif not any(part.strip() for part in pattern.split(",")):
        raise ValidationError("Rule pattern has no keywords")


def build_search_text(candidate: TransactionCandidate) -> str:
    """Combine description, payee and any known vendor into search text."""
    vendor = candidate.classification.vendor if candidate.classification else None
    parts = [candidate.description, candidate.payee, vendor]
    return normalize_text(" ".join(part for part in parts if part))


def order_rules(rules: Iterable[ClassificationRule]) -> list[ClassificationRule]:
    """Active rules by descending priority, keeping input order for ties."""
    return sorted((rule for rule in rules if rule.is_active), key=lambda rule: -rule.priority)


def find_priority_collisions(rules: Iterable[ClassificationRule]) -> dict[int, list[int]]:
    """Map each priority shared by several active rules to those rule ids."""
    ordered = order_rules(rules)
    collisions = {}
    for priority, group in groupby(ordered, key=lambda rule: rule.priority):
        ids = [rule.id for rule in group]
        if len(ids) > 1:
            collisions[priority] = ids
    return collisions


class Classifier:
    """Assigns categories using an ordered rule set and the vendor table."""

    def __init__(
        self,
        rules: Iterable[ClassificationRule],
        default_vendors: Optional[list[DefaultVendor]] = None,
    ):
        """Initialize classifier.

        Args:
            rules: User rules in any order; inactive rules are ignored
            default_vendors: Fallback table, longest keyword first
        """
        self.rules = order_rules(rules)
        self.default_vendors = DEFAULT_VENDORS if default_vendors is None else default_vendors

    def match_rule(self, text: str, amount=None) -> Optional[ClassificationRule]:
        for rule in self.rules:
            if rule_matches(rule, text, amount):
                return rule
        return None

    def match_vendor(self, text: str, amount=None) -> Optional[DefaultVendor]:
        for vendor in self.default_vendors:
            if not vendor.direction.allows(amount):
                continue
            if _word_pattern(normalize_text(vendor.keyword)).search(text):
                return vendor
        return None

    def classify(self, candidate: TransactionCandidate) -> ClassificationResult:
        """Classify one candidate.

        Returns:
            Result tagged user_rule, default_vendor, or none
        """
        text = build_search_text(candidate)
        if not text:
            return UNCLASSIFIED

        rule = self.match_rule(text, candidate.amount)
        if rule is not None:
            return ClassificationResult(
                category=rule.category,
                subcategory=rule.subcategory,
                vendor=rule.vendor,
                source=ClassificationSource.USER_RULE,
                confidence=USER_RULE_CONFIDENCE,
                rule_id=rule.id,
            )

        vendor = self.match_vendor(text, candidate.amount)
        if vendor is not None:
            return ClassificationResult(
                category=vendor.category,
                subcategory=vendor.subcategory,
                vendor=vendor.vendor,
                source=ClassificationSource.DEFAULT_VENDOR,
                confidence=DEFAULT_VENDOR_CONFIDENCE,
            )

        return UNCLASSIFIED


def classify_batch(
    candidates: Iterable[TransactionCandidate],
    rules: Iterable[ClassificationRule],
    default_vendors: Optional[list[DefaultVendor]] = None,
) -> BatchClassification:
    """Classify candidates and split them by outcome.

    Args:
        candidates: Candidates in source order
        rules: User rules
        default_vendors: Override for the built-in vendor table

    Returns:
        BatchClassification whose stats counts always add up to ``total``
    """
    rules = list(rules)
    for priority, rule_ids in find_priority_collisions(rules).items():
        logger.warning(
            "Rules %s share priority %d; overlapping matches resolve by rule order",
            rule_ids,
            priority,
        )

    classifier = Classifier(rules, default_vendors)
    results = []
    classified = []
    unclassified = []
    by_user_rules = 0
    by_default_vendors = 0

    for candidate in candidates:
        result = classifier.classify(candidate)
        classified_candidate = candidate.with_classification(result)
        results.append(classified_candidate)
        if result.source == ClassificationSource.USER_RULE:
            by_user_rules += 1
            classified.append(classified_candidate)
        elif result.source == ClassificationSource.DEFAULT_VENDOR:
            by_default_vendors += 1
            classified.append(classified_candidate)
        else:
            unclassified.append(classified_candidate)

    stats = ClassificationStats(
        total=len(results),
        classified_by_user_rules=by_user_rules,
        classified_by_default_vendors=by_default_vendors,
        unclassified=len(unclassified),
    )
    return BatchClassification(
        candidates=results,
        classified=classified,
        unclassified=unclassified,
        stats=stats,
    )
