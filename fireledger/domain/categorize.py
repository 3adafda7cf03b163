"""Rule-based transaction categorization.

Rules are an ordered list of substring patterns. The first rule whose pattern
appears in the payee name wins, regardless of how specific later rules are.
"""

from collections.abc import Iterable, Sequence
from dataclasses import replace

from fireledger.domain.models import CategoryRule, Transaction


def normalize_name(name: str) -> str:
    """Normalize a payee name or pattern for matching."""
    return name.lower()


def find_matching_rule(name: str, rules: Sequence[CategoryRule]) -> CategoryRule | None:
    """Find the first rule whose pattern is a substring of name.

    Args:
        name: Payee or display name.
        rules: Rules in priority order.

    Returns:
        First matching rule, or None.
    """
    normalized = normalize_name(name)
    for rule in rules:
        if normalize_name(rule.pattern) in normalized:
            return rule
    return None


def categorize(transaction: Transaction, rules: Sequence[CategoryRule]) -> Transaction:
    """Assign a category to an uncategorized transaction.

    Transactions that already have a category are returned unchanged.

    Args:
        transaction: Transaction to categorize.
        rules: Rules in priority order.

    Returns:
        The transaction with category_id set from the first matching rule, or
        the original transaction if it was categorized or nothing matched.
    """
    if transaction.category_id:
        return transaction

    rule = find_matching_rule(transaction.name, rules)
    if rule is None:
        return transaction

    return replace(transaction, category_id=rule.category_id)


def categorize_all(transactions: Iterable[Transaction], rules: Sequence[CategoryRule]) -> list[Transaction]:
    """Run categorize over every transaction, preserving order."""
    return [categorize(t, rules) for t in transactions]


def uncategorized(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Return transactions with no category."""
    return [t for t in transactions if not t.category_id]
