"""Tests for fireledger.domain.categorize pure functions."""

from fireledger.domain.categorize import categorize, categorize_all, find_matching_rule, uncategorized
from fireledger.domain.models import AccountId, CategoryId, CategoryRule, Money, Transaction, UserId

USER = UserId("local-user")


def rule(pattern: str, category: str, rule_id: str = "r") -> CategoryRule:
    return CategoryRule(id=rule_id, user_id=USER, pattern=pattern, category_id=CategoryId(category))


def txn(name: str, category: str | None = None) -> Transaction:
    return Transaction(
        id="tx_1",
        user_id=USER,
        account_id=AccountId("acc_1"),
        date="2024-05-01",
        name=name,
        amount_cents=Money(-1250),
        category_id=CategoryId(category) if category else None,
    )


class TestCategorize:
    """Tests for categorize."""

    def test_first_match_wins_over_more_specific_rule(self) -> None:
        """Should apply the earliest matching rule, not the most specific."""
        rules = [rule("coffee", "A", "r1"), rule("local coffee", "B", "r2")]

        result = categorize(txn("Local Coffee Shop"), rules)

        assert result.category_id == "A"

    def test_order_is_significant(self) -> None:
        """Should pick B when the specific rule comes first."""
        rules = [rule("local coffee", "B", "r2"), rule("coffee", "A", "r1")]

        result = categorize(txn("Local Coffee Shop"), rules)

        assert result.category_id == "B"

    def test_case_insensitive(self) -> None:
        """Should match regardless of case on either side."""
        result = categorize(txn("TRADER JOES #552"), [rule("Trader Joes", "cat_1")])

        assert result.category_id == "cat_1"

    def test_existing_category_not_overwritten(self) -> None:
        """Should return the transaction unchanged when it has a category."""
        original = txn("Local Coffee Shop", "cat_9")

        result = categorize(original, [rule("coffee", "A")])

        assert result is original
        assert result.category_id == "cat_9"

    def test_no_match_leaves_category_empty(self) -> None:
        """Should keep category None when no rule matches."""
        original = txn("Hardware Store")

        result = categorize(original, [rule("coffee", "A")])

        assert result is original
        assert result.category_id is None

    def test_no_rules(self) -> None:
        """Should return the transaction unchanged with no rules."""
        original = txn("Anything")

        assert categorize(original, []) is original

    def test_input_not_mutated(self) -> None:
        """Should return a new transaction instead of modifying the input."""
        original = txn("Local Coffee Shop")

        result = categorize(original, [rule("coffee", "A")])

        assert original.category_id is None
        assert result is not original
        assert result.name == original.name


class TestFindMatchingRule:
    """Tests for find_matching_rule."""

    def test_returns_rule(self) -> None:
        """Should return the matching rule object."""
        rules = [rule("gas", "car", "r1"), rule("shell", "car2", "r2")]

        assert find_matching_rule("Shell Station", rules) == rules[1]

    def test_returns_none(self) -> None:
        """Should return None when nothing matches."""
        assert find_matching_rule("Bookshop", [rule("gas", "car")]) is None


class TestCategorizeAll:
    """Tests for categorize_all and uncategorized."""

    def test_categorizes_each_and_keeps_order(self) -> None:
        """Should categorize every transaction in order."""
        txns = [txn("Coffee Bar"), txn("Hardware"), txn("Coffee Stop", "cat_x")]

        result = categorize_all(txns, [rule("coffee", "A")])

        assert [t.category_id for t in result] == ["A", None, "cat_x"]
        assert len(uncategorized(result)) == 1
