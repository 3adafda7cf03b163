"""Tests for fireledger.store persistence of the state tree."""

import sqlite3
from dataclasses import replace
from pathlib import Path

import pytest

from fireledger.domain.models import (
    DEFAULT_FIRE_CONFIG,
    Account,
    AccountId,
    Category,
    CategoryId,
    CategoryRule,
    FinanceState,
    Goal,
    Money,
    Transaction,
    UserId,
)
from fireledger.domain.state import ensure_budget_month, set_budget, update_fire_config
from fireledger.store import database_exists, init_database, load_state, save_state

USER = UserId("local-user")


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "data" / "fireledger.db"
    init_database(path)
    return path


def sample_state() -> FinanceState:
    state = FinanceState(
        user_id=USER,
        accounts=[
            Account(
                id=AccountId("acc_1"),
                user_id=USER,
                name="Everyday Checking",
                type="checking",
                provider="manual",
                current_balance_cents=Money(241458),
            ),
            Account(
                id=AccountId("acc_2"),
                user_id=USER,
                name="Card",
                type="credit",
                provider="plaid",
                current_balance_cents=Money(-15000),
                external_account_id="ext-9",
                institution_name="Big Bank",
                is_closed=True,
            ),
        ],
        categories=[
            Category(id=CategoryId("cat_1"), user_id=USER, name="Groceries", group="Living"),
            Category(id=CategoryId("cat_2"), user_id=USER, name="Misc"),
        ],
        category_rules=[
            CategoryRule(id="r_z", user_id=USER, pattern="coffee", category_id=CategoryId("cat_2")),
            CategoryRule(id="r_a", user_id=USER, pattern="local coffee", category_id=CategoryId("cat_1")),
        ],
        transactions=[
            Transaction(
                id="tx_b",
                user_id=USER,
                account_id=AccountId("acc_1"),
                date="2024-05-10",
                name="Trader Joes",
                amount_cents=Money(-8542),
                category_id=CategoryId("cat_1"),
                notes="weekly shop",
            ),
            Transaction(
                id="tx_a",
                user_id=USER,
                account_id=AccountId("acc_2"),
                date="2024-05-01",
                name="Shell",
                amount_cents=Money(-4000),
                source="imported",
                status="pending",
                external_transaction_id="e1",
                imported_at="2024-05-02T08:00:00",
            ),
        ],
        goals=[
            Goal(
                id="g1",
                user_id=USER,
                name="Emergency fund",
                target_cents=Money(1000000),
                current_cents=Money(250000),
                target_year=2026,
            )
        ],
    )
    state, month_id = ensure_budget_month(state, 2024, 5)
    state = set_budget(state, CategoryId("cat_1"), month_id, Money(60000))
    return update_fire_config(state, current_portfolio_cents=Money(5000000), expected_real_return_percent=6.5)


class TestInitDatabase:
    """Tests for init_database."""

    def test_creates_file(self, tmp_path: Path) -> None:
        """Should create the database and its parent directory."""
        path = tmp_path / "nested" / "fireledger.db"

        assert not database_exists(path)
        init_database(path)

        assert database_exists(path)

    def test_idempotent(self, db_path: Path) -> None:
        """Should be safe to run twice."""
        init_database(db_path)

        assert database_exists(db_path)


class TestLoadState:
    """Tests for load_state."""

    def test_empty_user_gets_defaults(self, db_path: Path) -> None:
        """Should return empty lists and the default FIRE settings."""
        state = load_state(USER, db_path)

        assert state == FinanceState(user_id=USER)
        assert state.fire_config == DEFAULT_FIRE_CONFIG


class TestSaveState:
    """Tests for save_state."""

    def test_round_trip(self, db_path: Path) -> None:
        """Should load back exactly what was saved."""
        state = sample_state()

        save_state(state, db_path)

        assert load_state(USER, db_path) == state

    def test_rule_order_preserved(self, db_path: Path) -> None:
        """Should keep rule order rather than sorting by id."""
        save_state(sample_state(), db_path)

        loaded = load_state(USER, db_path)

        assert [r.id for r in loaded.category_rules] == ["r_z", "r_a"]

    def test_save_replaces_previous(self, db_path: Path) -> None:
        """Should drop records that are no longer in the state."""
        save_state(sample_state(), db_path)
        save_state(FinanceState(user_id=USER), db_path)

        loaded = load_state(USER, db_path)

        assert loaded.accounts == []
        assert loaded.transactions == []
        assert loaded.fire_config == DEFAULT_FIRE_CONFIG

    def test_users_are_isolated(self, db_path: Path) -> None:
        """Should not touch another user's records."""
        save_state(sample_state(), db_path)
        save_state(FinanceState(user_id=UserId("other")), db_path)

        assert len(load_state(USER, db_path).accounts) == 2

    def test_failed_save_keeps_old_data(self, db_path: Path) -> None:
        """Should roll back when an insert fails."""
        save_state(sample_state(), db_path)
        broken = sample_state()
        broken = FinanceState(
            user_id=USER,
            accounts=broken.accounts,
            categories=[broken.categories[0], broken.categories[0]],  # Duplicate primary key
        )

        with pytest.raises(sqlite3.Error):
            save_state(broken, db_path)

        assert load_state(USER, db_path) == sample_state()


class TestSharedDatabase:
    """Tests for several users saving into one database."""

    def test_same_budget_month_for_two_users(self, db_path: Path) -> None:
        """Should store the same month and category budget for each user."""
        for user, cents in (("alice", 60000), ("bob", 45000)):
            state = FinanceState(
                user_id=UserId(user),
                categories=[Category(id=CategoryId("cat_1"), user_id=UserId(user), name="Groceries")],
            )
            state, month_id = ensure_budget_month(state, 2024, 5)
            save_state(set_budget(state, CategoryId("cat_1"), month_id, Money(cents)), db_path)

        alice = load_state(UserId("alice"), db_path)
        bob = load_state(UserId("bob"), db_path)

        assert [m.id for m in alice.budget_months] == [m.id for m in bob.budget_months] == ["bm_2024_5"]
        assert alice.budget_entries[0].budgeted_cents == 60000
        assert bob.budget_entries[0].budgeted_cents == 45000

    def test_state_copied_to_another_user(self, db_path: Path) -> None:
        """Should save a copy of a state under a second user id alongside the first."""
        save_state(sample_state(), db_path)
        copy = replace(sample_state(), user_id=UserId("other"))

        save_state(copy, db_path)

        assert load_state(USER, db_path) == sample_state()
        assert [t.id for t in load_state(UserId("other"), db_path).transactions] == ["tx_b", "tx_a"]
