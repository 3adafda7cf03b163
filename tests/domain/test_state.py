"""Tests for fireledger.domain.state reducers."""

from fireledger.domain.models import (
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
from fireledger.domain.state import (
    add_category,
    add_category_rule,
    add_goal,
    add_manual_transaction,
    apply_rules,
    ensure_budget_month,
    import_transactions,
    set_budget,
    update_fire_config,
    update_transaction,
    upsert_account,
)

USER = UserId("local-user")
CHECKING = AccountId("acc_1")


def make_state() -> FinanceState:
    return FinanceState(
        user_id=USER,
        accounts=[
            Account(
                id=CHECKING,
                user_id=USER,
                name="Everyday Checking",
                type="checking",
                provider="manual",
                current_balance_cents=Money(241458),
            )
        ],
        categories=[Category(id=CategoryId("cat_3"), user_id=USER, name="Dining Out", group="Discretionary")],
        category_rules=[CategoryRule(id="r1", user_id=USER, pattern="coffee", category_id=CategoryId("cat_3"))],
    )


def make_txn(
    txn_id: str,
    amount: int,
    date: str = "2024-05-10",
    name: str = "Local Coffee Shop",
    source: str = "manual",
    external_id: str | None = None,
) -> Transaction:
    return Transaction(
        id=txn_id,
        user_id=USER,
        account_id=CHECKING,
        date=date,
        name=name,
        amount_cents=Money(amount),
        source=source,  # type: ignore[arg-type]
        external_transaction_id=external_id,
    )


class TestAddManualTransaction:
    """Tests for add_manual_transaction."""

    def test_adjusts_balance_and_categorizes(self) -> None:
        """Should prepend the transaction, apply rules and move the balance."""
        state = make_state()

        new_state = add_manual_transaction(state, make_txn("tx_1", -1250))

        assert new_state.transactions[0].id == "tx_1"
        assert new_state.transactions[0].category_id == "cat_3"
        assert new_state.transactions[0].source == "manual"
        assert new_state.accounts[0].current_balance_cents == 240208

    def test_original_state_unchanged(self) -> None:
        """Should not mutate the input state."""
        state = make_state()

        add_manual_transaction(state, make_txn("tx_1", -1250))

        assert state.transactions == []
        assert state.accounts[0].current_balance_cents == 241458

    def test_unknown_account_leaves_balances(self) -> None:
        """Should still record the transaction when the account is unknown."""
        txn = Transaction(
            id="tx_1",
            user_id=USER,
            account_id=AccountId("missing"),
            date="2024-05-10",
            name="Bookshop",
            amount_cents=Money(-500),
        )

        new_state = add_manual_transaction(make_state(), txn)

        assert len(new_state.transactions) == 1
        assert new_state.accounts[0].current_balance_cents == 241458


class TestUpdateTransaction:
    """Tests for update_transaction."""

    def test_manual_amount_change_moves_balance(self) -> None:
        """Should apply the amount delta to the account."""
        state = add_manual_transaction(make_state(), make_txn("tx_1", -1250))

        new_state = update_transaction(state, "tx_1", {"amount_cents": Money(-2000)})

        assert new_state.transactions[0].amount_cents == -2000
        assert new_state.accounts[0].current_balance_cents == 241458 - 2000

    def test_imported_amount_change_keeps_balance(self) -> None:
        """Should leave the balance alone for imported transactions."""
        state, _ = import_transactions(make_state(), [make_txn("tx_1", -1250, source="imported", external_id="e1")])

        new_state = update_transaction(state, "tx_1", {"amount_cents": Money(-2000)})

        assert new_state.transactions[0].amount_cents == -2000
        assert new_state.accounts[0].current_balance_cents == 241458

    def test_non_amount_fields(self) -> None:
        """Should update notes and category without touching the balance."""
        state = add_manual_transaction(make_state(), make_txn("tx_1", -1250))

        new_state = update_transaction(state, "tx_1", {"notes": "with Sam", "category_id": None})

        assert new_state.transactions[0].notes == "with Sam"
        assert new_state.transactions[0].category_id is None
        assert new_state.accounts[0].current_balance_cents == state.accounts[0].current_balance_cents

    def test_unknown_id_is_noop(self) -> None:
        """Should return the same state for an unknown transaction."""
        state = make_state()

        assert update_transaction(state, "nope", {"notes": "x"}) is state


class TestImportTransactions:
    """Tests for import_transactions."""

    def test_dedups_by_external_id(self) -> None:
        """Should skip transactions whose external id is already known."""
        state, added = import_transactions(make_state(), [make_txn("tx_1", -100, source="imported", external_id="e1")])
        state, added_again = import_transactions(state, [make_txn("tx_2", -100, source="imported", external_id="e1")])

        assert added == 1
        assert added_again == 0
        assert len(state.transactions) == 1

    def test_dedups_within_batch(self) -> None:
        """Should skip a repeated external id inside one import."""
        batch = [
            make_txn("tx_1", -100, source="imported", external_id="e1"),
            make_txn("tx_2", -100, source="imported", external_id="e1"),
        ]

        state, added = import_transactions(make_state(), batch)

        assert added == 1
        assert [t.id for t in state.transactions] == ["tx_1"]

    def test_without_external_id_always_added(self) -> None:
        """Should never dedup transactions without an external id."""
        batch = [make_txn("tx_1", -100, source="imported"), make_txn("tx_2", -100, source="imported")]

        _, added = import_transactions(make_state(), batch)

        assert added == 2

    def test_sorted_newest_first_and_categorized(self) -> None:
        """Should sort by date descending and apply rules."""
        batch = [
            make_txn("old", -100, date="2024-04-01", source="imported", external_id="e1"),
            make_txn("new", -100, date="2024-05-20", name="Hardware", source="imported", external_id="e2"),
        ]

        state, _ = import_transactions(make_state(), batch)

        assert [t.id for t in state.transactions] == ["new", "old"]
        assert state.transactions[1].category_id == "cat_3"
        assert state.transactions[0].category_id is None

    def test_balance_untouched(self) -> None:
        """Should not change account balances."""
        state, _ = import_transactions(make_state(), [make_txn("tx_1", -100, source="imported", external_id="e1")])

        assert state.accounts[0].current_balance_cents == 241458


class TestApplyRules:
    """Tests for apply_rules."""

    def test_counts_changes(self) -> None:
        """Should categorize matching transactions and report how many changed."""
        state = FinanceState(
            user_id=USER,
            transactions=[make_txn("tx_1", -100), make_txn("tx_2", -100, name="Hardware")],
        )
        state = add_category_rule(
            state, CategoryRule(id="r1", user_id=USER, pattern="coffee", category_id=CategoryId("cat_3"))
        )

        new_state, changed = apply_rules(state)

        assert changed == 1
        assert new_state.transactions[0].category_id == "cat_3"


class TestEnsureBudgetMonth:
    """Tests for ensure_budget_month and set_budget."""

    def test_same_state_when_month_exists(self) -> None:
        """Should return the identical state object the second time."""
        state, month_id = ensure_budget_month(make_state(), 2024, 5)
        again, again_id = ensure_budget_month(state, 2024, 5)

        assert month_id == again_id == "bm_2024_5"
        assert again is state
        assert len(again.budget_months) == 1

    def test_set_budget(self) -> None:
        """Should upsert a budget entry."""
        state, month_id = ensure_budget_month(make_state(), 2024, 5)
        state = set_budget(state, CategoryId("cat_3"), month_id, Money(20000))
        state = set_budget(state, CategoryId("cat_3"), month_id, Money(25000))

        assert len(state.budget_entries) == 1
        assert state.budget_entries[0].budgeted_cents == 25000


class TestSimpleReducers:
    """Tests for the append and replace reducers."""

    def test_upsert_account_replaces(self) -> None:
        """Should replace an account with the same id."""
        state = make_state()
        updated = Account(
            id=CHECKING,
            user_id=USER,
            name="Renamed",
            type="checking",
            provider="manual",
            current_balance_cents=Money(1),
        )

        new_state = upsert_account(state, updated)

        assert len(new_state.accounts) == 1
        assert new_state.accounts[0].name == "Renamed"

    def test_add_category_and_goal(self) -> None:
        """Should append to the end of the lists."""
        state = add_category(make_state(), Category(id=CategoryId("cat_9"), user_id=USER, name="Travel"))
        state = add_goal(
            state,
            Goal(id="g1", user_id=USER, name="Trip", target_cents=Money(300000), current_cents=Money(0)),
        )

        assert state.categories[-1].name == "Travel"
        assert state.goals[0].name == "Trip"

    def test_update_fire_config(self) -> None:
        """Should merge changes and keep other fields."""
        state = update_fire_config(make_state(), monthly_contribution_cents=Money(100000))

        assert state.fire_config.monthly_contribution_cents == 100000
        assert state.fire_config.safe_withdrawal_rate_percent == 4.0
