"""Pure reducers over FinanceState.

Each function takes the current state and returns a new one. Persisting the
result is up to the caller.
"""

from collections.abc import Iterable
from dataclasses import replace
from typing import Any, TypedDict

from fireledger.domain import budget
from fireledger.domain.categorize import categorize
from fireledger.domain.ledger import sort_newest_first
from fireledger.domain.models import (
    Account,
    AccountId,
    BudgetMonthId,
    Category,
    CategoryId,
    CategoryRule,
    FinanceState,
    Goal,
    Money,
    Transaction,
)


class TransactionUpdate(TypedDict, total=False):
    """Fields a user may change on an existing transaction."""

    date: str
    name: str
    amount_cents: Money
    category_id: CategoryId | None
    notes: str
    status: str


def _adjust_balance(accounts: list[Account], account_id: AccountId, delta: int) -> list[Account]:
    return [
        replace(a, current_balance_cents=Money(a.current_balance_cents + delta)) if a.id == account_id else a
        for a in accounts
    ]


def upsert_account(state: FinanceState, account: Account) -> FinanceState:
    """Replace the account with the same id, or append it."""
    if any(a.id == account.id for a in state.accounts):
        accounts = [account if a.id == account.id else a for a in state.accounts]
    else:
        accounts = [*state.accounts, account]
    return replace(state, accounts=accounts)


def add_manual_transaction(state: FinanceState, transaction: Transaction) -> FinanceState:
    """Record a manual transaction and apply it to its account balance.

    The transaction is categorized with the state's rules before it is stored.

    Args:
        state: Current state.
        transaction: New transaction (id already assigned).

    Returns:
        New state with the transaction first in the list.
    """
    txn = replace(transaction, user_id=state.user_id, source="manual", status="posted")
    txn = categorize(txn, state.category_rules)

    return replace(
        state,
        transactions=[txn, *state.transactions],
        accounts=_adjust_balance(state.accounts, txn.account_id, txn.amount_cents),
    )


def update_transaction(state: FinanceState, transaction_id: str, updates: TransactionUpdate) -> FinanceState:
    """Apply user edits to a transaction.

    Amount changes on manual transactions are carried over to the account
    balance. Imported transactions leave the balance alone since linked
    account balances come from the provider.

    Args:
        state: Current state.
        transaction_id: Transaction to edit.
        updates: Fields to change.

    Returns:
        New state, or the same state if the transaction does not exist.
    """
    old = next((t for t in state.transactions if t.id == transaction_id), None)
    if old is None:
        return state

    new_amount = updates.get("amount_cents")
    delta = new_amount - old.amount_cents if new_amount is not None else 0

    accounts = state.accounts
    if old.source == "manual" and delta != 0:
        accounts = _adjust_balance(state.accounts, old.account_id, delta)

    changes: dict[str, Any] = dict(updates)
    transactions = [replace(t, **changes) if t.id == transaction_id else t for t in state.transactions]

    return replace(state, transactions=transactions, accounts=accounts)


def import_transactions(state: FinanceState, incoming: Iterable[Transaction]) -> tuple[FinanceState, int]:
    """Merge imported transactions into the state.

    Transactions whose external id is already known are skipped. New ones are
    categorized with the state's rules; existing categories are kept.

    Args:
        state: Current state.
        incoming: Transactions from an import.

    Returns:
        Tuple of (new_state, added_count).
    """
    transactions = list(state.transactions)
    known_ids = {t.external_transaction_id for t in transactions if t.external_transaction_id}
    added = 0

    for txn in incoming:
        if txn.external_transaction_id and txn.external_transaction_id in known_ids:
            continue
        transactions.append(categorize(txn, state.category_rules))
        if txn.external_transaction_id:
            known_ids.add(txn.external_transaction_id)
        added += 1

    return replace(state, transactions=sort_newest_first(transactions)), added


def apply_rules(state: FinanceState) -> tuple[FinanceState, int]:
    """Categorize every uncategorized transaction with the current rules.

    Returns:
        Tuple of (new_state, number_of_transactions_categorized).
    """
    changed = 0
    transactions: list[Transaction] = []
    for txn in state.transactions:
        result = categorize(txn, state.category_rules)
        if result is not txn:
            changed += 1
        transactions.append(result)
    return replace(state, transactions=transactions), changed


def add_category(state: FinanceState, category: Category) -> FinanceState:
    """Append a category."""
    return replace(state, categories=[*state.categories, category])


def add_category_rule(state: FinanceState, rule: CategoryRule) -> FinanceState:
    """Append a rule at the lowest priority."""
    return replace(state, category_rules=[*state.category_rules, rule])


def add_goal(state: FinanceState, goal: Goal) -> FinanceState:
    """Append a savings goal."""
    return replace(state, goals=[*state.goals, goal])


def ensure_budget_month(state: FinanceState, year: int, month: int) -> tuple[FinanceState, BudgetMonthId]:
    """Create the budget month if needed and return its id."""
    months, month_id = budget.ensure_month(state.budget_months, state.user_id, year, month)
    if len(months) == len(state.budget_months):
        return state, month_id
    return replace(state, budget_months=months), month_id


def set_budget(state: FinanceState, category_id: CategoryId, month_id: BudgetMonthId, cents: Money) -> FinanceState:
    """Set the budgeted amount for a category in a month."""
    entries = budget.set_budgeted_amount(state.budget_entries, state.user_id, category_id, month_id, cents)
    return replace(state, budget_entries=entries)


def update_fire_config(state: FinanceState, **changes: Any) -> FinanceState:
    """Merge changes into the FIRE configuration."""
    return replace(state, fire_config=replace(state.fire_config, **changes))
