"""Pure functions for ledger aggregation.

This module contains the functional core for account and transaction totals:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations

All monetary amounts are in cents (Money type).
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from fireledger.dates import month_prefix
from fireledger.domain.models import Account, BudgetEntry, Category, CategoryId, Money, Transaction


@dataclass(frozen=True)
class NetWorth:
    """Immutable net worth breakdown."""

    assets: Money
    liabilities: Money
    net_worth: Money


@dataclass(frozen=True)
class SpendingItem:
    """Spending in one category for the top spending list."""

    name: str
    spent: Money  # Non-positive
    budget: Money


def net_worth(accounts: Iterable[Account]) -> NetWorth:
    """Calculate assets, liabilities and net worth.

    Classification follows the balance sign, not the account type: a credit
    account with a positive balance counts as an asset.

    Args:
        accounts: Accounts to total.

    Returns:
        NetWorth with non-negative assets and liabilities.
    """
    assets = 0
    liabilities = 0

    for account in accounts:
        balance = account.current_balance_cents
        if balance >= 0:
            assets += balance
        else:
            liabilities += abs(balance)

    return NetWorth(
        assets=Money(assets),
        liabilities=Money(liabilities),
        net_worth=Money(assets - liabilities),
    )


def transactions_in_month(transactions: Iterable[Transaction], year: int, month: int) -> list[Transaction]:
    """Filter transactions to a calendar month.

    Args:
        transactions: Transactions to filter.
        year: Four digit year.
        month: Month number (1-12).

    Returns:
        Transactions whose date starts with YYYY-MM, in input order.
    """
    prefix = month_prefix(year, month)
    return [t for t in transactions if t.date.startswith(prefix)]


def category_spend(transactions: Iterable[Transaction], category_id: CategoryId) -> Money:
    """Sum expenses in a category.

    Only strictly negative amounts count; income in the category is ignored.

    Args:
        transactions: Transactions to sum (usually one month).
        category_id: Category to total.

    Returns:
        Total spend in cents (zero or negative).
    """
    return Money(sum(t.amount_cents for t in transactions if t.category_id == category_id and t.amount_cents < 0))


def sort_newest_first(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Sort transactions by date, newest first (stable for equal dates)."""
    return sorted(transactions, key=lambda t: t.date, reverse=True)


def recent_transactions(transactions: Iterable[Transaction], limit: int = 5) -> list[Transaction]:
    """Return the most recent transactions."""
    return sort_newest_first(transactions)[:limit]


def top_spending(
    month_transactions: Iterable[Transaction],
    categories: Sequence[Category],
    budget_entries: Sequence[BudgetEntry],
    month_id: str,
    limit: int = 5,
) -> list[SpendingItem]:
    """Rank categories by spend for a month.

    Uncategorized transactions and transactions pointing at unknown categories
    are left out.

    Args:
        month_transactions: Transactions already filtered to the month.
        categories: Known categories.
        budget_entries: Budget entries (any month).
        month_id: Budget month id used to look up budgets.
        limit: Maximum number of items to return.

    Returns:
        SpendingItems ordered most negative spend first.
    """
    by_id = {c.id: c for c in categories}
    budgets = {e.category_id: e.budgeted_cents for e in budget_entries if e.budget_month_id == month_id}

    spent: dict[str, int] = {}
    budget_by_name: dict[str, Money] = {}
    for txn in month_transactions:
        if txn.amount_cents >= 0 or not txn.category_id:
            continue
        category = by_id.get(txn.category_id)
        if category is None:
            continue
        spent[category.name] = spent.get(category.name, 0) + txn.amount_cents
        budget_by_name[category.name] = budgets.get(category.id, Money(0))

    items = [SpendingItem(name=name, spent=Money(total), budget=budget_by_name[name]) for name, total in spent.items()]
    items.sort(key=lambda item: item.spent)
    return items[:limit]
