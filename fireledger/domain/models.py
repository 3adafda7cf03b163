"""Domain type definitions for fireledger.

These NewTypes and frozen dataclasses describe the records the engine works on:
- Money: Amount in cents (minor units)
- Month: Month in YYYY-MM format
- Account, Category, CategoryRule, BudgetMonth, BudgetEntry, Transaction, Goal
- FireConfig: per-user FIRE projection settings
- FinanceState: the full state tree handed to the reducers
"""

from dataclasses import dataclass, field
from typing import Literal, NewType

# Money amounts are stored as cents (minor units) to avoid floating point errors
Money = NewType("Money", int)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

UserId = NewType("UserId", str)
AccountId = NewType("AccountId", str)
CategoryId = NewType("CategoryId", str)
BudgetMonthId = NewType("BudgetMonthId", str)

AccountType = Literal["checking", "savings", "credit", "investment", "other"]
AccountProvider = Literal["manual", "plaid", "teller", "other"]
TransactionSource = Literal["manual", "imported"]
TransactionStatus = Literal["pending", "posted"]

ACCOUNT_TYPES: tuple[str, ...] = ("checking", "savings", "credit", "investment", "other")


@dataclass(frozen=True)
class Account:
    """Immutable account record."""

    id: AccountId
    user_id: UserId
    name: str
    type: AccountType
    provider: AccountProvider
    current_balance_cents: Money
    external_account_id: str | None = None
    institution_name: str | None = None
    is_closed: bool = False


@dataclass(frozen=True)
class Category:
    """Immutable budget category."""

    id: CategoryId
    user_id: UserId
    name: str
    group: str | None = None


@dataclass(frozen=True)
class CategoryRule:
    """Substring rule assigning a category to matching payees."""

    id: str
    user_id: UserId
    pattern: str
    category_id: CategoryId


@dataclass(frozen=True)
class BudgetMonth:
    """Container for one calendar month of budget entries."""

    id: BudgetMonthId
    user_id: UserId
    year: int
    month: int  # 1-12


@dataclass(frozen=True)
class BudgetEntry:
    """Budgeted amount for one category in one budget month."""

    id: str
    user_id: UserId
    budget_month_id: BudgetMonthId
    category_id: CategoryId
    budgeted_cents: Money


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction data."""

    id: str
    user_id: UserId
    account_id: AccountId
    date: str  # YYYY-MM-DD
    name: str
    amount_cents: Money  # Negative for expenses, positive for income
    category_id: CategoryId | None = None
    notes: str = ""
    source: TransactionSource = "manual"
    status: TransactionStatus = "posted"
    external_transaction_id: str | None = None
    imported_at: str | None = None


@dataclass(frozen=True)
class Goal:
    """Savings goal progress tracker."""

    id: str
    user_id: UserId
    name: str
    target_cents: Money
    current_cents: Money
    target_year: int | None = None


@dataclass(frozen=True)
class FireConfig:
    """FIRE projection settings (one per user)."""

    current_portfolio_cents: Money
    monthly_contribution_cents: Money
    expected_real_return_percent: float
    annual_spend_cents: Money
    safe_withdrawal_rate_percent: float


DEFAULT_FIRE_CONFIG = FireConfig(
    current_portfolio_cents=Money(0),
    monthly_contribution_cents=Money(0),
    expected_real_return_percent=7.0,
    annual_spend_cents=Money(4000000),
    safe_withdrawal_rate_percent=4.0,
)


@dataclass(frozen=True)
class FinanceState:
    """Full state tree for one user.

    Reducers in ``fireledger.domain.state`` take a FinanceState and return a new
    one; nothing in the domain package mutates it in place.
    """

    user_id: UserId
    accounts: list[Account] = field(default_factory=list)
    categories: list[Category] = field(default_factory=list)
    category_rules: list[CategoryRule] = field(default_factory=list)
    budget_months: list[BudgetMonth] = field(default_factory=list)
    budget_entries: list[BudgetEntry] = field(default_factory=list)
    transactions: list[Transaction] = field(default_factory=list)
    goals: list[Goal] = field(default_factory=list)
    fire_config: FireConfig = DEFAULT_FIRE_CONFIG
