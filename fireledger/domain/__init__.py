"""Domain models and pure functions for fireledger.

This package contains the financial computation engine:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from storage and the CLI
"""

from fireledger.domain.models import (
    Account,
    BudgetEntry,
    BudgetMonth,
    Category,
    CategoryRule,
    FinanceState,
    FireConfig,
    Goal,
    Money,
    Month,
    Transaction,
)

__all__ = [
    "Account",
    "BudgetEntry",
    "BudgetMonth",
    "Category",
    "CategoryRule",
    "FinanceState",
    "FireConfig",
    "Goal",
    "Money",
    "Month",
    "Transaction",
]
