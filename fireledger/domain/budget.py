"""Pure functions for budget calculations and logic.

This module contains the functional core for budget operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in cents (Money type).
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from fireledger.domain.ledger import category_spend
from fireledger.domain.models import (
    BudgetEntry,
    BudgetMonth,
    BudgetMonthId,
    Category,
    CategoryId,
    Money,
    Transaction,
    UserId,
)

UNGROUPED = "Uncategorized"


@dataclass(frozen=True)
class CategoryMetric:
    """Immutable budget figures for a single category."""

    category: Category
    budgeted: Money
    spent: Money  # Zero or negative
    remaining: Money


@dataclass(frozen=True)
class GroupMetric:
    """Budget figures summed over a category group."""

    group: str
    budgeted: Money
    spent: Money
    remaining: Money
    categories: list[CategoryMetric]


@dataclass(frozen=True)
class BudgetTotals:
    """Budget figures summed over every category."""

    budgeted: Money
    spent: Money
    remaining: Money


def budget_month_id(year: int, month: int) -> BudgetMonthId:
    """Derive the stable id for a budget month."""
    return BudgetMonthId(f"bm_{year}_{month}")


def budget_entry_id(month_id: BudgetMonthId, category_id: CategoryId) -> str:
    """Derive the stable id for a budget entry."""
    return f"be_{month_id}_{category_id}"


def ensure_month(
    months: Sequence[BudgetMonth],
    user_id: UserId,
    year: int,
    month: int,
) -> tuple[list[BudgetMonth], BudgetMonthId]:
    """Make sure a budget month exists for (user, year, month).

    Calling this again with the same arguments is a no-op.

    Args:
        months: Existing budget months.
        user_id: Owning user.
        year: Four digit year.
        month: Month number (1-12).

    Returns:
        Tuple of (months, month_id). The month list only gains an entry when
        the month did not exist yet.
    """
    month_id = budget_month_id(year, month)

    for existing in months:
        if existing.user_id == user_id and existing.year == year and existing.month == month:
            return list(months), existing.id

    created = BudgetMonth(id=month_id, user_id=user_id, year=year, month=month)
    return [*months, created], month_id


def set_budgeted_amount(
    entries: Sequence[BudgetEntry],
    user_id: UserId,
    category_id: CategoryId,
    month_id: BudgetMonthId,
    cents: Money,
) -> list[BudgetEntry]:
    """Upsert the budgeted amount for a category in a month.

    The sign is not validated; negative budgets are carried through as-is.

    Args:
        entries: Existing budget entries.
        user_id: Owning user (used for new entries).
        category_id: Category to budget.
        month_id: Budget month id.
        cents: New budgeted amount in cents.

    Returns:
        New entry list with the entry updated in place or appended.
    """
    updated: list[BudgetEntry] = []
    found = False

    for entry in entries:
        if not found and entry.category_id == category_id and entry.budget_month_id == month_id:
            updated.append(replace(entry, budgeted_cents=cents))
            found = True
        else:
            updated.append(entry)

    if not found:
        updated.append(
            BudgetEntry(
                id=budget_entry_id(month_id, category_id),
                user_id=user_id,
                budget_month_id=month_id,
                category_id=category_id,
                budgeted_cents=cents,
            )
        )

    return updated


def budgeted_for(entries: Iterable[BudgetEntry], category_id: CategoryId, month_id: BudgetMonthId) -> Money:
    """Look up the budgeted amount, defaulting to zero."""
    for entry in entries:
        if entry.category_id == category_id and entry.budget_month_id == month_id:
            return entry.budgeted_cents
    return Money(0)


def category_metrics(
    categories: Sequence[Category],
    budget_entries: Sequence[BudgetEntry],
    month_transactions: Sequence[Transaction],
    month_id: BudgetMonthId,
) -> list[CategoryMetric]:
    """Compute budgeted, spent and remaining per category.

    Args:
        categories: Categories to report on, in display order.
        budget_entries: Budget entries (any month).
        month_transactions: Transactions already filtered to the month.
        month_id: Budget month to read budgets from.

    Returns:
        One CategoryMetric per category, in the same order.
    """
    metrics: list[CategoryMetric] = []

    for category in categories:
        budgeted = budgeted_for(budget_entries, category.id, month_id)
        spent = category_spend(month_transactions, category.id)
        metrics.append(
            CategoryMetric(
                category=category,
                budgeted=budgeted,
                spent=spent,
                remaining=Money(budgeted + spent),
            )
        )

    return metrics


def group_metrics(metrics: Iterable[CategoryMetric]) -> dict[str, GroupMetric]:
    """Sum category metrics by category group.

    Categories without a group land in the "Uncategorized" bucket. Groups keep
    the order in which they first appear.
    """
    grouped: dict[str, list[CategoryMetric]] = {}
    for metric in metrics:
        group = metric.category.group or UNGROUPED
        grouped.setdefault(group, []).append(metric)

    return {
        group: GroupMetric(
            group=group,
            budgeted=Money(sum(m.budgeted for m in members)),
            spent=Money(sum(m.spent for m in members)),
            remaining=Money(sum(m.remaining for m in members)),
            categories=members,
        )
        for group, members in grouped.items()
    }


def budget_totals(metrics: Iterable[CategoryMetric]) -> BudgetTotals:
    """Sum category metrics over the whole month."""
    budgeted = 0
    spent = 0
    for metric in metrics:
        budgeted += metric.budgeted
        spent += metric.spent

    return BudgetTotals(
        budgeted=Money(budgeted),
        spent=Money(spent),
        remaining=Money(budgeted + spent),
    )


def utilization_percent(budgeted: Money, spent: Money) -> float:
    """Calculate the progress bar fill for a budget line.

    Args:
        budgeted: Budgeted amount in cents.
        spent: Spent amount in cents (zero or negative).

    Returns:
        Percentage between 0 and 100. Spending against a zero budget is shown
        as full.
    """
    if budgeted > 0:
        return min(100.0, abs(spent) / budgeted * 100)
    if spent < 0:
        return 100.0
    return 0.0
