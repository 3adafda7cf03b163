"""Database query functions.

The store loads and saves whole FinanceState trees; the pure reducers in
fireledger.domain.state do the work in between.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Any

from fireledger.domain.models import (
    DEFAULT_FIRE_CONFIG,
    Account,
    AccountId,
    BudgetEntry,
    BudgetMonth,
    BudgetMonthId,
    Category,
    CategoryId,
    CategoryRule,
    FinanceState,
    FireConfig,
    Goal,
    Money,
    Transaction,
    UserId,
)
from fireledger.store.schema import get_db_path

logger = logging.getLogger(__name__)

_USER_TABLES = (
    "accounts",
    "categories",
    "category_rules",
    "budget_months",
    "budget_entries",
    "transactions",
    "goals",
    "fire_config",
)


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def _fetch(conn: sqlite3.Connection, query: str, user_id: UserId) -> list[dict[str, Any]]:
    cursor = conn.cursor()
    cursor.execute(query, (user_id,))
    return [dict(row) for row in cursor.fetchall()]


def load_state(user_id: UserId, db_path: Path | None = None) -> FinanceState:
    """Load every record belonging to a user.

    Args:
        user_id: Owning user.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        FinanceState with lists in their saved order. A user with no FIRE
        configuration gets the defaults.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        accounts = [
            Account(
                id=AccountId(row["id"]),
                user_id=user_id,
                name=row["name"],
                type=row["type"],
                provider=row["provider"],
                current_balance_cents=Money(row["current_balance_cents"]),
                external_account_id=row["external_account_id"],
                institution_name=row["institution_name"],
                is_closed=bool(row["is_closed"]),
            )
            for row in _fetch(conn, "SELECT * FROM accounts WHERE user_id = ? ORDER BY position", user_id)
        ]

        categories = [
            Category(id=CategoryId(row["id"]), user_id=user_id, name=row["name"], group=row["category_group"])
            for row in _fetch(conn, "SELECT * FROM categories WHERE user_id = ? ORDER BY position", user_id)
        ]

        rules = [
            CategoryRule(
                id=row["id"],
                user_id=user_id,
                pattern=row["pattern"],
                category_id=CategoryId(row["category_id"]),
            )
            for row in _fetch(conn, "SELECT * FROM category_rules WHERE user_id = ? ORDER BY position", user_id)
        ]

        months = [
            BudgetMonth(id=BudgetMonthId(row["id"]), user_id=user_id, year=row["year"], month=row["month"])
            for row in _fetch(conn, "SELECT * FROM budget_months WHERE user_id = ? ORDER BY year, month", user_id)
        ]

        entries = [
            BudgetEntry(
                id=row["id"],
                user_id=user_id,
                budget_month_id=BudgetMonthId(row["budget_month_id"]),
                category_id=CategoryId(row["category_id"]),
                budgeted_cents=Money(row["budgeted_cents"]),
            )
            for row in _fetch(conn, "SELECT * FROM budget_entries WHERE user_id = ? ORDER BY rowid", user_id)
        ]

        transactions = [
            Transaction(
                id=row["id"],
                user_id=user_id,
                account_id=AccountId(row["account_id"]),
                date=row["date"],
                name=row["name"],
                amount_cents=Money(row["amount_cents"]),
                category_id=CategoryId(row["category_id"]) if row["category_id"] else None,
                notes=row["notes"],
                source=row["source"],
                status=row["status"],
                external_transaction_id=row["external_transaction_id"],
                imported_at=row["imported_at"],
            )
            for row in _fetch(conn, "SELECT * FROM transactions WHERE user_id = ? ORDER BY position", user_id)
        ]

        goals = [
            Goal(
                id=row["id"],
                user_id=user_id,
                name=row["name"],
                target_cents=Money(row["target_cents"]),
                current_cents=Money(row["current_cents"]),
                target_year=row["target_year"],
            )
            for row in _fetch(conn, "SELECT * FROM goals WHERE user_id = ? ORDER BY position", user_id)
        ]

        fire_rows = _fetch(conn, "SELECT * FROM fire_config WHERE user_id = ?", user_id)

    fire_config = DEFAULT_FIRE_CONFIG
    if fire_rows:
        row = fire_rows[0]
        fire_config = FireConfig(
            current_portfolio_cents=Money(row["current_portfolio_cents"]),
            monthly_contribution_cents=Money(row["monthly_contribution_cents"]),
            expected_real_return_percent=row["expected_real_return_percent"],
            annual_spend_cents=Money(row["annual_spend_cents"]),
            safe_withdrawal_rate_percent=row["safe_withdrawal_rate_percent"],
        )

    logger.debug("Loaded %d accounts and %d transactions for %s", len(accounts), len(transactions), user_id)

    return FinanceState(
        user_id=user_id,
        accounts=accounts,
        categories=categories,
        category_rules=rules,
        budget_months=months,
        budget_entries=entries,
        transactions=transactions,
        goals=goals,
        fire_config=fire_config,
    )


def save_state(state: FinanceState, db_path: Path | None = None) -> None:
    """Replace a user's stored records with the given state.

    Everything is written in one transaction; on failure the previous data is
    left untouched.

    Args:
        state: State to persist.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    user_id = state.user_id

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            for table in _USER_TABLES:
                cursor.execute(f"DELETE FROM {table} WHERE user_id = ?", (user_id,))

            cursor.executemany(
                """
                INSERT INTO accounts (id, user_id, position, name, type, provider, current_balance_cents,
                                      external_account_id, institution_name, is_closed)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        a.id,
                        user_id,
                        pos,
                        a.name,
                        a.type,
                        a.provider,
                        a.current_balance_cents,
                        a.external_account_id,
                        a.institution_name,
                        int(a.is_closed),
                    )
                    for pos, a in enumerate(state.accounts)
                ],
            )

            cursor.executemany(
                "INSERT INTO categories (id, user_id, position, name, category_group) VALUES (?, ?, ?, ?, ?)",
                [(c.id, user_id, pos, c.name, c.group) for pos, c in enumerate(state.categories)],
            )

            cursor.executemany(
                "INSERT INTO category_rules (id, user_id, position, pattern, category_id) VALUES (?, ?, ?, ?, ?)",
                [(r.id, user_id, pos, r.pattern, r.category_id) for pos, r in enumerate(state.category_rules)],
            )

            cursor.executemany(
                "INSERT INTO budget_months (id, user_id, year, month) VALUES (?, ?, ?, ?)",
                [(m.id, user_id, m.year, m.month) for m in state.budget_months],
            )

            cursor.executemany(
                """
                INSERT INTO budget_entries (id, user_id, budget_month_id, category_id, budgeted_cents)
                VALUES (?, ?, ?, ?, ?)
                """,
                [(e.id, user_id, e.budget_month_id, e.category_id, e.budgeted_cents) for e in state.budget_entries],
            )

            cursor.executemany(
                """
                INSERT INTO transactions (id, user_id, position, account_id, date, name, amount_cents, category_id,
                                          notes, source, status, external_transaction_id, imported_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (
                        t.id,
                        user_id,
                        pos,
                        t.account_id,
                        t.date,
                        t.name,
                        t.amount_cents,
                        t.category_id,
                        t.notes,
                        t.source,
                        t.status,
                        t.external_transaction_id,
                        t.imported_at,
                    )
                    for pos, t in enumerate(state.transactions)
                ],
            )

            cursor.executemany(
                """
                INSERT INTO goals (id, user_id, position, name, target_cents, current_cents, target_year)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    (g.id, user_id, pos, g.name, g.target_cents, g.current_cents, g.target_year)
                    for pos, g in enumerate(state.goals)
                ],
            )

            fire = state.fire_config
            cursor.execute(
                """
                INSERT INTO fire_config (user_id, current_portfolio_cents, monthly_contribution_cents,
                                         expected_real_return_percent, annual_spend_cents,
                                         safe_withdrawal_rate_percent)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    user_id,
                    fire.current_portfolio_cents,
                    fire.monthly_contribution_cents,
                    fire.expected_real_return_percent,
                    fire.annual_spend_cents,
                    fire.safe_withdrawal_rate_percent,
                ),
            )

            conn.commit()
            logger.debug("Saved state for %s (%d transactions)", user_id, len(state.transactions))
        except sqlite3.Error:
            conn.rollback()
            raise
