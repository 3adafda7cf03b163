"""Database schema initialization."""

import logging
import os
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "fireledger" / "fireledger.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Record ids are unique per user, not per database. List-valued records
    carry a position column so that their order (which matters for category
    rules) survives a save/load cycle.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS accounts (
                id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                name TEXT NOT NULL,
                type TEXT NOT NULL,
                provider TEXT NOT NULL DEFAULT 'manual',
                current_balance_cents INTEGER NOT NULL DEFAULT 0,
                external_account_id TEXT,
                institution_name TEXT,
                is_closed INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (user_id, id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS categories (
                id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                name TEXT NOT NULL,
                category_group TEXT,
                PRIMARY KEY (user_id, id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS category_rules (
                id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                pattern TEXT NOT NULL,
                category_id TEXT NOT NULL,
                PRIMARY KEY (user_id, id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS budget_months (
                id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                year INTEGER NOT NULL,
                month INTEGER NOT NULL,
                PRIMARY KEY (user_id, id),
                UNIQUE (user_id, year, month)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS budget_entries (
                id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                budget_month_id TEXT NOT NULL,
                category_id TEXT NOT NULL,
                budgeted_cents INTEGER NOT NULL,
                PRIMARY KEY (user_id, id),
                UNIQUE (user_id, budget_month_id, category_id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                account_id TEXT NOT NULL,
                date TEXT NOT NULL,
                name TEXT NOT NULL,
                amount_cents INTEGER NOT NULL,
                category_id TEXT,
                notes TEXT NOT NULL DEFAULT '',
                source TEXT NOT NULL DEFAULT 'manual',
                status TEXT NOT NULL DEFAULT 'posted',
                external_transaction_id TEXT,
                imported_at TEXT,
                PRIMARY KEY (user_id, id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS goals (
                id TEXT NOT NULL,
                user_id TEXT NOT NULL,
                position INTEGER NOT NULL,
                name TEXT NOT NULL,
                target_cents INTEGER NOT NULL,
                current_cents INTEGER NOT NULL,
                target_year INTEGER,
                PRIMARY KEY (user_id, id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS fire_config (
                user_id TEXT PRIMARY KEY,
                current_portfolio_cents INTEGER NOT NULL,
                monthly_contribution_cents INTEGER NOT NULL,
                expected_real_return_percent REAL NOT NULL,
                annual_spend_cents INTEGER NOT NULL,
                safe_withdrawal_rate_percent REAL NOT NULL
            )
        """
        )

        # Indexes for common queries
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_date ON transactions(date)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_external_id ON transactions(external_transaction_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_category_date ON transactions(category_id, date)")

        conn.commit()
        logger.debug("Database schema ready at %s", db_path)

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
