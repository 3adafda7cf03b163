"""Helpers shared by the command modules."""

import logging
import sqlite3
import sys
import uuid
from pathlib import Path

from rich.console import Console

from fireledger.config import get_setting
from fireledger.domain.models import FinanceState, Money, UserId
from fireledger.domain.money import format_amount
from fireledger.store.queries import load_state, save_state
from fireledger.store.schema import database_exists, get_db_path

console = Console()
logger = logging.getLogger(__name__)


def new_id(prefix: str) -> str:
    """Generate a record id such as "tx_3f2a9c1b7d4e"."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def current_user() -> UserId:
    """Get the configured user id."""
    return UserId(str(get_setting("user_id")))


def money(amount: Money, colored: bool = False) -> str:
    """Format cents with the configured currency symbol.

    Args:
        amount: Amount in cents.
        colored: Wrap in red/green rich markup by sign.
    """
    text = format_amount(amount, str(get_setting("currency_symbol")))
    if not colored:
        return text
    if amount < 0:
        return f"[red]{text}[/red]"
    return f"[green]{text}[/green]"


def open_state() -> tuple[FinanceState, Path]:
    """Load the current user's state, exiting if there is no database."""
    db_path = get_db_path()

    if not database_exists(db_path):
        console.print("[red]Database not found. Run 'fireledger init' first.[/red]", style="bold")
        sys.exit(1)

    try:
        return load_state(current_user(), db_path), db_path
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def commit_state(state: FinanceState, db_path: Path) -> None:
    """Persist the state, exiting on database errors."""
    try:
        save_state(state, db_path)
    except sqlite3.Error as e:
        logger.debug("save_state failed", exc_info=True)
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
