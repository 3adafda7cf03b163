"""Transaction commands (list, add, edit, CSV import)."""

import logging
import sys
from datetime import datetime
from pathlib import Path

import pandas as pd
import typer
from rich.table import Table

from fireledger.commands.shared import commit_state, console, money, new_id, open_state
from fireledger.config import get_setting, save_csv_mapping
from fireledger.domain.imports import CsvMapping, analyze_csv_columns, build_imported_transaction, parse_csv_row
from fireledger.domain.ledger import sort_newest_first
from fireledger.domain.models import AccountId, CategoryId, FinanceState, Transaction
from fireledger.domain.money import parse_amount
from fireledger.domain.state import TransactionUpdate, add_manual_transaction, import_transactions, update_transaction

logger = logging.getLogger(__name__)


def normalize_date(raw_date: str) -> str:
    """Normalize a date string to ISO format (YYYY-MM-DD).

    Uses pandas.to_datetime so bank exports in ISO, European or American
    formats all work.

    Raises:
        ValueError: If date cannot be parsed.
    """
    try:
        return pd.to_datetime(raw_date, dayfirst=True).strftime("%Y-%m-%d")
    except (ValueError, pd.errors.ParserError) as e:
        raise ValueError(f"Could not parse date '{raw_date}': {e}") from e


def resolve_category(state: FinanceState, name_or_id: str) -> CategoryId | None:
    """Find a category by id or case-insensitive name."""
    for category in state.categories:
        if category.id == name_or_id or category.name.lower() == name_or_id.lower():
            return category.id
    return None


def require_account(state: FinanceState, account_id: str) -> AccountId:
    """Return the account id, exiting if it does not exist."""
    if not any(a.id == account_id for a in state.accounts):
        console.print(f"[red]Account '{account_id}' not found (see 'fireledger accounts')[/red]")
        sys.exit(1)
    return AccountId(account_id)


def list_command(limit: int = 50, all: bool = False) -> None:
    """List transactions, newest first."""
    state, _ = open_state()

    transactions = sort_newest_first(state.transactions)
    if not all:
        transactions = transactions[:limit]

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    names = {c.id: c.name for c in state.categories}

    table = Table(title=f"Transactions (showing {len(transactions)})")
    table.add_column("ID", style="dim")
    table.add_column("Date", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Category", style="magenta")
    table.add_column("Source", style="dim")

    for txn in transactions:
        category = names.get(txn.category_id, txn.category_id) if txn.category_id else "[dim]-[/dim]"
        table.add_row(txn.id, txn.date, txn.name, money(txn.amount_cents, colored=True), category, txn.source)

    console.print(table)


def add_command(
    account_id: str,
    date: str,
    name: str,
    amount: str,
    category: str | None = None,
    notes: str = "",
) -> None:
    """Add a manual transaction and update the account balance."""
    state, db_path = open_state()
    account = require_account(state, account_id)

    try:
        normalized_date = normalize_date(date)
    except ValueError as e:
        console.print(f"[red]Invalid date format: {e}[/red]")
        console.print("[dim]Accepted formats: YYYY-MM-DD, DD/MM/YYYY, DD-MM-YYYY, etc.[/dim]")
        sys.exit(1)

    category_id = None
    if category:
        category_id = resolve_category(state, category)
        if category_id is None:
            console.print(f"[red]Category '{category}' doesn't exist (use 'fireledger add-category')[/red]")
            sys.exit(1)

    txn = Transaction(
        id=new_id("tx"),
        user_id=state.user_id,
        account_id=account,
        date=normalized_date,
        name=name,
        amount_cents=parse_amount(amount),
        category_id=category_id,
        notes=notes,
    )

    new_state = add_manual_transaction(state, txn)
    commit_state(new_state, db_path)

    stored = new_state.transactions[0]
    console.print("[green]✓[/green] Transaction added:")
    console.print(f"  Date: {stored.date}")
    console.print(f"  Name: {stored.name}")
    console.print(f"  Amount: {money(stored.amount_cents, colored=True)}")
    if stored.category_id:
        names = {c.id: c.name for c in new_state.categories}
        via = "" if category_id else " (matched rule)"
        console.print(f"  Category: {names.get(stored.category_id, stored.category_id)}{via}")
    else:
        console.print("[dim]Transaction added without category[/dim]")


def edit_command(
    transaction_id: str,
    amount: str | None = None,
    category: str | None = None,
    name: str | None = None,
    notes: str | None = None,
) -> None:
    """Edit a transaction; manual amount changes adjust the account balance."""
    state, db_path = open_state()

    old = next((t for t in state.transactions if t.id == transaction_id), None)
    if old is None:
        console.print(f"[red]Transaction {transaction_id} not found[/red]")
        sys.exit(1)

    updates = TransactionUpdate()
    if amount is not None:
        updates["amount_cents"] = parse_amount(amount)
    if name is not None:
        updates["name"] = name
    if notes is not None:
        updates["notes"] = notes
    if category is not None:
        if category == "-":
            updates["category_id"] = None
        else:
            category_id = resolve_category(state, category)
            if category_id is None:
                console.print(f"[red]Category '{category}' doesn't exist[/red]")
                sys.exit(1)
            updates["category_id"] = category_id

    if not updates:
        console.print("[yellow]Nothing to change[/yellow]")
        return

    commit_state(update_transaction(state, transaction_id, updates), db_path)

    console.print(f"[green]✓[/green] Updated transaction {transaction_id}")
    if "amount_cents" in updates:
        console.print(f"  Amount: {money(old.amount_cents)} → {money(updates['amount_cents'])}")
        if old.source != "manual":
            console.print("[dim]Imported transaction: account balance left unchanged[/dim]")


def prompt_for_csv_mapping(headers: list[str], suggested: dict[str, str]) -> CsvMapping:
    """Prompt the user to confirm which CSV columns to use."""
    console.print(f"[bold]Columns:[/bold] {', '.join(headers)}\n")

    date_col = typer.prompt("Date column", default=suggested["date"] or None)
    name_col = typer.prompt("Payee/name column", default=suggested["name"] or None)
    amount_col = typer.prompt("Amount column", default=suggested["amount"] or None)
    external_col = typer.prompt("Transaction id column (blank for none)", default=suggested["external_id"])

    return CsvMapping(
        date_column=date_col,
        name_column=name_col,
        amount_column=amount_col,
        external_id_column=external_col.strip(),
    )


def saved_csv_mapping(headers: list[str]) -> CsvMapping | None:
    """Return the saved mapping if every column it names is present."""
    saved = get_setting("csv") or {}
    required = ("date_column", "name_column", "amount_column")
    if not all(saved.get(key) in headers for key in required):
        return None

    external = saved.get("external_id_column", "")
    return CsvMapping(
        date_column=saved["date_column"],
        name_column=saved["name_column"],
        amount_column=saved["amount_column"],
        external_id_column=external if external in headers else "",
    )


def import_csv_command(csv_file: str, account_id: str, negate: bool = False) -> None:
    """Import transactions from a CSV file, skipping known external ids."""
    csv_path = Path(csv_file).expanduser()
    if not csv_path.exists():
        console.print(f"[red]CSV file not found: {csv_path}[/red]", style="bold")
        sys.exit(1)

    state, db_path = open_state()
    account = require_account(state, account_id)

    try:
        console.print(f"[cyan]Reading CSV file: {csv_path}...[/cyan]")
        frame = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    except (OSError, ValueError) as e:
        console.print(f"[red]Could not read CSV: {e}[/red]", style="bold")
        sys.exit(1)

    if frame.empty:
        console.print("[yellow]No transactions found in CSV[/yellow]")
        return

    headers = [str(h) for h in frame.columns]
    mapping = saved_csv_mapping(headers)
    if mapping is None:
        console.print("[yellow]No saved column mapping for this file. Running interactive setup...[/yellow]\n")
        mapping = prompt_for_csv_mapping(headers, analyze_csv_columns(headers))
        save_csv_mapping(dict(mapping))
        console.print("[green]✓[/green] Column mapping saved\n")

    imported_at = datetime.now().isoformat(timespec="seconds")
    incoming: list[Transaction] = []
    skipped = 0

    for row_num, row in enumerate(frame.to_dict(orient="records"), start=2):
        try:
            parsed = parse_csv_row(row, mapping, normalize_date)
        except ValueError as e:
            skipped += 1
            console.print(f"[yellow]Row {row_num}: {e}[/yellow]")
            continue
        if parsed is None:
            skipped += 1
            continue
        if negate:
            parsed["amount"] = -parsed["amount"]
        incoming.append(build_imported_transaction(parsed, new_id("tx"), state.user_id, account, imported_at))

    new_state, added = import_transactions(state, incoming)
    commit_state(new_state, db_path)

    logger.debug("Imported %d of %d rows from %s", added, len(incoming), csv_path)
    console.print(f"[green]Imported {added} transactions![/green]", style="bold")
    duplicates = len(incoming) - added
    if duplicates:
        console.print(f"[dim]Skipped {duplicates} already imported transactions[/dim]")
    if skipped:
        console.print(f"[dim]Skipped {skipped} unreadable rows[/dim]")

    categorized = sum(1 for t in new_state.transactions if t.imported_at == imported_at and t.category_id)
    if categorized:
        console.print(f"[dim]{categorized} categorized by rules[/dim]")
