"""CLI entry point for fireledger."""

import logging

import typer
from rich.logging import RichHandler

from fireledger.commands.accounts import accounts_command, add_account_command
from fireledger.commands.admin import backup_command, export_command, init_command, restore_command
from fireledger.commands.budget import budget_command
from fireledger.commands.fire import add_goal_command, fire_command, goals_command
from fireledger.commands.report import summary_command
from fireledger.commands.rules import (
    add_category_command,
    add_rule_command,
    categories_command,
    categorize_command,
    rules_command,
)
from fireledger.commands.transactions import add_command, edit_command, import_csv_command, list_command

app = typer.Typer(
    name="fireledger",
    help="fireledger - budgets, net worth and a FIRE countdown from your terminal",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """fireledger - budgets, net worth and a FIRE countdown from your terminal."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize fireledger database and configuration."""
    init_command(force)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: ~/.fireledger/backups)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command(name="export")
def export(
    output: str = typer.Option(None, "--output", "-o", help="JSON file to write"),
) -> None:
    """Export all your data as a JSON document."""
    export_command(output)


@app.command(name="restore")
def restore(input_file: str) -> None:
    """Replace your data with a JSON export."""
    restore_command(input_file)


@app.command(name="accounts")
def accounts() -> None:
    """List your accounts and net worth."""
    accounts_command()


@app.command(name="add-account")
def add_account(
    name: str,
    account_type: str = typer.Option("checking", "--type", "-t", help="checking, savings, credit, investment, other"),
    balance: str = typer.Option("0", "--balance", "-b", help="Current balance (e.g. 1,234.56 or -150)"),
) -> None:
    """Add a manually tracked account."""
    add_account_command(name, account_type, balance)


@app.command(name="list")
def list_transactions(
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your transactions"),
) -> None:
    """List your transactions."""
    list_command(limit, all)


@app.command(name="add")
def add(
    account_id: str,
    date: str,
    name: str,
    amount: str = typer.Option(..., "--amount", "-a", help="Amount, negative for expenses (e.g. -12.50)"),
    category: str = typer.Option(None, "--category", "-c", help="Category name or id"),
    notes: str = typer.Option("", "--notes", "-n", help="Free-text notes"),
) -> None:
    """Add a manual transaction (updates the account balance)."""
    add_command(account_id, date, name, amount, category, notes)


@app.command(name="edit")
def edit(
    transaction_id: str,
    amount: str = typer.Option(None, "--amount", help="New amount"),
    category: str = typer.Option(None, "--category", "-c", help="Category name or id ('-' to clear)"),
    name: str = typer.Option(None, "--name", help="New payee name"),
    notes: str = typer.Option(None, "--notes", help="New notes"),
) -> None:
    """Edit one of your transactions."""
    edit_command(transaction_id, amount, category, name, notes)


@app.command(name="import-csv")
def import_csv(
    csv_file: str,
    account_id: str = typer.Option(..., "--account", help="Account the transactions belong to"),
    negate: bool = typer.Option(False, "--negate", help="Flip the sign of every amount"),
) -> None:
    """Import transactions from a bank CSV export."""
    import_csv_command(csv_file, account_id, negate)


@app.command(name="categories")
def categories() -> None:
    """List your categories."""
    categories_command()


@app.command(name="add-category")
def add_category(
    name: str,
    group: str = typer.Option(None, "--group", "-g", help="Group label (default: General)"),
) -> None:
    """Create a budget category."""
    add_category_command(name, group)


@app.command(name="rules")
def rules() -> None:
    """List your categorization rules."""
    rules_command()


@app.command(name="add-rule")
def add_rule(pattern: str, category: str) -> None:
    """Add a rule: payees containing PATTERN go to CATEGORY."""
    add_rule_command(pattern, category)


@app.command(name="categorize")
def categorize() -> None:
    """Apply your rules to uncategorized transactions."""
    categorize_command()


@app.command()
def budget(
    category: str = typer.Option(None, "--category", "-c", help="Category to set a budget for"),
    amount: str = typer.Option(None, "--set", help="Budgeted amount for the category"),
    month: str = typer.Option(None, "--month", help="Month (YYYY-MM, default: current)"),
) -> None:
    """Show your budget status, or set a category budget."""
    budget_command(category, amount, month)


@app.command()
def fire(
    portfolio: str = typer.Option(None, "--portfolio", help="Current invested portfolio"),
    contribution: str = typer.Option(None, "--contribution", help="Monthly contribution"),
    return_rate: float = typer.Option(None, "--return", help="Expected real annual return (%)"),
    annual_spend: str = typer.Option(None, "--spend", help="Annual spend in retirement"),
    withdrawal_rate: float = typer.Option(None, "--withdrawal-rate", help="Safe withdrawal rate (%)"),
    full: bool = typer.Option(False, "--full", help="Show every projected year"),
) -> None:
    """Show your FIRE projection (options update your settings first)."""
    fire_command(portfolio, contribution, return_rate, annual_spend, withdrawal_rate, full)


@app.command()
def goals() -> None:
    """List your savings goals."""
    goals_command()


@app.command(name="add-goal")
def add_goal(
    name: str,
    target: str,
    current: str = typer.Option("0", "--current", help="Amount saved so far"),
    target_year: int = typer.Option(None, "--year", help="Year you want to reach it"),
) -> None:
    """Create a savings goal."""
    add_goal_command(name, target, current, target_year)


@app.command()
def summary(
    month: str = typer.Option(None, "--month", help="Month (YYYY-MM, default: current)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw snapshot as JSON"),
) -> None:
    """Show your dashboard: net worth, budget, FIRE and recent activity."""
    summary_command(month, as_json)


if __name__ == "__main__":
    app()
