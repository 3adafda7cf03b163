"""Account commands: listing with net worth, adding accounts."""

import sys

from rich.table import Table

from fireledger.commands.shared import commit_state, console, money, new_id, open_state
from fireledger.domain.ledger import net_worth
from fireledger.domain.models import ACCOUNT_TYPES, Account, AccountId
from fireledger.domain.money import parse_amount
from fireledger.domain.state import upsert_account


def accounts_command() -> None:
    """List accounts and show net worth."""
    state, _ = open_state()

    if not state.accounts:
        console.print("[yellow]No accounts yet (use 'fireledger add-account')[/yellow]")
        return

    table = Table(title="Accounts")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Type", style="cyan")
    table.add_column("Provider", style="dim")
    table.add_column("Balance", justify="right")

    for account in state.accounts:
        table.add_row(
            account.id,
            account.name,
            account.type,
            account.provider,
            money(account.current_balance_cents, colored=True),
        )

    console.print(table)

    worth = net_worth(state.accounts)
    console.print(f"\n[bold]Assets:[/bold]      {money(worth.assets)}")
    console.print(f"[bold]Liabilities:[/bold] {money(worth.liabilities)}")
    console.print(f"[bold cyan]Net worth:[/bold cyan]   {money(worth.net_worth, colored=True)}")


def add_account_command(name: str, account_type: str, balance: str) -> None:
    """Add a manual account with an opening balance."""
    if account_type not in ACCOUNT_TYPES:
        console.print(f"[red]Unknown account type '{account_type}'[/red]")
        console.print(f"[dim]Choose one of: {', '.join(ACCOUNT_TYPES)}[/dim]")
        sys.exit(1)

    state, db_path = open_state()

    account = Account(
        id=AccountId(new_id("acc")),
        user_id=state.user_id,
        name=name,
        type=account_type,  # type: ignore[arg-type]
        provider="manual",
        current_balance_cents=parse_amount(balance),
    )
    commit_state(upsert_account(state, account), db_path)

    console.print(f"[green]✓[/green] Added {account.type} account '{name}' ({account.id})")
    console.print(f"  Balance: {money(account.current_balance_cents)}")
