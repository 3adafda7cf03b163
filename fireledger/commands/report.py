"""Dashboard summary command."""

import json
import sys

from fireledger.commands.budget import format_utilization, resolve_month
from fireledger.commands.shared import console, money, open_state
from fireledger.dates import month_prefix, month_range
from fireledger.domain.budget import utilization_percent
from fireledger.domain.models import Money, Month
from fireledger.domain.summary import financial_snapshot


def summary_command(month: str | None = None, as_json: bool = False) -> None:
    """Show the dashboard for a month, or print the raw snapshot as JSON."""
    year, month_num = resolve_month(month)
    state, _ = open_state()

    snapshot = financial_snapshot(state, year, month_num)

    if as_json:
        # Plain stdout so the output can be piped
        sys.stdout.write(json.dumps(snapshot, indent=2) + "\n")
        return

    _, _, label = month_range(Month(month_prefix(year, month_num)))
    console.print(f"[bold cyan]{label}[/bold cyan]\n")

    worth = snapshot["net_worth"]
    console.print(f"[bold]Net worth:[/bold] {money(Money(worth['net_worth']), colored=True)}")
    console.print(f"  [dim]Assets {money(Money(worth['assets']))} · Liabilities {money(Money(worth['liabilities']))}[/dim]\n")

    budget = snapshot["budget"]
    console.print(f"[bold]Budget remaining:[/bold] {money(Money(budget['remaining']), colored=True)}")
    console.print(
        f"  {format_utilization(utilization_percent(Money(budget['budgeted']), Money(budget['spent'])))}"
        f" [dim]{money(Money(budget['spent']))} of {money(Money(budget['budgeted']))}[/dim]\n"
    )

    fire = snapshot["fire"]
    if "error" in fire:
        console.print(f"[bold]FIRE:[/bold] [red]{fire['error']}[/red]\n")
    elif fire["years_to_fi"] is None:
        console.print("[bold]FIRE:[/bold] [yellow]not reached within 60 years[/yellow]\n")
    else:
        console.print(f"[bold]FIRE:[/bold] ~{fire['years_to_fi']} years (target {money(Money(fire['target_cents']))})\n")

    if snapshot["top_spending"]:
        console.print("[bold red]Top spending:[/bold red]")
        for item in snapshot["top_spending"]:
            budget_note = f" / {money(Money(item['budget']))}" if item["budget"] else ""
            console.print(f"  {item['name']:20} {money(Money(item['spent'])):>12}{budget_note}")
        console.print()

    if snapshot["recent_transactions"]:
        console.print("[bold]Recent transactions:[/bold]")
        for txn in snapshot["recent_transactions"]:
            console.print(f"  {txn['date']}  {txn['name']:30} {money(Money(txn['amount_cents']), colored=True)}")
