"""Budget command for viewing and setting monthly category budgets."""

import sys

from rich.table import Table

from fireledger.commands.shared import commit_state, console, money, open_state
from fireledger.commands.transactions import resolve_category
from fireledger.dates import current_month, month_prefix, month_range, parse_month
from fireledger.domain.budget import budget_totals, category_metrics, group_metrics, utilization_percent
from fireledger.domain.ledger import transactions_in_month
from fireledger.domain.models import Month
from fireledger.domain.money import parse_amount
from fireledger.domain.state import ensure_budget_month, set_budget


def format_utilization(percent: float, width: int = 20) -> str:
    """Render a progress bar colored by how much of the budget is used."""
    filled = int(percent / 100 * width)
    bar = "█" * filled + "░" * (width - filled)
    if percent >= 100:
        return f"[red]{bar}[/red] {percent:.0f}%"
    elif percent > 90:
        return f"[yellow]{bar}[/yellow] {percent:.0f}%"
    else:
        return f"[green]{bar}[/green] {percent:.0f}%"


def resolve_month(month: str | None) -> tuple[int, int]:
    """Parse --month or fall back to the current month."""
    if not month:
        return current_month()
    try:
        return parse_month(Month(month))
    except ValueError:
        console.print(f"[red]Invalid month '{month}' (expected YYYY-MM)[/red]")
        sys.exit(1)


def budget_status(month: str | None = None) -> None:
    """Show budgeted, spent and remaining per category, grouped."""
    year, month_num = resolve_month(month)
    state, db_path = open_state()

    # Viewing a month creates it, same as editing
    new_state, month_id = ensure_budget_month(state, year, month_num)
    if new_state is not state:
        commit_state(new_state, db_path)

    if not new_state.categories:
        console.print("[yellow]No categories yet (use 'fireledger add-category')[/yellow]")
        return

    month_txns = transactions_in_month(new_state.transactions, year, month_num)
    metrics = category_metrics(new_state.categories, new_state.budget_entries, month_txns, month_id)
    groups = group_metrics(metrics)
    totals = budget_totals(metrics)

    _, _, label = month_range(Month(month_prefix(year, month_num)))
    table = Table(title=f"Budget - {label}")
    table.add_column("Category", style="white")
    table.add_column("Budgeted", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Used")

    for group in groups.values():
        table.add_row(
            f"[bold cyan]{group.group}[/bold cyan]",
            f"[bold]{money(group.budgeted)}[/bold]",
            f"[bold]{money(group.spent)}[/bold]",
            f"[bold]{money(group.remaining)}[/bold]",
            "",
        )
        for metric in group.categories:
            table.add_row(
                f"  {metric.category.name}",
                money(metric.budgeted),
                money(metric.spent),
                money(metric.remaining, colored=True),
                format_utilization(utilization_percent(metric.budgeted, metric.spent)),
            )

    console.print(table)
    console.print(f"\n[bold]Total budgeted:[/bold] {money(totals.budgeted)}")
    console.print(f"[bold]Total spent:[/bold]    {money(totals.spent)}")
    console.print(f"[bold cyan]Remaining:[/bold cyan]      {money(totals.remaining, colored=True)}")


def budget_set(category: str, amount: str, month: str | None = None) -> None:
    """Set the budgeted amount for a category in a month."""
    year, month_num = resolve_month(month)
    state, db_path = open_state()

    category_id = resolve_category(state, category)
    if category_id is None:
        console.print(f"[red]Category '{category}' doesn't exist[/red]")
        sys.exit(1)

    state, month_id = ensure_budget_month(state, year, month_num)
    cents = parse_amount(amount)
    commit_state(set_budget(state, category_id, month_id, cents), db_path)

    console.print(f"[green]✓ {category} budgeted {money(cents)} for {month_prefix(year, month_num)}[/green]")


def budget_command(
    category: str | None = None,
    amount: str | None = None,
    month: str | None = None,
) -> None:
    """Show budget status, or set a budget when category and amount are given."""
    if category is None and amount is None:
        budget_status(month)
        return

    if category is None or amount is None:
        console.print("[red]Both --category and --set are needed to set a budget[/red]")
        sys.exit(1)

    budget_set(category, amount, month)
