"""FIRE projection and savings goal commands."""

import sys
from typing import Any

from rich.table import Table

from fireledger.commands.shared import commit_state, console, money, new_id, open_state
from fireledger.domain.fire import (
    InvalidFireConfigError,
    goal_progress_percent,
    projection_milestones,
    simulate_fire,
    validate_fire_config,
)
from fireledger.domain.models import FireConfig, Goal, Money
from fireledger.domain.money import parse_amount, round_half_up
from fireledger.domain.state import add_goal, update_fire_config


def render_fire_config(config: FireConfig) -> None:
    """Print the current FIRE settings."""
    console.print("[bold]Your FIRE settings:[/bold]")
    console.print(f"  Portfolio:             {money(config.current_portfolio_cents)}")
    console.print(f"  Monthly contribution:  {money(config.monthly_contribution_cents)}")
    console.print(f"  Real return:           {config.expected_real_return_percent}%")
    console.print(f"  Annual spend:          {money(config.annual_spend_cents)}")
    console.print(f"  Safe withdrawal rate:  {config.safe_withdrawal_rate_percent}%\n")


def fire_command(
    portfolio: str | None = None,
    contribution: str | None = None,
    return_rate: float | None = None,
    annual_spend: str | None = None,
    withdrawal_rate: float | None = None,
    full: bool = False,
) -> None:
    """Update FIRE settings (if any option is given) and show the projection."""
    state, db_path = open_state()

    changes: dict[str, Any] = {}
    if portfolio is not None:
        changes["current_portfolio_cents"] = parse_amount(portfolio)
    if contribution is not None:
        changes["monthly_contribution_cents"] = parse_amount(contribution)
    if return_rate is not None:
        changes["expected_real_return_percent"] = return_rate
    if annual_spend is not None:
        changes["annual_spend_cents"] = parse_amount(annual_spend)
    if withdrawal_rate is not None:
        changes["safe_withdrawal_rate_percent"] = withdrawal_rate

    if changes:
        new_state = update_fire_config(state, **changes)
        try:
            validate_fire_config(new_state.fire_config)
        except InvalidFireConfigError as e:
            console.print(f"[red]{e}[/red]", style="bold")
            console.print("[dim]Settings were not saved[/dim]")
            sys.exit(1)
        commit_state(new_state, db_path)
        console.print("[green]✓[/green] FIRE settings updated\n")
        state = new_state

    render_fire_config(state.fire_config)

    try:
        projection = simulate_fire(state.fire_config)
    except InvalidFireConfigError as e:
        console.print(f"[red]{e}[/red]", style="bold")
        console.print(f"[dim]Fix it with the matching option, e.g. --withdrawal-rate 4 ({e.field})[/dim]")
        sys.exit(1)

    console.print(f"[bold cyan]FI number:[/bold cyan] {money(Money(round_half_up(projection.target_cents)))}")
    if projection.years_to_fi is None:
        console.print("[yellow]Target not reached within 60 years[/yellow]")
    elif projection.years_to_fi == 0:
        console.print("[green]Already financially independent![/green]")
    else:
        console.print(f"[green]~{projection.years_to_fi} years to financial independence[/green]")

    rows = projection.yearly_values if full else projection_milestones(projection)
    if not rows:
        return

    table = Table(title="Projection")
    table.add_column("Year", justify="right", style="cyan")
    table.add_column("Portfolio", justify="right")
    for value in rows:
        marker = " [green]← FI[/green]" if value.year_index == projection.years_to_fi else ""
        table.add_row(str(value.year_index), f"{money(value.value_cents)}{marker}")
    console.print()
    console.print(table)


def goals_command() -> None:
    """List savings goals with progress."""
    state, _ = open_state()

    if not state.goals:
        console.print("[yellow]No goals yet (use 'fireledger add-goal')[/yellow]")
        return

    table = Table(title="Goals")
    table.add_column("Name", style="white")
    table.add_column("Saved", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Progress", justify="right")

    for goal in state.goals:
        percent = goal_progress_percent(goal)
        style = "green" if percent >= 100 else "cyan"
        table.add_row(goal.name, money(goal.current_cents), money(goal.target_cents), f"[{style}]{percent}%[/{style}]")

    console.print(table)


def add_goal_command(name: str, target: str, current: str = "0", target_year: int | None = None) -> None:
    """Create a savings goal."""
    state, db_path = open_state()

    target_cents = parse_amount(target)
    if target_cents <= 0:
        console.print("[red]Target must be positive[/red]")
        sys.exit(1)

    goal = Goal(
        id=new_id("goal"),
        user_id=state.user_id,
        name=name,
        target_cents=target_cents,
        current_cents=parse_amount(current),
        target_year=target_year,
    )
    commit_state(add_goal(state, goal), db_path)
    console.print(f"[green]✓[/green] Goal '{name}' created ({goal_progress_percent(goal)}% done)")
