"""Category and rule commands."""

import sys

from rich.table import Table

from fireledger.commands.shared import commit_state, console, new_id, open_state
from fireledger.commands.transactions import resolve_category
from fireledger.domain.categorize import uncategorized
from fireledger.domain.models import Category, CategoryId, CategoryRule
from fireledger.domain.state import add_category, add_category_rule, apply_rules


def categories_command() -> None:
    """List categories with their groups."""
    state, _ = open_state()

    if not state.categories:
        console.print("[yellow]No categories yet (use 'fireledger add-category')[/yellow]")
        return

    table = Table(title="Categories")
    table.add_column("ID", style="dim")
    table.add_column("Name", style="white")
    table.add_column("Group", style="cyan")

    for category in state.categories:
        table.add_row(category.id, category.name, category.group or "[dim]-[/dim]")

    console.print(table)


def add_category_command(name: str, group: str | None = None) -> None:
    """Create a category."""
    state, db_path = open_state()

    if any(c.name.lower() == name.lower() for c in state.categories):
        console.print(f"[yellow]Category '{name}' already exists[/yellow]")
        return

    category = Category(id=CategoryId(new_id("cat")), user_id=state.user_id, name=name, group=group or "General")
    commit_state(add_category(state, category), db_path)
    console.print(f"[green]✓[/green] Created category: {name} ({category.group})")


def rules_command() -> None:
    """List rules in the order they are applied."""
    state, _ = open_state()

    if not state.category_rules:
        console.print("[yellow]No rules yet (use 'fireledger add-rule')[/yellow]")
        return

    names = {c.id: c.name for c in state.categories}

    table = Table(title="Category rules (first match wins)")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Pattern", style="white")
    table.add_column("Category", style="magenta")

    for idx, rule in enumerate(state.category_rules, 1):
        table.add_row(str(idx), rule.pattern, names.get(rule.category_id, rule.category_id))

    console.print(table)


def add_rule_command(pattern: str, category: str) -> None:
    """Append a rule; it is tried after every existing rule."""
    state, db_path = open_state()

    if not pattern.strip():
        console.print("[red]Pattern must not be empty[/red]")
        sys.exit(1)

    category_id = resolve_category(state, category)
    if category_id is None:
        console.print(f"[red]Category '{category}' doesn't exist (use 'fireledger add-category')[/red]")
        sys.exit(1)

    rule = CategoryRule(id=new_id("rule"), user_id=state.user_id, pattern=pattern, category_id=category_id)
    commit_state(add_category_rule(state, rule), db_path)
    console.print(f"[green]✓[/green] Rule #{len(state.category_rules) + 1}: '{pattern}' → {category}")


def categorize_command() -> None:
    """Apply rules to every uncategorized transaction."""
    state, db_path = open_state()

    pending = len(uncategorized(state.transactions))
    if pending == 0:
        console.print("[dim]All transactions already have a category[/dim]")
        return

    new_state, changed = apply_rules(state)
    if changed:
        commit_state(new_state, db_path)

    console.print(f"[green]✓[/green] Categorized {changed} of {pending} uncategorized transactions")
