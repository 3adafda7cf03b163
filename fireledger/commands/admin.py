"""Admin commands for init, backup, export and restore."""

import shutil
import sqlite3
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from fireledger.commands.shared import commit_state, console, current_user, open_state
from fireledger.config import create_default_config, get_config_path
from fireledger.store.backup import export_state_json, load_state_json
from fireledger.store.schema import get_db_path, init_database


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Backup database and configuration files."""
    db_path = get_db_path()
    config_path = get_config_path()

    # Check if files exist
    if not db_path.exists():
        console.print("[red]Database not found. Run 'fireledger init' first.[/red]", style="bold")
        sys.exit(1)

    if not config_path.exists():
        console.print("[red]Config not found. Run 'fireledger init' first.[/red]", style="bold")
        sys.exit(1)

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = Path.home() / ".fireledger" / "backups"

    backup_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    db_backup = backup_dir / f"fireledger_{timestamp}.db"
    config_backup = backup_dir / f"config_{timestamp}.toml"

    try:
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        shutil.copy2(config_path, config_backup)
        console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        console.print(f"[red]Backup failed: {e}[/red]", style="bold")
        sys.exit(1)


def init_command(force: bool = False) -> None:
    """Initialize fireledger database and configuration."""
    db_path = get_db_path()
    config_path = get_config_path()

    db_exists = db_path.exists()
    config_exists = config_path.exists()

    try:
        # Guard: refuse to overwrite without force flag
        if not force and (db_exists or config_exists):
            console.print("[red]Initialization failed:[/red]", style="bold")
            if db_exists:
                console.print(f"  Database already exists: {db_path}")
            if config_exists:
                console.print(f"  Config already exists: {config_path}")
            console.print("\n[yellow]Use 'fireledger init --force' to overwrite[/yellow]")
            sys.exit(1)

        if force and db_exists:
            db_path.unlink()

        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        init_database(db_path)
        console.print("[green]✓[/green] Database initialized")

        console.print(f"[cyan]Creating config file at {config_path}...[/cyan]")
        create_default_config(config_path)
        console.print("[green]✓[/green] Config file created (permissions: 600)")

        console.print("\n[green]Initialization complete![/green]", style="bold")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Filesystem error: {e}[/red]", style="bold")
        sys.exit(1)


def export_command(output: str | None = None) -> None:
    """Export the full state tree as JSON."""
    state, _ = open_state()

    if output:
        output_path = Path(output).expanduser()
    else:
        output_path = Path.cwd() / f"fireledger_backup_{datetime.now().strftime('%Y-%m-%d')}.json"

    try:
        export_state_json(state, output_path)
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)

    console.print(f"[green]✓[/green] Exported {len(state.transactions)} transactions to: {output_path}")


def restore_command(input_file: str) -> None:
    """Replace the stored state with a JSON export."""
    _, db_path = open_state()

    try:
        state = load_state_json(Path(input_file).expanduser())
    except (OSError, ValueError, KeyError, TypeError) as e:
        console.print(f"[red]Could not read backup: {e}[/red]", style="bold")
        sys.exit(1)

    user_id = current_user()
    if state.user_id != user_id:
        console.print(f"[yellow]Backup belongs to '{state.user_id}', restoring it as '{user_id}'[/yellow]")
        state = replace(state, user_id=user_id)

    commit_state(state, db_path)
    console.print(f"[green]✓[/green] Restored {len(state.transactions)} transactions for {state.user_id}")
