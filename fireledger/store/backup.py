"""JSON backup of the full state tree.

The document is a direct serialization of FinanceState: every record becomes
an object with its field names as keys, and cents stay integers.
"""

import json
import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any

from fireledger.domain.models import (
    Account,
    BudgetEntry,
    BudgetMonth,
    Category,
    CategoryRule,
    FinanceState,
    FireConfig,
    Goal,
    Transaction,
    UserId,
)

logger = logging.getLogger(__name__)

BACKUP_VERSION = 1


def state_to_dict(state: FinanceState) -> dict[str, Any]:
    """Convert a state tree to plain JSON-compatible data."""
    data = asdict(state)
    data["version"] = BACKUP_VERSION
    return data


def state_from_dict(data: dict[str, Any]) -> FinanceState:
    """Rebuild a state tree from state_to_dict output.

    Raises:
        KeyError: If a required field is missing.
        TypeError: If a record has unexpected fields.
    """
    return FinanceState(
        user_id=UserId(data["user_id"]),
        accounts=[Account(**a) for a in data.get("accounts", [])],
        categories=[Category(**c) for c in data.get("categories", [])],
        category_rules=[CategoryRule(**r) for r in data.get("category_rules", [])],
        budget_months=[BudgetMonth(**m) for m in data.get("budget_months", [])],
        budget_entries=[BudgetEntry(**e) for e in data.get("budget_entries", [])],
        transactions=[Transaction(**t) for t in data.get("transactions", [])],
        goals=[Goal(**g) for g in data.get("goals", [])],
        fire_config=FireConfig(**data["fire_config"]),
    )


def export_state_json(state: FinanceState, output_path: Path) -> None:
    """Write the state tree to a JSON file.

    Raises:
        OSError: If the file cannot be written.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(state_to_dict(state), f, indent=2)
    logger.debug("Exported state for %s to %s", state.user_id, output_path)


def load_state_json(input_path: Path) -> FinanceState:
    """Read a state tree written by export_state_json.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not valid JSON.
    """
    with open(input_path, encoding="utf-8") as f:
        return state_from_dict(json.load(f))
