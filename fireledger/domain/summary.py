"""Financial snapshot for the dashboard and the chat assistant.

The snapshot is a plain, JSON-serialisable dict of engine outputs. Building
prompts from it is someone else's job.
"""

from typing import Any

from fireledger.dates import month_prefix
from fireledger.domain.budget import budget_totals, category_metrics, ensure_month
from fireledger.domain.fire import InvalidFireConfigError, simulate_fire
from fireledger.domain.ledger import net_worth, recent_transactions, top_spending, transactions_in_month
from fireledger.domain.models import FinanceState


def financial_snapshot(state: FinanceState, year: int, month: int, recent_limit: int = 5) -> dict[str, Any]:
    """Collect the headline numbers for a month.

    An invalid FIRE configuration does not fail the snapshot; the "fire"
    section carries the error message instead.

    Args:
        state: Current state.
        year: Four digit year.
        month: Month number (1-12).
        recent_limit: Number of recent transactions to include.

    Returns:
        Dictionary with net_worth, budget, top_spending, recent_transactions
        and fire sections. All amounts are integer cents.
    """
    worth = net_worth(state.accounts)
    month_txns = transactions_in_month(state.transactions, year, month)
    _, month_id = ensure_month(state.budget_months, state.user_id, year, month)
    totals = budget_totals(category_metrics(state.categories, state.budget_entries, month_txns, month_id))

    fire: dict[str, Any]
    try:
        projection = simulate_fire(state.fire_config)
        fire = {
            "target_cents": round(projection.target_cents),
            "years_to_fi": projection.years_to_fi,
        }
    except InvalidFireConfigError as e:
        fire = {"error": str(e), "field": e.field}

    return {
        "month": month_prefix(year, month),
        "net_worth": {
            "assets": worth.assets,
            "liabilities": worth.liabilities,
            "net_worth": worth.net_worth,
        },
        "budget": {
            "budgeted": totals.budgeted,
            "spent": totals.spent,
            "remaining": totals.remaining,
        },
        "top_spending": [
            {"name": item.name, "spent": item.spent, "budget": item.budget}
            for item in top_spending(month_txns, state.categories, state.budget_entries, month_id)
        ],
        "recent_transactions": [
            {"date": t.date, "name": t.name, "amount_cents": t.amount_cents, "category_id": t.category_id}
            for t in recent_transactions(state.transactions, recent_limit)
        ],
        "fire": fire,
    }
