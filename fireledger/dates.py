"""Date utilities for fireledger.

Pure functions for month keys, prefixes and date ranges.
"""

from datetime import date, datetime, timedelta

from fireledger.domain.models import Month


def month_prefix(year: int, month: int) -> str:
    """Build the YYYY-MM prefix shared by every ISO date in a month.

    Args:
        year: Four digit year.
        month: Month number (1-12).

    Returns:
        Prefix with the month zero-padded (e.g., "2024-05").
    """
    return f"{year}-{month:02d}"


def parse_month(month: Month) -> tuple[int, int]:
    """Split a YYYY-MM string into (year, month).

    Raises:
        ValueError: If the string is not a valid YYYY-MM month.
    """
    dt = datetime.strptime(month, "%Y-%m")
    return dt.year, dt.month


def current_month(today: date | None = None) -> tuple[int, int]:
    """Return (year, month) for today, or for the given date."""
    if today is None:
        today = date.today()
    return today.year, today.month


def month_range(month: Month) -> tuple[str, str, str]:
    """Calculate date range and label for a month.

    Args:
        month: Month in YYYY-MM format.

    Returns:
        Tuple of (since_date, until_date, label) where:
        - since_date: First day of month (YYYY-MM-DD)
        - until_date: First day of next month (YYYY-MM-DD)
        - label: Human-readable month (e.g., "January 2025")
    """
    dt = datetime.strptime(month, "%Y-%m")
    since = dt.strftime("%Y-%m-01")
    next_month = (dt.replace(day=28) + timedelta(days=4)).replace(day=1)
    until = next_month.strftime("%Y-%m-%d")
    label = dt.strftime("%B %Y")
    return since, until, label
