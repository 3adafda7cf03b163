"""Pure functions for turning CSV rows into imported transactions.

This module contains the functional core for imports:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations

All monetary amounts are in cents (Money type).
"""

from collections.abc import Callable
from typing import TypedDict

from fireledger.domain.models import AccountId, Money, Transaction, UserId
from fireledger.domain.money import parse_amount


class CsvMapping(TypedDict):
    """CSV column mapping configuration."""

    date_column: str
    name_column: str
    amount_column: str
    external_id_column: str  # Empty string when the file has no id column


class ParsedRow(TypedDict):
    """Parsed CSV row ready to become a transaction."""

    date: str
    name: str
    amount: int  # in cents
    external_id: str | None


def analyze_csv_columns(headers: list[str]) -> dict[str, str]:
    """Analyze CSV headers and suggest column mappings.

    Args:
        headers: List of CSV column names.

    Returns:
        Dictionary with suggested mappings for date, name, amount and
        external_id (empty string if not detected).
    """
    mappings: dict[str, str] = {
        "date": "",
        "name": "",
        "amount": "",
        "external_id": "",
    }

    for header in headers:
        lower = header.lower()

        if not mappings["date"] and "date" in lower:
            mappings["date"] = header

        if not mappings["name"]:
            if "payee" in lower or "merchant" in lower:
                mappings["name"] = header
            elif "description" in lower or lower == "name":
                mappings["name"] = header

        if not mappings["amount"] and "amount" in lower and "currency" not in lower:
            mappings["amount"] = header

        if not mappings["external_id"] and ("transaction id" in lower or lower in ("id", "reference")):
            mappings["external_id"] = header

    return mappings


def parse_csv_row(
    row: dict[str, str],
    mapping: CsvMapping,
    normalize_date: Callable[[str], str] | None = None,
) -> ParsedRow | None:
    """Parse a CSV row using the provided mapping.

    Args:
        row: CSV row as dictionary.
        mapping: Column mapping configuration.
        normalize_date: Optional function converting the raw date to
            YYYY-MM-DD. When omitted the first 10 characters are used.

    Returns:
        ParsedRow if valid, None if the row should be skipped.

    Raises:
        ValueError: If normalize_date rejects the date.
    """
    raw_date = (row.get(mapping["date_column"]) or "").strip()
    if not raw_date:
        return None
    date = normalize_date(raw_date) if normalize_date else raw_date[:10]

    name = (row.get(mapping["name_column"]) or "").strip() or "Unknown"

    raw_amount = (row.get(mapping["amount_column"]) or "").strip()
    if not raw_amount:
        return None

    external_id = None
    if mapping["external_id_column"]:
        external_id = (row.get(mapping["external_id_column"]) or "").strip() or None

    return ParsedRow(date=date, name=name, amount=parse_amount(raw_amount), external_id=external_id)


def build_imported_transaction(
    parsed: ParsedRow,
    transaction_id: str,
    user_id: UserId,
    account_id: AccountId,
    imported_at: str,
) -> Transaction:
    """Create an imported Transaction from a parsed row."""
    return Transaction(
        id=transaction_id,
        user_id=user_id,
        account_id=account_id,
        date=parsed["date"],
        name=parsed["name"],
        amount_cents=Money(parsed["amount"]),
        source="imported",
        status="posted",
        external_transaction_id=parsed["external_id"],
        imported_at=imported_at,
    )
