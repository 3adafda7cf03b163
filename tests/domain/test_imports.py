"""Tests for fireledger.domain.imports pure functions."""

import pytest

from fireledger.domain.imports import (
    CsvMapping,
    analyze_csv_columns,
    build_imported_transaction,
    parse_csv_row,
)
from fireledger.domain.models import AccountId, UserId

MAPPING = CsvMapping(
    date_column="Date",
    name_column="Description",
    amount_column="Amount",
    external_id_column="Transaction ID",
)


class TestAnalyzeCsvColumns:
    """Tests for analyze_csv_columns."""

    def test_typical_bank_export(self) -> None:
        """Should detect the usual column names."""
        headers = ["Transaction ID", "Date", "Description", "Amount", "Balance"]

        result = analyze_csv_columns(headers)

        assert result == {
            "date": "Date",
            "name": "Description",
            "amount": "Amount",
            "external_id": "Transaction ID",
        }

    def test_prefers_first_match_and_skips_currency(self) -> None:
        """Should ignore amount-in-currency columns."""
        headers = ["Posted Date", "Payee", "Amount (Currency)", "Amount"]

        result = analyze_csv_columns(headers)

        assert result["date"] == "Posted Date"
        assert result["name"] == "Payee"
        assert result["amount"] == "Amount"
        assert result["external_id"] == ""

    def test_nothing_detected(self) -> None:
        """Should leave unknown columns empty."""
        result = analyze_csv_columns(["foo", "bar"])

        assert all(value == "" for value in result.values())


class TestParseCsvRow:
    """Tests for parse_csv_row."""

    def test_valid_row(self) -> None:
        """Should parse amounts into cents."""
        row = {"Date": "2024-05-10", "Description": "Trader Joes", "Amount": "-$85.42", "Transaction ID": "abc"}

        result = parse_csv_row(row, MAPPING)

        assert result == {"date": "2024-05-10", "name": "Trader Joes", "amount": -8542, "external_id": "abc"}

    def test_missing_date_is_skipped(self) -> None:
        """Should return None for a row without a date."""
        row = {"Date": "", "Description": "x", "Amount": "1", "Transaction ID": ""}

        assert parse_csv_row(row, MAPPING) is None

    def test_missing_amount_is_skipped(self) -> None:
        """Should return None for a row without an amount."""
        row = {"Date": "2024-05-10", "Description": "x", "Amount": "  ", "Transaction ID": ""}

        assert parse_csv_row(row, MAPPING) is None

    def test_blank_name_and_id(self) -> None:
        """Should default the name and drop an empty external id."""
        row = {"Date": "2024-05-10", "Description": "", "Amount": "12", "Transaction ID": ""}

        result = parse_csv_row(row, MAPPING)

        assert result is not None
        assert result["name"] == "Unknown"
        assert result["external_id"] is None

    def test_date_normalizer(self) -> None:
        """Should pass the raw date through the normalizer."""
        row = {"Date": "10/05/2024", "Description": "x", "Amount": "1", "Transaction ID": ""}

        result = parse_csv_row(row, MAPPING, normalize_date=lambda raw: "2024-05-10")

        assert result is not None
        assert result["date"] == "2024-05-10"

    def test_normalizer_errors_propagate(self) -> None:
        """Should let a rejecting normalizer raise."""

        def reject(raw: str) -> str:
            raise ValueError(raw)

        row = {"Date": "not a date", "Description": "x", "Amount": "1", "Transaction ID": ""}

        with pytest.raises(ValueError):
            parse_csv_row(row, MAPPING, normalize_date=reject)

    def test_datetime_truncated_without_normalizer(self) -> None:
        """Should keep the first 10 characters of the raw date."""
        row = {"Date": "2024-05-10T09:30:00", "Description": "x", "Amount": "1", "Transaction ID": ""}

        result = parse_csv_row(row, MAPPING)

        assert result is not None
        assert result["date"] == "2024-05-10"


class TestBuildImportedTransaction:
    """Tests for build_imported_transaction."""

    def test_imported_source(self) -> None:
        """Should mark the transaction as imported and keep the external id."""
        parsed = parse_csv_row(
            {"Date": "2024-05-10", "Description": "Shell", "Amount": "-40", "Transaction ID": "e1"},
            MAPPING,
        )
        assert parsed is not None

        txn = build_imported_transaction(parsed, "tx_1", UserId("u"), AccountId("acc_1"), "2024-05-11T10:00:00")

        assert txn.source == "imported"
        assert txn.status == "posted"
        assert txn.amount_cents == -4000
        assert txn.external_transaction_id == "e1"
        assert txn.category_id is None
        assert txn.imported_at == "2024-05-11T10:00:00"
