"""Unit tests for CSV export"""

import pytest
from dataclasses import replace
from alert_ledger.domain.export import (
    CSV_HEADER,
    export_transactions_csv,
    format_row,
    parse_transactions_csv,
)
from alert_ledger.domain.models import Transaction


def test_export_header_and_rows(sample_transactions: list[Transaction]):
    content = export_transactions_csv(sample_transactions)
    lines = content.strip().split("\n")

    assert lines[0] == CSV_HEADER
    assert len(lines) == 4
    assert lines[1] == '2024-05-31,1500000.00,"May salary",Zenith'


def test_quotes_are_doubled(sample_transactions: list[Transaction]):
    assert format_row(sample_transactions[2]) == '2024-04-12,1000000.00,"Refund ""deposit""",Kuda'


def test_export_empty_ledger():
    assert export_transactions_csv([]) == CSV_HEADER + "\n"


def test_export_parses_back(sample_transactions: list[Transaction]):
    rows = parse_transactions_csv(export_transactions_csv(sample_transactions))

    assert len(rows) == len(sample_transactions)
    for row, txn in zip(rows, sample_transactions):
        assert row.date == txn.date
        assert row.amount == pytest.approx(txn.amount, abs=0.005)
        assert row.description == txn.description
        assert row.bank == txn.bank


def test_parse_requires_header():
    with pytest.raises(ValueError):
        parse_transactions_csv('2024-05-31,100.00,"x",UBA\n')


def test_bank_with_comma_is_quoted(sample_transactions: list[Transaction]):
    txn = replace(sample_transactions[0], bank="Union Bank, Plc")

    assert format_row(txn) == '2024-05-31,1500000.00,"May salary","Union Bank, Plc"'
    rows = parse_transactions_csv(export_transactions_csv([txn]))
    assert rows[0].bank == "Union Bank, Plc"
