"""CSV export of the income ledger"""

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Iterable, List

from alert_ledger.domain.models import Transaction

CSV_HEADER = "Date,Amount,Description,Bank"


@dataclass(frozen=True)
class ExportRow:
    """One parsed row of an exported ledger"""

    date: date
    amount: float
    description: str
    bank: str


def _quote(value: str) -> str:
    return '"' + value.replace('"', '""') + '"'


def _bank_field(bank: str) -> str:
    if any(ch in bank for ch in ',"\n\r'):
        return _quote(bank)
    return bank


def format_row(txn: Transaction) -> str:
    """
    date,amount,"description",bank

    Description is always quoted with quotes doubled; bank only when it
    contains a comma, quote or line break.
    """
    return f"{txn.date.isoformat()},{txn.amount:.2f},{_quote(txn.description)},{_bank_field(txn.bank)}"


def export_transactions_csv(transactions: Iterable[Transaction]) -> str:
    rows = [format_row(t) for t in transactions]
    return "\n".join([CSV_HEADER, *rows]) + "\n"


def parse_transactions_csv(content: str) -> List[ExportRow]:
    """Read an export back; the header row is required"""
    reader = csv.reader(io.StringIO(content))
    header = next(reader, None)
    if header is None or ",".join(header) != CSV_HEADER:
        raise ValueError("Not a ledger export: missing header")

    return [
        ExportRow(
            date=date.fromisoformat(row[0]),
            amount=float(row[1]),
            description=row[2],
            bank=row[3],
        )
        for row in reader
        if row
    ]
