"""Field extraction - amount, date, description and bank from alert text"""

import math
import re
from dataclasses import dataclass
from datetime import date
from typing import Tuple

from alert_ledger.domain.models import ExtractedFields
from alert_ledger.utils.date_utils import Clock, parse_day_first

DESCRIPTION_LIMIT = 60

_NUMERAL = r"(\d[\d,]*(?:\.\d+)?)"

AMOUNT_PATTERNS: Tuple[re.Pattern, ...] = (
    # currency prefix, not the tail of a word ("in 5 days" is not N5)
    re.compile(r"(?<![A-Za-z])(?:NGN|₦|N)\s*" + _NUMERAL, re.IGNORECASE),
    re.compile(r"credited\s+with\s+" + _NUMERAL, re.IGNORECASE),
    re.compile(r"received\s+" + _NUMERAL, re.IGNORECASE),
)

ISO_DATE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
DATE_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2}|\d{2}/\d{2}/\d{4}|\d{2}-\d{2}-\d{4})")

DESCRIPTION_LABEL = re.compile(r"\b(?:from|narration|desc|description)[:\s]+([^.\n]+)", re.IGNORECASE)


@dataclass(frozen=True)
class ExtractorConfig:
    """Known bank names, matched case-insensitively in list order"""

    bank_names: Tuple[str, ...] = (
        "GTBank",
        "Access",
        "Zenith",
        "First Bank",
        "UBA",
        "Stanbic",
        "Kuda",
        "Fidelity",
        "Wema",
        "Union",
    )
    unknown_bank: str = "Unknown"


DEFAULT_EXTRACTOR_CONFIG = ExtractorConfig()


def extract_amount(text: str) -> float:
    """First matching amount pattern wins; thousands commas stripped; 0.0 if none or too large"""
    for pattern in AMOUNT_PATTERNS:
        match = pattern.search(text)
        if match:
            amount = float(match.group(1).replace(",", ""))
            return amount if math.isfinite(amount) else 0.0
    return 0.0


def extract_date(text: str, clock: Clock) -> date:
    """
    Find YYYY-MM-DD, DD/MM/YYYY or DD-MM-YYYY (first occurrence in the text).

    Falls back to clock.today() when no date is present or the match is not
    a real calendar day.
    """
    match = DATE_PATTERN.search(text)
    if match:
        token = match.group(1).replace("/", "-")
        iso = ISO_DATE.fullmatch(token)
        if iso:
            year, month, day = iso.groups()
        else:
            day, month, year = token.split("-")
        parsed = parse_day_first(day, month, year)
        if parsed is not None:
            return parsed
    return clock.today()


def extract_description(text: str) -> str:
    match = DESCRIPTION_LABEL.search(text)
    if match:
        labelled = match.group(1).strip()
        if labelled:
            return labelled

    snippet = text[:DESCRIPTION_LIMIT].strip()
    return snippet + "..." if len(text) > DESCRIPTION_LIMIT else snippet


def extract_bank(text: str, config: ExtractorConfig = DEFAULT_EXTRACTOR_CONFIG) -> str:
    lower = text.lower()
    for bank in config.bank_names:
        if bank.lower() in lower:
            return bank
    return config.unknown_bank


def extract(
    text: str,
    clock: Clock,
    config: ExtractorConfig = DEFAULT_EXTRACTOR_CONFIG,
) -> ExtractedFields:
    """
    Extract structured fields from alert text.

    Total: always returns a value, defaulting rather than failing. The current
    date comes from the injected clock so results are repeatable.
    """
    return ExtractedFields(
        amount=extract_amount(text),
        date=extract_date(text, clock),
        description=extract_description(text),
        bank=extract_bank(text, config),
    )
