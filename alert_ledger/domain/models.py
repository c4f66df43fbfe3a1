"""Domain models - pure Python dataclasses representing ledger entities"""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Tuple


@dataclass(frozen=True)
class Transaction:
    """Credited income accepted from a bank alert"""

    transaction_id: str
    date: date
    amount: float
    description: str
    bank: str
    raw_text: str


@dataclass(frozen=True)
class Profile:
    """User profile used for sender/receiver detection"""

    display_name: str

    @property
    def is_set(self) -> bool:
        return bool(self.display_name.strip())


@dataclass(frozen=True)
class TaxBracket:
    """One tier of a progressive schedule. upper_bound=None means unbounded."""

    upper_bound: Optional[float]
    rate: float

    @property
    def unbounded(self) -> bool:
        return self.upper_bound is None


@dataclass(frozen=True)
class BracketBreakdown:
    """Taxable amount and tax owed within a single bracket"""

    bracket: TaxBracket
    taxable_amount: float
    tax_amount: float


@dataclass(frozen=True)
class TaxSummary:
    """Derived tax position of the ledger, never persisted"""

    total_income: float
    total_tax: float
    net_income: float
    effective_rate_percent: float
    breakdown: Tuple[BracketBreakdown, ...]


class DecisionOutcome(str, Enum):
    ACCEPTED = "accepted"
    REJECTED_DEBIT = "rejected_debit"
    REJECTED_AMBIGUOUS = "rejected_ambiguous"


@dataclass(frozen=True)
class ClassificationDecision:
    """Output of alert classification"""

    outcome: DecisionOutcome
    rule: str
    reason: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.outcome is DecisionOutcome.ACCEPTED


@dataclass(frozen=True)
class ExtractedFields:
    """Structured fields pulled out of alert text"""

    amount: float
    date: date
    description: str
    bank: str


class RejectionKind(str, Enum):
    EMPTY_INPUT = "empty_input"
    DEBIT_REJECTED = "debit_rejected"
    AMBIGUOUS_ALERT = "ambiguous_alert"
    EXTRACTION_FAILED = "extraction_failed"


@dataclass(frozen=True)
class Rejection:
    """User-visible reason an alert was not admitted to the ledger"""

    kind: RejectionKind
    reason: str


@dataclass(frozen=True)
class AssemblyResult:
    """Either a new transaction or a rejection, never both"""

    transaction: Optional[Transaction] = None
    rejection: Optional[Rejection] = None

    @property
    def accepted(self) -> bool:
        return self.transaction is not None
