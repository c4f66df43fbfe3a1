"""Progressive income tax engine - core business logic for tax summaries"""

import math
from typing import Iterable, List, Sequence, Tuple

from alert_ledger.domain.exceptions import InvalidIncomeError, InvalidTaxScheduleError
from alert_ledger.domain.models import BracketBreakdown, TaxBracket, TaxSummary, Transaction

# Nigerian personal income tax schedule (Naira)
DEFAULT_TAX_BRACKETS: Tuple[TaxBracket, ...] = (
    TaxBracket(upper_bound=800_000, rate=0.0),  # first 800k tax free
    TaxBracket(upper_bound=3_000_000, rate=0.15),
    TaxBracket(upper_bound=12_000_000, rate=0.18),
    TaxBracket(upper_bound=25_000_000, rate=0.21),
    TaxBracket(upper_bound=50_000_000, rate=0.23),
    TaxBracket(upper_bound=None, rate=0.25),
)


def validate_brackets(brackets: Sequence[TaxBracket]) -> Tuple[TaxBracket, ...]:
    """
    Check a bracket schedule and return it as an immutable tuple.

    Requirements:
    - At least one bracket
    - Rates within [0, 1]
    - Bounds finite, positive and strictly increasing
    - Only the last bracket is unbounded, and it must be
    """
    if not brackets:
        raise InvalidTaxScheduleError("Tax schedule has no brackets")

    previous_limit = 0.0
    for index, bracket in enumerate(brackets):
        if not 0.0 <= bracket.rate <= 1.0:
            raise InvalidTaxScheduleError(f"Bracket {index} rate {bracket.rate} outside [0, 1]")

        is_last = index == len(brackets) - 1
        if bracket.unbounded:
            if not is_last:
                raise InvalidTaxScheduleError(f"Bracket {index} is unbounded but not last")
            continue
        if is_last:
            raise InvalidTaxScheduleError("Last bracket must be unbounded")
        if not math.isfinite(bracket.upper_bound):
            raise InvalidTaxScheduleError(f"Bracket {index} upper bound {bracket.upper_bound} is not finite")
        if bracket.upper_bound <= previous_limit:
            raise InvalidTaxScheduleError(
                f"Bracket {index} upper bound {bracket.upper_bound} does not exceed {previous_limit}"
            )
        previous_limit = bracket.upper_bound

    return tuple(brackets)


def compute_tax(income: float, brackets: Sequence[TaxBracket] = DEFAULT_TAX_BRACKETS) -> TaxSummary:
    """
    Compute progressive tax for a total income.

    Single pass over the brackets carrying (previous_limit, remaining, total_tax).
    Each bracket taxes min(remaining, width) where width is its upper bound minus
    the previous bound (the unbounded tier takes everything left). Brackets the
    income never reaches are still listed with zero amounts. No rounding here;
    round at presentation.

    Example:
        income 4,000,000 with the default schedule
        800k @ 0%  ->       0
        2.2M @ 15% ->  330,000
        1.0M @ 18% ->  180,000
        total tax     510,000, effective rate 12.75%
    """
    if income < 0:
        raise InvalidIncomeError(f"Income must be non-negative, got {income}")

    previous_limit = 0.0
    remaining = float(income)
    total_tax = 0.0
    breakdown: List[BracketBreakdown] = []

    for bracket in brackets:
        if bracket.unbounded:
            width = remaining
        else:
            width = bracket.upper_bound - previous_limit
            previous_limit = bracket.upper_bound

        taxable = max(min(remaining, width), 0.0)
        tax = taxable * bracket.rate

        total_tax += tax
        remaining -= taxable
        breakdown.append(BracketBreakdown(bracket=bracket, taxable_amount=taxable, tax_amount=tax))

    effective_rate = total_tax / income * 100 if income > 0 else 0.0

    return TaxSummary(
        total_income=float(income),
        total_tax=total_tax,
        net_income=income - total_tax,
        effective_rate_percent=effective_rate,
        breakdown=tuple(breakdown),
    )


def total_income(transactions: Iterable[Transaction]) -> float:
    return sum((t.amount for t in transactions), 0.0)


def summarize_ledger(
    transactions: Iterable[Transaction],
    brackets: Sequence[TaxBracket] = DEFAULT_TAX_BRACKETS,
) -> TaxSummary:
    """Main entry point: tax position for a snapshot of the ledger"""
    return compute_tax(total_income(transactions), brackets)
