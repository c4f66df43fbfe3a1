"""GET /v1/tax - progressive tax on accumulated income"""

from typing import Tuple
from fastapi import APIRouter, Depends

from alert_ledger.api.v1.schemas import TaxBracketSchema, TaxBracketsResponse, TaxSummaryResponse
from alert_ledger.api.dependencies import get_ledger, get_tax_brackets
from alert_ledger.infrastructure.database.repositories import TransactionLedgerRepository
from alert_ledger.domain.models import TaxBracket
from alert_ledger.domain.tax import summarize_ledger

router = APIRouter()


@router.get("/tax/summary", response_model=TaxSummaryResponse)
def get_tax_summary(
    ledger: TransactionLedgerRepository = Depends(get_ledger),
    brackets: Tuple[TaxBracket, ...] = Depends(get_tax_brackets),
):
    """
    Recompute the tax position from the current ledger.

    Returns:
        Totals, effective rate and a row for every bracket
    """
    summary = summarize_ledger(ledger.list_transactions(), brackets)
    return TaxSummaryResponse.from_domain(summary)


@router.get("/tax/brackets", response_model=TaxBracketsResponse)
def get_brackets(brackets: Tuple[TaxBracket, ...] = Depends(get_tax_brackets)):
    return TaxBracketsResponse(brackets=[TaxBracketSchema.from_domain(b) for b in brackets])
