"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field
from datetime import date
from typing import List, Optional

from alert_ledger.domain.models import (
    ClassificationDecision,
    Rejection,
    TaxBracket,
    TaxSummary,
    Transaction,
)


class AlertRequest(BaseModel):
    """Request body for POST /v1/alerts and /v1/alerts/classify"""

    text: str = Field("", description="Raw bank alert text (pasted or from OCR)")


class TransactionSchema(BaseModel):
    """Single income transaction"""

    transaction_id: str
    date: date
    amount: float
    description: str
    bank: str
    raw_text: str

    @classmethod
    def from_domain(cls, txn: Transaction) -> "TransactionSchema":
        return cls(
            transaction_id=txn.transaction_id,
            date=txn.date,
            amount=txn.amount,
            description=txn.description,
            bank=txn.bank,
            raw_text=txn.raw_text,
        )


class RejectionSchema(BaseModel):
    kind: str
    reason: str

    @classmethod
    def from_domain(cls, rejection: Rejection) -> "RejectionSchema":
        return cls(kind=rejection.kind.value, reason=rejection.reason)


class AlertResponse(BaseModel):
    """Response for POST /v1/alerts"""

    accepted: bool
    transaction: Optional[TransactionSchema] = None
    rejection: Optional[RejectionSchema] = None


class ClassificationResponse(BaseModel):
    """Response for POST /v1/alerts/classify"""

    outcome: str
    rule: str
    reason: Optional[str] = None

    @classmethod
    def from_domain(cls, decision: ClassificationDecision) -> "ClassificationResponse":
        return cls(outcome=decision.outcome.value, rule=decision.rule, reason=decision.reason)


class TransactionListResponse(BaseModel):
    """Response for GET /v1/transactions"""

    count: int
    total_income: float
    transactions: List[TransactionSchema]


class OCRRequest(BaseModel):
    """Request body for POST /v1/ocr"""

    image_base64: str = Field(..., min_length=1, description="Base64 image bytes")
    media_type: str = Field(..., description="MIME type, e.g. image/png")


class OCRResponse(BaseModel):
    text: str


class TaxBracketSchema(BaseModel):
    upper_bound: Optional[float] = None
    rate: float

    @classmethod
    def from_domain(cls, bracket: TaxBracket) -> "TaxBracketSchema":
        return cls(upper_bound=bracket.upper_bound, rate=bracket.rate)


class BracketBreakdownSchema(BaseModel):
    lower_bound: float
    upper_bound: Optional[float] = None
    rate_percent: float
    taxable_amount: float
    tax_amount: float


class TaxSummaryResponse(BaseModel):
    """Response for GET /v1/tax/summary, amounts rounded to 2 dp"""

    total_income: float
    total_tax: float
    net_income: float
    effective_rate_percent: float
    breakdown: List[BracketBreakdownSchema]

    @classmethod
    def from_domain(cls, summary: TaxSummary) -> "TaxSummaryResponse":
        rows = []
        lower = 0.0
        for item in summary.breakdown:
            rows.append(
                BracketBreakdownSchema(
                    lower_bound=lower,
                    upper_bound=item.bracket.upper_bound,
                    rate_percent=round(item.bracket.rate * 100, 2),
                    taxable_amount=round(item.taxable_amount, 2),
                    tax_amount=round(item.tax_amount, 2),
                )
            )
            if item.bracket.upper_bound is not None:
                lower = item.bracket.upper_bound

        return cls(
            total_income=round(summary.total_income, 2),
            total_tax=round(summary.total_tax, 2),
            net_income=round(summary.net_income, 2),
            effective_rate_percent=round(summary.effective_rate_percent, 2),
            breakdown=rows,
        )


class TaxBracketsResponse(BaseModel):
    brackets: List[TaxBracketSchema]


class ProfileRequest(BaseModel):
    """Request body for PUT /v1/profile"""

    display_name: str = Field(..., description="Name as it appears on bank alerts")


class ProfileResponse(BaseModel):
    display_name: Optional[str] = None
