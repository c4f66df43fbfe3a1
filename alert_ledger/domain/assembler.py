"""Transaction assembly - classify an alert and build a ledger record from it"""

import math
import uuid
from typing import Callable, Optional

from alert_ledger.domain.classifier import DEFAULT_CLASSIFIER_CONFIG, ClassifierConfig, classify
from alert_ledger.domain.extraction import DEFAULT_EXTRACTOR_CONFIG, ExtractorConfig, extract
from alert_ledger.domain.models import (
    AssemblyResult,
    ClassificationDecision,
    DecisionOutcome,
    Profile,
    Rejection,
    RejectionKind,
    Transaction,
)
from alert_ledger.utils.date_utils import Clock


def new_transaction_id() -> str:
    return uuid.uuid4().hex


def rejection_for(decision: ClassificationDecision) -> Rejection:
    """Map a rejected classification onto the user-facing rejection taxonomy"""
    if decision.rule == "empty_text":
        return Rejection(RejectionKind.EMPTY_INPUT, decision.reason or "no text provided")
    if decision.outcome is DecisionOutcome.REJECTED_DEBIT:
        return Rejection(RejectionKind.DEBIT_REJECTED, decision.reason or "debit detected")
    return Rejection(RejectionKind.AMBIGUOUS_ALERT, decision.reason or "cannot confirm credit")


def assemble_transaction(
    text: str,
    clock: Clock,
    profile: Optional[Profile] = None,
    classifier_config: ClassifierConfig = DEFAULT_CLASSIFIER_CONFIG,
    extractor_config: ExtractorConfig = DEFAULT_EXTRACTOR_CONFIG,
    id_factory: Callable[[], str] = new_transaction_id,
) -> AssemblyResult:
    """
    Turn raw alert text into a Transaction or a Rejection.

    Flow:
    1. Classify (receiver override, debit checks, credit confirmation)
    2. On rejection return the reason, nothing is extracted
    3. Extract amount/date/description/bank
    4. Refuse a non-positive or non-finite amount
    5. Build the record; the caller appends it to the ledger
    """
    decision = classify(text, profile, classifier_config)
    if not decision.accepted:
        return AssemblyResult(rejection=rejection_for(decision))

    fields = extract(text, clock, extractor_config)
    if not math.isfinite(fields.amount) or fields.amount <= 0:
        return AssemblyResult(
            rejection=Rejection(RejectionKind.EXTRACTION_FAILED, "could not extract a valid amount"),
        )

    return AssemblyResult(
        transaction=Transaction(
            transaction_id=id_factory(),
            date=fields.date,
            amount=fields.amount,
            description=fields.description,
            bank=fields.bank,
            raw_text=text,
        )
    )
