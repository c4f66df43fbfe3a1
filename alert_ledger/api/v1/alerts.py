"""POST /v1/alerts - classify a bank alert and record accepted income"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from alert_ledger.api.v1.schemas import (
    AlertRequest,
    AlertResponse,
    ClassificationResponse,
    RejectionSchema,
    TransactionSchema,
)
from alert_ledger.api.dependencies import (
    get_clock,
    get_extractor_config,
    get_ledger,
    get_profile_repository,
    get_request_id,
)
from alert_ledger.infrastructure.database.session import get_db
from alert_ledger.infrastructure.database.repositories import ProfileRepository, TransactionLedgerRepository
from alert_ledger.domain.assembler import assemble_transaction
from alert_ledger.domain.classifier import classify
from alert_ledger.domain.extraction import ExtractorConfig
from alert_ledger.domain.exceptions import StorageError
from alert_ledger.infrastructure.observability.metrics import record_alert
from alert_ledger.infrastructure.observability.logging import log_alert_outcome
from alert_ledger.utils.date_utils import Clock

router = APIRouter()


@router.post("/alerts", response_model=AlertResponse)
def submit_alert(
    request_body: AlertRequest,
    request: Request,
    db: Session = Depends(get_db),
    ledger: TransactionLedgerRepository = Depends(get_ledger),
    profiles: ProfileRepository = Depends(get_profile_repository),
    clock: Clock = Depends(get_clock),
    extractor_config: ExtractorConfig = Depends(get_extractor_config),
):
    """
    Classify alert text and, if it is a credit, add it to the ledger.

    Flow:
    1. Load profile (name-based receiver/sender detection)
    2. Assemble: classify, extract, validate amount
    3. Prepend accepted transaction to the ledger and commit
    4. Return the transaction, or the rejection kind and reason

    Rejections are normal outcomes and return 200.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        profile = profiles.get_profile()
        result = assemble_transaction(
            request_body.text,
            clock,
            profile=profile,
            extractor_config=extractor_config,
        )

        if result.transaction is not None:
            ledger.add(result.transaction)
            db.commit()

        duration_ms = (time.time() - start_time) * 1000
        record_alert(result)
        log_alert_outcome(request_id, result, duration_ms)

        return AlertResponse(
            accepted=result.accepted,
            transaction=TransactionSchema.from_domain(result.transaction) if result.transaction else None,
            rejection=RejectionSchema.from_domain(result.rejection) if result.rejection else None,
        )

    except StorageError as e:
        db.rollback()
        logging.error(f"Storage error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Ledger storage unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/alerts/classify", response_model=ClassificationResponse)
def classify_alert(
    request_body: AlertRequest,
    request: Request,
    profiles: ProfileRepository = Depends(get_profile_repository),
):
    """Dry run: report which rule decides the alert without touching the ledger"""
    try:
        profile = profiles.get_profile()
    except StorageError as e:
        logging.error(f"Storage error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=503, detail="Ledger storage unavailable")

    decision = classify(request_body.text, profile)
    return ClassificationResponse.from_domain(decision)
