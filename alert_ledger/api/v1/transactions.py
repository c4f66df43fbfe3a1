"""GET/DELETE /v1/transactions - income ledger listing, removal and CSV export"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response
from sqlalchemy.orm import Session

from alert_ledger.api.v1.schemas import TransactionListResponse, TransactionSchema
from alert_ledger.api.dependencies import get_ledger, get_request_id
from alert_ledger.infrastructure.database.session import get_db
from alert_ledger.infrastructure.database.repositories import TransactionLedgerRepository
from alert_ledger.domain.exceptions import TransactionNotFoundError
from alert_ledger.domain.export import export_transactions_csv
from alert_ledger.domain.tax import total_income

router = APIRouter()


@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(ledger: TransactionLedgerRepository = Depends(get_ledger)):
    """List accepted income, newest first"""
    transactions = ledger.list_transactions()
    return TransactionListResponse(
        count=len(transactions),
        total_income=round(total_income(transactions), 2),
        transactions=[TransactionSchema.from_domain(t) for t in transactions],
    )


@router.get("/transactions/export")
def export_transactions(ledger: TransactionLedgerRepository = Depends(get_ledger)):
    """Download the ledger as CSV"""
    content = export_transactions_csv(ledger.list_transactions())
    filename = f"income-transactions-{int(time.time() * 1000)}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.delete("/transactions/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    request: Request,
    db: Session = Depends(get_db),
    ledger: TransactionLedgerRepository = Depends(get_ledger),
):
    """Remove one transaction by id"""
    try:
        ledger.delete(transaction_id)
        db.commit()
    except TransactionNotFoundError:
        db.rollback()
        raise HTTPException(status_code=404, detail="Transaction not found")

    logging.info(
        "Transaction deleted",
        extra={"request_id": get_request_id(request), "transaction_id": transaction_id},
    )
    return Response(status_code=204)
