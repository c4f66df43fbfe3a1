"""Dependency injection for FastAPI endpoints"""

from typing import Tuple
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from alert_ledger.infrastructure.clients.ocr import OCRClient
from alert_ledger.infrastructure.database.session import get_db
from alert_ledger.infrastructure.database.repositories import (
    ProfileRepository,
    SqlKeyValueStore,
    TransactionLedgerRepository,
)
from alert_ledger.utils.date_utils import Clock, SystemClock
from alert_ledger.config import settings
from alert_ledger.domain.extraction import ExtractorConfig
from alert_ledger.domain.models import TaxBracket


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_clock() -> Clock:
    """Provide the clock used for alerts without a date"""
    return SystemClock()


def get_ocr_client() -> OCRClient:
    """Provide OCR service client instance"""
    return OCRClient()


def get_ledger(db: Session = Depends(get_db)) -> TransactionLedgerRepository:
    return TransactionLedgerRepository(SqlKeyValueStore(db))


def get_profile_repository(db: Session = Depends(get_db)) -> ProfileRepository:
    return ProfileRepository(SqlKeyValueStore(db))


def get_tax_brackets() -> Tuple[TaxBracket, ...]:
    """Validated tax schedule from configuration"""
    return settings.brackets()


def get_extractor_config() -> ExtractorConfig:
    return settings.extractor_config()
