"""Pytest fixtures for testing"""

import pytest
from datetime import date
from typing import Callable, Generator
import httpx
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from alert_ledger.api.main import create_app
from alert_ledger.api.dependencies import get_clock, get_ocr_client
from alert_ledger.infrastructure.clients.ocr import OCRClient
from alert_ledger.infrastructure.database.models import Base
from alert_ledger.infrastructure.database.session import get_db
from alert_ledger.domain.models import Transaction
from alert_ledger.utils.date_utils import FixedClock


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TODAY = date(2024, 6, 30)


def ocr_reply(*texts: str) -> dict:
    """Messages API body with one text block per argument"""
    return {"content": [{"type": "text", "text": t} for t in texts]}


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TODAY)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def ocr_handler() -> Callable[[httpx.Request], httpx.Response]:
    """Default OCR service stub: echoes a fixed credit alert"""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=ocr_reply("GTBank Credit Alert", "NGN 5,000.00 received"))

    return handler


@pytest.fixture
def client(db: Session, clock: FixedClock, ocr_handler) -> TestClient:
    """Create FastAPI test client with test database, fixed clock and stubbed OCR"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    def override_get_ocr_client():
        ocr = OCRClient(api_key="test-key", transport=httpx.MockTransport(ocr_handler))
        ocr.backoff_base = 0
        return ocr

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_ocr_client] = override_get_ocr_client
    return TestClient(app)


@pytest.fixture
def sample_transactions() -> list[Transaction]:
    """Two months of salary plus a refund"""
    return [
        Transaction(
            transaction_id="salary_may",
            date=date(2024, 5, 31),
            amount=1_500_000.0,
            description="May salary",
            bank="Zenith",
            raw_text="Zenith: NGN 1,500,000.00 credited. Desc: May salary",
        ),
        Transaction(
            transaction_id="salary_apr",
            date=date(2024, 4, 30),
            amount=1_500_000.0,
            description="April salary",
            bank="Zenith",
            raw_text="Zenith: NGN 1,500,000.00 credited. Desc: April salary",
        ),
        Transaction(
            transaction_id="refund_apr",
            date=date(2024, 4, 12),
            amount=1_000_000.0,
            description='Refund "deposit"',
            bank="Kuda",
            raw_text='Kuda: reversal of NGN 1,000,000. Narration: Refund "deposit"',
        ),
    ]
