"""Integration tests for API endpoints"""

import base64
import pytest
import httpx
from fastapi.testclient import TestClient
from alert_ledger.api.dependencies import get_profile_repository
from alert_ledger.domain.exceptions import StorageError
from alert_ledger.infrastructure.database.repositories import ProfileRepository

CREDIT_ALERT = "GTBank: NGN 5,000.00 received from Mary on 2024-05-01"


def post_alert(client: TestClient, text: str) -> dict:
    response = client.post("/v1/alerts", json={"text": text})
    assert response.status_code == 200
    return response.json()


def test_health_endpoint(client: TestClient):
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint(client: TestClient):
    """Test Prometheus metrics endpoint"""
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "alert_ledger_alerts_total" in response.text


def test_request_id_propagated(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert client.get("/health").headers["X-Request-ID"]


def test_accept_credit_alert(client: TestClient):
    """Test POST /v1/alerts with a credit alert"""
    data = post_alert(client, CREDIT_ALERT)

    assert data["accepted"] is True
    assert data["rejection"] is None
    txn = data["transaction"]
    assert txn["amount"] == 5000.0
    assert txn["date"] == "2024-05-01"
    assert txn["bank"] == "GTBank"
    assert txn["raw_text"] == CREDIT_ALERT

    listing = client.get("/v1/transactions").json()
    assert listing["count"] == 1
    assert listing["transactions"][0]["transaction_id"] == txn["transaction_id"]


def test_missing_date_uses_injected_clock(client: TestClient):
    data = post_alert(client, "Salary NGN 250,000 credited")
    assert data["transaction"]["date"] == "2024-06-30"


@pytest.mark.parametrize(
    "text, kind",
    [
        ("", "empty_input"),
        ("Your account was debited N2,000 by John", "debit_rejected"),
        ("Debit Alert: NGN 5,000", "debit_rejected"),
        ("Your OTP is 123456", "ambiguous_alert"),
        ("Your salary has been credited", "extraction_failed"),
        ("Account credited with NGN" + "9" * 400, "extraction_failed"),
    ],
)
def test_rejected_alerts(client: TestClient, text: str, kind: str):
    data = post_alert(client, text)

    assert data["accepted"] is False
    assert data["transaction"] is None
    assert data["rejection"]["kind"] == kind
    assert data["rejection"]["reason"]
    assert client.get("/v1/transactions").json()["count"] == 0


def test_profile_enables_receiver_override(client: TestClient):
    text = "NGN10,000 credited to John Doe. Amount debited from sender account"

    # Without a profile the debit wording wins
    assert post_alert(client, text)["accepted"] is False

    response = client.put("/v1/profile", json={"display_name": "  John Doe "})
    assert response.status_code == 200
    assert response.json()["display_name"] == "John Doe"
    assert client.get("/v1/profile").json()["display_name"] == "John Doe"

    data = post_alert(client, text)
    assert data["accepted"] is True
    assert data["transaction"]["amount"] == 10000.0


def test_profile_sender_rejected(client: TestClient):
    client.put("/v1/profile", json={"display_name": "Ada Obi"})
    data = post_alert(client, "Transfer from Ada Obi NGN 5,000 successful")
    assert data["rejection"]["kind"] == "debit_rejected"


def test_empty_profile(client: TestClient):
    assert client.get("/v1/profile").json()["display_name"] is None


def test_classify_dry_run(client: TestClient):
    response = client.post("/v1/alerts/classify", json={"text": "POS Purchase NGN 3,500"})

    assert response.status_code == 200
    data = response.json()
    assert data["outcome"] == "rejected_debit"
    assert data["rule"] == "debit_keyword"
    assert client.get("/v1/transactions").json()["count"] == 0


class UnavailableStore:
    """Key-value store whose backend is down"""

    def load(self, key: str):
        raise StorageError("database is down")

    def save(self, key: str, value: str) -> None:
        raise StorageError("database is down")


def test_classify_storage_down(client: TestClient):
    client.app.dependency_overrides[get_profile_repository] = lambda: ProfileRepository(UnavailableStore())

    response = client.post("/v1/alerts/classify", json={"text": "NGN 5,000 received"})

    assert response.status_code == 503
    assert response.json()["detail"] == "Ledger storage unavailable"


def test_delete_transaction(client: TestClient):
    txn_id = post_alert(client, CREDIT_ALERT)["transaction"]["transaction_id"]

    response = client.delete(f"/v1/transactions/{txn_id}")
    assert response.status_code == 204
    assert client.get("/v1/transactions").json()["count"] == 0

    response = client.delete(f"/v1/transactions/{txn_id}")
    assert response.status_code == 404


def test_export_csv(client: TestClient):
    post_alert(client, CREDIT_ALERT)
    post_alert(client, 'Zenith: NGN 1,250.50 credited on 2024-05-02. Narration: Refund "April"')

    response = client.get("/v1/transactions/export")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert "attachment" in response.headers["content-disposition"]
    lines = response.text.strip().split("\n")
    assert lines[0] == "Date,Amount,Description,Bank"
    # newest first
    assert lines[1] == '2024-05-02,1250.50,"Refund ""April""",Zenith'
    assert lines[2].startswith("2024-05-01,5000.00,")


def test_tax_summary(client: TestClient):
    post_alert(client, "Salary of NGN 2,500,000 credited on 2024-01-31")
    post_alert(client, "Kuda: NGN 1,500,000 received from Tolu on 2024-02-15")

    response = client.get("/v1/tax/summary")

    assert response.status_code == 200
    data = response.json()
    assert data["total_income"] == 4_000_000
    assert data["total_tax"] == 510_000
    assert data["net_income"] == 3_490_000
    assert data["effective_rate_percent"] == 12.75
    assert len(data["breakdown"]) == 6
    assert data["breakdown"][1]["taxable_amount"] == 2_200_000
    assert data["breakdown"][1]["rate_percent"] == 15.0
    assert data["breakdown"][-1]["upper_bound"] is None


def test_tax_summary_empty_ledger(client: TestClient):
    data = client.get("/v1/tax/summary").json()
    assert data["total_tax"] == 0
    assert data["effective_rate_percent"] == 0
    assert all(row["taxable_amount"] == 0 for row in data["breakdown"])


def test_tax_brackets(client: TestClient):
    brackets = client.get("/v1/tax/brackets").json()["brackets"]
    assert len(brackets) == 6
    assert brackets[0] == {"upper_bound": 800000.0, "rate": 0.0}
    assert brackets[-1]["upper_bound"] is None


def test_ocr_endpoint(client: TestClient):
    image = base64.b64encode(b"\x89PNG fake").decode()
    response = client.post("/v1/ocr", json={"image_base64": image, "media_type": "image/png"})

    assert response.status_code == 200
    assert response.json()["text"] == "GTBank Credit Alert\nNGN 5,000.00 received"


def test_ocr_rejects_non_image(client: TestClient):
    image = base64.b64encode(b"%PDF").decode()
    response = client.post("/v1/ocr", json={"image_base64": image, "media_type": "application/pdf"})
    assert response.status_code == 400


def test_ocr_rejects_bad_base64(client: TestClient):
    response = client.post("/v1/ocr", json={"image_base64": "***", "media_type": "image/png"})
    assert response.status_code == 400


def service_unavailable(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503)


@pytest.mark.parametrize("ocr_handler", [service_unavailable])
def test_ocr_service_down(client: TestClient):
    image = base64.b64encode(b"\x89PNG fake").decode()
    response = client.post("/v1/ocr", json={"image_base64": image, "media_type": "image/png"})
    assert response.status_code == 503
