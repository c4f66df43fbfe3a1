"""Prometheus metrics for monitoring alert outcomes, credited amounts and OCR performance"""

from prometheus_client import Counter, Histogram

from alert_ledger.domain.models import AssemblyResult

# Alert metrics
alert_counter = Counter(
    "alert_ledger_alerts_total",
    "Total bank alerts processed",
    ["outcome"],  # accepted | rejected
)

rejection_counter = Counter(
    "alert_ledger_rejections_total",
    "Rejected alerts by kind",
    ["kind"],  # empty_input | debit_rejected | ambiguous_alert | extraction_failed
)

credited_amount_histogram = Histogram(
    "alert_ledger_credited_amount",
    "Amount of accepted credit alerts (NGN)",
    buckets=[1_000, 10_000, 50_000, 100_000, 500_000, 1_000_000, 5_000_000],
)

# OCR metrics
ocr_latency_histogram = Histogram(
    "ocr_latency_seconds",
    "OCR service response time",
    buckets=[0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)

ocr_failure_counter = Counter(
    "ocr_failures_total",
    "Failed OCR calls",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_alert(result: AssemblyResult) -> None:
    """Record alert outcome metrics"""
    if result.transaction is not None:
        alert_counter.labels(outcome="accepted").inc()
        credited_amount_histogram.observe(result.transaction.amount)
        return

    alert_counter.labels(outcome="rejected").inc()
    if result.rejection is not None:
        rejection_counter.labels(kind=result.rejection.kind.value).inc()
