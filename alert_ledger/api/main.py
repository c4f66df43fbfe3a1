"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from alert_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from alert_ledger.api.v1 import alerts, ocr, profile, tax, transactions
from alert_ledger.infrastructure.database.session import init_db
from alert_ledger.infrastructure.observability.logging import setup_logging
from alert_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    # Fail at startup, not on first request, if the configured schedule is invalid
    settings.brackets()
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Alert Ledger",
        description="Bank alert classification, income ledger and progressive tax service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(alerts.router, prefix="/v1", tags=["alerts"])
    app.include_router(ocr.router, prefix="/v1", tags=["ocr"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(tax.router, prefix="/v1", tags=["tax"])
    app.include_router(profile.router, prefix="/v1", tags=["profile"])

    return app


app = create_app()
