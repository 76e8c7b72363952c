"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from finance_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from finance_gateway.api.v1 import benefits, installments, stats, transactions
from finance_gateway.infrastructure.observability.logging import setup_logging
from finance_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Finance Gateway",
        description="Accrual, installment, classification and projection engine for a personal finance tracker",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added runs first: request ID is set before metrics are recorded
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(installments.router, prefix="/v1", tags=["installments"])
    app.include_router(benefits.router, prefix="/v1", tags=["benefits"])
    app.include_router(stats.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
