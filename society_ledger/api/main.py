"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from society_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from society_ledger.api.v1 import residents, payments, expenses, dues, dashboard
from society_ledger.infrastructure.observability.logging import setup_logging
from society_ledger.config import settings

setup_logging(settings.log_level, settings.service_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Society Ledger",
        description="Housing society payments, expenses and maintenance dues",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(residents.router, prefix="/v1", tags=["residents"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(expenses.router, prefix="/v1", tags=["expenses"])
    app.include_router(dues.router, prefix="/v1", tags=["maintenance-due"])
    app.include_router(dashboard.router, prefix="/v1", tags=["dashboard"])

    return app


app = create_app()
