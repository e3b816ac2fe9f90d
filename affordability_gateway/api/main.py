"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from affordability_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from affordability_gateway.api.v1 import egi, quotes, rate_table
from affordability_gateway.infrastructure.observability.logging import setup_logging
from affordability_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Affordability Gateway",
        description="Tiered-rate mortgage and home-equity affordability simulations",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
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
    app.include_router(quotes.router, prefix="/v1", tags=["quotes"])
    app.include_router(egi.router, prefix="/v1", tags=["egi"])
    app.include_router(rate_table.router, prefix="/v1", tags=["rate-table"])

    return app


app = create_app()
