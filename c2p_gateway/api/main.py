"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from c2p_gateway.api.errors import register_exception_handlers
from c2p_gateway.api.middleware import RequestIDMiddleware, MetricsMiddleware
from c2p_gateway.api.v1 import verify
from c2p_gateway.infrastructure.observability.logging import setup_logging
from c2p_gateway.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="C2P Payment Gateway",
        description="Mercantil Banco C2P payment verification service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "service": settings.service_name,
            "environment": settings.mercantil_environment,
        }

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(verify.router, prefix="/v1", tags=["payments"])

    return app


app = create_app()
