"""
Merkle Engine - Main Entry Point

Serves a single in-memory Merkle tree over HTTP: batch build, block
insertion and membership queries.
"""

import signal
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from prometheus_client import make_asgi_app
from starlette.responses import Response

from merkle_engine.api.v1 import router as api_v1_router
from merkle_engine.core.config import settings
from merkle_engine.core.logging import setup_logging
from merkle_engine.metrics import get_tree_metrics
from merkle_engine.services.tree_service import TreeService

setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    logger.info(
        "Starting Merkle Engine",
        version=settings.VERSION,
        environment=settings.ENV,
    )

    app.state.tree_service = TreeService()

    if settings.METRICS_ENABLED:
        get_tree_metrics().set_service_info(
            version=settings.VERSION,
            environment=settings.ENV,
        )
        logger.info("Tree metrics initialized")

    yield

    logger.info("Merkle Engine shutdown complete")


def create_application() -> FastAPI:
    """Create FastAPI application."""
    app = FastAPI(
        title="Merkle Engine API",
        description="In-memory binary Merkle tree with insertion and membership queries",
        version=settings.VERSION,
        docs_url="/docs" if settings.ENV != "production" else None,
        redoc_url="/redoc" if settings.ENV != "production" else None,
        lifespan=lifespan,
    )

    app.include_router(api_v1_router, prefix="/api/v1")

    if settings.METRICS_ENABLED:
        app.mount("/metrics", make_asgi_app())

    @app.get("/health")
    async def health() -> dict:
        """Overall service health check."""
        return {
            "status": "healthy",
            "service": "merkle-engine",
            "version": settings.VERSION,
        }

    @app.get("/live")
    async def live() -> Response:
        """Liveness probe for Kubernetes."""
        return Response(status_code=200, content="alive")

    @app.get("/status")
    async def status() -> dict:
        """Detailed service status."""
        tree_service = getattr(app.state, "tree_service", None)

        if tree_service:
            snapshot = await tree_service.snapshot()
            return {
                "service": "merkle-engine",
                "version": settings.VERSION,
                "environment": settings.ENV,
                "tree": snapshot.to_dict(),
            }
        return {
            "service": "merkle-engine",
            "version": settings.VERSION,
            "error": "Tree service not initialized",
        }

    return app


app = create_application()


def handle_signal(signum: int, frame: object) -> None:
    """Handle shutdown signals."""
    logger.info(f"Received signal {signum}, initiating shutdown")
    sys.exit(0)


def main() -> None:
    """Run the service."""
    signal.signal(signal.SIGTERM, handle_signal)
    signal.signal(signal.SIGINT, handle_signal)

    logger.info(
        "Starting Merkle Engine service",
        host=settings.HOST,
        port=settings.PORT,
    )

    uvicorn.run(
        "merkle_engine.main:app",
        host=settings.HOST,
        port=settings.PORT,
        workers=settings.WORKERS,
        log_level=settings.LOG_LEVEL.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
