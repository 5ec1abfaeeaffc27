"""
Main FastAPI application entry point.

Uses Application Factory Pattern.
"""

import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from gardien import __version__
from gardien.config.settings import Settings, get_settings
from gardien.di import get_container, initialize_container, shutdown_container
from gardien.domain.exceptions import GardienException
from gardien.domain.services.nonce_store import NonceStore
from gardien.infrastructure.monitoring import get_logger, setup_logging
from gardien.infrastructure.monitoring.metrics import nonces_swept_total
from gardien.presentation.api.middleware import (
    RequestIDMiddleware,
    gardien_exception_handler,
)
from gardien.presentation.api.routes import auth, health

logger = get_logger(__name__)


async def sweep_nonces_forever(store: NonceStore, interval_seconds: float) -> None:
    """
    Periodically remove expired and consumed nonce records.

    A failed sweep is logged and the loop keeps running; the next
    sweep retries.
    """
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = await store.sweep_expired()
        except GardienException as e:
            logger.warning(f"Nonce sweep failed: {e.message}")
            continue
        except Exception:
            logger.exception("Nonce sweep failed unexpectedly")
            continue
        if removed:
            nonces_swept_total.inc(removed)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Application factory - creates and configures FastAPI app.

    Args:
        settings: Optional Settings instance (for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    # Structured logging (JSON only in production)
    json_logs = settings.ENV == "production"
    setup_logging(level=settings.LOG_LEVEL, json_logs=json_logs)

    logger.info(f"Creating Gardien application (ENV={settings.ENV})")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager with nonce sweeper."""
        logger.info("Starting Gardien application...")
        await initialize_container()

        container = get_container()
        sweeper = asyncio.create_task(
            sweep_nonces_forever(
                container.nonce_store,
                settings.NONCE_SWEEP_INTERVAL_SECONDS,
            ),
            name="nonce-sweeper",
        )
        logger.info(
            f"Nonce sweeper started "
            f"(interval={settings.NONCE_SWEEP_INTERVAL_SECONDS}s)"
        )

        logger.info("Gardien application started successfully")

        yield

        logger.info("Shutting down Gardien application...")

        try:
            sweeper.cancel()
            with suppress(asyncio.CancelledError):
                await sweeper
        finally:
            await shutdown_container()
            logger.info("Gardien application shutdown complete")

    app = FastAPI(
        title="Gardien API",
        description="Sign-In With Solana challenge-response authentication",
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware chain (last added runs first)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(GardienException, gardien_exception_handler)

    app.include_router(health.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint."""
        return {
            "service": settings.APP_NAME,
            "status": "running",
            "version": __version__,
            "description": "Sign-In With Solana authentication",
        }

    if settings.METRICS_ENABLED:

        @app.get("/metrics", tags=["Monitoring"])
        async def metrics():
            """
            Prometheus metrics endpoint.

            Returns metrics in Prometheus text format for scraping.
            """
            return Response(
                content=generate_latest(),
                media_type=CONTENT_TYPE_LATEST,
            )

    logger.info("Gardien application created successfully")
    return app


def get_app() -> FastAPI:
    """
    Get or create application instance.

    For uvicorn: uvicorn gardien.main:get_app --factory
    """
    return create_app()


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "gardien.main:get_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD,
    )


if __name__ == "__main__":
    main()
