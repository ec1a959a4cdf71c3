"""
Scholar-Fi HTTP service.

`create_app` builds the FastAPI app; `main` serves it with uvicorn.
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from scholarfi.application.use_cases.check_verifications import (
    CheckVerifications,
)
from scholarfi.config.settings import Settings, get_settings
from scholarfi.di import get_container, initialize_container, shutdown_container
from scholarfi.domain.exceptions import ScholarFiException
from scholarfi.infrastructure.monitoring import get_logger, setup_logging
from scholarfi.presentation.api.middleware import (
    MetricsMiddleware,
    RequestIDMiddleware,
    scholarfi_exception_handler,
)
from scholarfi.presentation.api.routes import child_account, webhooks


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def run_reconciliation_loop(
    use_case: CheckVerifications, interval: float
) -> None:
    """
    Run reconciliation passes forever, one every interval seconds.

    A failed pass is logged and retried on the next tick. Only
    cancellation stops the loop.
    """
    logger = get_logger(__name__)
    while True:
        try:
            report = await use_case.execute()
            if report.events_processed or report.failed:
                logger.info(
                    f"Reconciliation pass: {report.events_processed} processed, "
                    f"{report.skipped} skipped, {report.failed} failed, "
                    f"cursor at {report.last_block}"
                )
        except ScholarFiException as e:
            logger.error(f"Reconciliation pass failed: {e.message}")
        except Exception:
            logger.exception("Reconciliation pass crashed")
        await asyncio.sleep(interval)


async def stop_background_task(task: Optional[asyncio.Task]) -> None:
    """Cancel a background task and wait for it, whatever state it is in."""
    if task is None:
        return
    if not task.done():
        task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception:
        get_logger(__name__).exception(f"Background task {task.get_name()} failed")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use instead of the global ones

    Returns:
        FastAPI app with middleware, routes and lifespan wired
    """
    if settings is None:
        settings = get_settings()

    # Structured JSON logs only in production
    json_logs = settings.ENV == "production"
    setup_logging(level=settings.LOG_LEVEL, json_logs=json_logs)
    logger = get_logger(__name__)

    logger.info(f"Creating Scholar-Fi application (ENV={settings.ENV})")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager with optional reconciliation loop."""
        logger.info("Starting Scholar-Fi application...")
        container = await initialize_container()

        reconcile_task: Optional[asyncio.Task] = None
        if settings.RECONCILE_INTERVAL_SECONDS > 0:
            reconcile_task = asyncio.create_task(
                run_reconciliation_loop(
                    container.check_verifications,
                    settings.RECONCILE_INTERVAL_SECONDS,
                ),
                name="celo-reconciliation",
            )
            logger.info(
                f"Reconciliation loop started "
                f"(every {settings.RECONCILE_INTERVAL_SECONDS}s)"
            )

        logger.info("Scholar-Fi application started successfully")

        yield

        logger.info("Shutting down Scholar-Fi application...")
        try:
            await stop_background_task(reconcile_task)
        finally:
            await shutdown_container()
        logger.info("Scholar-Fi application shutdown complete")

    app = FastAPI(
        title="Scholar-Fi API",
        description="Custodial child accounts across Privy, Base, Celo and Oasis",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    # Middleware chain (last added runs first)
    app.add_middleware(RequestIDMiddleware)
    if settings.METRICS_ENABLED:
        app.add_middleware(MetricsMiddleware)
    app.add_middleware(
        GZipMiddleware,
        minimum_size=1000,
        compresslevel=6,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ScholarFiException, scholarfi_exception_handler)

    app.include_router(child_account.router, prefix="/api")
    app.include_router(webhooks.router, prefix="/api")

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint."""
        return {
            "success": True,
            "message": "Scholar-Fi Backend API",
            "status": "online",
            "version": settings.APP_VERSION,
            "timestamp": _now(),
        }

    @app.get("/health", tags=["Health"])
    async def health_check():
        """Liveness plus database reachability."""
        database = get_container().database
        if database is None:
            db_status = "in-memory"
        elif await database.health_check():
            db_status = "healthy"
        else:
            db_status = "unhealthy"

        return {
            "success": True,
            "status": "healthy" if db_status != "unhealthy" else "degraded",
            "timestamp": _now(),
            "components": {"database": db_status},
        }

    @app.get("/metrics", tags=["Monitoring"])
    async def metrics():
        """Prometheus scrape endpoint."""
        return Response(
            content=generate_latest(),
            media_type=CONTENT_TYPE_LATEST,
        )

    logger.info("Scholar-Fi application created successfully")
    return app


def get_app() -> FastAPI:
    """
    Get or create application instance.

    For uvicorn: uvicorn scholarfi.main:get_app --factory
    """
    return create_app()


def main():
    """Serve the app with uvicorn using settings from the environment."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "scholarfi.main:get_app",
        factory=True,
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.API_RELOAD,
    )


if __name__ == "__main__":
    main()
