"""
Stockledger HTTP application.

``create_app()`` wires middleware, error handlers and routers; the module
level ``app`` is what uvicorn serves (``stockledger.api.main:app``).
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stockledger.api.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from stockledger.api.middleware.error_handler import setup_exception_handlers
from stockledger.api.routes import (
    adjustments_router,
    categories_router,
    health_router,
    inventory_router,
)
from stockledger.config import configure_logging, get_logger, get_settings
from stockledger.core.entities.events import InventoryEvent, InventoryEventType
from stockledger.core.services.event_bus import get_event_bus
from stockledger.infrastructure.storage.sqlite import close_pool, get_pool
from stockledger.infrastructure.storage.sqlite.migrations import run_migrations

logger = get_logger(__name__)


async def log_inventory_event(event: InventoryEvent) -> None:
    """Audit trail of every mutation, one log line per event."""
    logger.info(
        "inventory_event",
        event_type=event.event_type.value,
        item_ids=list(event.item_ids),
        **event.payload,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Migrate and open the pool before serving; close the pool after."""
    configure_logging()
    settings = get_settings()
    logger.info(
        "application_starting",
        environment=settings.environment,
        db_path=str(settings.storage.db_path),
    )

    try:
        results = await run_migrations()
        failed = [r.version for r in results if not r.success]
        if failed:
            raise RuntimeError(f"migrations failed: {', '.join(failed)}")
        await get_pool()
    except Exception as e:
        logger.error("database_init_failed", error=str(e))
        raise
    logger.info("database_ready", migrations_applied=len(results))

    bus = get_event_bus()
    for event_type in InventoryEventType:
        bus.subscribe(event_type, log_inventory_event)

    yield

    for event_type in InventoryEventType:
        bus.unsubscribe(event_type, log_inventory_event)
    try:
        await close_pool()
    except Exception as e:
        logger.warning("connection_pool_close_failed", error=str(e))
    logger.info("application_stopped")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Inventory items, stock adjustments and transaction history",
        version=settings.app_version,
        docs_url="/docs" if settings.api.debug else None,
        redoc_url=None,
        lifespan=lifespan,
    )

    # added last runs first: request logging wraps error rendering
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(LoggingMiddleware)
    if settings.api.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    setup_exception_handlers(app)

    for router in (health_router, inventory_router, adjustments_router, categories_router):
        app.include_router(router)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"name": settings.app_name, "version": settings.app_version}

    @app.get("/health")
    async def liveness() -> dict[str, str]:
        return {"status": "healthy", "version": settings.app_version}

    return app


app = create_app()


def run() -> None:
    """``stockledger-api``: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "stockledger.api.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.api.debug,
    )


if __name__ == "__main__":
    run()
