"""FastAPI application factory and server entry point."""

from __future__ import annotations

import logging
import sys
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings
from .market import (
    Broadcaster,
    CatalogError,
    GBMPriceSource,
    PriceSource,
    SubscriptionRegistry,
    TickScheduler,
    create_stream_router,
    load_catalog,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    price_source: PriceSource | None = None,
    catalog: Mapping[str, float] | None = None,
) -> FastAPI:
    """Wire catalog, price source, scheduler and broadcaster into a FastAPI app.

    The tick scheduler starts with the application lifespan and stops on
    shutdown, after which every open connection is closed.
    """
    settings = settings or Settings()
    catalog = dict(catalog) if catalog is not None else load_catalog(settings.catalog_path)
    if price_source is None:
        price_source = GBMPriceSource(tick_interval=settings.tick_interval)

    registry = SubscriptionRegistry()
    broadcaster = Broadcaster(
        registry,
        queue_size=settings.send_queue_size,
        send_timeout=settings.send_timeout,
    )
    scheduler = TickScheduler(
        catalog,
        price_source,
        on_tick=broadcaster.publish,
        interval=settings.tick_interval,
        precision=settings.price_precision,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        await scheduler.start()
        try:
            yield
        finally:
            await scheduler.stop()
            await broadcaster.close_all()

    app = FastAPI(title="StockStream", lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    app.include_router(create_stream_router(broadcaster, catalog))

    app.state.settings = settings
    app.state.registry = registry
    app.state.broadcaster = broadcaster
    app.state.scheduler = scheduler
    return app


def run() -> None:
    """Console entry point: ``stockstream-server``."""
    try:
        settings = Settings.from_env()
    except ValueError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        app = create_app(settings)
    except CatalogError as e:
        logger.error("Cannot load symbol catalog: %s", e)
        sys.exit(2)

    logger.info("Starting server on http://%s:%d", settings.host, settings.port)
    # uvicorn exits the process if the port cannot be bound
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
