"""FastAPI app entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from scrape_service.api.routes import router
from scrape_service.api.service import ScraperService
from scrape_service.config import get_settings
from scrape_service.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()

    # Initialize logging FIRST so all subsequent operations produce JSON logs
    setup_logging(settings.log_level)
    logger.info("starting scrape service")

    app.state.settings = settings
    app.state.service = ScraperService.from_settings(settings)

    logger.info(
        "scrape service ready",
        extra={
            "relay_count": len(settings.relay_endpoints),
            "scraping_api": bool(settings.scraping_api_key),
            "timeout_ms": settings.request_timeout_ms,
        },
    )

    yield

    logger.info("shutting down scrape service", extra={"history_size": len(app.state.service.history)})


app = FastAPI(title="Scrape Service", lifespan=lifespan)
app.include_router(router)


@app.get("/health")
async def health():
    return {"status": "ok"}
