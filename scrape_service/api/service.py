"""Service layer — orchestrates scrapes, history and exports for the API routes."""

from __future__ import annotations

import logging
from typing import Any

from scrape_service.config import Settings
from scrape_service.scraper import (
    DataFormat,
    ExportPayload,
    HistoryItem,
    HistoryStore,
    Retriever,
    ScrapedData,
    ScrapeResult,
    ScraperEngine,
    ScraperOptions,
    export,
)

logger = logging.getLogger(__name__)


class ScraperService:
    """Runs scrapes through the engine and records every outcome in history."""

    def __init__(self, engine: ScraperEngine, history: HistoryStore) -> None:
        self._engine = engine
        self._history = history

    @classmethod
    def from_settings(cls, settings: Settings) -> ScraperService:
        retriever = Retriever(
            relay_templates=settings.relay_endpoints,
            api_url=settings.scraping_api_url,
        )
        options = ScraperOptions(
            user_agent=settings.user_agent,
            timeout=settings.request_timeout_ms,
        )
        engine = ScraperEngine(retriever, options, api_key=settings.scraping_api_key)
        return cls(engine, HistoryStore())

    @property
    def history(self) -> HistoryStore:
        return self._history

    async def scrape_url(
        self,
        url: str,
        options: dict[str, Any] | None = None,
        api_key: str | None = None,
    ) -> tuple[str, ScrapeResult]:
        """Scrape *url*, store the result and return ``(history_id, result)``."""
        if options:
            self._engine.update_options(**options)

        result = await self._engine.scrape(url, api_key=api_key)
        item_id = self._history.insert(result, url=url)
        logger.info(
            "scrape recorded",
            extra={"id": item_id, "url": url, "status": result.status, "duration_ms": result.duration},
        )
        return item_id, result

    def get_history(self) -> list[HistoryItem]:
        return self._history.list()

    def get_history_item(self, item_id: str) -> ScrapeResult | None:
        return self._history.get(item_id)

    def delete_history_item(self, item_id: str) -> bool:
        return self._history.delete(item_id)

    def clear_history(self) -> None:
        self._history.clear()

    def get_options(self) -> ScraperOptions:
        return self._engine.get_options()

    def update_options(self, **changes: Any) -> ScraperOptions:
        return self._engine.update_options(**changes)

    def convert_data(self, data: ScrapedData, fmt: DataFormat = "json") -> str:
        return self._engine.convert(data, fmt)

    def download_data(self, data: ScrapedData, fmt: DataFormat = "json") -> ExportPayload:
        return export(data, fmt)
