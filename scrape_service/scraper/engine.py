"""Scraper engine — retrieve → extract pipeline behind a never-raising entry point."""

from __future__ import annotations

import logging
import time

from .errors import NetworkError
from .extractor import extract
from .models import DataFormat, ScrapedData, ScrapeResult, ScraperOptions, utc_timestamp
from .retriever import Retriever
from .serializer import serialize

logger = logging.getLogger(__name__)


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class ScraperEngine:
    """Owns the current options and runs one scrape per call."""

    def __init__(
        self,
        retriever: Retriever | None = None,
        options: ScraperOptions | None = None,
        api_key: str = "",
    ) -> None:
        self._retriever = retriever or Retriever()
        self._options = options or ScraperOptions()
        self._api_key = api_key

    def get_options(self) -> ScraperOptions:
        return self._options.model_copy()

    def update_options(self, **changes) -> ScraperOptions:
        """Merge a partial option set into the current options."""
        self._options = self._options.merged(**changes)
        logger.debug("options updated", extra={"changed": sorted(changes)})
        return self.get_options()

    async def scrape(self, url: str, api_key: str | None = None) -> ScrapeResult:
        """Scrape *url* and wrap the outcome. Never raises."""
        started = time.monotonic()
        options = self._options
        key = api_key or self._api_key or None
        logger.info("scrape started", extra={"url": url, "via": "api" if key else "relays"})

        try:
            html = await self._retriever.retrieve(url, options, api_key=key)
            document = extract(html, url, options.capabilities)
            data = ScrapedData(
                url=url,
                title=document.title,
                timestamp=utc_timestamp(),
                metadata=document.metadata,
                content=document.content,
            )
        except NetworkError as exc:
            logger.warning("scrape failed", extra={"url": url, "error": str(exc)})
            return ScrapeResult(data=None, error=str(exc), status="error", duration=_elapsed_ms(started))
        except Exception as exc:
            logger.exception("scrape failed unexpectedly", extra={"url": url})
            return ScrapeResult(
                data=None,
                error=str(exc) or type(exc).__name__,
                status="error",
                duration=_elapsed_ms(started),
            )

        duration = _elapsed_ms(started)
        logger.info("scrape completed", extra={"url": url, "duration_ms": duration, "title": data.title[:80]})
        return ScrapeResult(data=data, status="success", duration=duration)

    def convert(self, data: ScrapedData | None, fmt: DataFormat | None = None) -> str:
        """Serialize *data*, defaulting to the configured ``data_format``."""
        return serialize(data, fmt or self._options.data_format)
