"""Request/response Pydantic models."""

from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, field_validator

from scrape_service.scraper.models import HistoryItem, ScrapeResult

_VALID_SCHEMES = {"http", "https"}


class ScrapeRequest(BaseModel):
    url: str
    # Partial ScraperOptions, camelCase or snake_case keys
    options: dict[str, Any] | None = None
    api_key: str | None = None

    @field_validator("url")
    @classmethod
    def _require_http_url(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in _VALID_SCHEMES or not parsed.hostname:
            raise ValueError("url must be an absolute http(s) URL")
        return value


class ScrapeResponse(BaseModel):
    id: str
    result: ScrapeResult


class HistoryResponse(BaseModel):
    items: list[HistoryItem] = []
