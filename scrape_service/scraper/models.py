"""Data models for the scraper: document model, result envelope, options."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from scrape_service.config import DEFAULT_USER_AGENT

DataFormat = Literal["json", "csv", "xml", "excel"]
ScrapeStatus = Literal["success", "error", "pending"]


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class _Model(BaseModel):
    """Frozen model serialized with camelCase keys, accepting either spelling."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class Heading(_Model):
    level: int = Field(ge=1, le=6)
    text: str


class Link(_Model):
    text: str
    url: str
    is_internal: bool


class Image(_Model):
    alt: str
    src: str
    width: int | None = None
    height: int | None = None


class ListBlock(_Model):
    type: Literal["ordered", "unordered"]
    items: tuple[str, ...]


class Table(_Model):
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


class Metadata(_Model):
    description: str = ""
    keywords: tuple[str, ...] = ()
    author: str = ""
    open_graph: dict[str, str] = {}
    twitter_card: dict[str, str] = {}
    favicon: str = ""


class Content(_Model):
    """Extracted page content.

    Each section is ``None`` when the capability that produces it was
    disabled, and a possibly empty tuple when it was enabled.
    """

    headings: tuple[Heading, ...] | None = None
    paragraphs: tuple[str, ...] | None = None
    links: tuple[Link, ...] | None = None
    images: tuple[Image, ...] | None = None
    lists: tuple[ListBlock, ...] | None = None
    tables: tuple[Table, ...] | None = None
    main_text: str | None = None


class ScrapedData(_Model):
    url: str
    title: str
    timestamp: str
    metadata: Metadata = Metadata()
    content: Content = Content()


class ScrapeResult(_Model):
    data: ScrapedData | None = None
    error: str | None = None
    status: ScrapeStatus
    duration: int = 0  # milliseconds


class HistoryItem(_Model):
    id: str
    url: str
    timestamp: str
    status: ScrapeStatus


class ScraperOptions(_Model):
    """Caller-supplied scrape configuration.

    Only the extract* flags, ``user_agent`` and ``timeout`` change what the
    scraper does. ``wait_time``, ``depth`` and ``concurrency`` are accepted
    and echoed back but have no effect.
    """

    wait_time: float = 3
    depth: int = 2
    extract_images: bool = True
    extract_links: bool = True
    extract_text: bool = True
    data_format: DataFormat = "json"
    concurrency: int | None = 1
    user_agent: str | None = DEFAULT_USER_AGENT
    timeout: int | None = 30000  # milliseconds

    def merged(self, **changes) -> ScraperOptions:
        """Return a copy with *changes* applied (camelCase or snake_case keys)."""
        names = {to_camel(name): name for name in ScraperOptions.model_fields}
        current = self.model_dump()
        for key, value in changes.items():
            current[names.get(key, key)] = value
        return ScraperOptions.model_validate(current)

    @property
    def capabilities(self) -> Capabilities:
        return Capabilities(
            extract_text=self.extract_text,
            extract_links=self.extract_links,
            extract_images=self.extract_images,
        )


@dataclass(frozen=True)
class Capabilities:
    """Flags gating which content sections the extractor produces."""

    extract_text: bool = True
    extract_links: bool = True
    extract_images: bool = True
