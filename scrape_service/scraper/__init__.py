"""HTML scraping core: retrieval, extraction, serialization and history."""

from .engine import ScraperEngine
from .errors import NetworkError, ResolutionError, ScraperError, SerializationError
from .extractor import ExtractedDocument, extract
from .history import HistoryStore
from .models import (
    Capabilities,
    Content,
    DataFormat,
    Heading,
    HistoryItem,
    Image,
    Link,
    ListBlock,
    Metadata,
    ScrapedData,
    ScrapeResult,
    ScraperOptions,
    Table,
)
from .retriever import FetchStrategy, RelayFetcher, Retriever, ScrapingApiFetcher, fetch_first
from .serializer import ExportPayload, export, serialize

__all__ = [
    "Capabilities",
    "Content",
    "DataFormat",
    "ExportPayload",
    "ExtractedDocument",
    "FetchStrategy",
    "Heading",
    "HistoryItem",
    "HistoryStore",
    "Image",
    "Link",
    "ListBlock",
    "Metadata",
    "NetworkError",
    "RelayFetcher",
    "ResolutionError",
    "Retriever",
    "ScrapeResult",
    "ScrapedData",
    "ScraperEngine",
    "ScraperError",
    "ScraperOptions",
    "ScrapingApiFetcher",
    "SerializationError",
    "Table",
    "export",
    "extract",
    "fetch_first",
    "serialize",
]
