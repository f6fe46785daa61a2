"""HTML → structured document extraction.

Parsing is done with BeautifulSoup on top of lxml; every rule works on CSS
selectors so the output only depends on the HTML and the base URL.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from bs4 import BeautifulSoup, Tag

from .errors import ResolutionError
from .models import (
    Capabilities,
    Content,
    Heading,
    Image,
    Link,
    ListBlock,
    Metadata,
    Table,
)
from .urls import is_absolute, resolve_url

logger = logging.getLogger(__name__)

_HEADING_TAGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class ExtractedDocument:
    """Everything the extractor derives from one HTML document."""

    title: str
    metadata: Metadata
    content: Content


def extract(
    html: str,
    base_url: str,
    capabilities: Capabilities = Capabilities(),
) -> ExtractedDocument:
    """Parse *html* and extract title, metadata and capability-gated content."""
    soup = BeautifulSoup(html, "lxml")

    title = soup.title.get_text().strip() if soup.title else ""
    metadata = extract_metadata(soup, base_url)
    content = extract_content(soup, base_url, capabilities)

    logger.debug(
        "document extracted",
        extra={
            "base_url": base_url,
            "headings": len(content.headings or []),
            "links": len(content.links or []),
            "images": len(content.images or []),
            "tables": len(content.tables or []),
        },
    )
    return ExtractedDocument(title=title, metadata=metadata, content=content)


# --- metadata ---


def _meta_content(soup: BeautifulSoup, *selectors: str) -> str:
    """Return the first non-empty ``content`` attribute among *selectors*."""
    for selector in selectors:
        el = soup.select_one(selector)
        if el is not None and el.get("content"):
            return el["content"]
    return ""


def _prefixed_meta(soup: BeautifulSoup, attr: str, prefix: str) -> dict[str, str]:
    """Collect ``meta[attr^=prefix]`` tags keyed by the attribute minus *prefix*."""
    collected: dict[str, str] = {}
    for el in soup.select(f'meta[{attr}^="{prefix}"]'):
        key = el.get(attr, "")
        value = el.get("content", "")
        if key and value:
            collected[key[len(prefix):]] = value
    return collected


def _favicon(soup: BeautifulSoup, base_url: str) -> str:
    href = ""
    for selector in ('link[rel="icon"]', 'link[rel="shortcut icon"]'):
        el = soup.select_one(selector)
        if el is not None and el.get("href"):
            href = el["href"]
            break

    if href and not is_absolute(href):
        try:
            href = resolve_url(href, base_url)
        except ResolutionError:
            # Favicon falls back to the raw value instead of being dropped
            logger.debug("favicon left unresolved", extra={"href": href}, exc_info=True)
    return href


def extract_metadata(soup: BeautifulSoup, base_url: str) -> Metadata:
    """Extract page-level metadata. Not gated by any capability."""
    keywords = _meta_content(soup, 'meta[name="keywords"]')
    return Metadata(
        description=_meta_content(
            soup, 'meta[name="description"]', 'meta[property="og:description"]'
        ),
        keywords=[k.strip() for k in keywords.split(",") if k.strip()],
        author=_meta_content(
            soup, 'meta[name="author"]', 'meta[property="article:author"]'
        ),
        open_graph=_prefixed_meta(soup, "property", "og:"),
        twitter_card=_prefixed_meta(soup, "name", "twitter:"),
        favicon=_favicon(soup, base_url),
    )


# --- content ---


def _text(el: Tag) -> str:
    return el.get_text().strip()


def _parse_dimension(value: str | None) -> int | None:
    """Parse a leading integer from an HTML width/height attribute."""
    if not value:
        return None
    match = _LEADING_INT_RE.match(value)
    return int(match.group(1)) if match else None


def _headings(soup: BeautifulSoup) -> list[Heading]:
    headings = []
    for el in soup.find_all(_HEADING_TAGS):
        text = _text(el)
        if text:
            headings.append(Heading(level=int(el.name[1]), text=text))
    return headings


def _paragraphs(soup: BeautifulSoup) -> list[str]:
    return [text for text in (_text(p) for p in soup.find_all("p")) if text]


def _links(soup: BeautifulSoup, base_url: str) -> list[Link]:
    links = []
    for el in soup.select("a[href]"):
        href = el.get("href", "")
        if not href or href.startswith("javascript:") or href == "#":
            continue
        try:
            url = resolve_url(href, base_url)
        except ResolutionError:
            logger.debug("link skipped", extra={"href": href}, exc_info=True)
            continue
        # Prefix match against the base URL string, not an origin comparison
        links.append(Link(text=_text(el), url=url, is_internal=url.startswith(base_url)))
    return links


def _images(soup: BeautifulSoup, base_url: str) -> list[Image]:
    images = []
    for el in soup.select("img[src]"):
        src = el.get("src", "")
        if not src or src.startswith("data:"):
            continue
        try:
            src = resolve_url(src, base_url)
        except ResolutionError:
            logger.debug("image skipped", extra={"src": src}, exc_info=True)
            continue
        images.append(
            Image(
                alt=el.get("alt", ""),
                src=src,
                width=_parse_dimension(el.get("width")),
                height=_parse_dimension(el.get("height")),
            )
        )
    return images


def _lists(soup: BeautifulSoup) -> list[ListBlock]:
    blocks = []
    for el in soup.find_all(["ul", "ol"]):
        items = [text for text in (_text(li) for li in el.find_all("li")) if text]
        if items:
            blocks.append(
                ListBlock(type="unordered" if el.name == "ul" else "ordered", items=items)
            )
    return blocks


def _tables(soup: BeautifulSoup) -> list[Table]:
    tables = []
    for el in soup.find_all("table"):
        headers = [_text(th) for th in el.find_all("th")]
        rows = []
        for tr in el.find_all("tr"):
            cells = [_text(td) for td in tr.find_all("td")]
            if cells:
                rows.append(cells)
        # Drops single-row layout tables
        if headers or len(rows) >= 2:
            tables.append(Table(headers=headers, rows=rows))
    return tables


def _main_text(soup: BeautifulSoup) -> str:
    root = soup.body if soup.body is not None else soup
    return root.get_text().strip()


def extract_content(
    soup: BeautifulSoup,
    base_url: str,
    capabilities: Capabilities,
) -> Content:
    """Extract the content sections enabled by *capabilities*."""
    sections: dict = {}

    if capabilities.extract_text:
        sections.update(
            headings=_headings(soup),
            paragraphs=_paragraphs(soup),
            lists=_lists(soup),
            tables=_tables(soup),
            main_text=_main_text(soup),
        )
    if capabilities.extract_links:
        sections["links"] = _links(soup, base_url)
    if capabilities.extract_images:
        sections["images"] = _images(soup, base_url)

    return Content(**sections)
