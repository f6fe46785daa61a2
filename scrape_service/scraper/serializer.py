"""Rendering of scraped data into exportable text formats."""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from urllib.parse import urlparse
from xml.sax.saxutils import escape

from pydantic import ValidationError

from .errors import SerializationError
from .models import DataFormat, ScrapedData, utc_timestamp

logger = logging.getLogger(__name__)

NO_DATA = "No data available"

# Characters outside the XML 1.0 Char production
_XML_ILLEGAL_RE = re.compile(r"[^\x09\x0A\x0D\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")


@dataclass(frozen=True)
class ExportFormat:
    """File extension and MIME type advertised for a data format."""

    extension: str
    mime_type: str


EXPORT_FORMATS: dict[str, ExportFormat] = {
    "json": ExportFormat("json", "application/json"),
    "csv": ExportFormat("csv", "text/csv"),
    "xml": ExportFormat("xml", "application/xml"),
    # CSV content under a spreadsheet MIME type; no binary workbook is produced
    "excel": ExportFormat(
        "xlsx", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    ),
}


@dataclass(frozen=True)
class ExportPayload:
    content: str
    filename: str
    mime_type: str


def _coerce(data: ScrapedData | dict[str, Any]) -> ScrapedData:
    if isinstance(data, ScrapedData):
        return data
    try:
        return ScrapedData.model_validate(data)
    except ValidationError as exc:
        raise SerializationError(f"malformed scraped data: {exc.error_count()} validation error(s)") from exc


def to_json(data: ScrapedData) -> str:
    """Full dump with camelCase keys in declared field order, absent sections omitted."""
    return data.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def to_csv(data: ScrapedData) -> str:
    """Flattened report with one uppercase header per non-empty section."""
    rows: list[list[str]] = [
        ["URL", data.url],
        ["Title", data.title],
        ["Timestamp", data.timestamp],
        ["Description", data.metadata.description],
        ["Author", data.metadata.author],
        [],
    ]
    content = data.content

    if content.headings:
        rows.append(["HEADINGS"])
        rows.append(["Level", "Text"])
        rows.extend([str(h.level), h.text] for h in content.headings)
        rows.append([])

    if content.paragraphs:
        rows.append(["PARAGRAPHS"])
        rows.extend([f"Paragraph {i}", p] for i, p in enumerate(content.paragraphs, 1))
        rows.append([])

    if content.links:
        rows.append(["LINKS"])
        rows.append(["Text", "URL", "Internal"])
        rows.extend(
            [link.text, link.url, "true" if link.is_internal else "false"]
            for link in content.links
        )
        rows.append([])

    if content.images:
        rows.append(["IMAGES"])
        rows.append(["Alt Text", "Source", "Width", "Height"])
        rows.extend(
            [
                img.alt,
                img.src,
                "" if img.width is None else str(img.width),
                "" if img.height is None else str(img.height),
            ]
            for img in content.images
        )
        rows.append([])

    if content.lists:
        rows.append(["LISTS"])
        for n, block in enumerate(content.lists, 1):
            rows.append([f"List {n} ({block.type})"])
            rows.extend([f"Item {i}", item] for i, item in enumerate(block.items, 1))
            rows.append([])

    if content.tables:
        rows.append(["TABLES"])
        for n, table in enumerate(content.tables, 1):
            rows.append([f"Table {n}"])
            if table.headers:
                rows.append(list(table.headers))
            rows.extend(list(row) for row in table.rows)
            rows.append([])

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(rows)
    return buf.getvalue().rstrip("\n")


def _xml_text(value: str) -> str:
    return escape(_XML_ILLEGAL_RE.sub("", value), {"'": "&apos;", '"': "&quot;"})


def to_xml(data: ScrapedData) -> str:
    """Minimal XML document.

    Only url, title, timestamp, description, author, headings and
    paragraphs are written; links, images, lists and tables are not.
    """
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        "<scrapeResult>",
        f"  <url>{_xml_text(data.url)}</url>",
        f"  <title>{_xml_text(data.title)}</title>",
        f"  <timestamp>{_xml_text(data.timestamp)}</timestamp>",
        "  <metadata>",
    ]
    if data.metadata.description:
        lines.append(f"    <description>{_xml_text(data.metadata.description)}</description>")
    if data.metadata.author:
        lines.append(f"    <author>{_xml_text(data.metadata.author)}</author>")
    lines.append("  </metadata>")

    lines.append("  <content>")
    if data.content.headings:
        lines.append("    <headings>")
        lines.extend(
            f'      <heading level="{h.level}">{_xml_text(h.text)}</heading>'
            for h in data.content.headings
        )
        lines.append("    </headings>")
    if data.content.paragraphs:
        lines.append("    <paragraphs>")
        lines.extend(
            f"      <paragraph>{_xml_text(p)}</paragraph>" for p in data.content.paragraphs
        )
        lines.append("    </paragraphs>")
    lines.append("  </content>")
    lines.append("</scrapeResult>")
    return "\n".join(lines)


_RENDERERS = {
    "json": to_json,
    "csv": to_csv,
    "xml": to_xml,
    "excel": to_csv,
}

_LABELS = {to_json: "JSON", to_csv: "CSV", to_xml: "XML"}


def serialize(data: ScrapedData | dict[str, Any] | None, fmt: DataFormat | str = "json") -> str:
    """Render *data* as *fmt*. Never raises; failures come back as a diagnostic string."""
    if data is None:
        return NO_DATA

    label = "JSON"
    try:
        renderer = _RENDERERS.get(fmt, to_json)
        label = _LABELS[renderer]
        return renderer(_coerce(data))
    except Exception as exc:
        logger.exception("serialization failed", extra={"format": repr(fmt)})
        return f"Error generating {label}: {exc}"


def export_filename(data: ScrapedData, fmt: DataFormat | str, now: datetime | None = None) -> str:
    """``<hostname>-<timestamp>.<ext>`` with ``:`` and ``.`` made filename-safe."""
    export_format = EXPORT_FORMATS.get(fmt, EXPORT_FORMATS["json"])
    stamp = utc_timestamp(now).replace(":", "-").replace(".", "-")
    host = urlparse(data.url).hostname or "export"
    return f"{host}-{stamp}.{export_format.extension}"


def export(data: ScrapedData, fmt: DataFormat | str = "json", now: datetime | None = None) -> ExportPayload:
    """Serialize *data* and attach the filename and MIME type for download."""
    export_format = EXPORT_FORMATS.get(fmt, EXPORT_FORMATS["json"])
    return ExportPayload(
        content=serialize(data, fmt),
        filename=export_filename(data, fmt, now),
        mime_type=export_format.mime_type,
    )
