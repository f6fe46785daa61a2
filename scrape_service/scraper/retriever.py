"""HTML retrieval: a privileged scraping API or an ordered list of public relays."""

from __future__ import annotations

import logging
from typing import Protocol, Sequence
from urllib.parse import quote

import httpx

from scrape_service.config import DEFAULT_RELAY_ENDPOINTS, DEFAULT_USER_AGENT

from .errors import NetworkError
from .models import ScraperOptions

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000


class FetchStrategy(Protocol):
    """Protocol for anything that can turn a URL into HTML."""

    name: str

    async def fetch(self, url: str) -> str: ...


def _timeout(timeout_ms: int | None) -> httpx.Timeout:
    return httpx.Timeout((timeout_ms or DEFAULT_TIMEOUT_MS) / 1000)


class _HttpFetcher:
    """Shared GET plumbing for the httpx-backed strategies."""

    name = "http"

    def __init__(
        self,
        *,
        user_agent: str | None = None,
        timeout_ms: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._user_agent = user_agent or DEFAULT_USER_AGENT
        self._timeout = _timeout(timeout_ms)
        self._transport = transport

    async def _get(self, endpoint: str, params: dict[str, str] | None = None) -> httpx.Response:
        async with httpx.AsyncClient(
            follow_redirects=True,
            headers={"User-Agent": self._user_agent},
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            try:
                return await client.get(endpoint, params=params)
            except httpx.TimeoutException as exc:
                raise NetworkError(f"{self.name}: request timed out") from exc
            except httpx.HTTPError as exc:
                raise NetworkError(f"{self.name}: {exc}") from exc


class RelayFetcher(_HttpFetcher):
    """Fetches a page through a public relay that proxies the target URL.

    *template* is the relay URL with ``{url}`` (raw target) or
    ``{quoted_url}`` (percent-encoded target) placeholders.
    """

    def __init__(self, template: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self.template = template
        self.name = template.split("?")[0].split("{")[0].rstrip("/")

    def endpoint_for(self, url: str) -> str:
        return self.template.format(url=url, quoted_url=quote(url, safe=""))

    async def fetch(self, url: str) -> str:
        response = await self._get(self.endpoint_for(url))
        if not response.is_success:
            raise NetworkError(f"{self.name}: relay returned status code {response.status_code}")
        if not response.text:
            raise NetworkError(f"{self.name}: relay returned an empty body")
        return response.text


class ScrapingApiFetcher(_HttpFetcher):
    """Fetches a JS-rendered page through the keyed scraping API."""

    name = "scraping-api"

    def __init__(self, api_key: str, api_url: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._api_url = api_url

    async def fetch(self, url: str) -> str:
        response = await self._get(
            self._api_url,
            params={
                "apikey": self._api_key,
                "url": url,
                "js_render": "true",
                "premium_proxy": "true",
            },
        )
        if not response.is_success:
            raise NetworkError(f"API returned status code {response.status_code}")
        return response.text


def build_relays(
    templates: Sequence[str] = DEFAULT_RELAY_ENDPOINTS,
    *,
    user_agent: str | None = None,
    timeout_ms: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[FetchStrategy]:
    """Build one ``RelayFetcher`` per template, preserving order."""
    return [
        RelayFetcher(template, user_agent=user_agent, timeout_ms=timeout_ms, transport=transport)
        for template in templates
    ]


async def fetch_first(url: str, strategies: Sequence[FetchStrategy]) -> str:
    """Try *strategies* one after another and return the first HTML body.

    Candidates are never raced and each is tried exactly once. Raises
    ``NetworkError`` with the last failure message when all of them fail.
    """
    last_error: str | None = None
    for strategy in strategies:
        try:
            html = await strategy.fetch(url)
        except Exception as exc:
            last_error = str(exc) or type(exc).__name__
            logger.warning(
                "retrieval candidate failed",
                extra={"url": url, "candidate": strategy.name, "error": last_error},
            )
            continue
        if not html:
            last_error = f"{strategy.name}: empty response body"
            logger.warning("retrieval candidate returned nothing", extra={"url": url, "candidate": strategy.name})
            continue
        logger.debug("retrieval candidate succeeded", extra={"url": url, "candidate": strategy.name})
        return html

    raise NetworkError(last_error or "All retrieval endpoints failed")


class Retriever:
    """Turns a URL into raw HTML.

    With an API key the scraping API is called once and its failure is
    final. Without one the relay strategies are walked in order.
    """

    def __init__(
        self,
        relays: Sequence[FetchStrategy] | None = None,
        *,
        relay_templates: Sequence[str] = DEFAULT_RELAY_ENDPOINTS,
        api_url: str = "https://api.zenrows.com/v1",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._relays = list(relays) if relays is not None else None
        self._relay_templates = list(relay_templates)
        self._api_url = api_url
        self._transport = transport

    def relays_for(self, user_agent: str | None, timeout_ms: int | None) -> list[FetchStrategy]:
        """Injected relays win; otherwise build them for this request's options."""
        if self._relays is not None:
            return self._relays
        return build_relays(
            self._relay_templates,
            user_agent=user_agent,
            timeout_ms=timeout_ms,
            transport=self._transport,
        )

    async def retrieve(
        self,
        url: str,
        options: ScraperOptions | None = None,
        api_key: str | None = None,
    ) -> str:
        """Return the HTML for *url* or raise ``NetworkError``."""
        options = options or ScraperOptions()
        user_agent, timeout_ms = options.user_agent, options.timeout
        if api_key:
            logger.debug("retrieving via scraping api", extra={"url": url})
            api = ScrapingApiFetcher(
                api_key,
                self._api_url,
                user_agent=user_agent,
                timeout_ms=timeout_ms,
                transport=self._transport,
            )
            return await api.fetch(url)

        relays = self.relays_for(user_agent, timeout_ms)
        logger.debug("retrieving via relays", extra={"url": url, "relay_count": len(relays)})
        return await fetch_first(url, relays)
