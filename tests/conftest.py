"""Fixtures — fake fetch strategies, sample documents, in-memory service."""

import pytest

from scrape_service.api.service import ScraperService
from scrape_service.scraper import HistoryStore, NetworkError, Retriever, ScraperEngine

SAMPLE_HTML = """
<html>
  <head>
    <title> Example Page </title>
    <meta name="description" content="An example page">
    <meta name="keywords" content="alpha, beta,, gamma ">
    <meta name="author" content="Jane Roe">
    <meta property="og:title" content="OG Title">
    <meta property="og:image" content="https://a.com/og.png">
    <meta name="twitter:card" content="summary">
    <link rel="icon" href="/favicon.ico">
  </head>
  <body>
    <h1>Welcome</h1>
    <h2>   </h2>
    <h3>Details</h3>
    <p>First paragraph.</p>
    <p>  </p>
    <p>Second &amp; last.</p>
    <a href="/about">About</a>
    <a href="https://other.org/x">Other</a>
    <a href="#">Top</a>
    <a href="javascript:void(0)">Click</a>
    <a href="">Empty</a>
    <img src="/logo.png" alt="Logo" width="120" height="40px">
    <img src="data:image/png;base64,AAAA" alt="inline">
    <img src="https://cdn.a.com/pic.jpg">
    <ul><li>one</li><li> </li><li>two</li></ul>
    <ol><li>  </li></ol>
    <table>
      <tr><th>Name</th><th>Age</th></tr>
      <tr><td>Ann</td><td>31</td></tr>
    </table>
    <table><tr><td>layout only</td></tr></table>
  </body>
</html>
"""


class FakeStrategy:
    """Deterministic fetch strategy returning *html* or raising *error*."""

    def __init__(self, name: str, html: str = "", error: Exception | None = None) -> None:
        self.name = name
        self._html = html
        self._error = error
        self.calls: list[str] = []

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        if self._error is not None:
            raise self._error
        return self._html


@pytest.fixture
def make_relay() -> type[FakeStrategy]:
    return FakeStrategy


@pytest.fixture
def sample_html() -> str:
    return SAMPLE_HTML


@pytest.fixture
def working_relay() -> FakeStrategy:
    return FakeStrategy("working", html=SAMPLE_HTML)


@pytest.fixture
def failing_relay() -> FakeStrategy:
    return FakeStrategy("broken", error=NetworkError("broken: relay returned status code 503"))


@pytest.fixture
def service(working_relay: FakeStrategy) -> ScraperService:
    engine = ScraperEngine(Retriever([working_relay]))
    return ScraperService(engine, HistoryStore())
