"""Scraper engine tests with fake retrieval strategies."""

from unittest.mock import AsyncMock

import pytest

from scrape_service.scraper import NetworkError, Retriever, ScraperEngine, ScraperOptions

pytestmark = pytest.mark.asyncio

URL = "https://a.com"


async def test_successful_scrape(working_relay):
    engine = ScraperEngine(Retriever([working_relay]))
    result = await engine.scrape(URL)

    assert result.status == "success"
    assert result.error is None
    assert result.duration >= 0
    assert result.data.url == URL
    assert result.data.title == "Example Page"
    assert result.data.timestamp.endswith("Z")
    assert result.data.content.links[0].url == "https://a.com/about"


async def test_failing_retrieval_returns_error_result(failing_relay, make_relay):
    also_broken = make_relay("also-broken", error=NetworkError("also-broken: relay returned status code 502"))
    engine = ScraperEngine(Retriever([failing_relay, also_broken]), ScraperOptions(timeout=1000))
    result = await engine.scrape("https://fail.example/")

    assert result.status == "error"
    assert result.data is None
    assert result.error == "also-broken: relay returned status code 502"
    assert result.duration < 1000


async def test_unexpected_error_never_escapes():
    retriever = Retriever()
    retriever.retrieve = AsyncMock(side_effect=RuntimeError("kaboom"))
    result = await ScraperEngine(retriever).scrape(URL)
    assert result.status == "error"
    assert result.error == "kaboom"


async def test_options_gate_sections(working_relay):
    engine = ScraperEngine(Retriever([working_relay]))
    engine.update_options(extractLinks=False, extract_images=False)
    result = await engine.scrape(URL)

    assert result.data.content.links is None
    assert result.data.content.images is None
    assert result.data.content.headings


async def test_api_key_is_forwarded(working_relay):
    retriever = Retriever([working_relay])
    retriever.retrieve = AsyncMock(return_value="<title>api</title>")
    engine = ScraperEngine(retriever, api_key="default-key")

    await engine.scrape(URL)
    assert retriever.retrieve.await_args.kwargs["api_key"] == "default-key"

    await engine.scrape(URL, api_key="request-key")
    assert retriever.retrieve.await_args.kwargs["api_key"] == "request-key"


async def test_new_scrape_does_not_mutate_previous(working_relay):
    engine = ScraperEngine(Retriever([working_relay]))
    first = await engine.scrape(URL)
    snapshot = first.model_dump()
    await engine.scrape(URL)
    assert first.model_dump() == snapshot


async def test_update_options_merges_and_get_returns_copy():
    engine = ScraperEngine()
    updated = engine.update_options(dataFormat="csv", waitTime=10)
    assert updated.data_format == "csv"
    assert updated.wait_time == 10
    assert updated.extract_text is True
    assert engine.get_options() == updated
    assert engine.get_options() is not engine.get_options()


async def test_convert_defaults_to_configured_format(working_relay):
    engine = ScraperEngine(Retriever([working_relay]), ScraperOptions(data_format="xml"))
    result = await engine.scrape(URL)
    assert engine.convert(result.data).startswith("<?xml")
    assert engine.convert(result.data, "csv").startswith('"URL"')
