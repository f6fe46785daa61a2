"""HTTP route tests against an in-memory service."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from scrape_service.api.routes import router
from scrape_service.api.service import ScraperService
from scrape_service.config import Settings, get_settings
from scrape_service.scraper import HistoryStore, Retriever, ScraperEngine


def _make_app(service: ScraperService) -> FastAPI:
    app = FastAPI()
    app.include_router(router)
    app.state.service = service
    app.dependency_overrides[get_settings] = lambda: Settings(api_key="")
    return app


@pytest.fixture
def client(service: ScraperService) -> TestClient:
    return TestClient(_make_app(service))


def _scrape(client: TestClient, url: str = "https://a.com", **body) -> dict:
    resp = client.post("/scrape", json={"url": url, **body})
    assert resp.status_code == 200
    return resp.json()


class TestScrape:
    def test_scrape_returns_result_and_id(self, client: TestClient) -> None:
        payload = _scrape(client)
        assert payload["id"]
        assert payload["result"]["status"] == "success"
        assert payload["result"]["data"]["content"]["links"][0]["isInternal"] is True

    def test_scrape_applies_options(self, client: TestClient) -> None:
        payload = _scrape(client, options={"extractImages": False})
        assert payload["result"]["data"]["content"]["images"] is None

    def test_invalid_option_rejected(self, client: TestClient) -> None:
        resp = client.post("/scrape", json={"url": "https://a.com", "options": {"dataFormat": "pdf"}})
        assert resp.status_code == 422

    def test_non_http_url_rejected(self, client: TestClient) -> None:
        resp = client.post("/scrape", json={"url": "ftp://a.com/file"})
        assert resp.status_code == 422

    def test_failed_scrape_is_recorded(self, make_relay) -> None:
        engine = ScraperEngine(Retriever([make_relay("down", error=RuntimeError("relay down"))]))
        client = TestClient(_make_app(ScraperService(engine, HistoryStore())))

        payload = _scrape(client, url="https://fail.example")
        assert payload["result"]["status"] == "error"
        assert payload["result"]["data"] is None
        assert payload["result"]["error"] == "relay down"

        items = client.get("/history").json()["items"]
        assert items[0]["url"] == "https://fail.example"
        assert items[0]["status"] == "error"

        resp = client.get(f"/history/{payload['id']}/export")
        assert resp.status_code == 409


class TestHistory:
    def test_list_get_delete(self, client: TestClient) -> None:
        first = _scrape(client)["id"]
        second = _scrape(client, url="https://a.com/two")["id"]

        items = client.get("/history").json()["items"]
        assert [i["id"] for i in items] == [first, second]

        resp = client.get(f"/history/{first}")
        assert resp.status_code == 200
        assert resp.json()["data"]["url"] == "https://a.com"

        assert client.delete(f"/history/{first}").status_code == 204
        assert client.get(f"/history/{first}").status_code == 404
        assert client.delete(f"/history/{first}").status_code == 404

    def test_clear(self, client: TestClient) -> None:
        _scrape(client)
        assert client.delete("/history").status_code == 204
        assert client.get("/history").json()["items"] == []


class TestExport:
    @pytest.mark.parametrize(
        ("fmt", "media_type", "extension"),
        [
            ("json", "application/json", ".json"),
            ("csv", "text/csv", ".csv"),
            ("xml", "application/xml", ".xml"),
            ("excel", "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet", ".xlsx"),
        ],
    )
    def test_export_formats(self, client: TestClient, fmt: str, media_type: str, extension: str) -> None:
        item_id = _scrape(client)["id"]
        resp = client.get(f"/history/{item_id}/export", params={"format": fmt})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith(media_type)
        disposition = resp.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="a.com-')
        assert disposition.endswith(f'{extension}"')

    def test_unknown_format_rejected(self, client: TestClient) -> None:
        item_id = _scrape(client)["id"]
        assert client.get(f"/history/{item_id}/export", params={"format": "pdf"}).status_code == 422

    def test_missing_item(self, client: TestClient) -> None:
        assert client.get("/history/missing/export").status_code == 404


class TestOptions:
    def test_get_defaults(self, client: TestClient) -> None:
        options = client.get("/options").json()
        assert options["extractText"] is True
        assert options["dataFormat"] == "json"
        assert options["timeout"] == 30000

    def test_put_merges(self, client: TestClient) -> None:
        resp = client.put("/options", json={"depth": 5, "extract_links": False})
        assert resp.status_code == 200
        assert resp.json()["depth"] == 5
        assert resp.json()["extractLinks"] is False
        assert client.get("/options").json()["extractLinks"] is False

    def test_put_invalid(self, client: TestClient) -> None:
        assert client.put("/options", json={"depth": "deep"}).status_code == 422
