"""
Tests for index-count lookups (Custom Search API and results-page scrape)
and IndexNow submission.
"""

from pathlib import Path

import pytest
import requests
from fastapi import Depends

from app.config import Settings
from app.api.deps import get_app_settings, get_google_search_client, get_index_now_client, get_results_scraper
from app.errors import ConfigurationError, InvalidRequestError, ServiceUnavailableError, UpstreamError
from app.main import app
from app.services.external.google_search import GoogleCustomSearchClient, extract_fix_url
from app.services.external import index_now
from app.services.external.index_now import IndexNowClient, build_payload
from app.services.scraper.google_results import GoogleResultsScraper, parse_result_count
from tests.fakes import FakeResponse, FakeSession

CREDS = {"googleApiKey": "key", "googleCxId": "cx"}

ACCESS_NOT_CONFIGURED = {
    "error": {
        "code": 403,
        "message": "Custom Search API has not been used in project 123 before or it is disabled.",
        "details": [
            {"@type": "type.googleapis.com/google.rpc.ErrorInfo", "reason": "SERVICE_DISABLED"},
            {
                "@type": "type.googleapis.com/google.rpc.Help",
                "links": [{"description": "Google developers console API activation",
                           "url": "https://console.developers.google.com/apis/api/customsearch.googleapis.com/overview?project=123"}],
            },
        ],
    }
}


class TestGoogleCustomSearchClient:

    def test_missing_credentials_no_network(self):
        session = FakeSession()
        client = GoogleCustomSearchClient({"googleApiKey": "key"}, session=session)
        with pytest.raises(ConfigurationError):
            client.indexed_count("a.com")
        assert session.calls == []

    def test_count(self):
        session = FakeSession(FakeResponse(json_data={"searchInformation": {"totalResults": "1234"}}))
        result = GoogleCustomSearchClient(CREDS, session=session).indexed_count("a.com")
        assert result == {"domain": "a.com", "indexedCount": 1234}
        _, _, kwargs = session.calls[0]
        assert kwargs["params"]["q"] == "site:a.com"
        assert kwargs["params"]["cx"] == "cx"

    def test_missing_total_is_zero(self):
        session = FakeSession(FakeResponse(json_data={"kind": "customsearch#search"}))
        result = GoogleCustomSearchClient(CREDS, session=session).indexed_count("a.com")
        assert result["indexedCount"] == 0

    def test_error_with_fix_url(self):
        session = FakeSession(FakeResponse(status_code=403, json_data=ACCESS_NOT_CONFIGURED, reason="Forbidden"))
        with pytest.raises(UpstreamError) as exc_info:
            GoogleCustomSearchClient(CREDS, session=session).indexed_count("a.com")
        err = exc_info.value
        assert err.status_code == 403
        assert err.message.startswith("Google API failed: Custom Search API has not been used")
        assert err.fix_url.startswith("https://console.developers.google.com/")

    def test_error_without_json_body(self):
        session = FakeSession(FakeResponse(status_code=500, text="<html>oops</html>", reason="Internal Server Error"))
        with pytest.raises(UpstreamError) as exc_info:
            GoogleCustomSearchClient(CREDS, session=session).indexed_count("a.com")
        assert exc_info.value.message == "Google API failed: Internal Server Error"
        assert exc_info.value.fix_url is None

    def test_network_error(self):
        session = FakeSession(exc=requests.ConnectionError("refused"))
        with pytest.raises(UpstreamError) as exc_info:
            GoogleCustomSearchClient(CREDS, session=session).indexed_count("a.com")
        assert exc_info.value.status_code == 502

    @pytest.mark.parametrize("payload", [None, {}, {"error": "nope"}, {"error": {"details": "x"}},
                                         {"error": {"details": [{"@type": "type.googleapis.com/google.rpc.Help"}]}}])
    def test_extract_fix_url_best_effort(self, payload):
        assert extract_fix_url(payload) is None


class TestGoogleResultsScraper:

    def test_parse_result_count(self):
        assert parse_result_count("<div id='result-stats'>About 12,300 results (0.31 seconds)</div>") == 12300
        assert parse_result_count("<html>Our systems have detected unusual traffic</html>") is None

    def test_count(self):
        session = FakeSession(FakeResponse(text="About 4,567 results"))
        result = GoogleResultsScraper(session=session).indexed_count("a.com")
        assert result == {"domain": "a.com", "indexedCount": 4567}
        _, _, kwargs = session.calls[0]
        assert "Mozilla" in kwargs["headers"]["User-Agent"]

    def test_missing_phrase_is_unavailable_not_zero(self):
        session = FakeSession(FakeResponse(text="<form action='/sorry/index'>captcha</form>"))
        with pytest.raises(ServiceUnavailableError):
            GoogleResultsScraper(session=session).indexed_count("a.com")

    def test_upstream_status(self):
        session = FakeSession(FakeResponse(status_code=429, text="Too Many Requests"))
        with pytest.raises(UpstreamError) as exc_info:
            GoogleResultsScraper(session=session).indexed_count("a.com")
        assert exc_info.value.status_code == 429


class TestIndexNowClient:

    def test_build_payload(self):
        payload = build_payload(["https://a.com/1", "https://a.com/2"], "abc123")
        assert payload == {
            "host": "a.com",
            "key": "abc123",
            "keyLocation": "https://a.com/abc123.txt",
            "urlList": ["https://a.com/1", "https://a.com/2"],
        }

    def test_single_url(self):
        session = FakeSession(FakeResponse(status_code=200))
        result = IndexNowClient(key="k", endpoint="https://indexnow.test/indexnow", session=session).push("https://a.com/page")
        assert result["message"] == "Successfully submitted https://a.com/page to IndexNow."
        method, url, kwargs = session.calls[0]
        assert (method, url) == ("POST", "https://indexnow.test/indexnow")
        assert kwargs["json"]["urlList"] == ["https://a.com/page"]

    def test_mixed_hosts_use_first_host(self):
        session = FakeSession(FakeResponse(status_code=202))
        IndexNowClient(key="k", session=session).push(["https://a.com/1", "https://b.com/2"])
        assert len(session.calls) == 1
        assert session.calls[0][2]["json"]["host"] == "a.com"

    def test_empty(self):
        with pytest.raises(InvalidRequestError):
            IndexNowClient(key="k", session=FakeSession()).push([])

    def test_invalid_url(self):
        with pytest.raises(InvalidRequestError):
            IndexNowClient(key="k", session=FakeSession()).push("a.com/no-scheme")

    def test_not_configured(self):
        session = FakeSession()
        with pytest.raises(ConfigurationError):
            IndexNowClient(key="", session=session).push("https://a.com")
        assert session.calls == []

    def test_key_read_from_settings(self, monkeypatch):
        monkeypatch.setattr(index_now.settings, "indexnow_key", "env-key")
        session = FakeSession(FakeResponse(status_code=200))
        client = IndexNowClient(session=session)
        assert client.configured
        client.push("https://a.com/page")
        assert session.calls[0][2]["json"]["keyLocation"] == "https://a.com/env-key.txt"

    def test_env_example_documents_every_setting(self):
        example = Path(__file__).resolve().parent.parent / ".env.example"
        names = {
            line.split("=", 1)[0].strip()
            for line in example.read_text(encoding="utf-8").splitlines()
            if line.strip() and not line.startswith("#")
        }
        assert "INDEXNOW_KEY" in names
        assert names == {field.upper() for field in Settings.model_fields}

    def test_upstream_failure_passthrough(self):
        session = FakeSession(FakeResponse(status_code=422, text="URLs don't belong to the host"))
        with pytest.raises(UpstreamError) as exc_info:
            IndexNowClient(key="k", session=session).push("https://a.com")
        assert exc_info.value.status_code == 422
        assert exc_info.value.message == "IndexNow API failed with status: 422. URLs don't belong to the host"


@pytest.fixture
def override():
    yield app.dependency_overrides
    for dep in (get_google_search_client, get_results_scraper, get_index_now_client):
        app.dependency_overrides.pop(dep, None)


class TestIndexingAPI:

    def test_check_indexing_requires_domain(self, client):
        response = client.get("/api/check-indexing")
        assert response.status_code == 400

    def test_check_indexing_not_configured(self, client):
        response = client.get("/api/check-indexing", params={"domain": "a.com"})
        assert response.status_code == 401

    def test_check_indexing_uses_saved_settings(self, client, override):
        session = FakeSession(FakeResponse(json_data={"searchInformation": {"totalResults": "42"}}))

        def client_with_fake_session(app_settings=Depends(get_app_settings)):
            return GoogleCustomSearchClient(app_settings, session=session)

        override[get_google_search_client] = client_with_fake_session
        client.post("/api/settings", json=CREDS)
        response = client.get("/api/check-indexing", params={"domain": "a.com"})
        assert response.status_code == 200
        assert response.json() == {"domain": "a.com", "indexedCount": 42}
        assert session.calls[0][2]["params"]["key"] == "key"

    def test_check_indexing_fix_url(self, client, override):
        session = FakeSession(FakeResponse(status_code=403, json_data=ACCESS_NOT_CONFIGURED))
        override[get_google_search_client] = lambda: GoogleCustomSearchClient(CREDS, session=session)
        response = client.get("/api/check-indexing", params={"domain": "a.com"})
        assert response.status_code == 403
        assert response.json()["fixUrl"].startswith("https://console.developers.google.com/")

    def test_scrape_google_blocked(self, client, override):
        session = FakeSession(FakeResponse(text="<html>unusual traffic</html>"))
        override[get_results_scraper] = lambda: GoogleResultsScraper(session=session)
        response = client.get("/api/scrape-google", params={"domain": "a.com"})
        assert response.status_code == 503
        assert "indexedCount" not in response.json()

    def test_index_now_batch(self, client, override):
        session = FakeSession(FakeResponse(status_code=200))
        override[get_index_now_client] = lambda: IndexNowClient(key="k", session=session)
        response = client.post("/api/index-now", json={"urlList": ["https://a.com/1", "https://a.com/2"]})
        assert response.status_code == 200
        assert len(session.calls) == 1
        assert session.calls[0][2]["json"]["host"] == "a.com"

    @pytest.mark.parametrize("body", [{}, {"url": ""}, {"urlList": []}])
    def test_index_now_requires_url(self, client, body):
        response = client.post("/api/index-now", json=body)
        assert response.status_code == 400
