"""
API integration tests using FastAPI TestClient with an offline web fetcher.
"""
import pytest
from fastapi.testclient import TestClient

from mindradix.core.config import get_settings
from tests.helpers import QUICK_FOX, build_docx, html_page

ARTICLE = (
    "Urban beekeeping has grown steadily in European capitals over the last decade. "
    "Rooftop hives supply honey to local cafes and restaurants. "
    "Researchers track pollinator health with small sensors placed inside each hive."
)


@pytest.mark.integration
class TestHealthRoutes:
    def test_root(self, api_client: TestClient):
        response = api_client.get("/")
        assert response.status_code == 200
        assert response.json()["api_prefix"] == "/api/v1"

    def test_health(self, api_client: TestClient):
        response = api_client.get("/api/v1/health/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    def test_ready(self, api_client: TestClient):
        response = api_client.get("/api/v1/health/ready")
        assert response.status_code == 200
        data = response.json()
        assert data["ready"] is True
        assert data["checks"]["web_search"] in (True, False)

    def test_live(self, api_client: TestClient):
        assert api_client.get("/api/v1/health/live").json() == {"status": "alive"}


@pytest.mark.integration
class TestSimilarityRoutes:
    def test_identical_uploads(self, api_client: TestClient):
        response = api_client.post(
            "/api/v1/similarity",
            files=[
                ("files", ("a.txt", QUICK_FOX.encode(), "text/plain")),
                ("files", ("b.docx", build_docx([QUICK_FOX]), "application/octet-stream")),
            ],
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["message"] == "Similarity check completed"
        pair = body["data"]["pairs"][0]
        assert {pair["aId"], pair["bId"]} == {"att-1", "att-2"}
        assert pair["score"] >= 0.99
        assert body["data"]["docs"][0]["textExcerpt"] == QUICK_FOX

    def test_invalid_query_params_are_defaulted(self, api_client: TestClient):
        response = api_client.post(
            "/api/v1/similarity?threshold=abc&top=9999",
            data={"content": QUICK_FOX},
            files=[("files", ("a.txt", QUICK_FOX.encode(), "text/plain"))],
        )
        assert response.status_code == 200
        assert response.json()["data"]["meta"] == {"method": "tfidf", "threshold": 0.6, "topN": 200}

    def test_single_document(self, api_client: TestClient):
        response = api_client.post(
            "/api/v1/similarity",
            files=[("files", ("only.txt", QUICK_FOX.encode(), "text/plain"))],
        )
        body = response.json()
        assert response.status_code == 200
        assert body["message"] == "No similar content found (no attachments or web results)"
        assert body["data"]["pairs"] == []
        assert len(body["data"]["docs"]) == 1

    def test_include_web(self, api_client: TestClient, offline_fetcher):
        pages = {"https://copy.test/": html_page(ARTICLE)}
        offline_fetcher(pages, ["https://copy.test/"])
        response = api_client.post(
            "/api/v1/similarity",
            data={"content": f"<p>{ARTICLE}</p>", "title": "Urban beekeeping", "include_web": "true"},
        )
        body = response.json()
        assert response.status_code == 200
        assert [doc["filename"] for doc in body["data"]["docs"]] == ["Article Content", "https://copy.test/"]
        assert body["data"]["pairs"][0]["score"] >= 0.99

    def test_web_fetcher_client_closed_after_request(
        self, api_client: TestClient, offline_fetcher, offline_clients
    ):
        offline_fetcher({"https://copy.test/": html_page(ARTICLE)}, ["https://copy.test/"])
        response = api_client.post(
            "/api/v1/similarity",
            data={"content": ARTICLE, "title": "Urban beekeeping", "include_web": "true"},
        )
        assert response.status_code == 200
        assert offline_clients
        assert all(client.is_closed for client in offline_clients)

    def test_upload_too_large(self, api_client: TestClient, monkeypatch):
        monkeypatch.setattr(get_settings(), "max_upload_bytes", 8)
        response = api_client.post(
            "/api/v1/similarity",
            files=[("files", ("big.txt", b"0123456789", "text/plain"))],
        )
        assert response.status_code == 413
        assert response.json()["error"]["error_code"] == "PAYLOAD_TOO_LARGE"


@pytest.mark.integration
class TestPlagiarismRoutes:
    def test_requires_content(self, api_client: TestClient):
        response = api_client.post("/api/v1/plagiarism", data={"content": ""})
        assert response.status_code == 400
        assert response.json()["error"]["error_code"] == "INVALID_INPUT"

    def test_with_report(self, api_client: TestClient):
        response = api_client.post(
            "/api/v1/plagiarism",
            data={"content": ARTICLE},
            files=[
                ("files", ("notes.txt", b"Bees make honey.", "text/plain")),
                ("report_csv", ("report.csv", b"a,b,similarity\nx,y,0.5\n", "text/csv")),
            ],
        )
        assert response.status_code == 200
        data = response.json()["data"]
        assert data["max_similarity"] == pytest.approx(0.5)
        assert 0 <= data["ai_score"] <= 99
        assert 0 <= data["web_score"] <= 100

    def test_live_web_score(self, api_client: TestClient, offline_fetcher):
        pages = {"https://copy.test/": html_page(ARTICLE)}
        offline_fetcher(pages, ["https://copy.test/"])
        response = api_client.post("/api/v1/plagiarism", data={"content": ARTICLE, "use_web": "true"})
        data = response.json()["data"]
        assert data["web_score"] == 100.0
        assert data["web_sources"] == ["https://copy.test/ (100%)"]
        assert data["notice"] == "external-report-skipped"


@pytest.mark.integration
class TestAuditRoute:
    def test_short_text(self, api_client: TestClient):
        response = api_client.post("/api/v1/audit", json={"text": "short"})
        assert response.status_code == 200
        assert response.json() == {
            "score": 0,
            "details": ["Text too short for analysis"],
            "web_score": 0,
            "web_sources": [],
        }

    def test_placeholder_text(self, api_client: TestClient):
        response = api_client.post(
            "/api/v1/audit",
            json={"text": "Lorem ipsum dolor sit amet, consectetur adipiscing elit, sed do eiusmod tempor."},
        )
        assert response.json()["web_score"] == 100
