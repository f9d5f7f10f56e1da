"""
Integration test fixtures. Overrides the web fetcher so no request leaves the process.
"""
import httpx
import pytest

from mindradix.services.web_fetcher import WebCorroborationFetcher
from tests.helpers import FakeSearchProvider, page_transport


@pytest.fixture
def offline_clients():
    """Every httpx client handed to an offline fetcher, for close checks."""
    return []


@pytest.fixture
def offline_fetcher(offline_clients):
    """
    Install a get_web_fetcher override serving search and pages from memory.

    Like the real dependency, the override yields one fetcher per request and
    closes its client once the response is sent.
    """
    from mindradix.api.deps import get_web_fetcher
    from mindradix.main import app

    def _install(pages=None, urls=None):
        async def _get_offline_fetcher():
            client = httpx.AsyncClient(transport=page_transport(pages or {}))
            offline_clients.append(client)
            try:
                yield WebCorroborationFetcher(client=client, search_provider=FakeSearchProvider(urls or []))
            finally:
                await client.aclose()

        app.dependency_overrides[get_web_fetcher] = _get_offline_fetcher

    return _install


@pytest.fixture
def api_client(offline_fetcher):
    """FastAPI TestClient with the web fetcher dependency kept offline."""
    from fastapi.testclient import TestClient
    from mindradix.main import app

    offline_fetcher()
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
