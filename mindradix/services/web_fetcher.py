"""
网页佐证抓取 - 搜索候选URL并并发抓取可见文本

所有失败（搜索、抓取、解析）都被就地捕获并降级为空结果
"""
from __future__ import annotations

import asyncio
import base64
import hashlib
import time
from typing import List, Optional, Protocol, Sequence, Union
from urllib.parse import urlparse

import httpx
from lxml import html as lxml_html
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from mindradix.core.config import Settings
from mindradix.core.errors import WebFetchError
from mindradix.core.logging import LogEvent
from mindradix.models.similarity import WebDocument
from mindradix.services.base_service import BaseService
from mindradix.services.text_processor import collapse_whitespace

STRIPPED_TAGS = ("script", "style", "nav", "header", "footer", "noscript")


class SearchProvider(Protocol):
    async def search(self, query: str, limit: int) -> List[str]:
        """Return candidate result URLs, best first."""
        ...


class SerpApiSearchProvider:
    """Google organic results through SerpAPI."""

    def __init__(self, client: httpx.AsyncClient, settings: Settings):
        self._client = client
        self._settings = settings

    async def search(self, query: str, limit: int) -> List[str]:
        if not self._settings.serpapi_api_key:
            return []

        params = {
            "q": query,
            "api_key": self._settings.serpapi_api_key,
            "engine": "google",
            "num": limit,
        }
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._settings.search_retry_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            reraise=True,
        ):
            with attempt:
                response = await self._client.get(
                    self._settings.serpapi_url,
                    params=params,
                    timeout=self._settings.search_timeout,
                )
        if response.status_code != 200:
            raise WebFetchError("search request rejected", url=self._settings.serpapi_url,
                                status_code=response.status_code)

        results = response.json().get("organic_results") or []
        return [item["link"] for item in results if item.get("link")]


def web_document_id(url: str) -> str:
    """Stable id for a scraped page: ``web-`` + 10 base64 chars of the URL digest."""
    digest = hashlib.sha1(url.encode("utf-8")).digest()
    return "web-" + base64.urlsafe_b64encode(digest).decode("ascii")[:10]


def extract_visible_text(page_html: Union[str, bytes]) -> str:
    """Drop non-content elements and return the collapsed body text."""
    if not page_html or not page_html.strip():
        return ""
    root = lxml_html.fromstring(page_html)
    for element in root.xpath("//" + " | //".join(STRIPPED_TAGS)):
        element.drop_tree()
    body = root.find(".//body")
    target = body if body is not None else root
    return collapse_whitespace(target.text_content())


class WebCorroborationFetcher(BaseService):
    """search(query) -> urls, scrape(url) -> text; never raises."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
        search_provider: Optional[SearchProvider] = None,
    ):
        super().__init__(settings)
        self._client = client or httpx.AsyncClient(
            follow_redirects=True,
            headers={"User-Agent": self.settings.user_agent},
        )
        self._owns_client = client is None
        self.search_provider = search_provider or SerpApiSearchProvider(self._client, self.settings)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "WebCorroborationFetcher":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def search(self, query: str) -> List[str]:
        """最多返回 search_result_limit 个URL，过滤视频站点；失败返回空列表"""
        limit = self.settings.search_result_limit
        try:
            self.logger.info(LogEvent.WEB_SEARCH, query=query[:50])
            urls = await self.search_provider.search(query, limit)
        except Exception as e:
            self.logger.warning(LogEvent.WEB_SEARCH_FAILED, query=query[:50], error=str(e))
            return []

        excluded = self.settings.get_excluded_domains()
        filtered = [url for url in urls if not self._is_excluded(url, excluded)]
        return filtered[:limit]

    async def scrape(self, url: str) -> str:
        """抓取网页可见文本；非2xx或网络错误返回空字符串"""
        try:
            response = await self._client.get(url, timeout=self.settings.scrape_timeout)
            if not response.is_success:
                raise WebFetchError("non-success status", url=url, status_code=response.status_code)
            text = await asyncio.to_thread(extract_visible_text, response.content)
        except Exception as e:
            self.logger.warning(LogEvent.WEB_SCRAPE_FAILED, url=url, error=str(e))
            return ""
        return text[: self.settings.scrape_max_chars]

    async def scrape_many(self, urls: Sequence[str]) -> List[str]:
        """并发抓取；单个失败不影响其它URL"""
        results = await asyncio.gather(*(self.scrape(url) for url in urls), return_exceptions=True)
        return [result if isinstance(result, str) else "" for result in results]

    async def corroborate(
        self,
        query: str,
        min_chars: Optional[int] = None,
        deadline: Optional[float] = None,
    ) -> List[WebDocument]:
        """
        搜索 + 并发抓取，丢弃过短页面

        Args:
            query: 搜索词
            min_chars: 页面文本最小长度，默认取配置
            deadline: time.monotonic() 截止时间
        """
        minimum = self.settings.min_web_document_chars if min_chars is None else min_chars
        if not query or not query.strip():
            return []
        if deadline is not None and deadline <= time.monotonic():
            return []

        urls = await self.search(query)
        if not urls:
            return []

        if deadline is None:
            texts = await self.scrape_many(urls)
        else:
            try:
                texts = await asyncio.wait_for(
                    self.scrape_many(urls),
                    timeout=max(0.0, deadline - time.monotonic()),
                )
            except asyncio.TimeoutError:
                self.logger.warning(LogEvent.WEB_PASS_TIMEOUT, query=query[:50], urls=len(urls))
                return []

        return [
            WebDocument(url=url, text=text)
            for url, text in zip(urls, texts)
            if len(text) >= minimum
        ]

    @staticmethod
    def _is_excluded(url: str, excluded: Sequence[str]) -> bool:
        host = (urlparse(url).hostname or "").lower()
        return any(host == domain or host.endswith("." + domain) for domain in excluded)
