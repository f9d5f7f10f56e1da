"""
网络相似度检测 - 用文本中的代表句搜索网页并与抓取结果做 TF-IDF 比对
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from mindradix.core.config import Settings
from mindradix.models.similarity import Document
from mindradix.services.base_service import BaseService
from mindradix.services.text_processor import collapse_whitespace, normalize_document_text, split_sentences
from mindradix.services.tfidf_engine import TfidfConfig, TfidfSimilarityEngine
from mindradix.services.web_fetcher import WebCorroborationFetcher

INPUT_DOCUMENT_ID = "input-text"
QUERY_MAX_CHARS = 150
MAX_PAGES = 5
MIN_PAGE_CHARS = 200
SOURCE_MIN_SCORE = 0.2
MAX_SOURCES = 5
# cosine 达到 0.9 即视为完全抄袭
FULL_MATCH_SCORE = 0.9


@dataclass
class WebSimilarityResult:
    score: float = 0.0
    sources: List[str] = field(default_factory=list)


class AsyncWebPlagiarismBackend(Protocol):
    async def check(self, text: str) -> WebSimilarityResult:
        ...


def build_search_queries(text: str) -> List[str]:
    """第一句、中间句（>5句）、倒数第二句（>10句），每条最多150字符"""
    sentences = split_sentences(text)
    queries: List[str] = []
    if sentences:
        queries.append(sentences[0][:QUERY_MAX_CHARS])
    if len(sentences) > 5:
        queries.append(sentences[len(sentences) // 2][:QUERY_MAX_CHARS])
    if len(sentences) > 10:
        queries.append(sentences[-2][:QUERY_MAX_CHARS])
    if not queries:
        queries.append(text[:QUERY_MAX_CHARS])
    return queries


class WebSimilarityChecker(BaseService):
    """Live web plagiarism score: search, scrape, compare against the input."""

    def __init__(
        self,
        fetcher: WebCorroborationFetcher,
        settings: Optional[Settings] = None,
        engine: Optional[TfidfSimilarityEngine] = None,
        query_interval: float = 0.5,
    ):
        super().__init__(settings)
        self.fetcher = fetcher
        self.engine = engine or TfidfSimilarityEngine(
            TfidfConfig(terms_per_document=self.settings.terms_per_document)
        )
        self.query_interval = query_interval

    async def check(self, text: str) -> WebSimilarityResult:
        if not text or len(text) < 100:
            return WebSimilarityResult()

        clean_text = collapse_whitespace(text)
        urls = await self._collect_urls(build_search_queries(clean_text))
        if not urls:
            return WebSimilarityResult()

        pages = await self.fetcher.scrape_many(urls[:MAX_PAGES])
        documents = [
            Document(id=url, filename=url, text=normalize_document_text(page, self.settings.max_document_chars))
            for url, page in zip(urls, pages)
            if len(page) > MIN_PAGE_CHARS
        ]
        if not documents:
            return WebSimilarityResult()

        input_doc = Document(
            id=INPUT_DOCUMENT_ID,
            filename="Input Text",
            text=normalize_document_text(clean_text, self.settings.max_document_chars),
        )
        result = await asyncio.to_thread(self.engine.compute_similarities, [input_doc] + documents)

        max_score = 0.0
        sources: List[str] = []
        for pair in result.pairs:
            if INPUT_DOCUMENT_ID not in (pair.a_id, pair.b_id):
                continue
            other = pair.b_id if pair.a_id == INPUT_DOCUMENT_ID else pair.a_id
            max_score = max(max_score, pair.score)
            if pair.score > SOURCE_MIN_SCORE:
                sources.append(f"{other} ({pair.score * 100:.0f}%)")

        score = min(100.0, max_score / FULL_MATCH_SCORE * 100)
        self.logger.info("web_similarity_checked", pages=len(documents), score=round(score, 1))
        return WebSimilarityResult(score=round(score, 1), sources=sources[:MAX_SOURCES])

    async def _collect_urls(self, queries: List[str]) -> List[str]:
        """按查询顺序去重；搜索失败由 fetcher 降级为空列表"""
        seen: List[str] = []
        for index, query in enumerate(queries):
            if index and self.query_interval:
                await asyncio.sleep(self.query_interval)
            for url in await self.fetcher.search(query):
                if url not in seen:
                    seen.append(url)
        return seen
