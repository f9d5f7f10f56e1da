"""
相似度编排服务 - 汇集正文、附件与网页文档，调用 TF-IDF 引擎并过滤排序

流程:
1. 去除正文 HTML，作为 main-content 文档放在首位
2. 并发抽取附件文本；可选地并发执行网页佐证（带软超时）
3. 计算所有文档两两相似度
4. 按阈值过滤并截取 top N
"""
from __future__ import annotations

import asyncio
import math
import time
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Union

from mindradix.core.config import Settings
from mindradix.core.errors import DetectionError
from mindradix.core.logging import LogEvent
from mindradix.models.similarity import (
    Attachment,
    Document,
    ReportMeta,
    SimilarityReport,
    WebDocument,
)
from mindradix.services.base_service import BaseService
from mindradix.services.text_processor import normalize_document_text, strip_html
from mindradix.services.tfidf_engine import TfidfConfig, TfidfResult, TfidfSimilarityEngine
from mindradix.services.web_fetcher import WebCorroborationFetcher, web_document_id
from mindradix.tools.readers import TextExtractor, get_text_extractor

MAIN_CONTENT_ID = "main-content"
MAIN_CONTENT_FILENAME = "Article Content"
METHOD = "tfidf"
COMPLETED_MESSAGE = "Similarity check completed"
NO_CONTENT_MESSAGE = "No similar content found (no attachments or web results)"
QUERY_FALLBACK_CHARS = 300

AttachmentLike = Union[Attachment, Mapping[str, Any]]


def coerce_threshold(value: Any, default: float = 0.6) -> float:
    """非数值/NaN/缺省 -> default，其余截断到 [0, 1]"""
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(threshold):
        return default
    return min(1.0, max(0.0, threshold))


def coerce_top_n(value: Any, default: int = 20, maximum: int = 200) -> int:
    """非数值/缺省 -> default，其余截断到 [1, maximum]"""
    try:
        top_n = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(top_n):
        return default
    if math.isinf(top_n):
        return maximum if top_n > 0 else 1
    return min(maximum, max(1, int(top_n)))


def to_attachment(item: AttachmentLike) -> Attachment:
    """接受 Attachment 或 {id, filename, data} 字典"""
    if isinstance(item, Attachment):
        return item
    att_id = str(item.get("id") or item.get("filename") or "")
    return Attachment(
        id=att_id,
        filename=item.get("filename") or att_id,
        data=item.get("data") or item.get("buffer") or b"",
    )


def web_documents_to_documents(
    web_docs: Iterable[WebDocument],
    min_chars: int = 100,
    max_chars: int = 200_000,
) -> List[Document]:
    """网页文档 -> Document；过短页面丢弃，同一URL只保留一次"""
    documents: List[Document] = []
    seen = set()
    for web_doc in web_docs:
        text = normalize_document_text(web_doc.text, max_chars)
        doc_id = web_document_id(web_doc.url)
        if len(text) < min_chars or doc_id in seen:
            continue
        seen.add(doc_id)
        documents.append(Document(id=doc_id, filename=web_doc.url, text=text))
    return documents


async def compute_tfidf_similarities(
    attachments: Sequence[AttachmentLike],
    extractor: Optional[TextExtractor] = None,
    engine: Optional[TfidfSimilarityEngine] = None,
    max_chars: int = 200_000,
) -> TfidfResult:
    """
    抽取 + 归一化 + 两两相似度

    空文本的文档仍保留在 docs 中，只是不会与任何文档相似
    """
    items = [to_attachment(item) for item in attachments]
    texts = await (extractor or get_text_extractor()).extract_many(items)
    docs = [
        Document(id=att.id, filename=att.filename or att.id, text=normalize_document_text(text, max_chars))
        for att, text in zip(items, texts)
    ]
    return await asyncio.to_thread((engine or TfidfSimilarityEngine()).compute_similarities, docs)


class SimilarityOrchestrator(BaseService):
    """正文 + 附件 + 网页 -> SimilarityReport"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        extractor: Optional[TextExtractor] = None,
        fetcher: Optional[WebCorroborationFetcher] = None,
        engine: Optional[TfidfSimilarityEngine] = None,
    ):
        super().__init__(settings)
        self.extractor = extractor or get_text_extractor()
        self.fetcher = fetcher
        self.engine = engine or TfidfSimilarityEngine(
            TfidfConfig(terms_per_document=self.settings.terms_per_document)
        )

    async def run_similarity_check(
        self,
        article_text: Optional[str],
        attachments: Sequence[AttachmentLike],
        web_docs: Optional[Sequence[WebDocument]] = None,
        threshold: Any = None,
        top_n: Any = None,
        include_web: bool = False,
        query: Optional[str] = None,
        deadline: Optional[float] = None,
    ) -> SimilarityReport:
        """
        执行一次相似度检查

        Args:
            article_text: 文章正文（可含 HTML）
            attachments: 附件列表
            web_docs: 调用方已抓取的网页文档
            threshold: 最低相似度，默认 0.6
            top_n: 返回的最大 pair 数，默认 20
            include_web: 是否执行网页佐证
            query: 网页搜索词（通常是标题）；缺省取正文前 300 字符
            deadline: time.monotonic() 截止时间，传递给抽取与抓取
        """
        settings = self.settings
        threshold = coerce_threshold(threshold, settings.default_threshold)
        top_n = coerce_top_n(top_n, settings.default_top_n, settings.max_top_n)
        meta = ReportMeta(method=METHOD, threshold=threshold, top_n=top_n)

        items = [to_attachment(item) for item in attachments]
        body = strip_html(article_text or "")
        self.logger.info(
            LogEvent.SIMILARITY_STARTED,
            attachments=len(items),
            web_docs=len(web_docs or []),
            include_web=include_web,
        )

        search_query = (query or "").strip() or body[:QUERY_FALLBACK_CHARS].strip()
        texts, fetched = await asyncio.gather(
            self.extractor.extract_many(items, deadline=deadline),
            self._web_pass(search_query, deadline) if include_web else _no_web_documents(),
        )

        documents: List[Document] = []
        main_text = normalize_document_text(body, settings.max_document_chars)
        if main_text:
            documents.append(Document(id=MAIN_CONTENT_ID, filename=MAIN_CONTENT_FILENAME, text=main_text))
        for att, text in zip(items, texts):
            documents.append(Document(
                id=att.id,
                filename=att.filename or att.id,
                text=normalize_document_text(text, settings.max_document_chars),
            ))
        documents.extend(web_documents_to_documents(
            list(web_docs or []) + fetched,
            min_chars=settings.min_web_document_chars,
            max_chars=settings.max_document_chars,
        ))

        excerpts = [doc.excerpt(settings.excerpt_chars) for doc in documents]
        if len(documents) < 2:
            self.logger.info(LogEvent.SIMILARITY_COMPLETED, documents=len(documents), pairs=0)
            return SimilarityReport(docs=excerpts, pairs=[], meta=meta, message=NO_CONTENT_MESSAGE)

        try:
            result = await asyncio.to_thread(self.engine.compute_similarities, documents)
        except Exception as e:
            raise DetectionError(str(e), stage="tfidf") from e

        pairs = [pair for pair in result.pairs if pair.score >= threshold][:top_n]
        self.logger.info(
            LogEvent.SIMILARITY_COMPLETED,
            documents=len(documents),
            candidate_pairs=len(result.pairs),
            pairs=len(pairs),
        )
        return SimilarityReport(docs=excerpts, pairs=pairs, meta=meta, message=COMPLETED_MESSAGE)

    async def _web_pass(self, query: str, deadline: Optional[float]) -> List[WebDocument]:
        """网页佐证，受 web_pass_timeout 与 deadline 共同约束；超时返回空列表"""
        if not query:
            return []

        timeout = self.settings.web_pass_timeout
        if deadline is not None:
            timeout = min(timeout, deadline - time.monotonic())
        if timeout <= 0:
            return []
        pass_deadline = time.monotonic() + timeout

        if self.fetcher is not None:
            return await self._bounded_corroborate(self.fetcher, query, timeout, pass_deadline)
        async with WebCorroborationFetcher(self.settings) as fetcher:
            return await self._bounded_corroborate(fetcher, query, timeout, pass_deadline)

    async def _bounded_corroborate(
        self,
        fetcher: WebCorroborationFetcher,
        query: str,
        timeout: float,
        deadline: float,
    ) -> List[WebDocument]:
        try:
            return await asyncio.wait_for(fetcher.corroborate(query, deadline=deadline), timeout=timeout)
        except asyncio.TimeoutError:
            self.logger.warning(LogEvent.WEB_PASS_TIMEOUT, query=query[:50], timeout=timeout)
            return []


async def _no_web_documents() -> List[WebDocument]:
    return []
