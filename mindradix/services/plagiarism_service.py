"""
抄袭检查服务 - 对正文与附件的合并文本做启发式审计，并合并外部 JPlag 报告
"""
from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from mindradix.core.config import Settings
from mindradix.core.errors import InvalidInputError
from mindradix.core.logging import LogEvent
from mindradix.services.base_service import BaseService
from mindradix.services.content_auditor import ContentAuditor
from mindradix.services.jplag_report import parse_jplag_csv
from mindradix.services.similarity_orchestrator import AttachmentLike, to_attachment
from mindradix.services.text_processor import strip_html
from mindradix.services.web_similarity import AsyncWebPlagiarismBackend
from mindradix.tools.readers import TextExtractor, get_text_extractor

REPORT_SKIPPED_NOTICE = "external-report-skipped"


class PlagiarismService(BaseService):
    """正文 + 附件 (+ JPlag CSV) -> 合并后的抄袭检查摘要"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        extractor: Optional[TextExtractor] = None,
        auditor: Optional[ContentAuditor] = None,
        web_backend: Optional[AsyncWebPlagiarismBackend] = None,
    ):
        super().__init__(settings)
        self.extractor = extractor or get_text_extractor()
        self.auditor = auditor or ContentAuditor()
        self.web_backend = web_backend

    async def build_combined_text(
        self,
        article_text: Optional[str],
        attachments: Sequence[AttachmentLike],
    ) -> str:
        """去 HTML 的正文 + 空行，随后每个附件文本各占一段"""
        items = [to_attachment(item) for item in attachments]
        combined = ""
        body = strip_html(article_text or "").strip()
        if body:
            combined += body + "\n\n"
        for text in await self.extractor.extract_many(items):
            combined += text + "\n"
        return combined

    async def run_plagiarism_check(
        self,
        article_text: Optional[str],
        attachments: Sequence[AttachmentLike],
        external_report_csv: Optional[str] = None,
        use_web_backend: bool = False,
    ) -> Dict[str, Any]:
        """
        Returns:
            {ai_score, ai_details, web_score, web_sources} 合并外部报告摘要
            （max_similarity/avg_similarity/pairs 或 notice）
        """
        if not (article_text or "").strip() and not attachments:
            raise InvalidInputError("Article content or at least one attachment is required", field="content")

        combined = await self.build_combined_text(article_text, attachments)
        audit = self.auditor.audit_text(combined)

        if use_web_backend and self.web_backend is not None:
            try:
                web_result = await self.web_backend.check(combined)
                audit.web_score = web_result.score
                audit.web_sources = list(web_result.sources)
            except Exception as e:
                self.logger.warning(LogEvent.WEB_SEARCH_FAILED, stage="web_similarity", error=str(e))
                audit.web_score = 0
                audit.web_sources = []

        if external_report_csv is not None:
            report = parse_jplag_csv(external_report_csv)
        else:
            report = {"notice": REPORT_SKIPPED_NOTICE}

        summary = audit.to_dict()
        summary.update(report)
        self.logger.info(
            LogEvent.PLAGIARISM_COMPLETED,
            attachments=len(attachments),
            ai_score=audit.ai_score,
            web_score=audit.web_score,
            external_report=external_report_csv is not None,
        )
        return summary
