"""
PDF 解析器 - 使用 PyMuPDF 进行基本文本提取

PyMuPDF 作为可注入的能力提供；未安装时 PDF 附件抽取为空文本
"""

import re
from typing import Optional

from mindradix.core.errors import ExtractionError
from mindradix.core.logging import LogEvent, get_logger
from mindradix.models.similarity import ExtractionResult

from .readers_base import BaseParser, ExtractorCapabilities, PdfTextParser

logger = get_logger(__name__)


class PyMuPDFTextParser:
    """bytes -> text using PyMuPDF."""

    def __init__(self, module) -> None:
        self._pymupdf = module

    def __call__(self, data: bytes) -> str:
        all_text = []
        with self._pymupdf.open(stream=data, filetype="pdf") as doc:
            for page in doc:
                text = page.get_text()
                if text.strip():
                    all_text.append(text)

        raw_text = '\n\n'.join(all_text)
        # 合并多个空行与空格
        raw_text = re.sub(r'\n\s*\n\s*\n', '\n\n', raw_text)
        raw_text = re.sub(r'[ \t]+', ' ', raw_text)
        return raw_text.strip()


def load_default_pdf_parser() -> Optional[PdfTextParser]:
    """尝试加载 PyMuPDF，不可用时返回 None"""
    try:
        import pymupdf
    except ImportError:
        logger.warning(LogEvent.PDF_PARSER_UNAVAILABLE, reason="pymupdf is not installed")
        return None
    return PyMuPDFTextParser(pymupdf)


class PDFParser(BaseParser):
    """PDF 解析器 - 委托给注入的 PDF 能力"""

    def __init__(self, parse_pdf: Optional[PdfTextParser] = None):
        self._parse_pdf = parse_pdf

    @classmethod
    def from_capabilities(cls, capabilities: ExtractorCapabilities) -> "PDFParser":
        return cls(parse_pdf=capabilities.parse_pdf)

    def parse(self, filename: str, data: bytes) -> ExtractionResult:
        if self._parse_pdf is None:
            logger.warning(LogEvent.PDF_PARSER_UNAVAILABLE, filename=filename)
            return ExtractionResult(
                error=ExtractionError("PDF parser unavailable", filename=filename, fmt="pdf")
            )

        try:
            return ExtractionResult(text=self._parse_pdf(data) or "")
        except Exception as e:
            logger.warning(LogEvent.EXTRACTION_FAILED, filename=filename, format="pdf", error=str(e))
            return ExtractionResult(error=ExtractionError(str(e), filename=filename, fmt="pdf"))
