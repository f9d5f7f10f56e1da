"""
DOC parser using python-docx, with the raw OOXML reader as fallback.

Legacy uploads named ``.doc`` are frequently DOCX containers in disguise.
"""

import io
from typing import Optional

from mindradix.core.errors import ExtractionError
from mindradix.core.logging import LogEvent, get_logger
from mindradix.models.similarity import ExtractionResult

from .readers_base import BaseParser
from .readers_docx import extract_ooxml_text

logger = get_logger(__name__)


class DOCParser(BaseParser):
    """
    Parser for legacy Word documents (.doc).

    Tries python-docx first, falls back to direct XML parsing.
    """

    def parse(self, filename: str, data: bytes) -> ExtractionResult:
        text = self._try_python_docx(filename, data)
        if text:
            return ExtractionResult(text=text)

        text = self._try_ooxml(filename, data)
        if text:
            return ExtractionResult(text=text)

        logger.warning(LogEvent.EXTRACTION_FAILED, filename=filename, format="doc")
        return ExtractionResult(
            error=ExtractionError("unreadable Word document", filename=filename, fmt="doc")
        )

    def _try_python_docx(self, filename: str, data: bytes) -> Optional[str]:
        """尝试使用 python-docx 库解析（可能不兼容所有DOC文件）"""
        try:
            from docx import Document
            doc = Document(io.BytesIO(data))
        except Exception as e:
            logger.debug("python_docx_failed", filename=filename, error=str(e))
            return None

        paragraphs = []
        for para in doc.paragraphs:
            text = para.text.strip()
            if text:
                paragraphs.append(text)
        return '\n\n'.join(paragraphs)

    def _try_ooxml(self, filename: str, data: bytes) -> Optional[str]:
        try:
            return extract_ooxml_text(data)
        except Exception as e:
            logger.debug("ooxml_fallback_failed", filename=filename, error=str(e))
            return None
