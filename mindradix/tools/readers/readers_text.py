"""
纯文本解析器 - txt/md/rtf/html 以及所有未知格式

直接按 UTF-8 解码，非法字节替换为 U+FFFD；HTML 标签在此阶段保留
"""

from mindradix.core.errors import ExtractionError
from mindradix.core.logging import LogEvent, get_logger
from mindradix.models.similarity import ExtractionResult

from .readers_base import BaseParser

logger = get_logger(__name__)


class PlainTextParser(BaseParser):
    """Decode any text-like payload as UTF-8."""

    def parse(self, filename: str, data: bytes) -> ExtractionResult:
        try:
            return ExtractionResult(text=bytes(data).decode('utf-8', errors='replace'))
        except Exception as e:
            logger.warning(LogEvent.EXTRACTION_FAILED, filename=filename, format="text", error=str(e))
            return ExtractionResult(error=ExtractionError(str(e), filename=filename, fmt="text"))
