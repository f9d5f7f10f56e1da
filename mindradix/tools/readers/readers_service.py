"""
统一文档读取服务

按扩展名选择解析器（延迟加载），任何失败都降级为空文本：
一个无法解析的附件不能中断整批相似度计算
"""

import asyncio
import importlib
import time
from typing import Dict, List, Optional, Sequence

from mindradix.core.errors import ExtractionError
from mindradix.core.logging import LogEvent, get_logger
from mindradix.models.similarity import Attachment, ExtractionResult

from .readers_base import BaseParser, ExtractorCapabilities
from .utils.parser_map import get_extension, get_parser_for_file, is_text_fallback

logger = get_logger(__name__)


class TextExtractor:
    """filename + bytes -> plain text"""

    def __init__(self, capabilities: Optional[ExtractorCapabilities] = None):
        self.capabilities = capabilities if capabilities is not None else ExtractorCapabilities.default()
        self._parsers: Dict[str, BaseParser] = {}

    def try_extract(self, filename: str, data: bytes) -> ExtractionResult:
        """
        解析文档并返回抽取结果

        Returns:
            ExtractionResult；失败时 text 为空、error 说明原因
        """
        try:
            parser = self._get_parser(filename)
            if is_text_fallback(filename):
                logger.debug("text_fallback", filename=filename, extension=get_extension(filename))
            return parser.parse(filename, data)
        except Exception as e:
            logger.warning(LogEvent.EXTRACTION_FAILED, filename=filename, error=str(e))
            return ExtractionResult(error=ExtractionError(str(e), filename=filename))

    def extract_text(self, filename: str, data: bytes) -> str:
        """抽取纯文本，永不抛出异常"""
        return self.try_extract(filename, data).text_or_empty()

    async def extract_many(
        self,
        attachments: Sequence[Attachment],
        deadline: Optional[float] = None,
    ) -> List[str]:
        """
        并发抽取多个附件的文本，结果顺序与输入一致

        Args:
            attachments: 附件列表
            deadline: time.monotonic() 截止时间；超时的附件得到空文本
        """

        async def extract_one(attachment: Attachment) -> str:
            name = attachment.filename or attachment.id
            if deadline is None:
                return await asyncio.to_thread(self.extract_text, name, attachment.data)
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning("extraction_skipped", filename=name, reason="deadline exceeded")
                return ""
            try:
                return await asyncio.wait_for(
                    asyncio.to_thread(self.extract_text, name, attachment.data),
                    timeout=remaining,
                )
            except asyncio.TimeoutError:
                logger.warning("extraction_timeout", filename=name)
                return ""

        return list(await asyncio.gather(*(extract_one(att) for att in attachments)))

    def _get_parser(self, filename: str) -> BaseParser:
        """获取解析器（延迟加载）"""
        module_path, class_name = get_parser_for_file(filename)
        cache_key = f"{module_path}.{class_name}"

        if cache_key not in self._parsers:
            module = importlib.import_module(module_path)
            parser_class = getattr(module, class_name)
            self._parsers[cache_key] = parser_class.from_capabilities(self.capabilities)

        return self._parsers[cache_key]


# 全局实例
_text_extractor: Optional[TextExtractor] = None


def get_text_extractor() -> TextExtractor:
    """获取使用默认能力的全局抽取器实例"""
    global _text_extractor
    if _text_extractor is None:
        _text_extractor = TextExtractor()
    return _text_extractor


def extract_text(filename: str, data: bytes) -> str:
    """便捷函数：抽取文本"""
    return get_text_extractor().extract_text(filename, data)
