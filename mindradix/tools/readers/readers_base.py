"""
文档解析器基类 - 极简设计

单一职责：只定义解析接口
格式支持由 utils/parser_map.py 统一管理
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from mindradix.models.similarity import ExtractionResult

# bytes -> text; the concrete library sits behind this callable
PdfTextParser = Callable[[bytes], str]


@dataclass(frozen=True)
class ExtractorCapabilities:
    """
    Optional parsing backends injected into the extractor.

    ``parse_pdf`` is None when no PDF library is available; PDF attachments
    then extract to empty text instead of failing.
    """

    parse_pdf: Optional[PdfTextParser] = None

    @classmethod
    def default(cls) -> "ExtractorCapabilities":
        from .readers_pdf import load_default_pdf_parser

        return cls(parse_pdf=load_default_pdf_parser())


class BaseParser(ABC):
    """
    极简的文档解析器基类

    1. Do one thing well - 只负责定义解析接口
    2. 失败不抛异常 - 以 ExtractionResult.error 返回
    """

    @classmethod
    def from_capabilities(cls, capabilities: ExtractorCapabilities) -> "BaseParser":
        """根据注入的能力创建解析器，默认不需要任何能力"""
        return cls()

    @abstractmethod
    def parse(self, filename: str, data: bytes) -> ExtractionResult:
        """
        解析文档字节并提取纯文本内容。

        Args:
            filename: 原始文件名（用于日志）
            data: 文件内容

        Returns:
            ExtractionResult，解析失败时 error 字段非空
        """
