"""
使用直接XML解析的DOCX解析器。

使用 lxml + zipfile 直接读取 word/document.xml，
绕过高级API开销；格式、表格样式与图片全部丢弃。
"""

import io
import zipfile
from typing import Optional

from lxml import etree

from mindradix.core.errors import ExtractionError
from mindradix.core.logging import LogEvent, get_logger
from mindradix.models.similarity import ExtractionResult

from .readers_base import BaseParser

logger = get_logger(__name__)

WORD_NAMESPACE = {'w': 'http://schemas.openxmlformats.org/wordprocessingml/2006/main'}


def extract_ooxml_text(data: bytes) -> Optional[str]:
    """
    从 DOCX 字节中提取段落文本。

    Returns:
        段落以双换行连接的纯文本；缺少 word/document.xml 时返回 None
    """
    with zipfile.ZipFile(io.BytesIO(data), 'r') as zip_file:
        try:
            xml_content = zip_file.read('word/document.xml')
        except KeyError:
            return None

    root = etree.fromstring(xml_content)

    # 提取段落而不是单个文本节点
    paragraph_texts = []
    for paragraph in root.xpath('//w:p', namespaces=WORD_NAMESPACE):
        text_nodes = paragraph.xpath('.//w:t/text()', namespaces=WORD_NAMESPACE)
        paragraph_text = ''.join(text_nodes).strip()
        if paragraph_text:
            paragraph_texts.append(paragraph_text)

    return '\n\n'.join(paragraph_texts)


class DOCXParser(BaseParser):
    """使用直接XML解析的高性能DOCX解析器。"""

    def parse(self, filename: str, data: bytes) -> ExtractionResult:
        try:
            text = extract_ooxml_text(data)
        except Exception as e:
            logger.warning(LogEvent.EXTRACTION_FAILED, filename=filename, format="docx", error=str(e))
            return ExtractionResult(error=ExtractionError(str(e), filename=filename, fmt="docx"))

        if text is None:
            logger.info("invalid_docx", filename=filename, reason="missing word/document.xml")
            return ExtractionResult(
                error=ExtractionError("missing word/document.xml", filename=filename, fmt="docx")
            )
        return ExtractionResult(text=text)
