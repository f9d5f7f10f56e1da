"""
文档解析器工具包

支持的文档格式：
- PDF (.pdf)，需要可用的 PDF 能力（默认 PyMuPDF）
- Word文档 (.docx, .doc)
- 纯文本 (.txt, .md, .rtf, .html 等) 以及所有未知格式
"""

from .readers_base import ExtractorCapabilities, PdfTextParser
from .readers_service import TextExtractor, extract_text, get_text_extractor

__all__ = [
    'ExtractorCapabilities',
    'PdfTextParser',
    'TextExtractor',
    'extract_text',
    'get_text_extractor',
]
