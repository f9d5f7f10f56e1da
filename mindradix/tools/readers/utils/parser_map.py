"""
解析器映射配置

单一职责：定义文件扩展名到解析器的映射关系
未登记的扩展名统一回退到文本解析器（按 UTF-8 解码）
"""
from pathlib import PurePath
from typing import Dict, Tuple

ParserSpec = Tuple[str, str]

TEXT_PARSER: ParserSpec = ('mindradix.tools.readers.readers_text', 'PlainTextParser')

# 专用解析器映射（优先级高）
SPECIALIZED_PARSERS: Dict[str, ParserSpec] = {
    '.pdf': ('mindradix.tools.readers.readers_pdf', 'PDFParser'),
    '.docx': ('mindradix.tools.readers.readers_docx', 'DOCXParser'),
    '.doc': ('mindradix.tools.readers.readers_doc', 'DOCParser'),
}

# 明确按纯文本处理的格式（HTML 在此阶段不去标签）
TEXT_PARSER_FORMATS = [
    '.txt', '.text', '.md', '.markdown', '.rtf',
    '.html', '.htm',
]


def get_parser_map() -> Dict[str, ParserSpec]:
    """
    获取完整的解析器映射

    Returns:
        dict: 文件扩展名到解析器的映射
    """
    parser_map = {ext: TEXT_PARSER for ext in TEXT_PARSER_FORMATS}
    parser_map.update(SPECIALIZED_PARSERS)
    return parser_map


def get_extension(filename: str) -> str:
    """返回小写扩展名（带点），无扩展名时返回空字符串；".pdf" 这类纯扩展名文件名也按扩展名处理"""
    name = PurePath(filename or "").name
    if "." not in name:
        return ""
    return "." + name.rsplit(".", 1)[-1].lower()


def get_parser_for_file(filename: str) -> ParserSpec:
    """
    根据文件名获取合适的解析器

    Returns:
        tuple: (module_path, class_name)，未知格式返回文本解析器
    """
    return get_parser_map().get(get_extension(filename), TEXT_PARSER)


def is_text_fallback(filename: str) -> bool:
    """该文件是否没有专用解析器、仅按文本解码"""
    return get_extension(filename) not in get_parser_map()
