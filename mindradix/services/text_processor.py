"""
文本处理工具 - 清理、分词、分句
TF-IDF 引擎与内容审计共用这些纯函数
"""
import re
from typing import List

from spacy.lang.en.stop_words import STOP_WORDS

_WHITESPACE_RE = re.compile(r'\s+')
_HTML_TAG_RE = re.compile(r'<[^>]+>')
# 与 Latin/Cyrillic 字母数字之外的字符切分
_TOKEN_SPLIT_RE = re.compile(r'[^a-z0-9_а-яё]+')
_WORD_RE = re.compile(r'[a-z]+')
_SENTENCE_RE = re.compile(r'[^.!?]+[.!?]+')


def collapse_whitespace(text: str) -> str:
    """合并连续空白并去除首尾空白"""
    if not text:
        return ""
    return _WHITESPACE_RE.sub(' ', text).strip()


def strip_html(html: str) -> str:
    """简单去除 HTML 标签，标签替换为空格"""
    if not html:
        return ""
    return _HTML_TAG_RE.sub(' ', html)


def normalize_document_text(text: str, max_chars: int = 200_000) -> str:
    """合并空白、去首尾空白，并截断到 max_chars"""
    normalized = collapse_whitespace(text)
    if len(normalized) > max_chars:
        normalized = normalized[:max_chars]
    return normalized


def tokenize(text: str, remove_stop_words: bool = True) -> List[str]:
    """
    TF-IDF 分词：小写后按非字母数字切分，去掉英文停用词

    Returns:
        保持原文顺序的词列表
    """
    if not text:
        return []
    tokens = [t for t in _TOKEN_SPLIT_RE.split(text.lower()) if t]
    if remove_stop_words:
        tokens = [t for t in tokens if t not in STOP_WORDS]
    return tokens


def word_tokens(text: str) -> List[str]:
    """小写英文单词序列（仅 a-z）"""
    return _WORD_RE.findall((text or "").lower())


def split_sentences(text: str) -> List[str]:
    """按 . ! ? 边界分句；末尾没有标点的残句不计入"""
    return _SENTENCE_RE.findall(text or "")
