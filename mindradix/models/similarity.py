"""Dataclasses shared by the extraction, similarity and audit services."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from mindradix.core.errors import ExtractionError


@dataclass(slots=True)
class Attachment:
    """Raw attachment handed over by the caller."""

    id: str
    filename: str
    data: bytes


@dataclass(slots=True)
class WebDocument:
    """Visible text scraped from a web page."""

    url: str
    text: str


@dataclass(slots=True)
class Document:
    """Normalized plain-text document taking part in one similarity run."""

    id: str
    filename: str
    text: str

    def excerpt(self, length: int = 200) -> "DocumentExcerpt":
        return DocumentExcerpt(id=self.id, filename=self.filename, text_excerpt=self.text[:length])


@dataclass(slots=True)
class DocumentExcerpt:
    id: str
    filename: str
    text_excerpt: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "filename": self.filename, "textExcerpt": self.text_excerpt}


@dataclass(slots=True)
class SimilarityPair:
    """Cosine similarity of two documents, emitted once per unordered pair."""

    a_id: str
    b_id: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"aId": self.a_id, "bId": self.b_id, "score": self.score}


@dataclass(slots=True)
class ReportMeta:
    method: str
    threshold: float
    top_n: int

    def to_dict(self) -> Dict[str, Any]:
        return {"method": self.method, "threshold": self.threshold, "topN": self.top_n}


@dataclass(slots=True)
class SimilarityReport:
    """Filtered, ranked result of a similarity check."""

    docs: List[DocumentExcerpt]
    pairs: List[SimilarityPair]
    meta: ReportMeta
    message: str = "Similarity check completed"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "docs": [doc.to_dict() for doc in self.docs],
            "pairs": [pair.to_dict() for pair in self.pairs],
            "meta": self.meta.to_dict(),
        }


@dataclass(slots=True)
class HeuristicAuditResult:
    """Heuristic AI-generation and web-overlap scores for a piece of text."""

    ai_score: int
    ai_details: List[str] = field(default_factory=list)
    web_score: float = 0
    web_sources: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ai_score": self.ai_score,
            "ai_details": list(self.ai_details),
            "web_score": self.web_score,
            "web_sources": list(self.web_sources),
        }


@dataclass(slots=True)
class ExtractionResult:
    """
    Outcome of extracting text from one attachment.

    Either ``text`` holds the extracted content or ``error`` explains why it
    is empty. Callers that only want text use :meth:`text_or_empty`.
    """

    text: str = ""
    error: Optional[ExtractionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def text_or_empty(self) -> str:
        return self.text if self.error is None else ""
