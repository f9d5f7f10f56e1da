from mindradix.models.similarity import (
    Attachment,
    Document,
    DocumentExcerpt,
    ExtractionResult,
    HeuristicAuditResult,
    ReportMeta,
    SimilarityPair,
    SimilarityReport,
    WebDocument,
)

__all__ = [
    "Attachment",
    "Document",
    "DocumentExcerpt",
    "ExtractionResult",
    "HeuristicAuditResult",
    "ReportMeta",
    "SimilarityPair",
    "SimilarityReport",
    "WebDocument",
]
