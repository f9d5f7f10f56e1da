"""TF-IDF vectorization and pairwise cosine similarity over a small corpus."""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np

from mindradix.core.logging import get_logger
from mindradix.models.similarity import Document, SimilarityPair
from mindradix.services.text_processor import tokenize

logger = get_logger(__name__)

Tokenizer = Callable[[str], List[str]]


@dataclass
class TfidfConfig:
    terms_per_document: int = 800
    score_precision: int = 4


@dataclass
class TfidfResult:
    docs: List[Document]
    pairs: List[SimilarityPair] = field(default_factory=list)


class TfidfCorpus:
    """
    Corpus-relative TF-IDF model.

    tf is the raw term count inside a document, idf is
    ``1 + ln(N / (1 + df))`` over exactly the documents added here.
    """

    def __init__(self, tokenizer: Tokenizer = tokenize):
        self._tokenizer = tokenizer
        self._documents: List[Counter] = []
        self._document_frequency: Counter = Counter()

    def __len__(self) -> int:
        return len(self._documents)

    def add_document(self, text: str) -> None:
        counts = Counter(self._tokenizer(text))
        self._documents.append(counts)
        self._document_frequency.update(counts.keys())

    def idf(self, term: str) -> float:
        return 1.0 + math.log(len(self._documents) / (1.0 + self._document_frequency.get(term, 0)))

    def list_terms(self, index: int) -> List[Tuple[str, float]]:
        """Terms of one document sorted by weight, ties kept in first-seen order."""
        weighted = [(term, count * self.idf(term)) for term, count in self._documents[index].items()]
        return sorted(weighted, key=lambda item: item[1], reverse=True)


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine of two vectors; 0.0 when either has zero norm."""
    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


class TfidfSimilarityEngine:
    """Builds a shared vocabulary and scores every unordered document pair."""

    def __init__(self, config: Optional[TfidfConfig] = None, tokenizer: Tokenizer = tokenize):
        self.config = config or TfidfConfig()
        self._tokenizer = tokenizer

    def compute_similarities(self, documents: Sequence[Document]) -> TfidfResult:
        docs = list(documents)
        if sum(1 for doc in docs if doc.text) < 2:
            return TfidfResult(docs=docs, pairs=[])

        corpus = TfidfCorpus(self._tokenizer)
        for doc in docs:
            corpus.add_document(doc.text)

        term_lists = [corpus.list_terms(i) for i in range(len(docs))]
        vocabulary = self.build_vocabulary(term_lists)
        vectors = self.build_vectors(term_lists, vocabulary)
        similarity = self.similarity_matrix(vectors)

        precision = self.config.score_precision
        pairs: List[SimilarityPair] = []
        for i in range(len(docs)):
            for j in range(i + 1, len(docs)):
                score = min(1.0, max(0.0, float(similarity[i, j])))
                pairs.append(SimilarityPair(a_id=docs[i].id, b_id=docs[j].id, score=round(score, precision)))

        pairs.sort(key=lambda pair: pair.score, reverse=True)
        logger.debug(
            "tfidf_computed",
            documents=len(docs),
            vocabulary=len(vocabulary),
            pairs=len(pairs),
        )
        return TfidfResult(docs=docs, pairs=pairs)

    def build_vocabulary(self, term_lists: Sequence[List[Tuple[str, float]]]) -> Dict[str, int]:
        """Union of each document's top terms, indexed in insertion order."""
        vocabulary: Dict[str, int] = {}
        limit = self.config.terms_per_document
        for terms in term_lists:
            for term, _ in terms[:limit]:
                if term not in vocabulary:
                    vocabulary[term] = len(vocabulary)
        return vocabulary

    def build_vectors(
        self,
        term_lists: Sequence[List[Tuple[str, float]]],
        vocabulary: Dict[str, int],
    ) -> np.ndarray:
        vectors = np.zeros((len(term_lists), len(vocabulary)), dtype=float)
        for row, terms in enumerate(term_lists):
            for term, weight in terms:
                col = vocabulary.get(term)
                if col is not None:
                    vectors[row, col] = weight
        return vectors

    def similarity_matrix(self, vectors: np.ndarray) -> np.ndarray:
        """All-pairs cosine; rows with zero norm score 0 against everything."""
        if not vectors.size:
            return np.zeros((vectors.shape[0], vectors.shape[0]), dtype=float)
        norms = np.linalg.norm(vectors, axis=1, keepdims=True)
        norms[norms == 0] = 1.0
        normalized = vectors / norms
        return normalized @ normalized.T
