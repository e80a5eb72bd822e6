import logging
import math
from collections import Counter
from dataclasses import dataclass, field, replace
from functools import cmp_to_key
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from ..structures import TermSource
from ..preprocessing.preprocess import sanitize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RankConfig:
    """
    Per-query ranking input.

    Attributes:
        query_terms: The raw query terms as split, duplicates included
        number_of_sources: Corpus size registered with the index
        term_frequencies: Read-only snapshot of (term, source) -> count
    """
    query_terms: tuple = ()
    number_of_sources: int = 0
    term_frequencies: Mapping[TermSource, int] = field(default_factory=lambda: MappingProxyType({}))


def compute_tf(freq: int, sublinear: bool = True) -> float:
    """
    Term frequency weight.
    TF(t,d) = 1 + log10(f(t,d)) if f(t,d) > 0, else 0 (raw f(t,d) when not sublinear)
    """
    if freq <= 0:
        return 0.0
    if sublinear:
        return 1 + math.log10(freq)
    return float(freq)


def compute_idf(number_of_sources: int, document_frequency: int) -> float:
    """
    Smoothed inverse document frequency.
    IDF(t) = log10(1 + N/DF(t)); 1 when the corpus size or DF is unknown
    """
    if number_of_sources <= 0 or document_frequency <= 0:
        return 1.0
    return math.log10(1 + number_of_sources / document_frequency)


class Rank:
    """
    Orders (document, percentage) search results.

    Coverage percentage first, then a TF-IDF style relevance score, then the
    document identifier, all from the configuration supplied for the query.
    """

    def __init__(self, sanitizer: Callable[[str], str] = sanitize, use_idf: bool = True,
                 sublinear_tf: bool = True):
        self.sanitizer = sanitizer
        self.use_idf = use_idf
        self.sublinear_tf = sublinear_tf
        self.config = RankConfig()

    @classmethod
    def from_config(cls, config: dict, sanitizer: Callable[[str], str] = sanitize) -> 'Rank':
        ranking = config.get("ranking", {})
        return cls(
            sanitizer=sanitizer,
            use_idf=ranking.get("use_idf", True),
            sublinear_tf=ranking.get("sublinear_tf", True)
        )

    def configure(self, config: RankConfig) -> None:
        self.config = config

    def set_query_terms(self, query_terms: Iterable[str]) -> None:
        self.config = replace(self.config, query_terms=tuple(query_terms))

    def set_number_of_sources(self, number_of_sources: int) -> None:
        self.config = replace(self.config, number_of_sources=number_of_sources)

    def set_term_frequencies(self, term_frequencies: Mapping[TermSource, int]) -> None:
        self.config = replace(self.config, term_frequencies=MappingProxyType(dict(term_frequencies)))

    def _query_term_counts(self) -> Counter:
        counts = Counter()
        for raw in self.config.query_terms:
            term = self.sanitizer(raw)
            if term:
                counts[term] += 1
        return counts

    def _document_frequencies(self, terms) -> Counter:
        document_frequencies = Counter()
        for key in self.config.term_frequencies:
            if key.term in terms:
                document_frequencies[key.term] += 1
        return document_frequencies

    def scorer(self) -> Callable[[str], float]:
        """
        Build a document -> relevance score function for the current configuration.
        Scores are cached per document, so reuse one scorer for many lookups.
        """
        query_counts = self._query_term_counts()
        document_frequencies = self._document_frequencies(query_counts)
        term_frequencies = self.config.term_frequencies

        idf = {}
        for term in query_counts:
            if self.use_idf:
                idf[term] = compute_idf(self.config.number_of_sources, document_frequencies[term])
            else:
                idf[term] = 1.0

        cache = {}

        def score(document: str) -> float:
            if document not in cache:
                total = 0.0
                for term in sorted(query_counts):
                    freq = term_frequencies.get(TermSource(term, document), 0)
                    if freq:
                        total += query_counts[term] * compute_tf(freq, self.sublinear_tf) * idf[term]
                cache[document] = total
            return cache[document]

        return score

    def score(self, document: str) -> float:
        """Relevance score of a document under the current configuration."""
        return self.scorer()(document)

    def get_comparator(self) -> Callable[[tuple, tuple], int]:
        """
        Return a cmp function over (document, percentage) pairs, for cmp_to_key.
        Negative means the first pair ranks higher.
        """
        score = self.scorer()
        logger.debug(
            f"Ranking for {len(self.config.query_terms)} query terms over "
            f"{self.config.number_of_sources} sources"
        )

        def compare(a, b):
            doc_a, percentage_a = a
            doc_b, percentage_b = b

            if percentage_a != percentage_b:
                return -1 if percentage_a > percentage_b else 1

            score_a, score_b = score(doc_a), score(doc_b)
            if score_a != score_b:
                return -1 if score_a > score_b else 1

            if doc_a != doc_b:
                return -1 if doc_a < doc_b else 1
            return 0

        return compare

    def sort(self, results: Iterable[tuple]) -> list[tuple]:
        return sorted(results, key=cmp_to_key(self.get_comparator()))
