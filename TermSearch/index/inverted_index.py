import logging
from collections import Counter
from functools import cmp_to_key
from types import MappingProxyType
from typing import Callable, Mapping

from ..preprocessing.preprocess import create_preprocessing_pipeline, sanitize
from ..rank.rank import Rank, RankConfig
from ..structures import PostingEntry, TermSource
from ..utils.math_utils import int_div

logger = logging.getLogger(__name__)


class InvertedIndex:
    """
    In-memory inverted index mapping terms to the sources containing them.

    Keeps two structures in step through the single ``add`` path:
    term -> PostingEntry and (term, source) -> occurrence count.
    """

    def __init__(self, rank: Rank = None, sanitizer: Callable[[str], str] = sanitize):
        self.sanitizer = sanitizer
        self.rank = rank or Rank(sanitizer=sanitizer)
        # Query term weights must use the same canonical forms as coverage
        self.rank.sanitizer = sanitizer

        self.index: dict[str, PostingEntry] = {}
        self.tf: dict[TermSource, int] = {}
        self.number_of_sources = 0

    @classmethod
    def from_config(cls, config: dict) -> 'InvertedIndex':
        pipeline = create_preprocessing_pipeline(config)

        def sanitizer(term):
            return sanitize(term, pipeline)

        return cls(rank=Rank.from_config(config, sanitizer=sanitizer), sanitizer=sanitizer)

    def __contains__(self, term: str) -> bool:
        return term in self.index

    def __len__(self) -> int:
        return len(self.index)

    def __repr__(self):
        return (f"InvertedIndex(terms={len(self.index)}, pairs={len(self.tf)}, "
                f"sources={self.number_of_sources})")

    def add(self, term: str, source: str) -> None:
        """
        Record one occurrence of a raw term in a source.
        Terms that sanitize to nothing are silently discarded.
        """
        term = self.sanitizer(term)
        if not term:
            return

        posting = self.index.get(term)
        if posting is None:
            self.index[term] = PostingEntry(term, {source})
        else:
            posting.add_source(source)

        self._increment_tf(term, source)

    def _increment_tf(self, term: str, source: str) -> None:
        key = TermSource(term, source)
        self.tf[key] = self.tf.get(key, 0) + 1

    def register_sources(self, count: int) -> None:
        """Add ``count`` documents to the corpus size. Calls accumulate."""
        self.number_of_sources += count
        logger.debug(f"Registered {count} sources, corpus size is now {self.number_of_sources}")

    def search(self, query: str) -> list[str]:
        """
        Search the index for documents containing the query terms.

        Args:
            query: Space separated query terms

        Returns:
            Formatted "<source>: <percentage>%" strings, best match first
        """
        query_terms_array = query.split(" ")

        # canonical term -> itself, so each distinct term counts once
        query_terms_map = {}
        for query_term in query_terms_array:
            query_term = self.sanitizer(query_term)
            if query_term:
                query_terms_map[query_term] = query_term

        if not query_terms_map:
            return []

        postings_found = [self.index[term] for term in sorted(query_terms_map) if term in self.index]

        terms_per_source = [
            TermSource(posting.term, source)
            for posting in postings_found
            for source in posting.sorted_sources()
        ]
        terms_found_per_source = Counter(pair.source for pair in terms_per_source)

        self.rank.configure(RankConfig(
            query_terms=tuple(query_terms_array),
            number_of_sources=self.number_of_sources,
            term_frequencies=self.snapshot()
        ))

        distinct_terms = len(query_terms_map)
        results = [
            (source, int_div(count * 100, distinct_terms))
            for source, count in terms_found_per_source.items()
        ]
        results.sort(key=cmp_to_key(self.rank.get_comparator()))

        logger.debug(f"Query '{query}' matched {len(results)} sources")
        return [f"{source}: {percentage}%" for source, percentage in results]

    def snapshot(self) -> Mapping[TermSource, int]:
        """Read-only copy of the term frequency map."""
        return MappingProxyType(dict(self.tf))

    def term_frequencies(self) -> Mapping[TermSource, int]:
        """Live read-only view of the term frequency map."""
        return MappingProxyType(self.tf)

    def terms(self) -> list[str]:
        return sorted(self.index)

    def get_posting(self, term: str) -> PostingEntry | None:
        return self.index.get(term)

    def get_sources(self, term: str) -> list[str]:
        posting = self.index.get(term)
        if posting is None:
            return []
        return posting.sorted_sources()

    def get_document_frequency(self, term: str) -> int:
        posting = self.index.get(term)
        return posting.document_frequency if posting is not None else 0

    def get_term_frequency(self, term: str, source: str) -> int:
        return self.tf.get(TermSource(term, source), 0)
