import threading

from .inverted_index import InvertedIndex


class SynchronizedIndex:
    """
    Thread-safe facade over an InvertedIndex.

    Every call holds one re-entrant lock for its whole duration, so a search
    never interleaves with an add or register_sources.
    """

    def __init__(self, index: InvertedIndex = None):
        self.index = index or InvertedIndex()
        self._lock = threading.RLock()

    def add(self, term: str, source: str) -> None:
        with self._lock:
            self.index.add(term, source)

    def add_all(self, terms, source: str) -> None:
        """Add every term of one source under a single lock acquisition."""
        with self._lock:
            for term in terms:
                self.index.add(term, source)

    def register_sources(self, count: int) -> None:
        with self._lock:
            self.index.register_sources(count)

    def search(self, query: str) -> list[str]:
        with self._lock:
            return self.index.search(query)

    @property
    def number_of_sources(self) -> int:
        with self._lock:
            return self.index.number_of_sources
