from dataclasses import dataclass, field
from typing import NamedTuple


class TermSource(NamedTuple):
    """Key of the term frequency map: one term seen in one source."""
    term: str
    source: str


@dataclass
class PostingEntry:
    """A term and the set of sources known to contain it at least once."""
    term: str
    sources: set[str] = field(default_factory=set)

    def add_source(self, source: str) -> None:
        self.sources.add(source)

    @property
    def document_frequency(self) -> int:
        return len(self.sources)

    def sorted_sources(self) -> list[str]:
        return sorted(self.sources)
