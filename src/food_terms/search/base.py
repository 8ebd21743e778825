"""Abstract full-text search capability used by the tagname ranker."""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field

# {term: {field_name: [token positions]}}
MatchMetadata = dict[str, dict[str, list[int]]]


@dataclass
class SearchHit:
    """A document matched by a search, with per-term match metadata."""

    ref: str
    score: float
    matched_terms: MatchMetadata = field(default_factory=dict)

    @property
    def matched_term_count(self) -> int:
        """Number of distinct query terms found in the document."""
        return len(self.matched_terms)


class SearchEngine(ABC):
    """Inverted-index search over documents with weighted fields.

    Any implementation that can report which query terms matched each
    document satisfies the tagname ranker. Relevance scores only order
    hits; they are never used for selection.
    """

    @abstractmethod
    def add(self, ref: str, fields: Mapping[str, str]) -> None:
        """Index a document.

        Args:
            ref: Document reference returned in hits
            fields: Field name -> text to index
        """
        pass

    @abstractmethod
    def build(self) -> None:
        """Finalize the index after all documents were added."""
        pass

    @abstractmethod
    def search(self, query: str) -> list[SearchHit]:
        """Search the index with free text.

        Returns:
            Every document matching at least one query term, most relevant first
        """
        pass

    @abstractmethod
    def __len__(self) -> int:
        """Return number of indexed documents."""
        pass
