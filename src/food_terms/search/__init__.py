"""Full-text search capability for the tagname ranker."""

from .base import MatchMetadata, SearchEngine, SearchHit
from .sparse_search import ENGLISH_STOP_WORDS, FieldedBM25Index, TextAnalyzer

__all__ = [
    "ENGLISH_STOP_WORDS",
    "FieldedBM25Index",
    "MatchMetadata",
    "SearchEngine",
    "SearchHit",
    "TextAnalyzer",
]
