"""BM25 keyword search over documents with weighted fields.

Each field gets its own BM25 model; a document's score is the boost-weighted
sum of its field scores. Alongside the score every hit reports which query
terms it matched and where, which is what the tagname ranker selects on.

Text analysis (indexing and querying alike):
- Lowercase
- Split on whitespace and hyphens
- Trim leading/trailing non-word characters
- Drop English stop words
- Porter stemming (NLTK)

Single letters and bare digits are kept, so "vitamin c" and "4:0" remain
searchable.
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nltk.stem import PorterStemmer

from food_terms.logging_config import get_logger

from .base import MatchMetadata, SearchEngine, SearchHit

if TYPE_CHECKING:
    from rank_bm25 import BM25Okapi  # type: ignore
else:
    from rank_bm25 import BM25Okapi

logger = get_logger(__name__)

Term = tuple[str, int]  # (stemmed term, token position)

ENGLISH_STOP_WORDS: frozenset[str] = frozenset(
    """
    able about across after all almost also am among an and any are as at
    be because been but by can cannot could dear did do does either else
    ever every for from get got had has have he her hers him his how however
    if in into is it its just least let like likely may me might most must
    my neither no nor not of off often on only or other our own rather said
    say says she should since so some than that the their them then there
    these they this tis to too twas us wants was we were what when where
    which while who whom why will with would yet you your
    """.split()
)

_RE_SPLIT = re.compile(r"[\s\-]+")
_RE_TRIM = re.compile(r"^\W+|\W+$")


class TextAnalyzer:
    """Turns text into stemmed terms with their token positions."""

    def __init__(self, stop_words: Iterable[str] = ENGLISH_STOP_WORDS) -> None:
        self.stop_words = frozenset(stop_words)
        self._stemmer = PorterStemmer()

    def analyze(self, text: str) -> list[Term]:
        """Analyze text.

        Args:
            text: Text to analyze

        Returns:
            (term, position) pairs in text order; positions count raw tokens
        """
        tokens = [t for t in _RE_SPLIT.split(text.lower()) if t]
        terms: list[Term] = []
        for position, raw in enumerate(tokens):
            token = _RE_TRIM.sub("", raw)
            if not token or token in self.stop_words:
                continue
            terms.append((self._stemmer.stem(token), position))
        return terms

    def terms(self, text: str) -> list[str]:
        """Return the distinct terms of *text* in first-occurrence order."""
        return list(dict.fromkeys(term for term, _ in self.analyze(text)))


@dataclass
class FieldedBM25Index(SearchEngine):
    """BM25 index over documents with boosted fields.

    Usage:
        index = FieldedBM25Index(boosts={"code": 3.0, "name": 2.0})
        index.add("VITC", {"code": "VITC", "name": "vitamin C"})
        index.build()
        hits = index.search("vitamin c")
    """

    boosts: dict[str, float]
    k1: float = 1.5
    b: float = 0.75
    analyzer: TextAnalyzer = field(default_factory=TextAnalyzer, repr=False)
    refs: list[str] = field(default_factory=list)
    # field -> per-document term lists (BM25 input)
    tokenized_fields: dict[str, list[list[str]]] = field(default_factory=dict, repr=False)
    # field -> per-document {term: [positions]}
    _postings: dict[str, list[dict[str, list[int]]]] = field(default_factory=dict, repr=False)
    _models: dict[str, BM25Okapi] | None = field(default=None, repr=False)

    def __post_init__(self) -> None:
        if not self.boosts:
            raise ValueError("FieldedBM25Index needs at least one field")
        for name in self.boosts:
            self.tokenized_fields.setdefault(name, [])
            self._postings.setdefault(name, [])

    def add(self, ref: str, fields: Mapping[str, str]) -> None:
        """Add a document to the index.

        Args:
            ref: Document reference
            fields: Field name -> text; fields not given are indexed empty

        Raises:
            ValueError: If a field was not declared in ``boosts``
        """
        unknown = set(fields) - set(self.boosts)
        if unknown:
            raise ValueError(f"Unknown fields: {', '.join(sorted(unknown))}")

        self.refs.append(ref)
        for name in self.boosts:
            terms = self.analyzer.analyze(fields.get(name, ""))
            postings: dict[str, list[int]] = {}
            for term, position in terms:
                postings.setdefault(term, []).append(position)
            self.tokenized_fields[name].append([term for term, _ in terms])
            self._postings[name].append(postings)
        self._invalidate_index()

    def build(self) -> None:
        """Build or rebuild the per-field BM25 models.

        Fields with no terms in any document get no model and contribute
        nothing to scores.
        """
        models: dict[str, BM25Okapi] = {}
        if self.refs:
            for name, docs in self.tokenized_fields.items():
                if any(docs):
                    models[name] = BM25Okapi(docs, k1=self.k1, b=self.b)
        self._models = models
        logger.debug("bm25_index_built", documents=len(self.refs), fields=sorted(models))

    def search(self, query: str) -> list[SearchHit]:
        """Search the index.

        Args:
            query: Free-text query

        Returns:
            Hits for every document matching at least one query term, sorted
            by boosted BM25 score descending (ties keep insertion order)
        """
        if self._models is None:
            self.build()

        terms = self.analyzer.terms(query)
        if not terms or not self.refs:
            return []

        scores = [0.0] * len(self.refs)
        for name, model in (self._models or {}).items():
            boost = self.boosts[name]
            for i, score in enumerate(model.get_scores(terms)):
                scores[i] += boost * float(score)

        hits: list[SearchHit] = []
        for i, ref in enumerate(self.refs):
            metadata = self._match_metadata(i, terms)
            if metadata:
                hits.append(SearchHit(ref=ref, score=scores[i], matched_terms=metadata))

        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits

    def _match_metadata(self, doc: int, terms: list[str]) -> MatchMetadata:
        metadata: MatchMetadata = {}
        for term in terms:
            for name in self.boosts:
                positions = self._postings[name][doc].get(term)
                if positions:
                    metadata.setdefault(term, {})[name] = list(positions)
        return metadata

    def _invalidate_index(self) -> None:
        """Invalidate cached BM25 models (lazy rebuild on next search)."""
        self._models = None

    def __len__(self) -> int:
        """Return number of indexed documents."""
        return len(self.refs)
