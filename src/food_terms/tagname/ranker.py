"""Tagname resolution by term-match count.

Food-component mentions are resolved to INFOODS tagnames by full-text
search over the code, name and synonyms of every tagname. The search
engine's relevance score is not used for selection: the ranker keeps every
hit that matched the largest number of distinct query terms, so several
related components sharing a query term are all returned.

Usage:
    ranker = await load_tagnames()
    [entry.code for entry in tagnames(ranker, "c-vitamin")]  # ["VITC"]
"""

import asyncio
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from types import MappingProxyType

import httpx

from food_terms.config import settings
from food_terms.corpus import CsvRow, load_csv
from food_terms.exceptions import CorpusLoadError
from food_terms.logging_config import get_logger
from food_terms.normalize import normalize_newlines, replace_non_word
from food_terms.schemas import TagnameEntry
from food_terms.search import FieldedBM25Index, SearchEngine
from food_terms.sql import SetupTableOptions, setup_table

logger = get_logger(__name__)

TAGNAME_COLUMNS = ("code", "name", "synonyms", "unit", "tables", "comments", "examples")
BUNDLED_CSV = Path(__file__).resolve().parents[1] / "data" / "tagnames.csv"

SQL_COLUMNS = {column: "TEXT" for column in TAGNAME_COLUMNS}
SQL_DEFAULTS = SetupTableOptions(
    pk="code",
    index=True,
    tsvector={"code": "A", "name": "B", "synonyms": "C"},
)

TagnameCorpus = Mapping[str, TagnameEntry]
EngineFactory = Callable[[], SearchEngine]

EMPTY_TAGNAME = TagnameEntry()


def default_engine() -> SearchEngine:
    """BM25 index with the configured field boosts (code 3, name 2, synonyms 2)."""
    return FieldedBM25Index(
        boosts={
            "code": settings.tagname_code_boost,
            "name": settings.tagname_name_boost,
            "synonyms": settings.tagname_synonyms_boost,
        },
        k1=settings.bm25_k1,
        b=settings.bm25_b,
    )


def build_corpus(rows: Iterable[CsvRow]) -> dict[str, TagnameEntry]:
    """Key source rows by tagname code, normalizing newlines in every field."""
    corpus: dict[str, TagnameEntry] = {}
    for row in rows:
        fields = {column: normalize_newlines(row.get(column, "")) for column in TAGNAME_COLUMNS}
        if not fields["code"]:
            logger.debug("tagname_row_skipped", name=fields["name"])
            continue
        corpus[fields["code"]] = TagnameEntry(**fields)
    return corpus


def build_index(corpus: TagnameCorpus, engine_factory: EngineFactory = default_engine) -> SearchEngine:
    """Index every entry's code, name and synonyms, referenced by code."""
    engine = engine_factory()
    for entry in corpus.values():
        engine.add(
            entry.code,
            {
                "code": entry.code,
                "name": replace_non_word(entry.name),
                "synonyms": replace_non_word(entry.synonyms),
            },
        )
    engine.build()
    return engine


def tagnames_csv() -> str:
    """Return the tagname source locator (configured or bundled)."""
    return settings.tagnames_source or str(BUNDLED_CSV)


class TagnameRanker:
    """Caller-owned handle bundling the tagname corpus and its search index."""

    def __init__(
        self,
        source: str | Path | None = None,
        client: httpx.AsyncClient | None = None,
        engine_factory: EngineFactory = default_engine,
    ) -> None:
        """Initialize an unloaded ranker.

        Args:
            source: Path or URL of the CSV source; defaults to tagnames_csv()
            client: HTTP client used for URL sources
            engine_factory: Creates the search engine the corpus is indexed into
        """
        self.source = source
        self._client = client
        self._engine_factory = engine_factory
        self._corpus: TagnameCorpus | None = None
        self._index: SearchEngine | None = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._corpus is not None

    @property
    def corpus(self) -> TagnameCorpus | None:
        """Loaded corpus (read-only), or None before :meth:`load`."""
        return self._corpus

    @property
    def index(self) -> SearchEngine | None:
        return self._index

    async def load(self) -> TagnameCorpus:
        """Load the corpus and build the search index, once.

        Raises:
            CorpusLoadError: If the source cannot be read or parsed. Nothing
                is cached, so the next call retries.
        """
        if self._corpus is not None:
            return self._corpus

        async with self._lock:
            if self._corpus is not None:
                return self._corpus

            source = str(self.source) if self.source is not None else tagnames_csv()
            try:
                rows = await load_csv(
                    source,
                    TAGNAME_COLUMNS,
                    client=self._client,
                    timeout=settings.source_timeout_seconds,
                )
            except CorpusLoadError as e:
                logger.error("corpus_load_failed", corpus="tagnames", source=source, error=str(e))
                raise

            corpus = build_corpus(rows)
            self._index = build_index(corpus, self._engine_factory)
            self._corpus = MappingProxyType(corpus)
            logger.info("corpus_loaded", corpus="tagnames", source=source, entries=len(corpus))
            return self._corpus

    def search(self, text: str) -> list[TagnameEntry]:
        """Resolve a food-component mention to its best-matching tagnames.

        Args:
            text: Free text, e.g. "what is butyric acid?"

        Returns:
            Every entry tied at the highest count of distinct matched query
            terms, in search-engine order; empty if nothing matches or the
            ranker is not loaded
        """
        if self._index is None or self._corpus is None:
            return []

        hits = self._index.search(replace_non_word(text))
        if not hits:
            return []

        best = max(hit.matched_term_count for hit in hits)
        return [
            self._corpus.get(hit.ref, EMPTY_TAGNAME)
            for hit in hits
            if hit.matched_term_count == best
        ]


async def load_tagnames(
    source: str | Path | None = None,
    client: httpx.AsyncClient | None = None,
) -> TagnameRanker:
    """Create and load a tagname ranker.

    Raises:
        CorpusLoadError: If the source cannot be read or parsed
    """
    ranker = TagnameRanker(source, client=client)
    await ranker.load()
    return ranker


def tagnames(ranker: TagnameRanker, text: str) -> list[TagnameEntry]:
    """Get the details of the tagnames best matching *text*."""
    return ranker.search(text)


async def tagnames_sql(
    ranker: TagnameRanker,
    table: str = "tagnames",
    **options: object,
) -> str:
    """Obtain SQL to create and populate the tagnames table.

    Args:
        ranker: Ranker handle (loaded here if needed)
        table: Table name
        **options: SetupTableOptions fields overriding the defaults
            (pk="code", index=True, tsvector={"code": "A", "name": "B", "synonyms": "C"})

    Returns:
        SQL script
    """
    corpus = await ranker.load()
    rows = (entry.model_dump() for entry in corpus.values())
    return setup_table(table, SQL_COLUMNS, rows, SQL_DEFAULTS.with_overrides(**options))
