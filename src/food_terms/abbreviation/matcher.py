"""Abbreviation expansion.

All known abbreviation keys are compiled into one case-insensitive,
word-bounded alternation. Query text is first normalized so that spaced-out
or punctuated spellings ("g l v", "D.R.I.", "n-3") collapse to their joined
key form; when nothing matches, the text is retried with a naive plural
"s" stripped from every word.

Usage:
    matcher = await load_abbreviations()
    entry = abbreviations(matcher, "what is D.R.I.")
    entry.full  # "Dietary reference intake"
"""

import asyncio
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from types import MappingProxyType

import httpx

from food_terms.config import settings
from food_terms.corpus import CsvRow, load_csv
from food_terms.exceptions import CorpusLoadError
from food_terms.logging_config import get_logger
from food_terms.normalize import abbreviation_key, strip_non_word
from food_terms.schemas import AbbreviationEntry
from food_terms.sql import SetupTableOptions, setup_table

logger = get_logger(__name__)

ABBREVIATION_COLUMNS = ("abbr", "full")
BUNDLED_CSV = Path(__file__).resolve().parents[1] / "data" / "abbreviations.csv"

# Spaced or punctuated letter runs ("g l v", "D.R.I.", "n-3"), else a plain word
_RE_LETTER_RUN = re.compile(r"((\w\s+|\w\.\s*|\w-\s*|\w$)+)|\w+")
_RE_PLURAL = re.compile(r"\b(\w+)s\b")

SQL_COLUMNS = {"abbr": "TEXT", "full": "TEXT"}
SQL_DEFAULTS = SetupTableOptions(pk="abbr", index=True, tsvector={"abbr": "A", "full": "B"})

AbbreviationCorpus = Mapping[str, AbbreviationEntry]


def build_corpus(rows: Iterable[CsvRow]) -> dict[str, AbbreviationEntry]:
    """Key source rows by their normalized abbreviation.

    Rows whose abbreviation has no word characters are skipped; a later row
    with the same key replaces an earlier one.
    """
    corpus: dict[str, AbbreviationEntry] = {}
    for row in rows:
        abbr = row.get("abbr", "").strip()
        key = abbreviation_key(abbr)
        if not key:
            logger.debug("abbreviation_row_skipped", abbr=abbr)
            continue
        corpus[key] = AbbreviationEntry(key=key, abbr=abbr, full=row.get("full", "").strip())
    return corpus


def build_pattern(keys: Iterable[str]) -> re.Pattern[str] | None:
    """Compile the alternation matching any of *keys*.

    Single-character keys only match in dotted form ("d."), which keeps
    one-letter words in ordinary text from matching.

    Returns:
        Compiled pattern, or None when there are no keys
    """
    alternatives = [
        re.escape(key) if len(key) > 1 else re.escape(key) + r"\."
        for key in keys
        if key
    ]
    if not alternatives:
        return None
    return re.compile(r"\b(" + "|".join(alternatives) + r")\b", re.IGNORECASE)


def normalize_text(text: str) -> str:
    """Collapse spaced and punctuated letter runs, then lowercase.

    >>> normalize_text("what is D.R.I.")
    'what  is  dri '
    >>> normalize_text("g l v s")
    'glvs '
    """

    def collapse(match: re.Match[str]) -> str:
        run = match.group(0)
        joined = strip_non_word(run)
        if len(joined) == 1:
            return f"{run.strip()} "
        return f"{joined} "

    return _RE_LETTER_RUN.sub(collapse, text).lower()


def depluralize(text: str) -> str:
    """Strip a trailing "s" from every word.

    Deliberately naive: keys that themselves end in "s" are stripped too.
    """
    return _RE_PLURAL.sub(r"\1", text)


def abbreviations_csv() -> str:
    """Return the abbreviation source locator (configured or bundled)."""
    return settings.abbreviations_source or str(BUNDLED_CSV)


class AbbreviationMatcher:
    """Caller-owned handle bundling the abbreviation corpus and its pattern.

    The corpus is loaded lazily by :meth:`load` and never changes afterwards.
    Until then every query returns None.
    """

    def __init__(
        self,
        source: str | Path | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize an unloaded matcher.

        Args:
            source: Path or URL of the CSV source; defaults to abbreviations_csv()
            client: HTTP client used for URL sources
        """
        self.source = source
        self._client = client
        self._corpus: AbbreviationCorpus | None = None
        self._pattern: re.Pattern[str] | None = None
        self._lock = asyncio.Lock()

    @property
    def loaded(self) -> bool:
        return self._corpus is not None

    @property
    def corpus(self) -> AbbreviationCorpus | None:
        """Loaded corpus (read-only), or None before :meth:`load`."""
        return self._corpus

    @property
    def pattern(self) -> re.Pattern[str] | None:
        return self._pattern

    async def load(self) -> AbbreviationCorpus:
        """Load the corpus and build the match pattern, once.

        Later calls return the same corpus without reading the source.

        Raises:
            CorpusLoadError: If the source cannot be read or parsed. Nothing
                is cached, so the next call retries.
        """
        if self._corpus is not None:
            return self._corpus

        async with self._lock:
            if self._corpus is not None:
                return self._corpus

            source = str(self.source) if self.source is not None else abbreviations_csv()
            try:
                rows = await load_csv(
                    source,
                    ABBREVIATION_COLUMNS,
                    client=self._client,
                    timeout=settings.source_timeout_seconds,
                )
            except CorpusLoadError as e:
                logger.error("corpus_load_failed", corpus="abbreviations", source=source, error=str(e))
                raise

            corpus = build_corpus(rows)
            self._pattern = build_pattern(corpus)
            self._corpus = MappingProxyType(corpus)
            logger.info("corpus_loaded", corpus="abbreviations", source=source, entries=len(corpus))
            return self._corpus

    def match(self, text: str) -> AbbreviationEntry | None:
        """Find the first known abbreviation in *text*.

        Args:
            text: Free text, e.g. "GLVs" or "d. r. i. stands for?"

        Returns:
            The matching entry, or None if nothing matches or the matcher
            is not loaded
        """
        if self._pattern is None or self._corpus is None:
            return None

        normalized = normalize_text(text)
        found = self._pattern.search(normalized) or self._pattern.search(depluralize(normalized))
        if found is None:
            return None
        return self._corpus.get(found.group(1).rstrip("."))


async def load_abbreviations(
    source: str | Path | None = None,
    client: httpx.AsyncClient | None = None,
) -> AbbreviationMatcher:
    """Create and load an abbreviation matcher.

    Raises:
        CorpusLoadError: If the source cannot be read or parsed
    """
    matcher = AbbreviationMatcher(source, client=client)
    await matcher.load()
    return matcher


def abbreviations(matcher: AbbreviationMatcher, text: str) -> AbbreviationEntry | None:
    """Get the entry (full form) of the abbreviation mentioned in *text*."""
    return matcher.match(text)


async def abbreviations_sql(
    matcher: AbbreviationMatcher,
    table: str = "abbreviations",
    **options: object,
) -> str:
    """Obtain SQL to create and populate the abbreviations table.

    Args:
        matcher: Matcher handle (loaded here if needed)
        table: Table name
        **options: SetupTableOptions fields overriding the defaults
            (pk="abbr", index=True, tsvector={"abbr": "A", "full": "B"})

    Returns:
        SQL script
    """
    corpus = await matcher.load()
    rows = (entry.model_dump(include=set(SQL_COLUMNS)) for entry in corpus.values())
    return setup_table(table, SQL_COLUMNS, rows, SQL_DEFAULTS.with_overrides(**options))
