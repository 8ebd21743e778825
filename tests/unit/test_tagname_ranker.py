"""Unit tests for tagname ranking.

Test Coverage:
- Corpus construction (newline normalization, trimming)
- Tie selection on distinct matched-term count
- Placeholder entries for references missing from the corpus
- Unloaded ranker and load memoization
"""

from collections.abc import Mapping
from pathlib import Path

import pytest

from food_terms.exceptions import CorpusLoadError
from food_terms.schemas import TagnameEntry
from food_terms.search import SearchEngine, SearchHit
from food_terms.tagname import (
    TagnameRanker,
    build_corpus,
    build_index,
    load_tagnames,
    tagnames,
    tagnames_csv,
)
from food_terms.tagname import ranker as ranker_module

TIE_CSV = """\
code,name,synonyms,unit,tables,comments,examples
GL,green leafy,,g,,,
LV,leafy vegetable,,g,,,
GB,green bean,,g,,,
"""


class FixedEngine(SearchEngine):
    """Search engine returning canned hits."""

    def __init__(self, hits: list[SearchHit]) -> None:
        self.hits = hits
        self.documents: dict[str, Mapping[str, str]] = {}

    def add(self, ref: str, fields: Mapping[str, str]) -> None:
        self.documents[ref] = fields

    def build(self) -> None:
        pass

    def search(self, query: str) -> list[SearchHit]:
        return list(self.hits)

    def __len__(self) -> int:
        return len(self.documents)


class TestBuildCorpus:
    """Tests for corpus construction from rows."""

    def test_fields_normalized_and_trimmed(self) -> None:
        """Newline variants collapse to \\n and values are trimmed."""
        corpus = build_corpus(
            [{"code": " VITC ", "name": "vitamin C", "comments": "a\\nb\r\nc "}]
        )

        entry = corpus["VITC"]
        assert entry.code == "VITC"
        assert entry.comments == "a\nb\nc"
        assert entry.unit == ""

    def test_rows_without_code_skipped(self) -> None:
        """Rows need a code to be referenced."""
        corpus = build_corpus([{"code": "", "name": "orphan"}])

        assert corpus == {}


class TestBuildIndex:
    """Tests for index construction."""

    def test_documents_indexed_by_code_with_cleaned_text(self) -> None:
        """Name and synonyms have non-word characters replaced by spaces."""
        engine = FixedEngine([])
        corpus = build_corpus(
            [{"code": "F4D0", "name": "fatty acid 4:0", "synonyms": "C4:0"}]
        )

        build_index(corpus, lambda: engine)

        assert engine.documents == {
            "F4D0": {"code": "F4D0", "name": "fatty acid 4 0", "synonyms": "C4 0"}
        }


class TestTagnameSearch:
    """Tests for querying a loaded ranker."""

    @pytest.fixture
    async def ranker(self, tagnames_csv: Path) -> TagnameRanker:
        return await load_tagnames(tagnames_csv)

    @pytest.mark.asyncio
    async def test_exact_name(self, ranker: TagnameRanker) -> None:
        """The full component name resolves to its code."""
        results = tagnames(ranker, "vitamin c")

        assert results[0].code == "VITC"

    @pytest.mark.asyncio
    async def test_reordered_hyphenated_name(self, ranker: TagnameRanker) -> None:
        """Word order and hyphens do not matter."""
        results = tagnames(ranker, "c-vitamin")

        assert results[0].code == "VITC"

    @pytest.mark.asyncio
    async def test_synonym_match(self, ranker: TagnameRanker) -> None:
        """Synonyms are searchable."""
        results = tagnames(ranker, "what is butyric acid?")

        assert [entry.code for entry in results] == ["F4D0F"]

    @pytest.mark.asyncio
    async def test_punctuated_synonym(self, ranker: TagnameRanker) -> None:
        """Punctuated names like C4:0 match after cleaning."""
        results = tagnames(ranker, "c4:0 stands for?")

        assert results[0].code == "F4D0"

    @pytest.mark.asyncio
    async def test_returns_full_entries(self, ranker: TagnameRanker) -> None:
        """Results carry every corpus field."""
        entry = tagnames(ranker, "VITC")[0]

        assert entry.unit == "mg"
        assert entry.tables == "USDA 523, EA, SWD"
        assert entry.comments == "Reduced and\noxidized forms."

    @pytest.mark.asyncio
    async def test_every_entry_reachable_by_code(self, ranker: TagnameRanker) -> None:
        """Querying a code returns that entry among the results."""
        assert ranker.corpus is not None
        for code in ranker.corpus:
            assert code in [entry.code for entry in tagnames(ranker, code)], code

    @pytest.mark.asyncio
    async def test_no_match_returns_empty(self, ranker: TagnameRanker) -> None:
        """Unrelated or stop-word-only text gives no results."""
        assert tagnames(ranker, "zirconium") == []
        assert tagnames(ranker, "what is it?") == []
        assert tagnames(ranker, "") == []

    @pytest.mark.asyncio
    async def test_ties_at_best_count_all_returned(self, write_csv) -> None:
        """Entries tied at the highest term count are all returned; fewer matches are dropped."""
        ranker = await load_tagnames(write_csv(TIE_CSV, "tie.csv"))

        results = tagnames(ranker, "green leafy vegetable")

        assert sorted(entry.code for entry in results) == ["GL", "LV"]

    @pytest.mark.asyncio
    async def test_engine_order_preserved(self, tagnames_csv: Path) -> None:
        """Tied hits keep the engine's order."""
        engine = FixedEngine(
            [
                SearchHit(ref="VITA", score=2.0, matched_terms={"a": {}, "b": {}}),
                SearchHit(ref="CA", score=1.5, matched_terms={"a": {}}),
                SearchHit(ref="VITC", score=1.0, matched_terms={"a": {}, "b": {}}),
            ]
        )
        ranker = TagnameRanker(tagnames_csv, engine_factory=lambda: engine)
        await ranker.load()

        results = ranker.search("anything")

        assert [entry.code for entry in results] == ["VITA", "VITC"]

    @pytest.mark.asyncio
    async def test_missing_reference_gives_placeholder(self, tagnames_csv: Path) -> None:
        """A hit whose code is not in the corpus yields an empty entry."""
        engine = FixedEngine([SearchHit(ref="GONE", score=1.0, matched_terms={"x": {}})])
        ranker = TagnameRanker(tagnames_csv, engine_factory=lambda: engine)
        await ranker.load()

        assert ranker.search("gone") == [TagnameEntry()]


class TestUnloadedRanker:
    """Tests for queries before the corpus is loaded."""

    def test_query_before_load_returns_empty(self) -> None:
        """No implicit load, no error."""
        ranker = TagnameRanker()

        assert not ranker.loaded
        assert ranker.search("vitamin c") == []
        assert ranker.corpus is None
        assert ranker.index is None


class TestLoad:
    """Tests for load memoization and failures."""

    @pytest.mark.asyncio
    async def test_second_load_does_not_reread(
        self, tagnames_csv: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Loading twice returns the same corpus and reads the source once."""
        calls: list[str] = []
        real_load_csv = ranker_module.load_csv

        async def counting_load_csv(source, *args, **kwargs):
            calls.append(str(source))
            return await real_load_csv(source, *args, **kwargs)

        monkeypatch.setattr(ranker_module, "load_csv", counting_load_csv)
        ranker = TagnameRanker(tagnames_csv)

        first = await ranker.load()
        second = await ranker.load()

        assert first is second
        assert calls == [str(tagnames_csv)]

    @pytest.mark.asyncio
    async def test_failed_load_leaves_ranker_empty(self, write_csv) -> None:
        """A malformed source raises and nothing is cached."""
        ranker = TagnameRanker(write_csv("code,name\nVITC,vitamin C\n"))

        with pytest.raises(CorpusLoadError, match="synonyms"):
            await ranker.load()

        assert not ranker.loaded
        assert ranker.search("vitamin c") == []

    def test_csv_locator_defaults_to_bundled_file(self) -> None:
        """Without an override the bundled CSV is used."""
        locator = tagnames_csv()

        assert locator.endswith("tagnames.csv")
        assert Path(locator).is_file()
