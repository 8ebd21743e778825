"""Lookup of food-science abbreviations and INFOODS tagnames."""

from .abbreviation import (
    AbbreviationMatcher,
    abbreviations,
    abbreviations_csv,
    abbreviations_sql,
    load_abbreviations,
)
from .exceptions import CorpusLoadError, FoodTermsError
from .schemas import AbbreviationEntry, TagnameEntry
from .sql import SetupTableOptions, setup_table
from .tagname import TagnameRanker, load_tagnames, tagnames, tagnames_csv, tagnames_sql

__version__ = "0.1.0"

__all__ = [
    "AbbreviationEntry",
    "AbbreviationMatcher",
    "CorpusLoadError",
    "FoodTermsError",
    "SetupTableOptions",
    "TagnameEntry",
    "TagnameRanker",
    "abbreviations",
    "abbreviations_csv",
    "abbreviations_sql",
    "load_abbreviations",
    "load_tagnames",
    "setup_table",
    "tagnames",
    "tagnames_csv",
    "tagnames_sql",
]
