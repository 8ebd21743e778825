"""Abbreviation expansion."""

from .matcher import (
    AbbreviationMatcher,
    abbreviations,
    abbreviations_csv,
    abbreviations_sql,
    build_corpus,
    build_pattern,
    depluralize,
    load_abbreviations,
    normalize_text,
)

__all__ = [
    "AbbreviationMatcher",
    "abbreviations",
    "abbreviations_csv",
    "abbreviations_sql",
    "build_corpus",
    "build_pattern",
    "depluralize",
    "load_abbreviations",
    "normalize_text",
]
