"""INFOODS tagname resolution."""

from .ranker import (
    TagnameRanker,
    build_corpus,
    build_index,
    load_tagnames,
    tagnames,
    tagnames_csv,
    tagnames_sql,
)

__all__ = [
    "TagnameRanker",
    "build_corpus",
    "build_index",
    "load_tagnames",
    "tagnames",
    "tagnames_csv",
    "tagnames_sql",
]
