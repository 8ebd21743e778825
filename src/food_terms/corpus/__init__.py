"""Corpus source loading."""

from .loader import CsvRow, is_url, load_csv, parse_csv, read_source

__all__ = [
    "CsvRow",
    "is_url",
    "load_csv",
    "parse_csv",
    "read_source",
]
