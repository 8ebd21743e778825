"""Pydantic schemas for corpus entries."""

from .abbreviation import AbbreviationEntry
from .tagname import TagnameEntry

__all__ = [
    "AbbreviationEntry",
    "TagnameEntry",
]
