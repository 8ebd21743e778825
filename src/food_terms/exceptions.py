"""Custom exceptions for corpus loading and lookup."""


class FoodTermsError(Exception):
    """Base exception for food-terms errors."""

    pass


class CorpusLoadError(FoodTermsError):
    """Corpus source unreachable, unreadable, or malformed.

    The original low-level error (OSError, httpx.HTTPError, csv.Error, ...)
    is preserved as ``__cause__``.
    """

    def __init__(self, message: str, source: str | None = None) -> None:
        super().__init__(message)
        self.source = source
