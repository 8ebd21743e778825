"""Text normalization primitives shared by the matcher and the ranker."""

import re

_RE_NON_WORD = re.compile(r"\W")
_RE_NEWLINE_VARIANTS = re.compile(r"\\n|\r\n")


def strip_non_word(text: str) -> str:
    """Remove every non-word character from *text*.

    >>> strip_non_word("D.R.I.")
    'DRI'
    """
    return _RE_NON_WORD.sub("", text)


def replace_non_word(text: str, repl: str = " ") -> str:
    """Replace every non-word character in *text* with *repl*.

    >>> replace_non_word("c4:0 stands for?")
    'c4 0 stands for '
    """
    return _RE_NON_WORD.sub(repl, text)


def abbreviation_key(abbr: str) -> str:
    """Return the corpus key for an abbreviation's display form."""
    return strip_non_word(abbr).lower()


def normalize_newlines(text: str) -> str:
    """Collapse literal ``\\n`` escapes and CRLF to ``\\n``, then trim."""
    return _RE_NEWLINE_VARIANTS.sub("\n", text).strip()
