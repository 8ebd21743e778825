"""Delimited-text corpus loading.

Sources are either local file paths or http(s) URLs. A source is a CSV
document whose first row is the header; lines starting with ``#`` are
comments and are skipped.
"""

import asyncio
import csv
import io
from collections.abc import Iterator, Sequence
from pathlib import Path

import httpx

from food_terms.exceptions import CorpusLoadError
from food_terms.logging_config import get_logger

logger = get_logger(__name__)

CsvRow = dict[str, str]

COMMENT_PREFIX = "#"


def is_url(locator: str | Path) -> bool:
    """Return True when *locator* points to an http(s) resource."""
    return str(locator).startswith(("http://", "https://"))


async def read_source(
    locator: str | Path,
    client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> str:
    """Read the raw text of a corpus source.

    Args:
        locator: Local path or http(s) URL
        client: Optional HTTP client (a temporary one is created otherwise)
        timeout: Request timeout in seconds for URL sources

    Returns:
        Decoded source text

    Raises:
        CorpusLoadError: If the source cannot be fetched or decoded
    """
    source = str(locator)
    if is_url(source):
        if client is None:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as own_client:
                return await _fetch(own_client, source)
        return await _fetch(client, source)

    path = Path(source)
    try:
        return await asyncio.to_thread(path.read_text, encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise CorpusLoadError(f"Failed to read {source}: {e}", source=source) from e


async def _fetch(client: httpx.AsyncClient, url: str) -> str:
    try:
        response = await client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise CorpusLoadError(
            f"HTTP error {e.response.status_code} fetching {url}", source=url
        ) from e
    except httpx.HTTPError as e:
        raise CorpusLoadError(f"Request error fetching {url}: {e}", source=url) from e
    return response.text


def parse_csv(text: str, required_columns: Sequence[str] = ()) -> list[CsvRow]:
    """Parse CSV text into a list of row dicts keyed by header name.

    A record whose first line starts with ``#`` is a comment; a ``#`` line
    inside a quoted multi-line value is data. A leading UTF-8 BOM is ignored.
    Blank rows are skipped. Missing trailing values are filled with empty
    strings and values beyond the header are dropped.

    Args:
        text: CSV document
        required_columns: Header names that must be present

    Returns:
        Rows in source order

    Raises:
        CorpusLoadError: If the document is malformed or lacks a required column
    """
    records = _read_records(text.removeprefix("\ufeff"))
    try:
        header = next(records, None)
        if header is None:
            raise CorpusLoadError("CSV source is empty")
        header = [name.strip() for name in header]

        missing = [name for name in required_columns if name not in header]
        if missing:
            raise CorpusLoadError(f"CSV header is missing columns: {', '.join(missing)}")

        rows: list[CsvRow] = []
        for values in records:
            if not values:
                continue
            padded = values + [""] * (len(header) - len(values))
            rows.append(dict(zip(header, padded)))
    except csv.Error as e:
        raise CorpusLoadError(f"Malformed CSV: {e}") from e
    return rows


def _read_records(text: str) -> Iterator[list[str]]:
    """Yield CSV records, skipping comment lines at record boundaries."""
    at_record_start = True

    def physical_lines() -> Iterator[str]:
        nonlocal at_record_start
        for line in io.StringIO(text, newline=""):
            if at_record_start and line.startswith(COMMENT_PREFIX):
                continue
            at_record_start = False
            yield line

    reader = csv.reader(physical_lines())
    while True:
        at_record_start = True
        values = next(reader, None)
        if values is None:
            return
        yield values


async def load_csv(
    locator: str | Path,
    required_columns: Sequence[str] = (),
    client: httpx.AsyncClient | None = None,
    timeout: float = 30.0,
) -> list[CsvRow]:
    """Read and parse a corpus source.

    Raises:
        CorpusLoadError: If reading or parsing fails
    """
    text = await read_source(locator, client=client, timeout=timeout)
    try:
        rows = parse_csv(text, required_columns)
    except CorpusLoadError as e:
        e.source = str(locator)
        raise
    logger.debug("csv_parsed", source=str(locator), rows=len(rows))
    return rows
