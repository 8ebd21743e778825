"""SQL emission for loaded corpora.

Builds a PostgreSQL script that creates a table for a corpus and seeds it
with the corpus rows. The script is returned as a string and never executed.

Generated script (in order):
1. CREATE TABLE IF NOT EXISTS, with an optional weighted full-text search
   column (GENERATED ALWAYS AS setweight(to_tsvector(...)) STORED)
2. CREATE INDEX IF NOT EXISTS per column (when ``index`` is set) and a GIN
   index on the search column
3. A single multi-row INSERT
"""

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from sqlalchemy import (
    Boolean,
    Column,
    Computed,
    Float,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    insert,
)
from sqlalchemy.dialects import postgresql
from sqlalchemy.dialects.postgresql import TSVECTOR
from sqlalchemy.engine import Dialect
from sqlalchemy.schema import CreateIndex, CreateTable
from sqlalchemy.types import TypeEngine

from food_terms.config import settings

RowData = Mapping[str, Any]

COLUMN_TYPES: dict[str, type[TypeEngine[Any]]] = {
    "TEXT": Text,
    "VARCHAR": String,
    "INT": Integer,
    "INTEGER": Integer,
    "REAL": Float,
    "FLOAT": Float,
    "BOOLEAN": Boolean,
}

TSVECTOR_WEIGHTS = frozenset("ABCD")

_RE_IDENTIFIER = re.compile(r"^\w+$")


@dataclass(frozen=True)
class SetupTableOptions:
    """Options for :func:`setup_table`.

    Attributes:
        pk: Primary key column
        index: Create a b-tree index on every non-key column
        tsvector: Column -> weight (A-D) feeding the full-text search column
        tsvector_column: Name of the generated full-text search column
        text_search_config: Language passed to to_tsvector(); defaults to
            ``settings.sql_text_search_config``
    """

    pk: str | None = None
    index: bool = False
    tsvector: dict[str, str] = field(default_factory=dict)
    tsvector_column: str = "search_vector"
    text_search_config: str | None = None

    def with_overrides(self, **overrides: Any) -> "SetupTableOptions":
        """Return a copy with the given fields replaced.

        Raises:
            TypeError: If an override names an unknown option
        """
        return replace(self, **overrides)


def setup_table(
    table: str,
    columns: Mapping[str, str],
    rows: Iterable[RowData],
    options: SetupTableOptions | None = None,
) -> str:
    """Build a PostgreSQL script that creates and populates a table.

    Args:
        table: Table name
        columns: Column name -> SQL type name (TEXT, INTEGER, ...)
        rows: Row mappings; keys outside ``columns`` are ignored and missing
            keys become NULL
        options: Key, index and full-text search options

    Returns:
        Semicolon-terminated statements separated by newlines

    Raises:
        ValueError: On unknown column types, a primary key or tsvector column
            not in ``columns``, an invalid weight, or an invalid text search config
    """
    opt = options or SetupTableOptions()
    # named paramstyle keeps literal "%" undoubled
    dialect = postgresql.dialect(paramstyle="named")

    if opt.pk is not None and opt.pk not in columns:
        raise ValueError(f"Primary key column {opt.pk!r} is not a table column")

    metadata = MetaData()
    table_columns = [
        Column(name, _column_type(sql_type), primary_key=(name == opt.pk))
        for name, sql_type in columns.items()
    ]
    if opt.tsvector:
        table_columns.append(
            Column(
                opt.tsvector_column,
                TSVECTOR,
                Computed(_tsvector_expression(opt, columns, dialect), persisted=True),
            )
        )
    sa_table = Table(table, metadata, *table_columns)

    statements = [CreateTable(sa_table, if_not_exists=True).compile(dialect=dialect)]

    if opt.index:
        for name in columns:
            if name == opt.pk:
                continue
            index = Index(f"ix_{table}_{name}", sa_table.c[name])
            statements.append(CreateIndex(index, if_not_exists=True).compile(dialect=dialect))
    if opt.tsvector:
        gin = Index(
            f"ix_{table}_{opt.tsvector_column}",
            sa_table.c[opt.tsvector_column],
            postgresql_using="gin",
        )
        statements.append(CreateIndex(gin, if_not_exists=True).compile(dialect=dialect))

    values = [{name: row.get(name) for name in columns} for row in rows]
    if values:
        statements.append(
            insert(sa_table)
            .values(values)
            .compile(dialect=dialect, compile_kwargs={"literal_binds": True})
        )

    return "".join(f"{str(statement).strip()};\n" for statement in statements)


def _column_type(sql_type: str) -> type[TypeEngine[Any]]:
    try:
        return COLUMN_TYPES[sql_type.upper()]
    except KeyError:
        raise ValueError(f"Unsupported column type {sql_type!r}") from None


def _tsvector_expression(
    opt: SetupTableOptions,
    columns: Mapping[str, str],
    dialect: Dialect,
) -> str:
    config = opt.text_search_config or settings.sql_text_search_config
    if not _RE_IDENTIFIER.match(config):
        raise ValueError(f"Invalid text search config {config!r}")

    quote = dialect.identifier_preparer.quote
    parts = []
    for name, weight in opt.tsvector.items():
        if name not in columns:
            raise ValueError(f"Full-text search column {name!r} is not a table column")
        if weight not in TSVECTOR_WEIGHTS:
            raise ValueError(f"Invalid tsvector weight {weight!r} for column {name!r}")
        parts.append(
            f"setweight(to_tsvector('{config}', coalesce({quote(name)}, '')), '{weight}')"
        )
    return " || ".join(parts)
