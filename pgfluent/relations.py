"""Embedded relations in select strings.

``select("*, products(title, price)")`` asks for a LEFT JOIN on ``products``
through the ``product_id`` column of the queried table; the joined columns
come back nested under ``row["products"]``. Only one relation, one level
deep, is supported.
"""

import re
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict

from .dialects import Dialect

_EMBEDDED_RELATION = re.compile(r",?\s*(\w+)\(([^)]+)\)")


def singularize(name: str) -> str:
    """Drop one trailing ``s`` (``products`` -> ``product``)."""
    return name[:-1] if name.endswith("s") else name


class EmbeddedRelation(BaseModel):
    """A one-level foreign key join parsed out of a select string."""

    model_config = ConfigDict(frozen=True)

    table: str
    columns: tuple[str, ...]
    foreign_key: str

    @classmethod
    def parse(cls, columns: str) -> tuple[str, Optional["EmbeddedRelation"]]:
        """Split ``columns`` into the outer projection and the embedded relation, if any.

        >>> EmbeddedRelation.parse("*, products(title, price)")
        ('*', EmbeddedRelation(table='products', columns=('title', 'price'), foreign_key='product_id'))

        Raises:
            ValueError: If more than one relation is embedded.
        """
        matches = list(_EMBEDDED_RELATION.finditer(columns))
        if not matches:
            return columns, None
        if len(matches) > 1:
            names = ", ".join(m.group(1) for m in matches)
            raise ValueError(f"Only one embedded relation per select is supported; got {names}")
        match = matches[0]
        table, requested = match.group(1), match.group(2)
        outer = _EMBEDDED_RELATION.sub("", columns, count=1).strip().rstrip(",").strip() or "*"
        relation = cls(
            table=table,
            columns=tuple(c.strip() for c in requested.split(",") if c.strip()),
            foreign_key=f"{singularize(table)}_id",
        )
        return outer, relation

    def alias(self, column: str) -> str:
        return f"{self.table}_{column}"

    def sql_columns(self, dialect: Dialect) -> list[str]:
        """Joined columns, aliased ``<table>_<column>`` to avoid collisions with the base table."""
        return [
            f"{dialect.quote(self.table)}.{dialect.quote(c)} AS {dialect.quote(self.alias(c))}"
            for c in self.columns
        ]

    def sql_join(self, base_table: str, dialect: Dialect) -> str:
        table = dialect.quote(self.table)
        return (
            f"LEFT JOIN {table} ON "
            f"{dialect.quote(base_table)}.{dialect.quote(self.foreign_key)} = {table}.{dialect.quote('id')}"
        )

    def nest(self, row: Mapping[str, Any]) -> dict[str, Any]:
        """Move the aliased columns of ``row`` into a nested dict keyed by the relation name."""
        main = dict(row)
        nested = {}
        for column in self.columns:
            nested[column] = main.pop(self.alias(column), None)
        main[self.table] = nested
        return main
