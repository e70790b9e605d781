"""PostgreSQL dialect."""

import logging
from typing import Any, ClassVar

from .base import Dialect

logger = logging.getLogger(__name__)

JSON_PATH_SEPARATOR = "->"


class PostgresDialect(Dialect):
    """Dialect for PostgreSQL (schemes postgresql, postgres)."""

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ("postgresql", "postgres")

    def quote(self, identifier: str) -> str:
        """Double-quote an identifier, doubling any embedded double quote."""
        escaped = identifier.replace('"', '""')
        return f'"{escaped}"'

    def placeholder(self, position: int) -> str:
        return f"${position}"

    def literal(self, text: str) -> str:
        """Single-quoted string literal (used for JSON keys only, never for values)."""
        escaped = text.replace("'", "''")
        return f"'{escaped}'"

    def json_path(self, path: str) -> str:
        """``metadata->key`` -> ``"metadata"->>'key'``; ``a->b->c`` -> ``"a"->'b'->>'c'``."""
        column, *keys = [part.strip() for part in path.split(JSON_PATH_SEPARATOR)]
        sql = self.quote(column)
        for key in keys[:-1]:
            sql += "->" + self.literal(key)
        return sql + "->>" + self.literal(keys[-1])

    async def create_pool(self, url: str, **options: Any):
        import asyncpg  # pylint: disable=import-outside-toplevel
        logger.info("Creating PostgreSQL connection pool (max_size=%s)", options.get("max_size"))
        return await asyncpg.create_pool(dsn=url, **options)
