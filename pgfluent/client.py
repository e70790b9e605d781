"""Entry point: a client bound to one connector hands out query chains."""

import logging
from typing import Any, Optional

from .connection import Connector, connect
from .dialects import Dialect, PostgresDialect
from .query import QueryBuilder
from .settings import Settings

logger = logging.getLogger(__name__)


class Client:
    """Starts chains against the tables reachable through ``connector``.

    Usage::

        client = create_client()
        result = await client.from_("users").select("*").eq("active", True).order("name").limit(10)
        if result.error:
            ...
    """

    def __init__(self, connector: Connector, dialect: Optional[Dialect] = None):
        self.connector = connector
        self.dialect = dialect or getattr(connector, "dialect", None) or PostgresDialect()

    def from_(self, table: str) -> QueryBuilder:
        """Start a new, independent chain on ``table``."""
        if not isinstance(table, str) or not table:
            raise ValueError(f"table must be a non-empty string; got {table!r}")
        return QueryBuilder(connector=self.connector, table=table, dialect=self.dialect)

    table = from_

    async def execute(self, sql: str, *parameters: Any) -> list[dict[str, Any]]:
        """Run raw SQL with ``$n`` placeholders. Unlike chains, this raises on failure."""
        logger.debug("%s (%d parameters)", sql, len(parameters))
        return await self.connector.execute(sql, list(parameters))

    async def close(self) -> None:
        await self.connector.close()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


def create_client(
    database_url: Optional[str] = None,
    *,
    ssl: Optional[bool] = None,
    settings: Optional[Settings] = None,
) -> Client:
    """Build a client on the default asyncpg connector.

    Raises:
        ConfigurationError: If no database URL is configured.
    """
    return Client(connect(database_url, ssl=ssl, settings=settings))
