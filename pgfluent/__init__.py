"""pgfluent: a chainable, Supabase-style query builder for PostgreSQL."""

from .client import Client, create_client
from .connection import AsyncpgConnector, Connector, connect
from .errors import (
    ConfigurationError,
    EmptyUpdateError,
    ExecutionError,
    NoOperationError,
    PgFluentError,
    QueryError,
    RowNotFoundError,
    RowShapeError,
    UnsupportedOperatorError,
)
from .query import (
    CompiledStatement,
    DeleteQuery,
    InsertQuery,
    QueryBuilder,
    SelectQuery,
    UpdateQuery,
    UpsertQuery,
)
from .result import Result
