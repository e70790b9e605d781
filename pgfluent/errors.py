"""Exception types.

Setup problems (missing database URL, unsupported operators in a chain) are
raised. Everything that goes wrong once a chain executes is carried inside the
result envelope as a ``QueryError`` instance instead.
"""

from typing import Optional


class PgFluentError(Exception):
    """Root of all pgfluent exceptions."""
    pass


class ConfigurationError(PgFluentError, ValueError):
    """No usable database URL, or a URL with an unsupported scheme."""
    pass


class UnsupportedOperatorError(PgFluentError, ValueError):
    """``not_()`` was called with an operator it cannot negate."""
    pass


class QueryError(PgFluentError):
    """Error returned in ``Result.error``.

    ``message`` is always set; ``code`` holds the SQLSTATE when the driver
    reported one.
    """

    default_message = "Query failed"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.default_message
        self.code = code
        super().__init__(self.message)

    def __eq__(self, other):
        if not isinstance(other, QueryError):
            return NotImplemented
        return type(self) is type(other) and (self.message, self.code) == (other.message, other.code)

    def __hash__(self):
        return hash((type(self), self.message, self.code))


class NoOperationError(QueryError):
    default_message = "No operation specified"


class RowNotFoundError(QueryError):
    default_message = "Row not found"


class RowShapeError(QueryError, ValueError):
    """Rows passed to insert/upsert do not all have the same columns."""
    default_message = "All rows must have the same columns"


class EmptyUpdateError(QueryError, ValueError):
    default_message = "Update requires at least one column"


class ExecutionError(QueryError):
    """The database (or the connection to it) rejected a statement.

    The driver exception is chained as ``__cause__``.
    """

    @classmethod
    def from_exception(cls, error: BaseException) -> "ExecutionError":
        """Wrap a driver exception, keeping its SQLSTATE when present (asyncpg exposes ``sqlstate``)."""
        code = getattr(error, "sqlstate", None)
        instance = cls(str(error) or type(error).__name__, code=code)
        instance.__cause__ = error
        return instance


__all__ = [
    "PgFluentError",
    "ConfigurationError",
    "UnsupportedOperatorError",
    "QueryError",
    "NoOperationError",
    "RowNotFoundError",
    "RowShapeError",
    "EmptyUpdateError",
    "ExecutionError",
]
