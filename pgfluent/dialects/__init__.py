"""Database dialects. Only PostgreSQL is supported."""

from .base import Dialect
from .postgres import JSON_PATH_SEPARATOR, PostgresDialect

_DIALECT_CLASSES: tuple[type[Dialect], ...] = (
    PostgresDialect,
)


def get_dialect_for_scheme(scheme: str) -> Dialect:
    """Return a Dialect instance for the given URL scheme (e.g. 'postgresql', 'postgresql+asyncpg')."""
    normalized = (scheme or "").split("+")[0].lower()
    for dialect_cls in _DIALECT_CLASSES:
        if normalized in dialect_cls.SUPPORTED_SCHEMA:
            return dialect_cls()
    raise ValueError(f"Unsupported database scheme: {scheme}")


__all__ = [
    "Dialect",
    "JSON_PATH_SEPARATOR",
    "PostgresDialect",
    "get_dialect_for_scheme",
]
