"""Positional parameter binding.

Placeholders are numbered in the order values are bound, starting at 1, and
numbers are never reused. Filters are bound before mutation values, so an
UPDATE with N filters and M columns uses ``$1..$N`` for the filters and
``$N+1..$N+M`` for the new values.
"""

from typing import Any, Iterable

from .dialects import Dialect, PostgresDialect


class ParameterList:
    """Ordered bound values for one statement."""

    def __init__(self, dialect: Dialect | None = None, values: Iterable[Any] = ()):
        self.dialect = dialect or PostgresDialect()
        self._values: list[Any] = list(values)

    def bind(self, value: Any) -> str:
        """Append ``value`` and return the placeholder that references it."""
        self._values.append(value)
        return self.dialect.placeholder(len(self._values))

    @property
    def values(self) -> list[Any]:
        return list(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ParameterList({self._values!r})"
