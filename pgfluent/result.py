"""The ``{data, error, count}`` envelope every executed chain resolves to."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict

from .errors import QueryError


class Result(BaseModel):
    """Outcome of one executed chain.

    ``data`` is a row dict, a list of row dicts, or ``None``. ``error`` is
    ``None`` on success. ``count`` is only set for ``select(..., count="exact")``.
    Callers branch on ``error``; executing a chain never raises.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    data: Any = None
    error: Optional[QueryError] = None
    count: Optional[int] = None

    @classmethod
    def failure(cls, error: QueryError) -> "Result":
        return cls(data=None, error=error, count=None)

    @property
    def ok(self) -> bool:
        return self.error is None
