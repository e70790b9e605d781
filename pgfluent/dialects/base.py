"""Base Dialect type: subclasses render identifiers and placeholders and open pools for one engine."""

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from pydantic import BaseModel


class Dialect(BaseModel, ABC):
    """Base for database dialects."""

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    SUPPORTED_SCHEMA: ClassVar[tuple[str, ...]] = ()
    """URL schemes this dialect handles (e.g. ('postgresql', 'postgres'))."""

    @abstractmethod
    def quote(self, identifier: str) -> str:
        """Quote a table or column name."""
        ...  # pylint: disable=unnecessary-ellipsis

    @abstractmethod
    def placeholder(self, position: int) -> str:
        """Render the placeholder for the 1-based bound parameter at ``position``."""
        ...  # pylint: disable=unnecessary-ellipsis

    @abstractmethod
    def json_path(self, path: str) -> str:
        """Render a ``column->key`` reference as a text extraction."""
        ...  # pylint: disable=unnecessary-ellipsis

    @abstractmethod
    async def create_pool(self, url: str, **options: Any) -> Any:
        """Return a new driver connection pool for the given URL."""
        ...  # pylint: disable=unnecessary-ellipsis
