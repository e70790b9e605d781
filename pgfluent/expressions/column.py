"""Column expression for referencing a single column, or a key inside a JSON column."""

from typing import Optional

from ._bases import Expression
from ..dialects import JSON_PATH_SEPARATOR
from ..parameters import ParameterList


class ColumnExpression(Expression):
    """Reference to a column of the queried table.

    A name containing ``->`` (e.g. ``metadata->plan``) addresses a key of a
    JSON column and renders as a text extraction; any other name renders as a
    quoted identifier.
    """

    name: str

    @property
    def is_json_path(self) -> bool:
        return JSON_PATH_SEPARATOR in self.name

    @property
    def renders_text(self) -> bool:
        return self.is_json_path

    def render(self, parameters: ParameterList, qualifier: Optional[str] = None) -> str:
        dialect = parameters.dialect
        sql = dialect.json_path(self.name) if self.is_json_path else dialect.quote(self.name)
        if qualifier:
            return f"{dialect.quote(qualifier)}.{sql}"
        return sql

    @property
    def asc(self):
        from .order import OrderExpression
        return OrderExpression(column_expression=self, desc=False)

    @property
    def desc(self):
        """Order by this column descending (for use in ``order(...)``)."""
        from .order import OrderExpression
        return OrderExpression(column_expression=self, desc=True)
