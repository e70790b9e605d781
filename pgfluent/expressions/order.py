"""ORDER BY expression."""

from typing import Optional

from ._bases import Expression
from .column import ColumnExpression
from ..parameters import ParameterList


class OrderExpression(Expression):
    """ORDER BY spec: one column and ascending or descending."""

    desc: bool = False
    column_expression: ColumnExpression

    def render(self, parameters: ParameterList, qualifier: Optional[str] = None) -> str:
        """Column with ``DESC`` or ``ASC`` suffix."""
        column = self.column_expression.render(parameters, qualifier)
        return f"{column} {'DESC' if self.desc else 'ASC'}"
