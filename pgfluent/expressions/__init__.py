"""SQL expression types for WHERE and ORDER BY clauses.

Filters build small expression trees (``ColumnExpression(name="age") >= 18``);
each node renders itself with ``render(parameters)``, binding literal values
into the statement's ``ParameterList`` in the order they appear.
"""

from ._bases import ArgumentedExpression, Expression
from .column import ColumnExpression
from .nary_operator import NaryOperatorExpression
from .order import OrderExpression
from .unary_operator import UnaryOperatorExpression

__all__ = [
    "ArgumentedExpression",
    "ColumnExpression",
    "Expression",
    "NaryOperatorExpression",
    "OrderExpression",
    "UnaryOperatorExpression",
]
