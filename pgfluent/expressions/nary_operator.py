"""N-ary operator expression."""

from typing import Optional

from ._bases import ArgumentedExpression
from ..parameters import ParameterList


class NaryOperatorExpression(ArgumentedExpression):
    """N-argument infix operator (e.g. ``"age" >= $1``).

    Rendered without parentheses: WHERE clauses are flat and AND-joined.
    """

    def render(self, parameters: ParameterList, qualifier: Optional[str] = None) -> str:
        if not self.symbol:
            raise ValueError("NaryOperatorExpression must have a symbol")
        if not self.arguments:
            raise ValueError("NaryOperatorExpression must have at least one argument")
        parts = [self._argument_to_sql(a, parameters, qualifier) for a in self.arguments]
        return f" {self.symbol} ".join(parts)
