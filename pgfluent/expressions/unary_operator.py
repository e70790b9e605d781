"""Unary operator expression."""

from typing import Optional

from ._bases import ArgumentedExpression
from ..parameters import ParameterList


class UnaryOperatorExpression(ArgumentedExpression):
    """Single-argument operator, prefix or postfix (e.g. ``NOT x``, ``x IS NULL``)."""

    postfix: bool = False
    """If True, render as ``argument symbol``; else ``symbol argument``."""

    def render(self, parameters: ParameterList, qualifier: Optional[str] = None) -> str:
        argument = self._argument_to_sql(self.arguments[0], parameters, qualifier)
        if self.postfix:
            return f"{argument} {self.symbol}"
        return f"{self.symbol} {argument}"
