"""Base expression types for SQL expression trees."""

from __future__ import annotations
from typing import Any, Optional, Tuple

from pydantic import BaseModel, Field as PydanticField

from ..parameters import ParameterList
from ..utils import json_text


class Expression(BaseModel):
    """Base type for all SQL expression nodes.

    Subclasses implement ``render()``, which returns the SQL fragment and binds
    literal values into the given ``ParameterList`` in placeholder order.
    ``qualifier`` is the table name to prefix column references with, if any.
    """

    model_config = {"arbitrary_types_allowed": True}

    def render(self, parameters: ParameterList, qualifier: Optional[str] = None) -> str:
        """SQL fragment for this expression."""
        raise NotImplementedError("Subclasses must implement `render`")

    @property
    def renders_text(self) -> bool:
        """True when the rendered SQL is text extracted from JSON (``->>``)."""
        return False

    def is_(self, other: Any):
        """Build an IS expression: ``IS NULL``, ``IS TRUE``/``IS FALSE``, or ``IS NOT DISTINCT FROM``.

        JSON text cannot be tested with ``IS TRUE``, so booleans compare with
        ``IS NOT DISTINCT FROM 'true'`` there.
        """
        if other is None:
            return self.is_null()
        if isinstance(other, bool) and not self.renders_text:
            from .unary_operator import UnaryOperatorExpression
            return UnaryOperatorExpression(symbol=f"IS {str(other).upper()}", arguments=(self,), postfix=True)
        from .nary_operator import NaryOperatorExpression
        return NaryOperatorExpression(symbol="IS NOT DISTINCT FROM", arguments=(self, other))

    def is_not(self, other: Any):
        """Negated counterpart of ``is_()``."""
        if other is None:
            return self.is_not_null()
        if isinstance(other, bool) and not self.renders_text:
            from .unary_operator import UnaryOperatorExpression
            return UnaryOperatorExpression(symbol=f"IS NOT {str(other).upper()}", arguments=(self,), postfix=True)
        from .nary_operator import NaryOperatorExpression
        return NaryOperatorExpression(symbol="IS DISTINCT FROM", arguments=(self, other))

    def is_null(self):
        """Build an IS NULL expression."""
        from .unary_operator import UnaryOperatorExpression
        return UnaryOperatorExpression(symbol="IS NULL", arguments=(self,), postfix=True)

    def is_not_null(self):
        """Build an IS NOT NULL expression."""
        from .unary_operator import UnaryOperatorExpression
        return UnaryOperatorExpression(symbol="IS NOT NULL", arguments=(self,), postfix=True)

    def __eq__(self, other: Any):
        from .nary_operator import NaryOperatorExpression
        return NaryOperatorExpression(symbol="=", arguments=(self, other))

    def __ne__(self, other: Any):
        from .nary_operator import NaryOperatorExpression
        return NaryOperatorExpression(symbol="!=", arguments=(self, other))

    def __lt__(self, other: Any):
        from .nary_operator import NaryOperatorExpression
        return NaryOperatorExpression(symbol="<", arguments=(self, other))

    def __le__(self, other: Any):
        from .nary_operator import NaryOperatorExpression
        return NaryOperatorExpression(symbol="<=", arguments=(self, other))

    def __gt__(self, other: Any):
        from .nary_operator import NaryOperatorExpression
        return NaryOperatorExpression(symbol=">", arguments=(self, other))

    def __ge__(self, other: Any):
        from .nary_operator import NaryOperatorExpression
        return NaryOperatorExpression(symbol=">=", arguments=(self, other))


class ArgumentedExpression(Expression):
    """Base for expressions that have a symbol and a tuple of arguments.

    Arguments that are expressions are rendered in place; anything else is a
    literal and gets bound as a parameter. Literals compared with JSON text
    (``"meta"->>'count' = $1``) are bound as their JSON text, since the
    placeholder is typed ``text``.
    """

    symbol: str
    arguments: Tuple[Any, ...] = PydanticField(default_factory=tuple)

    @property
    def compares_text(self) -> bool:
        return any(isinstance(a, Expression) and a.renders_text for a in self.arguments)

    def _argument_to_sql(self, argument: Any, parameters: ParameterList, qualifier: Optional[str]) -> str:
        """Render one argument: expression's SQL, or a placeholder for literals."""
        if isinstance(argument, Expression):
            return argument.render(parameters, qualifier)
        if self.compares_text:
            argument = json_text(argument)
        return parameters.bind(argument)
