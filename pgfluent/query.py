"""Chainable query builders.

A chain starts from ``QueryBuilder`` (bound to one table, no operation yet).
Choosing ``select``, ``insert``, ``update``, ``upsert`` or ``delete`` moves it
to the matching builder type, which only exposes the methods that make sense
for that operation. Every method returns a new builder; a builder is never
modified once created, so chains can be shared and reused as templates.

Awaiting a builder (or calling ``execute()``) compiles it into one
parameterized statement, runs it through the connector, and returns a
``Result``. Execution never raises: every failure is returned in
``Result.error``.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Mapping
from typing import Any, ClassVar, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .dialects import Dialect, PostgresDialect
from .errors import (
    EmptyUpdateError,
    ExecutionError,
    NoOperationError,
    QueryError,
    RowNotFoundError,
    RowShapeError,
    UnsupportedOperatorError,
)
from .expressions import ColumnExpression, Expression, OrderExpression
from .parameters import ParameterList
from .relations import EmbeddedRelation
from .result import Result
from .utils import coerce_value

logger = logging.getLogger("pgfluent")


class Operation(str, enum.Enum):
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    UPSERT = "upsert"
    DELETE = "delete"


class CompiledStatement(BaseModel):
    """One SQL statement and its positional parameters."""

    model_config = ConfigDict(frozen=True)

    sql: str
    parameters: list[Any] = Field(default_factory=list)


def _normalize_rows(row_or_rows: Any) -> list[dict[str, Any]]:
    """Wrap a single row in a list; rows may be mappings or Pydantic models."""
    if isinstance(row_or_rows, (Mapping, BaseModel)):
        row_or_rows = [row_or_rows]
    rows = []
    for row in row_or_rows:
        if isinstance(row, BaseModel):
            rows.append(row.model_dump())
        elif isinstance(row, Mapping):
            rows.append(dict(row))
        else:
            raise TypeError(f"Rows must be mappings or Pydantic models; got {type(row)}")
    return rows


class _Chain(BaseModel):
    """State shared by every builder: target table, connector, dialect."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    OPERATION: ClassVar[Optional[Operation]] = None

    connector: Any = Field(exclude=True)
    """Object exposing ``await execute(sql, parameters) -> rows``."""
    table: str
    dialect: Dialect = Field(default_factory=PostgresDialect, exclude=True)

    def clone_query_with(self, **changes: Any):
        """Return a new builder of the same type with the given fields replaced."""
        return self.model_copy(update=changes)

    def _derive(self, builder_class: type, **fields: Any):
        """Start a builder of another type on the same table and connector."""
        return builder_class(connector=self.connector, table=self.table, dialect=self.dialect, **fields)

    @property
    def _table_sql(self) -> str:
        return self.dialect.quote(self.table)

    def compile(self) -> CompiledStatement:
        """Return the SQL statement this chain runs."""
        raise NotImplementedError("Subclasses must implement `compile`")

    async def _fetch(self, statement: CompiledStatement) -> list[dict[str, Any]]:
        logger.debug("%s (%d parameters)", statement.sql, len(statement.parameters))
        rows = await self.connector.execute(statement.sql, statement.parameters)
        return [dict(row) for row in rows]

    async def _run(self) -> Result:
        raise NotImplementedError("Subclasses must implement `_run`")

    async def execute(self) -> Result:
        """Compile and run the chain. Never raises; failures land in ``Result.error``."""
        operation = self.OPERATION.value if self.OPERATION else "query"
        try:
            return await self._run()
        except QueryError as error:
            logger.warning("%s on %s failed: %s", operation, self.table, error.message)
            return Result.failure(error)
        except Exception as error:  # pylint: disable=broad-exception-caught
            logger.warning("%s on %s failed: %s", operation, self.table, error)
            return Result.failure(ExecutionError.from_exception(error))

    def __await__(self):
        return self.execute().__await__()


class QueryBuilder(_Chain):
    """A chain bound to a table, waiting for an operation.

    Awaiting it directly resolves to a ``NoOperationError`` result.
    """

    def select(self, columns: str = "*", count: Optional[Literal["exact"]] = None) -> SelectQuery:
        """Select ``columns`` (comma-separated, ``*`` by default).

        The string may embed one relation, e.g. ``"*, products(title, price)"``,
        which LEFT JOINs ``products`` on ``<table>.product_id = products.id``
        and nests its columns under ``row["products"]``. Only one relation may
        be embedded; more raise ``ValueError``. Pass ``count="exact"`` to also
        get the total matching row count.
        """
        if count not in (None, "exact"):
            raise ValueError(f"Unsupported count option: {count!r}")
        outer, relation = EmbeddedRelation.parse(columns)
        return self._derive(SelectQuery, columns=outer, relation=relation, count_exact=count == "exact")

    def insert(self, row_or_rows: Any) -> InsertQuery:
        """Insert one row (a mapping) or several. All rows must have the same columns."""
        return self._derive(InsertQuery, rows=_normalize_rows(row_or_rows))

    def update(self, values: Mapping[str, Any]) -> UpdateQuery:
        """Update ``values`` on the rows matched by the filters that follow.

        Without filters, every row of the table is updated.
        """
        return self._derive(UpdateQuery, values=dict(values))

    def upsert(self, row_or_rows: Any, on_conflict: str = "id") -> UpsertQuery:
        """Insert rows, updating the existing row when ``on_conflict`` columns collide.

        ``on_conflict`` is a comma-separated column list. Affected rows are
        always returned.
        """
        return self._derive(UpsertQuery, rows=_normalize_rows(row_or_rows), on_conflict=on_conflict)

    def delete(self) -> DeleteQuery:
        """Delete the rows matched by the filters that follow.

        Without filters, every row of the table is deleted.
        """
        return self._derive(DeleteQuery)

    def compile(self) -> CompiledStatement:
        raise NoOperationError()

    async def _run(self) -> Result:
        raise NoOperationError()


class _Filterable(_Chain):
    """Adds AND-joined WHERE filters."""

    where_expressions: list[Expression] = Field(default_factory=list, exclude=True)

    def where(self, *expressions: Expression):
        """Append raw filter expressions (e.g. ``ColumnExpression(name="age") >= 18``)."""
        return self.clone_query_with(where_expressions=self.where_expressions + list(expressions))

    def eq(self, column: str, value: Any):
        """``column = value``"""
        return self.where(ColumnExpression(name=column) == value)

    def neq(self, column: str, value: Any):
        """``column != value``"""
        return self.where(ColumnExpression(name=column) != value)

    def gt(self, column: str, value: Any):
        return self.where(ColumnExpression(name=column) > value)

    def gte(self, column: str, value: Any):
        return self.where(ColumnExpression(name=column) >= value)

    def lt(self, column: str, value: Any):
        return self.where(ColumnExpression(name=column) < value)

    def lte(self, column: str, value: Any):
        return self.where(ColumnExpression(name=column) <= value)

    def is_(self, column: str, value: Any):
        """``column IS NULL`` when value is None; ``IS TRUE``/``IS FALSE`` for booleans."""
        return self.where(ColumnExpression(name=column).is_(value))

    def not_(self, column: str, operator: str, value: Any):
        """Negated filter. Supports ``("is", value)`` and ``("eq", value)``.

        Raises:
            UnsupportedOperatorError: For any other operator.
        """
        expression = ColumnExpression(name=column)
        if operator == "is":
            return self.where(expression.is_not(value))
        if operator == "eq":
            return self.where(expression != value)
        raise UnsupportedOperatorError(f"not_() does not support operator {operator!r} (supported: 'eq', 'is')")

    def _sql_where(self, parameters: ParameterList, qualifier: Optional[str] = None) -> str:
        """`` WHERE a AND b`` or an empty string; binds filter values into ``parameters``."""
        if not self.where_expressions:
            return ""
        conditions = [e.render(parameters, qualifier) for e in self.where_expressions]
        return " WHERE " + " AND ".join(conditions)


class SelectQuery(_Filterable):
    OPERATION: ClassVar[Operation] = Operation.SELECT

    columns: str = "*"
    relation: Optional[EmbeddedRelation] = None
    count_exact: bool = False
    order_by_expressions: list[OrderExpression] = Field(default_factory=list, exclude=True)
    limit_value: Optional[int] = None
    single_row: bool = False

    def order(self, column: str, ascending: bool = True) -> SelectQuery:
        """Append ``ORDER BY column ASC`` (or ``DESC`` when ``ascending=False``)."""
        expression = ColumnExpression(name=column)
        order = expression.asc if ascending else expression.desc
        return self.clone_query_with(order_by_expressions=self.order_by_expressions + [order])

    def limit(self, limit: int) -> SelectQuery:
        """Set LIMIT to the given non-negative integer."""
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
            raise ValueError(f"limit must be a non-negative integer; got {limit!r}")
        return self.clone_query_with(limit_value=limit)

    def single(self) -> SelectQuery:
        """Return one row as ``data``; no matching row is an error."""
        return self.clone_query_with(single_row=True, limit_value=1)

    @property
    def effective_limit(self) -> Optional[int]:
        return 1 if self.single_row else self.limit_value

    def _sql_projection(self) -> str:
        names = [c.strip() for c in self.columns.split(",") if c.strip()]
        if self.relation is None:
            if not names or names == ["*"]:
                return "*"
            return ", ".join(n if n == "*" else self.dialect.quote(n) for n in names)
        # Qualify base columns so they cannot collide with the joined table
        if not names or names == ["*"]:
            base = [f"{self._table_sql}.*"]
        else:
            base = [f"{self._table_sql}.{'*' if n == '*' else self.dialect.quote(n)}" for n in names]
        return ", ".join(base + self.relation.sql_columns(self.dialect))

    def compile(self) -> CompiledStatement:
        parameters = ParameterList(self.dialect)
        qualifier = self.table if self.relation is not None else None
        sql = f"SELECT {self._sql_projection()} FROM {self._table_sql}"
        if self.relation is not None:
            sql += " " + self.relation.sql_join(self.table, self.dialect)
        sql += self._sql_where(parameters, qualifier)
        if self.order_by_expressions:
            sql += " ORDER BY " + ", ".join(o.render(parameters, qualifier) for o in self.order_by_expressions)
        if self.effective_limit is not None:
            sql += f" LIMIT {self.effective_limit}"
        return CompiledStatement(sql=sql, parameters=parameters.values)

    def compile_count(self) -> CompiledStatement:
        """``SELECT COUNT(*)`` over the same filters and parameters, ignoring order and limit."""
        parameters = ParameterList(self.dialect)
        sql = f'SELECT COUNT(*) AS "count" FROM {self._table_sql}' + self._sql_where(parameters)
        return CompiledStatement(sql=sql, parameters=parameters.values)

    async def _run(self) -> Result:
        rows = await self._fetch(self.compile())
        if self.relation is not None:
            rows = [self.relation.nest(row) for row in rows]
        error = None
        if self.single_row:
            data = rows[0] if rows else None
            if data is None:
                error = RowNotFoundError()
        else:
            data = rows
        count = None
        if self.count_exact:
            count_rows = await self._fetch(self.compile_count())
            count = int(count_rows[0]["count"])
        return Result(data=data, error=error, count=count)


class _Mutation(_Chain):
    """Adds RETURNING support to INSERT/UPDATE/UPSERT/DELETE."""

    return_rows: bool = False
    returning_columns: str = "*"
    single_row: bool = False

    def returning(self, columns: str = "*"):
        """Return the affected rows (``RETURNING columns``) as ``data``."""
        return self.clone_query_with(return_rows=True, returning_columns=columns)

    def select(self, columns: str = "*"):
        """Alias of ``returning()``, so ``insert(...).select()`` reads like a select."""
        return self.returning(columns)

    def single(self):
        """Return the first affected row instead of a list (``None`` when there is none)."""
        return self.clone_query_with(single_row=True)

    def _sql_returning(self) -> str:
        if not self.return_rows:
            return ""
        names = [c.strip() for c in self.returning_columns.split(",") if c.strip()]
        if not names or names == ["*"]:
            return " RETURNING *"
        return " RETURNING " + ", ".join(n if n == "*" else self.dialect.quote(n) for n in names)

    def _shape(self, rows: list[dict[str, Any]]) -> Any:
        if not self.return_rows:
            return None
        if self.single_row:
            return rows[0] if rows else None
        return rows

    async def _run(self) -> Result:
        rows = await self._fetch(self.compile())
        return Result(data=self._shape(rows))


class InsertQuery(_Mutation):
    OPERATION: ClassVar[Operation] = Operation.INSERT

    rows: list[dict[str, Any]] = Field(default_factory=list)

    @property
    def column_names(self) -> list[str]:
        """Columns of the first row; every other row must have the same set."""
        if not self.rows:
            return []
        names = list(self.rows[0])
        expected = set(names)
        for index, row in enumerate(self.rows[1:], start=1):
            if set(row) != expected:
                raise RowShapeError(
                    f"Row {index} has columns {sorted(row)} but row 0 has {sorted(expected)}"
                )
        return names

    def _sql_insert(self, parameters: ParameterList) -> str:
        names = self.column_names
        tuples = []
        for row in self.rows:
            placeholders = [parameters.bind(coerce_value(row[name])) for name in names]
            tuples.append("(" + ", ".join(placeholders) + ")")
        quoted = ", ".join(self.dialect.quote(n) for n in names)
        return f"INSERT INTO {self._table_sql} ({quoted}) VALUES " + ", ".join(tuples)

    def compile(self) -> CompiledStatement:
        parameters = ParameterList(self.dialect)
        sql = self._sql_insert(parameters) + self._sql_returning()
        return CompiledStatement(sql=sql, parameters=parameters.values)

    async def _run(self) -> Result:
        if not self.rows:
            return Result()
        return await super()._run()


class UpsertQuery(InsertQuery):
    OPERATION: ClassVar[Operation] = Operation.UPSERT

    on_conflict: str = "id"
    return_rows: bool = True

    @property
    def conflict_columns(self) -> list[str]:
        return [c.strip() for c in self.on_conflict.split(",") if c.strip()]

    def compile(self) -> CompiledStatement:
        parameters = ParameterList(self.dialect)
        sql = self._sql_insert(parameters)
        conflict = self.conflict_columns
        targets = ", ".join(self.dialect.quote(c) for c in conflict)
        updates = [
            f"{self.dialect.quote(n)} = EXCLUDED.{self.dialect.quote(n)}"
            for n in self.column_names
            if n not in conflict
        ]
        if updates:
            sql += f" ON CONFLICT ({targets}) DO UPDATE SET " + ", ".join(updates)
        else:
            sql += f" ON CONFLICT ({targets}) DO NOTHING"
        sql += self._sql_returning()
        return CompiledStatement(sql=sql, parameters=parameters.values)


class UpdateQuery(_Filterable, _Mutation):
    OPERATION: ClassVar[Operation] = Operation.UPDATE

    values: dict[str, Any] = Field(default_factory=dict)

    def compile(self) -> CompiledStatement:
        if not self.values:
            raise EmptyUpdateError()
        parameters = ParameterList(self.dialect)
        # Filters are bound first: $1..$N for WHERE, $N+1.. for SET
        where = self._sql_where(parameters)
        assignments = [
            f"{self.dialect.quote(name)} = {parameters.bind(coerce_value(value))}"
            for name, value in self.values.items()
        ]
        sql = f"UPDATE {self._table_sql} SET " + ", ".join(assignments) + where + self._sql_returning()
        return CompiledStatement(sql=sql, parameters=parameters.values)


class DeleteQuery(_Filterable, _Mutation):
    OPERATION: ClassVar[Operation] = Operation.DELETE

    def compile(self) -> CompiledStatement:
        parameters = ParameterList(self.dialect)
        sql = f"DELETE FROM {self._table_sql}" + self._sql_where(parameters) + self._sql_returning()
        return CompiledStatement(sql=sql, parameters=parameters.values)


__all__ = [
    "CompiledStatement",
    "DeleteQuery",
    "InsertQuery",
    "Operation",
    "QueryBuilder",
    "SelectQuery",
    "UpdateQuery",
    "UpsertQuery",
]
