"""Shared test helpers: in-memory connectors standing in for a PostgreSQL pool."""

import sqlite3
from typing import Any, Sequence

from pgfluent.connection import Connector


class RecordingConnector(Connector):
    """Records every statement and answers with queued row lists (empty list when the queue is empty)."""

    def __init__(self, *responses: list[dict[str, Any]]):
        self.calls: list[tuple[str, list[Any]]] = []
        self.responses = list(responses)
        self.closed = False

    async def execute(self, sql: str, parameters: Sequence[Any] = ()) -> list[dict[str, Any]]:
        self.calls.append((sql, list(parameters)))
        if self.responses:
            return self.responses.pop(0)
        return []

    async def close(self) -> None:
        self.closed = True

    @property
    def statements(self) -> list[str]:
        return [sql for sql, _ in self.calls]


class FailingConnector(Connector):
    """Raises ``error`` on every statement."""

    def __init__(self, error: Exception):
        self.error = error
        self.calls = 0

    async def execute(self, sql: str, parameters: Sequence[Any] = ()) -> list[dict[str, Any]]:
        self.calls += 1
        raise self.error


class SqliteConnector(Connector):
    """Runs statements on SQLite.

    SQLite reads ``$1`` as a named parameter called ``1``, and understands
    double-quoted identifiers, RETURNING and ON CONFLICT DO UPDATE, so the
    generated SQL runs unchanged.
    """

    def __init__(self, path: str = ":memory:"):
        self.connection = sqlite3.connect(path, isolation_level=None)
        self.connection.row_factory = sqlite3.Row

    async def execute(self, sql: str, parameters: Sequence[Any] = ()) -> list[dict[str, Any]]:
        bound = {str(position): value for position, value in enumerate(parameters, start=1)}
        cursor = self.connection.execute(sql, bound)
        return [dict(row) for row in cursor.fetchall()]

    async def close(self) -> None:
        self.connection.close()


USERS = [
    {"name": "Carol", "email": "carol@example.com", "active": 1},
    {"name": "Alice", "email": "alice@example.com", "active": 1},
    {"name": "Dave", "email": "dave@example.com", "active": 0},
    {"name": "Bob", "email": "bob@example.com", "active": 1},
    {"name": "Eve", "email": "eve@example.com", "active": 0},
]


def create_schema(connection: sqlite3.Connection) -> None:
    """Create and fill ``users``, ``products`` and ``orders``."""
    connection.executescript(
        """
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT UNIQUE,
            active INTEGER NOT NULL DEFAULT 1
        );
        CREATE TABLE products (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            price REAL NOT NULL
        );
        CREATE TABLE orders (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            product_id INTEGER REFERENCES products(id),
            total REAL NOT NULL,
            status TEXT NOT NULL
        );
        """
    )
    connection.executemany(
        "INSERT INTO users (name, email, active) VALUES (:name, :email, :active)", USERS
    )
    connection.executemany(
        "INSERT INTO products (title, price) VALUES (?, ?)", [("Lamp", 20.0), ("Desk", 150.0)]
    )
    connection.executemany(
        "INSERT INTO orders (product_id, total, status) VALUES (?, ?, ?)",
        [(1, 40.0, "paid"), (2, 150.0, "pending"), (None, 5.0, "draft")],
    )
