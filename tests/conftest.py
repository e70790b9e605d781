import logging

import pytest

from pgfluent import Client
from pgfluent.settings import get_settings

from tests.helpers import RecordingConnector, SqliteConnector, create_schema


@pytest.fixture
def recorder():
    return RecordingConnector()


@pytest.fixture
def client(recorder):
    """Client whose statements are recorded instead of executed."""
    return Client(recorder)


@pytest.fixture(scope="function")
def setup_db(tmp_path):
    """A fresh, populated SQLite database file for each test."""
    path = tmp_path / "pgfluent.sqlite3"
    logging.getLogger(__name__).debug("Test database at %s", path)
    connector = SqliteConnector(str(path))
    create_schema(connector.connection)
    yield connector
    connector.connection.close()


@pytest.fixture
def db(setup_db):
    """Client on the SQLite test database."""
    return Client(setup_db)


@pytest.fixture(autouse=True)
def clear_settings_cache(monkeypatch):
    """Keep environment-dependent settings from leaking between tests."""
    for name in ("DATABASE_URL", "DATABASE_SSL", "DATABASE_POOL_MIN_SIZE", "DATABASE_POOL_MAX_SIZE"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
