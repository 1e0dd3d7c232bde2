"""
Pytest configuration and shared fixtures.

Unit tests never open a network connection: psycopg.connect is replaced
by a factory returning FakePgConnection objects whose cursors serve
canned results.

Fixtures provided:
- pg_config: PostgresConfig pointing at a fake host
- fake_pg: Installs the fake driver and exposes it for scripting
- sample_result: ResultSet with three carrier rows
"""

import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any, List, Optional, Sequence

import psycopg
import pytest

# Add src to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from flightsql.adapters.outbound.postgres import PostgresConfig
from flightsql.core.model.query_result import ColumnMetadata, ResultSet


# ============================================================================
# Fake psycopg driver
# ============================================================================

def make_description(*names: str) -> List[SimpleNamespace]:
    """Cursor description entries shaped like psycopg.Column"""
    return [
        SimpleNamespace(
            name=name,
            type_code=25,
            display_size=None,
            precision=None,
            scale=None,
            null_ok=None,
        )
        for name in names
    ]


class FakePgCursor:
    """Cursor serving the next scripted response of its connection"""

    def __init__(self, connection: "FakePgConnection"):
        self.connection = connection
        self.description = None
        self.rowcount = -1
        self._rows: List[tuple] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def execute(self, query: str, params: Any = None) -> None:
        self.connection.executed.append((query, params))
        response = self.connection.responses.pop(0) if self.connection.responses else ((), [])
        if isinstance(response, BaseException):
            raise response
        columns, rows = response
        if columns is None:
            self.description = None
            self.rowcount = len(rows)
            self._rows = []
        else:
            self.description = make_description(*columns)
            self._rows = [tuple(r) for r in rows]
            self.rowcount = len(self._rows)

    def fetchall(self) -> List[tuple]:
        return list(self._rows)


class FakePgConnection:
    """Stand-in for psycopg.Connection"""

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.closed = False
        self.broken = False
        self.close_calls = 0
        self.executed: List[tuple] = []
        self.responses: List[Any] = []

    def cursor(self) -> FakePgCursor:
        return FakePgCursor(self)

    def close(self) -> None:
        self.close_calls += 1
        self.closed = True


class FakePgDriver:
    """
    Replacement for psycopg.connect.

    respond() queues results for the next connection(s); fail_connect()
    makes the next connect raise.
    """

    def __init__(self):
        self.connections: List[FakePgConnection] = []
        self.connect_error: Optional[BaseException] = None
        self.pending: List[Any] = []

    def __call__(self, **kwargs) -> FakePgConnection:
        if self.connect_error is not None:
            raise self.connect_error
        conn = FakePgConnection(**kwargs)
        conn.responses = self.pending
        self.connections.append(conn)
        return conn

    @property
    def last(self) -> FakePgConnection:
        return self.connections[-1]

    def respond(self, columns: Optional[Sequence[str]], rows: Sequence[Sequence[Any]] = ()) -> None:
        self.pending.append((list(columns) if columns is not None else None, list(rows)))

    def fail(self, error: BaseException) -> None:
        self.pending.append(error)

    def fail_connect(self, error: BaseException) -> None:
        self.connect_error = error


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def pg_config():
    """Provides a PostgresConfig for a fake server."""
    return PostgresConfig(
        host="db.test",
        database="flights",
        user="reader",
        password="s3cret-pw",
        connect_timeout=5,
    )


@pytest.fixture
def fake_pg(monkeypatch):
    """Replaces psycopg.connect with a scripted fake driver."""
    driver = FakePgDriver()
    monkeypatch.setattr(psycopg, "connect", driver)
    return driver


@pytest.fixture
def sample_result():
    """Provides a small ResultSet of carriers."""
    return ResultSet(
        columns=[ColumnMetadata(name="carrier"), ColumnMetadata(name="flights")],
        rows=[("UA", 58665), ("B6", 54635), ("EV", 54173)],
        rows_affected=3,
    )


@pytest.fixture
def clean_db_env(monkeypatch):
    """Removes FLIGHTS_DB_* and FLIGHTSQL_CONFIG_PATH from the environment."""
    for var in (
        "FLIGHTS_DB_HOST", "FLIGHTS_DB_PORT", "FLIGHTS_DB_NAME", "FLIGHTS_DB_USER",
        "FLIGHTS_DB_PASSWORD", "FLIGHTS_DB_CONNECT_TIMEOUT", "FLIGHTS_DB_SSLMODE",
        "FLIGHTSQL_CONFIG_PATH",
    ):
        monkeypatch.delenv(var, raising=False)
    # Keep a developer's .env out of the unit tests
    monkeypatch.setattr(
        "flightsql.adapters.outbound.postgres.config.load_environment",
        lambda *args, **kwargs: False,
    )
    return monkeypatch


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (needs a database)"
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
