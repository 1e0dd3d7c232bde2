"""
Integration tests against a live flights database.

To run:
    export FLIGHTS_DB_HOST=... FLIGHTS_DB_NAME=... FLIGHTS_DB_USER=... FLIGHTS_DB_PASSWORD=...
    pytest tests/integration/
"""

import os

import pytest

from flightsql import PostgresConfig, connect_with_config
from flightsql.core.errors import DatabaseConnectionError, QueryError
from flightsql.tutorial import TutorialRunner

SKIP_INTEGRATION = os.environ.get("FLIGHTS_DB_HOST") is None

pytestmark = pytest.mark.skipif(
    SKIP_INTEGRATION, reason="No database configured - set FLIGHTS_DB_* env vars"
)


@pytest.fixture
def config():
    return PostgresConfig.from_env()


@pytest.fixture
def conn(config):
    connection = connect_with_config(config)
    yield connection
    connection.close()


class TestLiveQueries:

    def test_limit(self, conn):
        result = conn.execute("SELECT carrier, flight FROM flights LIMIT 5")
        assert result.column_names == ["carrier", "flight"]
        assert len(result) <= 5

    def test_malformed_sql(self, conn):
        with pytest.raises(QueryError):
            conn.execute("SELECT (carrier FROM flights")
        # session still usable
        assert conn.execute("SELECT 1 AS one").scalar() == 1

    def test_repeatable(self, conn):
        sql = "SELECT origin, COUNT(*) AS n FROM flights GROUP BY origin ORDER BY origin"
        assert conn.execute(sql).rows == conn.execute(sql).rows

    def test_count_column_name(self, conn):
        assert conn.execute("SELECT COUNT(*) FROM flights").column_names == ["count"]

    def test_list_tables(self, conn):
        assert "flights" in conn.list_tables()

    def test_tutorial_runs(self, conn):
        outcomes = list(TutorialRunner(conn).run())
        assert outcomes
        assert all(o.is_success for o in outcomes), [str(o.error) for o in outcomes if o.error]


class TestLiveConnection:

    def test_invalid_credentials(self, config):
        with pytest.raises(DatabaseConnectionError):
            connect_with_config(config.replace(password=config.password + "-wrong"))

    def test_close_twice(self, config):
        connection = connect_with_config(config)
        connection.close()
        connection.close()
