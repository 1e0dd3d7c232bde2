"""
Functional facade over PostgresConnection.

    from flightsql import connect, execute, close

    conn = connect("db.example.org", "flights", "reader", "secret")
    try:
        result = execute(conn, "SELECT COUNT(*) FROM flights")
        print(result.scalar())
    finally:
        close(conn)

or scoped:

    with open_connection() as conn:   # settings from env / YAML
        ...
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from flightsql.adapters.outbound.postgres import PostgresConfig, PostgresConnection
from flightsql.core.model.query_result import ResultSet
from flightsql.core.security import SecurityMode, SQLValidator
from flightsql.ports.outbound.db_connection import AbstractDatabaseConnection, QueryParams


def connect(
    host: str,
    database: str,
    user: str,
    password: str,
    port: int = 5432,
    *,
    connect_timeout: Optional[int] = None,
    sslmode: Optional[str] = None,
    security_mode: SecurityMode = SecurityMode.READ_ONLY,
    custom_validator: Optional[SQLValidator] = None,
) -> PostgresConnection:
    """
    Open a session to the database.

    No retries are made; the caller decides on a retry policy.

    Raises:
        DatabaseConnectionError: If the host is unreachable, the credentials
            are rejected or the database does not exist
    """
    config = PostgresConfig(
        host=host,
        database=database,
        user=user,
        password=password,
        port=port,
        connect_timeout=connect_timeout,
        sslmode=sslmode,
    )
    return connect_with_config(config, security_mode=security_mode, custom_validator=custom_validator)


def connect_with_config(
    config: PostgresConfig,
    security_mode: SecurityMode = SecurityMode.READ_ONLY,
    custom_validator: Optional[SQLValidator] = None,
) -> PostgresConnection:
    """Open a session from a ready-made configuration."""
    connection = PostgresConnection(config, security_mode=security_mode, custom_validator=custom_validator)
    connection.connect()
    return connection


def execute(connection: AbstractDatabaseConnection, sql: str, params: QueryParams = None) -> ResultSet:
    """
    Run SQL text on an open connection and return all rows.

    Raises:
        QueryError: With the engine's diagnostic message
        DatabaseConnectionError: If the connection is closed or lost
    """
    return connection.execute(sql, params)


def close(connection: AbstractDatabaseConnection) -> None:
    """Release the session. Safe to call more than once."""
    connection.close()


@contextmanager
def open_connection(
    config: Optional[PostgresConfig] = None,
    security_mode: SecurityMode = SecurityMode.READ_ONLY,
) -> Iterator[PostgresConnection]:
    """
    Scoped session, closed on every exit path.

    Args:
        config: Connection settings. If None, loaded from YAML or environment.
        security_mode: Which statements may be sent
    """
    connection = connect_with_config(config or PostgresConfig.load(), security_mode=security_mode)
    try:
        yield connection
    finally:
        connection.close()
