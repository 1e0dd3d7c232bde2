"""
flightsql - SQL over the airline flights database.

Usage:
    from flightsql import connect, execute, close

    conn = connect("db.example.org", "flights", "reader", "secret")
    try:
        result = execute(conn, "SELECT carrier, COUNT(*) AS n FROM flights GROUP BY carrier")
        for row in result:
            print(row["carrier"], row["n"])
    finally:
        close(conn)
"""

from flightsql.adapters.outbound.postgres import PostgresConfig, PostgresConnection
from flightsql.client import close, connect, connect_with_config, execute, open_connection
from flightsql.core.errors import (
    DatabaseConnectionError,
    FlightSQLError,
    QueryError,
    SQLSecurityException,
)
from flightsql.core.model import ColumnMetadata, ResultSet
from flightsql.core.security import SecurityMode

# Name used by the connection contract; shadows the builtin only inside this namespace
ConnectionError = DatabaseConnectionError

__version__ = "0.1.0"
__all__ = [
    "connect",
    "connect_with_config",
    "execute",
    "close",
    "open_connection",
    "PostgresConfig",
    "PostgresConnection",
    "ResultSet",
    "ColumnMetadata",
    "SecurityMode",
    "FlightSQLError",
    "ConnectionError",
    "DatabaseConnectionError",
    "QueryError",
    "SQLSecurityException",
]
