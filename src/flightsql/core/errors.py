"""
Error taxonomy for database access.

Every error raised by flightsql derives from FlightSQLError:
- DatabaseConnectionError: the session cannot be opened or kept alive
- QueryError: the database rejected or failed a submitted statement
- SQLSecurityException: the statement was refused before being sent
"""

from typing import Optional


class FlightSQLError(Exception):
    """Base class for all flightsql errors."""
    pass


class DatabaseConnectionError(FlightSQLError, ConnectionError):
    """
    Raised when a session cannot be established or maintained.

    Covers unreachable hosts, rejected credentials, unknown databases,
    sessions dropped by the server and use of an already closed connection.
    Also catchable as the builtin ConnectionError.
    """

    def __init__(self, message: str, host: Optional[str] = None, database: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.host = host
        self.database = database


class QueryError(FlightSQLError):
    """
    Raised when the database engine rejects or fails a query.

    Attributes:
        message: Diagnostic message as reported by the engine
        sqlstate: Five-character SQLSTATE code, when the driver provides one
        query: SQL text that was submitted
    """

    def __init__(self, message: str, sqlstate: Optional[str] = None, query: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.sqlstate = sqlstate
        self.query = query

    def __str__(self) -> str:
        if self.sqlstate:
            return f"[{self.sqlstate}] {self.message}"
        return self.message


class SQLSecurityException(QueryError):
    """Exception raised when a query is refused by the SQL validator"""
    pass
