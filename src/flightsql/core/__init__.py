"""
Core module - Errors, result model and SQL guard.
"""

from flightsql.core.errors import (
    FlightSQLError,
    DatabaseConnectionError,
    QueryError,
    SQLSecurityException,
)
from flightsql.core.model import ColumnMetadata, ResultSet
from flightsql.core.security import (
    SecurityMode,
    SQLValidator,
    ReadOnlySQLValidator,
    NoOpValidator,
    create_validator,
)

__all__ = [
    "FlightSQLError",
    "DatabaseConnectionError",
    "QueryError",
    "SQLSecurityException",
    "ColumnMetadata",
    "ResultSet",
    "SecurityMode",
    "SQLValidator",
    "ReadOnlySQLValidator",
    "NoOpValidator",
    "create_validator",
]
