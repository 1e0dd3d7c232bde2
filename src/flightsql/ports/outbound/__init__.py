"""
Outbound ports - Abstract interfaces for external dependencies.
"""

from flightsql.ports.outbound.db_connection import (
    AbstractDatabaseConnection,
    DatabaseConfig,
)

__all__ = [
    "AbstractDatabaseConnection",
    "DatabaseConfig",
]
