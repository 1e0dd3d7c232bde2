"""
Model module - Result types returned by database connections.
"""

from flightsql.core.model.query_result import ColumnMetadata, ResultSet

__all__ = [
    "ColumnMetadata",
    "ResultSet",
]
