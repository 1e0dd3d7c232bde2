"""
PostgreSQL adapter - psycopg based connection to the flights database.
"""

from flightsql.adapters.outbound.postgres.config import PostgresConfig
from flightsql.adapters.outbound.postgres.connection import PostgresConnection

__all__ = [
    "PostgresConfig",
    "PostgresConnection",
]
