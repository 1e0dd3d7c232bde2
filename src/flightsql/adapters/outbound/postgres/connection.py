"""
PostgreSQL Database Connection
==============================

One PostgresConnection is one psycopg session to the flights database.
Sessions run in autocommit mode, so a failed statement never leaves the
session stuck in an aborted transaction and the next query just works.

Requirements:
    pip install "psycopg[binary]"
"""

from typing import Any, Dict, List, Optional, Tuple

import psycopg

from flightsql.adapters.outbound.postgres.config import PostgresConfig
from flightsql.core.errors import DatabaseConnectionError, QueryError
from flightsql.core.model.query_result import ColumnMetadata, ResultSet
from flightsql.core.security import SecurityMode, SQLValidator
from flightsql.infrastructure.logging import get_logger
from flightsql.ports.outbound.db_connection import AbstractDatabaseConnection, QueryParams

logger = get_logger(__name__)

DEFAULT_SCHEMA = "public"


class PostgresConnection(AbstractDatabaseConnection[PostgresConfig, psycopg.Connection]):
    """
    PostgreSQL session.

    Example usage:
        config = PostgresConfig(
            host="localhost",
            database="flights",
            user="reader",
            password="secret",
        )

        with PostgresConnection(config) as conn:
            print(conn.list_tables())
            result = conn.execute(
                "SELECT origin, dest, air_time FROM flights WHERE carrier = %s LIMIT 10",
                ("UA",),
            )
            print(result.to_text())
    """

    def __init__(
        self,
        config: PostgresConfig,
        security_mode: SecurityMode = SecurityMode.READ_ONLY,
        custom_validator: Optional[SQLValidator] = None
    ):
        super().__init__(config, security_mode=security_mode, custom_validator=custom_validator)

    def _open(self) -> psycopg.Connection:
        try:
            return psycopg.connect(autocommit=True, **self._config.connection_kwargs())
        except psycopg.Error as e:
            message = str(e).strip() or e.__class__.__name__
            logger.error(f"Connection to {self._config.safe_dsn()} failed: {message}")
            raise DatabaseConnectionError(
                f"Cannot connect to {self._config.safe_dsn()}: {message}",
                host=self._config.host,
                database=self._config.database,
            ) from e

    def _close_raw(self, conn: psycopg.Connection) -> None:
        conn.close()

    def _execute_raw(
        self,
        conn: psycopg.Connection,
        query: str,
        params: QueryParams = None
    ) -> Tuple[List[Tuple[Any, ...]], List[ColumnMetadata], int]:
        try:
            with conn.cursor() as cursor:
                cursor.execute(query, params)

                # Statements without a result set (allowed outside READ_ONLY)
                if cursor.description is None:
                    return [], [], max(cursor.rowcount, 0)

                rows = cursor.fetchall()
                columns = [
                    ColumnMetadata(
                        name=desc.name,
                        type_code=desc.type_code,
                        display_size=desc.display_size,
                        precision=desc.precision,
                        scale=desc.scale,
                        nullable=desc.null_ok,
                    )
                    for desc in cursor.description
                ]
                return rows, columns, len(rows)

        except psycopg.Error as e:
            if conn.broken or conn.closed:
                logger.error(f"Session to {self._config.safe_dsn()} lost: {e}")
                raise DatabaseConnectionError(
                    f"Connection to {self._config.safe_dsn()} lost: {str(e).strip()}",
                    host=self._config.host,
                    database=self._config.database,
                ) from e

            diag = getattr(e, "diag", None)
            message = (diag.message_primary if diag is not None else None) or str(e).strip()
            logger.error(f"Query failed: {message}")
            raise QueryError(message, sqlstate=e.sqlstate, query=query) from e

    def get_database_version(self) -> Dict[str, Any]:
        """
        Get PostgreSQL version and session information.

        Returns:
            Dictionary with version, database and user
        """
        result = self.execute(
            'SELECT version() AS version, current_database() AS database, current_user AS "user"'
        )
        return result.first() or {}

    # ========================================================================
    # Schema inspection
    # ========================================================================

    def list_tables(self, schema: Optional[str] = None) -> List[str]:
        """
        Names of tables and views in a schema, alphabetically.

        Args:
            schema: Schema name (default: public)
        """
        query = """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = %s
            AND table_type IN ('BASE TABLE', 'VIEW')
            ORDER BY table_name
        """
        result = self.execute(query, (schema or DEFAULT_SCHEMA,))
        return result.column("table_name")

    def list_columns(self, table_name: str, schema: Optional[str] = None) -> ResultSet:
        """
        Columns of a table in declaration order.

        Returns:
            ResultSet with column_name, data_type, is_nullable
        """
        query = """
            SELECT column_name, data_type, is_nullable
            FROM information_schema.columns
            WHERE table_schema = %s
            AND table_name = %s
            ORDER BY ordinal_position
        """
        return self.execute(query, (schema or DEFAULT_SCHEMA, table_name))

    def table_exists(self, table_name: str, schema: Optional[str] = None) -> bool:
        """
        Check if a table exists in the database.

        Args:
            table_name: Name of the table to check
            schema: Schema name (default: public)
        """
        query = """
            SELECT EXISTS (
                SELECT FROM information_schema.tables
                WHERE table_schema = %s
                AND table_name = %s
            )
        """
        result = self.execute(query, (schema or DEFAULT_SCHEMA, table_name))
        return bool(result.scalar())
