"""
Abstract base classes for database connections.

A connection wraps one live session to a relational database. The base
class owns the session lifecycle, the SQL guard, timing and logging;
concrete adapters only know how to open a driver session, run one
statement on it and close it.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar, Union

from flightsql.core.errors import DatabaseConnectionError, SQLSecurityException
from flightsql.core.model.query_result import ColumnMetadata, ResultSet
from flightsql.core.security import SecurityMode, SQLValidator, create_validator
from flightsql.infrastructure.logging import get_logger

logger = get_logger(__name__)

# Type variables for generic connection and config types
TConfig = TypeVar('TConfig', bound='DatabaseConfig')
TConnection = TypeVar('TConnection')

QueryParams = Optional[Union[Dict[str, Any], Sequence[Any]]]


class DatabaseConfig(ABC):
    """
    Abstract base class for database configuration.

    Each database type provides its own configuration class, able to load
    itself from the environment and to describe its target without
    exposing the password.
    """

    @classmethod
    @abstractmethod
    def load(cls) -> 'DatabaseConfig':
        """
        Create configuration from the YAML file or environment variables.

        Returns:
            DatabaseConfig: Configured connection settings
        """
        pass

    @abstractmethod
    def safe_dsn(self) -> str:
        """
        Connection target with the password masked, safe to log.

        Returns:
            str: DSN-like description of the target
        """
        pass


class AbstractDatabaseConnection(ABC, Generic[TConfig, TConnection]):
    """
    Abstract base class for database connections.

    Type Parameters:
        TConfig: Configuration class type (e.g., PostgresConfig)
        TConnection: Driver connection type (e.g., psycopg.Connection)

    Lifecycle:
        conn = PostgresConnection(config)
        conn.connect()
        result = conn.execute("SELECT * FROM airlines LIMIT 5")
        conn.close()
        conn.close()  # no-op

    Or scoped, closing on every exit path:
        with PostgresConnection(config) as conn:
            result = conn.execute("SELECT COUNT(*) FROM flights")

    One instance is one session. Calls on a shared instance are
    serialised by an instance lock; parallel work needs one instance
    per thread.
    """

    def __init__(
        self,
        config: TConfig,
        security_mode: SecurityMode = SecurityMode.READ_ONLY,
        custom_validator: Optional[SQLValidator] = None
    ):
        """
        Args:
            config: Connection settings
            security_mode: Which statements may be sent (default: READ_ONLY)
            custom_validator: Validator used when security_mode is CUSTOM
        """
        self._config = config
        self._security_mode = security_mode
        self._validator = create_validator(security_mode, custom_validator)
        self._conn: Optional[TConnection] = None
        self._lock = threading.RLock()

    # ============================================================================
    # ABSTRACT METHODS - Must be implemented by all subclasses
    # ============================================================================

    @abstractmethod
    def _open(self) -> TConnection:
        """
        Open a driver session.

        Raises:
            DatabaseConnectionError: If the session cannot be established
        """
        pass

    @abstractmethod
    def _close_raw(self, conn: TConnection) -> None:
        """Close a driver session"""
        pass

    @abstractmethod
    def _execute_raw(
        self,
        conn: TConnection,
        query: str,
        params: QueryParams = None
    ) -> Tuple[List[Tuple[Any, ...]], List[ColumnMetadata], int]:
        """
        Run one statement without validation.

        Returns:
            Tuple of (rows, column_metadata, rows_affected)

        Raises:
            QueryError: If the engine rejects or fails the statement
            DatabaseConnectionError: If the session is lost
        """
        pass

    @abstractmethod
    def get_database_version(self) -> Dict[str, Any]:
        """
        Get database version and session information.

        Returns:
            Dict: Database-specific version information
        """
        pass

    # ============================================================================
    # SESSION LIFECYCLE
    # ============================================================================

    @property
    def config(self) -> TConfig:
        return self._config

    @property
    def security_mode(self) -> SecurityMode:
        return self._security_mode

    @property
    def is_closed(self) -> bool:
        """True until connect() succeeds, and again after close()"""
        return self._conn is None

    def connect(self) -> 'AbstractDatabaseConnection':
        """
        Open the session if it is not open yet.

        Returns:
            self for method chaining

        Raises:
            DatabaseConnectionError: If the session cannot be established
        """
        with self._lock:
            if self._conn is not None:
                return self
            logger.debug(f"Connecting to {self._config.safe_dsn()}")
            self._conn = self._open()
            logger.info(f"Connected to {self._config.safe_dsn()}")
            return self

    def close(self) -> None:
        """Release the session. Calling it on a closed connection does nothing."""
        with self._lock:
            if self._conn is None:
                return
            conn, self._conn = self._conn, None
            self._close_raw(conn)
            logger.info(f"Closed connection to {self._config.safe_dsn()}")

    def __enter__(self) -> 'AbstractDatabaseConnection':
        return self.connect()

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def __repr__(self) -> str:
        status = "closed" if self.is_closed else "open"
        return f"{self.__class__.__name__}(target='{self._config.safe_dsn()}', status='{status}')"

    # ============================================================================
    # QUERY EXECUTION
    # ============================================================================

    def execute(self, query: str, params: QueryParams = None) -> ResultSet:
        """
        Send SQL text to the database and return every row.

        The text is forwarded verbatim once the SQL guard accepts it.

        Args:
            query: SQL text
            params: Driver parameters for placeholders, if any

        Returns:
            ResultSet with all rows materialised

        Raises:
            QueryError: If the statement is refused or fails
            DatabaseConnectionError: If the connection is closed or lost
        """
        try:
            self._validator.validate(query)
        except SQLSecurityException as e:
            logger.warning(f"Query refused: {e}")
            raise

        with self._lock:
            conn = self._require_open()
            logger.debug(f"Executing SQL: {query}")
            start_time = time.perf_counter()
            try:
                rows, columns, rows_affected = self._execute_raw(conn, query, params)
            except DatabaseConnectionError:
                self._discard()
                raise
            execution_time = (time.perf_counter() - start_time) * 1000

        result = ResultSet(
            columns=columns,
            rows=rows,
            rows_affected=rows_affected,
            execution_time_ms=execution_time,
        )
        logger.success(f"Query executed, {result.row_count} rows in {execution_time:.1f} ms")
        return result

    def execute_dicts(self, query: str, params: QueryParams = None) -> List[Dict[str, Any]]:
        """Execute a query and return its rows as dictionaries."""
        return self.execute(query, params).as_dicts()

    def _require_open(self) -> TConnection:
        if self._conn is None:
            raise DatabaseConnectionError(
                "Connection is closed. Call connect() first.",
                host=getattr(self._config, "host", None),
                database=getattr(self._config, "database", None),
            )
        return self._conn

    def _discard(self) -> None:
        """Drop a session the driver reported as lost"""
        conn, self._conn = self._conn, None
        if conn is not None:
            try:
                self._close_raw(conn)
            except Exception as e:
                logger.debug(f"Ignoring error while discarding lost session: {e}")

    # ============================================================================
    # OPTIONAL METHODS - Override only if supported by database
    # ============================================================================

    def list_tables(self, schema: Optional[str] = None) -> List[str]:
        """
        Names of the tables and views visible in a schema.

        Raises:
            NotImplementedError: If not supported by database implementation
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} does not support list_tables()"
        )

    def list_columns(self, table_name: str, schema: Optional[str] = None) -> ResultSet:
        """
        Columns of a table: name, data type, nullability.

        Raises:
            NotImplementedError: If not supported by database implementation
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} does not support list_columns()"
        )

    def table_exists(self, table_name: str, schema: Optional[str] = None) -> bool:
        """
        Check if table exists in database.

        Raises:
            NotImplementedError: If not supported by database implementation
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} does not support table_exists()"
        )
