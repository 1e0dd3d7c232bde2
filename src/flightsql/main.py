"""
flightsql command line.

Examples:
  List tables:
    flightsql tables

  Describe a table:
    flightsql describe flights

  Run one query:
    flightsql query "SELECT carrier, COUNT(*) FROM flights GROUP BY carrier"

  Replay the tutorial, joins and subqueries only:
    flightsql tutorial --topic joins --topic subqueries

Connection settings come from FLIGHTSQL_CONFIG_PATH (YAML) or the
FLIGHTS_DB_* environment variables; --host/--port/--database/--user
override them. The password is never read from the command line.
"""

import argparse
import sys
from typing import List, Optional

from flightsql.adapters.outbound.postgres import PostgresConfig, PostgresConnection
from flightsql.core.errors import DatabaseConnectionError, QueryError
from flightsql.core.security import SecurityMode
from flightsql.infrastructure.logging import get_logger, setup_logging
from flightsql.tutorial import TUTORIAL_QUERIES, Topic, TutorialRunner, list_topics
from flightsql.utils.table_renderer import render_table

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_QUERY_ERROR = 1
EXIT_CONNECTION_ERROR = 2


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="flightsql",
        description="Query the airline flights database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument('--host', help='Database host (overrides config)')
    parser.add_argument('--port', type=int, help='Database port (overrides config)')
    parser.add_argument('--database', help='Database name (overrides config)')
    parser.add_argument('--user', help='Database user (overrides config)')
    parser.add_argument('--connect-timeout', type=int, help='Connect timeout in seconds')
    parser.add_argument(
        '--log-level',
        default='WARNING',
        choices=['TRACE', 'DEBUG', 'INFO', 'SUCCESS', 'WARNING', 'ERROR', 'CRITICAL'],
        help='Console log level (default: WARNING)',
    )
    parser.add_argument('--log-dir', default='logs', help='Directory for the log file')

    subparsers = parser.add_subparsers(dest='command', required=True)

    tables = subparsers.add_parser('tables', help='List tables and views')
    tables.add_argument('--schema', default='public', help='Schema name (default: public)')

    describe = subparsers.add_parser('describe', help='List the columns of a table')
    describe.add_argument('table', help='Table name')
    describe.add_argument('--schema', default='public', help='Schema name (default: public)')

    query = subparsers.add_parser('query', help='Run one SQL statement')
    query.add_argument('sql', help='SQL text')
    query.add_argument('--max-rows', type=int, default=50, help='Rows to display (default: 50)')
    query.add_argument(
        '--allow-writes',
        action='store_true',
        help='Forward non-SELECT statements instead of refusing them',
    )

    tutorial = subparsers.add_parser('tutorial', help='Replay the tutorial queries')
    tutorial.add_argument(
        '--topic',
        action='append',
        choices=[t.value for t in Topic],
        help='Run only this topic (repeatable)',
    )
    tutorial.add_argument('--list', action='store_true', help='List the queries without running them')
    tutorial.add_argument('--max-rows', type=int, default=20, help='Rows to display per step (default: 20)')
    tutorial.add_argument('--stop-on-error', action='store_true', help='Stop at the first failing step')

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> PostgresConfig:
    """Settings from YAML/env with command line overrides applied"""
    return PostgresConfig.load().replace(
        host=args.host,
        port=args.port,
        database=args.database,
        user=args.user,
        connect_timeout=args.connect_timeout,
    )


def list_tutorial() -> str:
    lines = []
    for topic in list_topics():
        lines.append(topic.value)
        lines.extend(f"  {q.key:<26} {q.title}" for q in TUTORIAL_QUERIES if q.topic == topic)
    return "\n".join(lines)


def run_command(args: argparse.Namespace, connection: PostgresConnection) -> int:
    """Execute the selected subcommand on an open connection"""
    if args.command == 'tables':
        for name in connection.list_tables(args.schema):
            print(name)
        return EXIT_OK

    if args.command == 'describe':
        result = connection.list_columns(args.table, args.schema)
        if result.is_empty:
            print(f"Table '{args.schema}.{args.table}' not found", file=sys.stderr)
            return EXIT_QUERY_ERROR
        print(render_table(result))
        return EXIT_OK

    if args.command == 'query':
        print(render_table(connection.execute(args.sql), max_rows=args.max_rows))
        return EXIT_OK

    runner = TutorialRunner(connection, max_rows=args.max_rows)
    exit_code = EXIT_OK
    for outcome in runner.run(topics=args.topic, stop_on_error=args.stop_on_error):
        print(runner.render(outcome))
        print()
        if not outcome.is_success:
            exit_code = EXIT_QUERY_ERROR
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_arguments(argv)
    setup_logging(console_level=args.log_level, log_dir=args.log_dir)

    if args.command == 'tutorial' and args.list:
        print(list_tutorial())
        return EXIT_OK

    try:
        config = build_config(args)
    except (ValueError, KeyError, FileNotFoundError) as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONNECTION_ERROR

    security_mode = SecurityMode.READ_ONLY
    if args.command == 'query' and args.allow_writes:
        security_mode = SecurityMode.NONE

    try:
        with PostgresConnection(config, security_mode=security_mode) as connection:
            return run_command(args, connection)
    except DatabaseConnectionError as e:
        print(f"Connection error: {e}", file=sys.stderr)
        return EXIT_CONNECTION_ERROR
    except QueryError as e:
        print(f"Query error: {e}", file=sys.stderr)
        return EXIT_QUERY_ERROR


if __name__ == "__main__":
    sys.exit(main())
