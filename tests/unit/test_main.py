"""Tests for flightsql.main - command line."""

import sys

import psycopg
import pytest

from flightsql import main as cli
from flightsql.infrastructure import logging as logging_module


@pytest.fixture
def env(clean_db_env, fake_pg, tmp_path, monkeypatch):
    """Database settings in the environment, fake driver, isolated logging."""
    for key, value in {"HOST": "db.test", "NAME": "flights", "USER": "reader", "PASSWORD": "pw"}.items():
        clean_db_env.setenv(f"FLIGHTS_DB_{key}", value)
    monkeypatch.setattr(logging_module, "_is_configured", False)
    yield fake_pg
    logging_module.logger.remove()
    logging_module.logger.add(sys.stderr)


def run(tmp_path, *args):
    return cli.main(["--log-dir", str(tmp_path / "logs"), "--log-level", "ERROR", *args])


class TestArguments:

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.parse_arguments([])

    def test_overrides(self, env):
        args = cli.parse_arguments(["--host", "other", "--port", "6543", "tables"])
        config = cli.build_config(args)
        assert config.host == "other"
        assert config.port == 6543
        assert config.database == "flights"


class TestCommands:

    def test_tables(self, env, tmp_path, capsys):
        env.respond(["table_name"], [("airlines",), ("flights",)])
        assert run(tmp_path, "tables") == cli.EXIT_OK
        assert capsys.readouterr().out.split() == ["airlines", "flights"]
        assert env.last.closed

    def test_describe(self, env, tmp_path, capsys):
        env.respond(["column_name", "data_type", "is_nullable"], [("carrier", "text", "YES")])
        assert run(tmp_path, "describe", "airlines") == cli.EXIT_OK
        assert "carrier" in capsys.readouterr().out

    def test_describe_unknown_table(self, env, tmp_path, capsys):
        env.respond(["column_name", "data_type", "is_nullable"], [])
        assert run(tmp_path, "describe", "trains") == cli.EXIT_QUERY_ERROR
        assert "not found" in capsys.readouterr().err

    def test_query(self, env, tmp_path, capsys):
        env.respond(["count"], [(336776,)])
        assert run(tmp_path, "query", "SELECT COUNT(*) FROM flights") == cli.EXIT_OK
        out = capsys.readouterr().out
        assert "336776" in out
        assert "(1 row)" in out

    def test_query_error(self, env, tmp_path, capsys):
        env.fail(psycopg.errors.SyntaxError("syntax error at end of input"))
        assert run(tmp_path, "query", "SELECT (") == cli.EXIT_QUERY_ERROR
        assert "syntax error" in capsys.readouterr().err

    def test_write_refused_by_default(self, env, tmp_path, capsys):
        assert run(tmp_path, "query", "DELETE FROM flights") == cli.EXIT_QUERY_ERROR
        assert env.last.executed == []

    def test_allow_writes(self, env, tmp_path, capsys):
        env.respond(None, [(), ()])
        assert run(tmp_path, "query", "--allow-writes", "DELETE FROM flights WHERE year < 2000") == cli.EXIT_OK
        assert "2 rows affected" in capsys.readouterr().out

    def test_connection_error(self, env, tmp_path, capsys):
        env.fail_connect(psycopg.OperationalError("connection refused"))
        assert run(tmp_path, "tables") == cli.EXIT_CONNECTION_ERROR
        err = capsys.readouterr().err
        assert "connection refused" in err
        assert "pw" not in err.replace("postgresql", "")

    def test_missing_config(self, clean_db_env, tmp_path, capsys, monkeypatch):
        monkeypatch.setattr(logging_module, "_is_configured", False)
        assert run(tmp_path, "tables") == cli.EXIT_CONNECTION_ERROR
        assert "Configuration error" in capsys.readouterr().err
        logging_module.logger.remove()
        logging_module.logger.add(sys.stderr)

    def test_tutorial_list(self, env, tmp_path, capsys):
        assert run(tmp_path, "tutorial", "--list") == cli.EXIT_OK
        out = capsys.readouterr().out
        assert "count_flights" in out
        assert env.connections == []

    def test_tutorial_topic(self, env, tmp_path, capsys):
        env.respond(["x"], [(1,)])
        env.respond(["x"], [(2,)])
        assert run(tmp_path, "tutorial", "--topic", "sorting") == cli.EXIT_OK
        out = capsys.readouterr().out
        assert "[sorting]" in out
        assert "[joins]" not in out

    def test_tutorial_failure_exit_code(self, env, tmp_path, capsys):
        env.fail(psycopg.errors.UndefinedTable('relation "flights" does not exist'))
        env.respond(["x"], [(1,)])
        assert run(tmp_path, "tutorial", "--topic", "sorting") == cli.EXIT_QUERY_ERROR
        assert "does not exist" in capsys.readouterr().out
