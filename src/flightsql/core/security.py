"""
SQL guard applied before a statement leaves the client.

The tutorial only ever reads from the flights database, so connections
default to READ_ONLY: single SELECT / WITH statements pass, everything
else is refused without a round trip to the server.
"""

import re
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from flightsql.core.errors import QueryError, SQLSecurityException

_DOLLAR_TAG = re.compile(r"\$(?:[A-Za-z_][A-Za-z0-9_]*)?\$")


class SecurityMode(str, Enum):
    """Which statements a connection forwards to the database"""
    NONE = "none"            # Anything non-empty is forwarded
    READ_ONLY = "read_only"  # Only SELECT/WITH (default)
    CUSTOM = "custom"        # Caller-supplied validator


class SQLValidator(ABC):
    """Abstract base class for SQL validators"""

    @abstractmethod
    def validate(self, query: str) -> None:
        """
        Validate SQL text before execution.

        Args:
            query: SQL text to validate

        Raises:
            QueryError: If query is empty
            SQLSecurityException: If query is not allowed
        """
        pass

    @staticmethod
    def _require_text(query: str) -> None:
        if not query or not query.strip():
            raise QueryError("SQL query cannot be empty", query=query)


class NoOpValidator(SQLValidator):
    """Validator used with SecurityMode.NONE"""

    def validate(self, query: str) -> None:
        self._require_text(query)


class ReadOnlySQLValidator(SQLValidator):
    """
    Accepts a single SELECT or WITH statement.

    Rejected:
    - DML: INSERT, UPDATE, DELETE, MERGE, TRUNCATE, COPY
    - DDL: CREATE, ALTER, DROP, RENAME
    - Privileges: GRANT, REVOKE
    - Execution: EXECUTE, EXEC, CALL
    - Transaction: COMMIT, ROLLBACK, SAVEPOINT
    - Locking: LOCK and FOR UPDATE / FOR SHARE clauses

    Anything else that does not start with SELECT or WITH is refused too.
    Comments and quoted literals are masked first, so a flight
    remark like 'delayed, update pending' does not trip the scan.
    """

    DANGEROUS_KEYWORDS = frozenset([
        'INSERT', 'UPDATE', 'DELETE', 'TRUNCATE', 'MERGE', 'COPY',  # DML
        'DROP', 'CREATE', 'ALTER', 'RENAME',  # DDL
        'GRANT', 'REVOKE',  # Privileges
        'EXECUTE', 'EXEC', 'CALL',  # Execution
        'COMMIT', 'ROLLBACK', 'SAVEPOINT',  # Transaction
        'LOCK',  # Locking
    ])

    def validate(self, query: str) -> None:
        """
        Validate SQL text for read-only execution.

        Args:
            query: SQL text to validate

        Raises:
            QueryError: If query is empty
            SQLSecurityException: If query is not a single SELECT/WITH
        """
        self._require_text(query)

        query_masked = self._mask_literals_and_comments(query)

        if self._detect_multi_statements(query_masked):
            raise SQLSecurityException(
                "Multiple SQL statements detected. Only single SELECT or WITH queries are allowed.",
                query=query,
            )

        query_normalized = ' '.join(query_masked.split()).upper()
        if not query_normalized:
            raise QueryError("SQL query cannot be empty", query=query)

        # Row locking clauses still write locks; refuse them explicitly
        if re.search(r'\bFOR\s+(NO\s+KEY\s+)?UPDATE\b|\bFOR\s+(KEY\s+)?SHARE\b', query_normalized):
            raise SQLSecurityException(
                "Row locking clauses are not allowed in read-only mode.",
                query=query,
            )

        for keyword in sorted(self.DANGEROUS_KEYWORDS):
            if re.search(r'\b' + keyword + r'\b', query_normalized):
                raise SQLSecurityException(
                    f"Dangerous SQL keyword detected: {keyword}. "
                    "Only SELECT and WITH queries are allowed.",
                    query=query,
                )

        query_stripped = query_normalized.lstrip('( ')
        if not (query_stripped.startswith('SELECT') or query_stripped.startswith('WITH')):
            raise SQLSecurityException(
                "Query must start with SELECT or WITH. Only read-only queries are allowed.",
                query=query,
            )

    @classmethod
    def _mask_literals_and_comments(cls, query: str) -> str:
        """
        Replace literals, quoted identifiers and comments in one left-to-right pass.

        Whichever construct opens first wins, the way the server lexer reads
        it: '--' inside a literal is text, a quote inside a comment is comment.
        Handles '' escapes, E'..' backslash escapes, "identifiers",
        $tag$ bodies $tag$ and nested /* */ comments.

        Raises:
            SQLSecurityException: If a literal or comment is never closed
        """
        out = []
        i, n = 0, len(query)
        while i < n:
            ch = query[i]
            pair = query[i:i + 2]
            prev = query[i - 1] if i > 0 else ''
            dollar = None
            if ch == '$' and not cls._is_ident_char(prev):
                dollar = _DOLLAR_TAG.match(query, i)

            if pair == '--':
                end = query.find('\n', i)
                i = n if end == -1 else end
                out.append(' ')
                continue

            if pair == '/*':
                end = cls._skip_block_comment(query, i)
                replacement = ' '
            elif ch == "'":
                before_prefix = query[i - 2] if i > 1 else ''
                backslash = prev in ('E', 'e') and not cls._is_ident_char(before_prefix)
                end = cls._skip_quoted(query, i, "'", backslash)
                replacement = "'STRING'"
            elif ch == '"':
                end = cls._skip_quoted(query, i, '"', False)
                replacement = '"IDENT"'
            elif dollar:
                tag = dollar.group()
                close = query.find(tag, i + len(tag))
                end = -1 if close == -1 else close + len(tag)
                replacement = "'STRING'"
            else:
                out.append(ch)
                i += 1
                continue

            if end == -1:
                raise SQLSecurityException(
                    "Unterminated quoted string or comment.",
                    query=query,
                )
            out.append(replacement)
            i = end

        return ''.join(out)

    @staticmethod
    def _is_ident_char(ch: str) -> bool:
        return bool(ch) and (ch.isalnum() or ch in '_$')

    @staticmethod
    def _skip_quoted(query: str, start: int, quote: str, backslash: bool) -> int:
        """Index just past the closing quote, or -1"""
        i, n = start + 1, len(query)
        while i < n:
            ch = query[i]
            if backslash and ch == '\\':
                i += 2
            elif ch == quote:
                if query[i + 1:i + 2] == quote:
                    i += 2
                else:
                    return i + 1
            else:
                i += 1
        return -1

    @staticmethod
    def _skip_block_comment(query: str, start: int) -> int:
        """Index just past the matching */ (comments nest), or -1"""
        depth = 0
        i, n = start, len(query)
        while i < n:
            pair = query[i:i + 2]
            if pair == '/*':
                depth += 1
                i += 2
            elif pair == '*/':
                depth -= 1
                i += 2
                if depth == 0:
                    return i
            else:
                i += 1
        return -1

    @staticmethod
    def _detect_multi_statements(query: str) -> bool:
        """Detect more than one non-empty statement separated by semicolons"""
        parts = [p.strip() for p in query.split(';') if p.strip()]
        return len(parts) > 1


def create_validator(
    mode: SecurityMode,
    custom_validator: Optional[SQLValidator] = None
) -> SQLValidator:
    """
    Build the validator matching a security mode.

    Args:
        mode: Security mode
        custom_validator: Validator to use when mode is CUSTOM

    Returns:
        SQLValidator instance

    Raises:
        ValueError: If mode is CUSTOM and no validator is given
    """
    if mode == SecurityMode.CUSTOM:
        if custom_validator is None:
            raise ValueError("custom_validator required when mode is CUSTOM")
        return custom_validator
    elif mode == SecurityMode.READ_ONLY:
        return ReadOnlySQLValidator()
    else:
        return NoOpValidator()
