"""
Table Renderer
==============

Renders a ResultSet as a plain-text table with tabulate.
"""

from decimal import Decimal
from typing import TYPE_CHECKING, Any, List, Optional

from tabulate import tabulate

if TYPE_CHECKING:
    from flightsql.core.model.query_result import ResultSet

NULL_DISPLAY = "NULL"


def _format_value(value: Any) -> Any:
    if value is None:
        return NULL_DISPLAY
    if isinstance(value, Decimal):
        return float(value)
    return value


def render_table(
    result: "ResultSet",
    max_rows: Optional[int] = None,
    tablefmt: str = "psql",
) -> str:
    """
    Render rows under their column headers.

    Args:
        result: Result to render
        max_rows: Show at most this many rows; a footer reports the rest
        tablefmt: Any tabulate format name

    Returns:
        Table text followed by a "(N rows)" footer
    """
    if not result.columns:
        return f"(no result set, {result.rows_affected} rows affected)"

    rows = result.rows
    truncated = max_rows is not None and len(rows) > max_rows
    if truncated:
        rows = rows[:max_rows]

    body: List[List[Any]] = [[_format_value(v) for v in row] for row in rows]
    text = tabulate(body, headers=result.column_names, tablefmt=tablefmt, missingval=NULL_DISPLAY)

    noun = "row" if result.row_count == 1 else "rows"
    footer = f"({result.row_count} {noun})"
    if truncated:
        footer = f"({result.row_count} {noun}, showing first {max_rows})"
    return f"{text}\n{footer}"
