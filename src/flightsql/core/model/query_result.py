"""
Result set returned by a connection.

A ResultSet is fully materialised: rows are plain tuples in server order,
and column metadata comes from the cursor description. Rows can be read as
tuples, as dicts keyed by column name, as a pandas DataFrame or as a text
table.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

import pandas as pd


@dataclass(frozen=True)
class ColumnMetadata:
    """Metadata for a result column"""
    name: str
    type_code: Optional[Any] = None
    display_size: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    nullable: Optional[bool] = None


@dataclass
class ResultSet:
    """
    Rows produced by executing one query.

    Every row holds exactly one value per column, in column order.

    Example:
        result = conn.execute("SELECT carrier, COUNT(*) AS n FROM flights GROUP BY carrier")

        for row in result:
            print(row["carrier"], row["n"])

        total = conn.execute("SELECT COUNT(*) FROM flights").scalar()
        df = result.to_dataframe()
    """
    columns: List[ColumnMetadata] = field(default_factory=list)
    rows: List[Tuple[Any, ...]] = field(default_factory=list)
    rows_affected: int = 0
    execution_time_ms: Optional[float] = None

    def __post_init__(self):
        width = len(self.columns)
        self.rows = [tuple(row) for row in self.rows]
        for idx, row in enumerate(self.rows):
            if len(row) != width:
                raise ValueError(
                    f"Row {idx} has {len(row)} values but {width} columns expected"
                )

    @property
    def column_names(self) -> List[str]:
        """List of column names"""
        return [col.name for col in self.columns]

    @property
    def row_count(self) -> int:
        """Number of rows in result"""
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        """True if no rows"""
        return not self.rows

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        """Iterate over rows as dictionaries."""
        names = self._unique_names()
        for row in self.rows:
            yield dict(zip(names, row))

    def __getitem__(self, index: int) -> Dict[str, Any]:
        return dict(zip(self._unique_names(), self.rows[index]))

    def as_dicts(self) -> List[Dict[str, Any]]:
        """Convert rows to list of dictionaries"""
        return list(self)

    def first(self) -> Optional[Dict[str, Any]]:
        """Return first row as dict, or None if empty"""
        return self[0] if self.rows else None

    def scalar(self) -> Optional[Any]:
        """Return first value of first row, or None if empty"""
        if self.rows and self.rows[0]:
            return self.rows[0][0]
        return None

    def column(self, name: str) -> List[Any]:
        """
        Values of one column, in row order.

        Raises:
            KeyError: If the result has no column with that name
        """
        names = self.column_names
        if name not in names:
            raise KeyError(f"Column '{name}' not in result. Available: {names}")
        position = names.index(name)
        return [row[position] for row in self.rows]

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to a pandas DataFrame, keeping column order"""
        if not self.rows:
            return pd.DataFrame(columns=self.column_names)
        return pd.DataFrame.from_records(self.rows, columns=self.column_names)

    def to_text(self, max_rows: Optional[int] = None) -> str:
        """Render as a plain-text table"""
        from flightsql.utils.table_renderer import render_table

        return render_table(self, max_rows=max_rows)

    def _unique_names(self) -> List[str]:
        names = self.column_names
        if len(set(names)) != len(names):
            duplicates = sorted({n for n in names if names.count(n) > 1})
            raise ValueError(
                f"Duplicate column names {duplicates}; alias them to read rows as mappings"
            )
        return names
