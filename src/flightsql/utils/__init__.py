from flightsql.utils.table_renderer import render_table

__all__ = ["render_table"]
