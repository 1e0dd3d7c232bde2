"""
Replays the tutorial catalog against an open connection.

Each catalog entry becomes one step: the SQL is executed, the outcome is
recorded, and the caller decides how to display it. A step rejected by
the database does not stop the walkthrough unless asked to; a lost
connection always does.
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

from flightsql.core.errors import QueryError
from flightsql.core.model.query_result import ResultSet
from flightsql.infrastructure.logging import get_logger
from flightsql.ports.outbound.db_connection import AbstractDatabaseConnection
from flightsql.tutorial.catalog import TUTORIAL_QUERIES, Topic, TutorialQuery
from flightsql.utils.table_renderer import render_table

logger = get_logger(__name__)


@dataclass
class StepOutcome:
    """Result of running one tutorial query"""
    query: TutorialQuery
    result: Optional[ResultSet] = None
    error: Optional[QueryError] = None

    @property
    def is_success(self) -> bool:
        return self.error is None


class TutorialRunner:
    """
    Runs tutorial queries in catalog order.

    Example:
        with open_connection() as conn:
            runner = TutorialRunner(conn, max_rows=10)
            for outcome in runner.run(topics=[Topic.JOINS]):
                print(runner.render(outcome))
    """

    def __init__(
        self,
        connection: AbstractDatabaseConnection,
        max_rows: Optional[int] = 20,
        queries: Sequence[TutorialQuery] = TUTORIAL_QUERIES,
    ):
        self.connection = connection
        self.max_rows = max_rows
        self.queries = tuple(queries)

    def run_step(self, query: TutorialQuery) -> StepOutcome:
        """
        Execute one tutorial query.

        QueryError is captured in the outcome; DatabaseConnectionError
        propagates.
        """
        logger.info(f"Tutorial step '{query.key}' ({query.topic.value})")
        try:
            result = self.connection.execute(query.sql)
        except QueryError as e:
            logger.warning(f"Tutorial step '{query.key}' failed: {e}")
            return StepOutcome(query=query, error=e)
        return StepOutcome(query=query, result=result)

    def run(
        self,
        topics: Optional[Iterable[Topic]] = None,
        stop_on_error: bool = False,
    ) -> Iterator[StepOutcome]:
        """
        Yield one outcome per selected query, in catalog order.

        Args:
            topics: Restrict to these topics (all topics if None)
            stop_on_error: Stop after the first failed step
        """
        selected = {Topic(t) for t in topics} if topics is not None else None
        for query in self.queries:
            if selected is not None and query.topic not in selected:
                continue
            outcome = self.run_step(query)
            yield outcome
            if stop_on_error and not outcome.is_success:
                return

    def render(self, outcome: StepOutcome) -> str:
        """Heading, SQL text and either the result table or the error"""
        query = outcome.query
        heading = f"[{query.topic.value}] {query.title}"
        lines = [heading, "=" * len(heading)]
        if query.description:
            lines.append(query.description)
        lines.append("")
        lines.extend("    " + line.strip() for line in query.sql.splitlines() if line.strip())
        lines.append("")
        if outcome.is_success:
            lines.append(render_table(outcome.result, max_rows=self.max_rows))
        else:
            lines.append(f"ERROR: {outcome.error}")
        return "\n".join(lines)
