"""
Tutorial module - Ordered catalog of example queries and its runner.
"""

from flightsql.tutorial.catalog import (
    Topic,
    TutorialQuery,
    TUTORIAL_QUERIES,
    get_query,
    list_topics,
    queries_by_topic,
)
from flightsql.tutorial.runner import StepOutcome, TutorialRunner

__all__ = [
    "Topic",
    "TutorialQuery",
    "TUTORIAL_QUERIES",
    "get_query",
    "list_topics",
    "queries_by_topic",
    "StepOutcome",
    "TutorialRunner",
]
