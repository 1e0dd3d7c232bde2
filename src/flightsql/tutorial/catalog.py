"""
Tutorial query catalog.

The walkthrough queries the flights database in a fixed order, from
listing schema objects up to set operations. Tables follow the
nycflights13 layout:

    flights(year, month, day, dep_time, sched_dep_time, dep_delay, arr_time,
            sched_arr_time, arr_delay, carrier, flight, tailnum, origin, dest,
            air_time, distance, hour, minute, time_hour)
    airlines(carrier, name)
    airports(faa, name, lat, lon, alt, tz, dst, tzone)
    planes(tailnum, year, type, manufacturer, model, engines, seats, speed, engine)
"""

import difflib
from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from flightsql.core.errors import QueryError
from flightsql.core.security import ReadOnlySQLValidator


class Topic(str, Enum):
    """Tutorial sections, in teaching order"""
    SCHEMA = "schema"
    SELECTION = "selection"
    FILTERING = "filtering"
    SORTING = "sorting"
    AGGREGATION = "aggregation"
    GROUPING = "grouping"
    JOINS = "joins"
    SUBQUERIES = "subqueries"
    SET_OPERATIONS = "set_operations"


class TutorialQuery(BaseModel):
    """One step of the walkthrough"""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., pattern=r"^[a-z0-9_]+$", description="Unique slug")
    topic: Topic = Field(..., description="Tutorial section")
    title: str = Field(..., min_length=1, description="Short heading")
    description: str = Field(default="", description="What the query shows")
    sql: str = Field(..., min_length=1, description="Read-only SQL text")

    @field_validator("sql")
    @classmethod
    def must_be_read_only(cls, value: str) -> str:
        # pydantic only collects ValueError and AssertionError
        try:
            ReadOnlySQLValidator().validate(value)
        except QueryError as e:
            raise ValueError(str(e)) from e
        return value.strip()


TUTORIAL_QUERIES: Tuple[TutorialQuery, ...] = (
    # ------------------------------------------------------------------
    # Schema objects
    # ------------------------------------------------------------------
    TutorialQuery(
        key="list_tables",
        topic=Topic.SCHEMA,
        title="Tables in the database",
        description="Schema objects visible in the public schema.",
        sql="""
            SELECT table_name, table_type
            FROM information_schema.tables
            WHERE table_schema = 'public'
            ORDER BY table_name
        """,
    ),
    TutorialQuery(
        key="flights_columns",
        topic=Topic.SCHEMA,
        title="Columns of the flights table",
        sql="""
            SELECT column_name, data_type, is_nullable
            FROM information_schema.columns
            WHERE table_schema = 'public' AND table_name = 'flights'
            ORDER BY ordinal_position
        """,
    ),
    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    TutorialQuery(
        key="first_flights",
        topic=Topic.SELECTION,
        title="A first look at the flights table",
        description="SELECT * with LIMIT returns at most that many rows.",
        sql="SELECT * FROM flights LIMIT 5",
    ),
    TutorialQuery(
        key="selected_columns",
        topic=Topic.SELECTION,
        title="Choosing columns",
        sql="SELECT carrier, flight, origin, dest, distance FROM flights LIMIT 10",
    ),
    TutorialQuery(
        key="computed_columns",
        topic=Topic.SELECTION,
        title="Computed columns and aliases",
        description="Average speed in miles per hour from distance and air time.",
        sql="""
            SELECT carrier, flight, origin, dest,
                   ROUND(distance / (air_time / 60.0), 1) AS speed_mph
            FROM flights
            WHERE air_time > 0
            LIMIT 10
        """,
    ),
    TutorialQuery(
        key="distinct_origins",
        topic=Topic.SELECTION,
        title="Distinct values",
        sql="SELECT DISTINCT origin FROM flights ORDER BY origin",
    ),
    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------
    TutorialQuery(
        key="january_first",
        topic=Topic.FILTERING,
        title="Flights on January 1st",
        sql="""
            SELECT carrier, flight, origin, dest, dep_time
            FROM flights
            WHERE month = 1 AND day = 1
            LIMIT 10
        """,
    ),
    TutorialQuery(
        key="long_delays",
        topic=Topic.FILTERING,
        title="Arrivals more than two hours late",
        description="BETWEEN, IN and IS NOT NULL combined.",
        sql="""
            SELECT carrier, flight, origin, dest, arr_delay
            FROM flights
            WHERE arr_delay > 120
              AND origin IN ('JFK', 'LGA')
              AND month BETWEEN 6 AND 8
              AND dep_time IS NOT NULL
            LIMIT 10
        """,
    ),
    TutorialQuery(
        key="pattern_match",
        topic=Topic.FILTERING,
        title="Pattern matching on names",
        sql="SELECT carrier, name FROM airlines WHERE name LIKE '%Air%' ORDER BY name",
    ),
    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------
    TutorialQuery(
        key="longest_flights",
        topic=Topic.SORTING,
        title="Longest flights",
        sql="""
            SELECT carrier, flight, origin, dest, distance
            FROM flights
            ORDER BY distance DESC, carrier
            LIMIT 10
        """,
    ),
    TutorialQuery(
        key="most_delayed",
        topic=Topic.SORTING,
        title="Most delayed departures",
        description="NULLS LAST keeps cancelled flights at the bottom.",
        sql="""
            SELECT carrier, flight, month, day, dep_delay
            FROM flights
            ORDER BY dep_delay DESC NULLS LAST
            LIMIT 10
        """,
    ),
    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------
    TutorialQuery(
        key="count_flights",
        topic=Topic.AGGREGATION,
        title="How many flights",
        sql="SELECT COUNT(*) FROM flights",
    ),
    TutorialQuery(
        key="delay_statistics",
        topic=Topic.AGGREGATION,
        title="Delay statistics",
        description="Aggregates skip NULLs; COUNT(column) counts non-null values only.",
        sql="""
            SELECT COUNT(*) AS flights,
                   COUNT(dep_delay) AS departed,
                   ROUND(AVG(dep_delay), 2) AS avg_dep_delay,
                   MIN(dep_delay) AS min_dep_delay,
                   MAX(dep_delay) AS max_dep_delay
            FROM flights
        """,
    ),
    # ------------------------------------------------------------------
    # Grouping
    # ------------------------------------------------------------------
    TutorialQuery(
        key="flights_per_carrier",
        topic=Topic.GROUPING,
        title="Flights per carrier",
        sql="""
            SELECT carrier, COUNT(*) AS flights
            FROM flights
            GROUP BY carrier
            ORDER BY flights DESC
        """,
    ),
    TutorialQuery(
        key="busy_routes",
        topic=Topic.GROUPING,
        title="Routes with more than 5000 flights",
        description="HAVING filters groups after aggregation.",
        sql="""
            SELECT origin, dest, COUNT(*) AS flights, ROUND(AVG(arr_delay), 1) AS avg_arr_delay
            FROM flights
            GROUP BY origin, dest
            HAVING COUNT(*) > 5000
            ORDER BY flights DESC
        """,
    ),
    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------
    TutorialQuery(
        key="carrier_names",
        topic=Topic.JOINS,
        title="Carrier names with an inner join",
        sql="""
            SELECT a.name AS airline, COUNT(*) AS flights
            FROM flights f
            JOIN airlines a ON a.carrier = f.carrier
            GROUP BY a.name
            ORDER BY flights DESC
        """,
    ),
    TutorialQuery(
        key="destination_airports",
        topic=Topic.JOINS,
        title="Destination airport names",
        sql="""
            SELECT f.dest, ap.name AS airport, COUNT(*) AS flights
            FROM flights f
            JOIN airports ap ON ap.faa = f.dest
            GROUP BY f.dest, ap.name
            ORDER BY flights DESC
            LIMIT 10
        """,
    ),
    TutorialQuery(
        key="unknown_planes",
        topic=Topic.JOINS,
        title="Flights whose plane is not in the planes table",
        description="LEFT JOIN keeps unmatched rows with NULLs on the right.",
        sql="""
            SELECT f.carrier, COUNT(*) AS flights
            FROM flights f
            LEFT JOIN planes p ON p.tailnum = f.tailnum
            WHERE p.tailnum IS NULL
            GROUP BY f.carrier
            ORDER BY flights DESC
        """,
    ),
    TutorialQuery(
        key="plane_age",
        topic=Topic.JOINS,
        title="Average plane age per carrier",
        sql="""
            SELECT f.carrier, ROUND(AVG(f.year - p.year), 1) AS avg_plane_age
            FROM flights f
            JOIN planes p ON p.tailnum = f.tailnum
            WHERE p.year IS NOT NULL
            GROUP BY f.carrier
            ORDER BY avg_plane_age DESC
        """,
    ),
    # ------------------------------------------------------------------
    # Subqueries
    # ------------------------------------------------------------------
    TutorialQuery(
        key="above_average_distance",
        topic=Topic.SUBQUERIES,
        title="Flights longer than average",
        description="Scalar subquery in WHERE.",
        sql="""
            SELECT carrier, flight, origin, dest, distance
            FROM flights
            WHERE distance > (SELECT AVG(distance) FROM flights)
            ORDER BY distance
            LIMIT 10
        """,
    ),
    TutorialQuery(
        key="big_plane_flights",
        topic=Topic.SUBQUERIES,
        title="Flights on planes with more than 300 seats",
        description="IN with a subquery.",
        sql="""
            SELECT carrier, flight, tailnum, origin, dest
            FROM flights
            WHERE tailnum IN (SELECT tailnum FROM planes WHERE seats > 300)
            LIMIT 10
        """,
    ),
    TutorialQuery(
        key="worst_delay_per_origin",
        topic=Topic.SUBQUERIES,
        title="Worst departure delay at each origin",
        description="Correlated subquery referencing the outer row.",
        sql="""
            SELECT f.origin, f.carrier, f.flight, f.dep_delay
            FROM flights f
            WHERE f.dep_delay = (
                SELECT MAX(f2.dep_delay) FROM flights f2 WHERE f2.origin = f.origin
            )
            ORDER BY f.origin
        """,
    ),
    TutorialQuery(
        key="monthly_averages",
        topic=Topic.SUBQUERIES,
        title="Busiest month from a derived table",
        sql="""
            SELECT month, flights
            FROM (
                SELECT month, COUNT(*) AS flights FROM flights GROUP BY month
            ) AS per_month
            ORDER BY flights DESC
            LIMIT 3
        """,
    ),
    TutorialQuery(
        key="carrier_share_cte",
        topic=Topic.SUBQUERIES,
        title="Carrier share with a common table expression",
        sql="""
            WITH per_carrier AS (
                SELECT carrier, COUNT(*) AS flights FROM flights GROUP BY carrier
            )
            SELECT carrier, flights,
                   ROUND(100.0 * flights / SUM(flights) OVER (), 2) AS pct
            FROM per_carrier
            ORDER BY flights DESC
        """,
    ),
    # ------------------------------------------------------------------
    # Set operations
    # ------------------------------------------------------------------
    TutorialQuery(
        key="served_airports",
        topic=Topic.SET_OPERATIONS,
        title="Every airport used as origin or destination",
        description="UNION removes duplicates.",
        sql="""
            SELECT origin AS faa FROM flights
            UNION
            SELECT dest FROM flights
            ORDER BY faa
        """,
    ),
    TutorialQuery(
        key="union_all_counts",
        topic=Topic.SET_OPERATIONS,
        title="Departures and arrivals stacked",
        description="UNION ALL keeps duplicates; the tag column says which side a row came from.",
        sql="""
            SELECT 'departure' AS kind, origin AS faa, COUNT(*) AS flights FROM flights GROUP BY origin
            UNION ALL
            SELECT 'arrival', dest, COUNT(*) FROM flights GROUP BY dest
            ORDER BY flights DESC
            LIMIT 10
        """,
    ),
    TutorialQuery(
        key="round_trip_airports",
        topic=Topic.SET_OPERATIONS,
        title="Airports that are both origins and destinations",
        sql="""
            SELECT origin AS faa FROM flights
            INTERSECT
            SELECT dest FROM flights
        """,
    ),
    TutorialQuery(
        key="unserved_airports",
        topic=Topic.SET_OPERATIONS,
        title="Known airports never flown to",
        sql="""
            SELECT faa FROM airports
            EXCEPT
            SELECT dest FROM flights
            ORDER BY faa
            LIMIT 10
        """,
    ),
)


def list_topics() -> List[Topic]:
    """Topics that have at least one query, in teaching order"""
    present = {q.topic for q in TUTORIAL_QUERIES}
    return [topic for topic in Topic if topic in present]


def queries_by_topic(topic: Topic) -> List[TutorialQuery]:
    """Catalog queries of one topic, in catalog order"""
    topic = Topic(topic)
    return [q for q in TUTORIAL_QUERIES if q.topic == topic]


def get_query(key: str) -> TutorialQuery:
    """
    Look up a catalog query by key.

    Raises:
        KeyError: If no query has that key; the message lists close matches
    """
    for query in TUTORIAL_QUERIES:
        if query.key == key:
            return query
    keys = [q.key for q in TUTORIAL_QUERIES]
    suggestions = difflib.get_close_matches(key, keys, n=3, cutoff=0.4)
    hint = f" Did you mean: {', '.join(suggestions)}?" if suggestions else ""
    raise KeyError(f"Unknown tutorial query '{key}'.{hint}")
