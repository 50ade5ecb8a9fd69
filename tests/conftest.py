"""Shared pytest fixtures for the label rule tests.

Builds a small TTC streetcar feed programmatically as pandas DataFrames,
shaped the way a feed reader produces them with ``dtype=str``.
"""

from __future__ import annotations

import pandas as pd
import pytest

from ttc_labels.feed import FeedTables

# ---------------------------------------------------------------------------
# Feed rows
# ---------------------------------------------------------------------------

ROUTES_ROWS: list[dict[str, str]] = [
    {"route_id": "501", "route_short_name": "501", "route_long_name": "QUEEN"},
    {"route_id": "504", "route_short_name": "504", "route_long_name": "KING"},
    {"route_id": "510", "route_short_name": "510", "route_long_name": "SPADINA"},
]

TRIPS_ROWS: list[dict[str, str]] = [
    # route_id, trip_id, direction_id, trip_headsign
    {
        "route_id": "501",
        "trip_id": "t1",
        "direction_id": "0",
        "trip_headsign": "EAST - 501 QUEEN towards NEVILLE PARK",
    },
    {"route_id": "501", "trip_id": "t2", "direction_id": "0", "trip_headsign": "East"},
    {
        "route_id": "501",
        "trip_id": "t3",
        "direction_id": "1",
        "trip_headsign": "WEST - 501 QUEEN towards LONG BRANCH",
    },
    {
        "route_id": "501",
        "trip_id": "t4",
        "direction_id": "1",
        "trip_headsign": "Not In Service",
    },
    {"route_id": "504", "trip_id": "t5", "direction_id": "0", "trip_headsign": "L 504 KING"},
    {
        "route_id": "504",
        "trip_id": "t6",
        "direction_id": "0",
        "trip_headsign": "504A KING towards DUFFERIN GATE",
    },
    {
        "route_id": "510",
        "trip_id": "t7",
        "direction_id": "0",
        "trip_headsign": "(Not In Service)",
    },
]

STOP_TIMES_ROWS: list[dict[str, str]] = [
    {"trip_id": "t1", "stop_id": "100", "stop_sequence": "1", "stop_headsign": ""},
    {
        "trip_id": "t1",
        "stop_id": "101",
        "stop_sequence": "2",
        "stop_headsign": "501 QUEEN - NEVILLE PARK",
    },
    {"trip_id": "t3", "stop_id": "102", "stop_sequence": "1", "stop_headsign": "NOT IN SERVICE"},
    {"trip_id": "t4", "stop_id": "100", "stop_sequence": "1", "stop_headsign": ""},
    {
        "trip_id": "t6",
        "stop_id": "103",
        "stop_sequence": "1",
        "stop_headsign": "504A KING - DUFFERIN GATE",
    },
]

STOPS_ROWS: list[dict[str, str]] = [
    {
        "stop_id": "100",
        "stop_code": "10001",
        "stop_name": "QUEEN ST EAST AT BROADVIEW AVE EAST SIDE",
    },
    {"stop_id": "101", "stop_code": "101", "stop_name": "QUEEN ST EAST AT BROADVIEW AVE"},
    {"stop_id": "102", "stop_code": "", "stop_name": "KING ST WEST @ SPADINA AVE"},
    {"stop_id": "103", "stop_code": "14123", "stop_name": "DUFFERIN GATE LOOP"},
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def routes_df() -> pd.DataFrame:
    """routes.txt with three streetcar routes."""
    return pd.DataFrame(ROUTES_ROWS)


@pytest.fixture()
def trips_df() -> pd.DataFrame:
    """trips.txt with two "Not In Service" trips."""
    return pd.DataFrame(TRIPS_ROWS)


@pytest.fixture()
def stop_times_df() -> pd.DataFrame:
    """stop_times.txt with one excluded and one orphaned row."""
    return pd.DataFrame(STOP_TIMES_ROWS)


@pytest.fixture()
def stops_df() -> pd.DataFrame:
    """stops.txt with one placeholder stop (id == code)."""
    return pd.DataFrame(STOPS_ROWS)


@pytest.fixture()
def feed_tables(
    routes_df: pd.DataFrame,
    trips_df: pd.DataFrame,
    stops_df: pd.DataFrame,
    stop_times_df: pd.DataFrame,
) -> FeedTables:
    """Complete feed built from the table fixtures."""
    return FeedTables(
        routes=routes_df,
        trips=trips_df,
        stops=stops_df,
        stop_times=stop_times_df,
    )
