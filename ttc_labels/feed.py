"""Record-processing orchestrator for agency label rules.

Applies an AgencyRules capability set to already-parsed GTFS tables held
in pandas DataFrames. Reading the feed files is the caller's concern;
tables are expected to be read as text (``dtype=str``).

Stage order per feed:
  1. Contracts: fail fast on missing required columns, fill optional
     columns and nulls with "".
  2. Routes: clean route long names.
  3. Trips: drop excluded trips, clean trip headsigns.
  4. Stop times: drop stop times of dropped trips and excluded stop
     times, clean per-stop headsigns with the owning route and trip.
  5. Stops: drop excluded stops, clean stop names.
  6. Directions: settle one headsign per (route_id, direction_id).

Input frames are never mutated.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Final, TypeVar

import pandas as pd

from ttc_labels.config import AgencyRules
from ttc_labels.contracts import (
    ROUTES_CONTRACT,
    STOP_TIMES_CONTRACT,
    STOPS_CONTRACT,
    TRIPS_CONTRACT,
    TableContract,
)
from ttc_labels.headsigns import settle_direction_headsign
from ttc_labels.records import Route, Stop, StopTime, Trip, as_text

logger: Final[logging.Logger] = logging.getLogger(__name__)

DIRECTION_COLUMNS: Final[list[str]] = ["route_id", "direction_id", "headsign"]

_R = TypeVar("_R")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class FeedSchemaError(Exception):
    """Raised when a GTFS table lacks columns required by its contract.

    Attributes:
        table_name: GTFS table that failed the contract.
        missing_columns: Sorted names of the absent required columns.
    """

    def __init__(self, table_name: str, missing_columns: list[str]) -> None:
        self.table_name = table_name
        self.missing_columns = missing_columns
        detail = ", ".join(missing_columns)
        super().__init__(f"Table '{table_name}' is missing required columns: {detail}")


# ---------------------------------------------------------------------------
# Result dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FeedTables:
    """The GTFS tables the label rules read.

    Attributes:
        routes: routes.txt rows.
        trips: trips.txt rows.
        stops: stops.txt rows.
        stop_times: stop_times.txt rows.
    """

    routes: pd.DataFrame
    trips: pd.DataFrame
    stops: pd.DataFrame
    stop_times: pd.DataFrame


@dataclass(frozen=True, slots=True)
class TableResult:
    """Row accounting for one table.

    Attributes:
        table_name: GTFS table name.
        rows_in: Rows received.
        rows_excluded: Rows dropped by exclusion rules (including stop
            times orphaned by a dropped trip).
    """

    table_name: str
    rows_in: int
    rows_excluded: int

    @property
    def rows_out(self) -> int:
        return self.rows_in - self.rows_excluded


@dataclass(frozen=True, slots=True)
class FeedResult:
    """Outcome of applying agency rules to a feed.

    Attributes:
        tables: Cleaned tables, excluded rows removed, index reset.
        directions: One settled headsign per (route_id, direction_id).
        table_results: Per-table row accounting, in processing order.
        elapsed_seconds: Wall-clock duration.
    """

    tables: FeedTables
    directions: pd.DataFrame
    table_results: tuple[TableResult, ...] = field(default_factory=tuple)
    elapsed_seconds: float = 0.0

    def result_for(self, table_name: str) -> TableResult:
        """Return the row accounting of one table.

        Raises:
            KeyError: If the table was not processed.
        """
        for result in self.table_results:
            if result.table_name == table_name:
                return result
        raise KeyError(f"No result for table '{table_name}'")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def prepare_table(frame: pd.DataFrame, contract: TableContract) -> pd.DataFrame:
    """Validate a table against its contract and normalize contract columns.

    Returns:
        A copy with every contract column present and rendered as text.

    Raises:
        FeedSchemaError: If a required column is missing.
    """
    missing = sorted(contract.required_columns - set(frame.columns))
    if missing:
        raise FeedSchemaError(contract.table_name, missing)

    prepared = frame.copy()
    for column in contract.column_names:
        if column not in prepared.columns:
            prepared[column] = ""
            continue
        values = prepared[column].astype(object)
        prepared[column] = values.where(values.notna(), "").map(as_text)
    return prepared


def _records(frame: pd.DataFrame, build: Callable[[dict[str, Any]], _R]) -> list[_R]:
    return [build(row) for row in frame.to_dict("records")]


def _exclusion_mask(records: list[_R], predicate: Callable[[_R], bool], index: pd.Index) -> pd.Series:
    return pd.Series([predicate(r) for r in records], index=index, dtype=bool)


def _log_exclusions(result: TableResult) -> None:
    logger.info(
        "Excluded %d of %d %s rows",
        result.rows_excluded,
        result.rows_in,
        result.table_name,
    )


# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------


def _clean_routes(routes: pd.DataFrame, rules: AgencyRules) -> tuple[pd.DataFrame, TableResult]:
    cleaned = routes.copy()
    cleaned["route_long_name"] = cleaned["route_long_name"].map(rules.clean_route_long_name)
    return cleaned.reset_index(drop=True), TableResult("routes", len(routes), 0)


def _clean_trips(trips: pd.DataFrame, rules: AgencyRules) -> tuple[pd.DataFrame, TableResult]:
    mask = _exclusion_mask(_records(trips, Trip.from_row), rules.exclude_trip, trips.index)
    kept = trips.loc[~mask].copy()
    kept["trip_headsign"] = kept["trip_headsign"].map(rules.clean_trip_headsign)
    result = TableResult("trips", len(trips), int(mask.sum()))
    _log_exclusions(result)
    return kept.reset_index(drop=True), result


def _clean_stop_times(
    stop_times: pd.DataFrame,
    trips_by_id: dict[str, Trip],
    routes_by_id: dict[str, Route],
    rules: AgencyRules,
) -> tuple[pd.DataFrame, TableResult]:
    orphaned = ~stop_times["trip_id"].isin(list(trips_by_id))
    candidates = stop_times.loc[~orphaned]
    records = _records(candidates, StopTime.from_row)
    mask = _exclusion_mask(records, rules.exclude_stop_time, candidates.index)
    kept = candidates.loc[~mask].copy()

    headsigns: list[str] = []
    for stop_time in (r for r, excluded in zip(records, mask) if not excluded):
        raw = stop_time.stop_headsign_or_default
        if not raw:
            headsigns.append(raw)
            continue
        trip = trips_by_id[stop_time.trip_id]
        route = routes_by_id.get(trip.route_id, Route(route_id=trip.route_id))
        headsigns.append(rules.stop_headsign(route, trip, stop_time, raw))
    kept["stop_headsign"] = headsigns

    if int(orphaned.sum()):
        logger.info(
            "Dropped %d stop_times rows whose trip was excluded or unknown",
            int(orphaned.sum()),
        )
    result = TableResult("stop_times", len(stop_times), int(orphaned.sum() + mask.sum()))
    _log_exclusions(result)
    return kept.reset_index(drop=True), result


def _clean_stops(stops: pd.DataFrame, rules: AgencyRules) -> tuple[pd.DataFrame, TableResult]:
    mask = _exclusion_mask(_records(stops, Stop.from_row), rules.exclude_stop, stops.index)
    kept = stops.loc[~mask].copy()
    kept["stop_name"] = kept["stop_name"].map(rules.clean_stop_name)
    result = TableResult("stops", len(stops), int(mask.sum()))
    _log_exclusions(result)
    return kept.reset_index(drop=True), result


def settle_directions(trips: pd.DataFrame, rules: AgencyRules) -> pd.DataFrame:
    """Settle one direction headsign per (route_id, direction_id).

    Args:
        trips: Cleaned trips with route_id, direction_id and trip_headsign.
        rules: Agency rules providing the selector and the cleaner.

    Returns:
        DataFrame with DIRECTION_COLUMNS; directions without any non-empty
        headsign are omitted.
    """
    rows: list[dict[str, str]] = []
    for (route_id, direction_id), group in trips.groupby(
        ["route_id", "direction_id"], sort=True
    ):
        candidates = group["trip_headsign"].drop_duplicates().tolist()
        settled = settle_direction_headsign(candidates, rules.select_direction_headsign)
        if settled is None:
            logger.debug("No headsign for route %s direction %s", route_id, direction_id)
            continue
        headsign = rules.clean_direction_headsign(direction_id, False, settled)
        logger.debug(
            "Route %s direction %s: %d candidates -> %r",
            route_id,
            direction_id,
            len(candidates),
            headsign,
        )
        rows.append(
            {"route_id": route_id, "direction_id": direction_id, "headsign": headsign}
        )
    return pd.DataFrame(rows, columns=DIRECTION_COLUMNS)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------


def apply_rules(tables: FeedTables, rules: AgencyRules) -> FeedResult:
    """Apply exclusion and cleaning rules to every table of a feed.

    Args:
        tables: Parsed GTFS tables.
        rules: Agency capability set.

    Returns:
        FeedResult with cleaned tables, settled directions and row counts.

    Raises:
        FeedSchemaError: If any table lacks a required column. Raised
            before any table is processed.
    """
    start = time.monotonic()

    routes = prepare_table(tables.routes, ROUTES_CONTRACT)
    trips = prepare_table(tables.trips, TRIPS_CONTRACT)
    stops = prepare_table(tables.stops, STOPS_CONTRACT)
    stop_times = prepare_table(tables.stop_times, STOP_TIMES_CONTRACT)

    routes_by_id = {r.route_id: r for r in _records(routes, Route.from_row)}

    clean_routes, routes_result = _clean_routes(routes, rules)
    clean_trips, trips_result = _clean_trips(trips, rules)

    kept_ids = set(clean_trips["trip_id"])
    trips_by_id = {t.trip_id: t for t in _records(trips, Trip.from_row) if t.trip_id in kept_ids}
    clean_stop_times, stop_times_result = _clean_stop_times(
        stop_times, trips_by_id, routes_by_id, rules
    )
    clean_stops, stops_result = _clean_stops(stops, rules)
    directions = settle_directions(clean_trips, rules)

    elapsed = time.monotonic() - start
    logger.info(
        "Applied %s rules: %d trips, %d stops, %d directions (%.2fs)",
        rules.name,
        len(clean_trips),
        len(clean_stops),
        len(directions),
        elapsed,
    )
    return FeedResult(
        tables=FeedTables(
            routes=clean_routes,
            trips=clean_trips,
            stops=clean_stops,
            stop_times=clean_stop_times,
        ),
        directions=directions,
        table_results=(routes_result, trips_result, stop_times_result, stops_result),
        elapsed_seconds=round(elapsed, 3),
    )
