"""Column contracts for the GTFS tables read by the label orchestrator.

Only the columns the rules consult are listed. Required columns must be
present in the incoming frame; optional columns are filled with empty
strings when a feed omits them (GTFS makes headsigns, stop codes and
direction ids optional).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final


@dataclass(frozen=True, slots=True)
class ColumnContract:
    """Expectation for a single GTFS column.

    Attributes:
        name: Exact column header as it appears in the GTFS file.
        required: Whether the column must be present.
    """

    name: str
    required: bool = True


@dataclass(frozen=True, slots=True)
class TableContract:
    """Column contract for one GTFS table.

    Attributes:
        table_name: GTFS file stem (e.g. "trips").
        columns: Ordered tuple of column expectations.
    """

    table_name: str
    columns: tuple[ColumnContract, ...]

    @property
    def column_names(self) -> tuple[str, ...]:
        """Return ordered tuple of contract column names."""
        return tuple(c.name for c in self.columns)

    @property
    def required_columns(self) -> frozenset[str]:
        """Return set of column names that must be present."""
        return frozenset(c.name for c in self.columns if c.required)

    @property
    def optional_columns(self) -> frozenset[str]:
        """Return set of column names that may be absent."""
        return frozenset(c.name for c in self.columns if not c.required)


ROUTES_CONTRACT: Final[TableContract] = TableContract(
    table_name="routes",
    columns=(
        ColumnContract(name="route_id"),
        ColumnContract(name="route_short_name", required=False),
        ColumnContract(name="route_long_name", required=False),
    ),
)

TRIPS_CONTRACT: Final[TableContract] = TableContract(
    table_name="trips",
    columns=(
        ColumnContract(name="route_id"),
        ColumnContract(name="trip_id"),
        ColumnContract(name="trip_headsign", required=False),
        ColumnContract(name="direction_id", required=False),
    ),
)

STOPS_CONTRACT: Final[TableContract] = TableContract(
    table_name="stops",
    columns=(
        ColumnContract(name="stop_id"),
        ColumnContract(name="stop_code", required=False),
        ColumnContract(name="stop_name"),
    ),
)

STOP_TIMES_CONTRACT: Final[TableContract] = TableContract(
    table_name="stop_times",
    columns=(
        ColumnContract(name="trip_id"),
        ColumnContract(name="stop_id"),
        ColumnContract(name="stop_sequence"),
        ColumnContract(name="stop_headsign", required=False),
    ),
)


CONTRACTS: Final[dict[str, TableContract]] = {
    c.table_name: c
    for c in (ROUTES_CONTRACT, TRIPS_CONTRACT, STOPS_CONTRACT, STOP_TIMES_CONTRACT)
}
