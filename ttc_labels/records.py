"""Raw GTFS record types consumed by the exclusion filter and cleaners.

Records are immutable views over one feed row. Only the fields the label
rules read are modelled. Absent, None or NaN values are presented as
empty strings so the rules never special-case missing data.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any


def as_text(value: Any) -> str:
    """Render a raw feed value as a string, mapping missing values to ""."""
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value)


def _field(row: Mapping[str, Any], name: str) -> str:
    return as_text(row.get(name))


@dataclass(frozen=True, slots=True)
class Route:
    """A routes.txt row.

    Attributes:
        route_id: Feed route identifier.
        route_short_name: Rider-facing route number (e.g. "501").
        route_long_name: Rider-facing route name (e.g. "QUEEN").
    """

    route_id: str = ""
    route_short_name: str = ""
    route_long_name: str = ""

    @property
    def route_long_name_or_default(self) -> str:
        return self.route_long_name

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Route:
        return cls(
            route_id=_field(row, "route_id"),
            route_short_name=_field(row, "route_short_name"),
            route_long_name=_field(row, "route_long_name"),
        )


@dataclass(frozen=True, slots=True)
class Trip:
    """A trips.txt row.

    Attributes:
        trip_id: Feed trip identifier.
        route_id: Owning route identifier.
        direction_id: GTFS direction ("0" or "1"), "" when absent.
        trip_headsign: Raw trip headsign.
    """

    trip_id: str = ""
    route_id: str = ""
    direction_id: str = ""
    trip_headsign: str = ""

    @property
    def headsign_or_default(self) -> str:
        return self.trip_headsign

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Trip:
        return cls(
            trip_id=_field(row, "trip_id"),
            route_id=_field(row, "route_id"),
            direction_id=_field(row, "direction_id"),
            trip_headsign=_field(row, "trip_headsign"),
        )


@dataclass(frozen=True, slots=True)
class StopTime:
    """A stop_times.txt row.

    Attributes:
        trip_id: Owning trip identifier.
        stop_id: Served stop identifier.
        stop_sequence: Position of the stop along the trip.
        stop_headsign: Per-stop headsign override, "" when absent.
    """

    trip_id: str = ""
    stop_id: str = ""
    stop_sequence: str = ""
    stop_headsign: str = ""

    @property
    def headsign_or_default(self) -> str:
        return self.stop_headsign

    @property
    def stop_headsign_or_default(self) -> str:
        return self.stop_headsign

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> StopTime:
        return cls(
            trip_id=_field(row, "trip_id"),
            stop_id=_field(row, "stop_id"),
            stop_sequence=_field(row, "stop_sequence"),
            stop_headsign=_field(row, "stop_headsign"),
        )


@dataclass(frozen=True, slots=True)
class Stop:
    """A stops.txt row.

    Attributes:
        stop_id: Unique feed identifier.
        stop_code: Rider-facing stop code, "" when absent.
        stop_name: Raw stop name.
    """

    stop_id: str = ""
    stop_code: str = ""
    stop_name: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Stop:
        return cls(
            stop_id=_field(row, "stop_id"),
            stop_code=_field(row, "stop_code"),
            stop_name=_field(row, "stop_name"),
        )
