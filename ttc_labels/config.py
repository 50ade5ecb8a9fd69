"""Agency rule configuration registry.

An AgencyRules object is the capability set a feed orchestrator consults
for every record: exclusion predicates, label cleaners and direction
headsign hooks. DEFAULT_RULES documents the base behaviour (exclude
nothing, leave labels as they are); TTC_LIGHT_RAIL_RULES plugs in the
TTC streetcar / light rail rules from this package and falls back to the
default decision wherever its own rule does not apply.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from ttc_labels import cleaning, exclusion, headsigns
from ttc_labels.records import Route, Stop, StopTime, Trip

StopHeadsignCleaner = Callable[[Route, Trip, StopTime, str], str]
DirectionHeadsignCleaner = Callable[[int | str | None, bool, str], str]


def _never(record: object) -> bool:
    return False


def _unchanged(label: str) -> str:
    return label


def _no_selection(headsign1: str | None, headsign2: str | None) -> str | None:
    return None


def _direction_unchanged(direction_id: int | str | None, from_stop_name: bool, label: str) -> str:
    return label


@dataclass(frozen=True, slots=True)
class AgencyRules:
    """Immutable capability set for one agency feed.

    Attributes:
        name: Machine-readable agency identifier (snake_case).
        exclude_trip: Returns True to drop a trip.
        exclude_stop_time: Returns True to drop a stop time.
        exclude_stop: Returns True to drop a stop.
        clean_trip_headsign: Trip headsign cleaner.
        clean_stop_name: Stop name cleaner.
        clean_route_long_name: Route long name cleaner.
        clean_stop_headsign: Per-stop headsign cleaner. None routes stop
            headsigns through ``clean_trip_headsign``.
        select_direction_headsign: Picks one of two conflicting direction
            headsigns, or None to keep the current one.
        clean_direction_headsign: Direction headsign cleaner.
    """

    name: str
    exclude_trip: Callable[[Trip], bool] = _never
    exclude_stop_time: Callable[[StopTime], bool] = _never
    exclude_stop: Callable[[Stop], bool] = _never
    clean_trip_headsign: Callable[[str], str] = _unchanged
    clean_stop_name: Callable[[str], str] = _unchanged
    clean_route_long_name: Callable[[str], str] = _unchanged
    clean_stop_headsign: StopHeadsignCleaner | None = None
    select_direction_headsign: Callable[[str | None, str | None], str | None] = _no_selection
    clean_direction_headsign: DirectionHeadsignCleaner = _direction_unchanged

    def stop_headsign(self, route: Route, trip: Trip, stop_time: StopTime, raw: str) -> str:
        """Clean a per-stop headsign, defaulting to the trip headsign cleaner."""
        if self.clean_stop_headsign is not None:
            return self.clean_stop_headsign(route, trip, stop_time, raw)
        return self.clean_trip_headsign(raw)


DEFAULT_RULES: Final[AgencyRules] = AgencyRules(name="default")


def _ttc_exclude_trip(trip: Trip) -> bool:
    return exclusion.exclude_trip(trip, default=DEFAULT_RULES.exclude_trip(trip))


def _ttc_exclude_stop_time(stop_time: StopTime) -> bool:
    return exclusion.exclude_stop_time(
        stop_time, default=DEFAULT_RULES.exclude_stop_time(stop_time)
    )


def _ttc_exclude_stop(stop: Stop) -> bool:
    return exclusion.exclude_stop(stop, default=DEFAULT_RULES.exclude_stop(stop))


TTC_LIGHT_RAIL_RULES: Final[AgencyRules] = AgencyRules(
    name="ttc_light_rail",
    exclude_trip=_ttc_exclude_trip,
    exclude_stop_time=_ttc_exclude_stop_time,
    exclude_stop=_ttc_exclude_stop,
    clean_trip_headsign=cleaning.clean_trip_headsign,
    clean_stop_name=cleaning.clean_stop_name,
    clean_route_long_name=cleaning.clean_route_long_name,
    clean_stop_headsign=headsigns.clean_stop_headsign,
    select_direction_headsign=headsigns.select_direction_headsign,
    clean_direction_headsign=cleaning.clean_direction_headsign,
)


AGENCIES: Final[tuple[AgencyRules, ...]] = (DEFAULT_RULES, TTC_LIGHT_RAIL_RULES)


def get_agency_rules(name: str) -> AgencyRules:
    """Look up agency rules by their machine-readable name.

    Raises:
        KeyError: If no agency matches the given name.
    """
    for rules in AGENCIES:
        if rules.name == name:
            return rules
    valid_names = ", ".join(r.name for r in AGENCIES)
    raise KeyError(f"Unknown agency '{name}'. Valid names: {valid_names}")
