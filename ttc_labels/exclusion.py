"""Exclusion predicates for trips, stop times and stops.

Each predicate returns True when its own rule drops the record and
otherwise returns the caller's ``default`` decision, so the rules compose
with whatever the calling agency configuration already excludes.
"""

from __future__ import annotations

from typing import Final

from ttc_labels.patterns import get_pattern
from ttc_labels.records import Stop, StopTime, Trip

_NOT_IN_SERVICE: Final = get_pattern("not_in_service").regex


def is_not_in_service(headsign: str | None) -> bool:
    """Return True when the whole headsign reads "Not In Service"."""
    return _NOT_IN_SERVICE.fullmatch((headsign or "").strip()) is not None


def exclude_trip(trip: Trip, default: bool = False) -> bool:
    """Drop trips signed "Not In Service"."""
    if is_not_in_service(trip.headsign_or_default):
        return True
    return default


def exclude_stop_time(stop_time: StopTime, default: bool = False) -> bool:
    """Drop stop times signed "Not In Service".

    The stop time's own headsign is checked; it may differ from the
    headsign of its trip.
    """
    if is_not_in_service(stop_time.stop_headsign_or_default):
        return True
    return default


def exclude_stop(stop: Stop, default: bool = False) -> bool:
    """Drop placeholder stops whose identifier doubles as their code.

    Merged surface and rail feeds repeat a stop under an identifier equal
    to its rider-facing code; the stop with the distinct code is kept.
    """
    if stop.stop_id == stop.stop_code:
        return True
    return default
