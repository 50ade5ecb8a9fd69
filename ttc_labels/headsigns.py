"""Per-stop headsign extraction and direction headsign selection.

Stop headsigns on the TTC feed repeat the route ("504A KING - Dufferin
Gate"); the route code and name are stripped before the trip headsign
pipeline runs. Direction headsigns are settled per (route, direction)
by folding the trip headsigns through select_direction_headsign.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Final

from ttc_labels.cleaning import clean_trip_headsign
from ttc_labels.patterns import LINE_PREFIX, get_pattern, route_prefix_pattern
from ttc_labels.records import Route, StopTime, Trip

_DIRECTION_ONLY: Final = get_pattern("direction_only").regex

HeadsignSelector = Callable[[str | None, str | None], str | None]


def extract_destination(route_long_name: str | None, raw_stop_headsign: str | None) -> str:
    """Strip a leading route code / route long name prefix.

    Args:
        route_long_name: Long name of the trip's route, may be empty.
        raw_stop_headsign: Raw per-stop headsign.

    Returns:
        The destination text after the prefix, or the input unchanged when
        no prefix matches or nothing would remain.
    """
    raw = raw_stop_headsign or ""
    pattern = route_prefix_pattern((route_long_name or "").strip())
    remainder = pattern.regex.sub("", raw, count=1)
    if not remainder.strip():
        return raw
    return remainder


def clean_stop_headsign(route: Route, trip: Trip, stop_time: StopTime, raw: str | None) -> str:
    """Canonicalize a per-stop headsign of ``trip`` on ``route``."""
    destination = extract_destination(route.route_long_name_or_default, raw)
    return clean_trip_headsign(destination)


def is_direction_only(headsign: str | None) -> bool:
    """Return True for a bare "East"/"West"/"North"/"South" headsign."""
    if headsign is None:
        return False
    return _DIRECTION_ONLY.fullmatch(headsign.strip()) is not None


def _has_line_prefix(headsign: str | None) -> bool:
    return headsign is not None and headsign.startswith(LINE_PREFIX)


def select_direction_headsign(headsign1: str | None, headsign2: str | None) -> str | None:
    """Pick the authoritative headsign of two conflicting candidates.

    Rules, first applicable wins:

    1. equal candidates (both None included): no decision.
    2. exactly one starts with the "L " line marker: the OTHER one.
    3. exactly one is a bare cardinal direction: THAT one.
    4. otherwise: no decision.

    Returns:
        The selected candidate, or None when the caller should keep the
        headsign it already has.
    """
    if headsign1 == headsign2:
        return None
    line1 = _has_line_prefix(headsign1)
    line2 = _has_line_prefix(headsign2)
    if line1 != line2:
        return headsign2 if line1 else headsign1
    direction1 = is_direction_only(headsign1)
    direction2 = is_direction_only(headsign2)
    if direction1 != direction2:
        return headsign1 if direction1 else headsign2
    return None


def settle_direction_headsign(
    candidates: Iterable[str | None],
    select: HeadsignSelector = select_direction_headsign,
) -> str | None:
    """Fold a direction's candidate headsigns into one.

    The first non-empty candidate is kept until ``select`` picks another
    candidate over it.
    """
    current: str | None = None
    for candidate in candidates:
        if not candidate:
            continue
        if current is None:
            current = candidate
            continue
        selected = select(current, candidate)
        if selected is not None:
            current = selected
    return current
