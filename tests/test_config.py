"""Tests for the agency rule registry (ttc_labels/config.py)."""

from __future__ import annotations

import dataclasses

import pytest

from ttc_labels import cleaning, headsigns
from ttc_labels.config import (
    AGENCIES,
    DEFAULT_RULES,
    TTC_LIGHT_RAIL_RULES,
    AgencyRules,
    get_agency_rules,
)
from ttc_labels.records import Route, Stop, StopTime, Trip


class TestDefaultRules:
    """Base behaviour: exclude nothing, leave labels unchanged."""

    def test_excludes_nothing(self) -> None:
        assert DEFAULT_RULES.exclude_trip(Trip(trip_headsign="Not In Service")) is False
        assert DEFAULT_RULES.exclude_stop_time(StopTime(stop_headsign="Not In Service")) is False
        assert DEFAULT_RULES.exclude_stop(Stop(stop_id="1", stop_code="1")) is False

    def test_labels_unchanged(self) -> None:
        assert DEFAULT_RULES.clean_trip_headsign("EAST - 501 QUEEN") == "EAST - 501 QUEEN"
        assert DEFAULT_RULES.clean_stop_name("KING ST @ BAY") == "KING ST @ BAY"
        assert DEFAULT_RULES.clean_route_long_name("QUEEN") == "QUEEN"
        assert DEFAULT_RULES.clean_direction_headsign(0, False, "EAST - X") == "EAST - X"

    def test_never_selects(self) -> None:
        assert DEFAULT_RULES.select_direction_headsign("East", "Neville Park") is None


class TestTtcLightRailRules:
    """TTC composition of the package rules."""

    def test_cleaners_are_package_functions(self) -> None:
        rules = TTC_LIGHT_RAIL_RULES

        assert rules.clean_trip_headsign is cleaning.clean_trip_headsign
        assert rules.clean_stop_name is cleaning.clean_stop_name
        assert rules.clean_route_long_name is cleaning.clean_route_long_name
        assert rules.clean_direction_headsign is cleaning.clean_direction_headsign
        assert rules.clean_stop_headsign is headsigns.clean_stop_headsign
        assert rules.select_direction_headsign is headsigns.select_direction_headsign

    def test_exclusions_applied(self) -> None:
        rules = TTC_LIGHT_RAIL_RULES

        assert rules.exclude_trip(Trip(trip_headsign="Not In Service")) is True
        assert rules.exclude_trip(Trip(trip_headsign="Long Branch")) is False
        assert rules.exclude_stop_time(StopTime(stop_headsign="(NOT IN SERVICE)")) is True
        assert rules.exclude_stop(Stop(stop_id="14123", stop_code="14123")) is True
        assert rules.exclude_stop(Stop(stop_id="14123", stop_code="5")) is False

    def test_stop_headsign_uses_extractor(self) -> None:
        route = Route(route_id="501", route_long_name="QUEEN")

        result = TTC_LIGHT_RAIL_RULES.stop_headsign(
            route, Trip(route_id="501"), StopTime(), "501 QUEEN - NEVILLE PARK"
        )

        assert result == "Neville Park"


class TestStopHeadsignDelegation:
    """AgencyRules.stop_headsign fallback."""

    def test_defaults_to_trip_headsign_cleaner(self) -> None:
        rules = AgencyRules(name="upper", clean_trip_headsign=str.upper)

        assert rules.stop_headsign(Route(), Trip(), StopTime(), "queen") == "QUEEN"

    def test_stop_headsign_cleaner_takes_precedence(self) -> None:
        rules = AgencyRules(
            name="custom",
            clean_trip_headsign=str.upper,
            clean_stop_headsign=lambda route, trip, stop_time, raw: f"{route.route_id}:{raw}",
        )

        assert rules.stop_headsign(Route(route_id="504"), Trip(), StopTime(), "king") == "504:king"


class TestRegistry:
    """Agency lookup."""

    def test_get_agency_rules(self) -> None:
        assert get_agency_rules("ttc_light_rail") is TTC_LIGHT_RAIL_RULES
        assert get_agency_rules("default") is DEFAULT_RULES

    def test_unknown_agency_raises_key_error(self) -> None:
        with pytest.raises(KeyError) as exc_info:
            get_agency_rules("go_transit")

        message = str(exc_info.value)
        assert "go_transit" in message
        assert "ttc_light_rail" in message

    def test_agency_names_unique(self) -> None:
        names = [rules.name for rules in AGENCIES]

        assert len(names) == len(set(names))

    def test_rules_are_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            TTC_LIGHT_RAIL_RULES.name = "other"  # type: ignore[misc]
