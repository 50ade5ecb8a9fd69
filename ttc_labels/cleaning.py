"""Label cleaning pipelines for trip headsigns, stop names and routes.

A Pipeline is an ordered tuple of CleaningStage objects. Each stage runs a
global substitution of one registry pattern over the current string and
hands the result to the next stage. Stage order is fixed: structural and
boilerplate removal run before case normalization, and label cleanup
always runs last.

Pipelines (built once at import time):

1. trip headsign: structural trim -> extra fare -> boilerplate phrases ->
   via clause -> case -> Mc/Mac -> "@" / "&" -> street types -> numbers ->
   label cleanup
2. stop name: towards clause -> case -> "@" -> "side" -> bounds ->
   Mc/Mac -> street types -> numbers -> label cleanup
3. route long name: case -> label cleanup
4. direction headsign: dash tail -> case -> label cleanup
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final

from ttc_labels.patterns import (
    ACRONYMS,
    FUNCTION_WORDS,
    STREET_TYPES,
    Pattern,
    get_pattern,
)

Replacement = str | Callable[[re.Match[str]], str]


# ---------------------------------------------------------------------------
# Stage and pipeline types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class CleaningStage:
    """One substitution step of a pipeline.

    Attributes:
        name: Stage identifier, unique within a pipeline.
        pattern: Registry pattern to substitute.
        replacement: Template or callable overriding the pattern's own
            replacement. Matches are removed when both are None.
    """

    name: str
    pattern: Pattern
    replacement: Replacement | None = None

    def apply(self, text: str) -> str:
        replacement = self.replacement
        if replacement is None:
            replacement = self.pattern.replacement or ""
        return self.pattern.regex.sub(replacement, text)


@dataclass(frozen=True, slots=True)
class Pipeline:
    """Ordered, immutable sequence of cleaning stages."""

    name: str
    stages: tuple[CleaningStage, ...]

    @property
    def stage_names(self) -> tuple[str, ...]:
        return tuple(stage.name for stage in self.stages)

    def clean(self, raw: str | None) -> str:
        """Run every stage in order. Never raises; None cleans to ""."""
        text = raw or ""
        for stage in self.stages:
            text = stage.apply(text)
        return text


def _stage(
    name: str,
    pattern_name: str | None = None,
    replacement: Replacement | None = None,
) -> CleaningStage:
    return CleaningStage(name, get_pattern(pattern_name or name), replacement)


# ---------------------------------------------------------------------------
# Replacement callables
# ---------------------------------------------------------------------------


def _is_first_word(match: re.Match[str]) -> bool:
    return not any(ch.isalnum() for ch in match.string[: match.start()])


def _case_word(match: re.Match[str]) -> str:
    """Render one word in canonical mixed case.

    Tokens holding digits are left to the number stages, mixed-case
    words are trusted as already cased, known acronyms stay upper-case
    and function words are lower-cased unless they open the label.
    """
    word = match.group(0)
    if any(ch.isdigit() for ch in word):
        return word
    lowered = word.lower()
    if lowered in FUNCTION_WORDS and not _is_first_word(match):
        return lowered
    if word.isupper() and word in ACRONYMS:
        return word
    if not word.isupper() and not word.islower():
        return word
    return lowered[:1].upper() + lowered[1:]


def _mc_case(match: re.Match[str]) -> str:
    return "Mc" + match.group(1).upper()


def _mac_case(match: re.Match[str]) -> str:
    return "Mac" + match.group(1).capitalize()


def _street_type(match: re.Match[str]) -> str:
    return STREET_TYPES[match.group(1).lower()]


def _ordinal(match: re.Match[str]) -> str:
    return match.group(1) + match.group(2).lower()


def _upper_first(match: re.Match[str]) -> str:
    return match.group(1) + match.group(2).upper()


# ---------------------------------------------------------------------------
# Shared stages
# ---------------------------------------------------------------------------

_CASE: Final = _stage("case", "word", _case_word)
_MC: Final = _stage("mc_prefix", replacement=_mc_case)
_MAC: Final = _stage("mac_prefix", replacement=_mac_case)
_AT: Final = _stage("clean_at")
_AND: Final = _stage("clean_and")
_STREET_TYPES: Final = _stage("street_type", replacement=_street_type)
_ORDINALS: Final = _stage("ordinal", replacement=_ordinal)
_LEADING_ZEROS: Final = _stage("leading_zeros")

LABEL_CLEANUP_STAGES: Final[tuple[CleaningStage, ...]] = (
    _stage("empty_brackets"),
    _stage("repeated_dashes"),
    _stage("space_before_punctuation"),
    _stage("space_after_bracket"),
    _stage("whitespace"),
    _stage("dangling_separators"),
    _stage("first_letter", replacement=_upper_first),
)


# ---------------------------------------------------------------------------
# Pipelines
# ---------------------------------------------------------------------------

TRIP_HEADSIGN_PIPELINE: Final[Pipeline] = Pipeline(
    name="trip_headsign",
    stages=(
        _stage("structural_trim", "keep_after_towards"),
        _stage("extra_fare_required", "ends_extra_fare_required"),
        _stage("replacement_bus"),
        _stage("short_turn"),
        _stage("blue_night"),
        _stage("via", "ends_via"),
        _CASE,
        _MC,
        _MAC,
        _AT,
        _AND,
        _STREET_TYPES,
        _ORDINALS,
        _LEADING_ZEROS,
        *LABEL_CLEANUP_STAGES,
    ),
)

STOP_NAME_PIPELINE: Final[Pipeline] = Pipeline(
    name="stop_name",
    stages=(
        _stage("towards", "ends_towards"),
        _CASE,
        _AT,
        _stage("side"),
        _stage("bounds"),
        _MC,
        _MAC,
        _STREET_TYPES,
        _ORDINALS,
        _LEADING_ZEROS,
        *LABEL_CLEANUP_STAGES,
    ),
)

ROUTE_LONG_NAME_PIPELINE: Final[Pipeline] = Pipeline(
    name="route_long_name",
    stages=(_CASE, *LABEL_CLEANUP_STAGES),
)

# Keeps the leading East/West/North/South, drops what follows its dash
DIRECTION_HEADSIGN_PIPELINE: Final[Pipeline] = Pipeline(
    name="direction_headsign",
    stages=(_stage("direction_dash_tail"), _CASE, *LABEL_CLEANUP_STAGES),
)


# ---------------------------------------------------------------------------
# Public cleaners
# ---------------------------------------------------------------------------


def clean_trip_headsign(raw: str | None) -> str:
    """Canonicalize a trip headsign.

    Example:
        "EAST - 501 QUEEN towards NEVILLE PARK" -> "Neville Park"
    """
    return TRIP_HEADSIGN_PIPELINE.clean(raw)


def clean_stop_name(raw: str | None) -> str:
    """Canonicalize a stop name.

    Example:
        "QUEEN ST WEST AT MCCAUL ST NORTH SIDE" -> "Queen St West at McCaul St North"
    """
    return STOP_NAME_PIPELINE.clean(raw)


def clean_route_long_name(raw: str | None) -> str:
    return ROUTE_LONG_NAME_PIPELINE.clean(raw)


def clean_direction_headsign(
    direction_id: int | str | None,
    from_stop_name: bool,
    raw: str | None,
) -> str:
    """Canonicalize a direction headsign.

    ``direction_id`` and ``from_stop_name`` are accepted for parity with
    the other direction hooks; the TTC rule depends on the text only.
    """
    return DIRECTION_HEADSIGN_PIPELINE.clean(raw)
