"""Pattern library for TTC light rail label normalization.

Every regular expression used by the exclusion filter, the cleaning
pipelines and the headsign helpers is declared here once, compiled at
import time and exposed through a read-only registry. A pattern that
fails to compile aborts the import with PatternError, so a broken rule
is caught at process startup and never per record.

Patterns are case-insensitive unless declared otherwise. Replacement
templates use the ``re`` syntax (``\\g<1>``, ``\\g<name>``); a pattern
without a replacement removes what it matches.
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Final

logger: Final = logging.getLogger(__name__)

_DEFAULT_FLAGS: Final[int] = re.IGNORECASE


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class PatternError(ValueError):
    """Raised when a pattern expression cannot be compiled.

    Attributes:
        name: Registry name of the offending pattern.
        expression: Source expression that failed to compile.
    """

    def __init__(self, name: str, expression: str, reason: str) -> None:
        self.name = name
        self.expression = expression
        super().__init__(f"Pattern '{name}' failed to compile: {reason} ({expression!r})")


# ---------------------------------------------------------------------------
# Pattern type
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Pattern:
    """Compiled match rule with an optional replacement template.

    Attributes:
        name: Registry name (snake_case).
        regex: Compiled expression.
        replacement: Substitution template, or None to remove matches.
    """

    name: str
    regex: re.Pattern[str]
    replacement: str | None = None

    @property
    def expression(self) -> str:
        """Return the source expression."""
        return self.regex.pattern


def compile_pattern(
    name: str,
    expression: str,
    replacement: str | None = None,
    flags: int = _DEFAULT_FLAGS,
) -> Pattern:
    """Compile an expression into a Pattern.

    Raises:
        PatternError: If the expression is not a valid regular expression.
    """
    try:
        regex = re.compile(expression, flags)
    except re.error as exc:
        logger.error("Invalid pattern %s: %s", name, exc)
        raise PatternError(name, expression, str(exc)) from exc
    return Pattern(name=name, regex=regex, replacement=replacement)


def words_pattern(name: str, *phrases: str) -> Pattern:
    """Build a removal pattern for whole-word phrases.

    Words inside a phrase may be separated by any run of whitespace.
    """
    alternatives = "|".join(
        r"\s+".join(re.escape(word) for word in phrase.split()) for phrase in phrases
    )
    return compile_pattern(name, rf"\b(?:{alternatives})\b")


# ---------------------------------------------------------------------------
# Vocabulary
# ---------------------------------------------------------------------------

# Lower-cased by case normalization unless they open the label
FUNCTION_WORDS: Final[frozenset[str]] = frozenset(
    {"and", "at", "by", "de", "du", "for", "in", "of", "on", "or", "the", "to", "via"}
)

# Kept upper-case by case normalization
ACRONYMS: Final[frozenset[str]] = frozenset(
    {"CNE", "GO", "LRT", "RT", "TMU", "TTC", "UTSC", "VMC", "YMCA"}
)

# Abbreviation variant (lower-case, no period) -> canonical abbreviation
STREET_TYPES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "av": "Ave",
        "ave": "Ave",
        "blv": "Blvd",
        "blvd": "Blvd",
        "cir": "Cir",
        "cres": "Cres",
        "cresc": "Cres",
        "crt": "Crt",
        "ct": "Crt",
        "dr": "Dr",
        "gdns": "Gdns",
        "hwy": "Hwy",
        "ln": "Ln",
        "pkwy": "Pkwy",
        "pky": "Pkwy",
        "pl": "Pl",
        "rd": "Rd",
        "sq": "Sq",
        "st": "St",
        "ter": "Ter",
        "terr": "Ter",
    }
)

# Surname fragments written with an inner capital after "Mac"
MAC_SURNAMES: Final[frozenset[str]] = frozenset(
    {
        "donald",
        "dougall",
        "intosh",
        "kay",
        "kenzie",
        "lean",
        "leod",
        "millan",
        "naughton",
        "pherson",
    }
)

CARDINAL_DIRECTIONS: Final[tuple[str, ...]] = ("east", "west", "north", "south")

LINE_PREFIX: Final[str] = "L "

_DIRECTION_WORD: Final[str] = "(?:" + "|".join(CARDINAL_DIRECTIONS) + ")(?:bound)?"
_ROUTE_CODE: Final[str] = r"\d+(?:/\d+)?[a-z]?"
_STREET_ALTERNATIVES: Final[str] = "|".join(sorted(STREET_TYPES, key=len, reverse=True))
_MAC_ALTERNATIVES: Final[str] = "|".join(sorted(MAC_SURNAMES))

# Any run of "EAST - ", "12A ", "501/502 " and stray separators, in any order
_STRUCTURAL_PREFIX: Final[str] = (
    r"(?:" + _DIRECTION_WORD + r"\s+-\s|" + _ROUTE_CODE + r"\s|[\s,;:/-])*"
)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_PATTERN_DEFINITIONS: Final[tuple[tuple[str, str, str | None], ...]] = (
    # --- exclusion ---
    ("not_in_service", r"\(?\s*not\s+in\s+service\s*\)?", None),
    # --- trip headsign ---
    (
        "keep_after_towards",
        r"^" + _STRUCTURAL_PREFIX
        + r"(?:.*\b(?:towards|to)\s+" + _STRUCTURAL_PREFIX + r")?"  # up to the last to/towards
        + r"(?P<keep>.+)$",
        r"\g<keep>",
    ),
    ("ends_extra_fare_required", r"(?:\s*-)?\s*\bextra\s+fare\s+required\b.*$", None),
    ("ends_via", r"\s+via\s+.*$", None),
    # --- stop name ---
    ("ends_towards", r"\s+towards\s+.*$", None),
    ("side", r"(^|\W)side(\W|$)", r"\g<1>\g<2>"),
    (
        "bounds",
        r"\s*[(\[]\s*(?:" + _DIRECTION_WORD + r"|[nsew]b)\s*[)\]]",
        None,
    ),
    # --- direction headsign ---
    ("direction_dash_tail", r"(?<=[a-z]{4})\s+-\s+.*$", None),
    # --- shared ---
    ("word", r"[^\W_]+(?:'[^\W_]+)*", None),
    ("mc_prefix", r"\bMc([a-z])", None),
    ("mac_prefix", r"\bMac(" + _MAC_ALTERNATIVES + r")\b", None),
    ("clean_at", r"\s*@\s*", " at "),
    ("clean_and", r"\s*&\s*", " and "),
    ("street_type", r"\b(" + _STREET_ALTERNATIVES + r")\b\.?", None),
    ("ordinal", r"\b(\d+)(st|nd|rd|th)\b", None),
    ("leading_zeros", r"(?<![\d:.,/])0+(?=\d)", None),
    ("direction_only", r"(?:" + "|".join(CARDINAL_DIRECTIONS) + r")", None),
    # --- label cleanup ---
    ("empty_brackets", r"\(\s*\)|\[\s*\]", None),
    ("repeated_dashes", r"\s*-(?:\s*-)+\s*", " - "),
    ("space_before_punctuation", r"\s+([,.;:!?)\]])", r"\g<1>"),
    ("space_after_bracket", r"([(\[])\s+", r"\g<1>"),
    ("whitespace", r"\s+", " "),
    ("dangling_separators", r"^[\s,;:/-]+|[\s,;:/-]+$", None),
)


def _build_registry() -> Mapping[str, Pattern]:
    registry: dict[str, Pattern] = {}
    for name, expression, replacement in _PATTERN_DEFINITIONS:
        if name in registry:
            raise PatternError(name, expression, "duplicate pattern name")
        registry[name] = compile_pattern(name, expression, replacement)
    # Case-sensitive: only a lower-case first letter is touched
    registry["first_letter"] = compile_pattern("first_letter", r"^(\W*)([a-z])", flags=0)
    registry["replacement_bus"] = words_pattern("replacement_bus", "replacement bus")
    registry["short_turn"] = words_pattern("short_turn", "short turn")
    registry["blue_night"] = words_pattern("blue_night", "blue night")
    return MappingProxyType(registry)


PATTERNS: Final[Mapping[str, Pattern]] = _build_registry()


def get_pattern(name: str) -> Pattern:
    """Look up a compiled pattern by registry name.

    Raises:
        KeyError: If no pattern is registered under the given name.
    """
    try:
        return PATTERNS[name]
    except KeyError:
        valid_names = ", ".join(sorted(PATTERNS))
        raise KeyError(f"Unknown pattern '{name}'. Valid names: {valid_names}") from None


@functools.lru_cache(maxsize=256)
def route_prefix_pattern(route_long_name: str) -> Pattern:
    """Build the leading route code / route name pattern for one route.

    Matches a numeric route code optionally followed by the route long
    name, or the route long name alone when a dash separator follows it.
    A trailing " - " separator is part of the match. With an empty route
    long name only the route code is matched.
    """
    words = route_long_name.split()
    code = _ROUTE_CODE + r"(?![\w/])"
    if not words:
        return compile_pattern("route_prefix", rf"^\s*{code}\s*(?:-\s*)?")
    name = r"\s+".join(re.escape(word) for word in words) + r"(?!\w)"
    expression = rf"^\s*(?:{code}(?:\s*{name})?\s*(?:-\s*)?|{name}\s*-\s*)"
    return compile_pattern("route_prefix", expression)
