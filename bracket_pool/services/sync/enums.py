"""Closed vocabularies for rounds, regions and provider statuses.

Provider feeds describe the same bracket with different conventions:
- the season schedule numbers rounds 1-6 starting at the Round of 64
- the tournament feed numbers rounds 0-3 starting at the Sweet 16
- bracket labels are free text ("Midwest Regional", "EAST", ...)

Every mapping below is total: a value it does not recognise maps to the
UNKNOWN member instead of raising or passing the raw value through.
"""
from enum import Enum
from typing import Any, List, Optional


class RoundCode(str, Enum):
    R64 = "R64"
    R32 = "R32"
    S16 = "S16"
    E8 = "E8"
    F4 = "F4"
    CHIP = "CHIP"
    UNKNOWN = "UNK"

    @classmethod
    def ordered(cls) -> List["RoundCode"]:
        """Bracket rounds from first to last (UNKNOWN excluded)."""
        return [cls.R64, cls.R32, cls.S16, cls.E8, cls.F4, cls.CHIP]

    @property
    def is_national(self) -> bool:
        """Final Four and Championship games have no region."""
        return self in (RoundCode.F4, RoundCode.CHIP)


class Region(str, Enum):
    EAST = "East"
    WEST = "West"
    SOUTH = "South"
    MIDWEST = "Midwest"
    UNKNOWN = "Unknown"


class ProviderStatus(str, Enum):
    FINAL = "Final"


# Highlightly reports lowercase free-form statuses
FINISHED_STATUSES = frozenset({"final", "finished", "completed"})

# Season schedule: Round 1 is the Round of 64
SCHEDULE_ROUND_CODES = {
    1: RoundCode.R64,
    2: RoundCode.R32,
    3: RoundCode.S16,
    4: RoundCode.E8,
    5: RoundCode.F4,
    6: RoundCode.CHIP,
}

# Tournament feed: Round 0 is the Sweet 16
TOURNAMENT_FEED_ROUND_CODES = {
    0: RoundCode.S16,
    1: RoundCode.E8,
    2: RoundCode.F4,
    3: RoundCode.CHIP,
}

# Midwest must be tested before West
_REGION_LABELS = (
    ("midwest", Region.MIDWEST),
    ("west", Region.WEST),
    ("east", Region.EAST),
    ("south", Region.SOUTH),
)


def _as_round_number(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def round_code_for_schedule(value: Any) -> RoundCode:
    """
    Map a season-schedule round number to a RoundCode.

    Examples:
        >>> round_code_for_schedule(1)
        <RoundCode.R64: 'R64'>
        >>> round_code_for_schedule(None)
        <RoundCode.UNKNOWN: 'UNK'>
    """
    return SCHEDULE_ROUND_CODES.get(_as_round_number(value), RoundCode.UNKNOWN)


def round_code_for_tournament_feed(value: Any) -> RoundCode:
    """Map a tournament-feed round number (0 = Sweet 16) to a RoundCode."""
    return TOURNAMENT_FEED_ROUND_CODES.get(_as_round_number(value), RoundCode.UNKNOWN)


def region_for_bracket_label(label: Any) -> Region:
    """
    Map a provider bracket label to a Region by substring match.

    Examples:
        >>> region_for_bracket_label("Midwest Regional")
        <Region.MIDWEST: 'Midwest'>
        >>> region_for_bracket_label("WEST")
        <Region.WEST: 'West'>
        >>> region_for_bracket_label("Final Four")
        <Region.UNKNOWN: 'Unknown'>
    """
    if not isinstance(label, str):
        return Region.UNKNOWN
    lowered = label.lower()
    for needle, region in _REGION_LABELS:
        if needle in lowered:
            return region
    return Region.UNKNOWN
