"""Positional matching of tournament-feed games to bracket slots."""
from dataclasses import dataclass
from typing import Optional

from bracket_pool.services.sync.adapters.payloads import ProviderGame
from bracket_pool.services.sync.enums import Region, RoundCode, region_for_bracket_label, round_code_for_tournament_feed


@dataclass(frozen=True)
class BracketPosition:
    """Alternate key of an internal game: ``(round, region, slot)``."""
    round: RoundCode
    region: Optional[Region]  # None for Final Four / Championship
    slot: int

    @property
    def region_value(self) -> Optional[str]:
        return self.region.value if self.region is not None else None


def classify_position(game: ProviderGame) -> Optional[BracketPosition]:
    """
    Translate a tournament-feed game into a bracket position.

    Returns None when the round, the region (for regional rounds) or the
    slot cannot be mapped; such games are skipped, never defaulted.
    """
    round_code = round_code_for_tournament_feed(game.round)
    if round_code is RoundCode.UNKNOWN or game.slot is None:
        return None

    if round_code.is_national:
        return BracketPosition(round=round_code, region=None, slot=game.slot)

    region = region_for_bracket_label(game.bracket)
    if region is Region.UNKNOWN:
        return None
    return BracketPosition(round=round_code, region=region, slot=game.slot)
