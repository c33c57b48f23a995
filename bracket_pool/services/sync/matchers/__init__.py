"""Identifier reconciliation strategies.

- TeamIdResolver: provider team id ↔ internal team id
- PairIndex: date + team pair → provider game id
- classify_position: tournament feed → (round, region, slot)
- TeamNameMatcher: normalized team name (+ overrides) → directory entry

Matchers never write to the store; jobs do.
"""
from bracket_pool.services.sync.matchers.bracket_position import BracketPosition, classify_position
from bracket_pool.services.sync.matchers.pair_index import PairIndex, pair_key
from bracket_pool.services.sync.matchers.team_name_matcher import NameMatchStatus, NameResolution, TeamNameMatcher
from bracket_pool.services.sync.matchers.team_resolver import TeamIdResolver

__all__ = [
    "BracketPosition",
    "classify_position",
    "PairIndex",
    "pair_key",
    "NameMatchStatus",
    "NameResolution",
    "TeamNameMatcher",
    "TeamIdResolver",
]
