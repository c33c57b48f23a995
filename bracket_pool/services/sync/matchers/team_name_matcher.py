"""Name-based matching of internal teams to ESPN directory entries.

Resolution order for one internal team name:
1. Normalize the name and consult the override table.
   An empty override is a placeholder: reported, never looked up.
2. Look up the override target (normalized) or the normalized name.
3. Try the fallback rewrites (" state" → " st", " oh" ↔ " (oh)").
4. Report the name with its lookup key as missing.

Only exact key hits count as matches; there is no fuzzy scoring.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional

from bracket_pool.services.sync.adapters.payloads import DirectoryTeam
from bracket_pool.services.sync.utils.name_normalizer import fallback_keys, normalize_team_name, override_for


class NameMatchStatus(str, Enum):
    MATCHED = "matched"
    PLACEHOLDER = "placeholder"
    MISSING = "missing"


@dataclass(frozen=True)
class NameResolution:
    status: NameMatchStatus
    lookup_key: str
    entry: Optional[DirectoryTeam] = None


class TeamNameMatcher:
    """Exact-key index over directory display names and short names."""

    def __init__(self, index: Dict[str, DirectoryTeam]):
        self.index = index

    @classmethod
    def from_directory(cls, teams: Iterable[DirectoryTeam]) -> "TeamNameMatcher":
        index: Dict[str, DirectoryTeam] = {}
        for team in teams:
            index[normalize_team_name(team.display_name)] = team
            if team.short_display_name:
                index[normalize_team_name(team.short_display_name)] = team
        return cls(index)

    def resolve(self, name: str) -> NameResolution:
        normalized = normalize_team_name(name)
        override = override_for(normalized)

        if override == "":
            return NameResolution(NameMatchStatus.PLACEHOLDER, lookup_key=normalized)

        lookup_key = normalize_team_name(override) if override else normalized
        for key in [lookup_key, *fallback_keys(lookup_key)]:
            entry = self.index.get(key)
            if entry is not None:
                return NameResolution(NameMatchStatus.MATCHED, lookup_key=key, entry=entry)

        return NameResolution(NameMatchStatus.MISSING, lookup_key=lookup_key)
