"""Direct team-id resolution between provider ids and internal team ids.

One query per batch: the caller collects every provider team id in a
fetched batch and resolves them together, then looks up in memory. Ids with
no mapped team are simply absent from the result; they are never guessed.
"""
import logging
from typing import Dict, Iterable, Optional

from bracket_pool.repositories.team_repository import TeamRepository

logger = logging.getLogger(__name__)


class TeamIdResolver:
    """
    Build provider↔internal team id maps from the teams table.

    The resolver only reads; jobs decide what to do with unresolved ids.
    """

    def __init__(self, teams: TeamRepository):
        self.teams = teams

    def provider_to_internal(self, provider_ids: Iterable[Optional[int]]) -> Dict[int, str]:
        """
        Map SportsDataIO team ids to internal team ids.

        Args:
            provider_ids: Ids seen in one batch (None entries ignored)

        Returns:
            {sportsdata_team_id: team.id} for every id that has a team
        """
        wanted = {i for i in provider_ids if i is not None}
        mapping = {t.sportsdata_team_id: t.id for t in self.teams.find_by_sportsdata_ids(wanted)}
        if len(mapping) < len(wanted):
            logger.debug(f"{len(wanted) - len(mapping)} of {len(wanted)} provider team ids unmapped")
        return mapping

    def internal_to_provider(self, team_ids: Iterable[Optional[str]]) -> Dict[str, int]:
        """Map internal team ids to SportsDataIO team ids, skipping teams without one."""
        wanted = {i for i in team_ids if i is not None}
        return {
            t.id: t.sportsdata_team_id
            for t in self.teams.find_by_ids(wanted)
            if t.sportsdata_team_id is not None
        }

    def external_to_internal(self, external_ids: Iterable[Optional[str]]) -> Dict[str, str]:
        """Map Highlightly team ids to internal team ids."""
        wanted = {i for i in external_ids if i is not None}
        return {t.external_team_id: t.id for t in self.teams.find_by_external_ids(wanted)}
