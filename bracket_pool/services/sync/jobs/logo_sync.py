"""Logo enrichment: copy ESPN logos and team ids onto internal teams.

Teams are matched by normalized name through ``TeamNameMatcher``. The
``missing`` list is what an operator needs to extend the override table:
placeholder names appear bare, unmatched names carry the key that was
looked up, e.g. ``"Saint Peter's (key=saint peters)"``.
"""
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from bracket_pool.core.logging import get_logger
from bracket_pool.services.sync.adapters.espn import EspnTeamDirectoryClient
from bracket_pool.services.sync.jobs.base import JobPhase, SyncJob
from bracket_pool.services.sync.matchers.team_name_matcher import NameMatchStatus, TeamNameMatcher

logger = get_logger(__name__)


class LogoSyncJob(SyncJob):

    name = "logo_sync"

    def __init__(self, db: Session, client: EspnTeamDirectoryClient):
        super().__init__(db)
        self.client = client

    async def execute(self) -> Dict[str, Any]:
        teams = self.teams.find_all_ordered()

        self.enter(JobPhase.FETCHING)
        directory = await self.client.fetch_teams()

        self.enter(JobPhase.RECONCILING)
        matcher = TeamNameMatcher.from_directory(directory)
        resolutions = [(team, matcher.resolve(team.name)) for team in teams]

        self.enter(JobPhase.WRITING)
        updated = 0
        unchanged = 0
        missing: List[str] = []
        placeholders: List[str] = []
        conflicts: List[str] = []

        for team, resolution in resolutions:
            if resolution.status is NameMatchStatus.PLACEHOLDER:
                missing.append(team.name)
                placeholders.append(team.name)
                continue
            if resolution.status is NameMatchStatus.MISSING:
                missing.append(f"{team.name} (key={resolution.lookup_key})")
                self.missed("name_not_found")
                continue

            entry = resolution.entry
            if team.logo_url == entry.logo_url and team.espn_team_id == entry.id:
                unchanged += 1
                continue

            if team.espn_team_id != entry.id:
                holder = self.teams.find_by_espn_team_id(entry.id)
                if holder is not None and holder.id != team.id:
                    logger.warning(
                        f"ESPN team {entry.id} already assigned to {holder.name}; not assigning to {team.name}"
                    )
                    conflicts.append(team.name)
                    self.missed("espn_id_taken")
                    continue

            self.teams.set_directory_link(team, logo_url=entry.logo_url, espn_team_id=entry.id)
            updated += 1
            self.wrote()

        return {
            "ok": True,
            "updated": updated,
            "unchanged": unchanged,
            "missing": missing,
            "placeholders": placeholders,
            "conflicts": conflicts,
        }
