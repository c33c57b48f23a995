"""ESPN public team directory client (no credentials)."""
from typing import List

import httpx

from bracket_pool.core.config import EspnConfig
from bracket_pool.core.logging import get_logger
from bracket_pool.services.sync.adapters.base import ProviderClient
from bracket_pool.services.sync.adapters.payloads import DirectoryTeam, parse_team_directory

logger = get_logger(__name__)


class EspnTeamDirectoryClient(ProviderClient):

    provider = "espn"

    def __init__(self, config: EspnConfig, client: httpx.AsyncClient):
        super().__init__(client, timeout=config.timeout)
        self.config = config

    async def fetch_teams(self) -> List[DirectoryTeam]:
        payload = await self.get_json(self.config.teams_url)
        teams = parse_team_directory(payload)
        if not teams:
            logger.warning("ESPN team directory returned no usable teams")
        return teams
