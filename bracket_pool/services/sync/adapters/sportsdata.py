"""SportsDataIO college basketball client (primary provider).

Endpoints used:
- season schedule (path from SPORTSDATA_SCHEDULE_PATH, ``{season}`` substituted)
- GamesByDateFinal/{date}: finalized games of one date, for linking and scores
- GamesByDate/{date}: every game of one date, for game-day sync
- Tournament/{season}: bracket-shaped feed, returned raw so an empty
  pre-release body can be reported instead of raised
"""
from typing import Any, List

import httpx

from bracket_pool.core.config import SportsDataConfig
from bracket_pool.core.exceptions import PayloadShapeError
from bracket_pool.services.sync.adapters.base import ProviderClient
from bracket_pool.services.sync.adapters.payloads import ProviderGame, extract_game_list

FINAL_GAMES_BY_DATE_PATH = "/v3/cbb/scores/json/GamesByDateFinal/{date}"
GAMES_BY_DATE_PATH = "/v3/cbb/scores/json/GamesByDate/{date}"
TOURNAMENT_PATH = "/v3/cbb/scores/json/Tournament/{season}"


class SportsDataClient(ProviderClient):
    """Fetch games from SportsDataIO, authenticated by subscription-key header."""

    provider = "sportsdata"

    def __init__(self, config: SportsDataConfig, client: httpx.AsyncClient):
        super().__init__(client, timeout=config.timeout)
        self.config = config

    def headers(self):
        return {"Ocp-Apim-Subscription-Key": self.config.api_key}

    def url_for(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    def schedule_url(self, season: int) -> str:
        return self.url_for(self.config.schedule_path.replace("{season}", str(season)))

    def tournament_url(self, season: int) -> str:
        return self.url_for(TOURNAMENT_PATH.format(season=season))

    async def fetch_schedule(self, season: int) -> List[ProviderGame]:
        payload = await self.get_json(self.schedule_url(season))
        return self._games(payload, f"schedule for {season}")

    async def fetch_final_games_by_date(self, day: str) -> List[ProviderGame]:
        payload = await self.get_json(self.url_for(FINAL_GAMES_BY_DATE_PATH.format(date=day)))
        return self._games(payload, f"final games for {day}")

    async def fetch_games_by_date(self, day: str) -> List[ProviderGame]:
        payload = await self.get_json(self.url_for(GAMES_BY_DATE_PATH.format(date=day)))
        return self._games(payload, f"games for {day}")

    async def fetch_tournament_raw(self, season: int) -> httpx.Response:
        return await self.get(self.tournament_url(season))

    def _games(self, payload: Any, what: str) -> List[ProviderGame]:
        raw_games = extract_game_list(payload)
        if raw_games is None:
            raise PayloadShapeError(
                f"Unexpected {self.provider} payload for {what}: expected an array or a Games field"
            )
        return [ProviderGame.from_payload(raw) for raw in raw_games]
