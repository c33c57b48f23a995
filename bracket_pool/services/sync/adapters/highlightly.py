"""Highlightly results client (secondary provider, via RapidAPI)."""
from typing import List

import httpx

from bracket_pool.core.config import HighlightlyConfig
from bracket_pool.core.exceptions import PayloadShapeError
from bracket_pool.services.sync.adapters.base import ProviderClient
from bracket_pool.services.sync.adapters.payloads import HIGHLIGHTLY_LIST_KEYS, ResultsGame, extract_game_list


class HighlightlyClient(ProviderClient):
    """Fetch one day's games, authenticated by the RapidAPI key/host header pair."""

    provider = "highlightly"

    def __init__(self, config: HighlightlyConfig, client: httpx.AsyncClient):
        super().__init__(client, timeout=config.timeout)
        self.config = config

    def headers(self):
        return {
            "X-RapidAPI-Key": self.config.rapidapi_key,
            "X-RapidAPI-Host": self.config.host,
        }

    async def fetch_games(self, day: str) -> List[ResultsGame]:
        url = f"https://{self.config.host}{self.config.games_path}"
        payload = await self.get_json(url, params={"date": day, "league": self.config.league})

        raw_games = extract_game_list(payload, keys=HIGHLIGHTLY_LIST_KEYS)
        if raw_games is None:
            raise PayloadShapeError(
                f"Unexpected {self.provider} payload for {day}: expected a games or data field"
            )
        return [ResultsGame.from_payload(raw) for raw in raw_games]
