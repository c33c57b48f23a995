"""Bracket-position sync: link games through the SportsDataIO tournament feed.

The tournament feed has round numbers (0 = Sweet 16) and bracket labels
instead of dates, so games are matched on ``(round, region, slot)``.

Before the bracket is announced the provider answers 200 with an empty or
non-JSON body. That is reported as "not available yet" with ``ok: true``;
an unrecognized JSON shape is reported with diagnostic keys. Neither is
an error.
"""
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from bracket_pool.core.logging import get_logger
from bracket_pool.services.sync.adapters.payloads import ProviderGame, describe_shape, extract_game_list
from bracket_pool.services.sync.adapters.sportsdata import SportsDataClient
from bracket_pool.services.sync.jobs.base import JobPhase, SyncJob
from bracket_pool.services.sync.matchers.bracket_position import BracketPosition, classify_position

logger = get_logger(__name__)

NOTE_EMPTY = "Tournament data not available yet (empty response body)."
NOTE_NOT_JSON = "Tournament data not available yet (response body is not JSON)."
NOTE_UNRECOGNIZED = "Tournament payload shape not recognized; no games read."
NOTE_SYNCED = "Tournament games matched by round/region/slot."


class BracketSyncJob(SyncJob):

    name = "bracket_sync"

    def __init__(self, db: Session, client: SportsDataClient):
        super().__init__(db)
        self.client = client

    async def execute(self, season: int) -> Dict[str, Any]:
        self.enter(JobPhase.FETCHING)
        response = await self.client.fetch_tournament_raw(season)
        report: Dict[str, Any] = {
            "ok": True,
            "season": season,
            "url": self.client.tournament_url(season),
            "status": response.status_code,
        }

        if not response.text.strip():
            logger.info(f"Tournament feed for {season} is empty; bracket not released yet")
            return {**report, "note": NOTE_EMPTY, "linked": 0, "totalGamesInPayload": 0}

        try:
            payload = response.json()
        except ValueError:
            logger.info(f"Tournament feed for {season} is not JSON; bracket not released yet")
            return {
                **report,
                "note": NOTE_NOT_JSON,
                "linked": 0,
                "totalGamesInPayload": 0,
                "bodySnippet": response.text[:200],
            }

        raw_games = extract_game_list(payload)
        if raw_games is None:
            logger.warning(f"Unrecognized tournament payload for {season}")
            return {**report, "note": NOTE_UNRECOGNIZED, "linked": 0, **describe_shape(payload)}

        self.enter(JobPhase.RECONCILING)
        classified: List[Tuple[ProviderGame, Optional[BracketPosition]]] = []
        for raw in raw_games:
            game = ProviderGame.from_payload(raw)
            classified.append((game, classify_position(game)))

        self.enter(JobPhase.WRITING)
        linked = 0
        unchanged = 0
        skipped_no_map = 0
        skipped_no_game = 0
        conflicts = 0

        for provider_game, position in classified:
            if position is None or provider_game.game_id is None:
                skipped_no_map += 1
                self.missed("position_not_mapped")
                continue

            game = self.games.find_by_position(position.round.value, position.region_value, position.slot)
            if game is None:
                skipped_no_game += 1
                self.missed("no_game_at_position")
                continue

            if game.sportsdata_game_id == provider_game.game_id:
                unchanged += 1
                continue

            holder = self.games.find_by_sportsdata_game_id(provider_game.game_id)
            if holder is not None and holder.id != game.id:
                logger.warning(
                    f"Provider game {provider_game.game_id} already linked to game {holder.id}; "
                    f"not linking {position}"
                )
                conflicts += 1
                self.missed("already_linked")
                continue

            self.games.link_sportsdata_game(game, provider_game.game_id)
            linked += 1
            self.wrote()

        return {
            **report,
            "note": NOTE_SYNCED,
            "totalGamesInPayload": len(raw_games),
            "linked": linked,
            "unchanged": unchanged,
            "skippedNoMap": skipped_no_map,
            "skippedNoGame": skipped_no_game,
            "conflicts": conflicts,
            "sampleGame": raw_games[0] if raw_games else None,
        }
