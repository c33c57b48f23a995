"""Game-day sync: link and settle one date's games in a single pass.

For every SportsDataIO game on the date, the internal game is found by its
two teams (either order). Its provider id is linked when missing or
different, and for closed games with a decisive score the winner is set.
"""
from typing import Any, Dict

from sqlalchemy.orm import Session

from bracket_pool.core.logging import get_logger
from bracket_pool.services.sync.adapters.sportsdata import SportsDataClient
from bracket_pool.services.sync.enums import ProviderStatus
from bracket_pool.services.sync.jobs.base import JobPhase, SyncJob

logger = get_logger(__name__)


class GameDaySyncJob(SyncJob):

    name = "game_day_sync"

    def __init__(self, db: Session, client: SportsDataClient):
        super().__init__(db)
        self.client = client

    async def execute(self, day: str) -> Dict[str, Any]:
        self.enter(JobPhase.FETCHING)
        provider_games = await self.client.fetch_games_by_date(day)

        self.enter(JobPhase.RECONCILING)
        team_map = self.resolver.provider_to_internal(
            team_id for game in provider_games for team_id in game.team_ids
        )

        self.enter(JobPhase.WRITING)
        linked = 0
        winners_set = 0
        skipped_no_match = 0
        skipped_tie_or_no_score = 0
        conflicts = 0

        for provider_game in provider_games:
            home_id = team_map.get(provider_game.home_team_id)
            away_id = team_map.get(provider_game.away_team_id)
            game = None
            if provider_game.game_id is not None and home_id and away_id:
                game = self.games.find_by_team_pair(home_id, away_id)
            if game is None:
                skipped_no_match += 1
                self.missed("pair_not_found")
                continue

            if game.sportsdata_game_id != provider_game.game_id:
                holder = self.games.find_by_sportsdata_game_id(provider_game.game_id)
                if holder is not None and holder.id != game.id:
                    logger.warning(
                        f"Provider game {provider_game.game_id} already linked to game {holder.id}; "
                        f"not linking game {game.id}"
                    )
                    conflicts += 1
                    self.missed("already_linked")
                    continue
                self.games.link_sportsdata_game(game, provider_game.game_id)
                linked += 1
                self.wrote()

            if not provider_game.is_closed:
                continue
            if not provider_game.has_decisive_score:
                skipped_tie_or_no_score += 1
                self.missed("tie_or_no_score")
                continue

            winner_id = home_id if provider_game.home_score > provider_game.away_score else away_id
            if game.winner_team_id != winner_id:
                self.games.set_winner(game, winner_id, status=ProviderStatus.FINAL.value)
                winners_set += 1
                self.wrote()

        return {
            "ok": True,
            "date": day,
            "fetched": len(provider_games),
            "linked": linked,
            "winnersSet": winners_set,
            "skippedNoMatch": skipped_no_match,
            "skippedTieOrNoScore": skipped_tie_or_no_score,
            "conflicts": conflicts,
        }
