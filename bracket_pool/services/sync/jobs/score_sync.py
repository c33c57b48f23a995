"""Score sync: set winners of linked games from SportsDataIO finals.

Checks today and yesterday in the tournament timezone by default, so a
late final from last night is picked up the next morning. Only games with
status "Final" count; ties and missing scores are skipped because a
finished college basketball game cannot end level. The winner is written
only when it differs from the stored one.
"""
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from bracket_pool.core.logging import get_logger
from bracket_pool.services.sync.adapters.payloads import ProviderGame
from bracket_pool.services.sync.adapters.sportsdata import SportsDataClient
from bracket_pool.services.sync.enums import ProviderStatus
from bracket_pool.services.sync.jobs.base import JobPhase, SyncJob
from bracket_pool.utils.timezone import today_and_yesterday

logger = get_logger(__name__)


class ScoreSyncJob(SyncJob):

    name = "score_sync"

    def __init__(self, db: Session, client: SportsDataClient, timezone: str = "America/New_York"):
        super().__init__(db)
        self.client = client
        self.timezone = timezone

    async def execute(self, dates: Optional[List[str]] = None) -> Dict[str, Any]:
        dates = list(dates) if dates else today_and_yesterday(self.timezone)

        self.enter(JobPhase.FETCHING)
        finals: Dict[int, ProviderGame] = {}
        for day in dates:
            for game in await self.client.fetch_final_games_by_date(day):
                if game.status == ProviderStatus.FINAL.value and game.game_id is not None:
                    finals[game.game_id] = game

        self.enter(JobPhase.RECONCILING)
        team_map = self.resolver.provider_to_internal(
            team_id for game in finals.values() for team_id in game.team_ids
        )

        self.enter(JobPhase.WRITING)
        updated = 0
        skipped_no_match = 0
        skipped_tie_or_no_score = 0

        for provider_game in finals.values():
            game = self.games.find_by_sportsdata_game_id(provider_game.game_id)
            home_id = team_map.get(provider_game.home_team_id)
            away_id = team_map.get(provider_game.away_team_id)
            if game is None or home_id is None or away_id is None:
                skipped_no_match += 1
                self.missed("game_or_team_not_mapped")
                continue

            if not provider_game.has_decisive_score:
                skipped_tie_or_no_score += 1
                self.missed("tie_or_no_score")
                continue

            winner_id = home_id if provider_game.home_score > provider_game.away_score else away_id
            if winner_id not in game.team_ids:
                logger.warning(
                    f"Provider winner {winner_id} is not playing in game {game.id}; skipping"
                )
                skipped_no_match += 1
                self.missed("winner_not_participant")
                continue

            if game.winner_team_id == winner_id:
                continue

            self.games.set_winner(game, winner_id, status=ProviderStatus.FINAL.value)
            updated += 1
            self.wrote()

        return {
            "ok": True,
            "dates": dates,
            "finalsSeen": len(finals),
            "updatedGames": updated,
            "skippedNoMatch": skipped_no_match,
            "skippedTieOrNoScore": skipped_tie_or_no_score,
        }
