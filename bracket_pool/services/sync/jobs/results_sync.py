"""Results sync: confirm winners from Highlightly, the secondary provider.

Games are located by ``external_game_id``. The winner comes from the
provider's ``winner_team_id`` (a Highlightly team id, mapped through
``teams.external_team_id``), or from the scores when no winner id is
given. Nothing is written for ties, unmapped teams, or winners already set.
"""
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from bracket_pool.core.logging import get_logger
from bracket_pool.services.sync.adapters.highlightly import HighlightlyClient
from bracket_pool.services.sync.adapters.payloads import ResultsGame
from bracket_pool.services.sync.enums import ProviderStatus
from bracket_pool.services.sync.jobs.base import JobPhase, SyncJob

logger = get_logger(__name__)


def _winner_external_id(game: ResultsGame) -> Optional[str]:
    if game.winner_team_id is not None:
        return game.winner_team_id
    if game.home_score is None or game.away_score is None or game.home_score == game.away_score:
        return None
    return game.home_team_id if game.home_score > game.away_score else game.away_team_id


class ResultsSyncJob(SyncJob):

    name = "results_sync"

    def __init__(self, db: Session, client: HighlightlyClient):
        super().__init__(db)
        self.client = client

    async def execute(self, day: str) -> Dict[str, Any]:
        self.enter(JobPhase.FETCHING)
        provider_games = await self.client.fetch_games(day)

        self.enter(JobPhase.RECONCILING)
        finished = [g for g in provider_games if g.is_finished and g.id is not None]
        winners = {g.id: _winner_external_id(g) for g in finished}
        team_map = self.resolver.external_to_internal(winners.values())

        self.enter(JobPhase.WRITING)
        updated = 0
        skipped = 0

        for provider_game in finished:
            game = self.games.find_by_external_game_id(provider_game.id)
            winner_id = team_map.get(winners[provider_game.id])
            if game is None or winner_id is None:
                skipped += 1
                self.missed("game_or_winner_not_mapped")
                continue

            if winner_id not in game.team_ids:
                logger.warning(f"Highlightly winner {winner_id} is not playing in game {game.id}; skipping")
                skipped += 1
                self.missed("winner_not_participant")
                continue

            if game.winner_team_id == winner_id:
                skipped += 1
                continue

            self.games.set_winner(game, winner_id, status=ProviderStatus.FINAL.value)
            updated += 1
            self.wrote()

        return {"ok": True, "date": day, "updated": updated, "skipped": skipped}
