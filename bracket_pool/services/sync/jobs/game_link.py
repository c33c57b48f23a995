"""Game linking: attach SportsDataIO game ids to games that lack one.

Eligible games already have a date and both teams. Provider finals are
fetched once per distinct date, indexed by team pair in both orders, and
matched through the teams' SportsDataIO ids.
"""
from collections import defaultdict
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from bracket_pool.core.logging import get_logger
from bracket_pool.models import Game
from bracket_pool.services.sync.adapters.sportsdata import SportsDataClient
from bracket_pool.services.sync.jobs.base import JobPhase, SyncJob
from bracket_pool.services.sync.matchers.pair_index import PairIndex

logger = get_logger(__name__)

NOTHING_TO_LINK = "No games to link (need game_date + team1_id + team2_id)."


class GameLinkJob(SyncJob):

    name = "game_link"

    def __init__(self, db: Session, client: SportsDataClient):
        super().__init__(db)
        self.client = client

    async def execute(self) -> Dict[str, Any]:
        candidates = self.games.find_unlinked_with_teams()
        if not candidates:
            return {"ok": True, "message": NOTHING_TO_LINK, "linked": 0, "notFound": 0, "conflicts": 0}

        by_date: Dict[str, List[Game]] = defaultdict(list)
        for game in candidates:
            by_date[game.game_date.isoformat()].append(game)

        self.enter(JobPhase.FETCHING)
        indexes: Dict[str, PairIndex] = {}
        for day in sorted(by_date):
            indexes[day] = PairIndex.from_games(await self.client.fetch_final_games_by_date(day))

        self.enter(JobPhase.RECONCILING)
        to_provider = self.resolver.internal_to_provider(
            team_id for game in candidates for team_id in game.team_ids
        )

        self.enter(JobPhase.WRITING)
        linked = 0
        not_found = 0
        conflicts = 0

        for day, games in sorted(by_date.items()):
            for game in games:
                provider_game_id = indexes[day].lookup(
                    to_provider.get(game.team1_id), to_provider.get(game.team2_id)
                )
                if provider_game_id is None:
                    not_found += 1
                    self.missed("pair_not_found")
                    continue

                holder = self.games.find_by_sportsdata_game_id(provider_game_id)
                if holder is not None and holder.id != game.id:
                    logger.warning(
                        f"Provider game {provider_game_id} already linked to game {holder.id}; "
                        f"not linking game {game.id}"
                    )
                    conflicts += 1
                    self.missed("already_linked")
                    continue

                self.games.link_sportsdata_game(game, provider_game_id)
                linked += 1
                self.wrote()

        return {"ok": True, "linked": linked, "notFound": not_found, "conflicts": conflicts}
