"""Schedule import: upsert the season's tournament games from SportsDataIO.

Each provider game becomes one internal game keyed by ``sportsdata_game_id``:
- team1 = provider away team, team2 = provider home team
- round number 1-6 → R64..CHIP (anything else → UNK)
- winner_team_id and last_synced_at reset to null on every (re-)import
- games whose teams are not mapped yet (play-in placeholders) are skipped
"""
from typing import Any, Dict

from sqlalchemy.orm import Session

from bracket_pool.core.logging import get_logger
from bracket_pool.services.sync.adapters.sportsdata import SportsDataClient
from bracket_pool.services.sync.enums import Region, region_for_bracket_label, round_code_for_schedule
from bracket_pool.services.sync.jobs.base import JobPhase, SyncJob

logger = get_logger(__name__)


class ScheduleImportJob(SyncJob):

    name = "schedule_import"

    def __init__(self, db: Session, client: SportsDataClient):
        super().__init__(db)
        self.client = client

    async def execute(self, season: int) -> Dict[str, Any]:
        self.enter(JobPhase.FETCHING)
        provider_games = await self.client.fetch_schedule(season)

        self.enter(JobPhase.RECONCILING)
        team_map = self.resolver.provider_to_internal(
            team_id for game in provider_games for team_id in game.team_ids
        )

        self.enter(JobPhase.WRITING)
        upserted = 0
        skipped_missing_teams = 0
        skipped_invalid = 0

        for game in provider_games:
            if game.game_id is None:
                continue

            home_id = team_map.get(game.home_team_id)
            away_id = team_map.get(game.away_team_id)
            if home_id is None or away_id is None:
                skipped_missing_teams += 1
                self.missed("team_not_mapped")
                continue
            if home_id == away_id:
                logger.warning(f"Provider game {game.game_id} lists the same team twice; skipping")
                skipped_invalid += 1
                self.missed("same_team")
                continue

            region = region_for_bracket_label(game.bracket)
            self.games.upsert_by_sportsdata_id(
                game.game_id,
                round=round_code_for_schedule(game.round).value,
                region=None if region is Region.UNKNOWN else region.value,
                team1_id=away_id,
                team2_id=home_id,
                winner_team_id=None,
                last_synced_at=None,
                status=game.status,
                start_time=game.start_time,
                game_date=game.day,
                season=game.season or season,
            )
            upserted += 1
            self.wrote()

        return {
            "ok": True,
            "season": season,
            "totalFetched": len(provider_games),
            "upserted": upserted,
            "skippedMissingTeams": skipped_missing_teams,
            "skippedInvalid": skipped_invalid,
        }
