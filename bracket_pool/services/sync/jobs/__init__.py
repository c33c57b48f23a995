"""Synchronization jobs, one per admin endpoint.

Jobs:
- ScheduleImportJob: season schedule → games (upsert)
- GameLinkJob: date + team pair → sportsdata_game_id
- ScoreSyncJob: finals → winner_team_id
- BracketSyncJob: tournament feed → sportsdata_game_id by bracket position
- LogoSyncJob: ESPN directory → logo_url, espn_team_id
- ResultsSyncJob: Highlightly results → winner_team_id
- GameDaySyncJob: one date's games → link + winner
"""
from bracket_pool.services.sync.jobs.base import JobPhase, SyncJob
from bracket_pool.services.sync.jobs.bracket_sync import BracketSyncJob
from bracket_pool.services.sync.jobs.game_day_sync import GameDaySyncJob
from bracket_pool.services.sync.jobs.game_link import GameLinkJob
from bracket_pool.services.sync.jobs.logo_sync import LogoSyncJob
from bracket_pool.services.sync.jobs.results_sync import ResultsSyncJob
from bracket_pool.services.sync.jobs.schedule_import import ScheduleImportJob
from bracket_pool.services.sync.jobs.score_sync import ScoreSyncJob

__all__ = [
    "JobPhase",
    "SyncJob",
    "BracketSyncJob",
    "GameDaySyncJob",
    "GameLinkJob",
    "LogoSyncJob",
    "ResultsSyncJob",
    "ScheduleImportJob",
    "ScoreSyncJob",
]
