"""Admin sync routes.

Provides endpoints for:
- Full sync (import → link → scores)
- Each job on its own: schedule import, game linking, score sync,
  bracket-position sync, game-day sync, Highlightly results
- Logo enrichment and manual winner override (pool creator only)

Scheduler-facing endpoints require the X-Cron-Secret header. Errors are
raised as SyncError subclasses and rendered by the app's exception
handlers as ``{"ok": false, "error": ...}``.
"""
import logging
from typing import Dict, List, Optional

import httpx
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from bracket_pool.api.dependencies import get_http_client
from bracket_pool.core.auth import authorize_pool_creator, require_cron_secret
from bracket_pool.core.config import EspnConfig, HighlightlyConfig, Settings, SportsDataConfig, get_settings
from bracket_pool.core.database import get_db
from bracket_pool.core.exceptions import BadRequestError, NotFoundError
from bracket_pool.core.rate_limit import ADMIN_RATE_LIMIT, limiter
from bracket_pool.models import Game
from bracket_pool.repositories.game_repository import GameRepository
from bracket_pool.services.sync.adapters.espn import EspnTeamDirectoryClient
from bracket_pool.services.sync.adapters.highlightly import HighlightlyClient
from bracket_pool.services.sync.adapters.sportsdata import SportsDataClient
from bracket_pool.services.sync.jobs import (
    BracketSyncJob,
    GameDaySyncJob,
    GameLinkJob,
    LogoSyncJob,
    ResultsSyncJob,
    ScheduleImportJob,
    ScoreSyncJob,
)
from bracket_pool.services.sync.orchestrator import SyncOrchestrator
from bracket_pool.utils.timezone import parse_day, tournament_today

logger = logging.getLogger(__name__)

router = APIRouter(tags=["admin-sync"])

cron_protected = [Depends(require_cron_secret)]


class PoolCreatorRequest(BaseModel):
    """Identifies the caller for pool-creator-only actions."""
    model_config = ConfigDict(populate_by_name=True)

    pool_id: Optional[str] = Field(None, alias="poolId")
    user_id: Optional[str] = Field(None, alias="userId")


class WinnerOverrideRequest(PoolCreatorRequest):
    winner_team_id: Optional[str] = Field(None, alias="winnerTeamId")


class DateRequest(BaseModel):
    date: Optional[str] = None


def get_sportsdata_client(
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> SportsDataClient:
    """Dependency building the SportsDataIO client; fails fast on missing credentials."""
    return SportsDataClient(SportsDataConfig.from_settings(settings), http_client)


def _day_or_400(value: str) -> str:
    try:
        return parse_day(value)
    except ValueError as e:
        raise BadRequestError(str(e)) from e


def _game_summary(game: Game) -> Dict:
    return {
        "id": game.id,
        "round": game.round,
        "region": game.region,
        "slot": game.slot,
        "team1_id": game.team1_id,
        "team2_id": game.team2_id,
        "winner_team_id": game.winner_team_id,
        "status": game.status,
    }


# ============================================================================
# Scheduler-facing jobs (X-Cron-Secret)
# ============================================================================

@router.api_route("/full-sync", methods=["GET", "POST"], dependencies=cron_protected)
@limiter.limit(ADMIN_RATE_LIMIT)
async def full_sync(
    request: Request,
    db: Session = Depends(get_db),
    client: SportsDataClient = Depends(get_sportsdata_client),
    settings: Settings = Depends(get_settings),
) -> Dict:
    """
    Run schedule import, game linking and score sync in that order.

    Returns:
        {"ok": true, "import": {...}, "link": {...}, "scores": {...}}
        or {"ok": false, "error": ..., "failedStep": ...} on the first failure
    """
    orchestrator = SyncOrchestrator(
        db, client, season=settings.TOURNAMENT_SEASON, timezone=settings.TOURNAMENT_TIMEZONE
    )
    return await orchestrator.run_full_sync()


@router.api_route("/import-schedule", methods=["GET", "POST"], dependencies=cron_protected)
@limiter.limit(ADMIN_RATE_LIMIT)
async def import_schedule(
    request: Request,
    season: Optional[int] = Query(None, description="Season year; defaults to TOURNAMENT_SEASON"),
    db: Session = Depends(get_db),
    client: SportsDataClient = Depends(get_sportsdata_client),
    settings: Settings = Depends(get_settings),
) -> Dict:
    """
    Upsert the season's tournament games.

    Returns:
        {ok, season, totalFetched, upserted, skippedMissingTeams, skippedInvalid}
    """
    return await ScheduleImportJob(db, client).run(season=season or settings.TOURNAMENT_SEASON)


@router.api_route("/link-games", methods=["GET", "POST"], dependencies=cron_protected)
@limiter.limit(ADMIN_RATE_LIMIT)
async def link_games(
    request: Request,
    db: Session = Depends(get_db),
    client: SportsDataClient = Depends(get_sportsdata_client),
) -> Dict:
    """Attach provider game ids by date + team pair. Returns {ok, linked, notFound, conflicts}."""
    return await GameLinkJob(db, client).run()


@router.api_route("/sync-scores", methods=["GET", "POST"], dependencies=cron_protected)
@limiter.limit(ADMIN_RATE_LIMIT)
async def sync_scores(
    request: Request,
    dates: Optional[List[str]] = Query(None, alias="date", description="YYYY-MM-DD; repeatable"),
    db: Session = Depends(get_db),
    client: SportsDataClient = Depends(get_sportsdata_client),
    settings: Settings = Depends(get_settings),
) -> Dict:
    """
    Set winners from finalized games.

    Args:
        dates: Dates to check; defaults to today and yesterday in TOURNAMENT_TIMEZONE

    Returns:
        {ok, dates, finalsSeen, updatedGames, skippedNoMatch, skippedTieOrNoScore}
    """
    days = [_day_or_400(d) for d in dates] if dates else None
    job = ScoreSyncJob(db, client, timezone=settings.TOURNAMENT_TIMEZONE)
    return await job.run(dates=days)


@router.api_route("/sync-bracket", methods=["GET", "POST"], dependencies=cron_protected)
@limiter.limit(ADMIN_RATE_LIMIT)
async def sync_bracket(
    request: Request,
    season: Optional[int] = Query(None, description="Season year; defaults to TOURNAMENT_SEASON"),
    db: Session = Depends(get_db),
    client: SportsDataClient = Depends(get_sportsdata_client),
    settings: Settings = Depends(get_settings),
) -> Dict:
    """
    Link games through the tournament feed by round/region/slot.

    An empty feed is reported with a "not available yet" note and ok=true.
    """
    return await BracketSyncJob(db, client).run(season=season or settings.TOURNAMENT_SEASON)


@router.post("/sync-games", dependencies=cron_protected)
@limiter.limit(ADMIN_RATE_LIMIT)
async def sync_games(
    request: Request,
    body: Optional[DateRequest] = None,
    db: Session = Depends(get_db),
    client: SportsDataClient = Depends(get_sportsdata_client),
) -> Dict:
    """
    Link and settle one date's games.

    Body:
        {"date": "YYYY-MM-DD"} (required)
    """
    if body is None or not body.date:
        raise BadRequestError("date is required (YYYY-MM-DD)")
    return await GameDaySyncJob(db, client).run(day=_day_or_400(body.date))


@router.post("/sync-results", dependencies=cron_protected)
@limiter.limit(ADMIN_RATE_LIMIT)
async def sync_results(
    request: Request,
    body: Optional[DateRequest] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> Dict:
    """
    Confirm winners from Highlightly.

    Body:
        {"date": "YYYY-MM-DD"} (optional; defaults to today in TOURNAMENT_TIMEZONE)
    """
    client = HighlightlyClient(HighlightlyConfig.from_settings(settings), http_client)
    if body is not None and body.date:
        day = _day_or_400(body.date)
    else:
        day = tournament_today(settings.TOURNAMENT_TIMEZONE).isoformat()
    return await ResultsSyncJob(db, client).run(day=day)


# ============================================================================
# Pool-creator actions
# ============================================================================

@router.post("/sync-logos")
@limiter.limit(ADMIN_RATE_LIMIT)
async def sync_logos(
    request: Request,
    body: Optional[PoolCreatorRequest] = None,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> Dict:
    """
    Copy ESPN logos and team ids onto teams.

    Body:
        {"poolId": ..., "userId": ...}; the user must have created the pool

    Returns:
        {ok, updated, unchanged, missing, placeholders, conflicts}
    """
    authorize_pool_creator(db, body.pool_id if body else None, body.user_id if body else None)
    client = EspnTeamDirectoryClient(EspnConfig.from_settings(settings), http_client)
    return await LogoSyncJob(db, client).run()


@router.post("/games/{game_id}/winner")
async def set_game_winner(
    game_id: str,
    body: Optional[WinnerOverrideRequest] = None,
    db: Session = Depends(get_db),
) -> Dict:
    """
    Manually set or clear a game's winner.

    Body:
        {"poolId": ..., "userId": ..., "winnerTeamId": <team id or null>}
    """
    authorize_pool_creator(db, body.pool_id if body else None, body.user_id if body else None)

    games = GameRepository(db)
    game = games.find_by_id(game_id)
    if game is None:
        raise NotFoundError(f"game {game_id} not found")

    games.set_winner(game, body.winner_team_id)
    logger.info(f"Winner of game {game_id} set to {body.winner_team_id} by {body.user_id}")
    return {"ok": True, "game": _game_summary(game)}
