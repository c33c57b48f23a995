"""
Repository layer for data access.

Usage:
    from bracket_pool.repositories import GameRepository, TeamRepository

    games = GameRepository(db)
    game = games.find_by_sportsdata_game_id(61234)
"""
from bracket_pool.repositories.base import BaseRepository
from bracket_pool.repositories.game_repository import GameRepository
from bracket_pool.repositories.pool_repository import PoolRepository
from bracket_pool.repositories.team_repository import TeamRepository

__all__ = [
    "BaseRepository",
    "GameRepository",
    "PoolRepository",
    "TeamRepository",
]
