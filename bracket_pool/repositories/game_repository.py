"""
Game data access for the sync jobs.

Write methods enforce the game invariants at the store boundary:
- a winner must be one of the game's two teams
- the two team slots must hold different teams
"""
from typing import Any, List, Optional, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from bracket_pool.core.exceptions import InvalidWinnerError
from bracket_pool.models import Game
from bracket_pool.repositories.base import BaseRepository
from bracket_pool.utils.timezone import utc_now


class GameRepository(BaseRepository[Game]):

    def __init__(self, db: Session):
        super().__init__(Game, db)

    # ========================================================================
    # Lookups
    # ========================================================================

    def find_by_sportsdata_game_id(self, sportsdata_game_id: int) -> Optional[Game]:
        return self.where_first(Game.sportsdata_game_id == sportsdata_game_id)

    def find_by_external_game_id(self, external_game_id: str) -> Optional[Game]:
        return self.where_first(Game.external_game_id == external_game_id)

    def find_by_position(self, round_code: str, region: Optional[str], slot: int) -> Optional[Game]:
        """Find the game at ``(round, region, slot)``; ``region=None`` matches F4/CHIP rows."""
        region_filter = Game.region.is_(None) if region is None else Game.region == region
        return self.where_first(Game.round == round_code, region_filter, Game.slot == slot)

    def find_by_team_pair(self, team_a: str, team_b: str) -> Optional[Game]:
        """Find the game between two teams regardless of which slot each holds."""
        return self.where_first(
            or_(
                and_(Game.team1_id == team_a, Game.team2_id == team_b),
                and_(Game.team1_id == team_b, Game.team2_id == team_a),
            )
        )

    def find_unlinked_with_teams(self) -> List[Game]:
        """Games with no SportsDataIO id that already have a date and both teams."""
        return self._run(lambda: self.query().filter(
            Game.sportsdata_game_id.is_(None),
            Game.game_date.isnot(None),
            Game.team1_id.isnot(None),
            Game.team2_id.isnot(None),
        ).order_by(Game.game_date).all())

    # ========================================================================
    # Writes
    # ========================================================================

    def upsert_by_sportsdata_id(self, sportsdata_game_id: int, **fields: Any) -> Tuple[Game, bool]:
        """
        Insert or update the game keyed by ``sportsdata_game_id``.

        An existing row keeps its bracket ``slot``; everything in ``fields``
        is overwritten.

        Returns:
            (game, created)
        """
        self._check_distinct(fields.get("team1_id"), fields.get("team2_id"))

        game = self.find_by_sportsdata_game_id(sportsdata_game_id)
        if game is None:
            game = Game(sportsdata_game_id=sportsdata_game_id, **fields)
            self.add(game)
            return game, True

        self.update(game, **fields)
        return game, False

    def link_sportsdata_game(self, game: Game, sportsdata_game_id: int) -> Game:
        return self.update(game, sportsdata_game_id=sportsdata_game_id, last_synced_at=utc_now())

    def set_winner(self, game: Game, winner_team_id: Optional[str], status: Optional[str] = None) -> Game:
        """
        Set (or clear, with ``None``) the winner of ``game``.

        Raises:
            InvalidWinnerError: ``winner_team_id`` is not team1 or team2
        """
        if winner_team_id is not None and winner_team_id not in (game.team1_id, game.team2_id):
            raise InvalidWinnerError(
                f"Team {winner_team_id} is not playing in game {game.id}"
            )

        changes: dict = {"winner_team_id": winner_team_id, "last_synced_at": utc_now()}
        if status is not None:
            changes["status"] = status
        return self.update(game, **changes)

    @staticmethod
    def _check_distinct(team1_id: Optional[str], team2_id: Optional[str]) -> None:
        if team1_id is not None and team1_id == team2_id:
            raise ValueError(f"Game cannot have the same team ({team1_id}) in both slots")
