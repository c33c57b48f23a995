"""Team data access: provider id lookups and directory enrichment writes."""
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from bracket_pool.models import Team
from bracket_pool.repositories.base import BaseRepository


class TeamRepository(BaseRepository[Team]):

    def __init__(self, db: Session):
        super().__init__(Team, db)

    def find_by_sportsdata_ids(self, ids: Iterable[int]) -> List[Team]:
        ids = list(ids)
        if not ids:
            return []
        return self.where(Team.sportsdata_team_id.in_(ids))

    def find_by_ids(self, ids: Iterable[str]) -> List[Team]:
        ids = list(ids)
        if not ids:
            return []
        return self.where(Team.id.in_(ids))

    def find_by_external_ids(self, ids: Iterable[str]) -> List[Team]:
        ids = list(ids)
        if not ids:
            return []
        return self.where(Team.external_team_id.in_(ids))

    def find_by_espn_team_id(self, espn_team_id: int) -> Optional[Team]:
        return self.where_first(Team.espn_team_id == espn_team_id)

    def find_all_ordered(self) -> List[Team]:
        return self._run(lambda: self.query().order_by(Team.name).all())

    def set_directory_link(self, team: Team, logo_url: str, espn_team_id: int) -> Team:
        """Record the ESPN id and logo for ``team``."""
        return self.update(team, logo_url=logo_url, espn_team_id=espn_team_id)
