"""
Database models for the bracket pool.

Models mirror the pool's existing tables; only the columns the sync pipeline
reads or writes are declared. Scoring views and RPCs live in the database.
"""
import uuid

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class Team(Base):
    """Tournament participant with its identifiers at each upstream provider."""
    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    region = Column(String(20), nullable=True)  # East, West, South, Midwest
    seed_in_region = Column(Integer, nullable=True)  # 1-16
    cost = Column(Integer, nullable=True)  # draft budget points

    # Provider linkage
    sportsdata_team_id = Column(Integer, unique=True, nullable=True, index=True)
    espn_team_id = Column(Integer, unique=True, nullable=True)
    external_team_id = Column(String(64), unique=True, nullable=True)  # Highlightly
    logo_url = Column(String(512), nullable=True)

    def __repr__(self) -> str:
        return f"<Team {self.name} ({self.region} #{self.seed_in_region})>"


class Game(Base):
    """
    One bracket matchup.

    team1/team2 are null while the matchup is TBD. Imported games store the
    provider's away team in team1 and home team in team2.
    """
    __tablename__ = "games"

    id = Column(String(36), primary_key=True, default=_new_id)
    round = Column(String(8), nullable=False, index=True)  # R64 ... CHIP, UNK
    region = Column(String(20), nullable=True)  # null for F4 / CHIP
    slot = Column(Integer, nullable=True)

    team1_id = Column(String(36), ForeignKey("teams.id"), nullable=True)
    team2_id = Column(String(36), ForeignKey("teams.id"), nullable=True)
    winner_team_id = Column(String(36), ForeignKey("teams.id"), nullable=True)

    status = Column(String(50), nullable=True)
    start_time = Column(DateTime, nullable=True)
    game_date = Column(Date, nullable=True, index=True)
    season = Column(Integer, nullable=True)

    # Provider linkage
    sportsdata_game_id = Column(Integer, unique=True, nullable=True, index=True)
    external_game_id = Column(String(64), unique=True, nullable=True)  # Highlightly
    last_synced_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("round", "region", "slot", name="uq_games_round_region_slot"),
        CheckConstraint(
            "team1_id IS NULL OR team2_id IS NULL OR team1_id <> team2_id",
            name="ck_games_distinct_teams",
        ),
        CheckConstraint(
            "winner_team_id IS NULL OR winner_team_id = team1_id OR winner_team_id = team2_id",
            name="ck_games_winner_is_participant",
        ),
    )

    @property
    def team_ids(self) -> tuple:
        return (self.team1_id, self.team2_id)

    def __repr__(self) -> str:
        return f"<Game {self.round} {self.region or '-'} slot={self.slot} id={self.id}>"


class Pool(Base):
    """A friends-group pool; only the creator may run pool-scoped admin jobs."""
    __tablename__ = "pools"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    created_by = Column(String(36), nullable=False, index=True)
