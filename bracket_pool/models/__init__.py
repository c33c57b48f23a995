"""ORM models for the bracket pool tables touched by the sync pipeline."""
from bracket_pool.models.models import Base, Game, Pool, Team

__all__ = ["Base", "Game", "Pool", "Team"]
