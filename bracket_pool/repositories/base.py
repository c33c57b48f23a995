"""
Base repository class for data access.

Repositories are the only code that touches the session. Sync jobs call
them one record at a time; every write method commits on its own so a job
interrupted halfway leaves fully-written rows behind, never half-written
ones.

Example:
    class TeamRepository(BaseRepository[Team]):
        def find_by_sportsdata_ids(self, ids):
            return self.where(Team.sportsdata_team_id.in_(ids))
"""
from abc import ABC
from typing import Any, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from bracket_pool.core.exceptions import StoreError
from bracket_pool.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class BaseRepository(Generic[T], ABC):
    """
    Common data access methods.

    Attributes:
        model_type: The SQLAlchemy model class this repository manages
        db: The database session
    """

    def __init__(self, model_type: Type[T], db: Session):
        self.model_type = model_type
        self.db = db

    # ========================================================================
    # Reads
    # ========================================================================

    def find_by_id(self, id: str) -> Optional[T]:
        """Find a single record by ID."""
        return self._run(lambda: self.db.get(self.model_type, id))

    def query(self) -> Query:
        """Get a new query object for this model."""
        return self.db.query(self.model_type)

    def where(self, *criterion) -> List[T]:
        """Filter records using SQLAlchemy expressions."""
        return self._run(lambda: self.query().filter(*criterion).all())

    def where_first(self, *criterion) -> Optional[T]:
        """Filter records using SQLAlchemy expressions and return first match."""
        return self._run(lambda: self.query().filter(*criterion).first())

    # ========================================================================
    # Writes
    # ========================================================================

    def update(self, instance: T, **changes: Any) -> T:
        """
        Apply ``changes`` to ``instance`` and commit.

        Raises:
            StoreError: The commit failed (the session is rolled back first)
        """
        for key, value in changes.items():
            setattr(instance, key, value)
        self.commit()
        return instance

    def add(self, instance: T) -> T:
        self.db.add(instance)
        self.commit()
        return instance

    def commit(self) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"{self.model_type.__name__} write failed: {e}")
            raise StoreError(f"{self.model_type.__name__} write failed: {e}") from e

    def _run(self, read):
        try:
            return read()
        except SQLAlchemyError as e:
            logger.error(f"{self.model_type.__name__} read failed: {e}")
            raise StoreError(f"{self.model_type.__name__} read failed: {e}") from e
