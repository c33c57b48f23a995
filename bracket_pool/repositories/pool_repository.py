"""Pool lookups for the pool-creator authorization check."""
from sqlalchemy.orm import Session

from bracket_pool.models import Pool
from bracket_pool.repositories.base import BaseRepository


class PoolRepository(BaseRepository[Pool]):

    def __init__(self, db: Session):
        super().__init__(Pool, db)
