"""
Database engine and session management.

The engine is created lazily on first use so importing the app (or the test
suite) never needs a reachable database.
"""
import os
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool

_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine, _SessionLocal

    if _engine is None:
        from bracket_pool.core.config import settings

        options = {
            "pool_pre_ping": True,  # Verify connections before using
            "echo": os.getenv("SQL_ECHO", "false").lower() == "true",
        }
        if not settings.DATABASE_URL.startswith("sqlite"):
            options.update(poolclass=QueuePool, pool_size=10, max_overflow=20)

        _engine = create_engine(settings.DATABASE_URL, **options)
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_engine)

    return _engine


def get_session_factory() -> sessionmaker:
    get_engine()
    return _SessionLocal


def get_db() -> Generator[Session, None, None]:
    """
    Dependency that provides a database session.

    Usage in FastAPI:
    ```python
    @router.post("/endpoint")
    def endpoint(db: Session = Depends(get_db)):
        ...
    ```
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()
