"""
Base class for synchronization jobs.

Each job moves through ``idle → fetching → reconciling → writing → done``.
Any exception moves it to ``failed`` and is re-raised unchanged: provider
errors abort before writes start, and a store error during writing stops
the job at that record. Rows written before the failure stay written;
re-running the job is safe because every write is keyed or guarded by
"only if different".
"""
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict

from sqlalchemy.orm import Session

from bracket_pool.core.logging import get_logger
from bracket_pool.core.metrics import (
    sync_job_duration_seconds,
    sync_job_runs_total,
    sync_reconciliation_misses_total,
    sync_records_written_total,
)
from bracket_pool.repositories.game_repository import GameRepository
from bracket_pool.repositories.team_repository import TeamRepository
from bracket_pool.services.sync.matchers.team_resolver import TeamIdResolver

logger = get_logger(__name__)


class JobPhase(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    RECONCILING = "reconciling"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


class SyncJob(ABC):
    """
    Shared lifecycle, logging and metrics for sync jobs.

    Subclasses implement ``execute()`` and call ``enter()`` at each phase
    boundary. Jobs hold no state between runs; every run re-reads the store.
    """

    name: str = "sync"

    def __init__(self, db: Session):
        self.db = db
        self.teams = TeamRepository(db)
        self.games = GameRepository(db)
        self.resolver = TeamIdResolver(self.teams)
        self.phase = JobPhase.IDLE

    def enter(self, phase: JobPhase) -> None:
        logger.debug(f"{self.name}: {self.phase.value} -> {phase.value}")
        self.phase = phase

    def wrote(self, count: int = 1) -> None:
        sync_records_written_total.labels(self.name).inc(count)

    def missed(self, reason: str) -> None:
        sync_reconciliation_misses_total.labels(self.name, reason).inc()

    async def run(self, *args: Any, **kwargs: Any) -> Dict[str, Any]:
        """Run the job once and return its report."""
        start = time.monotonic()
        logger.info(f"Starting {self.name}")

        try:
            result = await self.execute(*args, **kwargs)
        except Exception as e:
            failed_in = self.phase
            self.phase = JobPhase.FAILED
            sync_job_runs_total.labels(self.name, "failed").inc()
            logger.error(f"{self.name} failed while {failed_in.value}: {e}")
            raise
        finally:
            sync_job_duration_seconds.labels(self.name).observe(time.monotonic() - start)

        self.enter(JobPhase.DONE)
        sync_job_runs_total.labels(self.name, "success").inc()

        duration_ms = int((time.monotonic() - start) * 1000)
        counters = {k: v for k, v in result.items() if isinstance(v, int) and not isinstance(v, bool)}
        logger.info(f"{self.name} completed in {duration_ms}ms", extra={"job": self.name, **counters})
        return result

    @abstractmethod
    async def execute(self, *args: Any, **kwargs: Any) -> Dict[str, Any]:
        """Job body; returns the report dict (always with ``ok``)."""
