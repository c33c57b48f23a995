"""Full sync orchestrator.

Runs the three scheduler-facing jobs in a fixed order:
1. ScheduleImportJob - games must exist before they can be linked
2. GameLinkJob - games must be linked before scores can find them
3. ScoreSyncJob

The first failing step stops the sequence; later steps never run and the
failure is raised as ``SyncStepFailedError`` naming the step.
"""
import time
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from bracket_pool.core.exceptions import SyncStepFailedError
from bracket_pool.core.logging import get_logger
from bracket_pool.services.sync.adapters.sportsdata import SportsDataClient
from bracket_pool.services.sync.jobs.game_link import GameLinkJob
from bracket_pool.services.sync.jobs.schedule_import import ScheduleImportJob
from bracket_pool.services.sync.jobs.score_sync import ScoreSyncJob

logger = get_logger(__name__)


class SyncOrchestrator:
    """
    Coordinate import → link → scores within one request.

    Components:
    - ScheduleImportJob
    - GameLinkJob
    - ScoreSyncJob
    """

    def __init__(
        self,
        db: Session,
        client: SportsDataClient,
        season: int,
        timezone: str = "America/New_York",
    ):
        """
        Initialize the orchestrator.

        Args:
            db: SQLAlchemy database session
            client: SportsDataIO client shared by all three steps
            season: Tournament season to import
            timezone: Timezone used for the score step's "today"
        """
        self.db = db
        self.season = season
        self.import_job = ScheduleImportJob(db, client)
        self.link_job = GameLinkJob(db, client)
        self.score_job = ScoreSyncJob(db, client, timezone=timezone)

    async def run_full_sync(self, score_dates: Optional[list] = None) -> Dict[str, Any]:
        """
        Run import, link and score sync in order.

        Returns:
            {"ok": True, "import": ..., "link": ..., "scores": ...}

        Raises:
            SyncStepFailedError: A step raised or reported ``ok: false``
        """
        start = time.monotonic()
        steps = (
            ("import", self.import_job, {"season": self.season}),
            ("link", self.link_job, {}),
            ("scores", self.score_job, {"dates": score_dates}),
        )

        report: Dict[str, Any] = {"ok": True}
        for step, job, kwargs in steps:
            try:
                result = await job.run(**kwargs)
            except Exception as e:
                logger.error(f"Full sync stopped at {step}: {e}")
                raise SyncStepFailedError(step, e) from e

            if not result.get("ok", False):
                error = RuntimeError(result.get("error") or f"{step} reported failure")
                logger.error(f"Full sync stopped at {step}: {error}")
                raise SyncStepFailedError(step, error)

            report[step] = result

        duration_ms = int((time.monotonic() - start) * 1000)
        logger.info(f"Full sync completed in {duration_ms}ms")
        return report
