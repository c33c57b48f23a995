"""
Prometheus metrics for the bracket pool sync API.

HTTP request metrics come from prometheus-fastapi-instrumentator; the
counters below cover what it cannot see:
- Sync job runs and their outcome
- Rows written per job
- Reconciliation misses by reason
- Upstream provider request outcomes
"""
from prometheus_client import Counter, Histogram

sync_job_runs_total = Counter(
    "sync_job_runs_total",
    "Total sync job runs",
    ["job", "outcome"]
)

sync_job_duration_seconds = Histogram(
    "sync_job_duration_seconds",
    "Sync job wall-clock duration in seconds",
    ["job"]
)

sync_records_written_total = Counter(
    "sync_records_written_total",
    "Rows written by sync jobs",
    ["job"]
)

sync_reconciliation_misses_total = Counter(
    "sync_reconciliation_misses_total",
    "Provider records that could not be matched to internal rows",
    ["job", "reason"]
)

provider_requests_total = Counter(
    "provider_requests_total",
    "Upstream provider requests",
    ["provider", "outcome"]
)
