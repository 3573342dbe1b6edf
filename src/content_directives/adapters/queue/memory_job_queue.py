"""In-memory job queue for dry runs."""

from datetime import datetime, timezone
from typing import Any

from content_directives.core.entities import DeferredJobRequest, JobKind
from content_directives.core.interfaces import JobQueue


class InMemoryJobQueue(JobQueue):
    """Keep submitted jobs in a list instead of sending them anywhere."""

    def __init__(self) -> None:
        self.jobs: list[DeferredJobRequest] = []

    async def submit(self, kind: JobKind, payload: dict[str, Any], start_after: float) -> None:
        self.jobs.append(
            DeferredJobRequest(
                kind=JobKind(kind),
                item_id=int(payload["id"]),
                fire_at=datetime.fromtimestamp(start_after, tz=timezone.utc),
            )
        )
