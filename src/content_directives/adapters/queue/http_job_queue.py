"""HTTP job queue adapter."""

import logging
from typing import Any, Optional

import httpx

from content_directives.core.entities import JobKind
from content_directives.core.exceptions import JobQueueError
from content_directives.core.interfaces import JobQueue

logger = logging.getLogger(__name__)


class HttpJobQueue(JobQueue):
    """Submit deferred jobs to a job queue service over HTTP."""

    def __init__(self, url: str, token: Optional[str] = None, timeout: float = 30.0) -> None:
        """Initialize the queue client.

        Args:
            url: Endpoint accepting job submissions
            token: Optional bearer token for the endpoint
            timeout: Request timeout in seconds
        """
        if not url:
            raise ValueError("Job queue URL cannot be empty")
        self.url = url
        self.token = token
        self.timeout = timeout

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def submit(self, kind: JobKind, payload: dict[str, Any], start_after: float) -> None:
        """Post one job.

        The body is ``{"name", "data", "startafter"}`` with ``startafter`` in
        epoch seconds.

        Raises:
            JobQueueError: if the request fails or the queue rejects it
        """
        body = {
            "name": JobKind(kind).value,
            "data": payload,
            "startafter": start_after,
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            try:
                response = await client.post(self.url, json=body, headers=self._headers())
                response.raise_for_status()
            except httpx.HTTPError as e:
                raise JobQueueError(f"Could not submit {body['name']} job: {e}") from e

        logger.debug("Submitted %s job %s", body["name"], payload)
