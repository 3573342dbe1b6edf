"""Job queue adapters."""

from content_directives.adapters.queue.http_job_queue import HttpJobQueue
from content_directives.adapters.queue.memory_job_queue import InMemoryJobQueue

__all__ = ["HttpJobQueue", "InMemoryJobQueue"]
