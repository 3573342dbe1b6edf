"""Core domain layer."""

from content_directives.core.entities import (
    ContentItem,
    DeferredJobRequest,
    Directive,
    JobKind,
    SortMode,
    TimeUnit,
)
from content_directives.core.exceptions import (
    ContentDirectivesError,
    ContentNotFoundError,
    ContentStoreError,
    ExternalIOError,
    JobQueueError,
)
from content_directives.core.interfaces import ContentRepository, ItemPublisher, JobQueue
from content_directives.core.resolver import (
    has_delete_command,
    has_delete_mention,
    has_schedule_mention,
    resolve_delete,
    resolve_schedule,
)
from content_directives.core.sort_policy import choose_sort_mode, is_job
from content_directives.core.time_math import add_units, date_pivot

__all__ = [
    "ContentItem",
    "DeferredJobRequest",
    "Directive",
    "JobKind",
    "SortMode",
    "TimeUnit",
    "ContentDirectivesError",
    "ContentNotFoundError",
    "ContentStoreError",
    "ExternalIOError",
    "JobQueueError",
    "ContentRepository",
    "ItemPublisher",
    "JobQueue",
    "has_delete_command",
    "has_delete_mention",
    "has_schedule_mention",
    "resolve_delete",
    "resolve_schedule",
    "choose_sort_mode",
    "is_job",
    "add_units",
    "date_pivot",
]
