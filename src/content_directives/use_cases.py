"""Business logic use cases."""

import logging
from datetime import datetime, timezone
from typing import Any, Optional, Union

from content_directives.core import (
    ContentItem,
    ContentNotFoundError,
    ContentRepository,
    DeferredJobRequest,
    ItemPublisher,
    JobKind,
    JobQueue,
    resolve_delete,
)
from content_directives.core.time_math import as_utc

logger = logging.getLogger(__name__)

DELETED_TEXT = "*deleted by author*"
DELETED_TITLE = "deleted by author"

DEFAULT_COMMENT_DEPTH_LIMIT = 6


class DeferredEffectEnqueuer:
    """Turn resolved directives into one-shot jobs on the job queue.

    Each method submits at most one job per call. Calling it once per
    directive, when the directive is first written, is up to the caller.
    """

    def __init__(self, job_queue: JobQueue) -> None:
        self.job_queue = job_queue

    async def submit(self, request: DeferredJobRequest) -> None:
        """Hand a job request to the queue."""
        await self.job_queue.submit(request.kind, request.payload, request.start_after)

    async def enqueue_delete(self, item: ContentItem, now: Optional[datetime] = None) -> bool:
        """Schedule deletion of ``item`` if its text carries ``@delete in N unit``."""
        directive = resolve_delete(item.text, now)
        if directive.timestamp is None:
            return False

        request = DeferredJobRequest(JobKind.DELETE, item.id, directive.timestamp)
        logger.info("Enqueuing delete of item %s at %s", item.id, request.fire_at.isoformat())
        await self.submit(request)
        return True

    async def enqueue_schedule_publish(self, item: ContentItem) -> bool:
        """Schedule publication of ``item`` at its ``scheduled_at`` instant."""
        if item.scheduled_at is None:
            return False

        request = DeferredJobRequest(JobKind.PUBLISH, item.id, as_utc(item.scheduled_at))
        logger.info("Enqueuing publish of item %s at %s", item.id, request.fire_at.isoformat())
        await self.submit(request)
        return True


def redaction_fields(item: ContentItem, now: Optional[datetime] = None) -> dict[str, Any]:
    """Field changes that redact ``item``; fields the item never had are left out.

    An item that is already deleted keeps its original deletion instant.
    """
    if item.deleted_at is not None:
        deleted_at = item.deleted_at
    else:
        deleted_at = as_utc(now) if now is not None else datetime.now(timezone.utc)
    fields: dict[str, Any] = {"deleted_at": deleted_at}
    if item.text:
        fields["text"] = DELETED_TEXT
    if item.title:
        fields["title"] = DELETED_TITLE
    if item.url:
        fields["url"] = None
    if item.poll_cost:
        fields["poll_cost"] = None
    return fields


def comment_sub_tree_root_id(
    item_or_path: Union[ContentItem, str],
    depth_limit: int = DEFAULT_COMMENT_DEPTH_LIMIT,
) -> int:
    """Id of the ancestor that roots the rendered subtree of a deep comment.

    Threads deeper than ``depth_limit`` are rendered from the ancestor
    ``depth_limit - 1`` levels above the leaf (the leaf included).
    """
    path = item_or_path.path if isinstance(item_or_path, ContentItem) else item_or_path
    ids = path.split(".")
    return int(ids[-(depth_limit - 1):][0])


class AuthorDeletionService:
    """Redact items deleted by their author."""

    def __init__(
        self,
        repository: ContentRepository,
        comment_depth_limit: int = DEFAULT_COMMENT_DEPTH_LIMIT,
    ) -> None:
        self.repository = repository
        self.comment_depth_limit = comment_depth_limit

    async def redact(
        self,
        item_id: int,
        item: Optional[ContentItem] = None,
        now: Optional[datetime] = None,
    ) -> ContentItem:
        """Mark the item deleted and blank out its content.

        Raises:
            ContentNotFoundError: if no item with ``item_id`` exists
        """
        if item is None:
            item = await self.repository.find_by_id(int(item_id))
        if item is None:
            raise ContentNotFoundError(int(item_id))

        fields = redaction_fields(item, now)
        return await self.repository.update(int(item_id), fields)

    def comment_sub_tree_root_id(self, item: Union[ContentItem, str]) -> int:
        return comment_sub_tree_root_id(item, self.comment_depth_limit)


class ScheduledJobHandlers:
    """Entry points run by the job queue when a deferred job fires."""

    def __init__(
        self,
        deletion_service: AuthorDeletionService,
        publisher: Optional[ItemPublisher] = None,
    ) -> None:
        self.deletion_service = deletion_service
        self.publisher = publisher

    async def delete_item(self, data: dict[str, Any]) -> Optional[ContentItem]:
        """Run a ``deleteItem`` job; a vanished item is logged and skipped."""
        item_id = int(data["id"])
        logger.info("Deleting item %s", item_id)
        try:
            return await self.deletion_service.redact(item_id)
        except ContentNotFoundError:
            logger.warning("Attempted to delete an item that does not exist: %s", item_id)
            return None

    async def post_item(self, data: dict[str, Any]) -> None:
        """Run a ``postItem`` job."""
        item_id = int(data["id"])
        logger.info("Posting scheduled item %s", item_id)
        if self.publisher is None:
            raise RuntimeError("No publisher configured for scheduled items")
        await self.publisher.publish_scheduled(item_id)

    async def handle(self, name: Union[JobKind, str], data: dict[str, Any]) -> Any:
        """Dispatch a fired job by its queue name."""
        kind = JobKind(name)
        if kind is JobKind.DELETE:
            return await self.delete_item(data)
        return await self.post_item(data)
