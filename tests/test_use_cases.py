"""Tests for use cases."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from content_directives.adapters.queue import InMemoryJobQueue
from content_directives.core import ContentItem, ContentNotFoundError, JobKind, JobQueueError
from content_directives.use_cases import (
    AuthorDeletionService,
    DeferredEffectEnqueuer,
    ScheduledJobHandlers,
    comment_sub_tree_root_id,
    redaction_fields,
)

NOW = datetime(2024, 2, 18, 12, 0, tzinfo=timezone.utc)


@pytest.mark.asyncio
async def test_enqueue_delete_submits_one_job() -> None:
    """Test a delete directive becomes one deleteItem job."""
    queue = AsyncMock()
    enqueuer = DeferredEffectEnqueuer(queue)
    item = ContentItem(id=5, created_at=NOW, text="temporary @delete in 2 hours")

    assert await enqueuer.enqueue_delete(item, now=NOW) is True

    expected = (NOW + timedelta(hours=2)).timestamp()
    queue.submit.assert_called_once_with(JobKind.DELETE, {"id": 5}, expected)
    assert isinstance(queue.submit.call_args.args[2], float)


@pytest.mark.asyncio
async def test_enqueue_delete_without_directive() -> None:
    """Test nothing is submitted for absent or malformed directives."""
    queue = AsyncMock()
    enqueuer = DeferredEffectEnqueuer(queue)

    for text in (None, "just text", "@delete whenever"):
        item = ContentItem(id=5, created_at=NOW, text=text)
        assert await enqueuer.enqueue_delete(item, now=NOW) is False

    queue.submit.assert_not_called()


@pytest.mark.asyncio
async def test_enqueue_schedule_publish() -> None:
    """Test a scheduled item becomes one postItem job."""
    queue = InMemoryJobQueue()
    enqueuer = DeferredEffectEnqueuer(queue)
    scheduled_at = datetime(2024, 3, 1, 9, 30, 0, 250000, tzinfo=timezone.utc)

    assert await enqueuer.enqueue_schedule_publish(
        ContentItem(id=8, created_at=NOW, scheduled_at=scheduled_at)
    )
    assert not await enqueuer.enqueue_schedule_publish(ContentItem(id=9, created_at=NOW))

    assert len(queue.jobs) == 1
    job = queue.jobs[0]
    assert job.kind == JobKind.PUBLISH
    assert job.item_id == 8
    assert job.fire_at == scheduled_at


@pytest.mark.asyncio
async def test_enqueue_propagates_queue_errors() -> None:
    """Test queue failures reach the caller unchanged."""
    queue = AsyncMock()
    queue.submit.side_effect = JobQueueError("down")
    enqueuer = DeferredEffectEnqueuer(queue)

    with pytest.raises(JobQueueError, match="down"):
        await enqueuer.enqueue_delete(ContentItem(id=1, created_at=NOW, text="@delete in 1 day"), now=NOW)


def test_redaction_fields() -> None:
    """Test only fields the item had are overwritten."""
    item = ContentItem(id=1, created_at=NOW, text="hello", url="http://x", poll_cost=5)

    assert redaction_fields(item, now=NOW) == {
        "deleted_at": NOW,
        "text": "*deleted by author*",
        "url": None,
        "poll_cost": None,
    }


def test_redaction_fields_with_title() -> None:
    """Test titled items get the title sentinel and empty text is left alone."""
    item = ContentItem(id=1, created_at=NOW, text="", title="A post")

    assert redaction_fields(item, now=NOW) == {"deleted_at": NOW, "title": "deleted by author"}


@pytest.mark.asyncio
async def test_redact_loads_and_updates() -> None:
    """Test redaction looks the item up and writes the redaction."""
    item = ContentItem(id=3, created_at=NOW, text="hello", title="Title")
    updated = ContentItem(id=3, created_at=NOW, text="*deleted by author*", title="deleted by author", deleted_at=NOW)

    repository = AsyncMock()
    repository.find_by_id.return_value = item
    repository.update.return_value = updated

    service = AuthorDeletionService(repository)
    result = await service.redact(3, now=NOW)

    assert result is updated
    repository.find_by_id.assert_called_once_with(3)
    repository.update.assert_called_once_with(
        3, {"deleted_at": NOW, "text": "*deleted by author*", "title": "deleted by author"}
    )


@pytest.mark.asyncio
async def test_redact_uses_given_item() -> None:
    """Test a supplied item skips the lookup."""
    repository = AsyncMock()
    service = AuthorDeletionService(repository)

    await service.redact(3, item=ContentItem(id=3, created_at=NOW, url="http://x"), now=NOW)

    repository.find_by_id.assert_not_called()
    repository.update.assert_called_once_with(3, {"deleted_at": NOW, "url": None})


@pytest.mark.asyncio
async def test_redact_missing_item() -> None:
    """Test redacting a missing item reports NotFound."""
    repository = AsyncMock()
    repository.find_by_id.return_value = None
    service = AuthorDeletionService(repository)

    with pytest.raises(ContentNotFoundError) as exc_info:
        await service.redact(404)

    assert exc_info.value.item_id == 404
    repository.update.assert_not_called()


def test_comment_sub_tree_root_id() -> None:
    """Test the subtree root sits depth_limit - 1 levels up from the leaf."""
    assert comment_sub_tree_root_id("1.2.3.4.5.6", depth_limit=5) == 3
    assert comment_sub_tree_root_id("1.2.3.4.5.6", depth_limit=6) == 2
    assert comment_sub_tree_root_id("1.2", depth_limit=5) == 1

    item = ContentItem(id=6, created_at=NOW, path="1.2.3.4.5.6")
    service = AuthorDeletionService(AsyncMock(), comment_depth_limit=5)
    assert service.comment_sub_tree_root_id(item) == 3


@pytest.mark.asyncio
async def test_delete_item_handler() -> None:
    """Test the deleteItem job redacts the item."""
    deletion_service = AsyncMock()
    handlers = ScheduledJobHandlers(deletion_service)

    await handlers.handle("deleteItem", {"id": "12"})

    deletion_service.redact.assert_called_once_with(12)


@pytest.mark.asyncio
async def test_delete_item_handler_vanished_item() -> None:
    """Test a vanished item is a logged no-op."""
    repository = AsyncMock()
    repository.find_by_id.return_value = None
    handlers = ScheduledJobHandlers(AuthorDeletionService(repository))

    assert await handlers.delete_item({"id": 12}) is None
    repository.update.assert_not_called()


@pytest.mark.asyncio
async def test_post_item_handler() -> None:
    """Test the postItem job hands the id to the publisher."""
    publisher = AsyncMock()
    handlers = ScheduledJobHandlers(AsyncMock(), publisher=publisher)

    await handlers.handle(JobKind.PUBLISH, {"id": 21})

    publisher.publish_scheduled.assert_called_once_with(21)


@pytest.mark.asyncio
async def test_post_item_handler_without_publisher() -> None:
    """Test publishing fails loudly when nothing can publish."""
    handlers = ScheduledJobHandlers(AsyncMock())

    with pytest.raises(RuntimeError):
        await handlers.post_item({"id": 21})


@pytest.mark.asyncio
async def test_unknown_job_name() -> None:
    """Test unknown job names are rejected."""
    handlers = ScheduledJobHandlers(AsyncMock())

    with pytest.raises(ValueError):
        await handlers.handle("archiveItem", {"id": 1})


@pytest.mark.asyncio
async def test_enqueue_delete_off_the_calendar() -> None:
    """Test a delete directive past the representable range submits nothing."""
    queue = AsyncMock()
    enqueuer = DeferredEffectEnqueuer(queue)

    for text in ("@delete in 99999 years", "@delete in 99999999999 days"):
        item = ContentItem(id=5, created_at=NOW, text=text)
        assert await enqueuer.enqueue_delete(item, now=NOW) is False

    queue.submit.assert_not_called()


def test_redaction_fields_keep_first_deletion_time() -> None:
    """Test redacting an already deleted item keeps its deletion instant."""
    deleted_at = NOW - timedelta(days=2)
    item = ContentItem(id=1, created_at=NOW, text="*deleted by author*", deleted_at=deleted_at)

    assert redaction_fields(item, now=NOW) == {
        "deleted_at": deleted_at,
        "text": "*deleted by author*",
    }
