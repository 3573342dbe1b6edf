"""CLI entry point for content directives."""

import asyncio
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from content_directives.adapters.queue import HttpJobQueue, InMemoryJobQueue
from content_directives.adapters.storage import YamlContentStore
from content_directives.config import Settings, get_settings
from content_directives.core import (
    ContentNotFoundError,
    JobQueue,
    choose_sort_mode,
    has_delete_mention,
    has_schedule_mention,
    resolve_delete,
    resolve_schedule,
)
from content_directives.core.resolver import format_instant
from content_directives.use_cases import AuthorDeletionService, DeferredEffectEnqueuer

cli = typer.Typer(help="Resolve and act on inline content directives.", no_args_is_help=True)

_config_option = typer.Option(Path("config.yaml"), "--config", help="Path to config.yaml")


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="[%(levelname)s] %(asctime)s - %(name)s - %(message)s",
    )


@cli.command()
def resolve(
    text: str,
    now: Optional[datetime] = typer.Option(None, help="Resolve relative directives against this instant"),
) -> None:
    """Show the delete and schedule directives found in TEXT."""
    reference = now or datetime.now(timezone.utc)

    delete = resolve_delete(text, reference)
    if delete.timestamp:
        print(f"✓ delete at:   {format_instant(delete.timestamp)}")
    elif has_delete_mention(text):
        print("⚠️  @delete mentioned but not understood (expected '@delete in <N> <unit>')")
    else:
        print("• no delete directive")

    schedule = resolve_schedule(text, reference)
    if schedule.timestamp:
        print(f"✓ publish at:  {format_instant(schedule.timestamp)}")
        if schedule.text != text:
            print(f"  rewritten:   {schedule.text}")
    elif has_schedule_mention(text):
        print("⚠️  @schedule mentioned but not understood (expected '@schedule in <N> <unit>' or '@schedule on <timestamp>')")
    else:
        print("• no schedule directive")


@cli.command("sort-mode")
def sort_mode(
    created_at: datetime = typer.Option(..., help="Creation instant of the item"),
    pinned: bool = typer.Option(False, "--pinned"),
    bio: bool = typer.Option(False, "--bio"),
    config: Path = _config_option,
) -> None:
    """Print the default comment sort for an item."""
    settings = get_settings(config)
    mode = choose_sort_mode(pinned, bio, created_at, old_item_days=settings.old_item_days)
    print(mode.value)


@cli.command()
def redact(
    item_id: int,
    config: Path = _config_option,
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Delete a stored item on behalf of its author."""
    _setup_logging(verbose)
    settings = get_settings(config)
    service = AuthorDeletionService(
        YamlContentStore(settings.content_dir),
        comment_depth_limit=settings.comment_depth_limit,
    )

    try:
        item = asyncio.run(service.redact(item_id))
    except ContentNotFoundError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)

    print(f"✓ Item {item.id} deleted at {format_instant(item.deleted_at)}")


def _build_queue(settings: Settings, dry_run: bool) -> JobQueue:
    if dry_run or not settings.job_queue_url:
        return InMemoryJobQueue()
    return HttpJobQueue(
        settings.job_queue_url,
        token=settings.job_queue_token,
        timeout=settings.job_queue.timeout,
    )


async def _enqueue(item_id: int, settings: Settings, dry_run: bool) -> None:
    store = YamlContentStore(settings.content_dir)
    item = await store.find_by_id(item_id)
    if item is None:
        raise ContentNotFoundError(item_id)

    queue = _build_queue(settings, dry_run)
    enqueuer = DeferredEffectEnqueuer(queue)

    deleting = await enqueuer.enqueue_delete(item)
    publishing = await enqueuer.enqueue_schedule_publish(item)

    if not deleting and not publishing:
        print(f"• Item {item_id} has nothing to schedule")
        return

    if isinstance(queue, InMemoryJobQueue):
        print("⚠️  Dry run, nothing was sent to the job queue:")
        for job in queue.jobs:
            print(f"  • {job.kind.value} item {job.item_id} at {format_instant(job.fire_at)}")
    else:
        print(f"✓ Submitted jobs to {settings.job_queue_url}")


@cli.command()
def enqueue(
    item_id: int,
    config: Path = _config_option,
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not contact the job queue"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Submit the delete/publish jobs a stored item asks for."""
    _setup_logging(verbose)
    settings = get_settings(config)

    try:
        asyncio.run(_enqueue(item_id, settings, dry_run))
    except ContentNotFoundError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)


def app() -> None:
    """CLI entry point."""
    cli()


if __name__ == "__main__":
    app()
