"""Default comment ordering for an item."""

from datetime import datetime, timezone
from typing import Optional

from content_directives.core.entities import ContentItem, SortMode
from content_directives.core.time_math import as_utc, date_pivot

DEFAULT_OLD_ITEM_DAYS = 3


def choose_sort_mode(
    pinned: bool,
    bio: bool,
    created_at: datetime,
    now: Optional[datetime] = None,
    old_item_days: int = DEFAULT_OLD_ITEM_DAYS,
) -> SortMode:
    """Pick the default comment sort.

    Pinned items list newest first. Old items that aren't bios rank by
    score, since hot ranking decays to nothing on stale threads. Everything
    else sorts by hot.
    """
    if pinned:
        return SortMode.RECENT

    now = as_utc(now) if now is not None else datetime.now(timezone.utc)
    if not bio and as_utc(created_at) < date_pivot(now, days=-old_item_days):
        return SortMode.TOP

    return SortMode.HOT


def default_sort_for(
    item: ContentItem,
    now: Optional[datetime] = None,
    old_item_days: int = DEFAULT_OLD_ITEM_DAYS,
) -> SortMode:
    """Shortcut for ``choose_sort_mode`` on a stored item."""
    return choose_sort_mode(item.pinned, item.bio, item.created_at, now, old_item_days)


def is_job(item: ContentItem) -> bool:
    """Job listings are recognized by their bid amount."""
    return item.is_job
