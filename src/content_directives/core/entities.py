"""Core domain entities."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class TimeUnit(str, Enum):
    """Calendar unit accepted by relative directives."""

    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class SortMode(str, Enum):
    """Default ordering for the comments of an item."""

    RECENT = "recent"
    TOP = "top"
    HOT = "hot"


class JobKind(str, Enum):
    """Name of a deferred job understood by the job queue."""

    DELETE = "deleteItem"
    PUBLISH = "postItem"


@dataclass
class ContentItem:
    """A piece of authored content as seen by the directive layer."""

    id: int
    created_at: datetime
    text: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    poll_cost: Optional[int] = None
    deleted_at: Optional[datetime] = None
    scheduled_at: Optional[datetime] = None
    pinned: bool = False
    bio: bool = False
    path: str = ""
    max_bid: Optional[int] = None

    def __post_init__(self) -> None:
        if not self.path:
            self.path = str(self.id)

    @property
    def is_job(self) -> bool:
        """Job listings are the only items that carry a bid amount."""
        return self.max_bid is not None


@dataclass
class Directive:
    """Result of resolving a directive in a piece of text."""

    text: Optional[str]
    timestamp: Optional[datetime] = None

    @property
    def found(self) -> bool:
        return self.timestamp is not None


@dataclass(frozen=True)
class DeferredJobRequest:
    """One-shot job to be run by the queue at ``fire_at``."""

    kind: JobKind
    item_id: int
    fire_at: datetime

    @property
    def payload(self) -> dict[str, Any]:
        return {"id": self.item_id}

    @property
    def start_after(self) -> float:
        """Fire instant as epoch seconds with fraction."""
        return self.fire_at.timestamp()
