"""Core interfaces for adapters."""

from abc import ABC, abstractmethod
from typing import Any, Optional

from content_directives.core.entities import ContentItem, JobKind


class ContentRepository(ABC):
    """Interface for reading and updating stored content."""

    @abstractmethod
    async def find_by_id(self, item_id: int) -> Optional[ContentItem]:
        """Return the item, or None if it does not exist."""
        pass

    @abstractmethod
    async def update(self, item_id: int, fields: dict[str, Any]) -> ContentItem:
        """Apply field changes and return the updated item."""
        pass


class JobQueue(ABC):
    """Interface for submitting deferred jobs."""

    @abstractmethod
    async def submit(self, kind: JobKind, payload: dict[str, Any], start_after: float) -> None:
        """Submit a job that must not run before ``start_after`` (epoch seconds)."""
        pass


class ItemPublisher(ABC):
    """Interface for publishing an item whose scheduled time has come."""

    @abstractmethod
    async def publish_scheduled(self, item_id: int) -> None:
        """Publish the scheduled item."""
        pass
