"""Content store backed by one YAML file per item."""

import logging
from dataclasses import asdict, fields as dataclass_fields
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

import yaml

from content_directives.core.entities import ContentItem
from content_directives.core.exceptions import ContentNotFoundError, ContentStoreError
from content_directives.core.interfaces import ContentRepository

logger = logging.getLogger(__name__)

_DATETIME_FIELDS = ("created_at", "deleted_at", "scheduled_at")
_ITEM_FIELDS = {f.name for f in dataclass_fields(ContentItem)}
# Frozen once an item is deleted
_REDACTED_FIELDS = ("deleted_at", "text", "title", "url", "poll_cost")


class YamlContentStore(ContentRepository):
    """Store content items as individual YAML artifacts."""

    def __init__(self, storage_dir: Path) -> None:
        self.storage_dir = storage_dir
        self._ensure_structure()

    def _ensure_structure(self) -> None:
        if not self.storage_dir.exists():
            self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _get_item_path(self, item_id: int) -> Path:
        return self.storage_dir / f"{int(item_id)}.yaml"

    async def find_by_id(self, item_id: int) -> Optional[ContentItem]:
        """Load an item, or return None if it was never stored."""
        item_path = self._get_item_path(item_id)
        if not item_path.exists():
            return None

        try:
            with open(item_path, "r", encoding="utf-8") as f:
                record = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ContentStoreError(f"Could not read item {item_id}: {e}") from e

        return self._from_record(record)

    async def update(self, item_id: int, fields: dict[str, Any]) -> ContentItem:
        """Apply field changes to a stored item.

        Raises:
            ContentNotFoundError: if the item is not stored
            ContentStoreError: on unknown fields, on changes that would undo
                a deletion, or on I/O failure
        """
        unknown = set(fields) - _ITEM_FIELDS
        if unknown:
            raise ContentStoreError(f"Unknown item fields: {', '.join(sorted(unknown))}")

        item = await self.find_by_id(item_id)
        if item is None:
            raise ContentNotFoundError(int(item_id))

        if item.deleted_at is not None:
            reverted = sorted(
                key for key in _REDACTED_FIELDS
                if key in fields and fields[key] != getattr(item, key)
            )
            if reverted:
                raise ContentStoreError(
                    f"Item {item_id} is deleted; cannot change {', '.join(reverted)}"
                )

        for key, value in fields.items():
            setattr(item, key, value)

        await self.save(item)
        return item

    async def save(self, item: ContentItem) -> None:
        """Write the whole item, replacing any previous version."""
        item_path = self._get_item_path(item.id)
        try:
            with open(item_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    self._to_record(item), f, allow_unicode=True, default_flow_style=False, sort_keys=False
                )
        except (OSError, yaml.YAMLError) as e:
            raise ContentStoreError(f"Could not write item {item.id}: {e}") from e

        logger.debug("Saved item %s to %s", item.id, item_path)

    @staticmethod
    def _to_record(item: ContentItem) -> dict[str, Any]:
        record = asdict(item)
        for key in _DATETIME_FIELDS:
            if record[key] is not None:
                record[key] = record[key].isoformat()
        return record

    @staticmethod
    def _from_record(record: dict[str, Any]) -> ContentItem:
        data = {key: value for key, value in record.items() if key in _ITEM_FIELDS}
        for key in _DATETIME_FIELDS:
            value = data.get(key)
            if isinstance(value, str):
                data[key] = datetime.fromisoformat(value)
        return ContentItem(**data)
