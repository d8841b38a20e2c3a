"""The mutable list of prioritization records held by the caller.

Scoring and export never touch module state; they take one of these (or its
``records``) as an explicit argument.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Iterator, Optional

from .models import Item

logger = logging.getLogger(__name__)

SEED_ITEMS: list[dict[str, Any]] = [
    {"title": "Dark mode support", "owner": "You", "reach": 200, "impact": 2, "confidence": 80, "effort": 2},
    {"title": "Global search bar", "owner": "You", "reach": 120, "impact": 2, "confidence": 85, "effort": 1},
]


def new_item_id() -> str:
    return uuid.uuid4().hex[:8]


class ItemCollection:
    """Insertion-ordered records, edited by id."""

    def __init__(self, records: Optional[list[dict[str, Any]]] = None):
        self._records: list[dict[str, Any]] = list(records) if records else []

    @classmethod
    def with_defaults(cls) -> ItemCollection:
        collection = cls()
        for seed in SEED_ITEMS:
            collection.add(**seed)
        return collection

    @property
    def records(self) -> list[dict[str, Any]]:
        """Shallow copy of the stored records, in storage order."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[dict[str, Any]]:
        return iter(list(self._records))

    def _ids(self) -> set:
        return {r.get("id") for r in self._records if isinstance(r, dict)}

    def _fresh_id(self) -> str:
        taken = self._ids()
        item_id = new_item_id()
        while item_id in taken:
            item_id = new_item_id()
        return item_id

    def get(self, item_id: str) -> Optional[dict[str, Any]]:
        for record in self._records:
            if isinstance(record, dict) and record.get("id") == item_id:
                return record
        return None

    def add(self, **fields: Any) -> dict[str, Any]:
        """Append a new item built from the defaults plus any given fields."""
        fields.pop("id", None)
        record = Item(id=self._fresh_id(), **fields).model_dump()
        self._records.append(record)
        logger.debug("Added item %s", record["id"])
        return record

    def update(self, item_id: str, **patch: Any) -> Optional[dict[str, Any]]:
        """Replace the given fields on one item. Unknown ids are ignored."""
        if "id" in patch:
            raise ValueError("An item's id cannot be changed")
        for idx, record in enumerate(self._records):
            if isinstance(record, dict) and record.get("id") == item_id:
                updated = {**record, **patch}
                self._records[idx] = updated
                return updated
        return None

    def remove(self, item_id: str) -> bool:
        before = len(self._records)
        self._records = [
            r for r in self._records if not (isinstance(r, dict) and r.get("id") == item_id)
        ]
        return len(self._records) != before

    def replace(self, records: list) -> None:
        """Swap in a whole new list, as-is."""
        self._records = list(records)
