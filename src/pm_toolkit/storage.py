"""Persistence for the prioritization list.

The whole list lives under one key and is read once at startup. Every
mutation overwrites it in full; there is no partial write or merge. A
missing or unreadable value falls back to the seed list.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime

from sqlalchemy import select

from .core.collection import ItemCollection
from .db import get_session_factory
from .sqlmodels import KVEntry

logger = logging.getLogger(__name__)

ITEMS_KEY = "pm-toolkit-items"


async def load_items() -> ItemCollection:
    """Read the stored list, or the seed list when nothing usable is stored."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(select(KVEntry).where(KVEntry.key == ITEMS_KEY))
        row = result.scalar_one_or_none()

    if row is None:
        logger.info("No stored items — starting from the seed list")
        return ItemCollection.with_defaults()

    try:
        data = json.loads(row.value)
    except ValueError as exc:
        logger.warning("Stored items are not valid JSON (%s) — using the seed list", exc)
        return ItemCollection.with_defaults()

    if not isinstance(data, list):
        logger.warning("Stored items are not a list — using the seed list")
        return ItemCollection.with_defaults()

    logger.info("Loaded %d stored items", len(data))
    return ItemCollection(data)


async def save_items(collection: ItemCollection) -> None:
    """Overwrite the stored list with the collection's current records."""
    payload = json.dumps(collection.records, ensure_ascii=False)
    now = datetime.utcnow()

    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(select(KVEntry).where(KVEntry.key == ITEMS_KEY))
        row = result.scalar_one_or_none()
        if row:
            row.value = payload
            row.updated_at = now
        else:
            session.add(KVEntry(key=ITEMS_KEY, value=payload, updated_at=now))
        await session.commit()

    logger.debug("Saved %d items", len(collection))
