"""
CRUD operations for MeaningObject records.
"""

import logging
from typing import Any, Dict, Optional

from infrastructure.database import models, retry_on_db_lock, serialized_write
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger("CRUD")


@retry_on_db_lock(max_retries=5, initial_delay=0.1, backoff_factor=2)
async def create_meaning_object(
    db: AsyncSession,
    workspace_id: str,
    created_by: str,
    meaning_type: str,
    source_lang: str,
    meaning_json: Dict[str, Any],
) -> models.MeaningObject:
    """Insert a meaning object and return it with its generated id."""
    db_meaning = models.MeaningObject(
        workspace_id=workspace_id,
        created_by=created_by,
        type=meaning_type.lower(),
        source_lang=source_lang,
        meaning_json=meaning_json,
    )
    db.add(db_meaning)
    async with serialized_write(db):
        await db.commit()
    await db.refresh(db_meaning)
    return db_meaning


async def get_meaning_object(db: AsyncSession, meaning_object_id: str) -> Optional[models.MeaningObject]:
    """Get a meaning object by id."""
    return await db.get(models.MeaningObject, meaning_object_id)


@retry_on_db_lock(max_retries=5, initial_delay=0.1, backoff_factor=2)
async def update_meaning_object(
    db: AsyncSession, meaning_object_id: str, meaning_json: Dict[str, Any]
) -> Optional[models.MeaningObject]:
    """
    Replace the whole meaning payload of a meaning object.

    Returns:
        The updated record, or None if it doesn't exist
    """
    db_meaning = await db.get(models.MeaningObject, meaning_object_id)
    if db_meaning is None:
        return None

    db_meaning.meaning_json = meaning_json
    async with serialized_write(db):
        await db.commit()
    await db.refresh(db_meaning)
    return db_meaning
