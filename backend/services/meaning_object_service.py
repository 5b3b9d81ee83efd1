"""
Meaning object store client.

Creates and updates canonical meaning records. Payloads are validated before
anything is sent to storage. Neither validation nor storage failures raise:
create() returns None and update() returns False, so the calling write path
can decide whether to abort its own transaction.
"""

import logging
from typing import Any, Optional

import crud
from domain.services.meaning_validation import validate_meaning
from domain.value_objects.enums import MeaningType
from infrastructure.database import models
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger("MeaningObjectService")


class MeaningObjectService:
    """Thin CRUD wrapper around meaning_objects with client-side validation."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def create(
        self,
        workspace_id: str,
        created_by: str,
        meaning_type: MeaningType | str,
        source_lang: str,
        meaning_json: Any,
    ) -> Optional[str]:
        """
        Validate and store a new meaning object.

        Args:
            workspace_id: Owning workspace
            created_by: Author id
            meaning_type: Content category (TASK, GOAL, ...)
            source_lang: Locale the content was authored in
            meaning_json: Untrusted meaning payload

        Returns:
            The new meaning object id, or None on failure
        """
        result = validate_meaning(meaning_json)
        if not result.ok:
            logger.error(f"Invalid meaning JSON: {result.error.to_dict()}")
            return None

        try:
            async with self._session_maker() as db:
                record = await crud.create_meaning_object(
                    db,
                    workspace_id=workspace_id,
                    created_by=created_by,
                    meaning_type=str(MeaningType(meaning_type)),
                    source_lang=source_lang,
                    meaning_json=result.meaning.to_json(),
                )
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Failed to create meaning object: {e}")
            return None

        logger.debug(f"Created meaning object {record.id} in workspace {workspace_id}")
        return record.id

    async def update(self, meaning_object_id: str, meaning_json: Any) -> bool:
        """
        Validate and replace the payload of an existing meaning object.

        Returns:
            True on success, False on validation/storage failure or unknown id
        """
        result = validate_meaning(meaning_json)
        if not result.ok:
            logger.error(f"Invalid meaning JSON for update: {result.error.to_dict()}")
            return False

        try:
            async with self._session_maker() as db:
                record = await crud.update_meaning_object(db, meaning_object_id, result.meaning.to_json())
        except SQLAlchemyError as e:
            logger.error(f"Failed to update meaning object: {e}")
            return False

        if record is None:
            logger.error(f"Failed to update meaning object: {meaning_object_id} not found")
            return False
        return True

    async def get(self, meaning_object_id: str) -> Optional[models.MeaningObject]:
        """Get a meaning object record, or None if missing or storage fails."""
        try:
            async with self._session_maker() as db:
                return await crud.get_meaning_object(db, meaning_object_id)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load meaning object {meaning_object_id}: {e}")
            return None
