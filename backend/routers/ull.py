"""Meaning object and projection routes."""

from typing import Optional

import schemas
from core.dependencies import get_meaning_service, get_projection_reader, get_translation_cache
from domain.exceptions import MeaningObjectNotFoundError
from domain.services.meaning_validation import validate_meaning
from domain.value_objects.enums import MeaningType
from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from infrastructure.cache import TranslationCache, content_key, meaning_key
from services.meaning_object_service import MeaningObjectService
from services.projection_reader import ProjectionReader

router = APIRouter()


def _validation_error(detail: str, errors: list) -> JSONResponse:
    body = schemas.MeaningValidationErrorResponse(detail=detail, errors=errors)
    return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content=body.model_dump())


@router.post("/meaning-objects", response_model=schemas.MeaningObjectCreated, status_code=status.HTTP_201_CREATED)
async def create_meaning_object(
    body: schemas.MeaningObjectCreate,
    service: MeaningObjectService = Depends(get_meaning_service),
):
    """Validate and store a new meaning object."""
    meaning_type = body.type.upper()
    if meaning_type not in MeaningType.__members__:
        return _validation_error("Invalid meaning type", [{"field": "type", "message": f"unknown type {body.type}"}])

    result = validate_meaning(body.meaning_json)
    if not result.ok:
        return _validation_error("Invalid meaning JSON", result.error.to_dict())
    if result.meaning.type.value != meaning_type:
        message = f"type {meaning_type} does not match meaning_json type {result.meaning.type}"
        return _validation_error("Meaning type mismatch", [{"field": "type", "message": message}])

    meaning_id = await service.create(
        workspace_id=body.workspace_id,
        created_by=body.created_by,
        meaning_type=meaning_type,
        source_lang=body.source_lang,
        meaning_json=result.meaning,
    )
    if meaning_id is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to create meaning object")
    return schemas.MeaningObjectCreated(id=meaning_id)


@router.put("/meaning-objects/{meaning_object_id}", response_model=schemas.MeaningObjectUpdated)
async def update_meaning_object(
    meaning_object_id: str,
    body: schemas.MeaningObjectUpdate,
    service: MeaningObjectService = Depends(get_meaning_service),
):
    """Replace the meaning payload of an existing meaning object."""
    result = validate_meaning(body.meaning_json)
    if not result.ok:
        return _validation_error("Invalid meaning JSON", result.error.to_dict())

    if await service.get(meaning_object_id) is None:
        raise MeaningObjectNotFoundError(meaning_object_id)

    if not await service.update(meaning_object_id, result.meaning):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to update meaning object")
    return schemas.MeaningObjectUpdated(updated=True)


@router.get("/meaning-objects/{meaning_object_id}", response_model=schemas.MeaningObject)
async def get_meaning_object(
    meaning_object_id: str,
    service: MeaningObjectService = Depends(get_meaning_service),
):
    """Get a meaning object by id."""
    record = await service.get(meaning_object_id)
    if record is None:
        raise MeaningObjectNotFoundError(meaning_object_id)
    return record


@router.get("/text", response_model=schemas.ProjectedText)
async def get_text(
    table: str,
    id: str,
    field: str,
    fallback: str,
    source_lang: str = "en",
    target_lang: Optional[str] = Query(default=None),
    reader: ProjectionReader = Depends(get_projection_reader),
):
    """Return the best available text for one content field without waiting on translation."""
    locale = target_lang or reader.target_locale
    text = reader.get_text(table, id, field, fallback, source_lang, target_locale=locale)
    pending = reader.is_pending(content_key(table, id, field, locale))
    return schemas.ProjectedText(text=text, locale=locale, pending=pending)


@router.get("/meaning-text/{meaning_object_id}", response_model=schemas.ProjectedText)
async def get_text_by_meaning(
    meaning_object_id: str,
    fallback: str,
    target_lang: Optional[str] = Query(default=None),
    reader: ProjectionReader = Depends(get_projection_reader),
):
    """Return the projection of a meaning object, or the fallback while it is fetched."""
    locale = target_lang or reader.target_locale
    text = reader.get_text_by_meaning(meaning_object_id, fallback, target_locale=locale)
    pending = reader.is_pending(meaning_key(meaning_object_id, locale))
    return schemas.ProjectedText(text=text, locale=locale, pending=pending)


@router.delete("/cache", status_code=status.HTTP_204_NO_CONTENT)
async def clear_cache(cache: TranslationCache = Depends(get_translation_cache)):
    """Reset the translation cache."""
    await cache.clear()


@router.get("/cache/stats")
async def cache_stats(cache: TranslationCache = Depends(get_translation_cache)):
    """Get translation cache statistics."""
    return cache.get_stats()
