"""Meaning object and projection schemas."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class MeaningObjectCreate(BaseModel):
    workspace_id: str
    created_by: str
    type: str
    source_lang: str = "en"
    # Validated by the meaning validator, not here, so errors list every field
    meaning_json: Any


class MeaningObjectUpdate(BaseModel):
    meaning_json: Any


class MeaningObjectCreated(BaseModel):
    id: str


class MeaningObjectUpdated(BaseModel):
    updated: bool


class MeaningObject(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    workspace_id: str
    created_by: str
    type: str
    source_lang: str
    meaning_json: Dict[str, Any]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FieldViolationOut(BaseModel):
    field: str
    message: str


class MeaningValidationErrorResponse(BaseModel):
    detail: str
    errors: List[FieldViolationOut]


class ProjectedText(BaseModel):
    text: str
    locale: str
    pending: bool = False
