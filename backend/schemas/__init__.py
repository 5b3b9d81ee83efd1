"""
Pydantic schemas for API request/response models.

This package organizes schemas by resource type:
- meaning.py: Meaning object and projection schemas
"""

from schemas.meaning import (
    FieldViolationOut,
    MeaningObject,
    MeaningObjectCreate,
    MeaningObjectCreated,
    MeaningObjectUpdate,
    MeaningObjectUpdated,
    MeaningValidationErrorResponse,
    ProjectedText,
)

__all__ = [
    "FieldViolationOut",
    "MeaningObject",
    "MeaningObjectCreate",
    "MeaningObjectCreated",
    "MeaningObjectUpdate",
    "MeaningObjectUpdated",
    "MeaningValidationErrorResponse",
    "ProjectedText",
]
