"""
Services layer for business logic.

This package contains service classes that handle business logic
and coordinate between different layers of the application.
"""

from .meaning_object_service import MeaningObjectService
from .projection_reader import ProjectionReader, ProjectionRequest

__all__ = [
    "MeaningObjectService",
    "ProjectionReader",
    "ProjectionRequest",
]
