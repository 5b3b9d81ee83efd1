"""
Domain entities - core data models for business logic.
"""

from .meaning import MeaningJsonV1, MeaningMetadata

__all__ = [
    # meaning.py
    "MeaningJsonV1",
    "MeaningMetadata",
]
