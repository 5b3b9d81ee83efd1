"""
Domain services - pure domain logic (stateless, no I/O).
"""

from .insert_guard import attach_insert_guard, guard_insert
from .meaning_validation import (
    MeaningValidationResult,
    build_meaning_from_text,
    get_meaning_version,
    validate_meaning,
)

__all__ = [
    "MeaningValidationResult",
    "validate_meaning",
    "get_meaning_version",
    "build_meaning_from_text",
    "guard_insert",
    "attach_insert_guard",
]
