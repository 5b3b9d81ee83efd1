"""
Domain layer for meaning-first content.

Structure:
- entities/: Core data models (MeaningJsonV1, MeaningMetadata)
- value_objects/: Immutable types and enums (MeaningType, protected tables, etc.)
- services/: Pure domain logic (meaning validation, insert guard)
"""

from .entities import MeaningJsonV1, MeaningMetadata
from .exceptions import (
    ConfigurationError,
    FieldViolation,
    MeaningGuardError,
    MeaningObjectNotFoundError,
    MeaningSchemaError,
)
from .services import (
    MeaningValidationResult,
    attach_insert_guard,
    build_meaning_from_text,
    get_meaning_version,
    guard_insert,
    validate_meaning,
)
from .value_objects import (
    DEFAULT_INTENTS,
    DEFAULT_PROTECTED_COLUMNS,
    MEANING_REFERENCE_COLUMN,
    CreatedFrom,
    MeaningType,
    MeaningVersion,
    ProtectedColumn,
    ProtectedTableConfig,
    load_protected_tables,
)

__all__ = [
    # Entities
    "MeaningJsonV1",
    "MeaningMetadata",
    # Exceptions
    "ConfigurationError",
    "FieldViolation",
    "MeaningGuardError",
    "MeaningObjectNotFoundError",
    "MeaningSchemaError",
    # Services
    "MeaningValidationResult",
    "validate_meaning",
    "get_meaning_version",
    "build_meaning_from_text",
    "guard_insert",
    "attach_insert_guard",
    # Value objects
    "MeaningVersion",
    "MeaningType",
    "CreatedFrom",
    "DEFAULT_INTENTS",
    "MEANING_REFERENCE_COLUMN",
    "DEFAULT_PROTECTED_COLUMNS",
    "ProtectedColumn",
    "ProtectedTableConfig",
    "load_protected_tables",
]
