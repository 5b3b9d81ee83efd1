"""
Domain value objects - immutable types and enums.
"""

from .enums import DEFAULT_INTENTS, CreatedFrom, MeaningType, MeaningVersion
from .protected_tables import (
    DEFAULT_PROTECTED_COLUMNS,
    MEANING_REFERENCE_COLUMN,
    ProtectedColumn,
    ProtectedTableConfig,
    load_protected_tables,
)

__all__ = [
    # enums.py
    "MeaningVersion",
    "MeaningType",
    "CreatedFrom",
    "DEFAULT_INTENTS",
    # protected_tables.py
    "MEANING_REFERENCE_COLUMN",
    "DEFAULT_PROTECTED_COLUMNS",
    "ProtectedColumn",
    "ProtectedTableConfig",
    "load_protected_tables",
]
