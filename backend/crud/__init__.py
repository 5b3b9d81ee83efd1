"""
CRUD operations module.

This module provides database operations organized by domain aggregate.
All CRUD functions are exported at the package level.
"""

# Meaning object operations
from .meaning_objects import (
    create_meaning_object,
    get_meaning_object,
    update_meaning_object,
)

__all__ = [
    "create_meaning_object",
    "get_meaning_object",
    "update_meaning_object",
]
