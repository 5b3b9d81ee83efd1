"""
Custom exception classes for the meaning-first content layer.

These exceptions provide more specific error handling and better error messages
for the failure scenarios of the layer: schema violations, invariant violations
and configuration problems.
"""

from dataclasses import dataclass
from typing import List, Sequence

from fastapi import HTTPException, status


@dataclass(frozen=True)
class FieldViolation:
    """One violated field in a meaning payload."""

    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class MeaningSchemaError(ValueError):
    """Raised (or returned) when a meaning payload fails schema validation."""

    def __init__(self, violations: Sequence[FieldViolation]):
        self.violations: List[FieldViolation] = list(violations)
        summary = "; ".join(str(v) for v in self.violations)
        super().__init__(f"Invalid meaning payload: {summary}")

    @property
    def fields(self) -> List[str]:
        """Names of every violated field, in report order."""
        return [v.field for v in self.violations]

    def to_dict(self) -> List[dict]:
        return [{"field": v.field, "message": v.message} for v in self.violations]


class MeaningGuardError(RuntimeError):
    """Raised when a protected-table insert is missing a required meaning reference."""

    def __init__(self, table: str, column: str):
        self.table = table
        self.column = column
        super().__init__(f'Blocked insert into "{table}": {column} is required.')


class ConfigurationError(ValueError):
    """Raised when there's an error in configuration parsing or validation."""

    def __init__(self, message: str):
        super().__init__(f"Configuration error: {message}")


class MeaningObjectNotFoundError(HTTPException):
    """Raised when a requested meaning object does not exist."""

    def __init__(self, meaning_object_id: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"Meaning object with id {meaning_object_id} not found"
        )
