"""
Meaning payload validation.

Payloads reaching this module are untrusted: they come from request bodies,
assistant output or stale rows. validate_meaning() never raises for bad input;
it returns a result carrying either the parsed meaning object or a
MeaningSchemaError that lists every violated field.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from domain.entities.meaning import MeaningJsonV1
from domain.exceptions import FieldViolation, MeaningSchemaError
from domain.value_objects.enums import DEFAULT_INTENTS, CreatedFrom, MeaningType, MeaningVersion

logger = logging.getLogger("MeaningValidator")

# Field order used when reporting violations
_FIELD_ORDER = ("version", "type", "intent", "subject", "description", "constraints", "metadata")


@dataclass(frozen=True)
class MeaningValidationResult:
    """Outcome of validate_meaning()."""

    meaning: Optional[MeaningJsonV1] = None
    error: Optional[MeaningSchemaError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> MeaningJsonV1:
        """Return the meaning object or raise the schema error."""
        if self.error is not None:
            raise self.error
        return self.meaning


def _location(loc: tuple) -> str:
    if not loc:
        return "payload"
    return ".".join(str(part) for part in loc)


def _sort_key(violation: FieldViolation) -> int:
    root = violation.field.split(".", 1)[0]
    return _FIELD_ORDER.index(root) if root in _FIELD_ORDER else len(_FIELD_ORDER)


def _violations_from(exc: ValidationError) -> list[FieldViolation]:
    violations = [FieldViolation(field=_location(err["loc"]), message=err["msg"]) for err in exc.errors()]
    return sorted(violations, key=_sort_key)


def get_meaning_version(payload: Any) -> str:
    """
    Detect the schema version of a meaning payload.

    Returns:
        "v1" for supported payloads, "unknown" for anything else
    """
    if isinstance(payload, dict) and payload.get("version") == MeaningVersion.V1.value:
        return MeaningVersion.V1.value
    return "unknown"


def validate_meaning(payload: Any) -> MeaningValidationResult:
    """
    Validate an untrusted meaning payload against the v1 contract.

    Checks, in report order: version, type, intent, subject, then the optional
    description/constraints/metadata shapes. All violations are collected.

    Args:
        payload: Any object (normally a dict decoded from JSON)

    Returns:
        MeaningValidationResult with either `meaning` or `error` set
    """
    if isinstance(payload, MeaningJsonV1):
        return MeaningValidationResult(meaning=payload)

    if not isinstance(payload, dict):
        error = MeaningSchemaError(
            [FieldViolation(field="payload", message=f"expected an object, got {type(payload).__name__}")]
        )
        return MeaningValidationResult(error=error)

    try:
        meaning = MeaningJsonV1.model_validate(payload)
    except ValidationError as e:
        return MeaningValidationResult(error=MeaningSchemaError(_violations_from(e)))

    return MeaningValidationResult(meaning=meaning)


def build_meaning_from_text(
    meaning_type: MeaningType | str,
    title: str,
    description: Optional[str] = None,
    created_from: CreatedFrom | str = CreatedFrom.USER,
) -> MeaningJsonV1:
    """
    Build a v1 meaning object from plain authored text.

    The intent is derived from the content type (tasks are created, goals and
    plans are planned, messages communicate, everything else is discussed).

    Raises:
        MeaningSchemaError: If the resulting payload is invalid (e.g. empty title)
    """
    meaning_type = MeaningType(meaning_type)
    payload: dict[str, Any] = {
        "version": MeaningVersion.V1.value,
        "type": meaning_type.value,
        "intent": DEFAULT_INTENTS.get(meaning_type, "discuss"),
        "subject": title,
        "metadata": {"created_from": CreatedFrom(created_from).value},
    }
    if description is not None:
        payload["description"] = description

    return validate_meaning(payload).unwrap()
