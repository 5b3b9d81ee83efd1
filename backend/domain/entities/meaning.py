"""
Canonical meaning object (schema v1).

A meaning object is the language-neutral representation of one piece of
user content. Content rows reference it by id; locale renderings are derived
from it and never stored on the row itself.
"""

from typing import Annotated, Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from domain.value_objects.enums import CreatedFrom, MeaningType

Confidence = Annotated[float, Field(strict=True, ge=0, le=1)]
NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]


class MeaningMetadata(BaseModel):
    """Provenance block of a meaning object."""

    model_config = ConfigDict(extra="ignore")

    created_from: Optional[CreatedFrom] = None
    confidence: Optional[Confidence] = None
    source: Optional[StrictStr] = None
    source_message_id: Optional[StrictStr] = None
    source_thread_id: Optional[StrictStr] = None


class MeaningJsonV1(BaseModel):
    """
    Meaning JSON, version v1.

    Unknown keys are dropped. Values are validated without coercion so the
    parsed object carries exactly what the author supplied.
    """

    model_config = ConfigDict(extra="ignore")

    version: Literal["v1"]
    type: MeaningType
    intent: NonEmptyStr
    subject: NonEmptyStr
    description: Optional[StrictStr] = None
    constraints: Optional[Dict[str, Any]] = None
    metadata: Optional[MeaningMetadata] = None

    def to_json(self) -> Dict[str, Any]:
        """Serialize to the JSON shape stored in meaning_objects.meaning_json."""
        return self.model_dump(mode="json", exclude_none=True)
