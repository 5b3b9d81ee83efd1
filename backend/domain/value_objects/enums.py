"""
Domain enums for type-safe constants.
"""

from enum import Enum


class MeaningVersion(str, Enum):
    """Supported meaning schema versions."""

    V1 = "v1"

    def __str__(self) -> str:
        return self.value


class MeaningType(str, Enum):
    """Closed set of content categories a meaning object can describe."""

    TASK = "TASK"
    GOAL = "GOAL"
    IDEA = "IDEA"
    BRAIN_MESSAGE = "BRAIN_MESSAGE"
    PLAN = "PLAN"
    MESSAGE = "MESSAGE"

    def __str__(self) -> str:
        return self.value


class CreatedFrom(str, Enum):
    """Provenance of a meaning object."""

    USER = "user"  # Authored directly by a person
    BRAIN = "brain"  # Derived by the automated assistant

    def __str__(self) -> str:
        return self.value


# Default author intent per content type, used when building a meaning from plain text
DEFAULT_INTENTS = {
    MeaningType.TASK: "create",
    MeaningType.GOAL: "plan",
    MeaningType.PLAN: "plan",
    MeaningType.IDEA: "discuss",
    MeaningType.MESSAGE: "communicate",
}
