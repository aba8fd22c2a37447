"""Pydantic models for the task list.

`Task` is immutable; every change produces a new value with `model_copy`.
"""

from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field


class Priority(StrEnum):
    """Task priority as stored and submitted by the form."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


PRIORITY_RANK: dict[Priority, int] = {
    Priority.HIGH: 1,
    Priority.MEDIUM: 2,
    Priority.LOW: 3,
}


def title_key(title: str) -> str:
    """Comparison key for titles: trimmed and case-folded."""
    return title.strip().casefold()


class TaskDraft(BaseModel):
    """Form payload for adding or editing a task.

    Emptiness is not enforced here; the mutation operations reject an empty
    title themselves so that callers cannot bypass the check.
    """

    title: str = Field(default="", description="The task title")
    description: str = Field(default="", description="Free-text description")
    priority: Priority = Field(default=Priority.LOW, description="Task priority")


class Task(BaseModel):
    """A task item in the task list."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(..., description="Unique identifier for the task")
    title: str = Field(..., description="The task title")
    description: str = Field(default="", description="Free-text description")
    priority: Priority = Field(default=Priority.LOW, description="Task priority")
    completed: bool = Field(default=False, description="Whether the task has been completed")

    @classmethod
    def create(
        cls,
        draft: TaskDraft,
        id: UUID | None = None,
        completed: bool = False,
    ) -> "Task":
        """Build a task from a draft, assigning a fresh id unless one is given."""
        return cls(
            id=id if id is not None else uuid4(),
            title=draft.title.strip(),
            description=draft.description,
            priority=draft.priority,
            completed=completed,
        )

    @property
    def rank(self) -> int:
        return PRIORITY_RANK[self.priority]


def is_valid(item: Task | TaskDraft) -> bool:
    """Return True when both title and description are non-blank."""
    return bool(item.title.strip()) and bool(item.description.strip())


class HealthResponse(BaseModel):
    """Response from the health check endpoint."""

    status: str = "healthy"
    version: str = "1.0.0"
