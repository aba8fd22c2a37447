"""Error taxonomy for task list operations.

Every error is recoverable: the HTTP layer turns them into JSON responses and
the session keeps running. Messages are the ones shown to the user.
"""

from uuid import UUID


class TaskListError(Exception):
    """Base class for all task list errors."""

    message = "Task list error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class ValidationError(TaskListError):
    """A required field is empty."""

    message = "Task title is required."


class DuplicateTitleError(TaskListError):
    """Another task already uses the same title (case-insensitive)."""

    message = "Task with this title already exists."

    def __init__(self, title: str) -> None:
        super().__init__()
        self.title = title


class NotFoundError(TaskListError):
    """An update targets an id that is not in the collection."""

    message = "Task not found"

    def __init__(self, task_id: UUID) -> None:
        super().__init__()
        self.task_id = task_id


class PersistenceError(TaskListError):
    """Durable storage could not be read or written."""

    message = "Could not persist tasks."
