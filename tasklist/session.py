"""The task list session: sole owner of the in-memory collection.

The presentation layer calls into the session; the session runs the pure
mutation operations, swaps in the result and then persists it through
`on_change`.
"""

import threading
from collections.abc import Awaitable, Callable
from uuid import UUID

from tasklist import operations
from tasklist.errors import PersistenceError
from tasklist.logging_setup import get_logger
from tasklist.models import Task, TaskDraft
from tasklist.ordering import search, sort_by_priority
from tasklist.persistence import TaskPersistence
from tasklist.seed import seed_tasks

logger = get_logger(__name__)

TASK_ADDED = "Task added successfully."
TASK_UPDATED = "Task updated successfully."
TASK_DELETED = "Task deleted successfully."

ConfirmDelete = Callable[[Task], Awaitable[bool]]
ErrorHandler = Callable[[PersistenceError], None]


class TaskSession:
    """Holds the current collection and applies user intents to it."""

    def __init__(
        self,
        persistence: TaskPersistence,
        seed: Callable[[], list[Task]] = seed_tasks,
        on_error: ErrorHandler | None = None,
    ) -> None:
        self.persistence = persistence
        self._seed = seed
        self._on_error = on_error
        self._tasks: list[Task] = []
        self._lock = threading.RLock()
        self.last_error: PersistenceError | None = None

    @property
    def tasks(self) -> list[Task]:
        """A copy of the current collection."""
        return list(self._tasks)

    def get(self, task_id: UUID) -> Task | None:
        return next((task for task in self._tasks if task.id == task_id), None)

    def on_init(self) -> list[Task]:
        """Load the stored collection, or seed and save one when none exists."""
        with self._lock:
            stored = self.persistence.load()
            if stored is None:
                self._tasks = sort_by_priority(self._seed())
                logger.info("session_seeded", count=len(self._tasks))
                self.on_change(self._tasks)
            else:
                self._tasks = stored
                logger.info("session_loaded", count=len(self._tasks))
            return self.tasks

    def on_submit(self, draft: TaskDraft, editing_id: UUID | None = None) -> list[Task]:
        """Add a task, or update `editing_id` when editing an existing one."""
        with self._lock:
            if editing_id is None:
                tasks = operations.add(self._tasks, draft)
                logger.info("task_added", title=draft.title.strip(), notice=TASK_ADDED)
            else:
                tasks = operations.update(self._tasks, editing_id, draft)
                logger.info("task_updated", task_id=str(editing_id), notice=TASK_UPDATED)
            return self._commit(tasks)

    def on_delete(self, task_id: UUID) -> list[Task]:
        """Remove a task. Confirmation must already have been given."""
        with self._lock:
            logger.info("task_removed", task_id=str(task_id), notice=TASK_DELETED)
            return self._commit(operations.remove(self._tasks, task_id))

    async def request_delete(self, task_id: UUID, confirm: ConfirmDelete) -> list[Task]:
        """Ask `confirm` about the task and remove it only if approved.

        The collection is not touched while the prompt is pending, and a
        declined prompt leaves it unchanged.
        """
        task = self.get(task_id)
        if task is None:
            return self.tasks
        if not await confirm(task):
            logger.info("task_remove_declined", task_id=str(task_id))
            return self.tasks
        return self.on_delete(task_id)

    def on_toggle(self, task_id: UUID) -> list[Task]:
        """Flip completion of a task."""
        with self._lock:
            logger.info("task_toggled", task_id=str(task_id))
            return self._commit(operations.toggle_completion(self._tasks, task_id))

    def on_search(self, query: str) -> list[Task]:
        """Read-only view: tasks matching `query`, in display order."""
        return search(self._tasks, query)

    def on_change(self, tasks: list[Task]) -> None:
        """Persist the collection. Failures are reported, never raised."""
        try:
            self.persistence.save(tasks)
        except PersistenceError as exc:
            self.last_error = exc
            logger.warning("tasks_not_persisted", error=exc.message)
            if self._on_error is not None:
                self._on_error(exc)
        else:
            self.last_error = None

    def _commit(self, tasks: list[Task]) -> list[Task]:
        self._tasks = tasks
        self.on_change(tasks)
        return self.tasks
