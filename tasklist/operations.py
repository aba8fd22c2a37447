"""Mutation operations over a task collection.

Each function takes the current collection and returns a new sorted one. The
input is never modified, so a failed operation leaves the caller's collection
exactly as it was.
"""

from collections.abc import Sequence
from uuid import UUID, uuid4

from tasklist.errors import DuplicateTitleError, NotFoundError, ValidationError
from tasklist.models import Task, TaskDraft, title_key
from tasklist.ordering import sort_by_priority


def _check_title(tasks: Sequence[Task], draft: TaskDraft, exclude_id: UUID | None = None) -> None:
    """Raise if the draft title is blank or already used by another task."""
    key = title_key(draft.title)
    if not key:
        raise ValidationError()
    for task in tasks:
        if task.id != exclude_id and title_key(task.title) == key:
            raise DuplicateTitleError(draft.title.strip())


def _new_id(tasks: Sequence[Task]) -> UUID:
    taken = {task.id for task in tasks}
    task_id = uuid4()
    while task_id in taken:
        task_id = uuid4()
    return task_id


def add(tasks: Sequence[Task], draft: TaskDraft) -> list[Task]:
    """Append a new incomplete task built from `draft`.

    Raises:
        ValidationError: the title is empty or whitespace only.
        DuplicateTitleError: another task has the same title, ignoring case.
    """
    _check_title(tasks, draft)
    task = Task.create(draft, id=_new_id(tasks))
    return sort_by_priority([*tasks, task])


def update(tasks: Sequence[Task], task_id: UUID, draft: TaskDraft) -> list[Task]:
    """Replace title, description and priority of the task with `task_id`.

    The id and completion flag are preserved. The task itself is excluded
    from the duplicate-title check.

    Raises:
        NotFoundError: no task has `task_id`.
        ValidationError: the title is empty or whitespace only.
        DuplicateTitleError: another task has the same title, ignoring case.
    """
    if not any(task.id == task_id for task in tasks):
        raise NotFoundError(task_id)
    _check_title(tasks, draft, exclude_id=task_id)

    updated: list[Task] = []
    for task in tasks:
        if task.id == task_id:
            task = task.model_copy(
                update={
                    "title": draft.title.strip(),
                    "description": draft.description,
                    "priority": draft.priority,
                }
            )
        updated.append(task)
    return sort_by_priority(updated)


def remove(tasks: Sequence[Task], task_id: UUID) -> list[Task]:
    """Drop the task with `task_id`. Missing ids are ignored."""
    return sort_by_priority(task for task in tasks if task.id != task_id)


def toggle_completion(tasks: Sequence[Task], task_id: UUID) -> list[Task]:
    """Flip `completed` on the task with `task_id`. Missing ids are ignored."""
    return sort_by_priority(
        task.model_copy(update={"completed": not task.completed}) if task.id == task_id else task
        for task in tasks
    )
