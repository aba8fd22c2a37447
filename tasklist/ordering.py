"""Ordering and filtering over a task collection.

Sorting and filtering are independent transforms. `search` composes them in
the order the list view uses: filter first, then sort.
"""

from collections.abc import Iterable

from tasklist.models import Task


def _sort_key(task: Task) -> tuple[bool, int]:
    return (task.completed, task.rank)


def sort_by_priority(tasks: Iterable[Task]) -> list[Task]:
    """Return incomplete tasks before completed ones, each ordered high to low.

    `sorted` is stable, so tasks with equal (completed, priority) keep their
    relative order.
    """
    return sorted(tasks, key=_sort_key)


def filter_by_title(tasks: Iterable[Task], query: str) -> list[Task]:
    """Return tasks whose title contains `query`, ignoring case.

    An empty query returns every task. The result keeps the input order.
    """
    needle = query.strip().casefold()
    if not needle:
        return list(tasks)
    return [task for task in tasks if needle in task.title.casefold()]


def search(tasks: Iterable[Task], query: str) -> list[Task]:
    """Filter by title, then sort the matches for display."""
    return sort_by_priority(filter_by_title(tasks, query))
