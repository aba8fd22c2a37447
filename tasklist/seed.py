"""Initial task collection used when storage holds nothing."""

from tasklist.models import Priority, Task, TaskDraft

SEED_TASKS: tuple[tuple[str, str, Priority, bool], ...] = (
    ("Task 1", "This is task 1", Priority.HIGH, False),
    ("Task 2", "This is task 2", Priority.MEDIUM, False),
    ("Task 3", "Complete the documentation", Priority.LOW, True),
    ("Task 4", "Fix bugs in the application", Priority.HIGH, False),
    ("Task 5", "Prepare presentation for client meeting", Priority.MEDIUM, True),
    ("Task 6", "Implement the new feature", Priority.HIGH, False),
    ("Task 7", "Update the library dependencies", Priority.LOW, False),
    ("Task 8", "Conduct a code review for pull requests", Priority.MEDIUM, False),
    ("Task 9", "Design new UI components", Priority.HIGH, True),
    ("Task 10", "Research new technologies for the project", Priority.MEDIUM, False),
)


def seed_tasks() -> list[Task]:
    """Return the ten example tasks, each with a freshly generated id."""
    return [
        Task.create(
            TaskDraft(title=title, description=description, priority=priority),
            completed=completed,
        )
        for title, description, priority, completed in SEED_TASKS
    ]
