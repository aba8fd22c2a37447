"""Tests for the task session contract."""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest

from tasklist.errors import DuplicateTitleError, NotFoundError, PersistenceError
from tasklist.models import Priority, Task, TaskDraft
from tasklist.persistence import MemoryStorage, TaskPersistence
from tasklist.seed import SEED_TASKS, seed_tasks
from tasklist.session import TaskSession


def _stored_titles(storage: MemoryStorage) -> list[str]:
    return [t.title for t in TaskPersistence(storage).load()]


def test_seed_has_ten_tasks_with_fresh_ids() -> None:
    """Test the seed spans all priorities and both states with new ids per call."""
    first, second = seed_tasks(), seed_tasks()

    assert len(first) == len(SEED_TASKS) == 10
    assert {t.priority for t in first} == set(Priority)
    assert {t.completed for t in first} == {True, False}
    assert len({t.id for t in first}) == 10
    assert not {t.id for t in first} & {t.id for t in second}


def test_init_on_corrupt_storage_seeds() -> None:
    """Test that corrupt storage falls back to a freshly seeded collection."""
    storage = MemoryStorage({"tasks": "{{{"})
    session = TaskSession(TaskPersistence(storage))

    tasks = session.on_init()

    assert len(tasks) == 10
    assert tasks == TaskSession(TaskPersistence(storage)).on_init()
    assert all(not t.completed for t in tasks[:7])
    assert all(t.completed for t in tasks[7:])


def test_init_seeds_differ_between_sessions() -> None:
    """Test that two seeded sessions never share ids."""
    a = TaskSession(TaskPersistence(MemoryStorage())).on_init()
    b = TaskSession(TaskPersistence(MemoryStorage())).on_init()
    assert not {t.id for t in a} & {t.id for t in b}


def test_submit_routes_to_add_and_update(session: TaskSession, storage: MemoryStorage) -> None:
    """Test that on_submit adds without an id and updates with one."""
    tasks = session.on_submit(TaskDraft(title="Draft", description="v1"))
    task_id = tasks[0].id

    tasks = session.on_submit(TaskDraft(title="Final", description="v2"), editing_id=task_id)

    assert [(t.id, t.title) for t in tasks] == [(task_id, "Final")]
    assert _stored_titles(storage) == ["Final"]


def test_failed_submit_leaves_state(session: TaskSession, storage: MemoryStorage) -> None:
    """Test that rejected intents change neither memory nor storage."""
    session.on_submit(TaskDraft(title="Only"))
    before = session.tasks

    with pytest.raises(DuplicateTitleError):
        session.on_submit(TaskDraft(title="ONLY"))
    with pytest.raises(NotFoundError):
        session.on_submit(TaskDraft(title="Other"), editing_id=Task.create(TaskDraft(title="x")).id)

    assert session.tasks == before
    assert _stored_titles(storage) == ["Only"]


def test_toggle_and_delete_persist(session: TaskSession, storage: MemoryStorage) -> None:
    """Test that every mutation is written through."""
    session.on_submit(TaskDraft(title="A", priority=Priority.HIGH))
    tasks = session.on_submit(TaskDraft(title="B"))
    a_id = next(t.id for t in tasks if t.title == "A")

    session.on_toggle(a_id)
    assert _stored_titles(storage) == ["B", "A"]

    session.on_delete(a_id)
    assert _stored_titles(storage) == ["B"]


def test_search_does_not_mutate(session: TaskSession) -> None:
    """Test that searching is a read-only view."""
    session.on_submit(TaskDraft(title="apple"))
    session.on_submit(TaskDraft(title="banana"))

    assert [t.title for t in session.on_search("APP")] == ["apple"]
    assert len(session.tasks) == 2


def test_request_delete_respects_decision(session: TaskSession) -> None:
    """Test the confirm-then-remove protocol."""
    task_id = session.on_submit(TaskDraft(title="Maybe"))[0].id
    asked: list[Task] = []

    async def decline(task: Task) -> bool:
        asked.append(task)
        return False

    async def accept(task: Task) -> bool:
        return True

    assert len(asyncio.run(session.request_delete(task_id, decline))) == 1
    assert asked[0].title == "Maybe"
    assert asyncio.run(session.request_delete(task_id, accept)) == []


def test_save_failure_keeps_memory_and_reports() -> None:
    """Test that a failing store does not lose in-memory changes."""
    reported: list[PersistenceError] = []

    class FullStorage(MemoryStorage):
        def set_item(self, key: str, value: str) -> None:
            raise OSError("quota exceeded")

    session = TaskSession(TaskPersistence(FullStorage({"tasks": "[]"})), on_error=reported.append)
    session.on_init()

    tasks = session.on_submit(TaskDraft(title="Unsaved"))

    assert [t.title for t in tasks] == ["Unsaved"]
    assert session.last_error is reported[0]
    assert "quota exceeded" in reported[0].message


def test_concurrent_submits_are_all_kept(session: TaskSession, storage: MemoryStorage) -> None:
    """Test that submits from worker threads do not overwrite each other."""
    titles = [f"Task {i}" for i in range(40)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda t: session.on_submit(TaskDraft(title=t)), titles))

    assert sorted(t.title for t in session.tasks) == sorted(titles)
    assert sorted(_stored_titles(storage)) == sorted(titles)
