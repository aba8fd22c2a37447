"""Durable storage for the task collection.

Storage is a string key/value store, the same contract as browser local
storage. The whole collection lives under a single key as a JSON array and
every save overwrites it.
"""

import json
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from tasklist.errors import PersistenceError
from tasklist.logging_setup import get_logger
from tasklist.models import Task, title_key
from tasklist.ordering import sort_by_priority

logger = get_logger(__name__)

DEFAULT_KEY = "tasks"

_task_list = TypeAdapter(list[Task])


class KeyValueStorage(Protocol):
    """Minimal string key/value storage."""

    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """In-process storage, used by tests and throwaway sessions."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class FileStorage:
    """Storage backed by a JSON object on disk.

    Writes go to a temporary file in the same directory and are moved into
    place, so a crash mid-write never leaves a truncated file behind.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not hold a JSON object")
        return data

    def get_item(self, key: str) -> str | None:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set_item(self, key: str, value: str) -> None:
        try:
            items = self._read_all()
        except ValueError:
            logger.warning("storage_file_reset", path=str(self.path))
            items = {}
        items[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(items, f, indent=2)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def _has_unique_ids_and_titles(tasks: Sequence[Task]) -> bool:
    ids = {task.id for task in tasks}
    titles = {title_key(task.title) for task in tasks}
    return len(ids) == len(tasks) and len(titles) == len(tasks)


class TaskPersistence:
    """Loads and saves the task collection under a single storage key."""

    def __init__(self, storage: KeyValueStorage, key: str = DEFAULT_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> list[Task] | None:
        """Return the stored collection, or None when there is nothing usable.

        Missing, unreadable or malformed data all count as "no data". A stored
        empty list is valid and comes back as an empty collection.
        """
        try:
            raw = self.storage.get_item(self.key)
        except (OSError, ValueError) as exc:
            logger.warning("storage_unreadable", key=self.key, error=str(exc))
            return None
        if raw is None:
            return None

        try:
            tasks = _task_list.validate_json(raw)
        except SchemaError as exc:
            logger.warning("storage_malformed", key=self.key, errors=exc.error_count())
            return None
        if not _has_unique_ids_and_titles(tasks):
            logger.warning("storage_duplicates", key=self.key)
            return None
        return sort_by_priority(tasks)

    def save(self, tasks: Sequence[Task]) -> None:
        """Overwrite the stored collection with a full snapshot.

        Raises:
            PersistenceError: the storage backend rejected the write.
        """
        payload = _task_list.dump_json(list(tasks)).decode("utf-8")
        try:
            self.storage.set_item(self.key, payload)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Could not persist tasks: {exc}") from exc
        logger.debug("tasks_saved", key=self.key, count=len(tasks))
