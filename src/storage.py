"""Persistence helpers (load/save) for the task store.

The snapshot is a single JSON array of task objects, pretty-printed with
two-space indentation in insertion order. Every save rewrites the whole
file through a temporary sibling and os.replace, so a crash mid-write never
leaves a truncated snapshot behind.
"""
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Set, Union

from models import Task
from store import TaskStore

DEFAULT_TASKS_FILE = 'tasks.json'
JSON_INDENT = 2

TaskEntry = Dict[str, Any]

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """The snapshot file could not be read, decoded or written."""


class Storage:
    def __init__(self, path: Union[str, Path] = DEFAULT_TASKS_FILE):
        self.path = Path(path)

    def load(self) -> TaskStore:
        """Load the snapshot into a fresh TaskStore.

        Missing file -> an empty snapshot is written and an empty store
        returned. Anything unreadable or malformed raises PersistenceError.
        """
        if not self.path.exists():
            logger.debug("No snapshot at %s; creating an empty one", self.path)
            store = TaskStore()
            self.save(store)
            return store
        try:
            text = self.path.read_text(encoding='utf-8')
        except OSError as exc:
            raise PersistenceError(f"cannot read {self.path}: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"{self.path} is not valid JSON: {exc}") from exc
        tasks = self._decode(data)
        logger.debug("Loaded %d task(s) from %s", len(tasks), self.path)
        return TaskStore(tasks)

    def _decode(self, data: Any) -> List[Task]:
        # a nil task list is written as `null` by other writers of this format
        if data is None:
            return []
        if not isinstance(data, list):
            raise PersistenceError(f"{self.path}: expected a JSON array of tasks")
        tasks: List[Task] = []
        seen: Set[int] = set()
        for position, raw in enumerate(data):
            try:
                task = Task.from_dict(raw)
            except ValueError as exc:
                raise PersistenceError(f"{self.path}: entry {position}: {exc}") from exc
            if task.id in seen:
                raise PersistenceError(f"{self.path}: duplicate task id {task.id}")
            seen.add(task.id)
            tasks.append(task)
        return tasks

    def save(self, store: TaskStore) -> None:
        """Persist the whole store, replacing the previous snapshot."""
        payload: List[TaskEntry] = [task.to_dict() for task in store.tasks]
        text = json.dumps(payload, indent=JSON_INDENT, ensure_ascii=False)
        directory = self.path.parent
        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f'.{self.path.name}.', suffix='.tmp', dir=directory)
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(text)
                f.write('\n')
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"cannot write {self.path}: {exc}") from exc
        logger.debug("Saved %d task(s) to %s", len(payload), self.path)

    def _file_mode(self) -> int:
        """Mode for the next snapshot: keep the current one, else 0666 minus umask."""
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
