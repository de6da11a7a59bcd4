"""In-memory task store: ordered task list, id management and mutations.

Tasks are kept in insertion order. Ids are handed out from a counter that
starts one past the highest id seen at construction, so ids of deleted
tasks are never reused within a run. All lookups are linear scans.
"""
from __future__ import annotations
from typing import Iterable, List, Optional, Union
from models import Task, TaskStatus, now


class TaskStore:
    def __init__(self, tasks: Optional[Iterable[Task]] = None):
        self.tasks: List[Task] = list(tasks) if tasks else []
        self._next_id: int = max((t.id for t in self.tasks), default=0) + 1

    # -------------------- id management --------------------
    @property
    def next_id(self) -> int:
        return self._next_id

    def _allocate_id(self) -> int:
        nid = self._next_id
        self._next_id += 1
        return nid

    # -------------------- queries --------------------
    def get(self, task_id: int) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def list_tasks(self, status_filter: Optional[str] = None) -> List[Task]:
        """Return all tasks, or those whose status equals status_filter.

        The filter is compared verbatim against the stored status value; an
        unknown value simply matches nothing.
        """
        if not status_filter:
            return list(self.tasks)
        return [t for t in self.tasks if t.status.value == status_filter]

    # -------------------- task operations --------------------
    def add(self, description: str) -> Task:
        stamp = now()
        task = Task(
            id=self._allocate_id(),
            description=description,
            status=TaskStatus.TODO,
            created_at=stamp,
            updated_at=stamp,
        )
        self.tasks.append(task)
        return task

    def update(self, task_id: int, description: str) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        task.description = description
        task.touch()
        return True

    def delete(self, task_id: int) -> bool:
        for idx, task in enumerate(self.tasks):
            if task.id == task_id:
                del self.tasks[idx]
                return True
        return False

    def set_status(self, task_id: int, status: Union[TaskStatus, str]) -> bool:
        new_status = TaskStatus(status)
        task = self.get(task_id)
        if task is None:
            return False
        task.status = new_status
        task.touch()
        return True

    def __len__(self) -> int:
        return len(self.tasks)

    def __str__(self) -> str:
        counts = {s: 0 for s in TaskStatus}
        for task in self.tasks:
            counts[task.status] += 1
        return (f'Todo: {counts[TaskStatus.TODO]} tasks, '
                f'In-Progress: {counts[TaskStatus.IN_PROGRESS]} tasks, '
                f'Done: {counts[TaskStatus.DONE]} tasks')
