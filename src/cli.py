"""Command-line interface for the task tracker.

One invocation is one transaction: the group callback loads the snapshot,
click dispatches to a single verb, and mutating verbs write the whole store
back before the process exits. "Not found" is a normal outcome reported on
stdout; only usage errors and persistence failures exit non-zero.
"""
import functools
import logging
from pathlib import Path
from typing import Callable, Optional

import click

from display import render_tasks
from logging_setup import setup_logging
from models import TaskStatus
from storage import DEFAULT_TASKS_FILE, PersistenceError, Storage
from store import TaskStore

logger = logging.getLogger(__name__)


class TaskId(click.ParamType):
    """Integer task id; anything else is rejected before the verb runs."""
    name = 'id'

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return int(value)
        except (TypeError, ValueError):
            self.fail(f'{value!r} is not a valid task id', param, ctx)


TASK_ID = TaskId()


class CLI:
    """Owns the storage adapter and the loaded store for one invocation."""

    def __init__(self, storage: Storage, store: TaskStore):
        self.storage: Storage = storage
        self.store: TaskStore = store

    # -------------------- persistence --------------------
    def save(self) -> None:
        try:
            self.storage.save(self.store)
        except PersistenceError as exc:
            logger.debug("Saving %s failed", self.storage.path, exc_info=True)
            raise click.ClickException(f'could not save tasks: {exc}') from exc

    # -------------------- verbs --------------------
    def add(self, description: str) -> str:
        task = self.store.add(description)
        logger.debug("Added task %d", task.id)
        return f'Task added successfully (ID: {task.id})'

    def update(self, task_id: int, description: str) -> str:
        if not self.store.update(task_id, description):
            return f'Task {task_id} not found'
        return f'Task {task_id} updated successfully'

    def delete(self, task_id: int) -> str:
        if not self.store.delete(task_id):
            return f'Task {task_id} not found'
        return f'Task {task_id} deleted successfully'

    def mark(self, task_id: int, status: TaskStatus) -> str:
        if not self.store.set_status(task_id, status):
            return f'Task {task_id} not found'
        return f'Task {task_id} marked as {status.value}'

    def list(self, status_filter: Optional[str] = None) -> str:
        return render_tasks(self.store.list_tasks(status_filter))


def persisted(fn: Callable[..., str]) -> Callable[..., None]:
    """Run a mutating verb, print its outcome, then save the store."""
    @click.pass_obj
    @functools.wraps(fn)
    def wrapper(app: CLI, *args, **kwargs) -> None:
        click.echo(fn(app, *args, **kwargs))
        app.save()
    return wrapper


@click.group(context_settings={'help_option_names': ['-h', '--help']})
@click.option('-f', '--file', 'tasks_file', default=DEFAULT_TASKS_FILE, show_default=True,
              type=click.Path(dir_okay=False, path_type=Path),
              help='Snapshot file holding the tasks.')
@click.option('-v', '--verbose', is_flag=True, help='Log debug output to stderr.')
@click.version_option(package_name='task-cli', prog_name='task-cli')
@click.pass_context
def task_cli(ctx: click.Context, tasks_file: Path, verbose: bool) -> None:
    """A simple task manager CLI application."""
    setup_logging(verbose=verbose)
    storage = Storage(tasks_file)
    try:
        store = storage.load()
    except PersistenceError as exc:
        logger.debug("Loading %s failed", storage.path, exc_info=True)
        raise click.ClickException(f'could not load tasks: {exc}') from exc
    logger.debug("Store ready: %s", store)
    ctx.obj = CLI(storage, store)


@task_cli.command('add')
@click.argument('description')
@persisted
def add_cmd(app: CLI, description: str) -> str:
    """Add a new task."""
    return app.add(description)


@task_cli.command('update')
@click.argument('task_id', metavar='ID', type=TASK_ID)
@click.argument('description')
@persisted
def update_cmd(app: CLI, task_id: int, description: str) -> str:
    """Update a task's description."""
    return app.update(task_id, description)


@task_cli.command('delete')
@click.argument('task_id', metavar='ID', type=TASK_ID)
@persisted
def delete_cmd(app: CLI, task_id: int) -> str:
    """Delete a task."""
    return app.delete(task_id)


@task_cli.command('mark-in-progress')
@click.argument('task_id', metavar='ID', type=TASK_ID)
@persisted
def mark_in_progress_cmd(app: CLI, task_id: int) -> str:
    """Mark a task as in progress."""
    return app.mark(task_id, TaskStatus.IN_PROGRESS)


@task_cli.command('mark-done')
@click.argument('task_id', metavar='ID', type=TASK_ID)
@persisted
def mark_done_cmd(app: CLI, task_id: int) -> str:
    """Mark a task as done."""
    return app.mark(task_id, TaskStatus.DONE)


@task_cli.command('list')
@click.argument('status', required=False)
@click.pass_obj
def list_cmd(app: CLI, status: Optional[str]) -> None:
    """List all tasks or tasks by status."""
    click.echo(app.list(status))


if __name__ == '__main__':  # pragma: no cover
    task_cli(prog_name='task-cli')
