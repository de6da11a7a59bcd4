from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from cli import task_cli
from storage import Storage


@pytest.fixture()
def tasks_path(tmp_path: Path) -> Path:
    return tmp_path / "tasks.json"


@pytest.fixture()
def storage(tasks_path: Path) -> Storage:
    return Storage(tasks_path)


@pytest.fixture()
def run(tasks_path: Path):
    """
    Invoke the CLI in-process against the per-test snapshot file.

    Returns click's Result; stdout and stderr are both in ``result.output``.
    """
    runner = CliRunner()

    def _run(*args: str):
        return runner.invoke(task_cli, ["--file", str(tasks_path), *args])

    return _run
