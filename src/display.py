"""Table rendering for task listings.

Columns: ID, Status, Created, Description. Widths are computed on the
plain text before any coloring is applied, so ANSI codes never skew the
alignment.
"""
from typing import List, Sequence

from models import Task
from theme import color, HEADER_COLOR, STATUS_COLOR

HEADERS = ('ID', 'Status', 'Created', 'Description')
TIMESTAMP_FORMAT = '%Y-%m-%d %H:%M:%S'
SEP = '  '
EMPTY_MESSAGE = 'No tasks found'


def _row(task: Task) -> List[str]:
    return [
        str(task.id),
        task.status.value,
        task.created_at.strftime(TIMESTAMP_FORMAT),
        task.description,
    ]


def _pad(cells: Sequence[str], widths: Sequence[int]) -> List[str]:
    # last column is left ragged
    return [c.ljust(w) for c, w in zip(cells[:-1], widths)] + [cells[-1]]


def render_tasks(tasks: Sequence[Task]) -> str:
    """Render tasks as a table, or the empty message if there are none."""
    if not tasks:
        return EMPTY_MESSAGE
    rows = [_row(t) for t in tasks]
    widths = [max(len(HEADERS[i]), *(len(r[i]) for r in rows)) for i in range(len(HEADERS) - 1)]

    header = SEP.join(color(c, HEADER_COLOR) for c in _pad(HEADERS, widths))
    rule = SEP.join('-' * w for w in widths + [len(HEADERS[-1])])
    lines = ['', header, rule]
    for task, cells in zip(tasks, rows):
        padded = _pad(cells, widths)
        padded[1] = color(padded[1], STATUS_COLOR.get(task.status.value, ''))
        lines.append(SEP.join(padded).rstrip())
    lines.append('')
    return '\n'.join(lines)
