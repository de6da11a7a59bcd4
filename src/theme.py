"""Color & style helpers.

Decisions:
- Colors are emitted only when stdout is a TTY; piped or captured output
  stays plain so tables can be grepped and compared.
- Truecolor when the terminal advertises it, else the 256-color cube.
"""
from __future__ import annotations
import os, sys

_COLORTERM = os.environ.get("COLORTERM", "").lower()
_TRUECOLOR = any(tok in _COLORTERM for tok in ("truecolor", "24bit"))


def enabled() -> bool:
    """Checked per call; the CLI may run with stdout swapped out."""
    isatty = getattr(sys.stdout, "isatty", None)
    return bool(isatty and isatty())


def _code(part: str) -> str:
    return f"\033[{part}m"


def _hex_to_rgb(hex_code: str) -> tuple[int, int, int]:
    h = hex_code.lstrip('#')
    return int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)


def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    idx = 16 + 36 * to_6(r) + 6 * to_6(g) + to_6(b)
    return f"\033[38;5;{idx}m"


def _from_hex(hex_code: str) -> str:
    r, g, b = _hex_to_rgb(hex_code)
    if _TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)


RESET = _code('0')
BOLD = _code('1')

HEX_PRIMARY = '#476EAE'
HEX_TODO = '#48B3AF'
HEX_INPROGRESS = '#F6FF99'
HEX_DONE = '#A7E399'

STATUS_COLOR = {
    'todo': _from_hex(HEX_TODO),
    'in-progress': _from_hex(HEX_INPROGRESS),
    'done': _from_hex(HEX_DONE),
}

HEADER_COLOR = _from_hex(HEX_PRIMARY) + BOLD


def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text (no-op when colors are off)."""
    if not enabled() or not any(styles):
        return text
    return ''.join(styles) + text + RESET


__all__ = ['color', 'enabled', 'RESET', 'BOLD', 'STATUS_COLOR', 'HEADER_COLOR']
