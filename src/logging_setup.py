from __future__ import annotations

import logging
import sys


class _StderrHandler(logging.StreamHandler):
    """
    StreamHandler bound to whatever sys.stderr is at emit time.

    The CLI can be driven in-process (click's test runner swaps the std
    streams per invocation), so the stream must not be captured once.
    """

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, _value) -> None:
        pass


def setup_logging(*, verbose: bool = False) -> None:
    """
    Configure console logging:
    - WARNING and above by default, DEBUG with verbose
    - messages go to stderr so stdout carries only command output

    Safe to call more than once; only the handler installed here is replaced.
    """
    level = logging.DEBUG if verbose else logging.WARNING

    root = logging.getLogger()
    for h in list(root.handlers):
        if isinstance(h, _StderrHandler):
            root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    ch = _StderrHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    root.addHandler(ch)
    root.setLevel(level)
