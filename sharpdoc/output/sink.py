"""Console sink for user-facing progress messages."""

from __future__ import annotations

import threading

from rich.console import Console
from rich.text import Text

INFO_TAG = "[INFO]"
ERROR_TAG = "[ERROR]"


class OutputSink:
    """Writes tagged status lines to a rich console.

    Shared by every concurrent file task; a lock keeps lines from
    interleaving.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False)
        self._lock = threading.Lock()

    def info(self, message: str) -> None:
        self._write(INFO_TAG, "green", message)

    def error(self, message: str) -> None:
        self._write(ERROR_TAG, "red", message)

    def _write(self, tag: str, style: str, message: str) -> None:
        line = Text.assemble((tag, f"bold {style}"), " ", message)
        with self._lock:
            self.console.print(line, soft_wrap=True)
