from __future__ import annotations

import threading
from typing import Optional

from rich.console import Console
from rich.text import Text

LEVEL_STYLES = {
    "DEBUG": "bold blue",
    "INFO": "bold green",
    "WARN": "bold yellow",
    "ERROR": "bold red",
    "DONE": "bold cyan",
}


def stderr_console() -> Console:
    return Console(stderr=True)


class RichLogger:
    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or stderr_console()
        self.verbose = verbose
        self._lock = threading.Lock()

    def _emit(self, level: str, msg: str) -> None:
        with self._lock:
            self.console.log(Text(level.ljust(5), style=LEVEL_STYLES[level]), msg)

    def debug(self, msg: str) -> None:
        if self.verbose:
            self._emit("DEBUG", msg)

    def info(self, msg: str) -> None:
        self._emit("INFO", msg)

    def warn(self, msg: str) -> None:
        self._emit("WARN", msg)

    def error(self, msg: str) -> None:
        self._emit("ERROR", msg)

    def done(self, msg: str) -> None:
        self._emit("DONE", msg)
