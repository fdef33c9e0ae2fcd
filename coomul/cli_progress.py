"""Progress lines for the ``coomul`` subcommands, written to stderr."""

from __future__ import annotations

import sys
from typing import TextIO

_BAR_WIDTH = 20


class CLIProgress:
    """Counts completed steps and prints one status line per step unless ``quiet``."""

    def __init__(
        self,
        name: str,
        total_steps: int | None = None,
        quiet: bool = False,
        stream: TextIO | None = None,
    ) -> None:
        self.name = name
        self.total_steps = total_steps or 0
        self.completed = 0
        self.quiet = quiet
        self.stream = stream

    def set_total(self, total_steps: int) -> None:
        self.total_steps = max(0, total_steps)

    def status(self, message: str) -> str:
        if not self.total_steps:
            return f"{self.name:12s} {message}"
        fraction = min(1.0, self.completed / self.total_steps)
        filled = int(fraction * _BAR_WIDTH)
        bar = "[" + "=" * filled + " " * (_BAR_WIDTH - filled) + "]"
        return f"{self.name:12s} {bar} {int(fraction * 100):3d}% {message}"

    def step(self, message: str) -> None:
        self.completed += 1
        if not self.quiet:
            print(self.status(message), file=self.stream or sys.stderr)
