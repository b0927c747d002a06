"""
Provide logging utilities.
"""

import sys
from logging import ERROR, WARNING, INFO, StreamHandler, LogRecord
from typing import TextIO

from typing_extensions import override


class CliHandler(
    StreamHandler,  # type: ignore[type-arg]
):
    """
    Write log records to a terminal, colored by level.

    Records are only colored if the stream is a TTY, so redirected output stays plain.
    """

    COLOR_LEVELS = (
        (ERROR, 91),
        (WARNING, 93),
        (INFO, 92),
    )
    DEFAULT_COLOR = 97

    def __init__(self, stream: TextIO | None = None):
        super().__init__(sys.stderr if stream is None else stream)

    @override
    def format(self, record: LogRecord) -> str:
        formatted = super().format(record)
        if not self._colorize():
            return formatted
        return f"\033[{self._color(record.levelno)}m{formatted}\033[0m"

    def _colorize(self) -> bool:
        isatty = getattr(self.stream, "isatty", None)
        return bool(isatty and isatty())

    def _color(self, level: int) -> int:
        for threshold, color in self.COLOR_LEVELS:
            if level >= threshold:
                return color
        return self.DEFAULT_COLOR
