"""Console logging helpers: a colouring formatter and third-party logger levels."""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

# Libraries that log every gateway heartbeat, voice packet or HTTP request at INFO.
NOISY_LOGGERS: tuple[str, ...] = (
    "discord.gateway",
    "discord.client",
    "discord.voice_state",
    "discord.player",
    "httpx",
    "httpcore",
)


class ColoredFormatter(logging.Formatter):
    """Logging formatter that applies ANSI color codes to the levelname field.

    Colors are disabled when the ``NO_COLOR`` environment variable is set or
    when the output stream is not a TTY (e.g. redirected to a file). Logger
    names under ``strip_prefix`` are shortened so ``zyra_music.application.x``
    prints as ``application.x``.
    """

    COLORS: dict[int, str] = {
        logging.DEBUG: "\033[36m",     # cyan
        logging.INFO: "\033[32m",      # green
        logging.WARNING: "\033[33m",   # yellow
        logging.ERROR: "\033[31m",     # red
        logging.CRITICAL: "\033[1;31m",  # bold red
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        *,
        stream: TextIO | None = None,
        strip_prefix: str = "zyra_music.",
    ) -> None:
        super().__init__(fmt, datefmt)
        self._stream = stream
        self._strip_prefix = strip_prefix

    def _use_color(self) -> bool:
        if os.environ.get("NO_COLOR") is not None:
            return False
        stream = self._stream or sys.stdout
        return hasattr(stream, "isatty") and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        use_color = self._use_color()
        shorten = bool(self._strip_prefix) and record.name.startswith(self._strip_prefix)
        if not (use_color or shorten):
            return super().format(record)

        record = logging.makeLogRecord(record.__dict__)
        if shorten:
            record.name = record.name[len(self._strip_prefix) :]
        if use_color:
            color = self.COLORS.get(record.levelno, "")
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def quiet_library_loggers(*, verbose: bool = False) -> None:
    """Raise chatty library loggers to WARNING unless ``verbose`` is set."""
    level = logging.DEBUG if verbose else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level)
