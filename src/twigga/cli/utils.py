"""Shared utility functions for CLI commands."""

import itertools
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager

import click


def format_elapsed(seconds: float) -> str:
    """Format elapsed seconds as human-readable duration.

    Args:
        seconds: Elapsed time in seconds.

    Returns:
        Human-readable duration string (e.g., "45s", "2m 30s").
    """
    secs = int(seconds)
    if secs < 60:
        return f"{secs}s"
    return f"{secs // 60}m {secs % 60}s"


def format_size(size_bytes: int) -> str:
    """Format byte count as human-readable size."""
    if size_bytes >= 100 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    return f"{size_bytes / 1024:.0f} KB"


class ClickEchoHandler(logging.Handler):
    """Logging handler that writes through click so output follows the active stderr."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            click.echo(self.format(record), err=True)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False) -> None:
    """Send ``twigga`` log records to stderr.

    Warnings are always shown; ``verbose`` adds request-level debug output.
    """
    logger = logging.getLogger("twigga")
    for handler in list(logger.handlers):
        if isinstance(handler, ClickEchoHandler):
            logger.removeHandler(handler)
    handler = ClickEchoHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


class Spinner:
    """Status line for the steps of a multi-step command.

    Each ``step`` block ends with a persisted line marked ✓ or ✗. While the
    block runs on a terminal, a Braille frame animates in front of the text.

    Args:
        indent: Number of leading spaces before the status symbol.
    """

    FRAMES = "⠋⠙⠹⠸⠼⠴⠦⠧⠇⠏"
    INTERVAL = 0.08  # seconds between frames

    def __init__(self, indent: int = 0):
        self._prefix = " " * indent
        self._stopped = threading.Event()
        self._thread: threading.Thread | None = None
        self._tty = False
        self.text = ""
        self.suffix = ""

    @contextmanager
    def step(self, text: str) -> Iterator["Spinner"]:
        """Spin while the block runs.

        Set ``suffix`` inside the block to append it to the final line.
        Exceptions are re-raised after the ✗ line is written.
        """
        self.text = text
        self.suffix = ""
        self._tty = sys.stderr.isatty()
        if self._tty:
            self._stopped.clear()
            self._thread = threading.Thread(target=self._animate, daemon=True)
            self._thread.start()
        try:
            yield self
        except BaseException:
            self._finish("✗")
            raise
        self._finish("✓")

    def _finish(self, symbol: str) -> None:
        if self._thread is not None:
            self._stopped.set()
            self._thread.join(timeout=0.2)
            self._thread = None
        line = f"{self._prefix}{symbol} {self.text}"
        if self.suffix:
            line += f" {self.suffix}"
        self._write(("\r\033[K" if self._tty else "") + line + "\n")

    def _animate(self) -> None:
        for frame in itertools.cycle(self.FRAMES):
            self._write(f"\r\033[K{self._prefix}{frame} {self.text}")
            if self._stopped.wait(self.INTERVAL):
                return

    @staticmethod
    def _write(text: str) -> None:
        sys.stderr.write(text)
        sys.stderr.flush()
