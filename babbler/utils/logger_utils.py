# logger_utils.py - logging setup and timing helpers
#
# Library modules only call logging.getLogger(__name__); handlers are
# installed once by the CLI through configure_logging().

from __future__ import annotations

import logging
import os
import time
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "babbler"
FILE_FORMAT = "[%(asctime)s] %(levelname)-7s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


def configure_logging(
    level: Union[int, str] = "INFO",
    path: Optional[str] = None,
    use_color: bool = True,
) -> logging.Logger:
    """
    Attach console (rich) and optional file handlers to the package logger.
    Calling it again replaces the handlers instead of stacking them.
    """
    root = logging.getLogger(ROOT_LOGGER)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)

    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()

    console = RichHandler(
        console=Console(stderr=True, no_color=not use_color),
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        omit_repeated_times=False,
    )
    root.addHandler(console)

    if path:
        os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        fh = logging.FileHandler(path, encoding="utf-8")
        fh.setFormatter(logging.Formatter(FILE_FORMAT, DATE_FORMAT))
        root.addHandler(fh)

    return root


class Log:
    """Small helpers shared across modules."""

    @staticmethod
    def metric(tag: str, value, unit: str = "", log: Optional[logging.Logger] = None) -> None:
        """
        Record a metric (timing, counts) at DEBUG level.
        Example: "lexicon save: 0.012s"
        """
        (log or logger).debug(f"{tag}: {value}{unit}")

    @staticmethod
    def time_block(label: str, log: Optional[logging.Logger] = None) -> "_Timer":
        """
        Measure execution time of a code block.
            with Log.time_block("lexicon save"):
                write_file()
        """
        return _Timer(label, log)


class _Timer:
    """Context manager used by Log.time_block."""

    def __init__(self, label: str, log: Optional[logging.Logger] = None):
        self.label = label
        self.log = log
        self.start = 0.0
        self.elapsed = 0.0

    def __enter__(self) -> "_Timer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed = round(time.perf_counter() - self.start, 4)
        if exc_type is None:
            Log.metric(f"{self.label} done", self.elapsed, "s", self.log)
        else:
            Log.metric(f"{self.label} failed after", self.elapsed, "s", self.log)
