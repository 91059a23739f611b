# src/slacker/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path


class _ConsoleNoiseFilter(logging.Filter):
    """
    Decides what reaches stderr while the REPL is in use.

    slacker.* records pass, except the notification tick, which only shows
    WARNING and above because the notifier already prints its output.
    Captured warnings and other libraries' records need ERROR or above.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name

        if name.startswith("slacker."):
            if name.startswith("slacker.tasks.task_scheduler"):
                return record.levelno >= logging.WARNING
            return True

        if name == "py.warnings":
            return record.levelno >= logging.ERROR

        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/slacker",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> None:
    """
    Attach two handlers to the root logger.

    stderr gets the filtered view above; `<log_dir>/slacker.log` gets every
    record down to `file_level`. Run it at startup, before modules log anything.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "slacker.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # Calling twice must not double every line.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    logfile = logging.FileHandler(str(log_file), encoding="utf-8")
    logfile.setLevel(file_level)
    logfile.setFormatter(fmt)
    root.addHandler(logfile)

    # warnings.warn() output arrives under the "py.warnings" logger.
    logging.captureWarnings(True)
