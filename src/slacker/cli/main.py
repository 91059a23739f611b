# src/slacker/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then starts:
- the notification scheduler in a background thread (optional),
- the console REPL in the main thread (optional).
"""

from __future__ import annotations

import logging
import signal
import threading

from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.task_scheduler import NotificationScheduler
from .bootstrap import create_initial_state, create_scheduler

logger = logging.getLogger(__name__)


def _shutdown(state: AppState, scheduler: NotificationScheduler | None) -> None:
    """Stop the tick before the store goes away; nothing should escape."""
    if scheduler is not None:
        scheduler.stop()
        scheduler.join(timeout=10.0)

    try:
        close = getattr(state.task_store, "close", None)
        if close is not None:
            close()
    except Exception:
        logger.debug("TaskStore close failed.", exc_info=True)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    setup_logging(log_dir=getattr(settings, "log_dir", ".local/slacker"), console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "Slacker"))

    state = create_initial_state(settings=settings)

    scheduler: NotificationScheduler | None = None
    if settings.notifications_enabled:
        scheduler = create_scheduler(state)
        scheduler.start()

    # Use an Event so main can wait without a busy while-loop.
    stop_main = threading.Event()

    def _handle_signal(signum, _frame) -> None:
        logger.info("Signal %s received, shutting down...", signum)
        stop_main.set()

    # The REPL relies on the default SIGINT -> KeyboardInterrupt behavior.
    if not settings.console_enabled:
        try:
            signal.signal(signal.SIGINT, _handle_signal)
            signal.signal(signal.SIGTERM, _handle_signal)
        except (ValueError, OSError, AttributeError):
            # Not in the main thread, or the platform lacks SIGTERM.
            logger.debug("Signal handlers not installed.", exc_info=True)

    try:
        if settings.console_enabled:
            run_console_loop(state)
            stop_main.set()
        else:
            logger.info("Console disabled. Running notifications only. Press Ctrl+C to stop.")
            stop_main.wait()
    finally:
        _shutdown(state, scheduler)
        logger.info("Bye.")


if __name__ == "__main__":
    main()
