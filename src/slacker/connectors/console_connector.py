# src/slacker/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


class ConsoleNotifier:
    """
    Notifier that prints notifications into the terminal.

    Called from the scheduler thread while the REPL waits on input(), so writes
    are serialized with a lock.
    """

    def __init__(self, app_name: str = "Slacker", *, stream=None) -> None:
        self._app_name = app_name
        self._stream = stream
        self._lock = threading.Lock()

    def notify(self, title: str, body: str) -> None:
        out = self._stream or sys.stdout
        lines = [f"\n[{_ts_local()}] [{self._app_name}] {title}"]
        lines.extend(f"    {line}" for line in body.splitlines() if line.strip())
        with self._lock:
            out.write("\n".join(lines) + "\n")
            out.flush()
        logger.debug("Console notification shown: %s", title)


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands, /today for today's list, /exit to quit.\n")

    lock = getattr(state, "lock", None)

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    # Show today's list right away.
    startup = command_registry.handle(state, "/today", emit=emit)
    if startup:
        print(f"[{_ts_local()}] {startup}\n")

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        if not user_input.startswith("/"):
            # Bare text is a shortcut for toggling by id ("3" -> /done 3).
            user_input = f"/done {user_input}" if user_input.lstrip("#").isdigit() else "/help"

        try:
            if lock:
                with lock:
                    cmd_response = command_registry.handle(state, user_input, emit=emit)
            else:
                cmd_response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            print(f"[{_ts_local()}] {cmd_response}\n")

    logger.info("Console connector finished.")
