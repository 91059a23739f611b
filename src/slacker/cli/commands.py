# src/slacker/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
from collections.abc import Callable
from datetime import timedelta
from typing import cast

from ..core.state import AppState
from ..errors import InvalidArgument, NotFound, SlackerError
from ..tasks import task_api
from ..tasks.task_models import SortMode, parse_iso_date
from ..tasks.task_scheduler import check_and_notify
from .render import DAY_NAMES, render_day, render_task_table

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

_DAY_LOOKUP = {name.lower(): i for i, name in enumerate(DAY_NAMES)}


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /today, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Task API errors (bad input, unknown id, storage failure) are rendered as
        a one-line reply instead of propagating to the console loop.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)

            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except InvalidArgument as e:
            return f"Invalid input: {e}"
        except NotFound as e:
            return f"Not found: {e}"
        except SlackerError as e:
            logger.error("/%s failed: %s", name, e)
            return f"Error: {e}"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument parsing ----


def _parse_task_id(args: list[str], usage: str) -> int:
    if not args:
        raise InvalidArgument(usage)
    raw = args[0].lstrip("#")
    try:
        return int(raw)
    except ValueError as exc:
        raise InvalidArgument(f"task id must be a number, got {args[0]!r}") from exc


def _parse_rule(raw: str) -> tuple[str, str | None]:
    """
    "daily" | "weekly:1,3" | "weekly:mon,wed" | "monthly:15" -> (type, value)
    """
    rtype, _, value = raw.partition(":")
    rtype = rtype.strip().lower()
    if rtype != "weekly":
        return rtype, (value or None)

    days: list[str] = []
    for part in value.split(","):
        part = part.strip().lower()
        if not part:
            continue
        day = _DAY_LOOKUP.get(part[:3]) if not part.isdigit() else int(part)
        if day is None:
            raise InvalidArgument(f"unknown weekday {part!r}")
        days.append(str(day))
    return rtype, ",".join(days) or None


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    settings = state.settings
    total = len(task_api.get_all_tasks(state))
    notify = "ON" if getattr(settings, "notifications_enabled", False) else "OFF"
    return (
        "Status:\n"
        f"  Database: {getattr(settings, 'tasks_db_path', '?')}\n"
        f"  Tasks: {total}\n"
        f"  Notifications: {notify}\n"
        f"  Viewing: {state.current_date().isoformat()} (sort: {state.sort_mode.value})"
    )


def cmd_today(state: AppState, args: list[str]) -> str:
    state.selected_date = None
    today = state.today()
    views = task_api.get_tasks_for_date(state, today, state.sort_mode)
    return render_day(views, today, today)


def cmd_day(state: AppState, args: list[str]) -> str:
    """
    /day             -> show the currently viewed date
    /day 2024-01-08  -> jump to a date
    /day +1 | -1     -> move relative to the viewed date
    /day today       -> back to today
    """
    if args:
        arg = args[0].strip().lower()
        if arg == "today":
            state.selected_date = None
        elif arg[:1] in ("+", "-"):
            try:
                delta = int(arg)
            except ValueError as exc:
                raise InvalidArgument(f"offset must be +N or -N, got {args[0]!r}") from exc
            state.selected_date = state.current_date() + timedelta(days=delta)
        else:
            state.selected_date = parse_iso_date(arg)

    target = state.current_date()
    views = task_api.get_tasks_for_date(state, target, state.sort_mode)
    return render_day(views, target, state.today())


def cmd_all(state: AppState, args: list[str]) -> str:
    return render_task_table(task_api.get_all_tasks(state))


def cmd_manage(state: AppState, args: list[str]) -> str:
    return render_task_table(task_api.list_tasks_by_weekday(state))


def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /add <rule> [at=HH:MM] [reset=HH:MM] <title...>

    rule: daily | weekly:mon,wed | weekly:1,3 | monthly:15
    """
    usage = "Usage: /add <daily|weekly:mon,wed|monthly:15> [at=HH:MM] [reset=HH:MM] <title>"
    if len(args) < 2:
        return usage

    rtype, rvalue = _parse_rule(args[0])
    task_time: str | None = None
    reset_time: str | None = None
    title_words: list[str] = []
    for word in args[1:]:
        low = word.lower()
        if low.startswith("at=") and not title_words:
            task_time = word[3:]
        elif low.startswith("reset=") and not title_words:
            reset_time = word[6:]
        else:
            title_words.append(word)

    title = " ".join(title_words)
    task_id = task_api.add_task(state, title, rtype, rvalue, task_time, reset_time)

    suggestions = task_api.suggest_titles(state, title, limit=3)
    if suggestions and emit:
        with contextlib.suppress(Exception):
            emit(f"Similar tasks already exist: {', '.join(suggestions)}")
    return f"Added task #{task_id}: {title}"


def cmd_done(state: AppState, args: list[str]) -> str:
    task_id = _parse_task_id(args, "Usage: /done <task id>")
    completed = task_api.toggle_task(state, task_id, state.current_date())
    return f"Task #{task_id} marked {'done' if completed else 'not done'}."


def cmd_del(state: AppState, args: list[str]) -> str:
    task_id = _parse_task_id(args, "Usage: /del <task id>")
    task_api.delete_task(state, task_id)
    return f"Task #{task_id} deleted."


def cmd_sort(state: AppState, args: list[str]) -> str:
    modes = " | ".join(m.value for m in SortMode)
    if not args:
        return f"Sort mode is {state.sort_mode.value}. Use /sort {modes}."
    try:
        state.sort_mode = SortMode(args[0].lower())
    except ValueError:
        return f"Usage: /sort {modes}"
    return f"Sort mode set to {state.sort_mode.value}."


def cmd_suggest(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /suggest <part of a title>"
    limit = int(getattr(state.settings, "suggest_limit", 8))
    titles = task_api.suggest_titles(state, " ".join(args), limit=limit)
    if not titles:
        return "No matching titles."
    return "\n".join(titles)


def cmd_check(state: AppState, args: list[str]) -> str:
    notes = check_and_notify(state.task_store, state.notifier, state.clock.now())
    if not notes:
        return "Nothing to notify this minute."
    return f"Sent {len(notes)} notification(s)."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show database, task count and view settings.")
registry.register("today", cmd_today, help_text="Show today's tasks.", aliases=["t"])
registry.register("day", cmd_day, help_text="Show a day: /day 2024-01-08 | /day +1 | /day -1.")
registry.register("all", cmd_all, help_text="List every recurring task.", aliases=["ls"])
registry.register("manage", cmd_manage, help_text="List tasks grouped by weekday (Mon first).")
registry.register(
    "add",
    cmd_add,
    help_text="Add a task: /add weekly:mon,wed at=09:00 reset=03:00 Water plants.",
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.", aliases=["x"])
registry.register("del", cmd_del, help_text="Delete a task and its history: /del <id>.", aliases=["rm"])
registry.register("sort", cmd_sort, help_text="Sort mode: /sort default | alphabetical | reset-time.")
registry.register("suggest", cmd_suggest, help_text="Find existing titles: /suggest <text>.")
registry.register("check", cmd_check, help_text="Run the notification check for this minute now.")
