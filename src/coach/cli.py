# src/coach/cli.py

"""
Command-line interface for coach.

This module:
- defines argument parsing and subcommands,
- reads the clock and locates today's file,
- delegates parsing, mutation and storage to engine modules.

KISS rule: keep commands small and predictable.
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

from coach.config import CoachConfig, ConfigError, load_config
from coach.engine.actions import add_event, add_note, add_observation, add_task, set_task_status
from coach.engine.editor import EditorError, edit_prompt
from coach.engine.model import Entry, Status
from coach.engine.ops import StorageError, create_day_entry, day_path, load_entry, save_entry
from coach.engine.parse import FormatError
from coach.engine.render import render_tasks, serialize
from coach.engine.validate import ValidationError, validate_entry

logger = logging.getLogger(__name__)

_STATUS_COMMANDS = {
    "todo": Status.TODO,
    "working": Status.WORKING,
    "done": Status.DONE,
    "cancel": Status.CANCELLED,
}

_ERRORS = (
    ConfigError,
    EditorError,
    FormatError,
    IndexError,
    StorageError,
    ValidationError,
)


def _now() -> datetime:
    """Return the current local time (isolated for testability)."""
    return datetime.now()


# ---------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="coach", description="a journal and project manager")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", type=Path, default=None, help="Path to coach.yml")
    parser.add_argument(
        "-C",
        "--cd",
        type=str,
        default=None,
        help="Use this journal directory instead of the configured one",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # ------------------------------------------------------------------
    # Read-only commands
    # ------------------------------------------------------------------

    p_cat = sub.add_parser("cat", help="Write today's entry to standard out")
    p_cat.set_defaults(func=cmd_cat)

    p_check = sub.add_parser("check", help="Parse and validate a coach file")
    p_check.add_argument("file", nargs="?", default=None, help="File to check (default: today's entry)")
    p_check.set_defaults(func=cmd_check)

    # ------------------------------------------------------------------
    # Write commands
    # ------------------------------------------------------------------

    p_today = sub.add_parser(
        "today",
        help="Create today's entry, carrying over unfinished tasks",
    )
    p_today.set_defaults(func=cmd_today)

    p_observe = sub.add_parser("observe", help="Add a key/value observation")
    p_observe.add_argument("name", help="Observation name")
    p_observe.add_argument("value", help="Observation value")
    p_observe.set_defaults(func=cmd_observe)

    p_task = sub.add_parser("task", help="Manage the task list (lists tasks by default)")
    p_task.set_defaults(func=cmd_task_list)
    task_sub = p_task.add_subparsers(dest="task_command")

    p_add = task_sub.add_parser("add", help="Add a TODO task")
    p_add.add_argument("text", nargs="+", help="Task text")
    p_add.set_defaults(func=cmd_task_add)

    for name, status in _STATUS_COMMANDS.items():
        p_status = task_sub.add_parser(name, help=f"Mark a task as {status.value}")
        p_status.add_argument("index", type=int, help="Task number (starting at 1)")
        p_status.set_defaults(func=cmd_task_status, status=status)

    p_event = sub.add_parser("event", help="Record a timestamped event")
    p_event.add_argument("message", nargs="+", help="Event message")
    p_event.set_defaults(func=cmd_event)

    p_note = sub.add_parser("note", help="Add a note (opens $EDITOR without text)")
    p_note.add_argument("text", nargs="*", help="Note text")
    p_note.set_defaults(func=cmd_note)

    return parser


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------

def _journal_dir(args: argparse.Namespace, config: CoachConfig) -> Path:
    if args.cd:
        return (Path.cwd() / args.cd).resolve()
    return config.journal_dir


def _today_path(args: argparse.Namespace, config: CoachConfig) -> Path:
    return day_path(_journal_dir(args, config), _now().date())


def _update_today(args: argparse.Namespace, config: CoachConfig, mutate) -> Entry:
    path = _today_path(args, config)
    entry = load_entry(path, config.max_entry_bytes)
    mutate(entry)
    save_entry(path, entry)
    return entry


# ---------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------

def cmd_today(args: argparse.Namespace, config: CoachConfig) -> int:
    path = create_day_entry(
        _journal_dir(args, config),
        _now().date(),
        max_bytes=config.max_entry_bytes,
    )
    print(path)
    return 0


def cmd_cat(args: argparse.Namespace, config: CoachConfig) -> int:
    entry = load_entry(_today_path(args, config), config.max_entry_bytes)
    print(serialize(entry), end="")
    return 0


def cmd_check(args: argparse.Namespace, config: CoachConfig) -> int:
    path = Path(args.file) if args.file else _today_path(args, config)
    entry = load_entry(path, config.max_entry_bytes)

    res = validate_entry(entry)
    if res.ok:
        return 0

    print(f"{path}")
    for issue in res.issues:
        print(f"  - {issue.code}: {issue.message}")
    return 1


def cmd_observe(args: argparse.Namespace, config: CoachConfig) -> int:
    _update_today(args, config, lambda e: add_observation(e, args.name, args.value))
    return 0


def cmd_task_list(args: argparse.Namespace, config: CoachConfig) -> int:
    entry = load_entry(_today_path(args, config), config.max_entry_bytes)
    text = render_tasks(entry)
    if text:
        print(text)
    return 0


def cmd_task_add(args: argparse.Namespace, config: CoachConfig) -> int:
    entry = _update_today(args, config, lambda e: add_task(e, " ".join(args.text)))
    print(f"{len(entry.tasks)}: {entry.tasks[-1]}")
    return 0


def cmd_task_status(args: argparse.Namespace, config: CoachConfig) -> int:
    entry = _update_today(args, config, lambda e: set_task_status(e, args.index, args.status))
    print(entry.tasks[args.index - 1])
    return 0


def cmd_event(args: argparse.Namespace, config: CoachConfig) -> int:
    entry = _update_today(args, config, lambda e: add_event(e, " ".join(args.message), _now()))
    print(entry.events[-1])
    return 0


def cmd_note(args: argparse.Namespace, config: CoachConfig) -> int:
    text = " ".join(args.text)
    if not text.strip():
        text = edit_prompt(config.editor)

    _update_today(args, config, lambda e: add_note(e, text))
    return 0


# ---------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------

def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if args.debug else config.log_level,
    )

    func = getattr(args, "func", None)
    if func is None:
        parser.print_help()
        return 2

    logger.debug("running %s", args.command)
    try:
        return func(args, config)
    except _ERRORS as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
