# src/coach/engine/render.py

"""
Rendering helpers.

This module is responsible for:
- the canonical coach file text (serialize),
- the numbered task list shown by the CLI.

It never parses, mutates entries or writes files.
"""

from __future__ import annotations

import sys

from .model import HEADER, Entry, Status


# ---------------------------------------------------------------------
# ANSI / terminal helpers
# ---------------------------------------------------------------------

_RESET = "\033[0m"

_COLOR = {
    Status.TODO: "\033[33m",       # yellow
    Status.WORKING: "\033[32m",    # green
    Status.DONE: "\033[90m",       # grey
    Status.CANCELLED: "\033[90m",  # grey
}


def _supports_color() -> bool:
    """Return True if stdout is a TTY."""
    return sys.stdout.isatty()


# ---------------------------------------------------------------------
# Canonical file text
# ---------------------------------------------------------------------

def serialize(entry: Entry) -> str:
    """
    Render an Entry as canonical coach file text.

    Layout:
      #coach
      label
      key: value         (one per observation)
      <blank>
      STATUS text        (one per task)
      * <stamp> message  (one per event)
      <blank>            (only if tasks/events precede notes)
      note               (notes separated by one blank line)

    Every line ends with a newline; nothing is padded after the last note.
    """
    lines: list[str] = [HEADER, entry.label]

    lines.extend(str(obs) for obs in entry.observations)
    lines.append("")

    lines.extend(str(task) for task in entry.tasks)
    lines.extend(str(event) for event in entry.events)

    if entry.notes and (entry.tasks or entry.events):
        lines.append("")

    for i, note in enumerate(entry.notes):
        if i:
            lines.append("")
        lines.append(note.text)

    return "\n".join(lines) + "\n"


# ---------------------------------------------------------------------
# Task list
# ---------------------------------------------------------------------

def render_tasks(entry: Entry, *, color: bool = True) -> str:
    """
    Render the numbered task list:

      1: TODO buy candy
      2: DONE put out decorations
    """
    use_color = color and _supports_color()

    out: list[str] = []
    for i, task in enumerate(entry.tasks, start=1):
        status = task.status.value
        if use_color:
            status = f"{_COLOR.get(task.status, '')}{status}{_RESET}"
        text = f" {task.text}" if task.text else ""
        out.append(f"{i}: {status}{text}")

    return "\n".join(out)
