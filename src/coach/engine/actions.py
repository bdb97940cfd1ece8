# src/coach/engine/actions.py

"""
Entry mutation actions.

This module contains *all* state-changing operations on Entry objects:
adding observations, tasks, events and notes, status transitions, and
carrying unfinished tasks over from a previous day.

Design principles:
- No parsing or file access here (handled elsewhere).
- The clock is never read here; timestamps come from the caller.
- Validation errors are raised before anything is appended.
"""

from dataclasses import replace
from datetime import datetime
from typing import Iterable

from .model import Entry, Event, Note, Status, Task, normalise_timestamp
from .validate import (
    check_label,
    check_note_paragraph,
    check_observation,
    check_single_line,
    parse_status,
    ValidationError,
)


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------

def _split_paragraphs(text: str) -> list[str]:
    """
    Split text on blank (or whitespace-only) lines.

    Runs of blank lines count as one separator; leading and trailing blank
    lines are dropped.
    """
    paragraphs: list[str] = []
    current: list[str] = []

    for ln in text.split("\n"):
        if ln.strip():
            current.append(ln)
            continue
        if current:
            paragraphs.append("\n".join(current))
            current = []

    if current:
        paragraphs.append("\n".join(current))

    return paragraphs


# ---------------------------------------------------------------------
# Public actions
# ---------------------------------------------------------------------

def new_entry(label: str, carried: Iterable[Task] = ()) -> Entry:
    """
    Create an empty entry, optionally starting with carried-over tasks.
    """
    entry = Entry(label=check_label(label))
    for task in carried:
        entry.tasks.append(replace(task))
    return entry


def add_observation(entry: Entry, key: str, value: str) -> None:
    """
    Append a key/value observation. Duplicate keys are kept.
    """
    entry.observations.append(check_observation(key, value))


def add_task(entry: Entry, text: str) -> Task:
    """
    Append a new TODO task and return it.
    """
    task = Task(status=Status.TODO, text=check_single_line(text, "task text"))
    entry.tasks.append(task)
    return task


def set_task_status(entry: Entry, index: int, status: "Status | str") -> Task:
    """
    Change the status of the task at 1-based `index`.

    Raises IndexError if `index` is outside [1, len(tasks)]. The task text
    and every other task are left untouched.
    """
    new_status = parse_status(status)

    count = len(entry.tasks)
    if index < 1 or index > count:
        if count == 0:
            raise IndexError(f"task {index} not found: this entry has no tasks")
        raise IndexError(f"task {index} not found: task numbers run from 1 to {count}")

    task = entry.tasks[index - 1]
    task.status = new_status
    return task


def add_event(entry: Entry, message: str, timestamp: datetime) -> Event:
    """
    Append a timestamped event.

    The timestamp is reduced to minute precision (the stored form).
    """
    event = Event(
        timestamp=normalise_timestamp(timestamp),
        message=check_single_line(message, "event message"),
    )
    entry.events.append(event)
    return event


def add_note(entry: Entry, text: str) -> list[Note]:
    """
    Split `text` into paragraphs and append each as a Note.

    All paragraphs are checked before any is appended; a paragraph whose
    first line looks like a task or an event is rejected.
    """
    paragraphs = _split_paragraphs(text)
    if not paragraphs:
        raise ValidationError("notes can't be empty")

    notes = [Note(check_note_paragraph(p)) for p in paragraphs]
    entry.notes.extend(notes)
    return notes


def merge_unfinished(previous: Entry) -> list[Task]:
    """
    Return copies of the TODO and WORKING tasks of `previous`, in order.

    `previous` is not modified.
    """
    return [replace(t) for t in previous.unfinished_tasks]
