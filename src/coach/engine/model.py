# src/coach/engine/model.py

"""
Core domain models.

This module defines the in-memory representation of a journal entry
(label, observations, tasks, events, notes) together with the single
timestamp representation used by events.

No filesystem access should happen here.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Final


# ---------------------------------------------------------------------
# Format constants
# ---------------------------------------------------------------------

HEADER: Final[str] = "#coach"
EVENT_MARKER: Final[str] = "* "

# Locale-independent day names, indexed by datetime.weekday().
DAY_NAMES: Final[tuple[str, ...]] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


# ---------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------

class Status(str, Enum):
    """
    Task lifecycle status.

    The value is the keyword written at the start of a task line.
    """

    TODO = "TODO"
    WORKING = "WORKING"
    DONE = "DONE"
    CANCELLED = "CANCELLED"

    @property
    def is_live(self) -> bool:
        """Unfinished tasks are carried over to the next day."""
        return self in (Status.TODO, Status.WORKING)


# ---------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------

def format_timestamp(when: datetime) -> str:
    """Render `when` as `YYYY-MM-DD Ddd HH:MM` (without angle brackets)."""
    day = DAY_NAMES[when.weekday()]
    return (
        f"{when.year:04d}-{when.month:02d}-{when.day:02d} "
        f"{day} {when.hour:02d}:{when.minute:02d}"
    )


def normalise_timestamp(when: datetime) -> datetime:
    """
    Reduce `when` to what the file format can store.

    Wall-clock time is kept as-is; tzinfo, seconds and microseconds are dropped.
    """
    return when.replace(second=0, microsecond=0, tzinfo=None)


# ---------------------------------------------------------------------
# Entry parts
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Observation:
    """A `key: value` pair recorded under the label."""

    key: str
    value: str

    def __str__(self) -> str:
        return f"{self.key}: {self.value}"


@dataclass(slots=True)
class Task:
    """
    A to-do item.

    Tasks are referenced by 1-based position in Entry.tasks; the status is
    the only field changed in place.
    """

    status: Status
    text: str = ""

    def __str__(self) -> str:
        if not self.text:
            return self.status.value
        return f"{self.status.value} {self.text}"

    @property
    def is_live(self) -> bool:
        return self.status.is_live


@dataclass(frozen=True, slots=True)
class Event:
    """A timestamped one-line message."""

    timestamp: datetime
    message: str = ""

    def __str__(self) -> str:
        stamp = f"<{format_timestamp(self.timestamp)}>"
        if not self.message:
            return f"{EVENT_MARKER}{stamp}"
        return f"{EVENT_MARKER}{stamp} {self.message}"


@dataclass(frozen=True, slots=True)
class Note:
    """A free-form paragraph; lines are joined with '\\n'."""

    text: str

    @property
    def lines(self) -> list[str]:
        return self.text.split("\n")


# ---------------------------------------------------------------------
# Entry
# ---------------------------------------------------------------------

@dataclass(slots=True)
class Entry:
    """
    In-memory representation of one coach file.

    Notes:
    - label is a single non-empty line.
    - observation keys may repeat; order is preserved.
    - every collection is owned by this entry (never shared).
    """

    label: str
    observations: list[Observation] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)

    @property
    def unfinished_tasks(self) -> list[Task]:
        return [t for t in self.tasks if t.is_live]
