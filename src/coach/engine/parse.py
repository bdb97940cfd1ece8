# src/coach/engine/parse.py

"""
Coach file parser.

Parses the text of a coach file into an in-memory Entry.

File layout (sections in this order, every section but the label optional):

    #coach
    <label>
    <key>: <value>
    <blank line>
    <STATUS> <task text>
    * <YYYY-MM-DD Ddd HH:MM> <event message>
    <blank line>
    <note paragraphs, blank-line separated>

The parser is a forward-only state machine: each state has its own
transition function, and no state is ever re-entered. The first malformed
line aborts the parse; there is no recovery.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from .model import Entry, Event, HEADER, Note, Observation, Task
from .scan import Line, LineKind, classify_line, split_lines

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class FormatError(Exception):
    """
    Raised when coach file text is structurally invalid.

    `line` is 1-based.
    """

    line: int
    message: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


# ---------------------------------------------------------------------
# State machine
# ---------------------------------------------------------------------

class ParseState(str, Enum):
    START = "start"
    HEADER = "header"
    OBSERVATIONS = "observations"
    TASKS = "tasks"
    EVENTS = "events"
    NOTES = "notes"


@dataclass(slots=True)
class _Parser:
    """Mutable parse context shared by the transition functions."""

    state: ParseState = ParseState.START
    label: Optional[str] = None
    observations: list[Observation] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)
    notes: list[Note] = field(default_factory=list)
    note_lines: list[str] = field(default_factory=list)

    def flush_note(self) -> None:
        if self.note_lines:
            self.notes.append(Note("\n".join(self.note_lines)))
            self.note_lines = []


# Each transition consumes `line` and returns the next state. Returning a
# different state together with `True` asks for the same line to be fed
# again in that state.
_Transition = Callable[[_Parser, Line, int], tuple[ParseState, bool]]


def _on_start(p: _Parser, line: Line, lineno: int) -> tuple[ParseState, bool]:
    if line.kind is not LineKind.HEADER:
        raise FormatError(lineno, f"coach files must begin with a line containing only '{HEADER}'")
    return ParseState.HEADER, False


def _on_header(p: _Parser, line: Line, lineno: int) -> tuple[ParseState, bool]:
    if not line.raw:
        raise FormatError(lineno, "expected a non-empty label after the header")
    p.label = line.raw
    return ParseState.OBSERVATIONS, False


def _on_observations(p: _Parser, line: Line, lineno: int) -> tuple[ParseState, bool]:
    if line.kind is LineKind.OBSERVATION:
        p.observations.append(Observation(key=line.key, value=line.value))
        return ParseState.OBSERVATIONS, False

    if line.kind is LineKind.BLANK:
        return ParseState.TASKS, False

    if line.kind in (LineKind.TASK, LineKind.EVENT):
        return ParseState.TASKS, True

    raise FormatError(
        lineno,
        "expected an observation ('key: value') or a blank line "
        f"between the label and the rest of the entry, got '{line.raw}'",
    )


def _on_tasks(p: _Parser, line: Line, lineno: int) -> tuple[ParseState, bool]:
    if line.kind is LineKind.TASK:
        assert line.status is not None
        p.tasks.append(Task(status=line.status, text=line.text))
        return ParseState.TASKS, False

    if line.kind is LineKind.BLANK:
        return ParseState.TASKS, False

    if line.kind is LineKind.EVENT:
        return ParseState.EVENTS, True

    return ParseState.NOTES, True


def _on_events(p: _Parser, line: Line, lineno: int) -> tuple[ParseState, bool]:
    if line.kind is LineKind.EVENT:
        if line.problem or line.timestamp is None:
            raise FormatError(lineno, f"{line.problem} (expected '* <YYYY-MM-DD Ddd HH:MM> message')")
        p.events.append(Event(timestamp=line.timestamp, message=line.text))
        return ParseState.EVENTS, False

    if line.kind is LineKind.BLANK:
        return ParseState.EVENTS, False

    if line.kind is LineKind.TASK:
        raise FormatError(lineno, f"tasks must come before events, got '{line.raw}'")

    return ParseState.NOTES, True


def _on_notes(p: _Parser, line: Line, lineno: int) -> tuple[ParseState, bool]:
    if line.kind is LineKind.BLANK:
        p.flush_note()
    else:
        p.note_lines.append(line.raw)
    return ParseState.NOTES, False


_TRANSITIONS: dict[ParseState, _Transition] = {
    ParseState.START: _on_start,
    ParseState.HEADER: _on_header,
    ParseState.OBSERVATIONS: _on_observations,
    ParseState.TASKS: _on_tasks,
    ParseState.EVENTS: _on_events,
    ParseState.NOTES: _on_notes,
}


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def parse(text: str) -> Entry:
    """
    Parse coach file text into an Entry.

    Raises FormatError (with the offending 1-based line number) on the
    first structural violation.
    """
    p = _Parser()
    lines = split_lines(text)

    for lineno, raw in enumerate(lines, start=1):
        line = classify_line(raw)
        while True:
            before = p.state
            p.state, again = _TRANSITIONS[before](p, line, lineno)
            if not again:
                break
            logger.debug("line %d: %s -> %s", lineno, before.value, p.state.value)

    if p.state is ParseState.HEADER or p.label is None:
        raise FormatError(len(lines) + 1, "expected a non-empty label after the header")

    p.flush_note()

    entry = Entry(
        label=p.label,
        observations=p.observations,
        tasks=p.tasks,
        events=p.events,
        notes=p.notes,
    )
    logger.debug(
        "parsed entry '%s': %d observations, %d tasks, %d events, %d notes",
        entry.label,
        len(entry.observations),
        len(entry.tasks),
        len(entry.events),
        len(entry.notes),
    )
    return entry
