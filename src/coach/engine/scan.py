# src/coach/engine/scan.py

"""
Line scanning utilities.

This module classifies single lines of a coach file by fixed lexical
precedence and extracts their parts (key/value, status/text,
timestamp/message).

It performs *no* section tracking: where a line may appear is decided by
the parser.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from .model import DAY_NAMES, EVENT_MARKER, HEADER, Status


# ---------------------------------------------------------------------
# Classification result
# ---------------------------------------------------------------------

class LineKind(str, Enum):
    HEADER = "header"
    EVENT = "event"
    TASK = "task"
    OBSERVATION = "observation"
    BLANK = "blank"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class Line:
    """
    A classified line.

    Only the fields relevant to `kind` are populated. An EVENT line whose
    timestamp could not be read carries a `problem` instead of a timestamp.
    """

    kind: LineKind
    raw: str
    key: str = ""
    value: str = ""
    status: Optional[Status] = None
    text: str = ""
    timestamp: Optional[datetime] = None
    problem: str = ""


# ---------------------------------------------------------------------
# Lexical rules
# ---------------------------------------------------------------------

OBSERVATION_SEPARATOR = ": "

_TIMESTAMP_RE = re.compile(
    r"^<(?P<date>\d{4}-\d{2}-\d{2}) (?P<day>[A-Za-z]{3}) (?P<time>\d{2}:\d{2})>"
)


def _match_status(line: str) -> Optional[tuple[Status, str]]:
    """Return (status, text) if `line` starts with a status keyword."""
    for status in Status:
        kw = status.value
        if line == kw:
            return status, ""
        if line.startswith(kw + " "):
            return status, line[len(kw) + 1:]
    return None


def parse_timestamp(raw: str) -> datetime:
    """
    Parse `YYYY-MM-DD Ddd HH:MM` into a naive datetime.

    Raises ValueError if the text is malformed or the day name does not
    match the date.
    """
    m = _TIMESTAMP_RE.match(f"<{raw}>")
    if not m:
        raise ValueError(f"expected 'YYYY-MM-DD Ddd HH:MM', got '{raw}'")

    when = datetime.strptime(f"{m['date']} {m['time']}", "%Y-%m-%d %H:%M")

    day = m["day"]
    if day != DAY_NAMES[when.weekday()]:
        raise ValueError(
            f"day name '{day}' does not match {m['date']} "
            f"(expected '{DAY_NAMES[when.weekday()]}')"
        )
    return when


def _classify_event(line: str) -> Line:
    body = line[len(EVENT_MARKER):]

    if not body.startswith("<"):
        return Line(
            kind=LineKind.EVENT,
            raw=line,
            problem="event is missing its <YYYY-MM-DD Ddd HH:MM> timestamp",
        )

    close = body.find(">")
    if close == -1:
        return Line(
            kind=LineKind.EVENT,
            raw=line,
            problem="event timestamp is not terminated by '>'",
        )

    try:
        when = parse_timestamp(body[1:close])
    except ValueError as e:
        return Line(kind=LineKind.EVENT, raw=line, problem=f"malformed event timestamp: {e}")

    message = body[close + 1:]
    if message.startswith(" "):
        message = message[1:]

    return Line(kind=LineKind.EVENT, raw=line, timestamp=when, text=message)


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

def classify_line(line: str) -> Line:
    """
    Classify a single line (without its trailing newline).

    Precedence: header > event > task > observation > blank > text.
    """
    if line == HEADER:
        return Line(kind=LineKind.HEADER, raw=line)

    if line.startswith(EVENT_MARKER):
        return _classify_event(line)

    found = _match_status(line)
    if found is not None:
        status, text = found
        return Line(kind=LineKind.TASK, raw=line, status=status, text=text)

    if OBSERVATION_SEPARATOR in line:
        key, value = line.split(OBSERVATION_SEPARATOR, 1)
        return Line(kind=LineKind.OBSERVATION, raw=line, key=key, value=value)

    if not line:
        return Line(kind=LineKind.BLANK, raw=line)

    return Line(kind=LineKind.TEXT, raw=line)


def split_lines(text: str) -> list[str]:
    """
    Split file content into lines.

    Only '\\n' separates lines; other line-break characters are content.
    """
    return text.split("\n")
