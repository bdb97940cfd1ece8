# src/coach/engine/validate.py

"""
Entry validation rules.

This module decides whether caller-supplied content can be written to a
coach file without becoming ambiguous on re-parse.

Responsibilities:
- per-field checks used by the mutators (raise ValidationError),
- whole-entry checks used before writing (ValidationResult).

It does NOT perform parsing or filesystem access.
"""

from dataclasses import dataclass
from typing import Sequence

from .model import Entry, Observation, Status
from .scan import OBSERVATION_SEPARATOR, LineKind, classify_line


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class ValidationError(Exception):
    """
    Raised when caller-supplied content would produce ambiguous or
    unparseable output.
    """


# ---------------------------------------------------------------------
# Result objects
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ValidationIssue:
    """
    A single validation problem.

    `code` is a stable identifier suitable for tests and filtering.
    """

    code: str
    message: str


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """
    Aggregated validation result for a single entry.
    """

    label: str
    issues: Sequence[ValidationIssue]

    @property
    def ok(self) -> bool:
        return not self.issues


# ---------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------

def check_single_line(value: str, what: str) -> str:
    if "\n" in value:
        raise ValidationError(f"{what} can't contain newlines")
    return value


def check_label(label: str) -> str:
    check_single_line(label, "label")
    if not label.strip():
        raise ValidationError("label must be a non-empty string")
    if label.startswith("#"):
        raise ValidationError("label can't start with '#'")
    return label


def check_observation(key: str, value: str) -> Observation:
    check_single_line(key, "observation name")
    check_single_line(value, "observation value")

    if not key:
        raise ValidationError("observation names must contain at least one character")
    if OBSERVATION_SEPARATOR in key:
        raise ValidationError(f"observation names can't contain '{OBSERVATION_SEPARATOR}'")

    obs = Observation(key=key, value=value)
    kind = classify_line(str(obs)).kind
    if kind is not LineKind.OBSERVATION:
        raise ValidationError(f"observation '{obs}' would be read back as a {kind.value} line")
    return obs


def check_note_paragraph(text: str) -> str:
    """
    A note's first line must not look like a task or an event.

    Applied to every new note regardless of position.
    """
    if not text:
        raise ValidationError("notes can't be empty")

    first = text.split("\n", 1)[0]
    kind = classify_line(first).kind
    if kind in (LineKind.TASK, LineKind.EVENT):
        raise ValidationError(
            f"note can't start with a {kind.value} marker: '{first}'"
        )
    if "" in text.split("\n"):
        raise ValidationError("notes can't contain blank lines")
    return text


def parse_status(raw: "str | Status") -> Status:
    """
    Parse and validate a status keyword (case-insensitive).
    """
    if isinstance(raw, Status):
        return raw
    try:
        return Status(raw.strip().upper())
    except ValueError as e:
        allowed = ", ".join([s.value for s in Status])
        raise ValidationError(f"Unknown status '{raw}' (allowed: {allowed})") from e


# ---------------------------------------------------------------------
# Whole entry
# ---------------------------------------------------------------------

def validate_entry(entry: Entry) -> ValidationResult:
    """
    Validate an Entry against the rules that keep serialization unambiguous.

    Notes from a parsed file are checked positionally: once the notes
    section has started every line is note text, so only the first note
    can be misread as a task or an event.
    """
    issues: list[ValidationIssue] = []

    def collect(code: str, fn, *args) -> None:
        try:
            fn(*args)
        except ValidationError as e:
            issues.append(ValidationIssue(code=code, message=str(e)))

    collect("label_invalid", check_label, entry.label)

    for i, obs in enumerate(entry.observations, start=1):
        try:
            check_observation(obs.key, obs.value)
        except ValidationError as e:
            issues.append(ValidationIssue(code="observation_invalid", message=f"Observation {i}: {e}"))

    for i, task in enumerate(entry.tasks, start=1):
        try:
            check_single_line(task.text, "task text")
        except ValidationError as e:
            issues.append(ValidationIssue(code="task_invalid", message=f"Task {i}: {e}"))

    for i, event in enumerate(entry.events, start=1):
        try:
            check_single_line(event.message, "event message")
        except ValidationError as e:
            issues.append(ValidationIssue(code="event_invalid", message=f"Event {i}: {e}"))
        if event.timestamp.second or event.timestamp.microsecond or event.timestamp.tzinfo:
            issues.append(
                ValidationIssue(
                    code="event_timestamp_precision",
                    message=f"Event {i}: timestamps are stored to the minute without a timezone",
                )
            )

    for i, note in enumerate(entry.notes, start=1):
        if "" in note.lines:
            issues.append(
                ValidationIssue(code="note_blank_line", message=f"Note {i}: notes can't be empty or contain blank lines")
            )
            continue
        if i == 1:
            collect("note_ambiguous", check_note_paragraph, note.text)

    return ValidationResult(label=entry.label, issues=tuple(issues))
